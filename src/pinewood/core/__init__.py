"""Domain models, paths and logging setup shared across Pinewood."""
