"""Application services for higher-level orchestration."""
