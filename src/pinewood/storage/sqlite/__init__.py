"""SQLite helpers backing :mod:`pinewood.storage.sqlite_store`."""
