"""Bounded pool of SQLite connections shared by concurrent callers.

Each connection is opened with ``check_same_thread=False`` and handed to one
caller at a time.  Conflicting writes are serialized by SQLite itself
(``BEGIN IMMEDIATE`` plus ``busy_timeout``), so the pool only bounds how many
connections exist and who holds them.

Usage:
    pool = ConnectionPool(db_path, max_connections=5)
    with pool.connection() as conn:
        conn.execute("SELECT 1")
    pool.close()
"""

from __future__ import annotations

import logging
import queue
import sqlite3
import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from pinewood.storage.sqlite.utils import open_db

__all__ = ["ConnectionPool", "PoolError", "PoolClosed", "PoolTimeout", "DEFAULT_MAX_CONNECTIONS"]

DEFAULT_MAX_CONNECTIONS = 5

log = logging.getLogger(__name__)


class PoolError(RuntimeError):
    """Base class for pool failures that are not SQLite errors."""


class PoolClosed(PoolError):
    """Raised when a connection is requested after the pool is closed."""


class PoolTimeout(PoolError):
    """Raised when no connection frees up within ``acquire_timeout``."""


class ConnectionPool:
    """Lazily opened, bounded set of connections to one database file."""

    def __init__(
        self,
        db_path: str | Path,
        *,
        max_connections: int = DEFAULT_MAX_CONNECTIONS,
        acquire_timeout: float = 30.0,
        pragmas: Mapping[str, Any] | None = None,
    ) -> None:
        if max_connections < 1:
            raise ValueError("max_connections must be >= 1")
        self.db_path = Path(db_path)
        self.max_connections = max_connections
        self.acquire_timeout = acquire_timeout
        self._pragmas = dict(pragmas or {})
        self._idle: "queue.LifoQueue[sqlite3.Connection]" = queue.LifoQueue()
        self._slots = threading.BoundedSemaphore(max_connections)
        self._lock = threading.Lock()
        self._opened: list[sqlite3.Connection] = []
        self._closed = False

    # ------------------------------------------------------------------ #
    # Public API                                                         #
    # ------------------------------------------------------------------ #
    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def size(self) -> int:
        """Number of connections opened so far."""

        with self._lock:
            return len(self._opened)

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Borrow a connection for the duration of the ``with`` block."""

        if self._closed:
            raise PoolClosed("Connection pool is closed")
        if not self._slots.acquire(timeout=self.acquire_timeout):
            raise PoolTimeout(
                f"No connection to {self.db_path} became available within "
                f"{self.acquire_timeout:g} seconds"
            )
        try:
            conn = self._checkout()
            try:
                yield conn
            finally:
                self._checkin(conn)
        finally:
            self._slots.release()

    def close(self) -> None:
        """Close every connection the pool has opened."""

        with self._lock:
            if self._closed:
                return
            self._closed = True
            opened, self._opened = self._opened, []
        for conn in opened:
            try:
                conn.close()
            except sqlite3.Error as exc:
                log.debug("Ignoring error while closing connection: %s", exc)
        log.debug("Closed connection pool for %s (%d connections)", self.db_path, len(opened))

    # ------------------------------------------------------------------ #
    # Internal helpers                                                   #
    # ------------------------------------------------------------------ #
    def _checkout(self) -> sqlite3.Connection:
        try:
            return self._idle.get_nowait()
        except queue.Empty:
            pass
        conn = open_db(self.db_path, mode="rwc", pragmas=self._pragmas)
        with self._lock:
            if self._closed:
                conn.close()
                raise PoolClosed("Connection pool is closed")
            self._opened.append(conn)
            count = len(self._opened)
        log.debug("Opened connection %d/%d to %s", count, self.max_connections, self.db_path)
        return conn

    def _checkin(self, conn: sqlite3.Connection) -> None:
        if self._closed:
            conn.close()
            return
        if conn.in_transaction:
            conn.execute("ROLLBACK")
        self._idle.put(conn)

    # ------------------------------------------------------------------ #
    # Context manager helpers                                            #
    # ------------------------------------------------------------------ #
    def __enter__(self) -> "ConnectionPool":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
