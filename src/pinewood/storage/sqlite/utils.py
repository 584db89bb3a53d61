"""
Connection helpers for the SQLite check-in database.

Connections run in autocommit mode; writes go through :func:`transaction`.
"""

from __future__ import annotations

import os
import sqlite3
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import Any, cast

__all__ = ["open_db", "set_pragmas", "transaction"]


# ---- Connections ------------------------------------------------------------


def open_db(
    path: str | os.PathLike[str],
    *,
    mode: str = "rwc",
    pragmas: Mapping[str, object] | None = None,
) -> sqlite3.Connection:
    """
    Open the database at ``path`` for use from any thread.

    mode: "ro" (read-only), "rw", "rwc" (create if needed). Default: "rwc".
    The parent directory is never created here.
    """
    uri = f"{Path(path).absolute().as_uri()}?mode={mode}"
    conn = sqlite3.connect(uri, uri=True, check_same_thread=False, isolation_level=None)
    conn.row_factory = sqlite3.Row
    if pragmas:
        try:
            set_pragmas(conn, pragmas)
        except sqlite3.Error:
            conn.close()
            raise
    return conn


def _to_int(value: object) -> int:
    return int(cast(Any, value))


def set_pragmas(conn: sqlite3.Connection, opts: Mapping[str, object]) -> None:
    """Apply selected pragmas.

    Supported keys: ``foreign_keys``, ``journal_mode``, ``synchronous`` and
    ``busy_timeout_ms``. Unknown keys are ignored.
    """

    for key, value in opts.items():
        key = str(key).lower()
        if key == "foreign_keys":
            conn.execute(f"PRAGMA foreign_keys={'ON' if value else 'OFF'}")
        elif key == "journal_mode":
            conn.execute(f"PRAGMA journal_mode={value}")
        elif key == "synchronous":
            conn.execute(f"PRAGMA synchronous={value}")
        elif key == "busy_timeout_ms":
            conn.execute(f"PRAGMA busy_timeout={_to_int(value)}")


# ---- Transactions -------------------------------------------------


@contextmanager
def transaction(
    conn: sqlite3.Connection,
    *,
    begin: str = "BEGIN IMMEDIATE",
) -> Iterator[sqlite3.Connection]:
    """
    Commit on success, roll back on error.

    BEGIN IMMEDIATE takes the write lock up front so concurrent writers queue
    on ``busy_timeout`` instead of failing mid-transaction.
    """

    conn.execute(begin)
    try:
        yield conn
        conn.execute("COMMIT")
    except BaseException:
        if conn.in_transaction:
            conn.execute("ROLLBACK")
        raise
