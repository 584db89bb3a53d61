"""
Schema bootstrap for the check-in database.
"""

from __future__ import annotations

import sqlite3

from pinewood.core.models import RaceConfig

__all__ = [
    "DEFAULT_PRAGMAS",
    "RACE_CONFIG_ID",
    "SchemaConflict",
    "ensure_schema",
    "read_race_config",
    "table_columns",
]

RACE_CONFIG_ID = 1

DEFAULT_PRAGMAS: dict[str, object] = {
    "foreign_keys": True,
    "journal_mode": "WAL",
    "synchronous": "FULL",
    "busy_timeout_ms": 10000,
}

_REQUIRED_COLUMNS: dict[str, tuple[str, ...]] = {
    "scouts": ("id", "name", "den", "car_number", "car_weight", "checked_in", "created_at"),
    "race_config": ("id", "num_lanes", "timer_port", "heats_per_scout", "scoring_method"),
}


class SchemaConflict(RuntimeError):
    """Raised when an existing table lacks columns the store relies on."""


def table_columns(conn: sqlite3.Connection, table: str) -> list[str]:
    return [row[1] for row in conn.execute(f"PRAGMA table_info({table})")]


def ensure_schema(conn: sqlite3.Connection, *, defaults: RaceConfig | None = None) -> None:
    """
    Create the ``scouts`` and ``race_config`` tables when absent and seed the
    singleton config row. An existing config row is left untouched.
    """

    defaults = defaults or RaceConfig()
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS scouts (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            den TEXT NOT NULL,
            car_number INTEGER UNIQUE NOT NULL,
            car_weight REAL NOT NULL,
            checked_in BOOLEAN NOT NULL DEFAULT 1,
            created_at TEXT NOT NULL DEFAULT (datetime('now'))
        );

        CREATE TABLE IF NOT EXISTS race_config (
            id INTEGER PRIMARY KEY CHECK (id = 1),
            num_lanes INTEGER NOT NULL DEFAULT 4,
            timer_port TEXT,
            heats_per_scout INTEGER NOT NULL DEFAULT 3,
            scoring_method TEXT NOT NULL DEFAULT 'points'
        );
        """
    )
    for table, required in _REQUIRED_COLUMNS.items():
        missing = sorted(set(required) - set(table_columns(conn, table)))
        if missing:
            raise SchemaConflict(f"table {table!r} is missing columns: {', '.join(missing)}")

    conn.execute(
        """
        INSERT OR IGNORE INTO race_config (id, num_lanes, timer_port, heats_per_scout, scoring_method)
        VALUES (?, ?, ?, ?, ?)
        """,
        (
            RACE_CONFIG_ID,
            defaults.num_lanes,
            defaults.timer_port,
            defaults.heats_per_scout,
            defaults.scoring_method,
        ),
    )


def read_race_config(conn: sqlite3.Connection) -> sqlite3.Row | None:
    return conn.execute(
        """
        SELECT num_lanes, timer_port, heats_per_scout, scoring_method
        FROM race_config
        WHERE id = ?
        """,
        (RACE_CONFIG_ID,),
    ).fetchone()
