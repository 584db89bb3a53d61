"""
Scout table persistence helpers.
"""

from __future__ import annotations

import sqlite3

import pandas as pd

__all__ = [
    "SCOUT_COLUMNS",
    "insert_scout",
    "fetch_scout_row",
    "fetch_checked_in_rows",
    "max_car_number",
    "count_scouts",
    "fetch_roster_dataframe",
    "is_car_number_conflict",
]

SCOUT_COLUMNS = ("id", "name", "den", "car_number", "car_weight", "checked_in", "created_at")

_SELECT = f"SELECT {', '.join(SCOUT_COLUMNS)} FROM scouts"
_CHECKED_IN = f"{_SELECT} WHERE checked_in = 1 ORDER BY created_at DESC, id DESC"


def insert_scout(
    conn: sqlite3.Connection,
    name: str,
    den: str,
    car_number: int,
    car_weight: float,
) -> int:
    """Insert a checked-in scout and return its row id."""

    cur = conn.execute(
        """
        INSERT INTO scouts (name, den, car_number, car_weight, checked_in)
        VALUES (?, ?, ?, ?, 1)
        """,
        (name, den, car_number, car_weight),
    )
    return int(cur.lastrowid)


def fetch_scout_row(conn: sqlite3.Connection, scout_id: int) -> sqlite3.Row | None:
    return conn.execute(f"{_SELECT} WHERE id = ?", (scout_id,)).fetchone()


def fetch_checked_in_rows(conn: sqlite3.Connection) -> list[sqlite3.Row]:
    """Checked-in scouts, newest first (``id`` breaks same-second ties)."""

    return conn.execute(_CHECKED_IN).fetchall()


def max_car_number(conn: sqlite3.Connection) -> int | None:
    row = conn.execute("SELECT MAX(car_number) FROM scouts").fetchone()
    return None if row is None or row[0] is None else int(row[0])


def count_scouts(conn: sqlite3.Connection) -> int:
    return int(conn.execute("SELECT COUNT(*) FROM scouts").fetchone()[0])


def fetch_roster_dataframe(conn: sqlite3.Connection) -> pd.DataFrame:
    """Return checked-in scouts as a DataFrame in list order."""

    df = pd.read_sql_query(_CHECKED_IN, conn)
    if df.empty:
        return pd.DataFrame(columns=list(SCOUT_COLUMNS))
    df["checked_in"] = df["checked_in"].astype(bool)
    return df


def is_car_number_conflict(exc: sqlite3.IntegrityError) -> bool:
    """True when ``exc`` is the UNIQUE constraint on ``scouts.car_number``."""

    message = str(exc)
    return "UNIQUE" in message and "scouts.car_number" in message
