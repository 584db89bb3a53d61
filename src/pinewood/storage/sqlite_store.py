# Pinewood
# Copyright © 2025 Pinewood contributors
# Licensed under CC BY-NC-SA 4.0 International
# http://creativecommons.org/licenses/by-nc-sa/4.0/

"""
SQLite-backed check-in storage.

:func:`initialize` opens (or creates) the database file, makes sure the
``scouts`` and ``race_config`` tables exist and returns a :class:`CheckinStore`
that serves check-in reads and writes through a small connection pool.
Every failure surfaces as a :class:`CheckinError` subclass; nothing is retried
or swallowed here.
"""

from __future__ import annotations

import contextlib
import logging
import os
import sqlite3
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from pinewood.core.models import NewScout, RaceConfig, Scout
from pinewood.storage.sqlite import schema as _schema
from pinewood.storage.sqlite import scouts as _scouts
from pinewood.storage.sqlite.pool import DEFAULT_MAX_CONNECTIONS, ConnectionPool, PoolError
from pinewood.storage.sqlite.utils import transaction

log = logging.getLogger(__name__)

__all__ = [
    "CheckinError",
    "StorageError",
    "UniquenessViolation",
    "NotFound",
    "CheckinStore",
    "initialize",
]


class CheckinError(Exception):
    """Base class for every check-in storage failure."""


class StorageError(CheckinError):
    """The database is unreachable, unwritable, or corrupt."""


class UniquenessViolation(CheckinError):
    """Raised when a car number is already assigned to another scout."""

    def __init__(self, car_number: int):
        self.car_number = car_number
        super().__init__(f"Car number {car_number} is already checked in")


class NotFound(CheckinError):
    """Raised when no scout has the requested id."""

    def __init__(self, scout_id: int):
        self.scout_id = scout_id
        super().__init__(f"No scout with id {scout_id}")


@contextlib.contextmanager
def _storage_errors(action: str) -> Iterator[None]:
    """Translate SQLite, pool and out-of-range integer failures into :class:`StorageError`."""

    try:
        yield
    except (sqlite3.Error, OverflowError, PoolError, _schema.SchemaConflict) as exc:
        raise StorageError(f"Failed to {action}: {exc}") from exc


@dataclass
class CheckinStore:
    """Handle to an initialized check-in database."""

    path: Path
    pool: ConnectionPool

    # ------------------------------------------------------------------
    # Check-in operations

    def register(self, name: str, den: str, car_number: int, car_weight: float) -> Scout:
        """Check in a scout and return the row as stored."""

        with _storage_errors("check in scout"), self.pool.connection() as conn:
            try:
                with transaction(conn):
                    scout_id = _scouts.insert_scout(conn, name, den, car_number, car_weight)
            except sqlite3.IntegrityError as exc:
                if _scouts.is_car_number_conflict(exc):
                    raise UniquenessViolation(car_number) from exc
                raise
            row = _scouts.fetch_scout_row(conn, scout_id)
        if row is None:
            raise StorageError(f"Scout {scout_id} vanished after insert")
        log.debug("Checked in scout %s with car #%s", scout_id, car_number)
        return Scout.model_validate(dict(row))

    def register_new(self, payload: NewScout) -> Scout:
        return self.register(payload.name, payload.den, payload.car_number, payload.car_weight)

    def get(self, scout_id: int) -> Scout:
        with _storage_errors("load scout"), self.pool.connection() as conn:
            row = _scouts.fetch_scout_row(conn, scout_id)
        if row is None:
            raise NotFound(scout_id)
        return Scout.model_validate(dict(row))

    def list_checked_in(self) -> list[Scout]:
        """Checked-in scouts, newest first."""

        with _storage_errors("list scouts"), self.pool.connection() as conn:
            rows = _scouts.fetch_checked_in_rows(conn)
        return [Scout.model_validate(dict(row)) for row in rows]

    def next_car_number(self) -> int:
        """
        Suggest the next free car number (highest assigned plus one, 1 when
        empty). Nothing is reserved: :meth:`register` still rejects duplicates.
        """

        with _storage_errors("compute next car number"), self.pool.connection() as conn:
            highest = _scouts.max_car_number(conn)
        return 1 if highest is None else highest + 1

    # ------------------------------------------------------------------
    # Supplementary reads

    def count(self) -> int:
        with _storage_errors("count scouts"), self.pool.connection() as conn:
            return _scouts.count_scouts(conn)

    def race_config(self) -> RaceConfig:
        with _storage_errors("read race config"), self.pool.connection() as conn:
            row = _schema.read_race_config(conn)
        if row is None:
            raise StorageError("race_config row is missing; was the store initialized?")
        return RaceConfig.model_validate(dict(row))

    def roster_dataframe(self) -> pd.DataFrame:
        with _storage_errors("load roster"), self.pool.connection() as conn:
            return _scouts.fetch_roster_dataframe(conn)

    # ------------------------------------------------------------------
    # Lifecycle

    def close(self) -> None:
        self.pool.close()

    def __enter__(self) -> CheckinStore:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def initialize(
    storage_location: str | os.PathLike[str],
    *,
    max_connections: int = DEFAULT_MAX_CONNECTIONS,
    acquire_timeout: float = 30.0,
    defaults: RaceConfig | None = None,
) -> CheckinStore:
    """Open or create the database at ``storage_location`` and return a store.

    The containing directory must already exist. Re-running against an
    initialized file leaves the schema and ``race_config`` row unchanged.
    """

    path = Path(storage_location)
    pool = ConnectionPool(
        path,
        max_connections=max_connections,
        acquire_timeout=acquire_timeout,
        pragmas=_schema.DEFAULT_PRAGMAS,
    )
    try:
        with _storage_errors(f"initialize database at {path}"), pool.connection() as conn:
            _schema.ensure_schema(conn, defaults=defaults)
    except BaseException:
        pool.close()
        raise
    log.info("Check-in database ready at %s", path)
    return CheckinStore(path=path, pool=pool)
