# Pinewood
# Copyright © 2025 Pinewood contributors
# Licensed under CC BY-NC-SA 4.0 International
# http://creativecommons.org/licenses/by-nc-sa/4.0/

from __future__ import annotations

import logging
import os
from pathlib import Path

from pinewood.core.models import Scout
from pinewood.core.paths import ensure_database_directory
from pinewood.storage import sqlite_store
from pinewood.storage.sqlite_store import CheckinStore

log = logging.getLogger(__name__)

__all__ = ["open_checkin_store", "check_in_scout", "export_roster"]


def open_checkin_store(path: str | os.PathLike[str]) -> CheckinStore:
    """Create the directory for ``path`` if needed and initialize the store there."""

    db_path = ensure_database_directory(path)
    return sqlite_store.initialize(db_path)


def check_in_scout(
    store: CheckinStore,
    *,
    name: str,
    den: str,
    car_weight: float,
    car_number: int | None = None,
) -> Scout:
    """Register a scout, taking the suggested next car number when none is given.

    A suggested number can still collide with a concurrent check-in; the
    resulting :class:`~pinewood.storage.sqlite_store.UniquenessViolation` is
    left for the caller.
    """

    if car_number is None:
        car_number = store.next_car_number()
        log.debug("Using suggested car number %s", car_number)
    scout = store.register(name, den, car_number, car_weight)
    log.info("Checked in %s (%s) with car #%s", scout.name, scout.den, scout.car_number)
    return scout


def export_roster(store: CheckinStore, path: str | os.PathLike[str]) -> Path:
    """Write the checked-in roster to ``path`` as CSV and return the path."""

    out_path = Path(path)
    df = store.roster_dataframe()
    df.to_csv(out_path, index=False)
    log.info("Exported %d scouts to %s", len(df), out_path)
    return out_path
