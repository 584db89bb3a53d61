# Pinewood
# Copyright © 2025 Pinewood contributors
# Licensed under CC BY-NC-SA 4.0 International
# http://creativecommons.org/licenses/by-nc-sa/4.0/

"""Public package interface for Pinewood race-day check-in."""

from pinewood.core.models import DEFAULT_DENS, NewScout, RaceConfig, Scout
from pinewood.services.checkin_service import check_in_scout, export_roster, open_checkin_store
from pinewood.storage.sqlite_store import (
    CheckinError,
    CheckinStore,
    NotFound,
    StorageError,
    UniquenessViolation,
    initialize,
)

__all__ = [
    "Scout",
    "NewScout",
    "RaceConfig",
    "DEFAULT_DENS",
    "CheckinStore",
    "CheckinError",
    "StorageError",
    "UniquenessViolation",
    "NotFound",
    "initialize",
    "open_checkin_store",
    "check_in_scout",
    "export_roster",
]
