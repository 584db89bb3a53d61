from __future__ import annotations

from datetime import datetime, timezone
from typing import Final

from pydantic import BaseModel, ConfigDict

__all__ = ["Scout", "NewScout", "RaceConfig", "DEFAULT_DENS", "CREATED_AT_FORMAT"]

# Den names offered by the check-in form; ``den`` itself stays free text.
DEFAULT_DENS: Final[tuple[str, ...]] = ("Tiger", "Wolf", "Bear", "Webelos", "Arrow of Light")

# Matches SQLite's ``datetime('now')``.
CREATED_AT_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"


class NewScout(BaseModel):
    """Check-in form payload."""

    name: str
    den: str
    car_number: int
    car_weight: float


class Scout(BaseModel):
    """A checked-in participant exactly as stored in the ``scouts`` table."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    den: str
    car_number: int
    car_weight: float
    checked_in: bool = True
    created_at: str

    @property
    def created_utc(self) -> datetime:
        return datetime.strptime(self.created_at, CREATED_AT_FORMAT).replace(tzinfo=timezone.utc)


class RaceConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    num_lanes: int = 4
    timer_port: str | None = None
    heats_per_scout: int = 3
    scoring_method: str = "points"
