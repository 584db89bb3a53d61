"""Platform locations for the check-in database."""

from __future__ import annotations

import os
import sys
from pathlib import Path

__all__ = [
    "APP_NAME",
    "DATABASE_ENV_VAR",
    "DATABASE_FILENAME",
    "app_data_directory",
    "default_database_path",
    "ensure_database_directory",
]

APP_NAME = "Pinewood"
DATABASE_ENV_VAR = "PINEWOOD_DB"
DATABASE_FILENAME = "pinewood.db"


def app_data_directory(app_name: str = APP_NAME) -> Path:
    """
    Per-user application data directory.

    - Windows: %APPDATA%\\AppName
    - macOS: ~/Library/Application Support/AppName
    - Linux: $XDG_DATA_HOME/AppName (default ~/.local/share/AppName)
    """
    home = Path.home()

    if sys.platform == "win32":
        return Path(os.environ.get("APPDATA", home / "AppData" / "Roaming")) / app_name

    elif sys.platform == "darwin":
        return home / "Library" / "Application Support" / app_name

    else:
        xdg_data_home = os.environ.get("XDG_DATA_HOME") or home / ".local" / "share"
        return Path(xdg_data_home) / app_name


def default_database_path() -> Path:
    """``$PINEWOOD_DB`` when set, otherwise ``pinewood.db`` in the app data directory."""

    override = os.environ.get(DATABASE_ENV_VAR, "").strip()
    if override:
        return Path(override).expanduser()
    return app_data_directory() / DATABASE_FILENAME


def ensure_database_directory(path: str | os.PathLike[str]) -> Path:
    """Create the directory that will hold ``path`` and return ``path``."""

    db_path = Path(path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return db_path
