# Pinewood
# Copyright © 2025 Pinewood contributors
# Licensed under CC BY-NC-SA 4.0 International
# http://creativecommons.org/licenses/by-nc-sa/4.0/

"""Logging configuration with file rotation."""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from pinewood.core.paths import APP_NAME


def setup_logging(
    app_name: str = APP_NAME,
    console_level: int = logging.WARNING,
    log_dir: Path | None = None,
) -> Path:
    """
    Configure logging for the ``pinewood`` package.

    Creates two log files:
    - pinewood.log: DEBUG+ messages from the package (5 MB per file, 3 rotations)
    - errors.log: ERROR+ messages from the package (1 MB per file, 3 rotations)

    Args:
        app_name: Application name for the log directory
        console_level: Minimum level for console output (default: WARNING)
        log_dir: Explicit log directory; defaults to the platform location

    Returns:
        Path to the log directory
    """
    log_dir = Path(log_dir) if log_dir is not None else _get_log_directory(app_name)
    log_dir.mkdir(parents=True, exist_ok=True)

    detailed_formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    simple_formatter = logging.Formatter("%(levelname)-8s | %(message)s")

    pkg_logger = logging.getLogger("pinewood")
    pkg_logger.setLevel(logging.DEBUG)
    _close_handlers(pkg_logger)

    app_log_path = log_dir / "pinewood.log"
    app_handler = RotatingFileHandler(
        app_log_path,
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    app_handler.setLevel(logging.DEBUG)
    app_handler.setFormatter(detailed_formatter)
    pkg_logger.addHandler(app_handler)

    error_log_path = log_dir / "errors.log"
    error_handler = RotatingFileHandler(
        error_log_path,
        maxBytes=1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(detailed_formatter)
    pkg_logger.addHandler(error_handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(simple_formatter)
    pkg_logger.addHandler(console_handler)

    log = logging.getLogger(__name__)
    log.debug("%s logging initialized in %s", app_name, log_dir)
    log.debug("Platform: %s, Python: %s", sys.platform, sys.version.split()[0])

    return log_dir


def _close_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def _get_log_directory(app_name: str) -> Path:
    """
    Platform-specific log directory.

    - Windows: %LOCALAPPDATA%\\AppName\\logs
    - macOS: ~/Library/Logs/AppName
    - Linux: $XDG_DATA_HOME/AppName/logs
    """
    home = Path.home()

    if sys.platform == "win32":
        base = Path(os.environ.get("LOCALAPPDATA", home / "AppData" / "Local"))
        return base / app_name / "logs"

    elif sys.platform == "darwin":
        return home / "Library" / "Logs" / app_name

    else:
        xdg_data_home = os.environ.get("XDG_DATA_HOME") or home / ".local" / "share"
        return Path(xdg_data_home) / app_name / "logs"


def get_log_directory(app_name: str = APP_NAME) -> Path:
    """Log directory path without setting up logging."""
    return _get_log_directory(app_name)
