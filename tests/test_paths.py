import logging
import sys
from pathlib import Path

from pinewood.core import paths
from pinewood.core.logging_config import get_log_directory, setup_logging


def test_default_database_path_prefers_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("PINEWOOD_DB", str(tmp_path / "custom.db"))
    assert paths.default_database_path() == tmp_path / "custom.db"


def test_default_database_path_uses_app_data(monkeypatch, tmp_path):
    monkeypatch.delenv("PINEWOOD_DB", raising=False)
    monkeypatch.setattr(sys, "platform", "linux")
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "share"))

    assert paths.default_database_path() == tmp_path / "share" / "Pinewood" / "pinewood.db"


def test_app_data_directory_per_platform(monkeypatch, tmp_path):
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

    monkeypatch.setattr(sys, "platform", "darwin")
    assert paths.app_data_directory() == tmp_path / "Library" / "Application Support" / "Pinewood"

    monkeypatch.setattr(sys, "platform", "win32")
    monkeypatch.setenv("APPDATA", str(tmp_path / "Roaming"))
    assert paths.app_data_directory() == tmp_path / "Roaming" / "Pinewood"


def test_ensure_database_directory(tmp_path):
    target = tmp_path / "a" / "b" / "race.db"
    assert paths.ensure_database_directory(target) == target
    assert target.parent.is_dir()
    assert not target.exists()


def test_log_directory_linux(monkeypatch, tmp_path):
    monkeypatch.setattr(sys, "platform", "linux")
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))
    assert get_log_directory() == tmp_path / "Pinewood" / "logs"


def test_setup_logging_writes_files(tmp_path):
    log_dir = setup_logging(log_dir=tmp_path / "logs")

    logging.getLogger("pinewood.tests").error("timer port unavailable")

    assert (log_dir / "pinewood.log").read_text(encoding="utf-8").count("timer port unavailable") == 1
    assert "timer port unavailable" in (log_dir / "errors.log").read_text(encoding="utf-8")


def test_setup_logging_is_repeatable(tmp_path):
    setup_logging(log_dir=tmp_path / "logs")
    setup_logging(log_dir=tmp_path / "logs")
    assert len(logging.getLogger("pinewood").handlers) == 3
