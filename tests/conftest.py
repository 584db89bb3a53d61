from __future__ import annotations

import logging

import pytest

from pinewood.storage.sqlite_store import initialize


@pytest.fixture
def store(tmp_path):
    store = initialize(tmp_path / "pinewood.db")
    yield store
    store.close()


@pytest.fixture(autouse=True)
def _reset_package_logging():
    yield
    logger = logging.getLogger("pinewood")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
