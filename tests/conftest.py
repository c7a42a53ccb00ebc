import os
from pathlib import Path

import pytest

from dhis2connect.config import get_settings


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    """Drop DHIS2CONNECT_* env vars and the cached settings around each test."""
    for key in list(os.environ):
        if key.startswith("DHIS2CONNECT_"):
            monkeypatch.delenv(key)
    # Keep a developer's .env out of the tests
    monkeypatch.chdir(Path(__file__).parent)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
