import os

import pytest

from pwstore.core.config import PwstoreConfig
from pwstore.core.records.store import RecordStore


@pytest.fixture
def sample_store():
    """The two-entry store used throughout the examples."""
    store = RecordStore()
    store.add("mail", "hunter2")
    store.add("db", "s3cr3t")
    return store


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "secrets.pws"


@pytest.fixture(autouse=True)
def _fresh_config(monkeypatch):
    for key in list(os.environ):
        if key.startswith("PWSTORE_"):
            monkeypatch.delenv(key)
    PwstoreConfig.reset_instance()
    yield
    PwstoreConfig.reset_instance()
