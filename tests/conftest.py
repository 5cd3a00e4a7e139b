"""Pytest fixtures for liveconfig tests."""

import pytest

from liveconfig.interfaces import ConfigurationRecord
from liveconfig.services import ConfigurationStore, FileRecordBackend
from liveconfig.testing import InMemoryRecordBackend


@pytest.fixture
def storage_path(tmp_path):
    """Path of the persisted record inside an isolated directory."""
    return tmp_path / "currentlyConfig.json"


@pytest.fixture
def file_backend(storage_path):
    """Provide a file backend writing into tmp_path."""
    return FileRecordBackend(storage_path)


@pytest.fixture
def memory_backend():
    """Provide an empty in-memory backend."""
    return InMemoryRecordBackend()


@pytest.fixture
def stored_record():
    """A record that differs from the built-in default."""
    return ConfigurationRecord(
        code="print('stored')",
        timestamp="2024-05-01T12:00:00.000Z",
        version="2.3",
    )


@pytest.fixture
def store(file_backend):
    """Provide an uninitialized memory-authoritative store on disk."""
    return ConfigurationStore(file_backend)
