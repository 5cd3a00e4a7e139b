"""Testing utilities for liveconfig."""

from .mocks import InMemoryRecordBackend

__all__ = [
    "InMemoryRecordBackend",
]
