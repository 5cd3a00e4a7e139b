"""liveconfig service implementations."""

from .config_store import ConfigurationStore
from .file_backend import FileRecordBackend

__all__ = [
    "ConfigurationStore",
    "FileRecordBackend",
]
