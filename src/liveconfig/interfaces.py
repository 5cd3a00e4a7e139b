"""Core types for the live configuration service.

The store keeps exactly one ConfigurationRecord live at a time. Records are
immutable so a write replaces the whole record with a single reference swap.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from .utils import utc_now_iso

DEFAULT_CODE = 'print("Hi")'
DEFAULT_VERSION = "1.0"


class LiveConfigError(Exception):
    """Base class for service errors."""


class ValidationError(LiveConfigError):
    """A candidate record was rejected before any state change."""


class PersistenceError(LiveConfigError):
    """The durable tier could not be read or written."""


class RecordNotFoundError(PersistenceError):
    """No persisted record exists yet."""


class RecordCorruptError(PersistenceError):
    """A persisted record exists but could not be decoded."""


class ReadPolicy(Enum):
    """Where get() reads the live record from."""
    MEMORY = "memory"  # in-memory copy is authoritative, disk seeds restarts
    DISK = "disk"      # every read goes to the backend, no memory fallback


@dataclass(frozen=True)
class ConfigurationRecord:
    """The single stored unit of state.

    Attributes:
        code: Opaque script text. Never parsed by the server.
        timestamp: ISO-8601 time the record was written.
        version: Free-form version label.
    """
    code: str
    timestamp: str
    version: str = DEFAULT_VERSION

    @classmethod
    def default(cls) -> "ConfigurationRecord":
        """Built-in record used when nothing has been persisted."""
        return cls(code=DEFAULT_CODE, timestamp=utc_now_iso(), version=DEFAULT_VERSION)

    @classmethod
    def from_candidate(cls, data: Mapping[str, Any]) -> "ConfigurationRecord":
        """Build a record from a write request, filling defaults.

        Raises:
            ValidationError: If ``code`` is missing, empty or not a string.
        """
        code = data.get("code")
        if not isinstance(code, str) or not code:
            raise ValidationError("Code is required")

        return cls(
            code=code,
            timestamp=data.get("timestamp") or utc_now_iso(),
            version=data.get("version") or DEFAULT_VERSION,
        )

    def to_dict(self) -> dict[str, str]:
        return {
            "code": self.code,
            "timestamp": self.timestamp,
            "version": self.version,
        }

    def __repr__(self) -> str:
        code_preview = self.code[:50] + "..." if len(self.code) > 50 else self.code
        return f"ConfigurationRecord(code='{code_preview}', version={self.version}, timestamp={self.timestamp})"


@dataclass(frozen=True)
class SetResult:
    """Outcome of a write.

    The in-memory commit always succeeds once validation passes; ``persisted``
    only reports whether the durable copy was updated as well.
    """
    persisted: bool
    error: Optional[str] = None


class IRecordBackend(ABC):
    """Durable storage for the single configuration record."""

    @abstractmethod
    async def load(self) -> ConfigurationRecord:
        """Read the persisted record.

        Raises:
            RecordNotFoundError: Nothing has been persisted.
            RecordCorruptError: The stored data cannot be decoded.
            PersistenceError: Any other storage failure.
        """
        pass

    @abstractmethod
    async def save(self, record: ConfigurationRecord) -> None:
        """Persist the record, replacing whatever was stored.

        Raises:
            PersistenceError: The write failed.
        """
        pass

    @abstractmethod
    def describe(self) -> str:
        """Human-readable location of the storage, for logs and health."""
        pass
