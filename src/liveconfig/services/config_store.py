"""Two-tier configuration store.

The in-memory tier holds the live record and is committed first; the durable
tier is a best-effort copy whose failures are logged, never raised to writers.
"""

import asyncio
import logging
from typing import Any, Mapping, Optional

from ..interfaces import (
    ConfigurationRecord,
    IRecordBackend,
    PersistenceError,
    ReadPolicy,
    RecordNotFoundError,
    SetResult,
)
from ..utils import preview

logger = logging.getLogger(__name__)

# Characters of code echoed into the logs
READ_PREVIEW_CHARS = 50
WRITE_PREVIEW_CHARS = 100


class ConfigurationStore:
    """Holds the single live ConfigurationRecord.

    Usage:
        store = ConfigurationStore(FileRecordBackend("currentlyConfig.json"))
        await store.initialize()

        await store.set({"code": "print('hello')"})
        record = await store.get()

    Records are immutable and replaced by a single reference assignment, so
    get() never observes a half-applied write. Writers are serialized so that
    the file on disk ends up matching the last record committed to memory.
    """

    def __init__(
        self,
        backend: IRecordBackend,
        read_policy: ReadPolicy = ReadPolicy.MEMORY,
    ):
        self.backend = backend
        self.read_policy = read_policy
        self._record: Optional[ConfigurationRecord] = None
        # Set while the last committed record failed to reach the backend
        self._unsaved = False
        self._write_lock = asyncio.Lock()

    @property
    def current(self) -> Optional[ConfigurationRecord]:
        """The in-memory record, or None before initialize()."""
        return self._record

    async def initialize(self) -> ConfigurationRecord:
        """Seed the live record from storage, falling back to the default.

        A missing or unreadable file is replaced with the built-in default
        record. Failing to write that default is not fatal; the service keeps
        running from memory.
        """
        try:
            self._record = await self.backend.load()
            logger.info(f"Loaded existing configuration from {self.backend.describe()}")
            return self._record
        except RecordNotFoundError:
            logger.info(f"No configuration at {self.backend.describe()}, using default")
        except PersistenceError as e:
            logger.warning(f"Ignoring unreadable configuration ({e}), using default")

        self._record = ConfigurationRecord.default()
        try:
            await self.backend.save(self._record)
            logger.info(f"Created default configuration at {self.backend.describe()}")
        except PersistenceError as e:
            self._unsaved = True
            logger.warning(f"Could not write to disk ({e}), using memory storage only")
        return self._record

    async def get(self) -> ConfigurationRecord:
        """Return the live record according to the read policy.

        Under ReadPolicy.DISK the in-memory record is served instead of the
        file while the last write has not been persisted, so a write that
        only reached memory is still visible to readers.

        Raises:
            RuntimeError: If called before initialize().
            PersistenceError: Under ReadPolicy.DISK when the file is missing
                or unreadable.
        """
        if self.read_policy is ReadPolicy.DISK and not self._unsaved:
            record = await self.backend.load()
        else:
            record = self._record
            if record is None:
                raise RuntimeError("ConfigurationStore used before initialize()")

        logger.debug(f"Configuration sent: {preview(record.code, READ_PREVIEW_CHARS)}")
        return record

    async def set(self, candidate: Mapping[str, Any]) -> SetResult:
        """Replace the live record.

        Args:
            candidate: Mapping with ``code`` and optional ``timestamp`` and
                ``version``.

        Returns:
            SetResult with ``persisted`` False when only the memory tier was
            updated.

        Raises:
            ValidationError: If ``code`` is missing or empty. Nothing changes.
        """
        record = ConfigurationRecord.from_candidate(candidate)

        async with self._write_lock:
            self._record = record
            logger.info(f"Configuration updated: {preview(record.code, WRITE_PREVIEW_CHARS)}")

            try:
                await self.backend.save(record)
            except PersistenceError as e:
                logger.warning(f"Disk write failed ({e}), using memory only")
                self._unsaved = True
                return SetResult(persisted=False, error=str(e))
            self._unsaved = False

        logger.debug(f"Configuration also saved to {self.backend.describe()}")
        return SetResult(persisted=True)
