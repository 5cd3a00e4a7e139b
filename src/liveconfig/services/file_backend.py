"""JSON file storage for the configuration record."""

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Union

from ..interfaces import (
    ConfigurationRecord,
    IRecordBackend,
    PersistenceError,
    RecordCorruptError,
    RecordNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def encode_record(record: ConfigurationRecord) -> str:
    """Serialize a record the way it is served and stored (2-space indent)."""
    return json.dumps(record.to_dict(), indent=2, ensure_ascii=False)


def decode_record(raw: str) -> ConfigurationRecord:
    """Parse a stored document back into a record.

    Raises:
        RecordCorruptError: If the text is not a JSON object with a
            non-empty string ``code`` and string-or-absent metadata.
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise RecordCorruptError(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise RecordCorruptError(f"Expected a JSON object, got {type(data).__name__}")

    for key in ("timestamp", "version"):
        value = data.get(key)
        if value is not None and not isinstance(value, str):
            raise RecordCorruptError(f"Field '{key}' must be a string")

    try:
        return ConfigurationRecord.from_candidate(data)
    except ValidationError as e:
        raise RecordCorruptError(str(e)) from e


class FileRecordBackend(IRecordBackend):
    """Stores the record as a single JSON file.

    Writes go to a temporary file in the same directory followed by
    ``os.replace``, so readers see either the previous document or the new
    one, never a partial write. Blocking I/O runs in a worker thread.

    Usage:
        backend = FileRecordBackend("currentlyConfig.json")
        await backend.save(ConfigurationRecord.default())
        record = await backend.load()
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    def describe(self) -> str:
        return str(self.path)

    async def load(self) -> ConfigurationRecord:
        return await asyncio.to_thread(self._load_sync)

    async def save(self, record: ConfigurationRecord) -> None:
        await asyncio.to_thread(self._save_sync, record)

    def _load_sync(self) -> ConfigurationRecord:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise RecordNotFoundError(f"No configuration file at {self.path}") from e
        except UnicodeDecodeError as e:
            raise RecordCorruptError(f"Configuration file is not UTF-8: {e}") from e
        except OSError as e:
            raise PersistenceError(f"Could not read {self.path}: {e}") from e

        return decode_record(raw)

    def _save_sync(self, record: ConfigurationRecord) -> None:
        payload = encode_record(record)
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            # mkstemp creates 0600 files
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as e:
            raise PersistenceError(f"Could not write {self.path}: {e}") from e
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.debug("Could not remove temp file %s", tmp_name)
