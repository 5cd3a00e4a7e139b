"""Server configuration."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from ..interfaces import ReadPolicy

DEFAULT_CONFIG_PATH = "liveconfig.yaml"


@dataclass
class ServerConfig:
    """HTTP server configuration."""
    host: str = "0.0.0.0"
    port: int = 3000


@dataclass
class StorageConfig:
    """Where the record is persisted and how reads are served.

    read_policy:
        memory: serve the in-memory copy, disk only seeds restarts (default)
        disk: read the file on every request, no memory fallback
    """
    path: str = "currentlyConfig.json"
    read_policy: str = ReadPolicy.MEMORY.value

    def __post_init__(self):
        valid = [p.value for p in ReadPolicy]
        if self.read_policy not in valid:
            raise ValueError(
                f"Invalid read_policy: {self.read_policy}. "
                f"Valid options: {', '.join(repr(v) for v in valid)}"
            )

    @property
    def policy(self) -> ReadPolicy:
        return ReadPolicy(self.read_policy)


@dataclass
class LiveConfigConfig:
    """Full service configuration."""
    server: ServerConfig = field(default_factory=ServerConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)

    @classmethod
    def from_file(cls, path: str | Path) -> "LiveConfigConfig":
        """Load configuration from YAML file."""
        path = Path(path).expanduser()
        if not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> "LiveConfigConfig":
        """Create configuration from dictionary."""
        server_data = data.get("server", {})
        storage_data = data.get("storage", {})

        return cls(
            server=ServerConfig(**server_data) if server_data else ServerConfig(),
            storage=StorageConfig(**storage_data) if storage_data else StorageConfig(),
        )

    @classmethod
    def from_env(cls, config_path: Optional[str] = None) -> "LiveConfigConfig":
        """Create configuration from the YAML file plus environment overrides.

        ``PORT`` follows the usual hosting-platform convention; the remaining
        overrides are prefixed with ``LIVECONFIG_``.
        """
        if config_path is None:
            config_path = os.environ.get("LIVECONFIG_CONFIG", DEFAULT_CONFIG_PATH)
        config = cls.from_file(config_path)

        port = os.environ.get("PORT")
        if port:
            try:
                config.server.port = int(port)
            except ValueError:
                raise ValueError(f"PORT must be an integer, got {port!r}") from None

        host = os.environ.get("LIVECONFIG_HOST")
        if host:
            config.server.host = host

        storage_path = os.environ.get("LIVECONFIG_STORAGE_PATH")
        if storage_path:
            config.storage.path = storage_path

        read_policy = os.environ.get("LIVECONFIG_READ_POLICY")
        if read_policy:
            config.storage = StorageConfig(path=config.storage.path, read_policy=read_policy)

        return config

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if not 0 < self.server.port < 65536:
            errors.append(f"server.port must be between 1 and 65535, got {self.server.port}")

        if not self.storage.path:
            errors.append("storage.path is required")

        return errors
