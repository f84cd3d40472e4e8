"""Configuration schema and on-disk store for pysyncone."""

import json
import logging
import os
import platform
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

from .exceptions import SynconeConfigError

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = "Syncone"
CONFIG_FILE_NAME = "syncone_config.json"
CONFIG_DIR_ENV = "SYNCONE_CONFIG_DIR"

# Messages for fields that are required at call time
_MISSING_MESSAGES = {
    "save_path": "Save path is not set",
    "mods_path": "Mods path is not set",
    "cloud_path": "Cloud path is not set",
    "supabase_url": "Supabase URL is missing",
    "supabase_key": "Supabase key is missing",
    "bucket_name": "Bucket name is missing",
}


@dataclass
class SyncConfig:
    """Persisted sync settings.

    Every field is optional. Object-storage mode is used when the Supabase
    URL, key and bucket are all set; otherwise the mirror folder is used.
    """

    save_path: Optional[str] = None
    """Path to the game's save folder"""

    mods_path: Optional[str] = None
    """Path to the game's mods folder"""

    cloud_path: Optional[str] = None
    """Mirror folder (e.g. a shared drive), used without Supabase settings"""

    supabase_url: Optional[str] = None
    """Supabase project URL (e.g. https://xxx.supabase.co)"""

    supabase_key: Optional[str] = None
    """Supabase anon or service_role key"""

    bucket_name: Optional[str] = None
    """Bucket name in Supabase Storage"""

    @property
    def uses_object_storage(self) -> bool:
        """Whether URL, key and bucket are all present."""
        return bool(self.supabase_url and self.supabase_key and self.bucket_name)

    def require(self, name: str) -> str:
        """Return a required field or raise SynconeConfigError."""
        value = getattr(self, name)
        if not value:
            raise SynconeConfigError(_MISSING_MESSAGES.get(name, f"{name} is not set"))
        return value

    def to_dict(self) -> dict[str, Optional[str]]:
        """Convert config to dictionary for JSON serialization."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SyncConfig":
        """Create SyncConfig from a dictionary, ignoring unknown keys."""
        values: dict[str, Optional[str]] = {}
        for f in fields(cls):
            value = data.get(f.name)
            if value is not None and not isinstance(value, str):
                raise SynconeConfigError(
                    f"Invalid value for '{f.name}': expected a string"
                )
            values[f.name] = value
        return cls(**values)


def default_config_dir() -> Path:
    """Get the per-user directory holding the config file.

    Uses %APPDATA% on Windows and $HOME elsewhere. The SYNCONE_CONFIG_DIR
    environment variable overrides both.
    """
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override)

    base_var = "APPDATA" if platform.system() == "Windows" else "HOME"
    base = os.environ.get(base_var)
    if not base:
        raise SynconeConfigError(f"{base_var} not set")
    return Path(base) / CONFIG_DIR_NAME


class ConfigStore:
    """Reads and writes SyncConfig as JSON.

    Loading a missing file returns a default config. Saving overwrites the
    whole file. Nothing is cached between calls.
    """

    def __init__(self, path: Optional[Path] = None):
        """Initialize config store.

        Args:
            path: Config file path (defaults to the per-user location)
        """
        self._path = path

    @property
    def path(self) -> Path:
        """Location of the config file."""
        if self._path is None:
            return default_config_dir() / CONFIG_FILE_NAME
        return self._path

    def load(self) -> SyncConfig:
        """Load the config, returning defaults when the file does not exist.

        Raises:
            SynconeConfigError: If the file cannot be read or parsed
        """
        path = self.path
        if not path.exists():
            logger.debug(f"No config file at {path}, using defaults")
            return SyncConfig()

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise SynconeConfigError(f"Failed to read config {path}: {e}") from e

        if not isinstance(data, dict):
            raise SynconeConfigError(f"Invalid config file {path}: expected an object")
        return SyncConfig.from_dict(data)

    def save(self, config: SyncConfig) -> None:
        """Write the config, replacing the file's previous contents.

        Raises:
            SynconeConfigError: If the file cannot be written
        """
        path = self.path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(config.to_dict(), indent=2), encoding="utf-8")
        except OSError as e:
            raise SynconeConfigError(f"Failed to write config {path}: {e}") from e
        logger.debug(f"Saved config to {path}")


def load_config(path: Optional[Path] = None) -> SyncConfig:
    """Load configuration from JSON file."""
    return ConfigStore(path).load()


def save_config(config: SyncConfig, path: Optional[Path] = None) -> None:
    """Save configuration to JSON file."""
    ConfigStore(path).save(config)
