"""Syncone - keep a game's save and mods folders in sync across machines."""

from .api import SupabaseStorageClient
from .config import ConfigStore, SyncConfig, load_config, save_config
from .exceptions import (
    PROGRESS_WARNING_PREFIX,
    ProgressRegressionError,
    SynconeArchiveError,
    SynconeConfigError,
    SynconeDownloadError,
    SynconeError,
    SynconeFileError,
    SynconeInvalidResponseError,
    SynconeNetworkError,
    SynconeUploadError,
)
from .models import RemoteObjectMeta, SyncStatus
from .sync import SyncEngine, SyncTarget, get_status, pull, push

__all__ = [
    "SupabaseStorageClient",
    "ConfigStore",
    "SyncConfig",
    "load_config",
    "save_config",
    "RemoteObjectMeta",
    "SyncStatus",
    "SyncEngine",
    "SyncTarget",
    "get_status",
    "pull",
    "push",
    "PROGRESS_WARNING_PREFIX",
    "ProgressRegressionError",
    "SynconeArchiveError",
    "SynconeConfigError",
    "SynconeDownloadError",
    "SynconeError",
    "SynconeFileError",
    "SynconeInvalidResponseError",
    "SynconeNetworkError",
    "SynconeUploadError",
]
