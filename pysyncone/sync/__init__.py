"""Sync engine for pysyncone - pull/push of the save and mods folders."""

from .archive import pack_directory, read_archive, unpack_archive
from .backends import (
    Backend,
    FolderMirrorBackend,
    ObjectStorageBackend,
    SyncBackend,
    select_backend,
)
from .comparator import SyncAction, SyncDecision, TimestampComparator
from .engine import SyncEngine, get_status, pull, push
from .guard import (
    check_pull,
    check_push,
    measure_archive,
    read_progress_metric,
    scratch_directory,
)
from .modes import SyncTarget
from .scanner import EPOCH, latest_mtime, local_mtime

__all__ = [
    "SyncEngine",
    "SyncTarget",
    "SyncBackend",
    "Backend",
    "FolderMirrorBackend",
    "ObjectStorageBackend",
    "select_backend",
    "SyncAction",
    "SyncDecision",
    "TimestampComparator",
    "pull",
    "push",
    "get_status",
    "pack_directory",
    "unpack_archive",
    "read_archive",
    "read_progress_metric",
    "measure_archive",
    "check_pull",
    "check_push",
    "scratch_directory",
    "EPOCH",
    "latest_mtime",
    "local_mtime",
]
