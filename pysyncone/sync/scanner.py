"""Directory scanning utilities for sync operations."""

import logging
from pathlib import Path
from typing import Optional

from ..exceptions import SynconeFileError

logger = logging.getLogger(__name__)

EPOCH: float = 0.0
"""Lower bound used when a side does not exist (treated as infinitely old)"""


def latest_mtime(path: Path) -> float:
    """Get the most recent modification time in a directory tree.

    Both files and directories count. The tree is walked depth-first with an
    explicit stack; descendants that cannot be read are skipped.

    Args:
        path: File or directory to scan

    Returns:
        Maximum modification time (Unix timestamp)

    Raises:
        SynconeFileError: If the root itself cannot be read

    Examples:
        >>> latest = latest_mtime(Path("/games/saves"))
    """
    try:
        latest = path.stat().st_mtime
        stack = sorted(path.iterdir(), reverse=True) if path.is_dir() else []
    except OSError as e:
        raise SynconeFileError(f"Cannot read {path}: {e}") from e

    while stack:
        item = stack.pop()
        try:
            stat = item.stat()
        except OSError as e:
            logger.debug(f"Skipping unreadable path {item}: {e}")
            continue

        if stat.st_mtime > latest:
            latest = stat.st_mtime

        if item.is_dir() and not item.is_symlink():
            try:
                stack.extend(sorted(item.iterdir(), reverse=True))
            except OSError as e:
                logger.debug(f"Skipping unreadable directory {item}: {e}")

    return latest


def local_mtime(path: Path) -> Optional[float]:
    """Scan a local folder, returning None if it is absent or unreadable."""
    if not path.exists():
        return None
    try:
        return latest_mtime(path)
    except SynconeFileError as e:
        logger.debug(f"Treating {path} as missing: {e}")
        return None
