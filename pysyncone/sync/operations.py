"""Directory operations used to replace one folder tree with another."""

import logging
import shutil
from pathlib import Path

from ..exceptions import SynconeFileError

logger = logging.getLogger(__name__)


def clear_directory(path: Path) -> None:
    """Remove a directory and its contents, then recreate it empty.

    Raises:
        SynconeFileError: If the directory cannot be removed or created
    """
    try:
        if path.exists():
            shutil.rmtree(path)
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise SynconeFileError(f"Failed to clear {path}: {e}") from e


def copy_tree(src: Path, dst: Path) -> int:
    """Copy a directory tree file by file, overwriting existing files.

    Uses an explicit stack so deep trees do not hit the recursion limit.
    Symlinked directories are not followed. File contents and permission
    bits are copied; modification times are not.

    Args:
        src: Source directory
        dst: Destination directory (created if needed)

    Returns:
        Number of files copied

    Raises:
        SynconeFileError: If any file or directory cannot be copied
    """
    copied = 0
    stack = [(src, dst)]
    try:
        while stack:
            src_dir, dst_dir = stack.pop()
            dst_dir.mkdir(parents=True, exist_ok=True)
            for item in sorted(src_dir.iterdir()):
                target = dst_dir / item.name
                if item.is_dir():
                    if item.is_symlink():
                        logger.debug(f"Skipping symlinked directory {item}")
                    else:
                        stack.append((item, target))
                else:
                    shutil.copy(item, target)
                    copied += 1
    except OSError as e:
        raise SynconeFileError(f"Failed to copy {src} to {dst}: {e}") from e
    return copied


def replace_directory(src: Path, dst: Path) -> bool:
    """Replace the contents of ``dst`` with the contents of ``src``.

    This never merges: ``dst`` is cleared before copying.

    Args:
        src: Source directory
        dst: Destination directory

    Returns:
        False if ``src`` does not exist (nothing is touched), True otherwise

    Raises:
        SynconeFileError: If clearing or copying fails
    """
    if not src.exists():
        return False

    clear_directory(dst)
    if src.is_dir():
        count = copy_tree(src, dst)
        logger.debug(f"Copied {count} files from {src} to {dst}")
    return True
