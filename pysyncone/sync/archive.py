"""Zip packing and unpacking of folder trees for object storage transport."""

import io
import logging
import zipfile
import zlib
from pathlib import Path, PurePosixPath
from typing import Optional

from ..exceptions import SynconeArchiveError, SynconeFileError
from .operations import clear_directory

logger = logging.getLogger(__name__)


def pack_directory(root: Path) -> bytes:
    """Pack a directory tree into zip bytes.

    Only files are stored. Entry names are relative to ``root`` and always
    use forward slashes; empty and symlinked directories are not recorded.

    Args:
        root: Directory to pack

    Returns:
        Zip archive bytes (an empty archive if ``root`` is not a directory)

    Raises:
        SynconeFileError: If a directory or file cannot be read
    """
    buffer = io.BytesIO()
    count = 0
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        if root.is_dir():
            stack = [root]
            try:
                while stack:
                    directory = stack.pop()
                    for item in sorted(directory.iterdir(), reverse=True):
                        if item.is_dir():
                            if item.is_symlink():
                                logger.debug(f"Skipping symlinked directory {item}")
                            else:
                                stack.append(item)
                            continue
                        # Use as_posix() to ensure forward slashes on all platforms
                        arcname = item.relative_to(root).as_posix()
                        archive.write(item, arcname)
                        count += 1
            except OSError as e:
                raise SynconeFileError(f"Failed to pack {root}: {e}") from e

    logger.debug(f"Packed {count} files from {root}")
    return buffer.getvalue()


def _safe_entry_path(dest: Path, name: str) -> Path:
    """Resolve an entry name under ``dest``, rejecting escapes."""
    entry = PurePosixPath(name.replace("\\", "/"))
    if (
        not entry.parts
        or entry.is_absolute()
        or ".." in entry.parts
        or ":" in entry.parts[0]
    ):
        raise SynconeArchiveError(f"Unsafe path in archive: {name}")
    return dest.joinpath(*entry.parts)


def read_archive(data: bytes, dest: Path) -> list[tuple[Path, Optional[bytes]]]:
    """Read and check every entry of an archive without writing anything.

    Args:
        data: Zip archive bytes
        dest: Directory the entries would be extracted into

    Returns:
        ``(target path, contents)`` pairs; contents is None for directories

    Raises:
        SynconeArchiveError: If the archive cannot be opened, an entry cannot
            be decompressed or fails its CRC check, or an entry would be
            written outside ``dest``
    """
    try:
        archive = zipfile.ZipFile(io.BytesIO(data))
    except (zipfile.BadZipFile, ValueError) as e:
        raise SynconeArchiveError(f"Invalid archive: {e}") from e

    entries: list[tuple[Path, Optional[bytes]]] = []
    with archive:
        for member in archive.infolist():
            target = _safe_entry_path(dest, member.filename)
            if member.is_dir():
                entries.append((target, None))
                continue
            try:
                entries.append((target, archive.read(member)))
            except (
                zipfile.BadZipFile,
                EOFError,
                zlib.error,
                RuntimeError,
                NotImplementedError,
            ) as e:
                # RuntimeError: encrypted entry; NotImplementedError: compression
                raise SynconeArchiveError(f"Corrupt archive entry: {e}") from e
    return entries


def unpack_archive(data: bytes, dest: Path) -> int:
    """Unpack zip bytes into ``dest``, replacing everything that was there.

    Every entry is read and checked before ``dest`` is touched, so a corrupt
    archive leaves the destination unchanged.

    Args:
        data: Zip archive bytes
        dest: Destination directory (cleared, then recreated)

    Returns:
        Number of files written

    Raises:
        SynconeArchiveError: If the archive cannot be read or an entry
            would be written outside ``dest``
        SynconeFileError: If the destination cannot be written
    """
    entries = read_archive(data, dest)

    clear_directory(dest)
    count = 0
    try:
        for target, contents in entries:
            if contents is None:
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(contents)
            count += 1
    except OSError as e:
        raise SynconeFileError(f"Failed to extract into {dest}: {e}") from e

    logger.debug(f"Unpacked {count} files into {dest}")
    return count
