"""Progress guard: refuse transfers that would discard game progress.

Progress is measured as the highest ``LifetimeEarnings`` value found in any
``Money.json`` of a save tree, either directly in the save root or in one
of its ``SaveGame_*`` instance folders. Trees without a readable value have
no metric, and the guard never blocks when either side has none.
"""

import contextlib
import json
import logging
import shutil
import tempfile
import time
from pathlib import Path
from typing import Iterator, Optional

from ..exceptions import ProgressRegressionError, SynconeArchiveError
from ..utils import LIFETIME_EARNINGS_FIELD, MONEY_FILE_NAME, SAVE_INSTANCE_PREFIX
from .archive import unpack_archive

logger = logging.getLogger(__name__)


def save_instance_dirs(save_root: Path) -> list[Path]:
    """List the folders of a save tree that may hold one save instance.

    The root itself comes first, followed by every ``SaveGame_*`` directory.
    """
    instances = [save_root]
    try:
        children = sorted(save_root.iterdir())
    except OSError:
        return instances
    for child in children:
        if child.name.startswith(SAVE_INSTANCE_PREFIX) and child.is_dir():
            instances.append(child)
    return instances


def _read_lifetime_earnings(money_file: Path) -> Optional[float]:
    try:
        data = json.loads(money_file.read_bytes())
    except (OSError, ValueError):
        return None
    if not isinstance(data, dict):
        return None
    value = data.get(LIFETIME_EARNINGS_FIELD)
    # bool is an int subclass but never a meaningful amount
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def read_progress_metric(save_root: Path) -> Optional[float]:
    """Get the maximum lifetime earnings recorded in a save tree.

    Args:
        save_root: Root of the save folder

    Returns:
        Highest value found, or None if no instance has one
    """
    best: Optional[float] = None
    for instance in save_instance_dirs(save_root):
        value = _read_lifetime_earnings(instance / MONEY_FILE_NAME)
        if value is not None and (best is None or value > best):
            best = value
    return best


@contextlib.contextmanager
def scratch_directory(prefix: str = "syncone_check") -> Iterator[Path]:
    """Create a temporary directory that is removed on every exit path.

    The name combines the current time in milliseconds with a random suffix,
    so concurrent invocations never share one. Removal is best effort: a
    failure is logged and never replaces the result or error of the body.
    """
    millis = int(time.time() * 1000)
    path = Path(tempfile.mkdtemp(prefix=f"{prefix}_{millis}_"))
    try:
        yield path
    finally:
        try:
            shutil.rmtree(path)
        except OSError as e:
            logger.debug(f"Could not remove scratch directory {path}: {e}")


def measure_archive(data: bytes, prefix: str = "syncone_check") -> Optional[float]:
    """Extract an archive to a scratch directory and read its progress metric.

    Returns:
        The archive's metric, or None if it has none or cannot be extracted
    """
    with scratch_directory(prefix) as scratch:
        try:
            unpack_archive(data, scratch)
        except SynconeArchiveError as e:
            logger.warning(f"Skipping progress check, archive unreadable: {e}")
            return None
        return read_progress_metric(scratch)


def check_pull(local_value: Optional[float], incoming_value: Optional[float]) -> None:
    """Block a pull that would replace more local progress with less.

    Raises:
        ProgressRegressionError: If local progress exceeds the incoming copy
    """
    if local_value is None or incoming_value is None:
        logger.debug("Progress check skipped: metric unavailable")
        return
    if local_value > incoming_value:
        raise ProgressRegressionError(
            ProgressRegressionError.PULL, local_value, incoming_value
        )


def check_push(local_value: Optional[float], existing_value: Optional[float]) -> None:
    """Block a push that would replace more cloud progress with less.

    Raises:
        ProgressRegressionError: If the existing cloud copy has more progress
    """
    if local_value is None or existing_value is None:
        logger.debug("Progress check skipped: metric unavailable")
        return
    if local_value < existing_value:
        raise ProgressRegressionError(
            ProgressRegressionError.PUSH, local_value, existing_value
        )
