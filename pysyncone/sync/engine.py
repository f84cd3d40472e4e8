"""Core sync engine: staleness policy and result aggregation."""

import logging
from typing import Any, Optional

from ..api import SupabaseStorageClient
from ..config import SyncConfig
from ..exceptions import SynconeConfigError, SynconeFileError, SynconeNetworkError
from ..models import SyncStatus
from ..utils import NOTHING_TO_FETCH, NOTHING_TO_UPLOAD, to_unix_seconds
from .backends import SyncBackend, select_backend
from .comparator import SyncAction, TimestampComparator
from .modes import SyncTarget

logger = logging.getLogger(__name__)


class SyncEngine:
    """Core sync engine that orchestrates pulls and pushes.

    For every folder in the requested target (save before mods) the engine
    first evaluates staleness, then lets the backend check progress and
    transfer. A progress regression raises immediately, so with
    ``SyncTarget.BOTH`` a blocked save leaves the mods untouched.
    """

    def __init__(
        self,
        backend: SyncBackend,
        comparator: Optional[TimestampComparator] = None,
    ):
        """Initialize sync engine.

        Args:
            backend: Backend that measures and transfers the remote side
            comparator: Staleness policy (default: strict timestamp comparison)
        """
        self.backend = backend
        self.comparator = comparator or TimestampComparator()

    @classmethod
    def from_config(
        cls, config: SyncConfig, client: Optional[SupabaseStorageClient] = None
    ) -> "SyncEngine":
        """Create an engine with the backend the config selects.

        Raises:
            SynconeConfigError: If a required path or credential is missing
        """
        return cls(select_backend(config, client))

    def __enter__(self) -> "SyncEngine":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Release resources held by the backend."""
        self.backend.close()

    def pull(self, target: SyncTarget, force: bool = False) -> str:
        """Fetch newer remote copies of the target's folders.

        Args:
            target: Folders to pull
            force: Skip the progress check

        Returns:
            Space-joined messages of the folders fetched, or a "nothing new"
            message

        Raises:
            ProgressRegressionError: If pulling would discard local progress
            SynconeError: On configuration, filesystem or network failures
        """
        targets = target.sub_targets
        remote = self.backend.remote_mtimes(targets)

        messages = []
        for sub_target in targets:
            decision = self.comparator.decide_pull(
                sub_target, self.backend.local_mtime(sub_target), remote[sub_target]
            )
            logger.debug(
                f"Pull {sub_target.value}: {decision.action.value} ({decision.reason})"
            )
            if decision.action != SyncAction.DOWNLOAD:
                continue

            self.backend.download_target(sub_target, force=force)
            logger.info(f"Pulled {sub_target.value} from {self.backend.name}")
            messages.append(self.backend.pulled_message(sub_target))

        return " ".join(messages) if messages else NOTHING_TO_FETCH

    def push(self, target: SyncTarget, force: bool = False) -> str:
        """Upload the target's local folders.

        Args:
            target: Folders to push
            force: Skip the progress check

        Returns:
            Space-joined messages of the folders uploaded, or a "nothing to
            upload" message

        Raises:
            ProgressRegressionError: If pushing would overwrite cloud progress
            SynconeError: On configuration, filesystem or network failures
        """
        self.backend.prepare_push()

        messages = []
        for sub_target in target.sub_targets:
            decision = self.comparator.decide_push(
                sub_target, self.backend.local_path(sub_target).exists()
            )
            logger.debug(
                f"Push {sub_target.value}: {decision.action.value} ({decision.reason})"
            )
            if decision.action != SyncAction.UPLOAD:
                continue

            self.backend.upload_target(sub_target, force=force)
            logger.info(f"Pushed {sub_target.value} to {self.backend.name}")
            messages.append(self.backend.pushed_message(sub_target))

        return " ".join(messages) if messages else NOTHING_TO_UPLOAD

    def status(self) -> SyncStatus:
        """Compare local and remote times without transferring anything.

        If the remote side cannot be reached, the local times are still
        reported, the reason is kept in ``remote_error`` and no side is
        marked newer.
        """
        status = SyncStatus(
            save_path_used=str(self.backend.save_path),
            mods_path_used=str(self.backend.mods_path),
            backend=self.backend.name,
        )
        status.save_local_mtime = to_unix_seconds(
            self.backend.local_mtime(SyncTarget.SAVE)
        )
        status.mods_local_mtime = to_unix_seconds(
            self.backend.local_mtime(SyncTarget.MODS)
        )

        try:
            remote = self.backend.remote_mtimes(SyncTarget.BOTH.sub_targets)
        except (SynconeNetworkError, SynconeFileError) as e:
            logger.warning(f"Could not read remote status: {e}")
            status.remote_error = str(e)
            return status

        status.save_cloud_mtime = to_unix_seconds(remote[SyncTarget.SAVE])
        status.mods_cloud_mtime = to_unix_seconds(remote[SyncTarget.MODS])
        status.save_local_newer, status.save_cloud_newer = (
            self.comparator.newer_flags(status.save_local_mtime, status.save_cloud_mtime)
        )
        status.mods_local_newer, status.mods_cloud_newer = (
            self.comparator.newer_flags(status.mods_local_mtime, status.mods_cloud_mtime)
        )
        return status


def pull(
    config: SyncConfig,
    target: SyncTarget = SyncTarget.BOTH,
    force: bool = False,
    client: Optional[SupabaseStorageClient] = None,
) -> str:
    """Pull with the backend selected from ``config``."""
    with SyncEngine.from_config(config, client) as engine:
        return engine.pull(target, force=force)


def push(
    config: SyncConfig,
    target: SyncTarget = SyncTarget.BOTH,
    force: bool = False,
    client: Optional[SupabaseStorageClient] = None,
) -> str:
    """Push with the backend selected from ``config``."""
    with SyncEngine.from_config(config, client) as engine:
        return engine.push(target, force=force)


def get_status(
    config: SyncConfig, client: Optional[SupabaseStorageClient] = None
) -> SyncStatus:
    """Get the sync status, or an empty status if the config is incomplete."""
    try:
        engine = SyncEngine.from_config(config, client)
    except SynconeConfigError as e:
        logger.debug(f"Status unavailable: {e}")
        return SyncStatus()
    with engine:
        return engine.status()
