"""Transfer backends: a mirrored folder or a Supabase Storage bucket.

Exactly one backend is built per invocation by :func:`select_backend`,
depending on which settings are present in the config.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

from ..api import SupabaseStorageClient
from ..config import SyncConfig
from ..exceptions import SynconeFileError
from ..utils import (
    MODS_FOLDER_NAME,
    MODS_OBJECT_NAME,
    SAVE_FOLDER_NAME,
    SAVE_OBJECT_NAME,
    to_unix_seconds,
)
from .archive import pack_directory, read_archive, unpack_archive
from .fixups import apply_pull_fixups, stamp_organisation_name
from .guard import check_pull, check_push, measure_archive, read_progress_metric
from .modes import SyncTarget
from .operations import replace_directory
from .scanner import latest_mtime, local_mtime

logger = logging.getLogger(__name__)


class SyncBackend(ABC):
    """Common interface of the two backends.

    The engine decides *whether* a target is transferred; a backend knows how
    to measure the remote side and how to move the data.
    """

    name: str = ""
    """Backend identifier shown in status output"""

    location: str = ""
    """Where data goes, as worded in result messages"""

    def __init__(self, save_path: Path, mods_path: Path):
        self.save_path = save_path
        self.mods_path = mods_path

    def local_path(self, target: SyncTarget) -> Path:
        """Local folder for a single target."""
        if target == SyncTarget.SAVE:
            return self.save_path
        if target == SyncTarget.MODS:
            return self.mods_path
        raise ValueError(f"Not a single-folder target: {target.value}")

    def local_mtime(self, target: SyncTarget) -> Optional[float]:
        """Local modification time, None if the folder is absent or unreadable."""
        return local_mtime(self.local_path(target))

    def pulled_message(self, target: SyncTarget) -> str:
        return f"{target.label} fetched from {self.location}."

    def pushed_message(self, target: SyncTarget) -> str:
        return f"{target.label} uploaded to {self.location}."

    def prepare_push(self) -> None:
        """Hook run once before any target is pushed."""

    def close(self) -> None:
        """Release resources held by the backend."""

    @abstractmethod
    def remote_mtimes(
        self, targets: list[SyncTarget]
    ) -> dict[SyncTarget, Optional[float]]:
        """Remote modification times; None where there is no remote copy."""

    @abstractmethod
    def download_target(self, target: SyncTarget, force: bool = False) -> None:
        """Replace the local folder of ``target`` with the remote copy."""

    @abstractmethod
    def upload_target(self, target: SyncTarget, force: bool = False) -> None:
        """Replace the remote copy of ``target`` with the local folder."""


class FolderMirrorBackend(SyncBackend):
    """Syncs against ``<cloud_path>/Save`` and ``<cloud_path>/Mods``.

    Folders are copied file by file. There is no progress check in either
    direction, and pushing is unconditional.
    """

    name = "mirror"
    location = "cloud"

    def __init__(self, save_path: Path, mods_path: Path, cloud_path: Path):
        super().__init__(save_path, mods_path)
        self.cloud_path = cloud_path

    def remote_path(self, target: SyncTarget) -> Path:
        """Mirror folder for a single target."""
        if target == SyncTarget.SAVE:
            return self.cloud_path / SAVE_FOLDER_NAME
        if target == SyncTarget.MODS:
            return self.cloud_path / MODS_FOLDER_NAME
        raise ValueError(f"Not a single-folder target: {target.value}")

    def remote_mtimes(
        self, targets: list[SyncTarget]
    ) -> dict[SyncTarget, Optional[float]]:
        mtimes: dict[SyncTarget, Optional[float]] = {}
        for target in targets:
            remote = self.remote_path(target)
            mtimes[target] = latest_mtime(remote) if remote.exists() else None
        return mtimes

    def prepare_push(self) -> None:
        for target in (SyncTarget.SAVE, SyncTarget.MODS):
            remote = self.remote_path(target)
            try:
                remote.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise SynconeFileError(f"Failed to create {remote}: {e}") from e

    def download_target(self, target: SyncTarget, force: bool = False) -> None:
        replace_directory(self.remote_path(target), self.local_path(target))

    def upload_target(self, target: SyncTarget, force: bool = False) -> None:
        replace_directory(self.local_path(target), self.remote_path(target))


class ObjectStorageBackend(SyncBackend):
    """Syncs ``Save.zip`` and ``Mods.zip`` in a Supabase Storage bucket.

    Timestamps are compared in whole seconds. Unless forced, save transfers
    are checked with the progress guard, which needs the other side's
    archive extracted to a scratch directory first.
    """

    name = "supabase"
    location = "Supabase"

    def __init__(
        self,
        save_path: Path,
        mods_path: Path,
        client: SupabaseStorageClient,
        owns_client: bool = False,
    ):
        super().__init__(save_path, mods_path)
        self.client = client
        self._owns_client = owns_client

    @staticmethod
    def object_name(target: SyncTarget) -> str:
        """Bucket object for a single target."""
        if target == SyncTarget.SAVE:
            return SAVE_OBJECT_NAME
        if target == SyncTarget.MODS:
            return MODS_OBJECT_NAME
        raise ValueError(f"Not a single-folder target: {target.value}")

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def local_mtime(self, target: SyncTarget) -> Optional[float]:
        seconds = to_unix_seconds(super().local_mtime(target))
        return None if seconds is None else float(seconds)

    def remote_mtimes(
        self, targets: list[SyncTarget]
    ) -> dict[SyncTarget, Optional[float]]:
        mtimes: dict[SyncTarget, Optional[float]] = dict.fromkeys(targets)
        names = {self.object_name(target): target for target in targets}
        for meta in self.client.list_objects():
            target = names.get(meta.name)
            if target is None:
                continue
            seconds = to_unix_seconds(meta.mtime)
            mtimes[target] = None if seconds is None else float(seconds)
        return mtimes

    def download_target(self, target: SyncTarget, force: bool = False) -> None:
        local = self.local_path(target)
        data = self.client.download(self.object_name(target))
        # Every entry is checked before measuring or touching the local folder
        read_archive(data, local)

        if target == SyncTarget.SAVE and not force:
            incoming = measure_archive(data, prefix="syncone_pull_check")
            check_pull(read_progress_metric(local), incoming)

        unpack_archive(data, local)
        if target == SyncTarget.SAVE:
            apply_pull_fixups(local)

    def upload_target(self, target: SyncTarget, force: bool = False) -> None:
        local = self.local_path(target)
        name = self.object_name(target)

        if target == SyncTarget.SAVE:
            if not force:
                self._check_cloud_progress(local)
            try:
                stamp_organisation_name(local)
            except SynconeFileError as e:
                logger.warning(f"Could not stamp organisation name: {e}")

        data = pack_directory(local)
        logger.debug(f"Uploading {name} ({len(data)} bytes)")
        self.client.upload(name, data)

    def _check_cloud_progress(self, local: Path) -> None:
        """Refuse to push a save that is behind the copy in the bucket."""
        existing = {meta.name for meta in self.client.list_objects()}
        if SAVE_OBJECT_NAME not in existing:
            logger.debug("No save in the bucket yet, skipping progress check")
            return
        cloud_value = measure_archive(self.client.download(SAVE_OBJECT_NAME))
        check_push(read_progress_metric(local), cloud_value)


Backend = Union[FolderMirrorBackend, ObjectStorageBackend]


def select_backend(
    config: SyncConfig, client: Optional[SupabaseStorageClient] = None
) -> Backend:
    """Build the backend the config describes.

    Args:
        config: Sync settings
        client: Storage client to use instead of creating one from config

    Raises:
        SynconeConfigError: If a setting required by the backend is missing
    """
    save_path = Path(config.require("save_path"))
    mods_path = Path(config.require("mods_path"))

    if config.uses_object_storage:
        owns_client = client is None
        if client is None:
            client = SupabaseStorageClient(
                url=config.require("supabase_url"),
                key=config.require("supabase_key"),
                bucket=config.require("bucket_name"),
            )
        logger.debug(f"Using Supabase bucket {config.bucket_name}")
        return ObjectStorageBackend(save_path, mods_path, client, owns_client)

    cloud_path = Path(config.require("cloud_path"))
    logger.debug(f"Using mirror folder {cloud_path}")
    return FolderMirrorBackend(save_path, mods_path, cloud_path)
