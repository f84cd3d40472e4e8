"""Timestamp comparison logic for sync operations."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .modes import SyncTarget
from .scanner import EPOCH


class SyncAction(str, Enum):
    """Actions that can be taken for one target."""

    DOWNLOAD = "download"
    """Replace the local folder with the remote copy"""

    UPLOAD = "upload"
    """Replace the remote copy with the local folder"""

    SKIP = "skip"
    """Nothing to transfer"""


@dataclass
class SyncDecision:
    """Represents a decision about whether to transfer one target."""

    target: SyncTarget
    """Target the decision applies to"""

    action: SyncAction
    """Action to take"""

    reason: str
    """Human-readable reason for this decision"""

    local_mtime: Optional[float] = None
    """Local modification time (if known)"""

    remote_mtime: Optional[float] = None
    """Remote modification time (if known)"""


class TimestampComparator:
    """Applies the staleness policy to local and remote modification times.

    All comparisons are strict: equal timestamps never cause a transfer.
    """

    def decide_pull(
        self,
        target: SyncTarget,
        local_mtime: Optional[float],
        remote_mtime: Optional[float],
    ) -> SyncDecision:
        """Decide whether the remote copy should replace the local folder.

        Args:
            target: Target being pulled
            local_mtime: Local modification time, None if the folder is absent
            remote_mtime: Remote modification time, None if there is no copy
        """
        if remote_mtime is None:
            action, reason = SyncAction.SKIP, "No remote copy"
        elif remote_mtime <= (EPOCH if local_mtime is None else local_mtime):
            action, reason = SyncAction.SKIP, "Local copy is up to date"
        elif local_mtime is None:
            action, reason = SyncAction.DOWNLOAD, "No local copy"
        else:
            action, reason = SyncAction.DOWNLOAD, "Remote copy is newer"

        return SyncDecision(
            target=target,
            action=action,
            reason=reason,
            local_mtime=local_mtime,
            remote_mtime=remote_mtime,
        )

    def decide_push(self, target: SyncTarget, local_exists: bool) -> SyncDecision:
        """Decide whether the local folder should be uploaded.

        Pushing is not gated on timestamps, only on the local folder existing.
        """
        if local_exists:
            return SyncDecision(target, SyncAction.UPLOAD, "Local folder exists")
        return SyncDecision(target, SyncAction.SKIP, "No local folder")

    @staticmethod
    def newer_flags(
        local_mtime: Optional[int], remote_mtime: Optional[int]
    ) -> tuple[bool, bool]:
        """Compute (local_newer, remote_newer) for display.

        The present side is newer when the other is missing; equal times make
        neither newer.
        """
        if local_mtime is not None and remote_mtime is not None:
            return local_mtime > remote_mtime, remote_mtime > local_mtime
        return local_mtime is not None, remote_mtime is not None
