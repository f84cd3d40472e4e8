"""Data models shared by the storage client and the sync engine."""

from dataclasses import asdict, dataclass
from typing import Any, Optional

from .utils import parse_iso_timestamp


@dataclass
class RemoteObjectMeta:
    """An object listed in the storage bucket."""

    name: str
    """Object name (e.g. "Save.zip")"""

    updated_at: Optional[str] = None
    """RFC3339 last-modified timestamp reported by the server"""

    @property
    def mtime(self) -> Optional[float]:
        """Last modification time (Unix timestamp)."""
        return parse_iso_timestamp(self.updated_at)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RemoteObjectMeta":
        """Create RemoteObjectMeta from a listing record."""
        updated_at = data.get("updated_at")
        return cls(
            name=str(data.get("name", "")),
            updated_at=updated_at if isinstance(updated_at, str) else None,
        )


@dataclass
class SyncStatus:
    """Snapshot of local and remote modification times for display.

    Times are whole Unix seconds. When only one side exists that side is
    "newer"; when both exist and are equal, neither is.
    """

    save_local_mtime: Optional[int] = None
    save_cloud_mtime: Optional[int] = None
    mods_local_mtime: Optional[int] = None
    mods_cloud_mtime: Optional[int] = None
    save_local_newer: bool = False
    save_cloud_newer: bool = False
    mods_local_newer: bool = False
    mods_cloud_newer: bool = False
    save_path_used: Optional[str] = None
    """Local save path this status was computed for"""

    mods_path_used: Optional[str] = None
    """Local mods path this status was computed for"""

    backend: Optional[str] = None
    """Name of the backend that produced the remote times"""

    remote_error: Optional[str] = None
    """Why remote times are missing, if fetching them failed"""

    def to_dict(self) -> dict[str, Any]:
        """Convert status to dictionary for JSON serialization."""
        return asdict(self)
