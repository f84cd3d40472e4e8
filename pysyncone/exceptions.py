"""Exceptions raised by pysyncone."""

from typing import Optional

PROGRESS_WARNING_PREFIX = "PROGRESS_WARNING:"


class SynconeError(Exception):
    """Base exception for all sync errors."""


class SynconeConfigError(SynconeError):
    """A required path or credential is not configured."""


class SynconeFileError(SynconeError):
    """A local filesystem operation failed."""


class SynconeArchiveError(SynconeFileError):
    """An archive could not be opened or contains unsafe entries."""


class SynconeNetworkError(SynconeError):
    """HTTP transport failure or non-success response from the storage API."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class SynconeUploadError(SynconeNetworkError):
    """Uploading an object failed."""


class SynconeDownloadError(SynconeNetworkError):
    """Downloading an object failed."""


class SynconeInvalidResponseError(SynconeNetworkError):
    """The storage API returned a body we could not interpret."""


class ProgressRegressionError(SynconeError):
    """A transfer would overwrite more advanced progress with less.

    This is a warning for the user rather than a failure: repeating the
    operation with ``force=True`` bypasses the check.
    """

    PULL = "pull"
    PUSH = "push"

    def __init__(self, direction: str, local_value: float, remote_value: float):
        self.direction = direction
        self.local_value = local_value
        self.remote_value = remote_value
        self.warning_text = self._build_text()
        super().__init__(f"{PROGRESS_WARNING_PREFIX}{self.warning_text}")

    def _build_text(self) -> str:
        values = (
            f"Your lifetime earnings: {self.local_value:.0f}\n"
            f"Cloud lifetime earnings: {self.remote_value:.0f}"
        )
        if self.direction == self.PULL:
            return (
                "The cloud save appears to be behind your local save.\n\n"
                f"{values}\n\n"
                "Fetching would overwrite your more advanced local save."
            )
        return (
            "Your local save appears to be behind the cloud version.\n\n"
            f"{values}\n\n"
            "Uploading would overwrite a more advanced save."
        )
