"""Utility functions and constants for pysyncone."""

import math
from datetime import datetime, timezone
from typing import Optional

# =============================================================================
# Remote layout
# =============================================================================

# Object names in the storage bucket
SAVE_OBJECT_NAME: str = "Save.zip"
MODS_OBJECT_NAME: str = "Mods.zip"

# Subfolder names under the mirror folder
SAVE_FOLDER_NAME: str = "Save"
MODS_FOLDER_NAME: str = "Mods"

# =============================================================================
# Game data conventions
# =============================================================================

MONEY_FILE_NAME: str = "Money.json"
LIFETIME_EARNINGS_FIELD: str = "LifetimeEarnings"
SAVE_INSTANCE_PREFIX: str = "SaveGame_"

# =============================================================================
# User-facing result messages
# =============================================================================

NOTHING_TO_FETCH: str = "Nothing new to fetch – you already have the latest version."
NOTHING_TO_UPLOAD: str = "No local folders to upload."


# =============================================================================
# Timestamp utilities
# =============================================================================


def parse_iso_timestamp(timestamp_str: Optional[str]) -> Optional[float]:
    """Parse an RFC3339 timestamp from the storage API into a Unix timestamp.

    Args:
        timestamp_str: Timestamp string (e.g., "2025-01-15T10:30:00.000000Z")

    Returns:
        Seconds since the epoch, or None if the value is missing or invalid

    Examples:
        >>> parse_iso_timestamp("1970-01-01T00:01:00Z")
        60.0
        >>> parse_iso_timestamp("not a date") is None
        True
    """
    if not timestamp_str:
        return None

    try:
        # The 'Z' suffix indicates UTC time
        if timestamp_str.endswith("Z"):
            timestamp_str = timestamp_str[:-1] + "+00:00"

        try:
            dt = datetime.fromisoformat(timestamp_str)
        except ValueError:
            # Try without fractional seconds
            if "." not in timestamp_str:
                raise
            head, _, tail = timestamp_str.partition(".")
            offset = ""
            for sign in ("+", "-"):
                if sign in tail:
                    offset = sign + tail.split(sign, 1)[1]
                    break
            dt = datetime.fromisoformat(head + offset)

        # Timestamps without an offset are UTC
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt.timestamp()
    except (ValueError, AttributeError):
        return None


def to_unix_seconds(timestamp: Optional[float]) -> Optional[int]:
    """Truncate a timestamp to whole seconds, dropping pre-epoch values."""
    if timestamp is None or timestamp < 0 or math.isnan(timestamp):
        return None
    return int(timestamp)


def format_timestamp(timestamp: Optional[float]) -> str:
    """Format a Unix timestamp for display.

    Returns:
        Local time as "YYYY-MM-DD HH:MM:SS", or "-" when unknown
    """
    if timestamp is None:
        return "-"
    return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d %H:%M:%S")


def mask_secret(value: Optional[str], visible: int = 4) -> Optional[str]:
    """Mask a credential for display, keeping only its last characters.

    Examples:
        >>> mask_secret("abcdefgh")
        '****efgh'
        >>> mask_secret("abc")
        '***'
    """
    if value is None:
        return None
    if len(value) <= visible:
        return "*" * len(value)
    return "*" * (len(value) - visible) + value[-visible:]
