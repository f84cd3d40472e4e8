"""Unit tests for utility functions and models."""

from datetime import datetime

import pytest

from pysyncone.models import RemoteObjectMeta, SyncStatus
from pysyncone.utils import (
    format_timestamp,
    mask_secret,
    parse_iso_timestamp,
    to_unix_seconds,
)


class TestParseIsoTimestamp:
    """Tests for parse_iso_timestamp."""

    def test_negative_offset(self):
        assert parse_iso_timestamp("1970-01-01T00:00:00-01:00") == 3600.0

    def test_nanosecond_fraction_fallback(self):
        """Fractions longer than Python accepts are dropped."""
        value = parse_iso_timestamp("1970-01-01T00:00:05.123456789+00:00")
        assert int(value) == 5

    def test_not_a_string(self):
        assert parse_iso_timestamp(12345) is None


class TestToUnixSeconds:
    """Tests for to_unix_seconds."""

    def test_truncates(self):
        assert to_unix_seconds(1700000000.999) == 1700000000

    def test_nan(self):
        assert to_unix_seconds(float("nan")) is None

    def test_zero_is_valid(self):
        assert to_unix_seconds(0.0) == 0


class TestFormatTimestamp:
    """Tests for format_timestamp."""

    def test_unknown(self):
        assert format_timestamp(None) == "-"

    def test_local_time(self):
        expected = datetime.fromtimestamp(1_000_000).strftime("%Y-%m-%d %H:%M:%S")
        assert format_timestamp(1_000_000) == expected


class TestMaskSecret:
    """Tests for mask_secret."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, None),
            ("", ""),
            ("abc", "***"),
            ("abcd", "****"),
            ("abcdefgh", "****efgh"),
        ],
    )
    def test_mask(self, value, expected):
        assert mask_secret(value) == expected


class TestRemoteObjectMeta:
    """Tests for RemoteObjectMeta."""

    def test_from_dict(self):
        meta = RemoteObjectMeta.from_dict(
            {"name": "Save.zip", "updated_at": "1970-01-01T00:00:30Z", "id": "x"}
        )
        assert meta.name == "Save.zip"
        assert meta.mtime == 30.0

    def test_non_string_timestamp(self):
        meta = RemoteObjectMeta.from_dict({"name": "Mods.zip", "updated_at": 5})
        assert meta.updated_at is None
        assert meta.mtime is None


class TestSyncStatus:
    """Tests for SyncStatus."""

    def test_to_dict(self):
        status = SyncStatus(save_local_mtime=1, save_local_newer=True)
        data = status.to_dict()
        assert data["save_local_mtime"] == 1
        assert data["save_local_newer"] is True
        assert data["remote_error"] is None
        assert len(data) == 12
