"""Tests for directory modification-time scanning."""

import os
import tempfile
from pathlib import Path

import pytest

from pysyncone.exceptions import SynconeFileError
from pysyncone.sync.scanner import latest_mtime, local_mtime


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def _set_mtime(path: Path, mtime: float) -> None:
    os.utime(path, (mtime, mtime))


class TestLatestMtime:
    """Tests for latest_mtime."""

    def test_single_file(self, temp_dir):
        """A file root returns its own modification time."""
        f = temp_dir / "file.txt"
        f.write_text("x")
        _set_mtime(f, 1_000_000)

        assert latest_mtime(f) == 1_000_000

    def test_deep_file_is_newest(self, temp_dir):
        """A file deep in the tree wins over older directories."""
        nested = temp_dir / "a" / "b"
        nested.mkdir(parents=True)
        f = nested / "save.dat"
        f.write_text("data")

        _set_mtime(f, 5_000)
        _set_mtime(nested, 300)
        _set_mtime(temp_dir / "a", 200)
        _set_mtime(temp_dir, 100)

        assert latest_mtime(temp_dir) == 5_000

    def test_directory_mtime_counts(self, temp_dir):
        """Directories count, not only files."""
        sub = temp_dir / "sub"
        sub.mkdir()
        f = sub / "old.txt"
        f.write_text("old")

        _set_mtime(f, 100)
        _set_mtime(sub, 900)
        _set_mtime(temp_dir, 100)

        assert latest_mtime(temp_dir) == 900

    def test_root_mtime_counts(self, temp_dir):
        """The root's own mtime is included."""
        f = temp_dir / "old.txt"
        f.write_text("old")
        _set_mtime(f, 100)
        _set_mtime(temp_dir, 700)

        assert latest_mtime(temp_dir) == 700

    def test_missing_root_raises(self, temp_dir):
        """An unreadable root is an error."""
        with pytest.raises(SynconeFileError, match="Cannot read"):
            latest_mtime(temp_dir / "missing")

    def test_broken_symlink_skipped(self, temp_dir):
        """Descendants that cannot be read are skipped."""
        f = temp_dir / "real.txt"
        f.write_text("x")
        try:
            (temp_dir / "dangling").symlink_to(temp_dir / "nowhere")
        except (OSError, NotImplementedError):
            pytest.skip("symlinks not supported")

        _set_mtime(f, 1_234)
        _set_mtime(temp_dir, 1_000)

        assert latest_mtime(temp_dir) == 1_234


class TestLocalMtime:
    """Tests for the absence-tolerant helpers."""

    def test_missing_is_none(self, temp_dir):
        assert local_mtime(temp_dir / "missing") is None

    def test_existing_folder(self, temp_dir):
        _set_mtime(temp_dir, 4_242)
        assert local_mtime(temp_dir) == 4_242
