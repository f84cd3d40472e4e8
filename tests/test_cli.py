"""Unit tests for the Syncone CLI commands."""

import json
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from pysyncone.cli import main
from pysyncone.config import SyncConfig, load_config, save_config
from pysyncone.exceptions import (
    PROGRESS_WARNING_PREFIX,
    ProgressRegressionError,
    SynconeConfigError,
    SynconeUploadError,
)
from pysyncone.models import SyncStatus
from pysyncone.sync import SyncTarget


@pytest.fixture
def runner():
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def config_path():
    """Path of a config file in a fresh directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "syncone_config.json"


def invoke(runner, config_path, *args, **kwargs):
    return runner.invoke(main, ["--config", str(config_path), *args], **kwargs)


def pull_warning():
    return ProgressRegressionError(ProgressRegressionError.PULL, 500, 100)


class TestMainGroup:
    """Tests for the main CLI group."""

    def test_main_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Syncone" in result.output
        for command in ("config", "status", "pull", "push"):
            assert command in result.output

    def test_pull_help_lists_options(self, runner):
        result = runner.invoke(main, ["pull", "--help"])
        assert result.exit_code == 0
        assert "--target" in result.output
        assert "--force" in result.output
        assert "--yes" in result.output


class TestConfigCommands:
    """Tests for config set / config show."""

    def test_set_then_show(self, runner, config_path):
        result = invoke(
            runner,
            config_path,
            "config",
            "set",
            "--save-path",
            "/game/saves",
            "--supabase-key",
            "supersecretkey",
        )
        assert result.exit_code == 0
        assert load_config(config_path) == SyncConfig(
            save_path="/game/saves", supabase_key="supersecretkey"
        )

        result = invoke(runner, config_path, "--json", "config", "show")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["save_path"] == "/game/saves"
        assert data["supabase_key"] == "**********tkey"
        assert data["cloud_path"] is None

    def test_set_keeps_other_values(self, runner, config_path):
        save_config(SyncConfig(save_path="/s", mods_path="/m"), config_path)

        result = invoke(runner, config_path, "config", "set", "--cloud-path", "/c")

        assert result.exit_code == 0
        assert load_config(config_path) == SyncConfig(
            save_path="/s", mods_path="/m", cloud_path="/c"
        )

    def test_empty_value_clears(self, runner, config_path):
        save_config(SyncConfig(save_path="/s", cloud_path="/c"), config_path)

        result = invoke(runner, config_path, "config", "set", "--cloud-path", "")

        assert result.exit_code == 0
        assert load_config(config_path).cloud_path is None
        assert load_config(config_path).save_path == "/s"

    def test_show_mode(self, runner, config_path):
        save_config(
            SyncConfig(supabase_url="u", supabase_key="k", bucket_name="b"),
            config_path,
        )

        result = invoke(runner, config_path, "config", "show")

        assert result.exit_code == 0
        assert "Supabase Storage" in result.output
        assert "(not set)" in result.output

    def test_broken_config_file(self, runner, config_path):
        config_path.write_text("{oops")

        result = invoke(runner, config_path, "config", "show")

        assert result.exit_code == 1
        assert "Error:" in result.output


class TestStatusCommand:
    """Tests for the status command."""

    @patch("pysyncone.cli.get_status")
    def test_status_json(self, mock_get_status, runner, config_path):
        mock_get_status.return_value = SyncStatus(
            save_local_mtime=10,
            save_cloud_mtime=20,
            save_cloud_newer=True,
            backend="mirror",
        )

        result = invoke(runner, config_path, "--json", "status")

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["save_cloud_newer"] is True
        assert data["backend"] == "mirror"
        assert data["mods_local_mtime"] is None

    @patch("pysyncone.cli.get_status")
    def test_status_table(self, mock_get_status, runner, config_path):
        mock_get_status.return_value = SyncStatus(
            backend="supabase", remote_error="List failed: 503"
        )

        result = invoke(runner, config_path, "status")

        assert result.exit_code == 0
        assert "Save" in result.output
        assert "Remote unavailable" in result.output

    def test_status_unconfigured(self, runner, config_path):
        result = invoke(runner, config_path, "--json", "status")

        assert result.exit_code == 0
        assert json.loads(result.output) == SyncStatus().to_dict()


class TestTransferCommands:
    """Tests for pull and push."""

    @patch("pysyncone.cli.pull")
    def test_pull_success(self, mock_pull, runner, config_path):
        save_config(SyncConfig(save_path="/s", mods_path="/m"), config_path)
        mock_pull.return_value = "Save fetched from cloud."

        result = invoke(runner, config_path, "pull", "--target", "save")

        assert result.exit_code == 0
        assert "Save fetched from cloud." in result.output
        mock_pull.assert_called_once_with(
            SyncConfig(save_path="/s", mods_path="/m"), SyncTarget.SAVE, force=False
        )

    @patch("pysyncone.cli.push")
    def test_push_defaults_to_both(self, mock_push, runner, config_path):
        mock_push.return_value = "Save uploaded to cloud. Mods uploaded to cloud."

        result = invoke(runner, config_path, "push")

        assert result.exit_code == 0
        assert mock_push.call_args[0][1] == SyncTarget.BOTH
        assert mock_push.call_args[1] == {"force": False}

    @patch("pysyncone.cli.push")
    def test_push_force_flag(self, mock_push, runner, config_path):
        mock_push.return_value = "Mods uploaded to Supabase."

        result = invoke(runner, config_path, "push", "-t", "mods", "--force")

        assert result.exit_code == 0
        mock_push.assert_called_once_with(SyncConfig(), SyncTarget.MODS, force=True)

    @patch("pysyncone.cli.pull")
    def test_warning_confirmed(self, mock_pull, runner, config_path):
        mock_pull.side_effect = [pull_warning(), "Save fetched from Supabase."]

        result = invoke(runner, config_path, "pull", input="y\n")

        assert result.exit_code == 0
        assert "Your lifetime earnings: 500" in result.output
        assert "Proceed anyway?" in result.output
        assert "Save fetched from Supabase." in result.output
        assert mock_pull.call_count == 2
        assert mock_pull.call_args_list[0][1] == {"force": False}
        assert mock_pull.call_args_list[1][1] == {"force": True}

    @patch("pysyncone.cli.pull")
    def test_warning_declined(self, mock_pull, runner, config_path):
        mock_pull.side_effect = [pull_warning()]

        result = invoke(runner, config_path, "pull", input="n\n")

        assert result.exit_code == 1
        assert "Cancelled." in result.output
        assert mock_pull.call_count == 1

    @patch("pysyncone.cli.push")
    def test_yes_skips_prompt(self, mock_push, runner, config_path):
        mock_push.side_effect = [
            ProgressRegressionError(ProgressRegressionError.PUSH, 100, 500),
            "Save uploaded to Supabase.",
        ]

        result = invoke(runner, config_path, "push", "--yes")

        assert result.exit_code == 0
        assert "Proceed anyway?" not in result.output
        assert mock_push.call_args_list[1][1] == {"force": True}

    @patch("pysyncone.cli.pull")
    def test_json_warning_is_reported(self, mock_pull, runner, config_path):
        """Without --yes, JSON mode reports the tagged warning and stops."""
        mock_pull.side_effect = [pull_warning()]

        result = invoke(runner, config_path, "--json", "pull")

        assert result.exit_code == 1
        assert '"ok": false' in result.output
        assert PROGRESS_WARNING_PREFIX in result.output
        assert mock_pull.call_count == 1

    @patch("pysyncone.cli.pull")
    def test_config_error(self, mock_pull, runner, config_path):
        mock_pull.side_effect = SynconeConfigError("Save path is not set")

        result = invoke(runner, config_path, "pull")

        assert result.exit_code == 1
        assert "Error: Save path is not set" in result.output

    @patch("pysyncone.cli.push")
    def test_upload_error_json(self, mock_push, runner, config_path):
        mock_push.side_effect = SynconeUploadError(
            "Upload failed: 403 denied", status_code=403
        )

        result = invoke(runner, config_path, "--json", "push")

        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data == {"ok": False, "message": "Upload failed: 403 denied"}

    def test_invalid_target(self, runner, config_path):
        result = invoke(runner, config_path, "pull", "--target", "everything")
        assert result.exit_code == 2
