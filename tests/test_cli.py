"""Tests for the command line interface."""

from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner
from rich.console import Console

from droidkeep.adb.root import RootAccess
from droidkeep.cli import cli
from droidkeep.config import DroidKeepConfig


@pytest.fixture
def config(tmp_path):
    """Configuration writing into tmp_path with no disk space minimum."""
    return DroidKeepConfig(backup_root=tmp_path, min_disk_space_mb=0)


@pytest.fixture
def runner(config):
    """CliRunner with adb available and a wide console."""
    with patch("droidkeep.cli.get_config", return_value=config), \
            patch("droidkeep.cli.check_adb_available", return_value=True), \
            patch("droidkeep.cli.console", Console(width=200)):
        yield CliRunner()


@pytest.fixture
def device(device_info):
    """Mocked device that answers every adb command."""
    device = MagicMock()
    device.serial = device_info.serial
    device.get_device_info.return_value = device_info
    device._run_command.return_value = "screen_brightness=100"
    return device


class TestCli:
    """Test CLI commands."""

    def test_adb_missing(self, config):
        """Test the exit when adb is not installed."""
        with patch("droidkeep.cli.get_config", return_value=config), \
                patch("droidkeep.cli.check_adb_available", return_value=False):
            result = CliRunner().invoke(cli, ["devices"])

        assert result.exit_code == 1
        assert "ADB is not available" in result.output

    def test_devices_empty(self, runner):
        """Test the devices command without devices."""
        with patch("droidkeep.cli.list_devices", return_value=[]):
            result = runner.invoke(cli, ["devices"])

        assert result.exit_code == 0
        assert "No devices found" in result.output

    def test_tasks_catalog(self, runner):
        """Test the catalog listing with root markers."""
        result = runner.invoke(cli, ["tasks"])

        assert result.exit_code == 0
        assert "device_info" in result.output
        assert "requires root" in result.output

    def test_run_rejects_tasks_and_all(self, runner):
        """Test that --tasks and --all cannot be combined."""
        result = runner.invoke(cli, ["run", "--all", "--tasks", "sms"])
        assert result.exit_code == 2

    def test_run_invalid_selection(self, runner, device):
        """Test that a root-only task is refused with a usage exit code."""
        with patch("droidkeep.cli._get_target_device", return_value=device), \
                patch("droidkeep.cli.probe_root", return_value=RootAccess()):
            result = runner.invoke(cli, ["run", "--tasks", "app_data"])

        assert result.exit_code == 2
        assert "Requires root" in result.output

    def test_run_separator_only_selection(self, runner, device, tmp_path):
        """Test that a selection of bare separators is an error, not a no-op."""
        with patch("droidkeep.cli._get_target_device", return_value=device), \
                patch("droidkeep.cli.probe_root", return_value=RootAccess()):
            result = runner.invoke(cli, ["run", "--tasks", ","])

        assert result.exit_code == 2
        assert "Nothing selected" in result.output
        assert not list(tmp_path.glob("android_backup_*"))

    def test_run_settings(self, runner, device, tmp_path):
        """A full run writes the session with its reports."""
        with patch("droidkeep.cli._get_target_device", return_value=device), \
                patch("droidkeep.cli.probe_root", return_value=RootAccess()):
            result = runner.invoke(cli, ["run", "--tasks", "settings", "--skip-space-check"])

        assert result.exit_code == 0, result.output
        sessions = list(tmp_path.glob("android_backup_*"))
        assert len(sessions) == 1
        session = sessions[0]
        assert (session / "settings" / "settings_global.txt").exists()
        assert (session / "restore_guide.txt").exists()
        assert (session / "summary.txt").exists()
        assert (session / "manifest.yaml").exists()
        assert (session / "backup.log").exists()

    def test_run_failure_exit_code(self, runner, device, tmp_path):
        """Test that a failed task makes the run exit 1."""
        device._run_command.return_value = ""
        with patch("droidkeep.cli._get_target_device", return_value=device), \
                patch("droidkeep.cli.probe_root", return_value=RootAccess()):
            result = runner.invoke(cli, ["run", "--tasks", "aegis", "--skip-space-check"])

        assert result.exit_code == 1
        assert "aegis" in result.output

    def test_interactive_quit(self, runner, device, tmp_path):
        """Test that the menu asks again after bad input and quits on q."""
        with patch("droidkeep.cli._get_target_device", return_value=device), \
                patch("droidkeep.cli.probe_root", return_value=RootAccess()):
            result = runner.invoke(cli, ["run"], input="zzz\nq\n")

        assert result.exit_code == 0
        assert "Unknown task" in result.output
        assert "No tasks selected" in result.output
        assert not list(tmp_path.glob("android_backup_*"))

    def test_probe(self, runner, device, su_root):
        """Test the device and root access report."""
        device.get_storage_info.return_value = {"total": 2048, "used": 1024, "available": 1024}
        with patch("droidkeep.cli._get_target_device", return_value=device), \
                patch("droidkeep.cli.probe_root", return_value=su_root):
            result = runner.invoke(cli, ["probe"])

        assert result.exit_code == 0
        assert "rooted (su)" in result.output
        assert "Pixel 6" in result.output
