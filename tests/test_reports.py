"""Tests for summary and restore guide generation."""

import json

import pytest

from droidkeep.adb.root import RootAccess
from droidkeep.backup.report import render_restore_guide, render_summary, write_reports
from droidkeep.backup.runner import RunReport
from droidkeep.backup.session import BackupSession
from droidkeep.tasks.base import TaskResult, TaskStatus
from droidkeep.tasks.registry import TaskRegistry


def _result(task_id, status=TaskStatus.SUCCESS, message="ok", **kwargs):
    return TaskResult(task_id=task_id, title=TaskRegistry().get(task_id).title,
                      status=status, message=message, **kwargs)


@pytest.fixture
def mixed_report():
    return RunReport(results=[
        _result("contacts", artifacts=["contacts/contacts.vcf"]),
        _result("aegis", TaskStatus.FAILED, "Aegis vault export not found"),
        _result("app_data", TaskStatus.SKIPPED, "requires root"),
    ])


class TestRestoreGuide:
    """Test the restore guide content."""

    def test_unrooted_guide(self, mixed_report, device_info):
        """Test the guide of an unrooted run with failed and skipped tasks."""
        guide = render_restore_guide(mixed_report, TaskRegistry(), device_info, RootAccess())

        assert "1. Contacts" in guide
        assert "contacts.vcf" in guide
        assert "Not in this backup" in guide
        assert "Aegis 2FA vault (failed: Aegis vault export not found)" in guide
        assert "App data (skipped: requires root)" in guide
        assert "About root" in guide
        assert "contacts2.db" not in guide

    def test_rooted_guide_uses_database_steps(self, device_info, su_root):
        """Test that an elevated result gets the rooted database steps."""
        report = RunReport(results=[
            _result("sms", artifacts=["sms/sms.json", "sms/mmssms.db"], elevated=True),
        ])

        guide = render_restore_guide(report, TaskRegistry(), device_info, su_root)

        assert "mmssms.db" in guide
        assert "su -c" in guide
        assert "About root" not in guide
        assert "Not in this backup" not in guide

    def test_only_successful_tasks_get_sections(self, mixed_report, device_info):
        """Test that failed tasks get no restore section."""
        guide = render_restore_guide(mixed_report, TaskRegistry(), device_info, RootAccess())

        assert "2. Aegis 2FA vault" not in guide
        assert "In Aegis choose" not in guide

    def test_nothing_succeeded(self, device_info):
        """Test the guide when no task succeeded."""
        report = RunReport(results=[_result("aegis", TaskStatus.FAILED, "missing")])

        guide = render_restore_guide(report, TaskRegistry(), device_info, RootAccess())

        assert "nothing to restore" in guide


class TestSummary:
    """Test the plain text summary."""

    def test_summary_lists_every_task(self, mixed_report, device_info, tmp_path):
        """Test that the summary lists every task with its status."""
        summary = render_summary(mixed_report, device_info, RootAccess(), tmp_path)

        assert "google Pixel 6" in summary
        assert "[OK     ] contacts" in summary
        assert "[FAILED ] aegis" in summary
        assert "[SKIPPED] app_data" in summary
        assert "Succeeded: 1  Failed: 1  Skipped: 1" in summary

    def test_fallback_is_noted(self, device_info, tmp_path):
        """Test that the unprivileged fallback is noted."""
        report = RunReport(results=[_result("wifi", used_fallback=True)])

        summary = render_summary(report, device_info, RootAccess(), tmp_path)

        assert "unprivileged fallback" in summary


class TestWriteReports:
    """Test that reports land in the session directory."""

    def test_write_reports(self, mixed_report, device_info, tmp_path):
        """Test that summary, guide and manifest are written."""
        session = BackupSession(tmp_path)
        with session:
            (session.path / "contacts").mkdir()
            (session.path / "contacts" / "contacts.vcf").write_text("BEGIN:VCARD\nEND:VCARD\n")
            paths = write_reports(session, mixed_report, TaskRegistry(), device_info, RootAccess())

        assert paths["summary"].read_text().startswith("Android Backup Summary")
        assert "Android Restore Guide" in paths["restore_guide"].read_text()
        assert paths["manifest"].exists()

        data = json.loads((session.path / "manifest.json").read_text())
        assert data["id"] == session.name
        assert data["root_status"] == "none"
        assert [t["status"] for t in data["tasks"]] == ["success", "failed", "skipped"]
        assert data["artifacts"][0]["path"] == "contacts/contacts.vcf"
        assert data["artifacts"][0]["sha256"]
