"""Backup module initialization."""

from .manifest import ArtifactEntry, BackupManifest, DeviceBackupInfo, ManifestManager, build_artifact_entries
from .report import render_restore_guide, render_summary, write_reports
from .runner import RunReport, TaskRunner
from .session import BackupSession, InsufficientSpaceError, check_disk_space

__all__ = [
    # session
    "BackupSession",
    "InsufficientSpaceError",
    "check_disk_space",
    # runner
    "RunReport",
    "TaskRunner",
    # manifest
    "ArtifactEntry",
    "BackupManifest",
    "DeviceBackupInfo",
    "ManifestManager",
    "build_artifact_entries",
    # report
    "render_restore_guide",
    "render_summary",
    "write_reports",
]
