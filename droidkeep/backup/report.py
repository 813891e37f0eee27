"""Summary and restore guide generation."""

from pathlib import Path
from typing import Dict

from ..adb.device import DeviceInfo
from ..adb.root import RootAccess
from ..tasks.base import TaskStatus
from ..tasks.registry import TaskRegistry
from ..util.logging import get_logger
from ..util.timeutil import format_duration
from .manifest import BackupManifest, ManifestManager
from .runner import RunReport
from .session import BackupSession

logger = get_logger(__name__)

STATUS_MARKS = {
    TaskStatus.SUCCESS: "OK     ",
    TaskStatus.FAILED: "FAILED ",
    TaskStatus.SKIPPED: "SKIPPED",
}

RULE = "=" * 72


def render_summary(report: RunReport, device_info: DeviceInfo, root: RootAccess, session_dir: Path) -> str:
    lines = [
        "Android Backup Summary",
        RULE,
        f"Device:     {device_info.display_name}",
        f"Android:    {device_info.android_version} (SDK {device_info.sdk_version})",
        f"Root:       {root.label}",
        f"Started:    {report.started_at:%Y-%m-%d %H:%M:%S}",
        f"Duration:   {format_duration(report.duration)}",
        f"Location:   {session_dir}",
        "",
        "Tasks",
        "-" * 72,
    ]

    for result in report.results:
        line = f"[{STATUS_MARKS[result.status]}] {result.task_id:<17} {format_duration(result.duration):>7}  {result.message}"
        if result.used_fallback:
            line += " (rooted path failed, unprivileged fallback used)"
        lines.append(line)

    lines += [
        "",
        f"Succeeded: {len(report.succeeded)}  Failed: {len(report.failed)}  Skipped: {len(report.skipped)}",
    ]
    return "\n".join(lines) + "\n"


def render_restore_guide(
    report: RunReport,
    registry: TaskRegistry,
    device_info: DeviceInfo,
    root: RootAccess
) -> str:
    """Restore manual covering exactly the tasks that succeeded in this run."""
    lines = [
        "Android Restore Guide",
        RULE,
        f"Backup of:  {device_info.display_name}, Android {device_info.android_version}",
        f"Created:    {report.started_at:%Y-%m-%d %H:%M:%S}",
        f"Root:       {root.label}",
        "",
        "All commands below are run from inside this backup directory.",
        "",
        "Before you start",
        "-" * 72,
        "1. Install Android platform tools so that `adb` is on your PATH.",
        "2. On the target device enable Developer options > USB debugging and accept the computer's key.",
        "3. Check the connection with `adb devices`.",
        "4. Restore in the order below: apps before their data, files before media apps.",
    ]
    if any(r.elevated for r in report.succeeded):
        lines.append("5. Steps using `su` need a rooted target device; Magisk may ask you to grant access.")
    lines.append("")

    succeeded = report.succeeded
    if not succeeded:
        lines += ["No task completed, so there is nothing to restore from this backup.", ""]

    for index, result in enumerate(succeeded, start=1):
        task = registry.get(result.task_id)
        lines.append(f"{index}. {task.title}")
        lines.append("-" * 72)
        if result.message:
            lines.append(f"Saved: {result.message}")
        lines.extend(task.restore_steps(result, root))
        lines.append("")

    missing = [r for r in report.results if r.status is not TaskStatus.SUCCESS]
    if missing:
        lines.append("Not in this backup")
        lines.append("-" * 72)
        for result in missing:
            reason = "skipped" if result.status is TaskStatus.SKIPPED else "failed"
            lines.append(f"- {result.title or result.task_id} ({reason}: {result.message})")
        lines.append("Their data was not saved; back it up separately before wiping the device.")
        lines.append("")

    if not root.rooted:
        root_only = [task.title for task in registry if task.requires_root]
        lines += [
            "About root",
            "-" * 72,
            "The device was not rooted, so this backup has no private app data, no"
            " Wi-Fi passwords and no raw contacts/call log/SMS databases.",
        ]
        if root_only:
            lines.append(f"Root-only tasks not offered: {', '.join(root_only)}.")
        lines.append("")

    return "\n".join(lines)


def write_reports(
    session: BackupSession,
    report: RunReport,
    registry: TaskRegistry,
    device_info: DeviceInfo,
    root: RootAccess
) -> Dict[str, Path]:
    """Write summary.txt, restore_guide.txt and the manifest into the session."""
    session.summary_path.write_text(
        render_summary(report, device_info, root, session.path), encoding="utf-8"
    )
    session.restore_guide_path.write_text(
        render_restore_guide(report, registry, device_info, root), encoding="utf-8"
    )

    manager = ManifestManager(session.path)
    manifest: BackupManifest = manager.create_manifest(session.name, device_info, root, report.results)
    manager.save_manifest(manifest)

    logger.info(f"Summary written to {session.summary_path}")
    logger.info(f"Restore guide written to {session.restore_guide_path}")

    return {
        "summary": session.summary_path,
        "restore_guide": session.restore_guide_path,
        "manifest": manager.manifest_path,
    }

