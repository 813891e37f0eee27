"""APK, app data and legacy adb backup tasks."""

import posixpath
import shlex
import tarfile
from pathlib import Path
from typing import List

from tqdm import tqdm

from ..adb.device import ADBError
from ..adb.package import PackageManager
from ..adb.root import RootAccess
from ..util.logging import get_logger
from ..util.paths import format_size, safe_filename
from .base import BackupTask, TaskContext, TaskError, TaskResult

logger = get_logger(__name__)

# Legacy backups of a device that refuses or is not confirmed are only a header
MIN_ADB_BACKUP_BYTES = 1024


class ApkTask(BackupTask):
    """Pull installed APKs, including split APKs."""

    task_id = "apks"
    title = "Installed apps (APKs)"
    description = "Base and split APKs of every user-installed app"

    def run(self, context: TaskContext) -> TaskResult:
        task_dir = context.task_dir(self)
        package_manager = PackageManager(context.device)
        packages = package_manager.list_packages(include_system=context.config.tasks.include_system_apps)

        if not packages:
            return self.success("No user-installed packages")

        (task_dir / "packages.txt").write_text("\n".join(packages) + "\n", encoding="utf-8")

        saved, failed = [], []
        with tqdm(total=len(packages), desc="Backing up APKs", unit="apk") as pbar:
            for package in packages:
                pbar.set_postfix_str(package)
                if self._backup_package(context, package_manager, package, task_dir / safe_filename(package)):
                    saved.append(package)
                else:
                    failed.append(package)
                pbar.update(1)

        if not saved:
            raise TaskError(f"No APK could be pulled ({len(failed)} packages failed)")

        message = f"{len(saved)}/{len(packages)} packages"
        if failed:
            message += f" (failed: {', '.join(failed[:5])}{'...' if len(failed) > 5 else ''})"

        artifacts = [context.relative(task_dir / "packages.txt")]
        artifacts += [context.relative(task_dir / safe_filename(p)) for p in saved]
        return self.success(message, artifacts)

    def _backup_package(self, context: TaskContext, package_manager: PackageManager,
                        package: str, package_dir: Path) -> bool:
        apk_paths = package_manager.get_apk_paths(package)
        if not apk_paths:
            logger.warning(f"No APK path for {package}")
            return False

        for apk_path in apk_paths:
            if not context.puller.pull_file(apk_path, package_dir / posixpath.basename(apk_path)):
                return False
        return True

    def restore_steps(self, result: TaskResult, root: RootAccess) -> List[str]:
        return [
            "Reinstall each app from its folder in apks/ (split APKs must be installed together):",
            "  adb install-multiple apks/<package>/*.apk",
            "Or, for every package at once:",
            "  for d in apks/*/; do adb install-multiple \"$d\"*.apk; done",
            "apks/packages.txt lists what was installed at backup time.",
        ]


class AppDataTask(BackupTask):
    """Archive each app's private /data/data directory (root only)."""

    task_id = "app_data"
    title = "App data"
    description = "tar of /data/data/<package> for each user app"
    requires_root = True

    def run(self, context: TaskContext) -> TaskResult:
        task_dir = context.task_dir(self)
        packages = PackageManager(context.device).list_packages(
            include_system=context.config.tasks.include_system_apps
        )
        if not packages:
            return self.success("No user-installed packages", elevated=True)

        saved, failed = [], []
        total_bytes = 0
        with tqdm(total=len(packages), desc="Archiving app data", unit="app") as pbar:
            for package in packages:
                pbar.set_postfix_str(package)
                target = task_dir / f"{safe_filename(package)}.tar"
                command = context.root.wrap(f"tar -cf - -C /data/data {shlex.quote(package)}")
                try:
                    size = context.device.stream_to_file(command, target, timeout=context.config.pull_timeout)
                except ADBError as e:
                    logger.error(f"Failed to archive data of {package}: {e}")
                    failed.append(package)
                else:
                    # exec-out drops the remote exit status; su or tar errors arrive as file content
                    if size == 0 or not tarfile.is_tarfile(target):
                        logger.error(f"Archive of {package} is not a tar file ({format_size(size)}), discarding")
                        target.unlink(missing_ok=True)
                        failed.append(package)
                    else:
                        total_bytes += size
                        saved.append(context.relative(target))
                pbar.update(1)

        if not saved:
            raise TaskError(f"No app data could be archived ({len(failed)} packages failed)")

        message = f"{len(saved)}/{len(packages)} apps, {format_size(total_bytes)}"
        if failed:
            message += f" (failed: {len(failed)})"
        return self.success(message, saved, elevated=True)

    def restore_steps(self, result: TaskResult, root: RootAccess) -> List[str]:
        return [
            "Needs a rooted target device. Install the app first (see APK steps), open it once, then for each archive:",
            "  adb push app_data/<package>.tar /data/local/tmp/",
            "  adb shell su -c 'am force-stop <package>'",
            "  adb shell su -c 'tar -xf /data/local/tmp/<package>.tar -C /data/data'",
            "  adb shell su -c 'chown -R $(stat -c %u:%g /data/data/<package>) /data/data/<package>'",
            "  adb shell su -c 'restorecon -R /data/data/<package>'",
            "  adb shell rm /data/local/tmp/<package>.tar",
            "Apps bound to hardware keys (banking, some messengers) may refuse restored data.",
        ]


class LegacyAdbBackupTask(BackupTask):
    """Android's deprecated `adb backup` full backup."""

    task_id = "adb_backup"
    title = "Legacy adb backup"
    description = "adb backup -apk -shared -all (confirm on the device)"
    output_dir = "adb_backup"

    def run(self, context: TaskContext) -> TaskResult:
        target = context.task_dir(self) / "backup.ab"

        logger.warning("Unlock the device and confirm the backup on its screen (leave the password empty)")
        try:
            context.device.run_once(
                ["backup", "-apk", "-shared", "-all", "-f", str(target)],
                timeout=context.config.tasks.adb_backup_timeout,
            )
        except ADBError as e:
            raise TaskError(f"adb backup failed: {e}") from e

        size = target.stat().st_size if target.exists() else 0
        if size < MIN_ADB_BACKUP_BYTES:
            raise TaskError(
                f"adb backup produced {format_size(size)}; it was not confirmed on the device "
                "or the device excludes apps from adb backup (Android 12+)"
            )

        return self.success(f"backup.ab ({format_size(size)})", [context.relative(target)])

    def restore_steps(self, result: TaskResult, root: RootAccess) -> List[str]:
        return [
            "  adb restore adb_backup/backup.ab",
            "Confirm the restore on the device screen.",
            "Apps that opt out of backup are not contained in the archive.",
        ]
