"""Internal storage and Aegis vault tasks."""

import posixpath
from typing import List

from ..adb.root import RootAccess
from ..util.logging import get_logger
from ..util.paths import directory_size, format_size
from .base import BackupTask, TaskContext, TaskError, TaskResult

logger = get_logger(__name__)


class InternalStorageTask(BackupTask):
    """Pull shared storage (photos, downloads, documents...)."""

    task_id = "internal_storage"
    title = "Internal storage"
    description = "adb pull of /sdcard (or the configured storage paths)"
    output_dir = "storage"

    def run(self, context: TaskContext) -> TaskResult:
        task_dir = context.task_dir(self)
        paths = context.config.tasks.storage_paths
        pulled, failed = [], []

        for device_path in paths:
            if context.puller.pull_directory(device_path, task_dir):
                pulled.append(device_path)
            else:
                failed.append(device_path)

        if not pulled:
            raise TaskError(f"Could not pull any storage path: {', '.join(failed)}")

        artifacts = []
        for device_path in pulled:
            # `adb pull /sdcard dir` creates dir/sdcard
            local = task_dir / posixpath.basename(device_path.rstrip("/"))
            if local.exists():
                artifacts.append(context.relative(local))

        message = f"{len(pulled)}/{len(paths)} paths, {format_size(directory_size(task_dir))}"
        if failed:
            message += f" (failed: {', '.join(failed)})"
        return self.success(message, artifacts, details={"device_paths": ", ".join(pulled)})

    def restore_steps(self, result: TaskResult, root: RootAccess) -> List[str]:
        steps = ["Push each pulled directory back to the same location:"]
        for artifact in result.artifacts:
            name = artifact.rsplit("/", 1)[-1]
            steps.append(f"  adb push {artifact}/. /{name}/")
        steps.append("Media apps may need a reboot (or a media rescan) to index restored files.")
        steps.append("Android/data and Android/obb are skipped by Android 11+ and are restored with their apps.")
        return steps


class AegisVaultTask(BackupTask):
    """Copy the Aegis authenticator vault export."""

    task_id = "aegis"
    title = "Aegis 2FA vault"
    description = "Pull the Aegis vault export (export it in Aegis first)"

    def run(self, context: TaskContext) -> TaskResult:
        vault_path = context.config.tasks.aegis_path

        if not context.shell.file_exists(vault_path):
            raise TaskError(
                f"Aegis vault export not found at {vault_path}. "
                "In Aegis open Settings > Import & Export > Export, save it to that path and retry."
            )

        target = context.task_dir(self) / posixpath.basename(vault_path)
        if not context.puller.pull_file(vault_path, target):
            raise TaskError(f"Failed to pull {vault_path}")

        logger.warning("The Aegis export stays on the device; delete it once the backup is verified")
        return self.success(f"Vault copied ({format_size(target.stat().st_size)})", [context.relative(target)])

    def restore_steps(self, result: TaskResult, root: RootAccess) -> List[str]:
        vault = result.artifacts[0] if result.artifacts else "aegis/aegis_vault.json"
        return [
            "Install Aegis Authenticator on the new device.",
            f"  adb push {vault} /sdcard/Download/",
            "In Aegis choose Settings > Import & Export > Import from file > Aegis, pick the file"
            " and enter the vault password if the export is encrypted.",
            "Delete the vault file from /sdcard/Download afterwards.",
        ]
