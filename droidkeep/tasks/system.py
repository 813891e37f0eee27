"""Device information, settings and Wi-Fi tasks."""

from typing import List

from ..adb.device import ADBError
from ..adb.root import RootAccess
from ..util.logging import get_logger
from .base import BackupTask, TaskContext, TaskError, TaskResult

logger = get_logger(__name__)

SETTINGS_NAMESPACES = ("system", "secure", "global")

PACKAGE_COUNT_COMMAND = "pm list packages -3"

WIFI_CONFIG_PATHS = (
    "/data/misc/apexdata/com.android.wifi/WifiConfigStore.xml",
    "/data/misc/wifi/WifiConfigStore.xml",
    "/data/misc/wifi/wpa_supplicant.conf",
)


class DeviceInfoTask(BackupTask):
    """Record what device this backup came from."""

    task_id = "device_info"
    title = "Device information"
    description = "Build properties, storage usage and installed package count"

    SECTIONS = (
        ("Build properties", "getprop"),
        ("Storage", "df -h /sdcard"),
        ("Battery", "dumpsys battery"),
        ("Kernel", "cat /proc/version"),
    )

    def run(self, context: TaskContext) -> TaskResult:
        info = context.device.get_device_info()
        lines = [
            f"Device: {info.display_name}",
            f"Android: {info.android_version} (SDK {info.sdk_version})",
            f"Root: {context.root.label}",
            "",
        ]

        for heading, command in self.SECTIONS:
            lines.append(f"=== {heading} ===")
            try:
                lines.append(context.shell.execute(command))
            except ADBError as e:
                logger.warning(f"{command!r} failed: {e}")
                lines.append(f"[unavailable: {command}]")
            lines.append("")

        lines.append("=== Third-party packages ===")
        try:
            packages = context.shell.execute(PACKAGE_COUNT_COMMAND)
            package_count = len([line for line in packages.splitlines() if line.startswith("package:")])
            lines.append(f"{package_count} installed")
        except ADBError as e:
            logger.warning(f"{PACKAGE_COUNT_COMMAND!r} failed: {e}")
            lines.append(f"[unavailable: {PACKAGE_COUNT_COMMAND}]")

        output = context.task_dir(self) / "device_info.txt"
        output.write_text("\n".join(lines) + "\n", encoding="utf-8")

        return self.success(info.display_name, [context.relative(output)])

    def restore_steps(self, result: TaskResult, root: RootAccess) -> List[str]:
        return [
            "device_info/device_info.txt is for reference only.",
            "Compare its Android version with the target device before restoring app data;"
            " app data from a newer Android release may not load on an older one.",
        ]


class SettingsTask(BackupTask):
    """Dump the system, secure and global settings tables."""

    task_id = "settings"
    title = "System settings"
    description = "settings list system/secure/global"

    def run(self, context: TaskContext) -> TaskResult:
        task_dir = context.task_dir(self)
        artifacts = []

        for namespace in SETTINGS_NAMESPACES:
            try:
                output = context.shell.execute(f"settings list {namespace}")
            except ADBError as e:
                logger.warning(f"Could not list {namespace} settings: {e}")
                continue

            target = task_dir / f"settings_{namespace}.txt"
            target.write_text(output + "\n", encoding="utf-8")
            artifacts.append(context.relative(target))

        if not artifacts:
            raise TaskError("No settings namespace could be read")

        return self.success(f"{len(artifacts)}/{len(SETTINGS_NAMESPACES)} namespaces dumped", artifacts)

    def restore_steps(self, result: TaskResult, root: RootAccess) -> List[str]:
        return [
            "The files in settings/ hold one `key=value` per line.",
            "Do not replay them wholesale; reapply only the values you need:",
            "  adb shell settings put <system|secure|global> <key> <value>",
        ]


class WifiTask(BackupTask):
    """Saved Wi-Fi networks; passwords only with root."""

    task_id = "wifi"
    title = "Wi-Fi networks"
    description = "WifiConfigStore.xml with root, otherwise the saved network list"

    def run(self, context: TaskContext) -> TaskResult:
        task_dir = context.task_dir(self)
        used_fallback = False

        if context.root.rooted:
            for path in WIFI_CONFIG_PATHS:
                if not context.shell.file_exists(path, elevated=True):
                    continue
                target = task_dir / path.rsplit("/", 1)[-1]
                if context.puller.pull_elevated(path, target, context.root):
                    return self.success(
                        f"Pulled {path}",
                        [context.relative(target)],
                        elevated=True,
                        details={"source_path": path},
                    )
            logger.warning("No Wi-Fi config store could be pulled as root; listing networks instead")
            used_fallback = True

        try:
            output = context.shell.execute("cmd wifi list-networks")
        except ADBError as e:
            raise TaskError(f"Could not list Wi-Fi networks: {e}") from e

        target = task_dir / "wifi_networks.txt"
        target.write_text(output + "\n", encoding="utf-8")
        count = max(len(output.splitlines()) - 1, 0)  # header line

        return self.success(
            f"{count} saved networks (no passwords)",
            [context.relative(target)],
            used_fallback=used_fallback,
        )

    def restore_steps(self, result: TaskResult, root: RootAccess) -> List[str]:
        if result.elevated:
            source = result.details.get("source_path", WIFI_CONFIG_PATHS[0])
            config_name = source.rsplit("/", 1)[-1]
            return [
                f"wifi/{config_name} contains every saved network including passwords.",
                "On a rooted target device with Wi-Fi turned off:",
                f"  adb push wifi/{config_name} /data/local/tmp/",
                f"  adb shell su -c 'cp /data/local/tmp/{config_name} {source}'",
                f"  adb shell su -c 'chown system:system {source} && chmod 600 {source}'",
                "Reboot, then turn Wi-Fi back on.",
                "Without root, open the file and re-enter the networks by hand (PreSharedKey holds each password).",
            ]
        return [
            "wifi/wifi_networks.txt lists network names and security types only.",
            "Re-join each network on the new device and enter its password manually.",
        ]
