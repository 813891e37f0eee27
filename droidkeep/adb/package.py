"""ADB package management utilities."""

import shlex
from typing import List

from .device import ADBDevice, ADBError
from .shell import ShellCommand
from ..util.logging import get_logger

logger = get_logger(__name__)


def _strip_package_prefix(output: str) -> List[str]:
    return [
        line.replace("package:", "", 1).strip()
        for line in output.split("\n")
        if line.startswith("package:")
    ]


class PackageManager:
    """Utility for querying packages on Android device."""

    def __init__(self, device: ADBDevice):
        self.device = device
        self.shell = ShellCommand(device)

    def list_packages(self, include_system: bool = False) -> List[str]:
        """List installed packages (third-party only unless include_system)."""
        cmd = "pm list packages"
        if not include_system:
            cmd += " -3"

        try:
            output = self.shell.execute(cmd)
        except ADBError as e:
            logger.error(f"Failed to list packages: {e}")
            return []

        packages = sorted(_strip_package_prefix(output))
        logger.debug(f"Found {len(packages)} packages")
        return packages

    def get_apk_paths(self, package_name: str) -> List[str]:
        """All APK paths of a package, base and splits."""
        try:
            output = self.shell.execute(f"pm path {shlex.quote(package_name)}")
        except ADBError as e:
            logger.warning(f"Failed to get APK path for {package_name}: {e}")
            return []

        return _strip_package_prefix(output)
