"""ADB shell command execution utilities."""

import shlex
from typing import Optional

from .device import ADBDevice, ADBError
from .root import RootAccess, RootRequiredError
from ..util.logging import get_logger

logger = get_logger(__name__)


class ShellCommand:
    """Utility for executing shell commands on Android device."""

    def __init__(self, device: ADBDevice, root: Optional[RootAccess] = None):
        self.device = device
        self.root = root or RootAccess()

    def execute(self, command: str, timeout: Optional[int] = None) -> str:
        """Execute a shell command on the device."""
        return self.device._run_command(["shell", command], timeout=timeout)

    def execute_elevated(self, command: str, timeout: Optional[int] = None) -> str:
        """Execute a command as root; raises RootRequiredError when unrooted."""
        return self.execute(self.root.wrap(command), timeout)

    def file_exists(self, path: str, elevated: bool = False) -> bool:
        """Check if a file or directory exists on the device."""
        command = f"test -e {shlex.quote(path)} && echo exists"
        try:
            result = self.execute_elevated(command) if elevated else self.execute(command)
            return "exists" in result
        except (ADBError, RootRequiredError):
            return False

    def is_directory(self, path: str) -> bool:
        """Check if path is a directory."""
        try:
            result = self.execute(f"test -d {shlex.quote(path)} && echo directory")
            return "directory" in result
        except ADBError:
            return False

    def get_file_size(self, path: str) -> Optional[int]:
        """Size in bytes of a device file, or None if it cannot be read."""
        try:
            output = self.execute(f"stat -c %s {shlex.quote(path)}")
            return int(output.strip())
        except (ADBError, ValueError) as e:
            logger.debug(f"Could not get file size for {path}: {e}")
            return None
