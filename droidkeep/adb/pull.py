"""ADB file pulling utilities."""

import shlex
from pathlib import Path

from .device import ADBDevice, ADBError
from .root import RootAccess, RootRequiredError
from .shell import ShellCommand
from ..util.logging import get_logger
from ..util.paths import ensure_directory, format_size

logger = get_logger(__name__)


class FilePuller:
    """Utility for pulling files from Android device via ADB."""

    def __init__(self, device: ADBDevice, timeout: int = 1800):
        self.device = device
        self.timeout = timeout

    def pull_file(self, device_path: str, local_path: Path, verify_size: bool = True) -> bool:
        """Pull a single file from device to local storage."""
        try:
            ensure_directory(local_path.parent)

            logger.debug(f"Pulling {device_path} -> {local_path}")
            self.device._run_command(["pull", device_path, str(local_path)], timeout=self.timeout)

            if not local_path.exists():
                logger.error(f"File was not pulled successfully: {local_path}")
                return False

            if verify_size and not self._verify_pulled_file(device_path, local_path):
                # Don't fail the operation, just warn
                logger.warning(f"Size verification failed for {local_path}")

            return True

        except ADBError as e:
            logger.error(f"Failed to pull {device_path}: {e}")
            return False

    def pull_directory(self, device_path: str, local_path: Path) -> bool:
        """Pull entire directory from device into local_path."""
        try:
            logger.info(f"Pulling directory {device_path} -> {local_path}")
            ensure_directory(local_path)

            self.device._run_command(["pull", device_path, str(local_path)], timeout=self.timeout)

            logger.info(f"Successfully pulled directory {device_path}")
            return True

        except ADBError as e:
            logger.error(f"Failed to pull directory {device_path}: {e}")
            return False

    def pull_elevated(self, device_path: str, local_path: Path, root: RootAccess) -> bool:
        """Copy a root-only file by streaming `cat` through the elevated shell."""
        try:
            command = root.wrap(f"cat {shlex.quote(device_path)}")
            size = self.device.stream_to_file(command, local_path, timeout=self.timeout)
        except (ADBError, RootRequiredError) as e:
            logger.error(f"Failed to pull {device_path} as root: {e}")
            return False

        if size == 0:
            logger.error(f"Elevated pull of {device_path} produced an empty file")
            local_path.unlink(missing_ok=True)
            return False

        logger.debug(f"Pulled {device_path} as root ({format_size(size)})")
        return True

    def _verify_pulled_file(self, device_path: str, local_path: Path) -> bool:
        """Verify pulled file integrity (basic size check)."""
        device_size = ShellCommand(self.device).get_file_size(device_path)
        if device_size is None:
            return True

        local_size = local_path.stat().st_size
        if device_size != local_size:
            logger.warning(
                f"Size mismatch for {local_path}: "
                f"device={format_size(device_size)}, local={format_size(local_size)}"
            )
            return False

        return True
