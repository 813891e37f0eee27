"""ADB device management and communication."""

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..util.logging import get_logger

logger = get_logger(__name__)


@dataclass
class DeviceInfo:
    """Information about an Android device."""

    serial: str
    model: str
    brand: str
    android_version: str
    sdk_version: str
    state: str = "device"

    @property
    def display_name(self) -> str:
        """Get a human-readable device name."""
        return f"{self.brand} {self.model} ({self.serial})"


class ADBError(Exception):
    """ADB command execution error."""
    pass


class ADBTimeoutError(ADBError):
    """ADB command did not finish within its timeout."""
    pass


class ADBDevice:
    """Represents an ADB-connected Android device."""

    def __init__(self, serial: str, adb_path: str = "adb", timeout: int = 30):
        self.serial = serial
        self.adb_path = adb_path
        self.timeout = timeout
        self._device_info: Optional[DeviceInfo] = None

    def _build_command(self, command: List[str]) -> List[str]:
        return [self.adb_path, "-s", self.serial] + command

    def run_once(self, command: List[str], timeout: Optional[int] = None) -> str:
        """Run an ADB command a single time and return its stripped stdout.

        No retry: for root detection, where a failure is an answer, and for commands that
        wait on the user, such as `adb backup`.
        """
        cmd = self._build_command(command)
        timeout = timeout or self.timeout

        try:
            logger.debug(f"Running ADB command: {' '.join(cmd)}")
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=timeout,
                check=True
            )
            return result.stdout.strip()
        except subprocess.CalledProcessError as e:
            detail = (e.stderr or e.stdout or "").strip()
            raise ADBError(f"ADB command failed: {' '.join(cmd)}\nError: {detail}") from e
        except subprocess.TimeoutExpired as e:
            raise ADBTimeoutError(f"ADB command timed out after {timeout}s: {' '.join(cmd)}") from e
        except FileNotFoundError as e:
            raise ADBError(f"ADB binary not found: {self.adb_path}") from e

    @retry(
        retry=retry_if_exception_type(ADBTimeoutError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    def _run_command(self, command: List[str], timeout: Optional[int] = None) -> str:
        """Run an ADB command, retrying transient timeouts."""
        return self.run_once(command, timeout=timeout)

    def shell(self, command: str, timeout: Optional[int] = None) -> str:
        """Run a shell command string on the device."""
        return self._run_command(["shell", command], timeout=timeout)

    def stream_to_file(self, command: str, local_path: Path, timeout: Optional[int] = None) -> int:
        """Run `adb exec-out <command>` and write its raw stdout to local_path.

        Returns the number of bytes written.
        """
        cmd = self._build_command(["exec-out", command])
        local_path.parent.mkdir(parents=True, exist_ok=True)

        logger.debug(f"Streaming ADB output: {' '.join(cmd)} > {local_path}")
        try:
            with open(local_path, "wb") as out:
                result = subprocess.run(
                    cmd,
                    stdout=out,
                    stderr=subprocess.PIPE,
                    timeout=timeout or self.timeout,
                )
        except subprocess.TimeoutExpired as e:
            local_path.unlink(missing_ok=True)
            raise ADBTimeoutError(f"ADB stream timed out: {' '.join(cmd)}") from e

        if result.returncode != 0:
            local_path.unlink(missing_ok=True)
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise ADBError(f"ADB stream failed: {' '.join(cmd)}\nError: {stderr}")

        return local_path.stat().st_size

    def get_device_info(self) -> DeviceInfo:
        """Get detailed device information."""
        if self._device_info is not None:
            return self._device_info

        props = {
            "model": self.shell("getprop ro.product.model"),
            "brand": self.shell("getprop ro.product.brand"),
            "android_version": self.shell("getprop ro.build.version.release"),
            "sdk_version": self.shell("getprop ro.build.version.sdk"),
        }

        self._device_info = DeviceInfo(serial=self.serial, state="device", **props)

        logger.info(f"Device info: {self._device_info.display_name}")
        return self._device_info

    def get_storage_info(self) -> Dict[str, int]:
        """Get storage information (used/available space)."""
        try:
            output = self.shell("df /sdcard")
            lines = output.strip().split("\n")

            if len(lines) >= 2:
                # filesystem, 1K-blocks, used, available, use%, mount
                parts = lines[1].split()
                if len(parts) >= 4:
                    return {
                        "total": int(parts[1]) * 1024,
                        "used": int(parts[2]) * 1024,
                        "available": int(parts[3]) * 1024,
                    }

            logger.warning("Could not parse storage info")
        except (ADBError, ValueError) as e:
            logger.error(f"Failed to get storage info: {e}")

        return {"total": 0, "used": 0, "available": 0}


def check_adb_available(adb_path: str = "adb") -> bool:
    """Check if ADB is available and working."""
    try:
        result = subprocess.run(
            [adb_path, "version"],
            capture_output=True,
            text=True,
            timeout=10
        )
        return result.returncode == 0
    except (subprocess.TimeoutExpired, FileNotFoundError):
        return False


def parse_devices_output(output: str) -> List[str]:
    """Extract serials in the `device` state from `adb devices` output."""
    serials = []
    for line in output.strip().split("\n")[1:]:  # Skip header
        parts = line.strip().split("\t")
        if len(parts) >= 2 and parts[1] == "device":
            serials.append(parts[0])
    return serials


def list_devices(adb_path: str = "adb") -> List[ADBDevice]:
    """List all connected ADB devices."""
    if not check_adb_available(adb_path):
        raise ADBError("ADB is not available or not in PATH")

    try:
        result = subprocess.run(
            [adb_path, "devices"],
            capture_output=True,
            text=True,
            timeout=10,
            check=True
        )
    except subprocess.CalledProcessError as e:
        raise ADBError(f"Failed to list devices: {e.stderr}") from e
    except subprocess.TimeoutExpired as e:
        raise ADBTimeoutError("Timed out listing devices") from e

    return [ADBDevice(serial, adb_path) for serial in parse_devices_output(result.stdout)]
