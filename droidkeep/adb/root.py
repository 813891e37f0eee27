"""Root capability probe."""

import shlex
from dataclasses import dataclass
from enum import Enum

from .device import ADBDevice, ADBError
from ..util.logging import get_logger

logger = get_logger(__name__)

PROBE_TIMEOUT = 15


class RootRequiredError(Exception):
    """An elevated command was requested on a device without root."""
    pass


class RootStatus(str, Enum):
    """How (if at all) commands can be elevated on the device."""

    NONE = "none"
    ADB_ROOT = "adb_root"  # adbd itself runs as uid 0
    SU = "su"              # a superuser binary elevates shell commands


@dataclass(frozen=True)
class RootAccess:
    """Result of the root probe."""

    status: RootStatus = RootStatus.NONE
    detail: str = ""

    @property
    def rooted(self) -> bool:
        return self.status is not RootStatus.NONE

    @property
    def label(self) -> str:
        return {
            RootStatus.NONE: "not rooted",
            RootStatus.ADB_ROOT: "rooted (adbd as root)",
            RootStatus.SU: "rooted (su)",
        }[self.status]

    def wrap(self, command: str) -> str:
        """Return the shell command that runs `command` with elevated privileges."""
        if self.status is RootStatus.ADB_ROOT:
            return command
        if self.status is RootStatus.SU:
            return f"su -c {shlex.quote(command)}"
        raise RootRequiredError(f"Root access required to run: {command}")


def probe_root(device: ADBDevice) -> RootAccess:
    """Detect root access on the device.

    `adb shell id` reporting uid 0 means adbd runs as root. Otherwise a
    working `su -c id` means a superuser binary is present. Any failure
    counts as not rooted.
    """
    try:
        output = device.run_once(["shell", "id"], timeout=PROBE_TIMEOUT)
        if "uid=0" in output:
            logger.info("Root probe: adbd is running as root")
            return RootAccess(RootStatus.ADB_ROOT, output)
    except ADBError as e:
        logger.debug(f"Root probe: `id` failed: {e}")

    try:
        output = device.run_once(["shell", "su -c id"], timeout=PROBE_TIMEOUT)
        if "uid=0" in output:
            logger.info("Root probe: su binary grants root")
            return RootAccess(RootStatus.SU, output)
        logger.debug(f"Root probe: su did not elevate: {output}")
    except ADBError as e:
        logger.debug(f"Root probe: su unavailable: {e}")

    logger.info("Root probe: device is not rooted")
    return RootAccess(RootStatus.NONE)
