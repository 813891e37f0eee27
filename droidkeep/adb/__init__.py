"""ADB module initialization."""

from .content_providers import ContentProvider, ContentProviderError, parse_content_output
from .device import (
    ADBDevice,
    ADBError,
    ADBTimeoutError,
    DeviceInfo,
    check_adb_available,
    list_devices,
    parse_devices_output,
)
from .package import PackageManager
from .pull import FilePuller
from .root import RootAccess, RootRequiredError, RootStatus, probe_root
from .shell import ShellCommand

__all__ = [
    # device
    "ADBDevice",
    "ADBError",
    "ADBTimeoutError",
    "DeviceInfo",
    "check_adb_available",
    "list_devices",
    "parse_devices_output",
    # root
    "RootAccess",
    "RootRequiredError",
    "RootStatus",
    "probe_root",
    # shell
    "ShellCommand",
    # pull
    "FilePuller",
    # package
    "PackageManager",
    # content_providers
    "ContentProvider",
    "ContentProviderError",
    "parse_content_output",
]
