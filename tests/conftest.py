"""Shared fixtures for task and runner tests."""

from unittest.mock import MagicMock

import pytest

from droidkeep.adb.device import DeviceInfo
from droidkeep.adb.root import RootAccess, RootStatus
from droidkeep.config import DroidKeepConfig
from droidkeep.tasks.base import TaskContext


@pytest.fixture
def device_info():
    """Properties of an emulator running Android 13."""
    return DeviceInfo(
        serial="emulator-5554",
        model="Pixel 6",
        brand="google",
        android_version="13",
        sdk_version="33",
    )


@pytest.fixture
def make_context(tmp_path, device_info):
    """Build a TaskContext around mocked device, shell and puller."""

    def _make(root=None, config=None):
        device = MagicMock()
        device.serial = device_info.serial
        device.get_device_info.return_value = device_info
        return TaskContext(
            device=device,
            root=root or RootAccess(),
            session_dir=tmp_path,
            config=config or DroidKeepConfig(backup_root=tmp_path),
            shell=MagicMock(),
            puller=MagicMock(),
        )

    return _make


@pytest.fixture
def su_root():
    """Root access through a su binary."""
    return RootAccess(RootStatus.SU, "uid=0(root) gid=0(root)")
