"""Backup task catalog."""

from .apps import ApkTask, AppDataTask, LegacyAdbBackupTask
from .base import BackupTask, TaskContext, TaskError, TaskResult, TaskStatus
from .exports import CallLogTask, ContactsTask, SmsTask
from .registry import TaskRegistry, UnknownTaskError, default_tasks
from .selection import SelectionError, parse_selection
from .storage import AegisVaultTask, InternalStorageTask
from .system import DeviceInfoTask, SettingsTask, WifiTask

__all__ = [
    # base
    "BackupTask",
    "TaskContext",
    "TaskError",
    "TaskResult",
    "TaskStatus",
    # registry
    "TaskRegistry",
    "UnknownTaskError",
    "default_tasks",
    # selection
    "SelectionError",
    "parse_selection",
    # catalog
    "DeviceInfoTask",
    "InternalStorageTask",
    "ApkTask",
    "ContactsTask",
    "CallLogTask",
    "SmsTask",
    "AegisVaultTask",
    "SettingsTask",
    "WifiTask",
    "AppDataTask",
    "LegacyAdbBackupTask",
]
