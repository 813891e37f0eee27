"""Static catalog of backup tasks."""

from typing import Dict, Iterable, List, Optional

from ..adb.root import RootAccess
from .apps import ApkTask, AppDataTask, LegacyAdbBackupTask
from .base import BackupTask
from .exports import CallLogTask, ContactsTask, SmsTask
from .storage import AegisVaultTask, InternalStorageTask
from .system import DeviceInfoTask, SettingsTask, WifiTask


class UnknownTaskError(KeyError):
    """No task with the requested id or number."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "unknown task"


def default_tasks() -> List[BackupTask]:
    """The catalog in menu order."""
    return [
        DeviceInfoTask(),
        InternalStorageTask(),
        ApkTask(),
        ContactsTask(),
        CallLogTask(),
        SmsTask(),
        AegisVaultTask(),
        SettingsTask(),
        WifiTask(),
        AppDataTask(),
        LegacyAdbBackupTask(),
    ]


class TaskRegistry:
    """Ordered, fixed collection of tasks; menu numbers are 1-based positions."""

    def __init__(self, tasks: Optional[Iterable[BackupTask]] = None):
        self._tasks: List[BackupTask] = list(tasks) if tasks is not None else default_tasks()
        self._by_id: Dict[str, BackupTask] = {}

        for task in self._tasks:
            if task.task_id in self._by_id:
                raise ValueError(f"Duplicate task id: {task.task_id}")
            self._by_id[task.task_id] = task

    def __iter__(self):
        return iter(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def all(self) -> List[BackupTask]:
        return list(self._tasks)

    def get(self, task_id: str) -> BackupTask:
        try:
            return self._by_id[task_id]
        except KeyError:
            raise UnknownTaskError(f"Unknown task: {task_id}") from None

    def by_number(self, number: int) -> BackupTask:
        if not 1 <= number <= len(self._tasks):
            raise UnknownTaskError(f"No task number {number} (valid: 1-{len(self._tasks)})")
        return self._tasks[number - 1]

    def number_of(self, task: BackupTask) -> int:
        return self._tasks.index(task) + 1

    def is_available(self, task: BackupTask, root: RootAccess) -> bool:
        return task.is_available(root)

    def available(self, root: RootAccess) -> List[BackupTask]:
        """Tasks that can run given the probed root access."""
        return [task for task in self._tasks if task.is_available(root)]

    def ordered(self, tasks: Iterable[BackupTask]) -> List[BackupTask]:
        """Deduplicate tasks and sort them into catalog order."""
        wanted = {task.task_id for task in tasks}
        return [task for task in self._tasks if task.task_id in wanted]
