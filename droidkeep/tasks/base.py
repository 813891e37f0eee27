"""Backup task base classes and result model."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..adb.device import ADBDevice
from ..adb.pull import FilePuller
from ..adb.root import RootAccess
from ..adb.shell import ShellCommand
from ..config import DroidKeepConfig
from ..util.paths import ensure_directory


class TaskError(Exception):
    """A backup task could not produce its output."""
    pass


class TaskStatus(str, Enum):
    """Outcome of a single task."""

    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


class TaskResult(BaseModel):
    """Outcome of running one backup task."""

    task_id: str = Field(description="Identifier of the task")
    title: str = Field(default="", description="Human readable task title")
    status: TaskStatus = Field(description="Outcome of the task")
    message: str = Field(default="", description="Short human readable outcome")
    artifacts: List[str] = Field(default_factory=list, description="Outputs, relative to the session directory")
    elevated: bool = Field(default=False, description="Root-only data was captured")
    used_fallback: bool = Field(default=False, description="Rooted path failed and the unprivileged path ran")
    details: Dict[str, str] = Field(default_factory=dict, description="Task specific facts used by the restore guide")
    error: Optional[str] = Field(default=None, description="Error text for failed tasks")
    started_at: Optional[str] = Field(default=None, description="ISO timestamp when the task started")
    duration: float = Field(default=0.0, description="Run time in seconds")

    @property
    def succeeded(self) -> bool:
        return self.status is TaskStatus.SUCCESS


@dataclass
class TaskContext:
    """Everything a task needs to talk to the device and write its output."""

    device: ADBDevice
    root: RootAccess
    session_dir: Path
    config: DroidKeepConfig
    shell: ShellCommand
    puller: FilePuller

    @classmethod
    def create(
        cls,
        device: ADBDevice,
        root: RootAccess,
        session_dir: Path,
        config: DroidKeepConfig
    ) -> "TaskContext":
        return cls(
            device=device,
            root=root,
            session_dir=session_dir,
            config=config,
            shell=ShellCommand(device, root),
            puller=FilePuller(device, timeout=config.pull_timeout),
        )

    def task_dir(self, task: "BackupTask") -> Path:
        """Output directory of a task, created on demand."""
        return ensure_directory(self.session_dir / task.output_dir)

    def relative(self, path: Path) -> str:
        """Path relative to the session directory, in POSIX form."""
        return path.relative_to(self.session_dir).as_posix()


class BackupTask(ABC):
    """One discrete backup operation in the catalog."""

    task_id: str = ""
    title: str = ""
    description: str = ""
    requires_root: bool = False
    output_dir: str = ""

    def __init__(self) -> None:
        if not self.output_dir:
            self.output_dir = self.task_id

    @abstractmethod
    def run(self, context: TaskContext) -> TaskResult:
        """Run the task. Raise TaskError when nothing could be saved."""

    @abstractmethod
    def restore_steps(self, result: TaskResult, root: RootAccess) -> List[str]:
        """Human readable steps to put this task's data back on a device."""

    def is_available(self, root: RootAccess) -> bool:
        return root.rooted or not self.requires_root

    def success(
        self,
        message: str,
        artifacts: Optional[List[str]] = None,
        elevated: bool = False,
        used_fallback: bool = False,
        details: Optional[Dict[str, str]] = None
    ) -> TaskResult:
        return TaskResult(
            task_id=self.task_id,
            title=self.title,
            status=TaskStatus.SUCCESS,
            message=message,
            artifacts=artifacts or [],
            elevated=elevated,
            used_fallback=used_fallback,
            details=details or {},
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.task_id}>"
