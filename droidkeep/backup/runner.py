"""Sequential task execution with per-task outcome."""

import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from ..adb.device import ADBError
from ..util.logging import get_logger
from ..util.timeutil import now_iso
from ..tasks.base import BackupTask, TaskContext, TaskError, TaskResult, TaskStatus

logger = get_logger(__name__)


@dataclass
class RunReport:
    """Results of one run, in execution order."""

    results: List[TaskResult] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: Optional[datetime] = None

    def _with_status(self, status: TaskStatus) -> List[TaskResult]:
        return [r for r in self.results if r.status is status]

    @property
    def succeeded(self) -> List[TaskResult]:
        return self._with_status(TaskStatus.SUCCESS)

    @property
    def failed(self) -> List[TaskResult]:
        return self._with_status(TaskStatus.FAILED)

    @property
    def skipped(self) -> List[TaskResult]:
        return self._with_status(TaskStatus.SKIPPED)

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def duration(self) -> float:
        end = self.finished_at or datetime.now()
        return (end - self.started_at).total_seconds()

    def result_for(self, task_id: str) -> Optional[TaskResult]:
        return next((r for r in self.results if r.task_id == task_id), None)


class TaskRunner:
    """Runs selected tasks one after another; a failure never stops the run."""

    def __init__(
        self,
        context: TaskContext,
        on_start: Optional[Callable[[BackupTask], None]] = None,
        on_result: Optional[Callable[[TaskResult], None]] = None
    ):
        self.context = context
        self.on_start = on_start
        self.on_result = on_result

    def run(self, tasks: Iterable[BackupTask]) -> RunReport:
        report = RunReport()

        for task in tasks:
            if self.on_start:
                self.on_start(task)
            result = self.run_task(task)
            report.results.append(result)
            if self.on_result:
                self.on_result(result)

        report.finished_at = datetime.now()
        logger.info(
            f"Run finished: {len(report.succeeded)} succeeded, "
            f"{len(report.failed)} failed, {len(report.skipped)} skipped"
        )
        return report

    def run_task(self, task: BackupTask) -> TaskResult:
        started_at = now_iso()

        if not task.is_available(self.context.root):
            logger.warning(f"Skipping {task.task_id}: requires root")
            return TaskResult(
                task_id=task.task_id,
                title=task.title,
                status=TaskStatus.SKIPPED,
                message="requires root",
                started_at=started_at,
            )

        logger.info(f"Running task: {task.title}")
        start = time.monotonic()
        try:
            result = task.run(self.context)
        except (TaskError, ADBError) as e:
            logger.error(f"Task {task.task_id} failed: {e}")
            result = self._failure(task, str(e))
        except Exception as e:
            logger.exception(f"Task {task.task_id} crashed")
            result = self._failure(task, f"{type(e).__name__}: {e}")

        result.started_at = started_at
        result.duration = time.monotonic() - start
        return result

    def _failure(self, task: BackupTask, error: str) -> TaskResult:
        return TaskResult(
            task_id=task.task_id,
            title=task.title,
            status=TaskStatus.FAILED,
            message=error.splitlines()[0] if error else "failed",
            error=error,
        )
