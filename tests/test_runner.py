"""Tests for sequential task execution."""

from typing import List

from droidkeep.adb.device import ADBError
from droidkeep.adb.root import RootAccess
from droidkeep.backup.runner import TaskRunner
from droidkeep.tasks.base import BackupTask, TaskError, TaskResult, TaskStatus


class _Task(BackupTask):
    task_id = "ok"
    title = "Works"

    def run(self, context) -> TaskResult:
        return self.success("done", ["ok/file.txt"])

    def restore_steps(self, result, root: RootAccess) -> List[str]:
        return []


class _FailingTask(_Task):
    task_id = "fails"
    title = "Fails"

    def run(self, context) -> TaskResult:
        raise TaskError("nothing to save")


class _AdbErrorTask(_Task):
    task_id = "adb_fails"

    def run(self, context) -> TaskResult:
        raise ADBError("device offline\ndetails")


class _CrashingTask(_Task):
    task_id = "crashes"

    def run(self, context) -> TaskResult:
        raise KeyError("boom")


class _RootTask(_Task):
    task_id = "needs_root"
    requires_root = True


class TestTaskRunner:
    """Test that every task yields exactly one result."""

    def test_success(self, make_context):
        """Test a successful task with its timing."""
        report = TaskRunner(make_context()).run([_Task()])

        result = report.results[0]
        assert result.status is TaskStatus.SUCCESS
        assert result.started_at
        assert result.duration >= 0
        assert report.ok

    def test_failures_do_not_stop_the_run(self, make_context):
        """Test that later tasks still run after failures."""
        tasks = [_FailingTask(), _AdbErrorTask(), _CrashingTask(), _Task()]

        report = TaskRunner(make_context()).run(tasks)

        assert [r.task_id for r in report.results] == ["fails", "adb_fails", "crashes", "ok"]
        assert [r.status for r in report.results[:3]] == [TaskStatus.FAILED] * 3
        assert report.results[3].succeeded
        assert not report.ok
        assert len(report.failed) == 3

    def test_failure_messages(self, make_context):
        """Test the message and error recorded for each kind of failure."""
        report = TaskRunner(make_context()).run([_FailingTask(), _AdbErrorTask(), _CrashingTask()])

        assert report.result_for("fails").message == "nothing to save"
        assert report.result_for("adb_fails").message == "device offline"
        assert report.result_for("adb_fails").error == "device offline\ndetails"
        assert report.result_for("crashes").message.startswith("KeyError")

    def test_root_task_skipped_without_root(self, make_context):
        """Test that root-only tasks are skipped without root."""
        report = TaskRunner(make_context()).run([_RootTask()])

        result = report.results[0]
        assert result.status is TaskStatus.SKIPPED
        assert result.message == "requires root"
        assert report.ok

    def test_root_task_runs_with_root(self, make_context, su_root):
        """Test that root-only tasks run with root."""
        report = TaskRunner(make_context(root=su_root)).run([_RootTask()])
        assert report.results[0].succeeded

    def test_callbacks(self, make_context):
        """Test the start and result callbacks."""
        started, finished = [], []
        runner = TaskRunner(make_context(), on_start=started.append, on_result=finished.append)

        report = runner.run([_Task(), _FailingTask()])

        assert [t.task_id for t in started] == ["ok", "fails"]
        assert finished == report.results
        assert report.finished_at is not None
