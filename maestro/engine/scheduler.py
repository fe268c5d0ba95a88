"""Scheduler -- assigns queued tasks to handlers and runs them concurrently.

For every queued task the scheduler picks the best-scoring capable handler,
awaits it, and then performs the four post-completion steps in order:

1. Append the :class:`TaskResult` to the run's results.
2. Rewrite the manifest to reflect the task's final status.
3. Write a progress snapshot.
4. Remove the task from the active set.

All tasks run at once via :func:`asyncio.gather`; per-task failures become
failed results and never abort the run.  A failing manifest rewrite or
progress write is logged and leaves the result untouched.  The only
run-fatal conditions are a missing manifest (at load time) and an output
directory that cannot be created (before any task starts).
"""

from __future__ import annotations

import asyncio
import time
import traceback
from pathlib import Path

from maestro.core.task.models import (
    ExecutionProgress,
    ExecutionSummary,
    Task,
    TaskResult,
    TaskStatus,
)
from maestro.engine.progress import ProgressWriter
from maestro.engine.report import ReportGenerator
from maestro.handlers.registry import HandlerRegistry
from maestro.manifest.parser import ManifestParser
from maestro.manifest.updater import ManifestFile, ManifestLocks
from maestro.utils.exceptions import (
    HandlerInvocationError,
    ManifestUpdateError,
    NoSuitableHandlerError,
    OutputDirectoryUnavailableError,
)
from maestro.utils.file_utils import create_run_dir
from maestro.utils.logging import get_logger

logger = get_logger("engine.scheduler")


class RunState:
    """Shared mutable state of one run.

    Lock order is ``results_lock`` -> ``active_lock`` -> ``file_lock``, and
    the per-manifest lock from :class:`ManifestLocks` comes last; a
    coroutine holding a later lock never acquires an earlier one.  The file
    lock serializes manifest rewrites and progress snapshot writes within
    the run; the manifest lock serializes rewrites across runs.
    """

    def __init__(self, total_tasks: int) -> None:
        self.total_tasks = total_tasks
        self.results: list[TaskResult] = []
        self.active: dict[str, Task] = {}
        self.results_lock = asyncio.Lock()
        self.active_lock = asyncio.Lock()
        self.file_lock = asyncio.Lock()

    async def snapshot(self) -> ExecutionProgress:
        async with self.results_lock:
            completed = list(self.results)
            async with self.active_lock:
                active = list(self.active.values())
        return ExecutionProgress(
            completed_tasks=completed,
            active_tasks=active,
            remaining_tasks=self.total_tasks - len(completed),
        )


def failed_result(task: Task, condition: str, detail: str) -> TaskResult:
    """Build a failed :class:`TaskResult` whose notes name the *condition*."""
    return TaskResult(
        task_id=task.id,
        content=f"Task failed with error: {detail}",
        status=TaskStatus.FAILED,
        notes=f"{condition}: {detail}",
    )


class Scheduler:
    """Run the queued tasks of a manifest against a handler registry.

    Parameters
    ----------
    registry:
        Populated :class:`HandlerRegistry` used to select a handler per task.
    reports_root:
        Directory under which a fresh ``<epoch>`` run directory is created
        for every run.
    parser:
        Optional :class:`ManifestParser`; a default one is created.
    report_generator:
        Optional :class:`ReportGenerator`; a default one is created.
    manifest_locks:
        Per-manifest locks shared with other schedulers that may run at
        the same time; a private set is created when omitted.
    """

    def __init__(
        self,
        registry: HandlerRegistry,
        reports_root: str | Path = "reports",
        parser: ManifestParser | None = None,
        report_generator: ReportGenerator | None = None,
        manifest_locks: ManifestLocks | None = None,
    ) -> None:
        self.registry = registry
        self.reports_root = Path(reports_root)
        self.parser = parser or ManifestParser()
        self.report_generator = report_generator or ReportGenerator()
        self.manifest_locks = manifest_locks if manifest_locks is not None else ManifestLocks()
        self.queue: list[Task] = []
        self.manifest: ManifestFile | None = None
        self.run_dir: Path | None = None

    # ------------------------------------------------------------------
    # Intake
    # ------------------------------------------------------------------

    def load_manifest(self, path: str | Path) -> list[Task]:
        """Parse *path* and queue every task that is not already completed.

        Raises :class:`ManifestNotFoundError` when the file does not exist.
        Returns the tasks that were queued.
        """
        tasks = self.parser.parse_file(path)
        pending = [task for task in tasks if not task.is_completed]
        self.queue.extend(pending)
        self.manifest = ManifestFile(path)

        logger.info(
            "manifest_loaded",
            path=str(path),
            parsed=len(tasks),
            queued=len(pending),
            skipped_completed=len(tasks) - len(pending),
        )
        return pending

    def enqueue(self, task: Task) -> None:
        self.queue.append(task)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def run(self) -> ExecutionSummary:
        """Execute every queued task concurrently and return the summary.

        The queue is consumed.  Raises
        :class:`OutputDirectoryUnavailableError` before any task starts
        when the run directory cannot be created.
        """
        run_dir = self._prepare_run_dir()
        tasks = list(self.queue)
        self.queue.clear()

        state = RunState(total_tasks=len(tasks))
        progress = ProgressWriter(run_dir)

        logger.info("run_start", tasks=len(tasks), run_dir=str(run_dir))
        start = time.monotonic()

        await asyncio.gather(*(self._run_one(task, state, run_dir, progress) for task in tasks))

        duration = time.monotonic() - start
        async with state.results_lock:
            results = list(state.results)

        success_count = sum(1 for r in results if r.succeeded)
        summary = ExecutionSummary(
            total_tasks=len(tasks),
            success_count=success_count,
            failure_count=len(results) - success_count,
            duration_seconds=round(duration, 4),
            results=results,
        )

        try:
            await self.report_generator.write(
                summary, run_dir, titles={task.id: task.title for task in tasks}
            )
        except OSError as exc:
            logger.error("report_write_failed", run_dir=str(run_dir), error=str(exc))

        logger.info(
            "run_complete",
            total=summary.total_tasks,
            succeeded=summary.success_count,
            failed=summary.failure_count,
            duration=summary.duration_seconds,
        )
        return summary

    async def run_task(self, task: Task) -> TaskResult:
        """Execute a single task outside the queue.

        Uses the current run directory, creating one if no run has happened
        yet.  The manifest and progress snapshots are not touched.
        """
        run_dir = self.run_dir or self._prepare_run_dir()
        task.status = TaskStatus.IN_PROGRESS
        result = await self._execute(task, run_dir)
        task.status = result.status
        return result

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _prepare_run_dir(self) -> Path:
        try:
            run_dir = create_run_dir(self.reports_root)
        except OSError as exc:
            raise OutputDirectoryUnavailableError(str(self.reports_root), str(exc)) from exc
        self.run_dir = run_dir
        logger.info("run_dir_created", path=str(run_dir))
        return run_dir

    async def _run_one(
        self,
        task: Task,
        state: RunState,
        run_dir: Path,
        progress: ProgressWriter,
    ) -> None:
        async with state.active_lock:
            state.active[task.id] = task
        task.status = TaskStatus.IN_PROGRESS

        try:
            result = await self._execute(task, run_dir)
            task.status = result.status

            async with state.results_lock:
                state.results.append(result)

            await self._update_manifest(task, result, state)
            await self._checkpoint(state, progress)
        finally:
            async with state.active_lock:
                state.active.pop(task.id, None)

    async def _execute(self, task: Task, run_dir: Path) -> TaskResult:
        """Select a handler and invoke it; never raises for per-task errors."""
        try:
            handler = self.registry.select(task)
        except NoSuitableHandlerError as exc:
            logger.warning("task_unassigned", task_title=task.title, skills=task.skills_needed)
            return failed_result(task, "NoSuitableHandler", str(exc))

        logger.info("task_assigned", task_title=task.title, role=handler.role)

        try:
            result = await handler.execute(task, run_dir)
        except Exception as exc:
            error = HandlerInvocationError(handler.role, str(exc) or type(exc).__name__)
            logger.error(
                "task_failed",
                task_title=task.title,
                role=handler.role,
                error=str(error),
                traceback=traceback.format_exc(),
            )
            return failed_result(task, "HandlerInvocationFailed", str(error))

        if not result.status.is_terminal:
            logger.warning(
                "task_status_coerced",
                task_title=task.title,
                role=handler.role,
                status=result.status.value,
            )
            result.notes = f"HandlerInvocationFailed: handler returned status {result.status.value}"
            result.status = TaskStatus.FAILED

        if result.succeeded:
            logger.info("task_completed", task_title=task.title, role=handler.role)
        else:
            logger.warning("task_failed", task_title=task.title, role=handler.role, notes=result.notes)
        return result

    async def _update_manifest(self, task: Task, result: TaskResult, state: RunState) -> None:
        """Rewrite the manifest for *result*; failures are logged, never raised."""
        if self.manifest is None:
            return
        async with state.file_lock:
            async with self.manifest_locks.for_path(self.manifest.path):
                try:
                    await self.manifest.apply(task, result)
                except ManifestUpdateError as exc:
                    logger.error(
                        "manifest_update_failed",
                        condition="ManifestUpdateFailed",
                        task_title=task.title,
                        error=str(exc),
                    )
                except Exception:
                    logger.exception(
                        "manifest_update_failed",
                        condition="ManifestUpdateFailed",
                        task_title=task.title,
                    )

    async def _checkpoint(self, state: RunState, progress: ProgressWriter) -> None:
        snapshot = await state.snapshot()
        async with state.file_lock:
            try:
                await progress.write(snapshot)
            except OSError as exc:
                logger.error("progress_write_failed", run_dir=str(progress.run_dir), error=str(exc))
            except Exception:
                logger.exception("progress_write_failed", run_dir=str(progress.run_dir))
