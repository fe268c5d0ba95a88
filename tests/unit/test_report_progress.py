"""Tests for the execution report and progress snapshots."""
import json
from datetime import datetime, timezone

import pytest

from maestro.core.task.models import ExecutionProgress, ExecutionSummary, TaskResult, TaskStatus
from maestro.engine.progress import ProgressWriter
from maestro.engine.report import PREVIEW_CHARS, ReportGenerator


def _summary(*results, duration=3.0):
    success = sum(1 for r in results if r.succeeded)
    return ExecutionSummary(
        total_tasks=len(results),
        success_count=success,
        failure_count=len(results) - success,
        duration_seconds=duration,
        results=list(results),
    )


class TestExecutionSummary:
    def test_success_rate_and_average(self):
        summary = _summary(
            TaskResult(task_id="a", status=TaskStatus.COMPLETED),
            TaskResult(task_id="b", status=TaskStatus.FAILED),
            TaskResult(task_id="c", status=TaskStatus.COMPLETED),
        )
        assert summary.success_rate == 66
        assert summary.average_seconds_per_task == pytest.approx(1.0)

    def test_empty(self):
        summary = _summary()
        assert summary.success_rate == 0
        assert summary.average_seconds_per_task == 0.0


class TestReportGenerator:
    def test_mixed_results(self):
        ok = TaskResult(
            task_id="t1",
            status=TaskStatus.COMPLETED,
            content="all good",
            notes="Completed by Writer",
            generated_files=["out/a.md"],
            pull_request_url="https://github.com/o/r/pull/3",
        )
        bad = TaskResult(task_id="t2", status=TaskStatus.FAILED, notes="NoSuitableHandler: x")

        text = ReportGenerator().render(
            _summary(ok, bad, duration=4.5), titles={"t1": "Write docs"}
        )

        assert "**Duration:** 4.50 seconds" in text
        assert "**Success Rate:** 1/2 (50%)" in text
        assert "**Average Time per Task:** 2.25 seconds" in text
        assert "### 1. ✓ Write docs" in text
        assert "### 2. ✗ Task t2" in text
        assert "- out/a.md" in text
        assert "**Pull Request:** https://github.com/o/r/pull/3" in text
        assert "**Notes:** NoSuitableHandler: x" in text
        assert "Failed Tasks Require Attention" in text

    def test_all_successful(self):
        text = ReportGenerator().render(_summary())
        assert "**Success Rate:** 0/0 (0%)" in text
        assert "All Tasks Completed Successfully" in text

    def test_content_preview_truncated(self):
        long = TaskResult(task_id="t", status=TaskStatus.COMPLETED, content="x" * 500)
        text = ReportGenerator().render(_summary(long))
        assert "x" * PREVIEW_CHARS + "..." in text
        assert "x" * (PREVIEW_CHARS + 1) not in text

    def test_generated_at(self):
        stamp = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)
        text = ReportGenerator().render(_summary(), generated_at=stamp)
        assert "**Generated:** 2024-05-01T09:30:00+00:00" in text

    @pytest.mark.asyncio
    async def test_write(self, tmp_path):
        path = await ReportGenerator().write(_summary(), tmp_path)
        assert path.parent == tmp_path
        assert path.name.startswith("execution-report-")
        assert path.suffix == ".md"
        assert path.read_text(encoding="utf-8").startswith("# Maestro Execution Report")


class TestProgressWriter:
    @pytest.mark.asyncio
    async def test_each_write_is_a_fresh_file(self, tmp_path):
        writer = ProgressWriter(tmp_path)
        stamp = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)
        snapshot = ExecutionProgress(remaining_tasks=2, written_at=stamp)

        first = await writer.write(snapshot)
        second = await writer.write(snapshot)

        assert first != second
        assert first.name == "execution-progress-20240501T093000000000-0001.json"
        assert second.name.endswith("-0002.json")

    @pytest.mark.asyncio
    async def test_json_contents(self, tmp_path, make_task):
        task = make_task()
        snapshot = ExecutionProgress(
            completed_tasks=[TaskResult(task_id=task.id, status=TaskStatus.COMPLETED)],
            active_tasks=[task],
            remaining_tasks=0,
        )
        path = await ProgressWriter(tmp_path).write(snapshot)

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["remaining_tasks"] == 0
        assert data["completed_tasks"][0]["status"] == "Completed"
        assert data["active_tasks"][0]["title"] == "Fix bug"
