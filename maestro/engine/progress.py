"""Progress snapshots -- one fresh JSON file per task completion."""

from __future__ import annotations

from pathlib import Path

import aiofiles  # type: ignore[import-untyped]

from maestro.core.task.models import ExecutionProgress
from maestro.utils.logging import get_logger

logger = get_logger("engine.progress")

PROGRESS_PREFIX = "execution-progress-"


class ProgressWriter:
    """Write :class:`ExecutionProgress` snapshots into a run directory.

    File names carry the snapshot time plus a per-writer sequence number,
    so two snapshots written within the same microsecond still land in
    different files.  Calls must be serialized by the caller.
    """

    def __init__(self, run_dir: str | Path) -> None:
        self.run_dir = Path(run_dir)
        self._sequence = 0

    def _next_path(self, progress: ExecutionProgress) -> Path:
        self._sequence += 1
        stamp = progress.written_at.strftime("%Y%m%dT%H%M%S%f")
        return self.run_dir / f"{PROGRESS_PREFIX}{stamp}-{self._sequence:04d}.json"

    async def write(self, progress: ExecutionProgress) -> Path:
        path = self._next_path(progress)
        async with aiofiles.open(path, mode="w", encoding="utf-8") as fh:
            await fh.write(progress.model_dump_json(indent=2))

        logger.info(
            "progress_saved",
            path=str(path),
            completed=len(progress.completed_tasks),
            active=len(progress.active_tasks),
            remaining=progress.remaining_tasks,
        )
        return path
