"""Request/response schemas for manifest runs."""

from datetime import datetime

from pydantic import BaseModel, Field

from maestro.core.task.models import TaskStatus


class RunRequest(BaseModel):
    """Run every pending task in the manifest at ``manifest_path``."""

    manifest_path: str = Field(..., min_length=1, description="Path to the Markdown manifest.")
    reports_dir: str | None = Field(
        default=None, description="Override for the per-run output root."
    )


class RunResultInfo(BaseModel):
    task_id: str
    title: str
    status: TaskStatus
    notes: str | None = None
    generated_files: list[str] = []
    pull_request_url: str | None = None
    completed_at: datetime


class RunResponse(BaseModel):
    """Execution summary of a finished run."""

    total_tasks: int
    success_count: int
    failure_count: int
    success_rate: int
    duration_seconds: float
    run_dir: str
    results: list[RunResultInfo]
