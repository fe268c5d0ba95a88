"""Task-related data models for the orchestrator.

Defines the records that flow through a run: the :class:`Task` parsed from
a manifest block, the :class:`TaskResult` produced by a handler, the
point-in-time :class:`ExecutionProgress` snapshot, and the final
:class:`ExecutionSummary`.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TaskStatus(str, Enum):
    """Lifecycle states for a single task, valued by their manifest labels."""

    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    FAILED = "Failed"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStatus.COMPLETED, TaskStatus.FAILED)


class Complexity(str, Enum):
    SIMPLE = "Simple"
    MEDIUM = "Medium"
    COMPLEX = "Complex"


class QualityLevel(str, Enum):
    STANDARD = "Standard"
    HIGH = "High"
    CRITICAL = "Critical"


class Task(BaseModel):
    """A single unit of work described by one manifest block.

    Attributes:
        id: Process-unique identifier, stable for the task's lifetime.
        title: Human-readable correlation key across manifest and logs.
        goal: Free-text objective; a block without one is never built.
        acceptance_criteria: Ordered criteria the output must satisfy.
        complexity: Declared complexity tier.
        quality_level: Declared quality tier, used to pick handler guidance.
        skills_needed: Skill tags matched against handler skills.
        resources: Free-form resource references.
        testing_requirements: Testing expectations text.
        documentation_requirements: Documentation expectations text.
        success_indicators: Ordered success indicator strings.
        status: Current lifecycle state.
    """

    id: str = Field(default_factory=_new_id)
    title: str
    goal: str
    acceptance_criteria: list[str] = []
    complexity: Complexity = Complexity.MEDIUM
    quality_level: QualityLevel = QualityLevel.STANDARD
    skills_needed: list[str] = []
    resources: list[str] = []
    testing_requirements: str = ""
    documentation_requirements: str = ""
    success_indicators: list[str] = []
    status: TaskStatus = TaskStatus.NOT_STARTED

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    def fields_without_status(self) -> dict:
        """Return the manifest-derived fields, excluding identity and status."""
        return self.model_dump(exclude={"id", "status"})


class TaskResult(BaseModel):
    """Outcome of executing a single :class:`Task`.

    ``completed_at`` is stamped at construction and cannot be reassigned.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=_new_id)
    task_id: str
    content: str = ""
    status: TaskStatus
    notes: str | None = None
    generated_files: list[str] | None = None
    pull_request_url: str | None = None
    completed_at: datetime = Field(default_factory=_utcnow, frozen=True)
    quality_score: float | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == TaskStatus.COMPLETED


class ExecutionProgress(BaseModel):
    """Point-in-time snapshot written after every task completion."""

    completed_tasks: list[TaskResult] = []
    active_tasks: list[Task] = []
    remaining_tasks: int = 0
    written_at: datetime = Field(default_factory=_utcnow)


class ExecutionSummary(BaseModel):
    """Aggregated, immutable outcome of one run."""

    model_config = ConfigDict(frozen=True)

    total_tasks: int = 0
    success_count: int = 0
    failure_count: int = 0
    duration_seconds: float = 0.0
    results: list[TaskResult] = []

    @property
    def success_rate(self) -> int:
        """Whole-number percentage of successful tasks (0 for an empty run)."""
        if self.total_tasks == 0:
            return 0
        return int(self.success_count / self.total_tasks * 100)

    @property
    def average_seconds_per_task(self) -> float:
        if self.total_tasks == 0:
            return 0.0
        return self.duration_seconds / self.total_tasks
