"""Manifest parser: converts Markdown task manifests into :class:`Task` records.

The parser is a single forward scan over the lines of the manifest.  A task
header (see :mod:`maestro.manifest.syntax`) opens a new block and closes the
previous one; recognised key lines inside a block populate the task under
construction and everything else is ignored.  A block that never receives a
goal is dropped without affecting the blocks around it.

Recognised keys (``**Key:** value`` or ``- **Key**: value``):

- Goal
- Acceptance Criteria (header only; ``- [ ]``/``- [x]``/``- `` entries follow)
- Complexity, Quality Level
- Skills Needed, Resources (comma separated)
- Testing Requirements, Documentation Requirements
- Success Indicators
"""

from __future__ import annotations

from pathlib import Path

from maestro.core.task.models import Complexity, QualityLevel, Task, TaskStatus
from maestro.manifest import syntax
from maestro.utils.exceptions import ManifestNotFoundError, MissingGoalError
from maestro.utils.logging import get_logger

logger = get_logger("manifest.parser")

DEFAULT_ACCEPTANCE_CRITERIA = "Task completed successfully"
DEFAULT_SKILL = "general"
DEFAULT_TESTING_REQUIREMENTS = "Basic validation"
DEFAULT_DOCUMENTATION_REQUIREMENTS = "Update relevant documentation"
DEFAULT_SUCCESS_INDICATOR = "Task objectives met"


def _split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _enum_value(enum_cls, raw: str, default):
    """Case-insensitive enum lookup by value, falling back to *default*."""
    wanted = raw.strip().lower()
    for member in enum_cls:
        if member.value.lower() == wanted:
            return member
    return default


class TaskBuilder:
    """Accumulates the fields of one manifest block."""

    def __init__(self, title: str, status: TaskStatus = TaskStatus.NOT_STARTED):
        self.title = title
        self.status = status
        self.goal: str | None = None
        self.acceptance_criteria: list[str] = []
        self.complexity = Complexity.MEDIUM
        self.quality_level = QualityLevel.STANDARD
        self.skills_needed: list[str] = []
        self.resources: list[str] = []
        self.testing_requirements = ""
        self.documentation_requirements = ""
        self.success_indicators: list[str] = []

    def build(self) -> Task:
        """Return the finished :class:`Task`, applying defaults.

        Raises :class:`MissingGoalError` when no non-empty goal was seen.
        """
        if not self.goal:
            raise MissingGoalError(self.title)

        return Task(
            title=self.title,
            goal=self.goal,
            acceptance_criteria=self.acceptance_criteria or [DEFAULT_ACCEPTANCE_CRITERIA],
            complexity=self.complexity,
            quality_level=self.quality_level,
            skills_needed=self.skills_needed or [DEFAULT_SKILL],
            resources=self.resources,
            testing_requirements=self.testing_requirements or DEFAULT_TESTING_REQUIREMENTS,
            documentation_requirements=(
                self.documentation_requirements or DEFAULT_DOCUMENTATION_REQUIREMENTS
            ),
            success_indicators=self.success_indicators or [DEFAULT_SUCCESS_INDICATOR],
            status=self.status,
        )


class ManifestParser:
    """Parse manifest text into an ordered list of :class:`Task` objects.

    All tasks are returned regardless of status; callers decide whether to
    skip the ones already completed.
    """

    def parse(self, text: str) -> list[Task]:
        """Parse *text* and return the tasks in source order."""
        return self._parse_lines(text.splitlines())

    def parse_file(self, path: str | Path) -> list[Task]:
        """Read a manifest from *path* and parse it.

        Raises :class:`ManifestNotFoundError` if the file does not exist.
        """
        path = Path(path)
        if not path.is_file():
            raise ManifestNotFoundError(str(path))
        return self.parse(path.read_text(encoding="utf-8"))

    # ------------------------------------------------------------------
    # Private implementation
    # ------------------------------------------------------------------

    def _parse_lines(self, lines: list[str]) -> list[Task]:
        tasks: list[Task] = []
        builder: TaskBuilder | None = None
        # Indent of an open "Generated Files:" note; its nested entries are skipped.
        annotation_indent: int | None = None

        for line in lines:
            header = syntax.parse_header(line)
            if header is not None:
                self._finalize(builder, tasks)
                builder = TaskBuilder(header.title, header.status)
                annotation_indent = None
                continue

            if builder is None:
                continue

            trimmed = line.strip()
            _, content = syntax.split_glyph(trimmed)

            indent = len(line) - len(line.lstrip())
            if annotation_indent is not None:
                if content.startswith("- ") and indent > annotation_indent:
                    continue
                annotation_indent = None

            if content.startswith(syntax.GENERATED_FILES_LABEL):
                annotation_indent = indent
                continue
            if content.startswith(syntax.PULL_REQUEST_LABEL):
                continue
            if syntax.match_status_line(content):
                continue

            self._apply_line(builder, content)

        self._finalize(builder, tasks)
        logger.debug("manifest_parsed", tasks=len(tasks))
        return tasks

    @staticmethod
    def _finalize(builder: TaskBuilder | None, tasks: list[Task]) -> None:
        if builder is None:
            return
        try:
            tasks.append(builder.build())
        except MissingGoalError as exc:
            logger.debug("task_block_dropped", title=exc.title, reason="missing_goal")

    @staticmethod
    def _apply_line(builder: TaskBuilder, content: str) -> None:
        """Populate *builder* from one recognised key line."""
        value = syntax.match_key(content, "Goal")
        if value is not None:
            builder.goal = value
            return

        if syntax.match_key(content, "Acceptance Criteria") is not None:
            return

        if content.startswith("- [ ]") or content.lower().startswith("- [x]"):
            builder.acceptance_criteria.append(content[5:].strip())
            return

        value = syntax.match_key(content, "Complexity")
        if value is not None:
            builder.complexity = _enum_value(Complexity, value, Complexity.MEDIUM)
            return

        value = syntax.match_key(content, "Quality Level")
        if value is not None:
            builder.quality_level = _enum_value(QualityLevel, value, QualityLevel.STANDARD)
            return

        value = syntax.match_key(content, "Skills Needed", "SkillsNeeded")
        if value is not None:
            builder.skills_needed = _split_list(value)
            return

        value = syntax.match_key(content, "Resources")
        if value is not None:
            builder.resources = _split_list(value)
            return

        value = syntax.match_key(content, "Testing Requirements")
        if value is not None:
            builder.testing_requirements = value
            return

        value = syntax.match_key(content, "Documentation Requirements")
        if value is not None:
            builder.documentation_requirements = value
            return

        value = syntax.match_key(content, "Success Indicators")
        if value is not None:
            builder.success_indicators = [value] if value else []
            return

        # Bare-dash criteria only count once the block has a goal.
        if content.startswith("- ") and builder.goal is not None and "**" not in content:
            builder.acceptance_criteria.append(content[2:].strip())
