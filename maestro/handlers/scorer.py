"""Capability matching and assignment scoring.

A handler is *capable* of a task when at least one of the task's skill tags
equals one of the handler's skill tags, ignoring case.  Among capable
handlers the scheduler picks the highest :func:`score`; ties go to the
handler registered first.
"""

from __future__ import annotations

from maestro.core.task.models import Task
from maestro.handlers.models import HandlerMetadata

SKILL_MATCH_POINTS = 10
ROLE_MATCH_BONUS = 5


def _normalized(tags: list[str]) -> set[str]:
    return {tag.strip().lower() for tag in tags if tag.strip()}


def can_handle(task: Task, metadata: HandlerMetadata) -> bool:
    """Return ``True`` when the task and handler share a skill tag."""
    return bool(_normalized(task.skills_needed) & _normalized(metadata.skills))


def score(task: Task, metadata: HandlerMetadata) -> int:
    """Suitability of *metadata*'s handler for *task* (never negative).

    +10 for every task skill found among the handler's skills, plus a
    single +5 bonus when any task skill occurs inside the handler's role
    name.
    """
    handler_skills = _normalized(metadata.skills)
    role = metadata.role.lower()

    total = 0
    for skill in task.skills_needed:
        if skill.strip().lower() in handler_skills:
            total += SKILL_MATCH_POINTS

    if any(skill.strip() and skill.strip().lower() in role for skill in task.skills_needed):
        total += ROLE_MATCH_BONUS

    return total
