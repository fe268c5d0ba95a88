"""QA review handler -- reviews code, optionally a pull request fetched with ``gh``."""

from __future__ import annotations

import re
from pathlib import Path

from maestro.core.task.models import QualityLevel, Task, TaskResult
from maestro.handlers.base import PromptHandler
from maestro.utils.exceptions import GitError

_PR_URL = re.compile(r"https://github\.com/[^/\s]+/[^/\s]+/pull/\d+")
_RATING = re.compile(r"^RATING:\s*(\d+(?:\.\d+)?)", re.MULTILINE)

# Keeps the prompt bounded for very large pull requests.
MAX_DIFF_CHARS = 20_000


def extract_pr_url(task: Task) -> str | None:
    """Return the first GitHub pull request URL in the goal or resources."""
    match = _PR_URL.search(" ".join([task.goal, *task.resources]))
    return match.group(0) if match else None


def parse_rating(response: str) -> float | None:
    """Read ``RATING: n/10`` from a review, clamped to ``0..10``."""
    match = _RATING.search(response)
    if match is None:
        return None
    return max(0.0, min(10.0, float(match.group(1))))


class QAReviewHandler(PromptHandler):
    NAME = "qa_review"
    ROLE = "QA Review Specialist"
    SKILLS = [
        "code review",
        "quality assurance",
        "testing",
        "security review",
        "performance analysis",
        "pr review",
    ]
    QUALITY_STANDARDS = {
        QualityLevel.STANDARD: "Basic code review focusing on functionality and obvious issues",
        QualityLevel.HIGH: (
            "Comprehensive review including performance, security, and maintainability"
        ),
        QualityLevel.CRITICAL: (
            "Exhaustive review with security audit, performance profiling, "
            "and architectural assessment"
        ),
    }
    DESCRIPTION = "Reviews code changes and pull requests for quality and risk."
    GUIDELINES = """
## Review Format:

RATING: [1-10]/10
RECOMMENDATION: [APPROVE|REQUEST_CHANGES|COMMENT]

STRENGTHS:
- [strength]

ISSUES:
SEVERITY: [critical|major|minor|suggestion]
DESCRIPTION: [issue]
LOCATION: [file:line]
SUGGESTION: [fix]

RECOMMENDATIONS:
- [recommendation]
"""

    async def gather_context(self, task: Task) -> str:
        url = extract_pr_url(task)
        if url is None or self.git is None:
            return ""

        try:
            diff = await self.git.pr_diff(url)
        except GitError as exc:
            self.logger.warning("pr_diff_unavailable", url=url, error=str(exc))
            return f"## Pull Request\n\n{url} (diff unavailable: {exc.output or exc})"

        if len(diff) > MAX_DIFF_CHARS:
            diff = diff[:MAX_DIFF_CHARS] + "\n... (diff truncated)"
        return f"## Pull Request\n\n{url}\n\n```diff\n{diff}\n```"

    async def handle_response(self, task: Task, response: str, output_dir: Path) -> TaskResult:
        result = await super().handle_response(task, response, output_dir)
        rating = parse_rating(response)
        url = extract_pr_url(task)
        if url is not None:
            result.notes = f"QA review completed for PR {url}" + (
                f" with rating {rating:g}/10" if rating is not None else ""
            )
        result.quality_score = rating
        return result
