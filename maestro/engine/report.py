"""Execution report -- renders an :class:`ExecutionSummary` to Markdown."""

from __future__ import annotations

import time
from datetime import datetime, timezone
from pathlib import Path

import aiofiles  # type: ignore[import-untyped]
from jinja2 import Environment

from maestro.core.task.models import ExecutionSummary
from maestro.utils.logging import get_logger

logger = get_logger("engine.report")

PREVIEW_CHARS = 200

REPORT_TEMPLATE = """\
# Maestro Execution Report

**Generated:** {{ generated_at }}
**Duration:** {{ "%.2f"|format(summary.duration_seconds) }} seconds
**Success Rate:** {{ summary.success_count }}/{{ summary.total_tasks }} ({{ summary.success_rate }}%)

## Summary
- ✓ **Successful Tasks:** {{ summary.success_count }}
- ✗ **Failed Tasks:** {{ summary.failure_count }}
- **Average Time per Task:** {{ "%.2f"|format(summary.average_seconds_per_task) }} seconds

## Task Results

{% for result in summary.results %}
### {{ loop.index }}. {{ "✓" if result.succeeded else "✗" }} {{ titles.get(result.task_id, "Task " ~ result.task_id) }}
**Status:** {{ result.status.value }}
**Completed:** {{ result.completed_at.isoformat() }}
**Notes:** {{ result.notes or "None" }}
{% if result.generated_files %}
**Generated Files:**
{% for path in result.generated_files %}
- {{ path }}
{% endfor %}
{% endif %}
{% if result.pull_request_url %}
**Pull Request:** {{ result.pull_request_url }}
{% endif %}

**Content Preview:**
```
{{ result.content | preview }}
```

---

{% endfor %}
## Next Steps

{% if summary.failure_count > 0 %}
### Failed Tasks Require Attention
- Review failed task logs
- Check handler configuration
- Retry failed tasks if needed
{% else %}
### All Tasks Completed Successfully
- Review generated files and pull requests
- Conduct human QA review
- Merge approved changes
{% endif %}
"""


def _preview(content: str) -> str:
    if len(content) <= PREVIEW_CHARS:
        return content
    return content[:PREVIEW_CHARS] + "..."


class ReportGenerator:
    """Render and persist the end-of-run report using Jinja2."""

    def __init__(self) -> None:
        self._env = Environment(autoescape=False, trim_blocks=True, lstrip_blocks=True)
        self._env.filters["preview"] = _preview

    def render(
        self,
        summary: ExecutionSummary,
        titles: dict[str, str] | None = None,
        generated_at: datetime | None = None,
    ) -> str:
        """Return the report text.

        Parameters
        ----------
        summary:
            The finished run's summary.
        titles:
            Optional ``task_id -> title`` mapping used to label results.
        generated_at:
            Report timestamp; defaults to now (UTC).
        """
        template = self._env.from_string(REPORT_TEMPLATE)
        return template.render(
            summary=summary,
            titles=titles or {},
            generated_at=(generated_at or datetime.now(timezone.utc)).isoformat(),
        )

    async def write(
        self,
        summary: ExecutionSummary,
        run_dir: str | Path,
        titles: dict[str, str] | None = None,
    ) -> Path:
        """Write ``execution-report-<epoch>.md`` into *run_dir*."""
        path = Path(run_dir) / f"execution-report-{int(time.time())}.md"
        async with aiofiles.open(path, mode="w", encoding="utf-8") as fh:
            await fh.write(self.render(summary, titles))

        logger.info("report_saved", path=str(path))
        return path
