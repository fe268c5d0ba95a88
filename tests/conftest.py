import asyncio
import random

import pytest

from maestro.core.llm.client import LLMClient
from maestro.core.task.models import Task, TaskResult, TaskStatus
from maestro.handlers.base import BaseHandler
from maestro.handlers.models import HandlerMetadata
from maestro.handlers.registry import HandlerRegistry


class StubHandler(BaseHandler):
    """Handler double that records calls and returns a canned result."""

    def __init__(
        self,
        name,
        role,
        skills,
        status=TaskStatus.COMPLETED,
        error=None,
        generated_files=None,
        pull_request_url=None,
        max_delay=0.0,
    ):
        self._metadata = HandlerMetadata(name=name, role=role, skills=skills)
        self.status = status
        self.error = error
        self.generated_files = generated_files
        self.pull_request_url = pull_request_url
        self.max_delay = max_delay
        self.calls: list[str] = []

    @property
    def metadata(self):
        return self._metadata

    async def execute(self, task, output_dir):
        self.calls.append(task.title)
        if self.max_delay:
            await asyncio.sleep(random.uniform(0, self.max_delay))
        if self.error is not None:
            raise self.error
        return TaskResult(
            task_id=task.id,
            content=f"{self.metadata.name}:{task.title}",
            status=self.status,
            notes=f"Completed by {self.metadata.role}",
            generated_files=self.generated_files,
            pull_request_url=self.pull_request_url,
        )


@pytest.fixture
def make_handler():
    return StubHandler


@pytest.fixture
def make_task():
    def _make(title="Fix bug", skills=None, **fields):
        return Task(
            title=title,
            goal=fields.pop("goal", "resolve crash"),
            skills_needed=skills if skills is not None else ["swift development"],
            **fields,
        )

    return _make


@pytest.fixture
def swift_registry():
    return HandlerRegistry([StubHandler("developer", "Swift Developer", ["swift development"])])


@pytest.fixture
def echo_llm():
    return LLMClient("echo", "", "echo")


@pytest.fixture
def sample_manifest():
    return """# Daily Standup

## Today

**Task 1**: Fix bug
- Status: Not Started
**Goal:** resolve crash
**Acceptance Criteria:**
- [ ] App no longer crashes on launch
- [x] Crash log attached
**Complexity:** Complex
**Quality Level:** High
**Skills Needed:** swift development, testing
**Resources:** crash.log, Xcode
**Testing Requirements:** Unit test reproducing the crash
**Documentation Requirements:** Changelog entry
**Success Indicators:** Zero crashes in a week

### Task 2: Competitor scan
- **Goal**: Compare three rival apps
- **Skills Needed**: competitive analysis
- Status: Not Started

**Task 3**: Orphan block
**Skills Needed:** nothing
"""


@pytest.fixture
def reports_dir(tmp_path):
    return tmp_path / "reports"
