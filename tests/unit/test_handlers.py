"""Tests for the specialist handlers and the FILE-section parser."""
import asyncio
from pathlib import Path

import pytest

from maestro.core.task.models import QualityLevel, TaskStatus
from maestro.handlers.file_blocks import contained_path, parse_file_blocks
from maestro.utils.exceptions import GitError

DOC_RESPONSE = """DESCRIPTION: Two guides

FILE: guides/setup.md
DESCRIPTION: Installation steps
```markdown
# Setup

Run the installer.
```

FILE: ../escape.md
DESCRIPTION: Tries to leave the run directory
```markdown
# Escape
```
"""

CODE_RESPONSE = """DESCRIPTION: Adds the crash fix

FILE: Sources/App/Launch.swift
DESCRIPTION: Guard against nil window
```swift
let window = NSWindow()
```

TESTS: Tests/LaunchTests.swift
```swift
func testLaunch() {}
```
"""


class CannedLLM:
    """LLM double returning a fixed response and recording prompts."""

    def __init__(self, response):
        self.response = response
        self.prompts = []

    async def complete(self, system, user):
        self.prompts.append(user)
        return self.response


class FakeGit:
    def __init__(self, workdir, diff="diff --git a/x b/x", fail_diff=False):
        self.workdir = Path(workdir)
        self.lock = asyncio.Lock()
        self.diff = diff
        self.fail_diff = fail_diff
        self.calls = []

    async def create_branch(self, title):
        self.calls.append(("branch", title))
        return "agent/fix-bug-1"

    async def commit(self, message, files=None):
        self.calls.append(("commit", message, list(files or [])))

    async def push(self, branch):
        self.calls.append(("push", branch))

    async def create_pull_request(self, branch, title, body):
        self.calls.append(("pr", branch, title))
        return "https://github.com/o/r/pull/42"

    async def pr_diff(self, url):
        self.calls.append(("diff", url))
        if self.fail_diff:
            raise GitError("gh pr diff 9", "not found")
        return self.diff


class TestFileBlocks:
    def test_parse_sections(self):
        blocks = parse_file_blocks(DOC_RESPONSE)
        assert [b.path for b in blocks] == ["guides/setup.md", "../escape.md"]
        assert blocks[0].description == "Installation steps"
        assert blocks[0].content == "# Setup\n\nRun the installer."

    def test_tests_prefix_and_missing_description(self):
        blocks = parse_file_blocks(CODE_RESPONSE)
        assert [b.path for b in blocks] == ["Sources/App/Launch.swift", "Tests/LaunchTests.swift"]
        assert blocks[1].description == ""

    def test_section_without_fence_dropped(self):
        assert parse_file_blocks("FILE: empty.md\nDESCRIPTION: nothing\n") == []

    def test_contained_path(self, tmp_path):
        assert contained_path(tmp_path, "a/b.md") == tmp_path / "a" / "b.md"
        assert contained_path(tmp_path, "../x.md") == tmp_path / "x.md"
        assert contained_path(tmp_path, "/etc/passwd") == tmp_path / "passwd"


class TestPromptHandler:
    @pytest.fixture
    def research(self, echo_llm):
        from maestro.handlers.public.research_handler import ResearchHandler

        return ResearchHandler(llm=echo_llm)

    def test_metadata(self, research):
        assert research.metadata.name == "research"
        assert research.role == "Market Research Specialist"
        assert "competitive analysis" in research.metadata.skills

    def test_prompt_contains_task_brief(self, research, make_task):
        task = make_task(
            title="Rivals",
            goal="Compare rivals",
            skills=["market research"],
            acceptance_criteria=["Three rivals"],
            quality_level=QualityLevel.HIGH,
        )
        prompt = research.build_prompt(task)
        assert prompt.startswith("You are a Market Research Specialist with expertise in:")
        assert "TASK: Rivals" in prompt
        assert "GOAL: Compare rivals" in prompt
        assert "- Three rivals" in prompt
        assert "QUALITY LEVEL: High" in prompt
        assert "QUALITY GUIDANCE: Comprehensive analysis" in prompt
        assert "## Research Guidelines:" in prompt

    def test_unknown_quality_guidance_falls_back(self, make_handler):
        handler = make_handler("x", "X", ["y"])
        assert handler.quality_guidance(QualityLevel.CRITICAL) == "Standard quality implementation"

    @pytest.mark.asyncio
    async def test_execute_saves_markdown(self, research, make_task, tmp_path):
        task = make_task(title="Rival apps / 2024", skills=["market research"])
        result = await research.execute(task, tmp_path)

        expected = tmp_path / "Rival_apps___2024.md"
        assert result.status == TaskStatus.COMPLETED
        assert result.task_id == task.id
        assert result.generated_files == [str(expected)]
        assert result.notes == f"Completed by Market Research Specialist. Output saved to {expected}"
        assert expected.read_text(encoding="utf-8") == result.content

    @pytest.mark.asyncio
    async def test_write_failure_still_completes(self, research, make_task, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("", encoding="utf-8")

        result = await research.execute(make_task(skills=["market research"]), blocker)

        assert result.status == TaskStatus.COMPLETED
        assert result.generated_files is None
        assert "could not be saved" in result.notes


class TestDocumentationHandler:
    @pytest.mark.asyncio
    async def test_writes_each_file_section(self, make_task, tmp_path):
        from maestro.handlers.public.documentation_handler import DocumentationHandler

        handler = DocumentationHandler(llm=CannedLLM(DOC_RESPONSE))
        result = await handler.execute(make_task(skills=["documentation"]), tmp_path)

        setup = tmp_path / "guides" / "setup.md"
        escaped = tmp_path / "escape.md"
        assert result.generated_files == [str(setup), str(escaped)]
        assert setup.read_text(encoding="utf-8") == "# Setup\n\nRun the installer."
        assert result.notes.startswith("Created 2 documentation files:")
        assert "(Description: Installation steps)" in result.content

    @pytest.mark.asyncio
    async def test_plain_response_saved_whole(self, make_task, tmp_path):
        from maestro.handlers.public.documentation_handler import DocumentationHandler

        handler = DocumentationHandler(llm=CannedLLM("# Just one doc"))
        result = await handler.execute(make_task(title="Guide"), tmp_path)

        assert result.generated_files == [str(tmp_path / "Guide.md")]


class TestDeveloperHandler:
    @pytest.mark.asyncio
    async def test_without_git_writes_to_run_dir(self, make_task, tmp_path):
        from maestro.handlers.public.developer_handler import DeveloperHandler

        handler = DeveloperHandler(llm=CannedLLM(CODE_RESPONSE))
        result = await handler.execute(make_task(), tmp_path)

        assert (tmp_path / "Sources" / "App" / "Launch.swift").is_file()
        assert (tmp_path / "Tests" / "LaunchTests.swift").is_file()
        assert str(tmp_path / "Fix_bug.md") in result.generated_files
        assert result.pull_request_url is None

    @pytest.mark.asyncio
    async def test_with_git_opens_pull_request(self, make_task, tmp_path):
        from maestro.handlers.public.developer_handler import DeveloperHandler

        repo = tmp_path / "repo"
        git = FakeGit(repo)
        handler = DeveloperHandler(llm=CannedLLM(CODE_RESPONSE), git=git)
        result = await handler.execute(make_task(), tmp_path / "run")

        assert [c[0] for c in git.calls] == ["branch", "commit", "push", "pr"]
        committed = git.calls[1][2]
        assert str(repo / "Sources" / "App" / "Launch.swift") in committed
        assert git.calls[1][1].startswith("feat: Fix bug")
        assert result.pull_request_url == "https://github.com/o/r/pull/42"
        assert "agent/fix-bug-1" in result.notes

    @pytest.mark.asyncio
    async def test_git_failure_propagates(self, make_task, tmp_path):
        from maestro.handlers.public.developer_handler import DeveloperHandler

        class BrokenGit(FakeGit):
            async def push(self, branch):
                raise GitError("git push -u origin x", "rejected")

        handler = DeveloperHandler(llm=CannedLLM(CODE_RESPONSE), git=BrokenGit(tmp_path))
        with pytest.raises(GitError):
            await handler.execute(make_task(), tmp_path / "run")

    @pytest.mark.asyncio
    async def test_no_file_sections_skips_git(self, make_task, tmp_path):
        from maestro.handlers.public.developer_handler import DeveloperHandler

        git = FakeGit(tmp_path)
        handler = DeveloperHandler(llm=CannedLLM("no code today"), git=git)
        result = await handler.execute(make_task(), tmp_path)

        assert git.calls == []
        assert result.generated_files == [str(tmp_path / "Fix_bug.md")]


class TestQAReviewHandler:
    PR = "https://github.com/o/r/pull/9"

    def test_extract_pr_url(self, make_task):
        from maestro.handlers.public.qa_review_handler import extract_pr_url

        assert extract_pr_url(make_task(resources=["notes", self.PR])) == self.PR
        assert extract_pr_url(make_task(goal=f"Review {self.PR} today")) == self.PR
        assert extract_pr_url(make_task()) is None

    def test_parse_rating(self):
        from maestro.handlers.public.qa_review_handler import parse_rating

        assert parse_rating("RATING: 8/10\nRECOMMENDATION: APPROVE") == 8.0
        assert parse_rating("RATING: 14") == 10.0
        assert parse_rating("no rating") is None

    @pytest.mark.asyncio
    async def test_diff_included_in_prompt(self, make_task, tmp_path):
        from maestro.handlers.public.qa_review_handler import QAReviewHandler

        llm = CannedLLM("RATING: 7/10\nRECOMMENDATION: COMMENT")
        git = FakeGit(tmp_path, diff="+ added line")
        handler = QAReviewHandler(llm=llm, git=git)

        result = await handler.execute(make_task(skills=["pr review"], resources=[self.PR]), tmp_path)

        assert "+ added line" in llm.prompts[0]
        assert result.quality_score == 7.0
        assert result.notes == f"QA review completed for PR {self.PR} with rating 7/10"

    @pytest.mark.asyncio
    async def test_diff_failure_is_not_fatal(self, make_task, tmp_path):
        from maestro.handlers.public.qa_review_handler import QAReviewHandler

        llm = CannedLLM("looks fine")
        handler = QAReviewHandler(llm=llm, git=FakeGit(tmp_path, fail_diff=True))

        result = await handler.execute(make_task(resources=[self.PR]), tmp_path)

        assert "diff unavailable" in llm.prompts[0]
        assert result.status == TaskStatus.COMPLETED
        assert result.quality_score is None

    @pytest.mark.asyncio
    async def test_without_git_no_diff_fetched(self, make_task, tmp_path):
        from maestro.handlers.public.qa_review_handler import QAReviewHandler

        llm = CannedLLM("RATING: 5/10")
        handler = QAReviewHandler(llm=llm)
        await handler.execute(make_task(resources=[self.PR]), tmp_path)

        assert "## Pull Request" not in llm.prompts[0]
