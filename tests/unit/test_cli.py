from pathlib import Path

import pytest
from click.testing import CliRunner

from maestro import cli
from maestro.core.llm.client import LLMClient
from maestro.handlers.registry import HandlerRegistry

MANIFEST = """# Sprint

**Task 1**: Rival scan
- Status: Not Started
**Goal:** Compare rival apps
**Skills Needed:** market research

**Task 2**: Port mainframe job
- Status: Not Started
**Goal:** Rewrite the batch job
**Skills Needed:** cobol
"""


@pytest.fixture(autouse=True)
def offline(monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda debug=False: None)
    monkeypatch.setattr(cli, "build_llm_client", lambda: LLMClient("echo", "", "echo"))
    monkeypatch.setattr(cli, "build_git_service", lambda: None)


@pytest.fixture
def runner():
    return CliRunner()


def test_demo_task_routes_to_research():
    task = cli.demo_task()
    assert task.title == "Competitive Analysis Research"
    assert "competitive analysis" in task.skills_needed


def test_demo_writes_result_file(runner):
    with runner.isolated_filesystem():
        result = runner.invoke(cli.main, [])

        assert result.exit_code == 0, result.output
        assert "Task completed" in result.output
        saved = list(Path(".").glob("test-result-*.txt"))
        assert len(saved) == 1
        assert saved[0].read_text(encoding="utf-8").startswith("# Placeholder Response")


def test_demo_failure_exits_nonzero(runner, monkeypatch):
    monkeypatch.setattr(cli, "build_registry", lambda llm, git: HandlerRegistry())
    with runner.isolated_filesystem():
        result = runner.invoke(cli.main, [])

        assert result.exit_code == 1
        assert "Task failed: NoSuitableHandler" in result.output
        assert not list(Path(".").glob("test-result-*.txt"))


def test_manifest_run(runner):
    with runner.isolated_filesystem():
        Path("sprint.md").write_text(MANIFEST, encoding="utf-8")

        result = runner.invoke(cli.main, ["sprint.md", "--reports-dir", "out"])

        assert result.exit_code == 0, result.output
        assert "Loaded 2 tasks from sprint.md" in result.output
        assert "Success: 1/2" in result.output
        assert "Failed: 1/2" in result.output

        run_dirs = list(Path("out").iterdir())
        assert len(run_dirs) == 1
        assert list(run_dirs[0].glob("execution-report-*.md"))
        assert list(run_dirs[0].glob("execution-progress-*.json"))

        updated = Path("sprint.md").read_text(encoding="utf-8")
        assert "- Status: Completed" in updated
        assert "- Status: Failed" in updated


def test_missing_manifest(runner):
    with runner.isolated_filesystem():
        result = runner.invoke(cli.main, ["absent.md"])

        assert result.exit_code == 1
        assert "Error: Manifest not found: absent.md" in result.output


def test_unusable_reports_dir(runner):
    with runner.isolated_filesystem():
        Path("sprint.md").write_text(MANIFEST, encoding="utf-8")
        Path("blocked").write_text("", encoding="utf-8")

        result = runner.invoke(cli.main, ["sprint.md", "--reports-dir", "blocked/reports"])

        assert result.exit_code == 1
        assert "Cannot create output directory" in result.output
        assert "- Status: Not Started" in Path("sprint.md").read_text(encoding="utf-8")
