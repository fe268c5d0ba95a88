import sys

import pytest

from maestro.git.service import GitService, branch_name_for
from maestro.utils.exceptions import GitError


class RecordingGit(GitService):
    """GitService whose commands are recorded instead of executed."""

    def __init__(self, workdir, outputs=None):
        super().__init__(workdir, base_branch="develop")
        self.commands = []
        self.outputs = outputs or {}

    async def _run(self, *command):
        self.commands.append(command)
        return self.outputs.get(command[:3], "")


def test_branch_name_slug():
    assert branch_name_for("Fix Login Bug!", 123) == "agent/fix-login-bug-123"
    assert branch_name_for("Ünïcode & stuff", 7) == "agent/ncode--stuff-7"


@pytest.mark.asyncio
async def test_create_branch_from_base(tmp_path):
    git = RecordingGit(tmp_path)
    branch = await git.create_branch("Add feature")

    assert branch.startswith("agent/add-feature-")
    assert git.commands == [
        ("git", "checkout", "develop"),
        ("git", "pull", "origin", "develop"),
        ("git", "checkout", "-b", branch),
    ]


@pytest.mark.asyncio
async def test_commit_stages_listed_files(tmp_path):
    git = RecordingGit(tmp_path)
    await git.commit("feat: x", ["a.swift", "b.swift"])
    await git.commit("chore: all")

    assert git.commands == [
        ("git", "add", "--", "a.swift", "b.swift"),
        ("git", "commit", "-m", "feat: x"),
        ("git", "add", "."),
        ("git", "commit", "-m", "chore: all"),
    ]


@pytest.mark.asyncio
async def test_pull_request_returns_url(tmp_path):
    url = "https://github.com/o/r/pull/5"
    git = RecordingGit(tmp_path, outputs={("gh", "pr", "create"): url})

    assert await git.create_pull_request("agent/x-1", "X", "body") == url
    command = git.commands[0]
    assert command[command.index("--base") + 1] == "develop"
    assert command[command.index("--head") + 1] == "agent/x-1"


@pytest.mark.asyncio
async def test_pr_diff_uses_number(tmp_path):
    git = RecordingGit(tmp_path)
    await git.pr_diff("https://github.com/o/r/pull/17")
    assert git.commands == [("gh", "pr", "diff", "17")]


@pytest.mark.asyncio
async def test_missing_executable_raises(tmp_path):
    git = GitService(tmp_path)
    with pytest.raises(GitError) as exc_info:
        await git._run("maestro-no-such-binary")
    assert exc_info.value.command == "maestro-no-such-binary"


@pytest.mark.asyncio
async def test_nonzero_exit_raises_with_output(tmp_path):
    git = GitService(tmp_path)
    with pytest.raises(GitError) as exc_info:
        await git._run(sys.executable, "-c", "import sys; print('boom'); sys.exit(3)")
    assert exc_info.value.output == "boom"


@pytest.mark.asyncio
async def test_success_returns_trimmed_output(tmp_path):
    git = GitService(tmp_path)
    assert await git._run(sys.executable, "-c", "print('  ok  ')") == "ok"
