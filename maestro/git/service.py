"""Thin async wrapper around the ``git`` and ``gh`` command-line tools."""

from __future__ import annotations

import asyncio
import re
import time
from datetime import datetime, timezone
from pathlib import Path

from maestro.utils.exceptions import GitError
from maestro.utils.logging import get_logger

logger = get_logger("git")

_BRANCH_UNSAFE = re.compile(r"[^a-z0-9-]")


def branch_name_for(title: str, timestamp: int | None = None) -> str:
    """Return ``agent/<slug>-<epoch>`` for a task title."""
    stamp = int(time.time()) if timestamp is None else timestamp
    slug = _BRANCH_UNSAFE.sub("", title.lower().replace(" ", "-"))
    return f"agent/{slug}-{stamp}"


def _pr_number(url: str) -> str:
    return url.rstrip("/").rsplit("/", 1)[-1]


class GitService:
    """Run version-control commands inside *workdir*.

    Parameters
    ----------
    workdir:
        Repository working directory the commands run in.
    base_branch:
        Branch new work branches are cut from and pull requests target.
    """

    def __init__(self, workdir: str | Path = ".", base_branch: str = "main") -> None:
        self.workdir = Path(workdir)
        self.base_branch = base_branch
        # Handlers share one working tree; hold this around a branch-commit-push sequence.
        self.lock = asyncio.Lock()

    async def create_branch(self, title: str) -> str:
        """Update the base branch and check out a fresh work branch."""
        branch = branch_name_for(title)
        await self._run("git", "checkout", self.base_branch)
        await self._run("git", "pull", "origin", self.base_branch)
        await self._run("git", "checkout", "-b", branch)
        logger.info("git_branch_created", branch=branch)
        return branch

    async def commit(self, message: str, files: list[str] | None = None) -> None:
        """Stage *files* (or every change when empty) and commit."""
        if files:
            await self._run("git", "add", "--", *files)
        else:
            await self._run("git", "add", ".")
        await self._run("git", "commit", "-m", message)

    async def push(self, branch: str) -> None:
        await self._run("git", "push", "-u", "origin", branch)

    async def create_pull_request(self, branch: str, title: str, body: str) -> str:
        """Open a pull request with ``gh`` and return its URL."""
        full_body = (
            "## Description\n"
            f"{body}\n\n"
            "## Changes Made\n"
            "- Automated changes by Maestro\n"
            f"- Branch: `{branch}`\n"
            f"- Base: `{self.base_branch}`\n\n"
            "## QA Checklist\n"
            "- [ ] Code compiles without errors\n"
            "- [ ] Tests pass\n"
            "- [ ] Changes reviewed\n\n"
            "## Agent Info\n"
            f"- Generated: {datetime.now(timezone.utc).isoformat()}\n"
            "- Requires human review before merge\n"
        )
        url = await self._run(
            "gh", "pr", "create",
            "--title", title,
            "--body", full_body,
            "--base", self.base_branch,
            "--head", branch,
        )
        logger.info("pull_request_created", branch=branch, url=url)
        return url

    async def pr_diff(self, url: str) -> str:
        return await self._run("gh", "pr", "diff", _pr_number(url))

    async def _run(self, *command: str) -> str:
        """Run *command* and return its trimmed combined output.

        Raises :class:`GitError` when the command cannot be started or exits
        non-zero.
        """
        printable = " ".join(command)
        logger.debug("git_command", command=printable, cwd=str(self.workdir))
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                cwd=str(self.workdir),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as exc:
            raise GitError(printable, str(exc)) from exc

        stdout, _ = await process.communicate()
        output = stdout.decode("utf-8", errors="replace").strip()
        if process.returncode != 0:
            raise GitError(printable, output)
        return output
