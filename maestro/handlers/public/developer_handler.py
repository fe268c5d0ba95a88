"""Developer handler -- produces code changes and, with git enabled, a pull request."""

from pathlib import Path

from maestro.core.task.models import QualityLevel, Task, TaskResult, TaskStatus
from maestro.handlers.base import PromptHandler
from maestro.handlers.file_blocks import FileBlock, parse_file_blocks, write_file_blocks


def _pr_description(task: Task, blocks: list[FileBlock]) -> str:
    changes = "\n".join(f"- `{b.path}`: {b.description or 'updated'}" for b in blocks)
    criteria = "\n".join(f"- [ ] {c}" for c in task.acceptance_criteria)
    return f"{task.goal}\n\n### Files\n{changes}\n\n### Acceptance Criteria\n{criteria}"


class DeveloperHandler(PromptHandler):
    """Writes the files the model proposes.

    Without a git service the files land in the run directory.  With one,
    they are written into the repository working tree on a new branch,
    committed, pushed, and a pull request is opened; its URL is returned
    as ``pull_request_url``.
    """

    NAME = "developer"
    ROLE = "Swift Developer"
    SKILLS = [
        "swift development",
        "macos development",
        "swiftui",
        "uikit",
        "code architecture",
        "testing",
    ]
    QUALITY_STANDARDS = {
        QualityLevel.STANDARD: "Working code with basic tests and documentation",
        QualityLevel.HIGH: (
            "Production-ready code with comprehensive tests, documentation, and error handling"
        ),
        QualityLevel.CRITICAL: (
            "Enterprise-grade code with full test coverage, performance optimization, "
            "and security review"
        ),
    }
    DESCRIPTION = "Implements features as complete source files, optionally via pull request."
    GUIDELINES = """
## Development Guidelines:

1. **File Changes**: Specify exact file paths and complete file contents
2. **Code Quality**: Follow Swift best practices and Apple's Human Interface Guidelines
3. **Testing**: Include unit tests for new functionality
4. **Documentation**: Add inline documentation for public APIs

## Response Format:

DESCRIPTION: Brief description of changes made

FILE: path/to/file.swift
```swift
// Complete file contents here
```

TESTS: path/to/tests.swift
```swift
// Test file contents here
```
"""

    async def handle_response(self, task: Task, response: str, output_dir: Path) -> TaskResult:
        blocks = parse_file_blocks(response)
        saved = await self.save_output(task, response, output_dir)

        if not blocks:
            written: list[str] = []
            pr_url = None
            notes = f"Completed by {self.ROLE}. No file changes in response"
        elif self.git is None:
            written = await write_file_blocks(blocks, output_dir)
            pr_url = None
            notes = f"Completed by {self.ROLE}. Wrote {len(written)} files to {output_dir}"
        else:
            async with self.git.lock:
                branch = await self.git.create_branch(task.title)
                written = await write_file_blocks(blocks, Path(self.git.workdir))
                await self.git.commit(f"feat: {task.title}\n\n{task.goal}", written)
                await self.git.push(branch)
                pr_url = await self.git.create_pull_request(
                    branch, task.title, _pr_description(task, blocks)
                )
            notes = f"Code changes committed to branch {branch}, PR created at {pr_url}"

        generated = written + ([saved] if saved is not None else [])
        return TaskResult(
            task_id=task.id,
            content=response,
            status=TaskStatus.COMPLETED,
            notes=notes,
            generated_files=generated or None,
            pull_request_url=pr_url,
        )
