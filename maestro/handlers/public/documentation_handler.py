"""Documentation handler -- writes one or more Markdown documents per task."""

from pathlib import Path

from maestro.core.task.models import QualityLevel, Task, TaskResult, TaskStatus
from maestro.handlers.base import PromptHandler
from maestro.handlers.file_blocks import parse_file_blocks, write_file_blocks


class DocumentationHandler(PromptHandler):
    NAME = "documentation"
    ROLE = "Documentation Specialist"
    SKILLS = [
        "technical writing",
        "documentation",
        "api documentation",
        "user guides",
        "markdown",
        "content creation",
    ]
    QUALITY_STANDARDS = {
        QualityLevel.STANDARD: "Clear, well-structured documentation with basic examples",
        QualityLevel.HIGH: (
            "Comprehensive documentation with examples, diagrams, and cross-references"
        ),
        QualityLevel.CRITICAL: (
            "Enterprise-grade documentation with full coverage, interactive examples, "
            "and accessibility compliance"
        ),
    }
    DESCRIPTION = "Produces user and developer documentation as Markdown files."
    GUIDELINES = """
## Documentation Guidelines:

1. **Clear Structure**: Use proper headings, sections, and navigation
2. **Code Examples**: Include code examples where relevant
3. **User-Focused**: Write for both developers and end users as appropriate
4. **Markdown Format**: Use proper markdown syntax
5. **Accessibility**: Ensure documentation is accessible and well-organized

## Response Format:

DESCRIPTION: Brief description of documentation created

FILE: path/to/documentation.md
DESCRIPTION: Purpose of this documentation file
```markdown
# Documentation content here
```

FILE: path/to/another-doc.md
DESCRIPTION: Purpose of this documentation file
```markdown
# More documentation content
```
"""

    async def handle_response(self, task: Task, response: str, output_dir: Path) -> TaskResult:
        blocks = parse_file_blocks(response)
        if not blocks:
            # No FILE sections; keep the whole answer as a single document.
            return await super().handle_response(task, response, output_dir)

        written = await write_file_blocks(blocks, output_dir)
        listing = "\n".join(
            f"- {path} (Description: {block.description or 'n/a'})"
            for path, block in zip(written, blocks)
        )
        content = (
            "# Documentation Task Completed\n\n"
            f"## Task: {task.title}\n\n"
            "## Files Created:\n"
            f"{listing}\n\n"
            "## Documentation Response:\n"
            f"{response}"
        )
        return TaskResult(
            task_id=task.id,
            content=content,
            status=TaskStatus.COMPLETED,
            notes=f"Created {len(written)} documentation files: {', '.join(written)}",
            generated_files=written,
        )
