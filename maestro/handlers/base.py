"""Base classes for specialist handlers.

A handler declares a role and a set of skill tags; the scheduler routes each
task to the best-scoring capable handler and awaits :meth:`BaseHandler.execute`.
Handlers are built once per process and shared by every task, so they must
not keep per-task state on ``self``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from maestro.core.task.models import QualityLevel, Task, TaskResult, TaskStatus
from maestro.handlers import scorer
from maestro.handlers.models import HandlerMetadata
from maestro.utils.file_utils import safe_filename, write_text
from maestro.utils.logging import get_logger

_DEFAULT_QUALITY_GUIDANCE = "Standard quality implementation"


def _bullets(items: list[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


class BaseHandler(ABC):
    """Base class that every handler must inherit from."""

    @property
    @abstractmethod
    def metadata(self) -> HandlerMetadata:
        """Return the handler's metadata (role, skills, quality standards)."""
        ...

    @abstractmethod
    async def execute(self, task: Task, output_dir: Path) -> TaskResult:
        """Run *task* and return its :class:`TaskResult`.

        Parameters
        ----------
        task:
            The task to perform.  At minimum ``title``, ``goal``,
            ``acceptance_criteria`` and ``quality_level`` are honoured.
        output_dir:
            The run's output directory; artifacts may be written below it.
        """
        ...

    @property
    def role(self) -> str:
        return self.metadata.role

    def can_handle(self, task: Task) -> bool:
        return scorer.can_handle(task, self.metadata)

    def quality_guidance(self, level: QualityLevel) -> str:
        return self.metadata.quality_standards.get(level, _DEFAULT_QUALITY_GUIDANCE)

    def build_prompt(self, task: Task) -> str:
        """Render the task brief shared by every handler."""
        meta = self.metadata
        return (
            f"You are a {meta.role} with expertise in: {', '.join(meta.skills)}\n"
            "\n"
            f"TASK: {task.title}\n"
            f"GOAL: {task.goal}\n"
            "\n"
            "ACCEPTANCE CRITERIA:\n"
            f"{_bullets(task.acceptance_criteria)}\n"
            "\n"
            f"COMPLEXITY: {task.complexity.value}\n"
            f"QUALITY LEVEL: {task.quality_level.value}\n"
            f"QUALITY GUIDANCE: {self.quality_guidance(task.quality_level)}\n"
            "\n"
            f"SKILLS NEEDED: {', '.join(task.skills_needed)}\n"
            f"RESOURCES: {', '.join(task.resources)}\n"
            "\n"
            f"TESTING REQUIREMENTS: {task.testing_requirements}\n"
            f"DOCUMENTATION REQUIREMENTS: {task.documentation_requirements}\n"
            "\n"
            "SUCCESS INDICATORS:\n"
            f"{_bullets(task.success_indicators)}\n"
            "\n"
            "Please complete this task according to the specified quality level "
            "and requirements.\n"
            "Provide a comprehensive response that meets all acceptance criteria."
        )


class PromptHandler(BaseHandler):
    """Handler that answers a task with one LLM completion.

    Subclasses set the class attributes below; :attr:`GUIDELINES` is
    appended to the shared prompt.  By default the response is saved as
    ``<output_dir>/<title>.md`` and reported in ``generated_files``;
    subclasses change that by overriding :meth:`handle_response`.

    Parameters
    ----------
    llm:
        The :class:`~maestro.core.llm.client.LLMClient` used for completions.
    git:
        Optional :class:`~maestro.git.service.GitService`; only handlers that
        touch version control use it.
    """

    NAME: str = ""
    ROLE: str = ""
    SKILLS: list[str] = []
    QUALITY_STANDARDS: dict[QualityLevel, str] = {}
    DESCRIPTION: str = ""
    GUIDELINES: str = ""
    SYSTEM_PROMPT = "You are a senior specialist on a small product team."

    def __init__(self, llm, git=None) -> None:
        self.llm = llm
        self.git = git
        self.logger = get_logger(f"handlers.{self.NAME or type(self).__name__}")
        self._metadata = HandlerMetadata(
            name=self.NAME,
            role=self.ROLE,
            skills=list(self.SKILLS),
            quality_standards=dict(self.QUALITY_STANDARDS),
            description=self.DESCRIPTION,
        )

    @property
    def metadata(self) -> HandlerMetadata:
        return self._metadata

    def build_prompt(self, task: Task) -> str:
        base = super().build_prompt(task)
        if not self.GUIDELINES:
            return base
        return f"{base}\n\n{self.GUIDELINES.strip()}"

    async def gather_context(self, task: Task) -> str:
        """Extra prompt material fetched before the completion (none by default)."""
        return ""

    async def execute(self, task: Task, output_dir: Path) -> TaskResult:
        self.logger.info("handler_task_start", role=self.ROLE, task_title=task.title)

        prompt = self.build_prompt(task)
        context = await self.gather_context(task)
        if context:
            prompt = f"{prompt}\n\n{context}"

        response = await self.llm.complete(self.SYSTEM_PROMPT, prompt)
        result = await self.handle_response(task, response, Path(output_dir))

        self.logger.info("handler_task_complete", role=self.ROLE, task_title=task.title)
        return result

    async def handle_response(self, task: Task, response: str, output_dir: Path) -> TaskResult:
        """Save *response* as the task's Markdown output and build the result."""
        saved = await self.save_output(task, response, output_dir)
        if saved is not None:
            notes = f"Completed by {self.ROLE}. Output saved to {saved}"
        else:
            notes = f"Completed by {self.ROLE}. Output could not be saved"
        return TaskResult(
            task_id=task.id,
            content=response,
            status=TaskStatus.COMPLETED,
            notes=notes,
            generated_files=[saved] if saved is not None else None,
        )

    async def save_output(self, task: Task, content: str, output_dir: Path) -> str | None:
        """Write ``<output_dir>/<title>.md`` and return its path.

        A write failure is logged and ``None`` returned; the task itself
        still counts as completed.
        """
        output_path = output_dir / f"{safe_filename(task.title)}.md"
        try:
            await write_text(output_path, content)
        except OSError as exc:
            self.logger.error(
                "handler_output_write_failed",
                role=self.ROLE,
                path=str(output_path),
                error=str(exc),
            )
            return None
        self.logger.info("handler_output_saved", role=self.ROLE, path=str(output_path))
        return str(output_path)
