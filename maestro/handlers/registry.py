"""Central registry that discovers, stores, and selects handlers."""

from __future__ import annotations

from collections.abc import Iterator

from maestro.core.task.models import Task
from maestro.handlers import scorer
from maestro.handlers.base import BaseHandler
from maestro.handlers.loader import load_handlers_from_directory
from maestro.handlers.models import HandlerMetadata
from maestro.utils.exceptions import HandlerNotFoundError, NoSuitableHandlerError
from maestro.utils.logging import get_logger

logger = get_logger(__name__)


class HandlerRegistry:
    """Ordered collection of handlers.

    Registration order matters: it is the tie-break when two capable
    handlers score the same for a task.

    Typical lifecycle::

        registry = HandlerRegistry()
        registry.discover(public_dir, user_dir, llm=llm_client)
        handler = registry.select(task)
        result = await handler.execute(task, output_dir)
    """

    def __init__(self, handlers: list[BaseHandler] | None = None) -> None:
        self._handlers: dict[str, BaseHandler] = {}
        for handler in handlers or []:
            self.register(handler)

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def discover(self, public_dir: str, user_dir: str, **dependencies) -> int:
        """Load ``*_handler.py`` files from *public_dir* then *user_dir*.

        *dependencies* (e.g. ``llm``, ``git``) are passed to every handler
        constructor.  Returns the number of handlers registered.
        """
        count = 0
        for directory in (public_dir, user_dir):
            for handler in load_handlers_from_directory(directory, **dependencies):
                self.register(handler)
                count += 1

        logger.info("handlers_discovered", count=count)
        return count

    # ------------------------------------------------------------------
    # Registration & lookup
    # ------------------------------------------------------------------

    def register(self, handler: BaseHandler) -> None:
        """Add *handler*, keyed by its metadata name.

        A handler with the same name replaces the earlier one but keeps its
        position in the iteration order (user handlers can therefore
        override public ones).
        """
        name = handler.metadata.name
        if name in self._handlers:
            logger.warning("handler_overwritten", handler_name=name)
        self._handlers[name] = handler
        logger.debug("handler_registered", handler_name=name, role=handler.metadata.role)

    def get(self, name: str) -> BaseHandler:
        """Return the handler registered under *name*.

        Raises :class:`HandlerNotFoundError` if no such handler exists.
        """
        handler = self._handlers.get(name)
        if handler is None:
            raise HandlerNotFoundError(name)
        return handler

    def select(self, task: Task) -> BaseHandler:
        """Return the capable handler with the strictly highest score.

        Ties keep the handler registered first.  Raises
        :class:`NoSuitableHandlerError` when no handler is capable.
        """
        best: BaseHandler | None = None
        best_score = 0

        for handler in self._handlers.values():
            if not handler.can_handle(task):
                continue
            candidate_score = scorer.score(task, handler.metadata)
            if candidate_score > best_score:
                best, best_score = handler, candidate_score

        if best is None:
            raise NoSuitableHandlerError(task.title)

        logger.debug(
            "handler_selected",
            task_title=task.title,
            role=best.metadata.role,
            score=best_score,
        )
        return best

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def list_all(self) -> list[HandlerMetadata]:
        """Return metadata for every registered handler, in order."""
        return [h.metadata for h in self._handlers.values()]

    def __iter__(self) -> Iterator[BaseHandler]:
        return iter(list(self._handlers.values()))

    def __len__(self) -> int:
        return len(self._handlers)

    def __contains__(self, name: str) -> bool:
        return name in self._handlers
