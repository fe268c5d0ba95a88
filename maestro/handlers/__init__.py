"""Handlers subsystem -- registry, loader, scoring and base classes for specialists."""

from maestro.handlers.base import BaseHandler, PromptHandler
from maestro.handlers.models import HandlerMetadata
from maestro.handlers.registry import HandlerRegistry
from maestro.handlers.scorer import can_handle, score

__all__ = [
    "BaseHandler",
    "HandlerMetadata",
    "HandlerRegistry",
    "PromptHandler",
    "can_handle",
    "score",
]
