"""Maestro -- skill-matched task orchestration over a Markdown manifest."""

__version__ = "0.1.0"
