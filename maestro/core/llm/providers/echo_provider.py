"""Offline provider that answers without any network access.

Used when no API key is configured and no local Ollama server is reachable,
so a manifest can still be run end-to-end.  The response restates the
prompt as a Markdown document.
"""

from __future__ import annotations

from maestro.utils.logging import get_logger

logger = get_logger("llm.echo")


class EchoProvider:
    """Return a deterministic placeholder document for every request."""

    def __init__(self, model: str = "echo"):
        self.model = model

    async def complete(self, system: str, user: str) -> str:
        logger.warning("echo_provider_response", model=self.model)
        body = user.strip() or "(empty prompt)"
        return (
            "# Placeholder Response\n\n"
            "_No LLM backend was configured; this document restates the request._\n\n"
            "## Request\n\n"
            f"{body}\n"
        )
