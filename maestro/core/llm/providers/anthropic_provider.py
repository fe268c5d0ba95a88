"""Anthropic Claude backend, used when ``ANTHROPIC_API_KEY`` is configured."""

from __future__ import annotations

import anthropic

from maestro.utils.exceptions import LLMError
from maestro.utils.logging import get_logger

logger = get_logger("llm.anthropic")

# Handler answers are whole documents or source files; leave them room.
DEFAULT_MAX_TOKENS = 4000


class AnthropicProvider:
    """Send one system + user turn to the Messages API.

    Parameters
    ----------
    api_key:
        Anthropic API key; an empty key is rejected up front.
    model:
        Model identifier, e.g. ``"claude-3-5-sonnet-20241022"``.
    timeout:
        Per-request timeout in seconds.
    max_tokens:
        Upper bound on the length of one answer.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        timeout: float = 60.0,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ):
        if not api_key:
            raise LLMError("anthropic", "API key is required but was empty.")
        self.client = anthropic.AsyncAnthropic(api_key=api_key, timeout=timeout)
        self.model = model
        self.max_tokens = max_tokens

    async def complete(self, system: str, user: str) -> str:
        try:
            message = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                system=system,
                messages=[{"role": "user", "content": user}],
            )
        except anthropic.APIError as exc:
            logger.error("anthropic_request_failed", model=self.model, error=str(exc))
            raise LLMError("anthropic", str(exc)) from exc

        text = "".join(
            block.text for block in message.content if getattr(block, "type", "") == "text"
        )
        if not text:
            raise LLMError("anthropic", f"empty answer (stop_reason={message.stop_reason})")
        if message.stop_reason == "max_tokens":
            logger.warning("anthropic_answer_truncated", model=self.model, max_tokens=self.max_tokens)
        return text
