"""Backend for chat-completions endpoints that speak the OpenAI wire format.

One class covers OpenAI itself, a local Ollama server, DeepSeek, Groq,
Together and any self-hosted gateway; only the base URL differs.
"""

from __future__ import annotations

import openai

from maestro.utils.exceptions import LLMError
from maestro.utils.logging import get_logger

logger = get_logger("llm.openai_compatible")

DEFAULT_MAX_TOKENS = 4000
DEFAULT_TEMPERATURE = 0.7

# The SDK refuses an empty key; keyless servers ignore whatever is sent.
_KEYLESS_PLACEHOLDER = "not-needed"


class OpenAICompatibleProvider:
    """Send one system + user turn to ``<base_url>/chat/completions``.

    Parameters
    ----------
    api_key:
        API key; may be empty for servers without authentication.
    model:
        Model identifier as the server knows it (``"llama3.2:3b"``, ``"gpt-4o"``).
    base_url:
        API root, e.g. ``"http://localhost:11434/v1"``.
    provider_name:
        Name reported in logs and in :class:`LLMError`.
    timeout:
        Per-request timeout in seconds.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str,
        provider_name: str = "openai_compatible",
        timeout: float = 60.0,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        temperature: float = DEFAULT_TEMPERATURE,
    ):
        if not base_url:
            raise LLMError(provider_name, "base_url is required but was empty.")

        self.client = openai.AsyncOpenAI(
            api_key=api_key or _KEYLESS_PLACEHOLDER,
            base_url=base_url,
            timeout=timeout,
        )
        self.model = model
        self.provider_name = provider_name
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def complete(self, system: str, user: str) -> str:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
            )
        except openai.APIError as exc:
            logger.error(
                "chat_completion_failed",
                provider=self.provider_name,
                model=self.model,
                error=str(exc),
            )
            raise LLMError(self.provider_name, str(exc)) from exc

        if not response.choices or not response.choices[0].message.content:
            raise LLMError(self.provider_name, "empty answer")

        choice = response.choices[0]
        if choice.finish_reason == "length":
            logger.warning(
                "chat_completion_truncated",
                provider=self.provider_name,
                max_tokens=self.max_tokens,
            )
        return choice.message.content
