"""LLM client shared by every handler of a run.

A single :class:`LLMClient` fronts one backend:

  - ``anthropic``: Anthropic Messages API
  - ``openai``, ``ollama``, ``deepseek``, ``groq``, ``together``: known
    chat-completions services with a default base URL
  - ``openai_compatible``: any chat-completions service at ``base_url``
  - ``echo``: offline placeholder answers

All handlers share the client, so its gate is what bounds the number of
completions in flight across concurrently running tasks; a task that finds
every slot taken waits for one to free up.
"""

from __future__ import annotations

import asyncio

from maestro.utils.exceptions import LLMError
from maestro.utils.logging import get_logger

COMPATIBLE_BASE_URLS: dict[str, str] = {
    "openai": "https://api.openai.com/v1",
    "ollama": "http://localhost:11434/v1",
    "deepseek": "https://api.deepseek.com",
    "together": "https://api.together.xyz/v1",
    "groq": "https://api.groq.com/openai/v1",
}

DEFAULT_MAX_CONCURRENCY = 3


def supported_providers() -> list[str]:
    return ["anthropic", "echo", *COMPATIBLE_BASE_URLS, "openai_compatible"]


class LLMClient:
    """Gate completions for one configured backend.

    Parameters
    ----------
    provider:
        One of :func:`supported_providers`.
    api_key:
        Key for the backend; may be empty for ``ollama`` and ``echo``.
    model:
        Model identifier passed through to the backend.
    base_url:
        Overrides the default URL of a known chat-completions service;
        required for ``openai_compatible``.
    max_concurrency:
        Completion slots; at least one.
    timeout:
        Per-request timeout in seconds.
    """

    def __init__(
        self,
        provider: str,
        api_key: str,
        model: str,
        base_url: str | None = None,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        timeout: float = 60.0,
    ):
        if max_concurrency < 1:
            raise LLMError(provider, f"max_concurrency must be at least 1, got {max_concurrency}")

        self.provider = provider
        self.model = model
        self.base_url = base_url
        self.max_concurrency = max_concurrency
        self.timeout = timeout
        self.logger = get_logger("llm")
        self._gate = asyncio.Semaphore(max_concurrency)
        self._provider_client = self._build_backend(api_key)

    def _build_backend(self, api_key: str):
        if self.provider == "anthropic":
            from maestro.core.llm.providers.anthropic_provider import AnthropicProvider

            return AnthropicProvider(api_key, self.model, timeout=self.timeout)

        if self.provider == "echo":
            from maestro.core.llm.providers.echo_provider import EchoProvider

            return EchoProvider(self.model)

        if self.provider == "openai_compatible" or self.provider in COMPATIBLE_BASE_URLS:
            from maestro.core.llm.providers.openai_compatible_provider import (
                OpenAICompatibleProvider,
            )

            url = self.base_url or COMPATIBLE_BASE_URLS.get(self.provider)
            if not url:
                raise LLMError(
                    self.provider,
                    "base_url is required for openai_compatible; set LLM_BASE_URL.",
                )
            return OpenAICompatibleProvider(
                api_key=api_key,
                model=self.model,
                base_url=url,
                provider_name=self.provider,
                timeout=self.timeout,
            )

        raise LLMError(
            self.provider,
            f"Unknown provider {self.provider!r}; expected one of "
            f"{', '.join(supported_providers())}",
        )

    async def complete(self, system: str, user: str) -> str:
        """Return the backend's answer to one system + user turn.

        Blocks until a slot is free.  Any backend failure surfaces as
        :class:`LLMError`.
        """
        async with self._gate:
            self.logger.debug(
                "llm_request",
                provider=self.provider,
                model=self.model,
                prompt_chars=len(user),
            )
            try:
                answer = await self._provider_client.complete(system, user)
            except LLMError:
                raise
            except Exception as exc:
                self.logger.error("llm_request_failed", provider=self.provider, error=str(exc))
                raise LLMError(self.provider, str(exc) or type(exc).__name__) from exc

        self.logger.info("llm_response", provider=self.provider, answer_chars=len(answer))
        return answer
