"""Wiring -- builds the LLM client, git service, handler registry and scheduler.

The CLI calls the ``build_*`` functions directly.  The API builds the
registry once during the app lifespan and stores it on ``app.state``;
``get_handler_registry`` looks it up for endpoint injection.
"""

from __future__ import annotations

import httpx
from fastapi import Request

from maestro.config import Settings, settings
from maestro.core.llm.client import LLMClient
from maestro.engine.scheduler import Scheduler
from maestro.git.service import GitService
from maestro.handlers.registry import HandlerRegistry
from maestro.manifest.updater import ManifestLocks
from maestro.utils.logging import get_logger

logger = get_logger(__name__)

OLLAMA_PROBE_TIMEOUT = 2.0


# ---------------------------------------------------------------------------
# LLM client
# ---------------------------------------------------------------------------

def _resolve_api_key(provider: str, config: Settings) -> str:
    """Pick the API key for *provider*.

    Resolution order:
      1. Provider-specific key (``ANTHROPIC_API_KEY``, ``OPENAI_API_KEY``)
      2. Generic ``LLM_API_KEY``
    """
    provider_keys: dict[str, str] = {
        "anthropic": config.anthropic_api_key,
        "openai": config.openai_api_key,
    }
    return provider_keys.get(provider) or config.llm_api_key


def ollama_available(base_url: str) -> bool:
    """Return ``True`` when an Ollama server answers ``/api/tags``."""
    try:
        response = httpx.get(f"{base_url.rstrip('/')}/api/tags", timeout=OLLAMA_PROBE_TIMEOUT)
    except httpx.HTTPError:
        return False
    return response.status_code == 200


def resolve_provider(config: Settings) -> tuple[str, str, str, str | None]:
    """Return ``(provider, api_key, model, base_url)`` for *config*.

    With ``llm_provider = "auto"``: Anthropic when a key is set, else a
    local Ollama server when one answers, else the offline echo provider.
    """
    provider = config.llm_provider
    base_url = config.llm_base_url or None

    if provider != "auto":
        return provider, _resolve_api_key(provider, config), config.llm_model, base_url

    if config.anthropic_api_key:
        return "anthropic", config.anthropic_api_key, config.llm_model, base_url

    if ollama_available(config.ollama_base_url):
        return "ollama", "", config.ollama_model, f"{config.ollama_base_url.rstrip('/')}/v1"

    logger.warning("llm_backend_missing", fallback="echo")
    return "echo", "", "echo", None


def build_llm_client(config: Settings = settings) -> LLMClient:
    provider, api_key, model, base_url = resolve_provider(config)
    logger.info("llm_client_selected", provider=provider, model=model)
    return LLMClient(
        provider,
        api_key,
        model,
        base_url=base_url,
        max_concurrency=config.llm_max_concurrency,
        timeout=config.llm_timeout_seconds,
    )


# ---------------------------------------------------------------------------
# Handlers & scheduler
# ---------------------------------------------------------------------------

def build_git_service(config: Settings = settings) -> GitService | None:
    if not config.git_enabled:
        return None
    return GitService(config.git_workdir, base_branch=config.git_base_branch)


def build_registry(
    llm: LLMClient,
    git: GitService | None = None,
    config: Settings = settings,
) -> HandlerRegistry:
    """Discover public then user handlers, injecting *llm* and *git*."""
    registry = HandlerRegistry()
    registry.discover(config.handlers_public_dir, config.handlers_user_dir, llm=llm, git=git)
    return registry


def build_scheduler(
    registry: HandlerRegistry,
    reports_dir: str | None = None,
    config: Settings = settings,
    manifest_locks: ManifestLocks | None = None,
) -> Scheduler:
    return Scheduler(
        registry,
        reports_root=reports_dir or config.reports_dir,
        manifest_locks=manifest_locks,
    )


# ---------------------------------------------------------------------------
# FastAPI dependencies
# ---------------------------------------------------------------------------

def get_handler_registry(request: Request) -> HandlerRegistry:
    """Return the registry stored on ``app.state`` during the lifespan."""
    return request.app.state.handler_registry


def get_manifest_locks(request: Request) -> ManifestLocks:
    """Return the manifest locks shared by every run of this app."""
    return request.app.state.manifest_locks
