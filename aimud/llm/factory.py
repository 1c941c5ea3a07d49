"""Builds the provider named by the BACKEND setting (``provider:model``)."""

from collections.abc import Callable

from aimud.config import ProviderConfig, settings
from aimud.llm.anthropic_provider import AnthropicProvider
from aimud.llm.audit_logger import get_audit_logger
from aimud.llm.base import LLMProvider
from aimud.llm.exceptions import UnsupportedProviderError
from aimud.llm.logging_provider import LoggingProvider
from aimud.llm.ollama_provider import OllamaProvider
from aimud.llm.openai_provider import OpenAIProvider


def _anthropic(model: str) -> LLMProvider:
    return AnthropicProvider(api_key=settings.anthropic_api_key, default_model=model)


def _openai(model: str) -> LLMProvider:
    # OPENAI_BASE_URL points this at any compatible server (DeepSeek, vLLM)
    return OpenAIProvider(
        api_key=settings.openai_api_key,
        default_model=model,
        base_url=settings.openai_base_url,
    )


def _ollama(model: str) -> LLMProvider:
    return OllamaProvider(base_url=settings.ollama_base_url, default_model=model)


_BUILDERS: dict[str, Callable[[str], LLMProvider]] = {
    "anthropic": _anthropic,
    "openai": _openai,
    "ollama": _ollama,
}


def create_provider(config: ProviderConfig) -> LLMProvider:
    """Build the provider for ``config``.

    Wrapped in a LoggingProvider when LOG_LLM_CALLS is set.

    Raises:
        UnsupportedProviderError: Unknown provider name.
    """
    build = _BUILDERS.get(config.provider)
    if build is None:
        known = ", ".join(sorted(_BUILDERS))
        raise UnsupportedProviderError(
            f"Provider '{config.provider}' is not supported (use one of: {known})"
        )

    provider = build(config.model)
    if settings.log_llm_calls:
        provider = LoggingProvider(provider, get_audit_logger())
    return provider


def get_backend_provider() -> LLMProvider:
    """Provider for the generative backend, from BACKEND."""
    return create_provider(settings.backend_config)
