"""Provider layer behind the generative backend.

Usage:
    from aimud.llm import get_backend_provider

    provider = get_backend_provider()  # BACKEND=provider:model
    response = await provider.complete(prompt, system_prompt=rules, json_mode=True)
"""

from aimud.llm.base import LLMProvider, LLMResponse
from aimud.llm.anthropic_provider import AnthropicProvider
from aimud.llm.openai_provider import OpenAIProvider
from aimud.llm.ollama_provider import OllamaProvider
from aimud.llm.factory import create_provider, get_backend_provider
from aimud.llm.audit_logger import (
    LLMAuditContext,
    LLMAuditEntry,
    LLMAuditLogger,
    get_audit_context,
    get_audit_logger,
    set_audit_context,
)
from aimud.llm.logging_provider import LoggingProvider
from aimud.llm.exceptions import (
    AuthenticationError,
    ContextLengthError,
    LLMError,
    ProviderError,
    RateLimitError,
    UnsupportedProviderError,
)

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "AnthropicProvider",
    "OpenAIProvider",
    "OllamaProvider",
    "create_provider",
    "get_backend_provider",
    "LLMAuditContext",
    "LLMAuditEntry",
    "LLMAuditLogger",
    "get_audit_context",
    "get_audit_logger",
    "set_audit_context",
    "LoggingProvider",
    "AuthenticationError",
    "ContextLengthError",
    "LLMError",
    "ProviderError",
    "RateLimitError",
    "UnsupportedProviderError",
]
