"""Application configuration using pydantic-settings."""

from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


ProviderType = Literal["anthropic", "openai", "ollama"]


@dataclass
class ProviderConfig:
    """Parsed provider:model configuration."""

    provider: ProviderType
    model: str


def parse_provider_config(value: str, default_provider: ProviderType = "anthropic") -> ProviderConfig:
    """Parse 'provider:model' format into ProviderConfig.

    Args:
        value: String in format 'provider:model' or just 'model'.
        default_provider: Provider to use if only model is specified.

    Returns:
        ProviderConfig with provider and model.

    Examples:
        >>> parse_provider_config("ollama:qwen3:32b")
        ProviderConfig(provider='ollama', model='qwen3:32b')

        >>> parse_provider_config("openai:gpt-4o")
        ProviderConfig(provider='openai', model='gpt-4o')

        >>> parse_provider_config("claude-sonnet-4-20250514")  # No provider prefix
        ProviderConfig(provider='anthropic', model='claude-sonnet-4-20250514')
    """
    valid_providers = ("anthropic", "openai", "ollama")

    # Check if first part is a known provider
    if ":" in value:
        first_part = value.split(":")[0]
        if first_part in valid_providers:
            provider = first_part
            model = value[len(first_part) + 1 :]  # Everything after 'provider:'
            return ProviderConfig(provider=provider, model=model)  # type: ignore

    return ProviderConfig(provider=default_provider, model=value)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    database_url: str = "sqlite:///aimud.db"

    # API Keys
    anthropic_api_key: str = ""
    openai_api_key: str = ""
    openai_base_url: str | None = None  # Custom endpoint for vLLM/DeepSeek

    # Ollama Settings
    ollama_base_url: str = "http://localhost:11434"

    # ==========================================================================
    # Generative Backend (provider:model format)
    # ==========================================================================
    # Examples:
    #   BACKEND=anthropic:claude-sonnet-4-20250514
    #   BACKEND=openai:gpt-4o
    #   BACKEND=ollama:qwen3:32b
    backend: str = "anthropic:claude-sonnet-4-20250514"
    temperature: float = 0.7
    max_tokens: int = 8192

    # ==========================================================================
    # World Rules
    # ==========================================================================
    default_extension: str = ".txt"  # Appended when resolving bare references
    failure_outcome: str = "Failure"  # Outcome when no threshold qualifies
    roll_min: int = 0
    roll_max: int = 1000
    update_history_limit: int = 50  # Updates kept in the session log

    # Debug
    debug: bool = False  # Reveal hide[...] content when rendering
    log_level: str = "WARNING"
    log_llm_calls: bool = False
    llm_log_dir: str = "logs/llm"

    @property
    def backend_config(self) -> ProviderConfig:
        """Get parsed backend provider config."""
        return parse_provider_config(self.backend)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience alias
settings = get_settings()
