"""Generative backend seam.

The engine only ever needs one call shape: a prompt plus a system
instruction in, raw text out. Everything provider-specific stays behind
the LLMProvider layer; this module adapts it and turns provider failures
into BackendError.
"""

import logging
from typing import Protocol, runtime_checkable

from aimud.config import settings
from aimud.engine.exceptions import BackendError
from aimud.llm.base import LLMProvider
from aimud.llm.exceptions import LLMError

logger = logging.getLogger(__name__)


@runtime_checkable
class GenerativeBackend(Protocol):
    """Anything that can turn a prompt into raw (JSON) text."""

    async def generate(
        self,
        prompt: str,
        system_instruction: str,
        temperature: float,
    ) -> str:
        """Generate a reply.

        Raises:
            BackendError: If the reply could not be obtained.
        """
        ...


class LLMBackend:
    """GenerativeBackend backed by a configured LLM provider.

    Args:
        provider: Provider to call. Defaults to the one named by BACKEND.
        model: Model override; the provider default is used when None.
        max_tokens: Maximum reply tokens. Defaults to settings.max_tokens.
    """

    def __init__(
        self,
        provider: LLMProvider | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
    ) -> None:
        if provider is None:
            from aimud.llm.factory import get_backend_provider

            provider = get_backend_provider()
        self.provider = provider
        self.model = model
        self.max_tokens = max_tokens or settings.max_tokens

    async def generate(
        self,
        prompt: str,
        system_instruction: str,
        temperature: float,
    ) -> str:
        try:
            response = await self.provider.complete(
                prompt,
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=temperature,
                system_prompt=system_instruction,
                json_mode=True,
            )
        except LLMError as e:
            logger.error(f"Backend call to {self.provider.provider_name} failed: {e}")
            raise BackendError(
                str(e),
                is_retryable=getattr(e, "is_retryable", False),
            ) from e

        if response.truncated:
            logger.warning(
                f"Reply from {self.provider.provider_name} hit max_tokens={self.max_tokens}; "
                "it will probably not parse"
            )

        # An empty reply decodes to an empty response instead of failing
        return response.content or "{}"
