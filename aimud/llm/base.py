"""Provider interface for the generative backend.

The engine keeps no chat history: the world files are the history, so
every request is one prompt plus a system instruction, answered by one
JSON object.
"""

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class LLMResponse:
    """Text returned by a provider.

    Attributes:
        content: Reply text with provider wrapping (thinking blocks,
            content parts) already removed.
        model: Model that produced it.
        finish_reason: Provider stop reason, e.g. "end_turn" or "length".
        raw: The SDK object, for the audit log and debugging.
    """

    content: str
    model: str = ""
    finish_reason: str = ""
    raw: Any = field(default=None, compare=False, repr=False)

    @property
    def truncated(self) -> bool:
        """True when the reply hit the token limit (usually broken JSON)."""
        return self.finish_reason in ("length", "max_tokens")


@runtime_checkable
class LLMProvider(Protocol):
    """A hosted or local model that answers a single prompt."""

    provider_name: str

    @property
    def default_model(self) -> str: ...

    async def complete(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        model: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.7,
        json_mode: bool = False,
    ) -> LLMResponse:
        """Answer ``prompt``.

        Args:
            prompt: The full user turn (world files plus framing).
            system_prompt: Standing instructions for the world.
            model: Overrides the provider's default model.
            max_tokens: Reply budget in tokens.
            temperature: Sampling temperature.
            json_mode: Ask for a bare JSON object where the API can enforce
                it. The reply is still validated by the engine's parser.

        Raises:
            ProviderError: On any transport or API failure.
        """
        ...
