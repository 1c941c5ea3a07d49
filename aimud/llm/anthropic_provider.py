"""Anthropic Claude provider."""

from typing import Any

import anthropic
from anthropic import AsyncAnthropic

from aimud.llm.base import LLMResponse
from aimud.llm.exceptions import ProviderError, error_from_status


class AnthropicProvider:
    """Claude through the Messages API.

    The API has no JSON response mode, so ``json_mode`` changes nothing
    here: the system prompt already demands a bare JSON object. That
    prompt is identical on every call and is marked for prompt caching.
    """

    provider_name = "anthropic"

    def __init__(
        self,
        api_key: str | None = None,
        default_model: str = "claude-sonnet-4-20250514",
        client: AsyncAnthropic | None = None,
    ) -> None:
        """
        Args:
            api_key: Falls back to ANTHROPIC_API_KEY when empty.
            default_model: Model used when a call names none.
            client: Pre-built client (tests).
        """
        self._api_key = api_key or None
        self._default_model = default_model
        self._client = client

    @property
    def default_model(self) -> str:
        return self._default_model

    @property
    def client(self) -> AsyncAnthropic:
        if self._client is None:
            self._client = AsyncAnthropic(api_key=self._api_key)
        return self._client

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
        request: dict[str, Any] = {
            "model": model or self._default_model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system_prompt:
            request["system"] = [
                {
                    "type": "text",
                    "text": system_prompt,
                    "cache_control": {"type": "ephemeral"},
                }
            ]

        try:
            reply = await self.client.messages.create(**request)
        except anthropic.APIStatusError as e:
            raise error_from_status(str(e), e.status_code) from e
        except anthropic.APIConnectionError as e:
            raise ProviderError(f"Could not reach Anthropic: {e}", is_retryable=True) from e

        text = "".join(block.text for block in reply.content if block.type == "text")
        return LLMResponse(
            content=text,
            model=reply.model,
            finish_reason=reply.stop_reason or "",
            raw=reply,
        )
