"""OpenAI provider, also used for OpenAI-compatible servers (DeepSeek, vLLM)."""

from typing import Any

import openai
from openai import AsyncOpenAI

from aimud.llm.base import LLMResponse
from aimud.llm.exceptions import ProviderError, error_from_status


class OpenAIProvider:
    """Chat Completions with ``response_format={"type": "json_object"}``.

    JSON mode requires the word "JSON" somewhere in the messages; the
    system prompt's RESPONSE FORMAT section provides it.
    """

    provider_name = "openai"

    def __init__(
        self,
        api_key: str | None = None,
        default_model: str = "gpt-4o",
        base_url: str | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        """
        Args:
            api_key: Falls back to OPENAI_API_KEY when empty.
            default_model: Model used when a call names none.
            base_url: Endpoint of an OpenAI-compatible server.
            client: Pre-built client (tests).
        """
        self._api_key = api_key or None
        self._base_url = base_url
        self._default_model = default_model
        self._client = client

    @property
    def default_model(self) -> str:
        return self._default_model

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self._api_key, base_url=self._base_url)
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
        messages: list[dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        request: dict[str, Any] = {
            "model": model or self._default_model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": messages,
        }
        if json_mode:
            request["response_format"] = {"type": "json_object"}

        try:
            reply = await self.client.chat.completions.create(**request)
        except openai.APIStatusError as e:
            raise error_from_status(str(e), e.status_code) from e
        except openai.APIConnectionError as e:
            target = self._base_url or "OpenAI"
            raise ProviderError(f"Could not reach {target}: {e}", is_retryable=True) from e

        if not reply.choices:
            raise ProviderError("Reply contained no choices", is_retryable=True)
        choice = reply.choices[0]
        return LLMResponse(
            content=choice.message.content or "",
            model=reply.model,
            finish_reason=choice.finish_reason or "",
            raw=reply,
        )
