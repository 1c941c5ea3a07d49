"""Local models served by Ollama, through langchain-ollama."""

import re

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from langchain_ollama import ChatOllama

from aimud.llm.base import LLMResponse
from aimud.llm.exceptions import ProviderError

# Reasoning models (qwen3, deepseek-r1) prefix the JSON with a think block,
# which may be cut off by the token limit.
_THINK_BLOCK = re.compile(r"<think>.*?(?:</think>|$)\s*", re.DOTALL)


def strip_thinking(text: str) -> str:
    """Drop ``<think>`` blocks, closed or not."""
    return _THINK_BLOCK.sub("", text).strip()


class OllamaProvider:
    """ChatOllama with ``format="json"`` in JSON mode.

    A client is built per call because model, temperature and format are
    constructor arguments in langchain-ollama. Ollama reports no HTTP
    status worth classifying, so every failure is treated as retryable
    (the usual cause is a server that is not running yet).
    """

    provider_name = "ollama"

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        default_model: str = "llama3",
    ) -> None:
        self._base_url = base_url
        self._default_model = default_model

    @property
    def default_model(self) -> str:
        return self._default_model

    def _build_client(
        self,
        model: str,
        max_tokens: int,
        temperature: float,
        json_mode: bool,
    ) -> ChatOllama:
        return ChatOllama(
            base_url=self._base_url,
            model=model,
            temperature=temperature,
            num_predict=max_tokens,
            format="json" if json_mode else None,
        )

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
        model_name = model or self._default_model
        messages: list[BaseMessage] = []
        if system_prompt:
            messages.append(SystemMessage(content=system_prompt))
        messages.append(HumanMessage(content=prompt))

        client = self._build_client(model_name, max_tokens, temperature, json_mode)
        try:
            reply = await client.ainvoke(messages)
        except Exception as e:
            raise ProviderError(
                f"Ollama at {self._base_url} failed: {e}", is_retryable=True
            ) from e

        text = reply.content if isinstance(reply.content, str) else ""
        metadata = getattr(reply, "response_metadata", None) or {}
        return LLMResponse(
            content=strip_thinking(text),
            model=model_name,
            finish_reason=str(metadata.get("done_reason", "stop")),
            raw=reply,
        )
