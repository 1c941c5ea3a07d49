"""Tests for the OpenAI provider."""

import pytest
from unittest.mock import AsyncMock, MagicMock

import openai

from aimud.llm.base import LLMProvider
from aimud.llm.exceptions import AuthenticationError, ProviderError, RateLimitError
from aimud.llm.openai_provider import OpenAIProvider
from tests.factories import create_http_request, create_http_response


def _reply(content='{"narrative": "Rain."}', finish_reason="stop"):
    choice = MagicMock(finish_reason=finish_reason)
    choice.message.content = content
    reply = MagicMock(choices=[choice])
    reply.model = "gpt-4o"
    return reply


@pytest.fixture
def client():
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=_reply())
    return client


@pytest.fixture
def provider(client):
    return OpenAIProvider(api_key="test-key", client=client)


def _failing(error: Exception, base_url: str | None = None) -> OpenAIProvider:
    client = MagicMock()
    client.chat.completions.create = AsyncMock(side_effect=error)
    return OpenAIProvider(api_key="test-key", base_url=base_url, client=client)


class TestOpenAIProvider:
    def test_identity(self, provider):
        assert provider.provider_name == "openai"
        assert provider.default_model == "gpt-4o"
        assert isinstance(provider, LLMProvider)

    @pytest.mark.asyncio
    async def test_system_then_user(self, provider, client):
        await provider.complete("Player action: look", system_prompt="You run the world.")

        messages = client.chat.completions.create.call_args.kwargs["messages"]
        assert messages == [
            {"role": "system", "content": "You run the world."},
            {"role": "user", "content": "Player action: look"},
        ]

    @pytest.mark.asyncio
    async def test_json_mode(self, provider, client):
        await provider.complete("look", json_mode=True)
        request = client.chat.completions.create.call_args.kwargs
        assert request["response_format"] == {"type": "json_object"}

    @pytest.mark.asyncio
    async def test_plain_mode(self, provider, client):
        await provider.complete("look", model="deepseek-chat", max_tokens=50, temperature=0.1)

        request = client.chat.completions.create.call_args.kwargs
        assert "response_format" not in request
        assert request["model"] == "deepseek-chat"
        assert request["max_tokens"] == 50
        assert request["temperature"] == 0.1

    @pytest.mark.asyncio
    async def test_reply(self, provider):
        response = await provider.complete("look")
        assert response.content == '{"narrative": "Rain."}'
        assert response.model == "gpt-4o"
        assert response.finish_reason == "stop"

    @pytest.mark.asyncio
    async def test_null_content_and_length_stop(self, provider, client):
        client.chat.completions.create.return_value = _reply(content=None, finish_reason="length")

        response = await provider.complete("look")

        assert response.content == ""
        assert response.truncated is True

    @pytest.mark.asyncio
    async def test_no_choices(self, provider, client):
        client.chat.completions.create.return_value = MagicMock(choices=[])
        with pytest.raises(ProviderError) as exc_info:
            await provider.complete("look")
        assert exc_info.value.is_retryable is True


class TestOpenAIErrors:
    @pytest.mark.asyncio
    async def test_bad_key(self):
        error = openai.AuthenticationError("bad key", response=create_http_response(401), body=None)
        with pytest.raises(AuthenticationError):
            await _failing(error).complete("look")

    @pytest.mark.asyncio
    async def test_rate_limit(self):
        error = openai.RateLimitError("slow down", response=create_http_response(429), body=None)
        with pytest.raises(RateLimitError):
            await _failing(error).complete("look")

    @pytest.mark.asyncio
    async def test_server_error(self):
        error = openai.InternalServerError("boom", response=create_http_response(502), body=None)
        with pytest.raises(ProviderError) as exc_info:
            await _failing(error).complete("look")
        assert exc_info.value.is_retryable is True
        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_unreachable_compatible_server(self):
        error = openai.APIConnectionError(request=create_http_request())
        with pytest.raises(ProviderError) as exc_info:
            await _failing(error, base_url="http://vllm:8000/v1").complete("look")
        assert exc_info.value.is_retryable is True
        assert "http://vllm:8000/v1" in str(exc_info.value)
