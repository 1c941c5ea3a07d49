"""Tests for provider error classification."""

import pytest

from aimud.llm.exceptions import (
    AuthenticationError,
    ContextLengthError,
    LLMError,
    ProviderError,
    RateLimitError,
    UnsupportedProviderError,
    error_from_status,
)


class TestErrorFromStatus:
    def test_no_answer_is_retryable(self):
        error = error_from_status("Connection reset", None)
        assert type(error) is ProviderError
        assert error.is_retryable is True
        assert error.status_code is None

    @pytest.mark.parametrize("status", [401, 403])
    def test_rejected_key(self, status):
        error = error_from_status("invalid x-api-key", status)
        assert isinstance(error, AuthenticationError)
        assert error.status_code == status
        assert error.is_retryable is False

    def test_rate_limit(self):
        error = error_from_status("slow down", 429)
        assert isinstance(error, RateLimitError)
        assert error.is_retryable is True

    @pytest.mark.parametrize(
        "message",
        [
            "prompt is too long: 210000 tokens > 200000 maximum",
            "This model's maximum context length is 128000 tokens",
        ],
    )
    def test_oversized_prompt(self, message):
        error = error_from_status(message, 400)
        assert isinstance(error, ContextLengthError)
        assert error.is_retryable is False

    def test_other_bad_request(self):
        error = error_from_status("temperature: must be <= 1", 400)
        assert type(error) is ProviderError
        assert error.is_retryable is False

    @pytest.mark.parametrize("status", [500, 502, 529])
    def test_server_side_is_retryable(self, status):
        error = error_from_status("Overloaded", status)
        assert type(error) is ProviderError
        assert error.is_retryable is True
        assert error.status_code == status

    def test_message_is_kept(self):
        assert str(error_from_status("Overloaded", 529)) == "Overloaded"


def test_unsupported_provider_is_not_a_request_failure():
    error = UnsupportedProviderError("gemini")
    assert isinstance(error, LLMError)
    assert not isinstance(error, ProviderError)
