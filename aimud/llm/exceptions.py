"""Provider failures.

Every SDK error is mapped onto this small hierarchy, which the engine
turns into a BackendError. ``is_retryable`` tells the player whether
repeating the action is worth it.
"""


class LLMError(Exception):
    """Base class for provider-layer errors."""


class UnsupportedProviderError(LLMError):
    """BACKEND names a provider this build does not know."""


class ProviderError(LLMError):
    """A request to the model failed.

    Attributes:
        is_retryable: Whether resubmitting may succeed.
        status_code: HTTP status, when the API answered at all.
    """

    def __init__(
        self,
        message: str,
        is_retryable: bool = False,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.is_retryable = is_retryable
        self.status_code = status_code


class AuthenticationError(ProviderError):
    """The API key was missing or rejected."""

    def __init__(self, message: str = "Authentication failed", status_code: int = 401) -> None:
        super().__init__(message, is_retryable=False, status_code=status_code)


class RateLimitError(ProviderError):
    """Too many requests; retryable after a pause."""

    def __init__(self, message: str = "Rate limit exceeded") -> None:
        super().__init__(message, is_retryable=True, status_code=429)


class ContextLengthError(ProviderError):
    """The prompt no longer fits the model's context window.

    Every world file is sent on every cycle, so long sessions end here.
    """

    def __init__(self, message: str, status_code: int | None = 400) -> None:
        super().__init__(message, is_retryable=False, status_code=status_code)


_CONTEXT_MARKERS = ("context", "too long", "maximum", "token")


def error_from_status(message: str, status_code: int | None) -> ProviderError:
    """Classify an API failure by its HTTP status.

    ``None`` means the request never got an answer (connection reset,
    timeout), which is worth retrying.
    """
    if status_code is None:
        return ProviderError(message, is_retryable=True)
    if status_code in (401, 403):
        return AuthenticationError(message, status_code=status_code)
    if status_code == 429:
        return RateLimitError(message)
    if status_code in (400, 413) and any(m in message.lower() for m in _CONTEXT_MARKERS):
        return ContextLengthError(message, status_code=status_code)
    # 5xx and Anthropic's 529 "overloaded" are transient
    return ProviderError(message, is_retryable=status_code >= 500, status_code=status_code)
