"""Engine exception definitions.

BackendError and FormatError end a cycle; PersistenceError is recovered
where it is raised; EngineBusyError flags a caller mistake.
"""


class EngineError(Exception):
    """Base exception for the narrative engine."""

    pass


class BackendError(EngineError):
    """The generative backend call failed (transport, auth, quota...).

    Attributes:
        is_retryable: Whether resubmitting the same action may succeed.
    """

    def __init__(self, message: str, is_retryable: bool = False) -> None:
        super().__init__(message)
        self.is_retryable = is_retryable


class FormatError(EngineError):
    """The backend reply could not be decoded into a structured response.

    Attributes:
        raw_text: The raw reply, kept for diagnostics.
    """

    def __init__(self, message: str, raw_text: str = "") -> None:
        super().__init__(message)
        self.raw_text = raw_text


class PersistenceError(EngineError):
    """Reading or writing the durable world file store failed."""

    pass


class EngineBusyError(EngineError):
    """A cycle was submitted while another one is still in flight."""

    def __init__(self, message: str = "An action is already being processed") -> None:
        super().__init__(message)
