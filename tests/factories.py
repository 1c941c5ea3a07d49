"""Factory functions for creating test objects with sensible defaults."""

import json
from typing import Any

import httpx

from aimud.engine.exceptions import BackendError
from aimud.engine.schemas import CheckDefinition, CheckResult


class FakeBackend:
    """Scripted GenerativeBackend.

    Each reply is returned in order. A reply may be a dict (sent as JSON),
    a raw string, or an exception instance (raised).
    """

    def __init__(self, *replies: Any) -> None:
        self.replies = list(replies)
        self.prompts: list[str] = []
        self.system_instructions: list[str] = []
        self.temperatures: list[float] = []

    async def generate(self, prompt: str, system_instruction: str, temperature: float) -> str:
        self.prompts.append(prompt)
        self.system_instructions.append(system_instruction)
        self.temperatures.append(temperature)

        if not self.replies:
            raise BackendError("No scripted reply left")

        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, dict):
            return json.dumps(reply)
        return reply


def create_check_result(
    name: str = "Climb",
    roll: int = 600,
    outcome: str = "Success",
    thresholds: dict[str, int] | None = None,
    description: str = "",
) -> CheckResult:
    """Create a resolved check."""
    return CheckResult(
        check=CheckDefinition(
            name=name,
            description=description,
            thresholds=thresholds if thresholds is not None else {"Success": 400, "Failure": 0},
        ),
        roll=roll,
        outcome=outcome,
    )


def create_http_response(status_code: int, url: str = "https://api.example.test/v1"):
    """Build an httpx response for constructing SDK status errors."""
    return httpx.Response(status_code, request=httpx.Request("POST", url))


def create_http_request(url: str = "https://api.example.test/v1"):
    """Build an httpx request for constructing SDK connection errors."""
    return httpx.Request("POST", url)
