"""Provider wrapper that records every call in the audit log."""

import time
from datetime import datetime

from aimud.llm.audit_logger import (
    LLMAuditEntry,
    LLMAuditLogger,
    get_audit_context,
    get_audit_logger,
)
from aimud.llm.base import LLMProvider, LLMResponse


class LoggingProvider:
    """Delegates to ``provider`` and logs prompt, reply or error.

    The entry is written after the call returns or raises; a failed call
    is logged and its exception propagates unchanged.
    """

    def __init__(self, provider: LLMProvider, audit_logger: LLMAuditLogger | None = None) -> None:
        self.provider_name = provider.provider_name
        self._provider = provider
        self._audit_logger = audit_logger

    @property
    def default_model(self) -> str:
        return self._provider.default_model

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
        entry = LLMAuditEntry(
            timestamp=datetime.now(),
            context=get_audit_context(),
            provider=self.provider_name,
            model=model or self.default_model,
            system_prompt=system_prompt,
            prompt=prompt,
            parameters={
                "max_tokens": max_tokens,
                "temperature": temperature,
                "json_mode": json_mode,
            },
        )
        started = time.perf_counter()
        try:
            entry.response = await self._provider.complete(
                prompt,
                system_prompt=system_prompt,
                model=model,
                max_tokens=max_tokens,
                temperature=temperature,
                json_mode=json_mode,
            )
            return entry.response
        except Exception as e:
            entry.error = f"{type(e).__name__}: {e}"
            raise
        finally:
            entry.duration_seconds = time.perf_counter() - started
            await (self._audit_logger or get_audit_logger()).log(entry)
