"""Audit log of backend calls.

With LOG_LLM_CALLS set, every call is written as one markdown file under
``LLM_LOG_DIR``::

    cycle_0003/primary_20241208_143022_123456_action.md
    cycle_0003/followup_20241208_143025_004211_action.md
    orphan/20241208_150000_000001_unknown.md

The exact reply text is what you need when a cycle ends in a FormatError.
The cycle graph sets the audit context before each backend call.
"""

import asyncio
import contextvars
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from aimud.llm.base import LLMResponse


@dataclass(frozen=True)
class LLMAuditContext:
    """Where in the game a call happened.

    Attributes:
        cycle_number: Orchestration cycle, None outside a cycle.
        phase: "primary" or "followup".
        call_type: "initialize" or "action".
    """

    cycle_number: int | None = None
    phase: str | None = None
    call_type: str = "unknown"


@dataclass
class LLMAuditEntry:
    """One backend call and its outcome (``response`` or ``error``)."""

    timestamp: datetime
    context: LLMAuditContext
    provider: str
    model: str
    system_prompt: str | None
    prompt: str
    parameters: dict[str, Any] = field(default_factory=dict)
    response: LLMResponse | None = None
    error: str | None = None
    duration_seconds: float = 0.0


def _fenced(title: str, body: str) -> list[str]:
    return [f"## {title}", "```", body, "```", ""]


class LLMAuditLogger:
    """Writes audit entries off the event loop.

    Args:
        log_dir: Root directory for the log tree.
        enabled: When False, ``log`` is a no-op.
    """

    def __init__(self, log_dir: Path | str = "logs/llm", enabled: bool = True) -> None:
        self.log_dir = Path(log_dir)
        self.enabled = enabled

    async def log(self, entry: LLMAuditEntry) -> None:
        if not self.enabled:
            return

        path = self.path_for(entry)
        text = self.render(entry)

        def write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")

        await asyncio.to_thread(write)

    def path_for(self, entry: LLMAuditEntry) -> Path:
        stamp = entry.timestamp.strftime("%Y%m%d_%H%M%S_%f")
        ctx = entry.context
        if ctx.cycle_number is None:
            return self.log_dir / "orphan" / f"{stamp}_{ctx.call_type}.md"
        phase = ctx.phase or "single"
        cycle_dir = self.log_dir / f"cycle_{ctx.cycle_number:04d}"
        return cycle_dir / f"{phase}_{stamp}_{ctx.call_type}.md"

    def render(self, entry: LLMAuditEntry) -> str:
        ctx = entry.context
        lines = [f"# LLM Call: {ctx.call_type}", "", "## Metadata"]
        metadata = {
            "Timestamp": entry.timestamp.isoformat(),
            "Cycle": ctx.cycle_number,
            "Phase": ctx.phase,
            "Provider": entry.provider,
            "Model": entry.model,
            "Duration": f"{entry.duration_seconds:.2f}s",
            **entry.parameters,
        }
        lines += [f"- **{key}**: {value}" for key, value in metadata.items() if value is not None]
        lines.append("")

        if entry.system_prompt:
            lines += _fenced("System Prompt", entry.system_prompt)
        lines += _fenced("Prompt", entry.prompt)
        if entry.error is not None:
            lines += _fenced("Error", entry.error)
        if entry.response is not None:
            if entry.response.truncated:
                lines += ["> Reply stopped at the token limit.", ""]
            lines += _fenced(f"Response ({entry.response.finish_reason})", entry.response.content)

        return "\n".join(lines)


_audit_context: contextvars.ContextVar[LLMAuditContext] = contextvars.ContextVar(
    "audit_context",
    default=LLMAuditContext(),
)


def set_audit_context(
    cycle_number: int | None = None,
    phase: str | None = None,
    call_type: str = "unknown",
) -> None:
    """Tag subsequent backend calls in this task."""
    _audit_context.set(LLMAuditContext(cycle_number, phase, call_type))


def get_audit_context() -> LLMAuditContext:
    return _audit_context.get()


_audit_logger: LLMAuditLogger | None = None


def get_audit_logger() -> LLMAuditLogger:
    """Get or create the process-wide audit logger from settings."""
    global _audit_logger
    if _audit_logger is None:
        from aimud.config import settings

        _audit_logger = LLMAuditLogger(
            log_dir=settings.llm_log_dir,
            enabled=settings.log_llm_calls,
        )
    return _audit_logger
