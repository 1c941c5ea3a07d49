"""Schemas for the narrative engine.

Defines the structured form of a backend reply and the response the engine
hands back to its caller. Backend output is schema-less JSON, so every
collection defaults to empty and ``null`` is treated the same as absent.
"""

import logging
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

UNNAMED_CHECK = "Check"


# =============================================================================
# Enums
# =============================================================================


class UpdateType(str, Enum):
    """Category tag of an observable effect."""

    STAT = "stat"  # Health -10, Energy +5
    ITEM = "item"  # Added Iron Key
    TIME = "time"  # +30s
    MISC = "misc"


# =============================================================================
# Backend Reply Schemas
# =============================================================================


class UpdateRecord(BaseModel):
    """A single observable effect surfaced to the caller.

    Purely informational; world files are the only state that changes.
    """

    type: UpdateType = UpdateType.MISC
    text: str = ""
    value: float = 0

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_unknown_type(cls, value: Any) -> Any:
        if value is None:
            return UpdateType.MISC
        if isinstance(value, str) and value.lower() in {t.value for t in UpdateType}:
            return value.lower()
        if isinstance(value, UpdateType):
            return value
        return UpdateType.MISC

    @field_validator("text", mode="before")
    @classmethod
    def _text_default(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("value", mode="before")
    @classmethod
    def _value_default(cls, value: Any) -> Any:
        return 0 if value is None else value


class FileMutation(BaseModel):
    """Full replacement content for one world file."""

    model_config = ConfigDict(populate_by_name=True)

    content: str
    display_name: str | None = Field(default=None, alias="displayName")


class CheckDefinition(BaseModel):
    """A probability check requested by the backend.

    Attributes:
        name: Check name, e.g. "Climb". "Check" when the backend omits it.
        description: Why the check is needed.
        thresholds: Outcome label -> minimum roll (0-1000).
    """

    name: str = UNNAMED_CHECK
    description: str = ""
    thresholds: dict[str, int] = Field(default_factory=dict)

    @field_validator("name", mode="before")
    @classmethod
    def _name_default(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return UNNAMED_CHECK
        return value

    @field_validator("description", mode="before")
    @classmethod
    def _description_default(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("thresholds", mode="before")
    @classmethod
    def _thresholds_default(cls, value: Any) -> Any:
        return {} if value is None else value


class CheckResult(BaseModel):
    """A check bound to a concrete roll and the outcome it resolved to."""

    check: CheckDefinition
    roll: int
    outcome: str

    @property
    def name(self) -> str:
        return self.check.name


class StructuredResponse(BaseModel):
    """One decoded backend reply.

    ``narrative`` stays None when the backend omitted it, so the merge step
    can tell "no narrative" from "empty narrative".
    """

    model_config = ConfigDict(populate_by_name=True)

    narrative: str | None = None
    updates: list[UpdateRecord] = Field(default_factory=list)
    files: dict[str, Any] = Field(default_factory=dict)
    checks: list[CheckDefinition] = Field(default_factory=list)
    game_over: bool = Field(default=False, alias="gameOver")

    @field_validator("updates", "checks", mode="before")
    @classmethod
    def _null_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("files", mode="before")
    @classmethod
    def _null_files(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("game_over", mode="before")
    @classmethod
    def _null_game_over(cls, value: Any) -> Any:
        return False if value is None else value

    def file_mutations(self) -> dict[str, FileMutation]:
        """Normalize the ``files`` map to FileMutation values.

        Bare strings become content-only mutations. Entries without usable
        content (null, or an object missing ``content``) are dropped.
        """
        mutations: dict[str, FileMutation] = {}
        for name, data in self.files.items():
            if isinstance(data, str):
                mutations[name] = FileMutation(content=data)
                continue
            if isinstance(data, dict) and isinstance(data.get("content"), str):
                try:
                    mutations[name] = FileMutation.model_validate(data)
                    continue
                except ValidationError as e:
                    logger.warning(f"Dropping file '{name}' with invalid metadata: {e}")
                    continue
            logger.warning(f"Dropping file '{name}' without content: {data!r}")
        return mutations


# =============================================================================
# Engine Output
# =============================================================================


class EngineResponse(BaseModel):
    """The unit returned to the caller after one orchestration cycle.

    Attributes:
        narrative: Player-facing story text.
        updates: Observable effects, in emission order across phases.
        files: World file mutations applied this cycle (last write wins).
        game_over: Terminal-state flag; never reverts once set.
        pending_checks: Checks awaiting resolution (mid-cycle only).
        check_results: Resolved checks, kept for auditing.
        errors: Diagnostic notes (raw failures, partial-success reasons).
        failed: True when the cycle ended in ERROR without committing.
    """

    narrative: str = ""
    updates: list[UpdateRecord] = Field(default_factory=list)
    files: dict[str, FileMutation] = Field(default_factory=dict)
    game_over: bool = False
    pending_checks: list[CheckDefinition] = Field(default_factory=list)
    check_results: list[CheckResult] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    failed: bool = False

    def merge(
        self,
        parsed: StructuredResponse,
        applied: dict[str, FileMutation],
    ) -> "EngineResponse":
        """Fold one phase's reply into the accumulated response.

        Args:
            parsed: The phase's decoded reply.
            applied: File mutations already written to the store this phase.

        Returns:
            A new EngineResponse; ``self`` is left untouched.
        """
        return self.model_copy(
            update={
                "narrative": parsed.narrative if parsed.narrative is not None else self.narrative,
                "updates": [*self.updates, *parsed.updates],
                "files": {**self.files, **applied},
                "game_over": self.game_over or parsed.game_over,
                "pending_checks": list(parsed.checks),
            }
        )
