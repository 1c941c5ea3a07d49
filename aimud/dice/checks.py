"""Probability check resolution.

The backend names a check and maps outcome labels to minimum rolls, e.g.
``{"Critical": 900, "Success": 500}``. The engine rolls, and the outcome is
the label with the highest minimum that the roll reaches:

- thresholds need not be contiguous or exhaustive,
- a roll below every minimum (or an empty map) is the failure outcome,
- equal minimums keep the order the backend declared them in.

Outcome selection is pure; only the roll is random.
"""

from typing import Callable

from aimud.config import settings
from aimud.dice.roller import roll_check
from aimud.engine.schemas import CheckDefinition, CheckResult


DEFAULT_FAILURE_OUTCOME = "Failure"


def determine_outcome(
    roll: int,
    thresholds: dict[str, int],
    failure_outcome: str = DEFAULT_FAILURE_OUTCOME,
) -> str:
    """Select the outcome label for a roll.

    Args:
        roll: The rolled value.
        thresholds: Outcome label -> minimum roll.
        failure_outcome: Label used when no threshold qualifies.

    Returns:
        Exactly one outcome label.

    Examples:
        >>> determine_outcome(501, {"Success": 500, "Critical": 900})
        'Success'
        >>> determine_outcome(900, {"Success": 500, "Critical": 900})
        'Critical'
        >>> determine_outcome(200, {"Success": 500, "Critical": 900})
        'Failure'
    """
    # sorted() is stable, so equal minimums keep declaration order
    ordered = sorted(thresholds.items(), key=lambda item: item[1], reverse=True)
    for outcome, minimum in ordered:
        if roll >= minimum:
            return outcome
    return failure_outcome


class CheckResolver:
    """Resolves check definitions into auditable results.

    Args:
        roller: Zero-argument callable returning a roll. Inject a constant
            to make resolution deterministic.
        failure_outcome: Label for rolls that reach no threshold.

    Usage:
        resolver = CheckResolver(roller=lambda: 600)
        result = resolver.resolve(check)
        result.outcome  # "Success" for {"Success": 400, "Failure": 0}
    """

    def __init__(
        self,
        roller: Callable[[], int] | None = None,
        failure_outcome: str | None = None,
    ) -> None:
        self._roller = roller or roll_check
        self.failure_outcome = failure_outcome or settings.failure_outcome

    def resolve(self, check: CheckDefinition, roll: int | None = None) -> CheckResult:
        """Roll (unless a roll is given) and resolve one check.

        Args:
            check: The requested check.
            roll: Optional fixed roll, bypassing the roller.

        Returns:
            CheckResult binding the check, the roll and the outcome.
        """
        value = self._roller() if roll is None else roll
        outcome = determine_outcome(value, check.thresholds, self.failure_outcome)
        return CheckResult(check=check, roll=value, outcome=outcome)

    def resolve_all(self, checks: list[CheckDefinition]) -> list[CheckResult]:
        """Resolve checks in request order, one roll each."""
        return [self.resolve(check) for check in checks]
