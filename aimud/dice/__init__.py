"""Dice system for probability checks.

Usage:
    >>> from aimud.dice import CheckResolver, determine_outcome
    >>> determine_outcome(600, {"Success": 400, "Failure": 0})
    'Success'
"""

from aimud.dice.roller import roll_check
from aimud.dice.checks import (
    DEFAULT_FAILURE_OUTCOME,
    CheckResolver,
    determine_outcome,
)

__all__ = [
    "roll_check",
    "DEFAULT_FAILURE_OUTCOME",
    "CheckResolver",
    "determine_outcome",
]
