"""Tests for probability check resolution.

Outcome selection picks the label with the highest minimum that the roll
reaches, falling back to the failure label.
"""

import pytest

from aimud.dice.checks import DEFAULT_FAILURE_OUTCOME, CheckResolver, determine_outcome
from aimud.engine.schemas import CheckDefinition, CheckResult


THRESHOLDS = {"Success": 500, "Critical": 900}


class TestDetermineOutcome:
    """Tests for the pure outcome function."""

    def test_roll_above_success(self):
        assert determine_outcome(501, THRESHOLDS) == "Success"

    def test_roll_exactly_at_minimum_qualifies(self):
        assert determine_outcome(500, THRESHOLDS) == "Success"

    def test_roll_at_critical(self):
        assert determine_outcome(900, THRESHOLDS) == "Critical"

    def test_roll_below_every_minimum(self):
        assert determine_outcome(200, THRESHOLDS) == "Failure"

    def test_empty_thresholds_always_fail(self):
        assert determine_outcome(1000, {}) == DEFAULT_FAILURE_OUTCOME

    def test_custom_failure_label(self):
        assert determine_outcome(10, THRESHOLDS, failure_outcome="Fumble") == "Fumble"

    def test_declaration_order_does_not_matter(self):
        """Higher minimums win regardless of where they are declared."""
        reversed_thresholds = {"Critical": 900, "Success": 500}
        assert determine_outcome(950, reversed_thresholds) == "Critical"
        assert determine_outcome(600, reversed_thresholds) == "Success"

    def test_equal_minimums_keep_declaration_order(self):
        assert determine_outcome(700, {"Hit": 500, "Graze": 500}) == "Hit"
        assert determine_outcome(700, {"Graze": 500, "Hit": 500}) == "Graze"

    def test_zero_minimum_catches_everything(self):
        thresholds = {"Failure": 0, "Success": 400}
        assert determine_outcome(0, thresholds) == "Failure"
        assert determine_outcome(399, thresholds) == "Failure"
        assert determine_outcome(400, thresholds) == "Success"

    @pytest.mark.parametrize("roll", [0, 250, 499, 500, 899, 900, 1000])
    def test_always_returns_exactly_one_known_label(self, roll):
        assert determine_outcome(roll, THRESHOLDS) in {"Success", "Critical", "Failure"}


class TestCheckResolver:
    """Tests for CheckResolver."""

    @pytest.fixture
    def climb(self) -> CheckDefinition:
        return CheckDefinition(
            name="Climb",
            description="Scaling the wet wall",
            thresholds={"Success": 400, "Failure": 0},
        )

    def test_injected_roller(self, climb):
        resolver = CheckResolver(roller=lambda: 600)
        result = resolver.resolve(climb)

        assert isinstance(result, CheckResult)
        assert result.roll == 600
        assert result.outcome == "Success"
        assert result.name == "Climb"
        assert result.check is climb

    def test_explicit_roll_bypasses_roller(self, climb):
        resolver = CheckResolver(roller=lambda: 999)
        assert resolver.resolve(climb, roll=100).outcome == "Failure"

    def test_default_roller_stays_in_range(self, climb):
        resolver = CheckResolver()
        for _ in range(50):
            result = resolver.resolve(climb)
            assert 0 <= result.roll <= 1000

    def test_custom_failure_outcome(self):
        resolver = CheckResolver(roller=lambda: 5, failure_outcome="Botch")
        check = CheckDefinition(name="Pick Lock", thresholds={"Open": 300})
        assert resolver.resolve(check).outcome == "Botch"

    def test_resolve_all_keeps_order_and_rolls_once_each(self):
        rolls = iter([100, 950])
        resolver = CheckResolver(roller=lambda: next(rolls))
        checks = [
            CheckDefinition(name="Jump", thresholds=THRESHOLDS),
            CheckDefinition(name="Land", thresholds=THRESHOLDS),
        ]

        results = resolver.resolve_all(checks)

        assert [r.name for r in results] == ["Jump", "Land"]
        assert [r.outcome for r in results] == ["Failure", "Critical"]

    def test_resolve_all_empty(self):
        assert CheckResolver(roller=lambda: 1).resolve_all([]) == []
