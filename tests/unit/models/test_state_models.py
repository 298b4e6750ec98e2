"""Tests for the engine state models and enums."""

from __future__ import annotations

from datetime import datetime

import pytest
from pydantic import ValidationError as PydanticValidationError

from hollow_gear.models.character import AbilityScores, CharacterState
from hollow_gear.models.enums import (
    DurationKind,
    HarnessCondition,
    HeatSource,
    HeatStressLevel,
)
from hollow_gear.models.heat import HeatAccumulation, HeatStressState
from hollow_gear.models.pools import HitPoints, ResourcePool
from hollow_gear.models.results import ValidationIssue, ValidationResult


class TestEngineModel:
    """Tests for shared model behaviour."""

    def test_frozen(self) -> None:
        """Test models cannot be mutated in place."""
        pool = ResourcePool(current=3, maximum=5)

        with pytest.raises(PydanticValidationError):
            pool.current = 4  # type: ignore[misc]

    def test_evolve_returns_copy(self) -> None:
        """Test evolve leaves the original untouched and keeps the subclass."""
        hit_points = HitPoints(current=10, maximum=10)

        wounded = hit_points.evolve(current=4)

        assert isinstance(wounded, HitPoints)
        assert wounded.current == 4
        assert hit_points.current == 10

    def test_extra_fields_forbidden(self) -> None:
        """Test unknown fields are rejected."""
        with pytest.raises(PydanticValidationError):
            ResourcePool(current=1, maximum=1, bonus=2)  # type: ignore[call-arg]

    def test_camel_case_document(self, now: datetime) -> None:
        """Test documents use camelCase keys and JSON values."""
        state = HeatStressState(
            current_heat_points=6,
            current_level=HeatStressLevel.WARM,
            recent_accumulation=(HeatAccumulation(source=HeatSource.ENVIRONMENTAL, amount=6, timestamp=now),),
        )

        document = state.to_document()

        assert document["currentHeatPoints"] == 6
        assert document["currentLevel"] == 1
        assert document["ventHarness"] is None
        assert document["recentAccumulation"][0]["source"] == "environmental"
        assert isinstance(document["recentAccumulation"], list)

    def test_populate_by_name_or_alias(self) -> None:
        """Test models accept both attribute names and document keys."""
        by_alias = HeatStressState.model_validate({"currentHeatPoints": 3, "coolantFlasks": 1})
        by_name = HeatStressState(current_heat_points=3, coolant_flasks=1)

        assert by_alias == by_name

    def test_no_range_enforcement(self) -> None:
        """Test out-of-range values are accepted and left to validators."""
        scores = AbilityScores(strength=45)

        assert scores.strength == 45

    def test_character_round_trip(self, psionic_character: CharacterState) -> None:
        """Test a character survives its own document form."""
        document = psionic_character.to_document()

        assert CharacterState.model_validate(document) == psionic_character


class TestResourcePool:
    """Tests for pool properties."""

    @pytest.mark.parametrize(
        ("pool", "effective", "empty"),
        [
            (ResourcePool(current=8, maximum=10, temporary=3), 11, False),
            (ResourcePool(current=0, maximum=10, temporary=2), 2, False),
            (ResourcePool(current=0, maximum=10), 0, True),
            (ResourcePool(current=-2, maximum=10), 0, True),
        ],
    )
    def test_effective(self, pool: ResourcePool, effective: int, empty: bool) -> None:
        """Test effective points ignore negative values."""
        assert pool.effective == effective
        assert pool.is_empty is empty

    def test_hit_points_at_zero(self) -> None:
        """Test the zero check looks only at current hit points."""
        assert HitPoints(current=0, maximum=10, temporary=5).is_at_zero
        assert not HitPoints(current=1, maximum=10).is_at_zero


class TestEnums:
    """Tests for enum helpers."""

    def test_heat_level_label(self) -> None:
        """Test levels render as capitalized names."""
        assert HeatStressLevel.OVERHEATED.label == "Overheated"
        assert HeatStressLevel(0).label == "Normal"

    @pytest.mark.parametrize(
        ("condition", "expected"),
        [
            (HarnessCondition.PRISTINE, HarnessCondition.GOOD),
            (HarnessCondition.GOOD, HarnessCondition.WORN),
            (HarnessCondition.WORN, HarnessCondition.DAMAGED),
            (HarnessCondition.DAMAGED, HarnessCondition.DAMAGED),
        ],
    )
    def test_harness_degradation(self, condition: HarnessCondition, expected: HarnessCondition) -> None:
        """Test each condition degrades one step and stops at DAMAGED."""
        assert condition.degraded() is expected

    def test_timed_durations(self) -> None:
        """Test only rounds, minutes and hours count down."""
        timed = {kind for kind in DurationKind if kind.is_timed}

        assert timed == {DurationKind.ROUNDS, DurationKind.MINUTES, DurationKind.HOURS}


class TestValidationResult:
    """Tests for validation result helpers."""

    def test_from_issues_without_issues(self) -> None:
        """Test a clean result carries the data."""
        result = ValidationResult.from_issues(5, [])

        assert result.is_valid
        assert result.data == 5

    def test_from_issues_with_issues(self) -> None:
        """Test a failing result drops the data and keeps issue order."""
        issues = [
            ValidationIssue("a", "bad a", "A_BAD"),
            ValidationIssue("b", "bad b", "B_BAD"),
        ]

        result = ValidationResult.from_issues(5, issues)

        assert not result.is_valid
        assert result.data is None
        assert result.codes == ("A_BAD", "B_BAD")

    def test_prefixed(self) -> None:
        """Test prefixing nests the field and copies the context."""
        issue = ValidationIssue("current", "too high", "HIGH", {"current": 9})

        nested = issue.prefixed("hitPoints")

        assert nested.field == "hitPoints.current"
        assert nested.context == {"current": 9}
        assert nested.context is not issue.context
        assert ValidationIssue("", "x", "X").prefixed("root").field == "root"
