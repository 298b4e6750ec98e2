"""Tests for dice rolling and random sources."""

from __future__ import annotations

import pytest

from hollow_gear.core.exceptions import DiceRollError
from hollow_gear.engine.dice import DiceExpression, DiceRoller, fixed_source, seeded_source


class TestDiceRoller:
    """Tests for the DiceRoller class."""

    def test_simple_d20_roll(self, dice_roller: DiceRoller) -> None:
        """Test simple d20 roll."""
        result = dice_roller.roll("1d20")

        assert isinstance(result, DiceExpression)
        assert 1 <= result.total <= 20
        assert len(result.dice) == 1
        assert result.modifier == 0

    def test_roll_with_modifier(self, dice_roller: DiceRoller) -> None:
        """Test roll with positive modifier."""
        result = dice_roller.roll("1d4+2")

        assert result.modifier == 2
        assert 3 <= result.total <= 6

    def test_multiple_dice(self, dice_roller: DiceRoller) -> None:
        """Test rolling multiple dice."""
        result = dice_roller.roll("3d6")

        assert 3 <= result.total <= 18
        assert len(result.dice) == 3
        assert sum(result.dice) == result.total

    def test_helpers_stay_in_range(self, dice_roller: DiceRoller) -> None:
        """Test the d20 and d6 helpers."""
        for _ in range(20):
            assert 1 <= dice_roller.roll_d20() <= 20
            assert 1 <= dice_roller.roll_d6() <= 6

    @pytest.mark.parametrize("expression", ["", "   ", "not dice", "1d"])
    def test_invalid_expression(self, dice_roller: DiceRoller, expression: str) -> None:
        """Test that invalid expressions raise DiceRollError."""
        with pytest.raises(DiceRollError):
            dice_roller.roll(expression)


class TestRandomSources:
    """Tests for injectable random sources."""

    def test_fixed_source_replays_then_repeats(self) -> None:
        """Test fixed sources replay values and repeat the last one."""
        draw = fixed_source(0.1, 0.5)

        assert [draw(), draw(), draw()] == [0.1, 0.5, 0.5]

    def test_fixed_source_needs_values(self) -> None:
        """Test fixed_source rejects an empty value list."""
        with pytest.raises(DiceRollError):
            fixed_source()

    @pytest.mark.parametrize("value", [-0.1, 1.0, 2.5])
    def test_fixed_source_range(self, value: float) -> None:
        """Test fixed_source rejects values outside [0, 1)."""
        with pytest.raises(DiceRollError) as exc_info:
            fixed_source(value)

        assert exc_info.value.details["value"] == value

    def test_seeded_source_is_reproducible(self) -> None:
        """Test the same seed yields the same draws."""
        first = seeded_source(7)
        second = seeded_source(7)

        draws = [first() for _ in range(5)]
        assert draws == [second() for _ in range(5)]
        assert all(0.0 <= value < 1.0 for value in draws)
