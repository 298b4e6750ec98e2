"""Dice rolling and injectable randomness.

Engine functions never touch an ambient random generator. Anything that
needs chance takes a ``RandomSource`` (a callable returning a float in
[0, 1)) or a pre-rolled number, and callers build those here. Dice
expressions such as backlash damage ("1d4") are rolled with the d20
library.
"""

from __future__ import annotations

import random
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

import d20

from hollow_gear.core.exceptions import DiceRollError
from hollow_gear.core.logging import get_logger
from hollow_gear.core.types import RandomSource


logger = get_logger(__name__)


def seeded_source(seed: int) -> RandomSource:
    """Build a reproducible random source.

    Args:
        seed: Seed for a private ``random.Random`` instance.

    Returns:
        The bound ``random()`` method of that instance.
    """
    return random.Random(seed).random


def fixed_source(*values: float) -> RandomSource:
    """Build a source that replays ``values`` in order, then repeats the last.

    Args:
        *values: Draws in [0, 1).

    Returns:
        A RandomSource.

    Raises:
        DiceRollError: If no values are given or one is out of range.

    Example:
        >>> draw = fixed_source(0.99)
        >>> draw()
        0.99
    """
    if not values:
        raise DiceRollError("fixed_source needs at least one value")
    for value in values:
        if not 0.0 <= value < 1.0:
            raise DiceRollError(
                "Random source values must lie in [0, 1)",
                details={"value": value},
            )
    iterator: Iterator[float] = iter(values)
    last = values[-1]

    def draw() -> float:
        return next(iterator, last)

    return draw


@dataclass(frozen=True)
class DiceExpression:
    """A rolled dice expression.

    Attributes:
        expression: The original dice expression string.
        total: The total result of the roll.
        dice: Individual kept dice results.
        modifier: Static modifier applied.
    """

    expression: str
    total: int
    dice: list[int]
    modifier: int


class DiceRoller:
    """Rolls dice expressions with the d20 library.

    Example:
        >>> roller = DiceRoller(seed=7)
        >>> roller.roll("1d4").total in range(1, 5)
        True
    """

    def __init__(self, *, seed: int | None = None) -> None:
        """Initialize the dice roller.

        Args:
            seed: Optional random seed for reproducible rolls.
        """
        self._seed = seed
        if seed is not None:
            random.seed(seed)

    def roll(self, expression: str) -> DiceExpression:
        """Roll dice according to the given expression.

        Args:
            expression: Dice expression (e.g., '1d4', '2d6+3').

        Returns:
            DiceExpression containing roll results.

        Raises:
            DiceRollError: If the expression is invalid.
        """
        if not expression or not expression.strip():
            raise DiceRollError("Empty dice expression", expression=expression)

        try:
            result = d20.roll(expression)
        except d20.RollError as exc:
            raise DiceRollError(
                f"Invalid dice expression: {exc}",
                expression=expression,
            ) from exc

        dice_values = self._extract_dice_values(result.expr)
        logger.debug("Dice rolled", expression=expression, total=result.total)
        return DiceExpression(
            expression=expression,
            total=result.total,
            dice=dice_values,
            modifier=result.total - sum(dice_values),
        )

    def _extract_dice_values(self, expr: Any) -> list[int]:
        """Extract kept dice values from a d20 expression tree."""
        values: list[int] = []

        def traverse(node: Any) -> None:
            if isinstance(node, d20.Dice):
                for die in node.values:
                    if die.kept:
                        values.append(int(die.number))
            elif hasattr(node, "children"):
                for child in node.children:
                    traverse(child)

        traverse(expr)
        return values

    def roll_d20(self) -> int:
        """Roll a single natural d20 (death saves, concentration)."""
        return self.roll("1d20").total

    def roll_d6(self) -> int:
        """Roll a single d6 (the psionic feedback die)."""
        return self.roll("1d6").total


__all__ = [
    "RandomSource",
    "seeded_source",
    "fixed_source",
    "DiceExpression",
    "DiceRoller",
]
