"""Character engine entry points.

Submodules:
    dice: Dice rolling (d20 library) and injectable random sources
    character: Character creation, validation and aggregate actions

Example:
    >>> from datetime import datetime, timezone
    >>> from hollow_gear.engine import DiceRoller, create_character, damage_character
    >>>
    >>> now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    >>> hero = create_character("c-1", "Brass", max_hit_points=20, created=now)
    >>> hero, outcome = damage_character(hero, 25, at=now)
    >>> outcome.life_state
    <LifeState.UNCONSCIOUS: 'unconscious'>
"""

from __future__ import annotations

# =============================================================================
# Dice Rolling
# =============================================================================
from hollow_gear.engine.dice import (
    DiceExpression,
    DiceRoller,
    RandomSource,
    fixed_source,
    seeded_source,
)

# =============================================================================
# Character Aggregate
# =============================================================================
from hollow_gear.engine.character import (
    ManifestResult,
    create_character,
    damage_character,
    heal,
    manifest_power,
    rest_character,
    roll_death_save,
    validate_character,
)


__all__ = [
    # Dice
    "DiceExpression",
    "DiceRoller",
    "RandomSource",
    "fixed_source",
    "seeded_source",
    # Character
    "ManifestResult",
    "create_character",
    "validate_character",
    "damage_character",
    "heal",
    "roll_death_save",
    "manifest_power",
    "rest_character",
]
