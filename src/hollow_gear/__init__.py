"""Hollow Gear - rule-governed character state engine.

Models the mutable state of a Hollow Gear character: hit points and
death saves, heat stress and steam venting, psionic focus and overload,
and the Arcanist and Templar spellcasting economies. Every operation is
a pure function from a frozen state to a new one. Snapshots of that
state can be serialized, diffed, patched and migrated.

Example:
    >>> from datetime import datetime, timezone
    >>> from hollow_gear import create_character, create_patch, apply_patch, to_snapshot
    >>>
    >>> now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    >>> hero = create_character("c-1", "Brass", max_hit_points=20, created=now)
    >>> before = to_snapshot(hero)
    >>> after = to_snapshot(hero.evolve(name="Brass the Bold"))
    >>> apply_patch(before, create_patch(before, after, timestamp=now)) == after
    True

Modules:
    core: Configuration, logging, and base exceptions.
    models: Frozen pydantic state models.
    mechanics: Resource pools, death, abilities and heat.
    psionics: Aether Flux, focus, overload and signatures.
    spellcasting: Arcanist and Templar casting.
    serialization: Snapshots, diffs, patches and migrations.
    engine: Dice and whole-character operations.
"""

from __future__ import annotations

# Core
from hollow_gear.core.config import Settings, get_settings
from hollow_gear.core.exceptions import HollowGearError
from hollow_gear.core.logging import configure_logging, get_logger

# Models
from hollow_gear.models import AbilityScores, CharacterState

# Engine
from hollow_gear.engine import (
    DiceRoller,
    create_character,
    damage_character,
    heal,
    manifest_power,
    rest_character,
    validate_character,
)

# Serialization
from hollow_gear.serialization import (
    MigrationRegistry,
    apply_patch,
    create_patch,
    deserialize,
    serialize,
    to_snapshot,
    track_changes,
)


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "HollowGearError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Models
    "AbilityScores",
    "CharacterState",
    # Engine
    "DiceRoller",
    "create_character",
    "validate_character",
    "damage_character",
    "heal",
    "manifest_power",
    "rest_character",
    # Serialization
    "to_snapshot",
    "serialize",
    "deserialize",
    "MigrationRegistry",
    "track_changes",
    "create_patch",
    "apply_patch",
]
