"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the Hollow Gear character engine test suite.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

import pytest

from hollow_gear.engine.character import create_character
from hollow_gear.engine.dice import DiceRoller
from hollow_gear.models import (
    AbilityScores,
    AetherFormula,
    CharacterState,
    DurationKind,
    EmotionalState,
    Miracle,
    PowerDuration,
    PsionicPower,
    ResonanceType,
)
from hollow_gear.spellcasting.arcanist import create_arcanist_state
from hollow_gear.spellcasting.templar import create_templar_state


if TYPE_CHECKING:
    from collections.abc import Generator

    from hollow_gear.models import ArcanistState, TemplarState


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from hollow_gear.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "HOLLOW_GEAR_DEBUG": "true",
        "HOLLOW_GEAR_LOG_LEVEL": "DEBUG",
        "HOLLOW_GEAR_SERIALIZATION_INDENT": "2",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Time Fixtures
# =============================================================================


@pytest.fixture
def now() -> datetime:
    """Provide a fixed game time."""
    return datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# Dice Fixtures
# =============================================================================


@pytest.fixture
def dice_roller() -> DiceRoller:
    """Provide a seeded dice roller."""
    return DiceRoller(seed=42)


# =============================================================================
# Power & Spell Fixtures
# =============================================================================


@pytest.fixture
def focus_power() -> PsionicPower:
    """A 10-minute power that occupies a focus slot."""
    return PsionicPower(
        id="kinetic-shield",
        name="Kinetic Shield",
        tier=2,
        afp_cost=2,
        duration=PowerDuration(kind=DurationKind.MINUTES, amount=10),
    )


@pytest.fixture
def concentration_power() -> PsionicPower:
    """A concentration power that also needs focus."""
    return PsionicPower(
        id="mind-link",
        name="Mind Link",
        tier=1,
        afp_cost=1,
        duration=PowerDuration(kind=DurationKind.CONCENTRATION),
        requires_concentration=True,
    )


@pytest.fixture
def spark_bolt() -> AetherFormula:
    """A level 1 formula with default scaling."""
    return AetherFormula(id="spark-bolt", name="Spark Bolt", level=1, afp_cost=2)


@pytest.fixture
def arcanist(spark_bolt: AetherFormula) -> ArcanistState:
    """A level 5 Arcanist with +3 Intelligence (AFP 8, tier 3, 1 overclock)."""
    return create_arcanist_state(5, 3, known_formulae=(spark_bolt,))


@pytest.fixture
def blessing() -> Miracle:
    """A level 1 divine miracle."""
    return Miracle(id="blessing", name="Blessing", level=1, rc_cost=1)


@pytest.fixture
def ward() -> Miracle:
    """A level 1 protective miracle."""
    return Miracle(
        id="ward",
        name="Ward",
        level=1,
        rc_cost=1,
        resonance_type=ResonanceType.PROTECTIVE,
    )


@pytest.fixture
def templar(blessing: Miracle, ward: Miracle) -> TemplarState:
    """A level 6 Templar with +2 Wisdom (RC 8, faith cap 18, 2 overchannels)."""
    return create_templar_state(6, 2, known_miracles=(blessing, ward))


# =============================================================================
# Character Fixtures
# =============================================================================


@pytest.fixture
def sample_ability_scores() -> AbilityScores:
    """Provide sample ability scores."""
    return AbilityScores(
        strength=12,
        dexterity=14,
        constitution=15,
        intelligence=16,
        wisdom=13,
        charisma=8,
    )


@pytest.fixture
def character(now: datetime, sample_ability_scores: AbilityScores) -> CharacterState:
    """Provide a plain level 3 character with 24 hit points."""
    return create_character(
        "char-001",
        "Ada Brassweld",
        max_hit_points=24,
        created=now,
        level=3,
        ability_scores=sample_ability_scores,
        coolant_flasks=2,
    )


@pytest.fixture
def psionic_character(
    now: datetime,
    sample_ability_scores: AbilityScores,
    arcanist: ArcanistState,
) -> CharacterState:
    """Provide a level 5 psionic Arcanist."""
    return create_character(
        "char-002",
        "Quill Vesper",
        max_hit_points=30,
        created=now,
        level=5,
        ability_scores=sample_ability_scores,
        psionic_emotion=EmotionalState.CALM,
        arcanist=arcanist,
    )
