"""Hit point damage, death saves and the massive-damage rule.

Life states run Conscious -> Unconscious (0 HP) -> Stable or Dead. The
massive-damage rule is checked before death saves are consulted: a hit
large enough kills outright no matter how many saves remain.
"""

from __future__ import annotations

from dataclasses import dataclass

from hollow_gear.core.constants import DEATH_SAVE_DC, MAX_DEATH_SAVES
from hollow_gear.core.logging import get_logger
from hollow_gear.mechanics.resources import apply_damage, apply_healing
from hollow_gear.models.enums import LifeState
from hollow_gear.models.pools import DeathSaves, HitPoints
from hollow_gear.models.results import ValidationIssue, ValidationResult


logger = get_logger(__name__)


@dataclass(frozen=True)
class DamageOutcome:
    """Result of damaging a character.

    Attributes:
        hit_points: Hit points after the damage.
        death_saves: Death saves after the damage.
        absorbed: Damage soaked by temporary hit points.
        instant_death: Whether the massive-damage rule killed the character.
        life_state: Life state after the damage.
    """

    hit_points: HitPoints
    death_saves: DeathSaves
    absorbed: int
    instant_death: bool
    life_state: LifeState


@dataclass(frozen=True)
class DeathSaveOutcome:
    """Result of rolling a death save."""

    hit_points: HitPoints
    death_saves: DeathSaves
    roll: int
    success: bool
    life_state: LifeState


# =============================================================================
# Death Save Counters
# =============================================================================


def add_death_save_success(saves: DeathSaves, count: int = 1) -> DeathSaves:
    """Add successes, capped at three."""
    return saves.evolve(successes=min(MAX_DEATH_SAVES, saves.successes + count))


def add_death_save_failure(saves: DeathSaves, count: int = 1) -> DeathSaves:
    """Add failures, capped at three."""
    return saves.evolve(failures=min(MAX_DEATH_SAVES, saves.failures + count))


def reset_death_saves() -> DeathSaves:
    """Start a fresh death-save record."""
    return DeathSaves()


def is_stable(saves: DeathSaves) -> bool:
    """Three successes stabilize a dying character."""
    return saves.successes >= MAX_DEATH_SAVES


def is_dead(saves: DeathSaves) -> bool:
    """Three failures kill a dying character."""
    return saves.failures >= MAX_DEATH_SAVES


def stabilize(saves: DeathSaves) -> DeathSaves:
    """Stabilize a dying character (e.g., a Medicine check)."""
    return saves.evolve(successes=MAX_DEATH_SAVES)


# =============================================================================
# Massive Damage
# =============================================================================


def is_dead_from_massive_damage(hit_points: HitPoints, damage: int) -> bool:
    """Check the massive-damage rule.

    A character above 0 HP dies outright when the damage left over after
    reaching 0 is at least their maximum. A character already at 0 dies
    when a single hit deals at least their maximum.

    Args:
        hit_points: Hit points before the damage.
        damage: Damage after temporary hit points absorbed their share.

    Returns:
        True if the damage kills instantly.

    Example:
        >>> hp = HitPoints(current=20, maximum=20)
        >>> is_dead_from_massive_damage(hp, 40)
        True
        >>> is_dead_from_massive_damage(hp, 39)
        False
    """
    if hit_points.current > 0:
        remaining = hit_points.current - damage
        if remaining <= 0:
            return abs(remaining) >= hit_points.maximum
        return False
    return damage >= hit_points.maximum


def determine_life_state(hit_points: HitPoints, saves: DeathSaves) -> LifeState:
    """Derive the life state from hit points and death saves."""
    if is_dead(saves):
        return LifeState.DEAD
    if hit_points.current > 0:
        return LifeState.CONSCIOUS
    if is_stable(saves):
        return LifeState.STABLE
    return LifeState.UNCONSCIOUS


# =============================================================================
# Damage, Saves & Healing
# =============================================================================


def take_damage(
    hit_points: HitPoints,
    saves: DeathSaves,
    amount: int,
    *,
    critical: bool = False,
) -> DamageOutcome:
    """Damage a character and advance the death state machine.

    Temporary hit points absorb first. The massive-damage rule runs on
    what gets through. A surviving character who was already at 0 HP
    takes one death-save failure, or two from a critical hit.

    Args:
        hit_points: Hit points before the damage.
        saves: Death saves before the damage.
        amount: Damage dealt.
        critical: Whether the hit was a critical hit.

    Returns:
        DamageOutcome with the new hit points and saves.
    """
    amount = max(0, amount)
    absorbed = min(amount, hit_points.temporary)
    through = amount - absorbed
    was_at_zero = hit_points.current <= 0

    new_hp = apply_damage(hit_points, amount)
    new_saves = saves

    if through > 0 and is_dead_from_massive_damage(hit_points, through):
        new_saves = saves.evolve(failures=MAX_DEATH_SAVES)
        logger.warning(
            "Massive damage killed character",
            damage=through,
            maximum=hit_points.maximum,
        )
        return DamageOutcome(new_hp, new_saves, absorbed, True, LifeState.DEAD)

    if was_at_zero and through > 0:
        new_saves = add_death_save_failure(saves, 2 if critical else 1)
        # A stable character who is hit starts dying again
        new_saves = new_saves.evolve(successes=0) if is_stable(saves) else new_saves

    state = determine_life_state(new_hp, new_saves)
    if state is LifeState.UNCONSCIOUS and not was_at_zero:
        logger.info("Character dropped to 0 hit points", damage=through)
    elif state is LifeState.DEAD:
        logger.warning("Character died from failed death saves")

    return DamageOutcome(new_hp, new_saves, absorbed, False, state)


def resolve_death_save(hit_points: HitPoints, saves: DeathSaves, roll: int) -> DeathSaveOutcome:
    """Apply a d20 death-save roll.

    A natural 20 restores 1 hit point and resets the saves. A natural 1
    counts as two failures. Otherwise 10 or higher succeeds.

    Args:
        hit_points: Current hit points (expected to be 0).
        saves: Current death saves.
        roll: The natural d20 result.

    Returns:
        DeathSaveOutcome with the updated state.
    """
    if roll >= 20:
        revived = apply_healing(hit_points, 1)
        logger.info("Natural 20 on death save, character revived")
        return DeathSaveOutcome(revived, reset_death_saves(), roll, True, LifeState.CONSCIOUS)

    if roll <= 1:
        new_saves = add_death_save_failure(saves, 2)
        success = False
    elif roll >= DEATH_SAVE_DC:
        new_saves = add_death_save_success(saves)
        success = True
    else:
        new_saves = add_death_save_failure(saves)
        success = False

    return DeathSaveOutcome(
        hit_points, new_saves, roll, success, determine_life_state(hit_points, new_saves)
    )


def heal_character(
    hit_points: HitPoints,
    saves: DeathSaves,
    amount: int,
) -> tuple[HitPoints, DeathSaves]:
    """Heal a character. Healing from 0 HP resets the death saves.

    Dead characters are not healed; they need a revival effect.
    """
    if is_dead(saves) or amount <= 0:
        return hit_points, saves
    new_hp = apply_healing(hit_points, amount)
    if hit_points.current <= 0 < new_hp.current:
        return new_hp, reset_death_saves()
    return new_hp, saves


def revive(hit_points: HitPoints, amount: int = 1) -> tuple[HitPoints, DeathSaves]:
    """Return a dead character to life with ``amount`` hit points."""
    restored = hit_points.evolve(current=max(1, min(amount, hit_points.maximum)), temporary=0)
    logger.info("Character revived", hit_points=restored.current)
    return restored, reset_death_saves()


# =============================================================================
# Validation
# =============================================================================


def validate_hit_points(hit_points: HitPoints) -> ValidationResult[HitPoints]:
    """Validate hit point bounds, reporting every violation."""
    issues: list[ValidationIssue] = []
    if hit_points.current < 0:
        issues.append(
            ValidationIssue("current", "Current HP must be non-negative", "INVALID_CURRENT_HP")
        )
    if hit_points.maximum < 1:
        issues.append(ValidationIssue("maximum", "Maximum HP must be at least 1", "INVALID_MAX_HP"))
    if hit_points.temporary < 0:
        issues.append(
            ValidationIssue("temporary", "Temporary HP must be non-negative", "INVALID_TEMP_HP")
        )
    if hit_points.current > hit_points.maximum:
        issues.append(
            ValidationIssue(
                "current",
                "Current HP cannot exceed maximum HP",
                "CURRENT_EXCEEDS_MAX",
                {"current": hit_points.current, "maximum": hit_points.maximum},
            )
        )
    return ValidationResult.from_issues(hit_points, issues)


def validate_death_saves(saves: DeathSaves) -> ValidationResult[DeathSaves]:
    """Validate that both counters lie in 0-3."""
    issues: list[ValidationIssue] = []
    for name in ("successes", "failures"):
        value = getattr(saves, name)
        if not 0 <= value <= MAX_DEATH_SAVES:
            issues.append(
                ValidationIssue(
                    name,
                    f"Death save {name} must be between 0 and {MAX_DEATH_SAVES}",
                    "INVALID_DEATH_SAVES",
                    {name: value},
                )
            )
    return ValidationResult.from_issues(saves, issues)


__all__ = [
    "DamageOutcome",
    "DeathSaveOutcome",
    "add_death_save_success",
    "add_death_save_failure",
    "reset_death_saves",
    "is_stable",
    "is_dead",
    "stabilize",
    "is_dead_from_massive_damage",
    "determine_life_state",
    "take_damage",
    "resolve_death_save",
    "heal_character",
    "revive",
    "validate_hit_points",
    "validate_death_saves",
]
