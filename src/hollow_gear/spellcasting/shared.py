"""Rules shared by both spellcasting archetypes.

Arcanists and Templars both pay a scaled cost from a charge pool, build
up a capped risk accumulator and can overdrive a limited number of
times per long rest. Cast preconditions are checked together so the
caller sees every reason a cast is refused.

Heat above 60% of the cap feeds back into casting: penalties first,
then extra heat and cost, and at the extreme a chance to fizzle.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from hollow_gear.core.constants import (
    HEAT_FEEDBACK_FAILURE_CHANCE,
    HEAT_FEEDBACK_THRESHOLD_PERCENT,
    MIN_CONCENTRATION_DC,
)
from hollow_gear.core.exceptions import DiceRollError
from hollow_gear.core.types import RandomSource
from hollow_gear.models.enums import RestType
from hollow_gear.models.pools import ResourcePool
from hollow_gear.models.results import ValidationIssue


StateT = TypeVar("StateT")


@dataclass(frozen=True)
class RiskPenalties:
    """Spell attack and save DC penalties from a full risk accumulator."""

    spell_attack_penalty: int
    spell_dc_penalty: int
    description: str


@dataclass(frozen=True)
class FeedbackEffects:
    """Effects of heat feedback at one feedback level.

    Attributes:
        level: Feedback level, 0 to 100.
        spell_attack_penalty: Added to spell attack rolls.
        spell_dc_penalty: Added to spell save DCs.
        concentration_penalty: Added to concentration saves.
        heat_generation_increase: Extra heat generated by each cast.
        resource_cost_increase: Extra AFP or RC paid for each cast.
        spell_failure_chance: Percent chance a cast fails.
        casting_time_increase: Steps by which casting time lengthens.
    """

    level: int
    spell_attack_penalty: int = 0
    spell_dc_penalty: int = 0
    concentration_penalty: int = 0
    heat_generation_increase: int = 0
    resource_cost_increase: int = 0
    spell_failure_chance: int = 0
    casting_time_increase: int = 0


@dataclass(frozen=True)
class ConcentrationSave:
    """Outcome of a concentration save made under heat feedback."""

    dc: int
    total: int
    success: bool


@dataclass(frozen=True)
class CastingResult(Generic[StateT]):
    """Outcome of a cast attempt.

    Attributes:
        success: Whether the cast happened.
        state: Archetype state after the attempt.
        cost: Charges spent.
        risk_generated: Heat or faith feedback added.
        heat_generated: Heat points added.
        overdrive_used: Whether Overclock or Overchannel was spent.
        derived_bonus: Equilibrium tier or harmony bonus applied.
        fizzled: The cast was paid for but failed to heat feedback.
        casting_time_increase: Casting time steps added by heat feedback.
        errors: Every violated precondition, in check order.
    """

    success: bool
    state: StateT
    cost: int = 0
    risk_generated: int = 0
    heat_generated: int = 0
    overdrive_used: bool = False
    derived_bonus: int = 0
    fizzled: bool = False
    casting_time_increase: int = 0
    errors: tuple[ValidationIssue, ...] = ()

    @property
    def error_codes(self) -> tuple[str, ...]:
        """Codes of the refused preconditions."""
        return tuple(issue.code for issue in self.errors)


def calculate_scaled_cost(base_cost: int, cast_level: int, power_level: int, per_level: int) -> int:
    """Cost of casting above base level.

    Example:
        >>> calculate_scaled_cost(2, 3, 1, 1)
        4
    """
    return base_cost + max(0, cast_level - power_level) * per_level


def add_capped(current: int, amount: int, cap: int) -> int:
    """Add to an accumulator without passing its cap."""
    return min(cap, current + amount)


def calculate_risk_penalties(current: int, cap: int) -> RiskPenalties:
    """Bucket an accumulator into penalties at 50%, 75% and 100% of cap."""
    ratio = current / cap if cap > 0 else 1.0
    if ratio >= 1.0:
        return RiskPenalties(-4, -4, "Severe: major penalties to all spellcasting")
    if ratio >= 0.75:
        return RiskPenalties(-2, -2, "High: penalties to spellcasting")
    if ratio >= 0.5:
        return RiskPenalties(-1, -1, "Moderate: minor penalties to spellcasting")
    return RiskPenalties(0, 0, "Within acceptable limits")


def dissipate_risk(current: int, rest_type: RestType, short_rest_amount: int = 2) -> int:
    """Risk left after a rest: cleared by a long rest, reduced by a short one."""
    if rest_type == RestType.LONG:
        return 0
    return max(0, current - short_rest_amount)


# =============================================================================
# Heat Feedback
# =============================================================================


def calculate_feedback_threshold(max_heat: int) -> int:
    """Heat above which feedback builds: 60% of the cap, rounded down."""
    return max_heat * HEAT_FEEDBACK_THRESHOLD_PERCENT // 100


def calculate_feedback_level(current_heat: int, max_heat: int) -> int:
    """Feedback level from 0 at the threshold to 100 at the heat cap.

    Example:
        >>> calculate_feedback_level(8, 10)
        50
    """
    threshold = calculate_feedback_threshold(max_heat)
    if current_heat <= threshold:
        return 0
    headroom = max_heat - threshold
    if headroom <= 0:
        return 100
    return min(100, (current_heat - threshold) * 100 // headroom)


def calculate_feedback_effects(level: int) -> FeedbackEffects:
    """Effects active at a feedback level.

    At 25 spell attacks and concentration take -1. At 50 save DCs take
    -1 and every cast makes one more heat. At 75 the three penalties
    become -2 and every cast costs one more charge. At 90 casts have a
    10% failure chance and take longer.
    """
    if level < 25:
        return FeedbackEffects(level=level)
    penalty = -2 if level >= 75 else -1
    extreme = level >= 90
    return FeedbackEffects(
        level=level,
        spell_attack_penalty=penalty,
        spell_dc_penalty=penalty if level >= 50 else 0,
        concentration_penalty=penalty,
        heat_generation_increase=1 if level >= 50 else 0,
        resource_cost_increase=1 if level >= 75 else 0,
        spell_failure_chance=HEAT_FEEDBACK_FAILURE_CHANCE if extreme else 0,
        casting_time_increase=1 if extreme else 0,
    )


def get_feedback_effects(current_heat: int, max_heat: int) -> FeedbackEffects:
    """Feedback effects for a heat accumulator."""
    return calculate_feedback_effects(calculate_feedback_level(current_heat, max_heat))


def roll_spell_failure(effects: FeedbackEffects, random_source: RandomSource | None) -> bool:
    """Decide whether feedback makes a cast fail.

    Args:
        effects: Feedback effects at the time of casting.
        random_source: Draw in [0, 1) compared against the failure chance.

    Returns:
        True when the cast fails. Always False without a failure chance.

    Raises:
        DiceRollError: If a failure chance applies and no source is given.
    """
    if effects.spell_failure_chance <= 0:
        return False
    if random_source is None:
        raise DiceRollError(
            "A random source is required while heat feedback can make spells fail",
            details={"failure_chance": effects.spell_failure_chance},
        )
    return random_source() * 100 < effects.spell_failure_chance


def make_concentration_save(
    damage_taken: int,
    roll: int,
    ability_modifier: int,
    proficiency_bonus: int,
    effects: FeedbackEffects,
) -> ConcentrationSave:
    """Resolve a concentration save with the feedback penalty applied.

    Args:
        damage_taken: Damage that forced the save.
        roll: Natural d20 rolled by the caller.
        ability_modifier: Spellcasting ability modifier.
        proficiency_bonus: Proficiency bonus.
        effects: Current feedback effects.

    Returns:
        ConcentrationSave against ``max(10, damage // 2)``.
    """
    dc = max(MIN_CONCENTRATION_DC, damage_taken // 2)
    total = roll + ability_modifier + proficiency_bonus + effects.concentration_penalty
    return ConcentrationSave(dc=dc, total=total, success=total >= dc)


# =============================================================================
# Precondition Issues
# =============================================================================


def check_charge(pool: ResourcePool, cost: int, field: str, unit: str) -> list[ValidationIssue]:
    """Report a pool that cannot pay ``cost``."""
    if pool.effective >= cost:
        return []
    return [
        ValidationIssue(
            field,
            f"Insufficient {unit}: need {cost}, have {pool.effective}",
            "INSUFFICIENT_CHARGE",
            {"cost": cost, "available": pool.effective},
        )
    ]


def check_overdrive(
    requested: bool,
    eligible: bool,
    uses_left: int,
    field: str,
    name: str,
) -> list[ValidationIssue]:
    """Report an overdrive that the power refuses or that has no uses left."""
    if not requested:
        return []
    issues: list[ValidationIssue] = []
    if not eligible:
        issues.append(
            ValidationIssue(field, f"This power cannot be {name}ed", "OVERDRIVE_INELIGIBLE")
        )
    if uses_left <= 0:
        issues.append(
            ValidationIssue(field, f"No {name} uses remaining", "OVERDRIVE_UNAVAILABLE")
        )
    return issues


def check_risk_cap(current: int, generated: int, cap: int, field: str, name: str) -> list[ValidationIssue]:
    """Report a cast that would push an accumulator past its cap."""
    total = current + generated
    if total <= cap:
        return []
    return [
        ValidationIssue(
            field,
            f"Would exceed maximum {name} ({total}/{cap})",
            "RISK_CAP_EXCEEDED",
            {"total": total, "cap": cap},
        )
    ]


__all__ = [
    "RiskPenalties",
    "FeedbackEffects",
    "ConcentrationSave",
    "CastingResult",
    "calculate_scaled_cost",
    "add_capped",
    "calculate_risk_penalties",
    "dissipate_risk",
    "calculate_feedback_threshold",
    "calculate_feedback_level",
    "calculate_feedback_effects",
    "get_feedback_effects",
    "roll_spell_failure",
    "make_concentration_save",
    "check_charge",
    "check_overdrive",
    "check_risk_cap",
]
