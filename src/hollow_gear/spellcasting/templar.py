"""Templar spellcasting: Resonance Charges, faith feedback and Overchanneling.

Templars pay RC for Miracles and accumulate faith feedback, which also
heats their channeling gear. Casting the same resonance type in a row
builds harmony, which in turn strengthens later miracles.
"""

from __future__ import annotations

from collections.abc import Sequence

from hollow_gear.core.constants import (
    BASE_FAITH_FEEDBACK,
    HARMONY_FAILURE_PENALTY,
    MAX_RESONANCE_HARMONY,
    RECENT_CAST_HISTORY_LIMIT,
    SHORT_REST_HEAT_REDUCTION,
)
from hollow_gear.core.exceptions import EntityNotFoundError
from hollow_gear.core.logging import get_logger
from hollow_gear.core.types import RandomSource
from hollow_gear.mechanics.resources import create_pool, restore_pool, spend_resources, validate_resource_pool
from hollow_gear.models.enums import ResonanceType, RestType
from hollow_gear.models.results import ValidationIssue, ValidationResult
from hollow_gear.models.spellcasting import Miracle, TemplarState
from hollow_gear.spellcasting.shared import (
    CastingResult,
    FeedbackEffects,
    RiskPenalties,
    add_capped,
    calculate_risk_penalties,
    calculate_scaled_cost,
    check_charge,
    check_overdrive,
    check_risk_cap,
    dissipate_risk,
    get_feedback_effects,
    roll_spell_failure,
)


logger = get_logger(__name__)

DEFAULT_MAX_HEAT_POINTS = 10


# =============================================================================
# Calculators
# =============================================================================


def calculate_max_overchannel_uses(templar_level: int) -> int:
    """Overchannel uses per long rest."""
    return max(1, templar_level // 3)


def calculate_max_faith_feedback(templar_level: int, wisdom_modifier: int) -> int:
    """Faith feedback cap: ``10 + level + WIS modifier``."""
    return BASE_FAITH_FEEDBACK + templar_level + wisdom_modifier


def calculate_rc_cost(miracle: Miracle, cast_level: int) -> int:
    """RC cost of casting ``miracle`` at ``cast_level``."""
    return calculate_scaled_cost(miracle.rc_cost, cast_level, miracle.level, miracle.rc_scaling)


def calculate_faith_feedback(miracle: Miracle, cast_level: int, overchanneled: bool) -> int:
    """Faith feedback from a cast, doubled when overchanneled."""
    feedback = miracle.base_faith_feedback + max(0, cast_level - miracle.level)
    return feedback * 2 if overchanneled else feedback


def calculate_channel_heat(faith_feedback: int) -> int:
    """Heat from channeling: half the feedback, at least 1."""
    return max(1, faith_feedback // 2)


def _trailing_run(resonance: ResonanceType, recent: Sequence[ResonanceType]) -> int:
    run = 0
    for previous in reversed(recent):
        if previous != resonance:
            break
        run += 1
    return run


def calculate_harmony_bonus(
    harmony: int,
    resonance: ResonanceType,
    recent: Sequence[ResonanceType],
) -> int:
    """Bonus from harmony: up to 3 for matching recent casts, plus ``harmony // 5``.

    Example:
        >>> calculate_harmony_bonus(10, ResonanceType.DIVINE, [ResonanceType.DIVINE])
        3
    """
    same = sum(1 for previous in recent if previous == resonance)
    return min(3, same) + harmony // 5


def update_resonance_harmony(
    harmony: int,
    resonance: ResonanceType,
    recent: Sequence[ResonanceType],
    successful: bool,
) -> int:
    """New harmony after a cast attempt.

    A successful cast extends the run of its resonance type; the gain is
    the run length including this cast, at most 2. A failure costs 2.

    Args:
        harmony: Current harmony.
        resonance: Resonance type of the cast.
        recent: Resonance types of earlier casts, newest last.
        successful: Whether the cast went off.

    Returns:
        Harmony clamped to 0-20.
    """
    if not successful:
        return max(0, harmony - HARMONY_FAILURE_PENALTY)
    gain = min(2, _trailing_run(resonance, recent) + 1)
    return min(MAX_RESONANCE_HARMONY, harmony + gain)


def get_feedback_penalties(state: TemplarState) -> RiskPenalties:
    """Spellcasting penalties from current faith feedback."""
    return calculate_risk_penalties(state.faith_feedback, state.max_faith_feedback)


def get_heat_feedback(state: TemplarState) -> FeedbackEffects:
    """Heat feedback effects from the heat of channeling."""
    return get_feedback_effects(state.heat_points, state.max_heat_points)


# =============================================================================
# State
# =============================================================================


def create_templar_state(
    templar_level: int,
    wisdom_modifier: int,
    *,
    max_heat_points: int = DEFAULT_MAX_HEAT_POINTS,
    known_miracles: tuple[Miracle, ...] = (),
) -> TemplarState:
    """Create a rested Templar with full RC and Overchannel uses."""
    uses = calculate_max_overchannel_uses(templar_level)
    return TemplarState(
        resonance_charges=create_pool(max(2, templar_level + wisdom_modifier)),
        faith_feedback=0,
        max_faith_feedback=calculate_max_faith_feedback(templar_level, wisdom_modifier),
        overchannel_uses=uses,
        max_overchannel_uses=uses,
        max_heat_points=max_heat_points,
        known_miracles=known_miracles,
    )


def find_miracle(state: TemplarState, miracle_id: str) -> Miracle:
    """Look up a known miracle.

    Raises:
        EntityNotFoundError: If the Templar does not know the miracle.
    """
    for miracle in state.known_miracles:
        if miracle.id == miracle_id:
            return miracle
    raise EntityNotFoundError(
        f"Unknown Miracle: {miracle_id}",
        entity_type="miracle",
        entity_id=miracle_id,
    )


def can_cast_miracle(
    state: TemplarState,
    miracle: Miracle,
    cast_level: int,
    overchannel: bool = False,
) -> tuple[ValidationIssue, ...]:
    """List every reason the cast would be refused; empty when it is allowed.

    The RC cost includes any increase from current heat feedback.
    """
    effects = get_heat_feedback(state)
    issues: list[ValidationIssue] = []
    issues.extend(
        check_charge(
            state.resonance_charges,
            calculate_rc_cost(miracle, cast_level) + effects.resource_cost_increase,
            "resonanceCharges",
            "Resonance Charges",
        )
    )
    issues.extend(
        check_overdrive(
            overchannel, miracle.can_overchannel, state.overchannel_uses, "overchannel", "Overchannel"
        )
    )
    feedback = calculate_faith_feedback(miracle, cast_level, overchannel)
    issues.extend(
        check_risk_cap(
            state.faith_feedback, feedback, state.max_faith_feedback, "faithFeedback", "faith feedback"
        )
    )
    return tuple(issues)


def cast_miracle(
    state: TemplarState,
    miracle_id: str,
    cast_level: int,
    *,
    overchannel: bool = False,
    random_source: RandomSource | None = None,
) -> CastingResult[TemplarState]:
    """Cast a known miracle.

    Args:
        state: Current Templar state.
        miracle_id: Id of a known miracle.
        cast_level: Spell level to cast at.
        overchannel: Spend an Overchannel use to double the effect.
        random_source: Draw for the feedback failure chance. Only needed
            while heat feedback is extreme.

    Returns:
        CastingResult. A refused cast costs nothing but harmony, which
        drops by 2 in the returned state. A miracle that fizzles to heat
        feedback is paid for, feedback and heat included, and also
        loses harmony.

    Raises:
        EntityNotFoundError: If the miracle is not known.
        DiceRollError: If the cast can fail and no random source is given.
    """
    miracle = find_miracle(state, miracle_id)
    resonance = miracle.resonance_type
    errors = can_cast_miracle(state, miracle, cast_level, overchannel)
    if errors:
        logger.debug("Miracle refused", miracle_id=miracle_id, codes=[e.code for e in errors])
        failed_state = state.evolve(
            resonance_harmony=update_resonance_harmony(
                state.resonance_harmony, resonance, state.recent_resonances, successful=False
            )
        )
        return CastingResult(success=False, state=failed_state, errors=errors)

    effects = get_heat_feedback(state)
    cost = calculate_rc_cost(miracle, cast_level) + effects.resource_cost_increase
    feedback = calculate_faith_feedback(miracle, cast_level, overchannel)
    heat = calculate_channel_heat(feedback) + effects.heat_generation_increase
    spent = state.evolve(
        resonance_charges=spend_resources(state.resonance_charges, cost),
        faith_feedback=add_capped(state.faith_feedback, feedback, state.max_faith_feedback),
        heat_points=add_capped(state.heat_points, heat, state.max_heat_points),
        overchannel_uses=state.overchannel_uses - 1 if overchannel else state.overchannel_uses,
    )
    if roll_spell_failure(effects, random_source):
        logger.warning("Miracle fizzled", miracle_id=miracle.id, feedback_level=effects.level)
        return CastingResult(
            success=False,
            state=spent.evolve(
                resonance_harmony=update_resonance_harmony(
                    state.resonance_harmony, resonance, state.recent_resonances, successful=False
                )
            ),
            cost=cost,
            risk_generated=feedback,
            heat_generated=heat,
            overdrive_used=overchannel,
            fizzled=True,
            casting_time_increase=effects.casting_time_increase,
            errors=(
                ValidationIssue("heatPoints", "The miracle fizzled from heat feedback", "SPELL_FAILED"),
            ),
        )

    bonus = calculate_harmony_bonus(state.resonance_harmony, resonance, state.recent_resonances)
    new_state = spent.evolve(
        resonance_harmony=update_resonance_harmony(
            state.resonance_harmony, resonance, state.recent_resonances, successful=True
        ),
        recent_resonances=(*state.recent_resonances, resonance)[-RECENT_CAST_HISTORY_LIMIT:],
    )
    logger.info(
        "Miracle cast",
        miracle_id=miracle.id,
        cast_level=cast_level,
        rc_cost=cost,
        faith_feedback=feedback,
        harmony=new_state.resonance_harmony,
        overchanneled=overchannel,
    )
    return CastingResult(
        success=True,
        state=new_state,
        cost=cost,
        risk_generated=feedback,
        heat_generated=heat,
        overdrive_used=overchannel,
        derived_bonus=bonus,
        casting_time_increase=effects.casting_time_increase,
    )


def restore_overchannel_uses(state: TemplarState) -> TemplarState:
    """Refill Overchannel uses."""
    return state.evolve(overchannel_uses=state.max_overchannel_uses)


def reduce_faith_feedback(state: TemplarState, amount: int) -> TemplarState:
    """Bleed off faith feedback, never below zero."""
    return state.evolve(faith_feedback=max(0, state.faith_feedback - max(0, amount)))


def rest(state: TemplarState, rest_type: RestType) -> TemplarState:
    """Refill RC, shed feedback and heat; a long rest also restores Overchannel uses."""
    rested = state.evolve(
        resonance_charges=restore_pool(
            state.resonance_charges, clear_temporary=rest_type == RestType.LONG
        ),
        faith_feedback=dissipate_risk(state.faith_feedback, rest_type),
        heat_points=dissipate_risk(state.heat_points, rest_type, SHORT_REST_HEAT_REDUCTION),
    )
    if rest_type == RestType.LONG:
        rested = restore_overchannel_uses(rested)
    return rested


# =============================================================================
# Validation
# =============================================================================


def validate_templar_state(state: TemplarState) -> ValidationResult[TemplarState]:
    """Validate a Templar, reporting every violation."""
    issues: list[ValidationIssue] = list(
        validate_resource_pool(state.resonance_charges, "resonanceCharges").errors
    )

    if state.faith_feedback < 0:
        issues.append(
            ValidationIssue(
                "faithFeedback", "Faith feedback cannot be negative", "INVALID_FAITH_FEEDBACK"
            )
        )
    if state.max_faith_feedback < 0:
        issues.append(
            ValidationIssue(
                "maxFaithFeedback",
                "Max faith feedback cannot be negative",
                "INVALID_MAX_FAITH_FEEDBACK",
            )
        )
    if state.faith_feedback > state.max_faith_feedback:
        issues.append(
            ValidationIssue(
                "faithFeedback",
                "Faith feedback cannot exceed maximum",
                "FAITH_FEEDBACK_EXCEEDS_MAX",
                {"feedback": state.faith_feedback, "max": state.max_faith_feedback},
            )
        )
    if state.overchannel_uses < 0:
        issues.append(
            ValidationIssue(
                "overchannelUses",
                "Overchannel uses must be a non-negative integer",
                "INVALID_OVERCHANNEL_USES",
            )
        )
    if state.max_overchannel_uses < 0:
        issues.append(
            ValidationIssue(
                "maxOverchannelUses",
                "Max overchannel uses must be a non-negative integer",
                "INVALID_MAX_OVERCHANNEL_USES",
            )
        )
    if state.overchannel_uses > state.max_overchannel_uses:
        issues.append(
            ValidationIssue(
                "overchannelUses",
                "Current overchannel uses cannot exceed maximum",
                "OVERCHANNEL_USES_EXCEEDS_MAX",
            )
        )
    if not 0 <= state.resonance_harmony <= MAX_RESONANCE_HARMONY:
        issues.append(
            ValidationIssue(
                "resonanceHarmony",
                f"Resonance harmony must be between 0 and {MAX_RESONANCE_HARMONY}",
                "INVALID_RESONANCE_HARMONY",
            )
        )
    if state.heat_points < 0:
        issues.append(
            ValidationIssue("heatPoints", "Heat points cannot be negative", "INVALID_HEAT_POINTS")
        )
    if state.heat_points > state.max_heat_points:
        issues.append(
            ValidationIssue("heatPoints", "Heat points cannot exceed maximum", "HEAT_EXCEEDS_MAX")
        )
    if len(state.recent_resonances) > RECENT_CAST_HISTORY_LIMIT:
        issues.append(
            ValidationIssue(
                "recentResonances",
                f"At most {RECENT_CAST_HISTORY_LIMIT} recent resonances are kept",
                "RESONANCE_HISTORY_TOO_LONG",
            )
        )

    return ValidationResult.from_issues(state, issues)


__all__ = [
    "DEFAULT_MAX_HEAT_POINTS",
    "calculate_max_overchannel_uses",
    "calculate_max_faith_feedback",
    "calculate_rc_cost",
    "calculate_faith_feedback",
    "calculate_channel_heat",
    "calculate_harmony_bonus",
    "update_resonance_harmony",
    "get_feedback_penalties",
    "get_heat_feedback",
    "create_templar_state",
    "find_miracle",
    "can_cast_miracle",
    "cast_miracle",
    "restore_overchannel_uses",
    "reduce_faith_feedback",
    "rest",
    "validate_templar_state",
]
