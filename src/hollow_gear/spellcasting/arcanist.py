"""Arcanist spellcasting: Aether Flux, heat and Overclocking.

Arcanists pay AFP for Aether Formulae and build up heat. Overclocking
multiplies the heat of a cast and is limited to ``max(1, level // 4)``
uses per long rest. The Equilibrium Tier caps the spell level. Heat
feedback raises the cost and heat of a cast and can make it fizzle.
"""

from __future__ import annotations

import math
from datetime import datetime

from hollow_gear.core.constants import RECENT_CAST_HISTORY_LIMIT, SHORT_REST_HEAT_REDUCTION
from hollow_gear.core.exceptions import EntityNotFoundError
from hollow_gear.core.logging import get_logger
from hollow_gear.core.types import RandomSource
from hollow_gear.mechanics.resources import create_pool, restore_pool, spend_resources, validate_resource_pool
from hollow_gear.models.enums import RestType
from hollow_gear.models.results import ValidationIssue, ValidationResult
from hollow_gear.models.spellcasting import AetherFormula, ArcaneCast, ArcanistState
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


def calculate_equilibrium_tier(arcanist_level: int) -> int:
    """Highest spell level castable: tier 1 at level 1, +1 every odd level to 9.

    Example:
        >>> calculate_equilibrium_tier(5)
        3
        >>> calculate_equilibrium_tier(20)
        9
    """
    if arcanist_level < 1:
        return 0
    return min(9, (arcanist_level + 1) // 2)


def calculate_max_overclock_uses(arcanist_level: int) -> int:
    """Overclock uses per long rest."""
    return max(1, arcanist_level // 4)


def calculate_overclock_multiplier(arcanist_level: int, intelligence_modifier: int) -> float:
    """Heat multiplier for Overclocking.

    Starts at 2.0, drops 0.1 per two levels and 0.05 per point of
    Intelligence modifier, and never goes below 1.2.
    """
    multiplier = 2.0 - (arcanist_level // 2) * 0.1 - intelligence_modifier * 0.05
    return max(1.2, round(multiplier, 2))


def calculate_afp_cost(formula: AetherFormula, cast_level: int) -> int:
    """AFP cost of casting ``formula`` at ``cast_level``."""
    return calculate_scaled_cost(formula.afp_cost, cast_level, formula.level, formula.afp_scaling)


def calculate_heat_generation(
    formula: AetherFormula,
    cast_level: int,
    overclocked: bool,
    overclock_multiplier: float,
) -> int:
    """Heat from a cast: base plus one per level above base, multiplied when overclocked."""
    heat = formula.base_heat_generation + max(0, cast_level - formula.level)
    if overclocked:
        heat = math.floor(heat * overclock_multiplier)
    return heat


def get_heat_penalties(state: ArcanistState) -> RiskPenalties:
    """Spellcasting penalties from current heat."""
    return calculate_risk_penalties(state.heat_points, state.max_heat_points)


def get_heat_feedback(state: ArcanistState) -> FeedbackEffects:
    """Heat feedback effects from current heat."""
    return get_feedback_effects(state.heat_points, state.max_heat_points)


# =============================================================================
# State
# =============================================================================


def create_arcanist_state(
    arcanist_level: int,
    intelligence_modifier: int,
    *,
    max_heat_points: int = DEFAULT_MAX_HEAT_POINTS,
    known_formulae: tuple[AetherFormula, ...] = (),
    overclock_multiplier: float = 2.0,
) -> ArcanistState:
    """Create a rested Arcanist.

    Args:
        arcanist_level: Arcanist class level.
        intelligence_modifier: Intelligence modifier (adds to AFP).
        max_heat_points: Heat cap.
        known_formulae: Formulae known.
        overclock_multiplier: Heat multiplier for Overclocking. Use
            ``calculate_overclock_multiplier`` for the level-scaled rule.

    Returns:
        A new ArcanistState with full AFP and Overclock uses.
    """
    uses = calculate_max_overclock_uses(arcanist_level)
    return ArcanistState(
        aether_flux_points=create_pool(max(2, arcanist_level + intelligence_modifier)),
        heat_points=0,
        max_heat_points=max_heat_points,
        overclock_uses=uses,
        max_overclock_uses=uses,
        overclock_multiplier=overclock_multiplier,
        equilibrium_tier=calculate_equilibrium_tier(arcanist_level),
        known_formulae=known_formulae,
    )


def find_formula(state: ArcanistState, formula_id: str) -> AetherFormula:
    """Look up a known formula.

    Raises:
        EntityNotFoundError: If the Arcanist does not know the formula.
    """
    for formula in state.known_formulae:
        if formula.id == formula_id:
            return formula
    raise EntityNotFoundError(
        f"Unknown Aether Formula: {formula_id}",
        entity_type="formula",
        entity_id=formula_id,
    )


def can_cast_formula(
    state: ArcanistState,
    formula: AetherFormula,
    cast_level: int,
    overclock: bool = False,
) -> tuple[ValidationIssue, ...]:
    """List every reason the cast would be refused; empty when it is allowed.

    Cost and heat include any increase from current heat feedback.
    """
    effects = get_heat_feedback(state)
    issues: list[ValidationIssue] = []
    if cast_level > state.equilibrium_tier:
        issues.append(
            ValidationIssue(
                "castLevel",
                f"Spell level {cast_level} exceeds Equilibrium Tier {state.equilibrium_tier}",
                "LEVEL_EXCEEDS_TIER",
            )
        )
    issues.extend(
        check_charge(
            state.aether_flux_points,
            calculate_afp_cost(formula, cast_level) + effects.resource_cost_increase,
            "aetherFluxPoints",
            "AFP",
        )
    )
    issues.extend(
        check_overdrive(overclock, formula.can_overclock, state.overclock_uses, "overclock", "Overclock")
    )
    heat = (
        calculate_heat_generation(formula, cast_level, overclock, state.overclock_multiplier)
        + effects.heat_generation_increase
    )
    issues.extend(
        check_risk_cap(state.heat_points, heat, state.max_heat_points, "heatPoints", "heat points")
    )
    return tuple(issues)


def cast_formula(
    state: ArcanistState,
    formula_id: str,
    cast_level: int,
    *,
    overclock: bool = False,
    at: datetime | None = None,
    random_source: RandomSource | None = None,
) -> CastingResult[ArcanistState]:
    """Cast a known formula.

    Args:
        state: Current Arcanist state.
        formula_id: Id of a known formula.
        cast_level: Spell level to cast at.
        overclock: Spend an Overclock use.
        at: Time of the cast, kept in history.
        random_source: Draw for the feedback failure chance. Only needed
            while heat feedback is extreme.

    Returns:
        CastingResult. A refused cast returns the unchanged state and
        every violated precondition. A cast that fizzles to feedback is
        paid for, heat included, but is not kept in history.

    Raises:
        EntityNotFoundError: If the formula is not known.
        DiceRollError: If the cast can fail and no random source is given.
    """
    formula = find_formula(state, formula_id)
    errors = can_cast_formula(state, formula, cast_level, overclock)
    if errors:
        logger.debug("Formula refused", formula_id=formula_id, codes=[e.code for e in errors])
        return CastingResult(success=False, state=state, errors=errors)

    effects = get_heat_feedback(state)
    cost = calculate_afp_cost(formula, cast_level) + effects.resource_cost_increase
    heat = (
        calculate_heat_generation(formula, cast_level, overclock, state.overclock_multiplier)
        + effects.heat_generation_increase
    )
    spent = state.evolve(
        aether_flux_points=spend_resources(state.aether_flux_points, cost),
        heat_points=add_capped(state.heat_points, heat, state.max_heat_points),
        overclock_uses=state.overclock_uses - 1 if overclock else state.overclock_uses,
    )
    if roll_spell_failure(effects, random_source):
        logger.warning("Formula fizzled", formula_id=formula.id, feedback_level=effects.level)
        return CastingResult(
            success=False,
            state=spent,
            cost=cost,
            risk_generated=heat,
            heat_generated=heat,
            overdrive_used=overclock,
            fizzled=True,
            casting_time_increase=effects.casting_time_increase,
            errors=(
                ValidationIssue("heatPoints", "The formula fizzled from heat feedback", "SPELL_FAILED"),
            ),
        )

    record = ArcaneCast(
        formula_id=formula.id,
        cast_level=cast_level,
        overclocked=overclock,
        afp_cost=cost,
        heat_generated=heat,
        at=at,
    )
    new_state = spent.evolve(recent_casts=(*state.recent_casts, record)[-RECENT_CAST_HISTORY_LIMIT:])
    logger.info(
        "Formula cast",
        formula_id=formula.id,
        cast_level=cast_level,
        afp_cost=cost,
        heat=heat,
        overclocked=overclock,
    )
    return CastingResult(
        success=True,
        state=new_state,
        cost=cost,
        risk_generated=heat,
        heat_generated=heat,
        overdrive_used=overclock,
        derived_bonus=state.equilibrium_tier,
        casting_time_increase=effects.casting_time_increase,
    )


def restore_overclock_uses(state: ArcanistState) -> ArcanistState:
    """Refill Overclock uses."""
    return state.evolve(overclock_uses=state.max_overclock_uses)


def rest(state: ArcanistState, rest_type: RestType) -> ArcanistState:
    """Refill AFP and shed heat; a long rest also restores Overclock uses."""
    rested = state.evolve(
        aether_flux_points=restore_pool(
            state.aether_flux_points, clear_temporary=rest_type == RestType.LONG
        ),
        heat_points=dissipate_risk(state.heat_points, rest_type, SHORT_REST_HEAT_REDUCTION),
    )
    if rest_type == RestType.LONG:
        rested = restore_overclock_uses(rested)
    return rested


# =============================================================================
# Validation
# =============================================================================


def validate_arcanist_state(state: ArcanistState) -> ValidationResult[ArcanistState]:
    """Validate an Arcanist, reporting every violation."""
    issues: list[ValidationIssue] = list(
        validate_resource_pool(state.aether_flux_points, "aetherFluxPoints").errors
    )

    if not 0 <= state.equilibrium_tier <= 9:
        issues.append(
            ValidationIssue(
                "equilibriumTier",
                "Equilibrium Tier must be an integer between 0 and 9",
                "INVALID_EQUILIBRIUM_TIER",
            )
        )
    if state.overclock_uses < 0:
        issues.append(
            ValidationIssue(
                "overclockUses",
                "Overclock uses must be a non-negative integer",
                "INVALID_OVERCLOCK_USES",
            )
        )
    if state.max_overclock_uses < 0:
        issues.append(
            ValidationIssue(
                "maxOverclockUses",
                "Max overclock uses must be a non-negative integer",
                "INVALID_MAX_OVERCLOCK_USES",
            )
        )
    if state.overclock_uses > state.max_overclock_uses:
        issues.append(
            ValidationIssue(
                "overclockUses",
                "Current overclock uses cannot exceed maximum",
                "OVERCLOCK_USES_EXCEEDS_MAX",
            )
        )
    if state.overclock_multiplier < 1.0:
        issues.append(
            ValidationIssue(
                "overclockMultiplier",
                "Overclock multiplier must be a number >= 1.0",
                "INVALID_OVERCLOCK_MULTIPLIER",
            )
        )
    if state.heat_points < 0:
        issues.append(
            ValidationIssue("heatPoints", "Heat points cannot be negative", "INVALID_HEAT_POINTS")
        )
    if state.heat_points > state.max_heat_points:
        issues.append(
            ValidationIssue(
                "heatPoints",
                "Heat points cannot exceed maximum",
                "HEAT_EXCEEDS_MAX",
                {"heat": state.heat_points, "max": state.max_heat_points},
            )
        )
    for index, formula in enumerate(state.known_formulae):
        if formula.afp_cost < 0 or formula.afp_scaling < 0:
            issues.append(
                ValidationIssue(
                    f"knownFormulae[{index}].afpCost",
                    "Formula AFP cost must be non-negative",
                    "INVALID_FORMULA_COST",
                )
            )

    return ValidationResult.from_issues(state, issues)


__all__ = [
    "DEFAULT_MAX_HEAT_POINTS",
    "calculate_equilibrium_tier",
    "calculate_max_overclock_uses",
    "calculate_overclock_multiplier",
    "calculate_afp_cost",
    "calculate_heat_generation",
    "get_heat_penalties",
    "get_heat_feedback",
    "create_arcanist_state",
    "find_formula",
    "can_cast_formula",
    "cast_formula",
    "restore_overclock_uses",
    "rest",
    "validate_arcanist_state",
]
