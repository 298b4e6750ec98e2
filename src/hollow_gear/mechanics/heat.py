"""Heat stress and steam mitigation.

Heat points accumulate from casting, overload, powered equipment and
the environment. Fixed thresholds map points to a level 0-3, and each
level carries an explicit effect set. Heat is shed with a steam vent
harness (which can malfunction), coolant flasks and rest.

Example:
    >>> state = HeatStressState()
    >>> state = add_heat_points(state, HeatSource.SPELLCASTING, 6, "Overclocked bolt")
    >>> state.current_level
    <HeatStressLevel.WARM: 1>
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from hollow_gear.core.constants import (
    COOLANT_FLASK_HEAT_REDUCTION,
    HEAT_HISTORY_LIMIT,
    HEAT_LEVEL_THRESHOLDS,
    SHORT_REST_HEAT_REDUCTION,
)
from hollow_gear.core.logging import get_logger
from hollow_gear.core.types import RandomSource
from hollow_gear.models.enums import (
    HarnessCondition,
    HarnessType,
    HeatSource,
    HeatStressLevel,
    RestType,
)
from hollow_gear.models.heat import (
    HEAT_STRESS_EFFECTS,
    HeatAccumulation,
    HeatStressEffect,
    HeatStressState,
    SteamVentHarness,
)
from hollow_gear.models.results import ValidationIssue, ValidationResult


logger = get_logger(__name__)


@dataclass(frozen=True)
class HarnessSpec:
    """Factory values for a harness grade."""

    max_charges: int
    heat_reduction_per_use: int
    malfunction_risk_percent: float


HARNESS_SPECS: dict[HarnessType, HarnessSpec] = {
    HarnessType.BASIC: HarnessSpec(3, 3, 15),
    HarnessType.IMPROVED: HarnessSpec(4, 4, 10),
    HarnessType.SUPERIOR: HarnessSpec(5, 5, 5),
    HarnessType.MASTERWORK: HarnessSpec(6, 6, 2),
}


@dataclass(frozen=True)
class SteamVentResult:
    """Outcome of venting steam.

    Attributes:
        success: Whether heat was actually reduced.
        heat_reduced: Heat points actually removed. Venting more than the
            current heat reports only the heat that was there, not
            ``heat_reduction_per_use * charges``.
        charges_used: Harness charges consumed.
        malfunction_occurred: Whether the harness malfunctioned.
        message: Short description for the caller.
    """

    success: bool
    heat_reduced: int
    charges_used: int
    malfunction_occurred: bool
    message: str


# =============================================================================
# Levels & Effects
# =============================================================================


def calculate_heat_stress_level(heat_points: int) -> HeatStressLevel:
    """Map heat points onto a heat-stress level.

    Example:
        >>> calculate_heat_stress_level(4)
        <HeatStressLevel.NORMAL: 0>
        >>> calculate_heat_stress_level(15)
        <HeatStressLevel.OVERHEATED: 3>
    """
    level = HeatStressLevel.NORMAL
    for candidate, threshold in zip(HeatStressLevel, HEAT_LEVEL_THRESHOLDS):
        if heat_points >= threshold:
            level = candidate
    return level


def get_heat_stress_effects(level: HeatStressLevel | int) -> tuple[HeatStressEffect, ...]:
    """Get the explicit effect set for a level."""
    return HEAT_STRESS_EFFECTS[HeatStressLevel(level)]


def create_heat_stress_state(coolant_flasks: int = 0) -> HeatStressState:
    """Create a cool heat-stress state with no harness."""
    return HeatStressState(coolant_flasks=coolant_flasks)


def _with_heat(state: HeatStressState, heat_points: int) -> HeatStressState:
    heat_points = max(0, heat_points)
    new_level = calculate_heat_stress_level(heat_points)
    if new_level != state.current_level:
        logger.info(
            "Heat stress level changed",
            previous=int(state.current_level),
            current=int(new_level),
            heat_points=heat_points,
        )
    return state.evolve(current_heat_points=heat_points, current_level=new_level)


# =============================================================================
# Accumulation
# =============================================================================


def add_heat_points(
    state: HeatStressState,
    source: HeatSource,
    amount: int,
    description: str = "",
    *,
    at: datetime | None = None,
) -> HeatStressState:
    """Add (or, with a negative amount, remove) heat.

    The event is prepended to the history, which keeps only the ten most
    recent entries.

    Args:
        state: Current heat state.
        source: Where the heat came from.
        amount: Heat points; negative to cool.
        description: Free-text note for the history.
        at: Caller-supplied event time.

    Returns:
        A new state with heat clamped at 0 and the level recomputed.
    """
    event = HeatAccumulation(source=source, amount=amount, timestamp=at, description=description)
    history = (event, *state.recent_accumulation)[:HEAT_HISTORY_LIMIT]
    updated = _with_heat(state, state.current_heat_points + amount)
    return updated.evolve(recent_accumulation=history)


def reduce_heat(state: HeatStressState, amount: int) -> HeatStressState:
    """Remove heat without recording a history event."""
    return _with_heat(state, state.current_heat_points - max(0, amount))


# =============================================================================
# Steam Vent Harness
# =============================================================================


def create_steam_vent_harness(harness_type: HarnessType = HarnessType.BASIC) -> SteamVentHarness:
    """Build a fully charged, pristine harness of the given grade."""
    spec = HARNESS_SPECS[harness_type]
    return SteamVentHarness(
        type=harness_type,
        charges=spec.max_charges,
        max_charges=spec.max_charges,
        heat_reduction_per_use=spec.heat_reduction_per_use,
        malfunction_risk_percent=spec.malfunction_risk_percent,
        condition=HarnessCondition.PRISTINE,
    )


def equip_harness(state: HeatStressState, harness: SteamVentHarness | None) -> HeatStressState:
    """Equip a harness, or remove it with ``None``."""
    return state.evolve(vent_harness=harness)


def recharge_harness(state: HeatStressState) -> HeatStressState:
    """Refill the equipped harness to its maximum charges."""
    harness = state.vent_harness
    if harness is None:
        return state
    return state.evolve(vent_harness=harness.evolve(charges=harness.max_charges))


def use_steam_vent(
    state: HeatStressState,
    charges: int = 1,
    *,
    random_source: RandomSource,
) -> tuple[HeatStressState, SteamVentResult]:
    """Vent steam to shed heat.

    Fails without consuming anything if no harness is equipped or it
    lacks the requested charges. Otherwise the charges are consumed and
    one draw decides whether the harness malfunctions. A malfunction
    sheds no heat and wears the harness one condition step.

    Args:
        state: Current heat state.
        charges: Charges to spend.
        random_source: Draw in [0, 1) compared against the malfunction risk.

    Returns:
        Tuple of the new state and a SteamVentResult.
    """
    harness = state.vent_harness
    if harness is None:
        return state, SteamVentResult(False, 0, 0, False, "No steam vent harness equipped")
    if charges <= 0 or harness.charges < charges:
        return state, SteamVentResult(
            False,
            0,
            0,
            False,
            f"Insufficient charges: need {charges}, have {harness.charges}",
        )

    remaining = harness.charges - charges
    if random_source() * 100 < harness.malfunction_risk_percent:
        worn = harness.evolve(charges=remaining, condition=harness.condition.degraded())
        logger.warning(
            "Steam vent malfunction",
            harness=harness.type,
            condition=worn.condition,
            charges_used=charges,
        )
        return state.evolve(vent_harness=worn), SteamVentResult(
            False, 0, charges, True, "Steam vent malfunctioned"
        )

    reduction = harness.heat_reduction_per_use * charges
    before = state.current_heat_points
    updated = reduce_heat(state.evolve(vent_harness=harness.evolve(charges=remaining)), reduction)
    heat_reduced = before - updated.current_heat_points
    logger.debug("Steam vented", heat_reduced=heat_reduced, charges_left=remaining)
    return updated, SteamVentResult(
        True, heat_reduced, charges, False, f"Vented {heat_reduced} heat"
    )


def use_coolant_flask(state: HeatStressState) -> HeatStressState:
    """Drink a coolant flask, removing 2 heat. No-op without flasks."""
    if state.coolant_flasks <= 0:
        return state
    cooled = reduce_heat(state, COOLANT_FLASK_HEAT_REDUCTION)
    return cooled.evolve(coolant_flasks=state.coolant_flasks - 1)


def rest(state: HeatStressState, rest_type: RestType) -> HeatStressState:
    """Dissipate heat and recharge the harness over a rest.

    A short rest sheds 2 heat; a long rest clears all heat.
    """
    if rest_type == RestType.LONG:
        cooled = _with_heat(state, 0)
    else:
        cooled = reduce_heat(state, SHORT_REST_HEAT_REDUCTION)
    return recharge_harness(cooled)


# =============================================================================
# Validation
# =============================================================================


def validate_heat_stress(state: HeatStressState) -> ValidationResult[HeatStressState]:
    """Validate heat points, derived level, history bound and harness."""
    issues: list[ValidationIssue] = []
    if state.current_heat_points < 0:
        issues.append(
            ValidationIssue(
                "currentHeatPoints",
                "Heat points cannot be negative",
                "INVALID_HEAT_POINTS",
            )
        )
    elif state.current_level != calculate_heat_stress_level(state.current_heat_points):
        issues.append(
            ValidationIssue(
                "currentLevel",
                "Heat stress level does not match heat points",
                "HEAT_LEVEL_MISMATCH",
                {
                    "level": int(state.current_level),
                    "expected": int(calculate_heat_stress_level(state.current_heat_points)),
                },
            )
        )
    if len(state.recent_accumulation) > HEAT_HISTORY_LIMIT:
        issues.append(
            ValidationIssue(
                "recentAccumulation",
                f"At most {HEAT_HISTORY_LIMIT} heat events are kept",
                "HEAT_HISTORY_TOO_LONG",
            )
        )
    if state.coolant_flasks < 0:
        issues.append(
            ValidationIssue("coolantFlasks", "Coolant flasks cannot be negative", "INVALID_COOLANT")
        )

    harness = state.vent_harness
    if harness is not None:
        if not 0 <= harness.charges <= harness.max_charges:
            issues.append(
                ValidationIssue(
                    "ventHarness.charges",
                    "Harness charges must be between 0 and max charges",
                    "INVALID_HARNESS_CHARGES",
                )
            )
        if not 0 <= harness.malfunction_risk_percent <= 100:
            issues.append(
                ValidationIssue(
                    "ventHarness.malfunctionRiskPercent",
                    "Malfunction risk must be a percentage",
                    "INVALID_MALFUNCTION_RISK",
                )
            )

    return ValidationResult.from_issues(state, issues)


__all__ = [
    "HARNESS_SPECS",
    "HarnessSpec",
    "SteamVentResult",
    "calculate_heat_stress_level",
    "get_heat_stress_effects",
    "create_heat_stress_state",
    "add_heat_points",
    "reduce_heat",
    "create_steam_vent_harness",
    "equip_harness",
    "recharge_harness",
    "use_steam_vent",
    "use_coolant_flask",
    "rest",
    "validate_heat_stress",
]
