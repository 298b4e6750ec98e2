"""Heat-stress state models.

Heat points accumulate from spellcasting, overload, powered equipment
and the environment. The level (0-3) is derived from fixed thresholds
and each level carries an explicit effect set.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from hollow_gear.core.constants import HEAT_LEVEL_THRESHOLDS, MAX_HEAT_STRESS_LEVEL
from hollow_gear.models.base import EngineModel
from hollow_gear.models.enums import (
    HarnessCondition,
    HarnessType,
    HeatEffectType,
    HeatSource,
    HeatStressLevel,
)


class HeatStressEffect(EngineModel):
    """A single heat-stress penalty.

    Attributes:
        type: Kind of penalty.
        severity: Magnitude (points of Dexterity, feet of speed, or 1 for flags).
        description: Rules text shown to the player.
    """

    type: HeatEffectType
    severity: int
    description: str


HEAT_STRESS_EFFECTS: dict[HeatStressLevel, tuple[HeatStressEffect, ...]] = {
    HeatStressLevel.NORMAL: (),
    HeatStressLevel.WARM: (
        HeatStressEffect(
            type=HeatEffectType.DEXTERITY_PENALTY,
            severity=1,
            description="-1 to Dexterity checks and saves",
        ),
    ),
    HeatStressLevel.HOT: (
        HeatStressEffect(
            type=HeatEffectType.DEXTERITY_PENALTY,
            severity=2,
            description="-2 to Dexterity checks and saves",
        ),
        HeatStressEffect(
            type=HeatEffectType.SPEED_REDUCTION,
            severity=5,
            description="Speed reduced by 5 feet",
        ),
    ),
    HeatStressLevel.OVERHEATED: (
        HeatStressEffect(
            type=HeatEffectType.DEXTERITY_PENALTY,
            severity=3,
            description="-3 to Dexterity checks and saves",
        ),
        HeatStressEffect(
            type=HeatEffectType.SPEED_REDUCTION,
            severity=10,
            description="Speed reduced by 10 feet",
        ),
        HeatStressEffect(
            type=HeatEffectType.DISADVANTAGE,
            severity=1,
            description="Disadvantage on Constitution saving throws",
        ),
        HeatStressEffect(
            type=HeatEffectType.EQUIPMENT_MALFUNCTION,
            severity=1,
            description="Powered equipment may malfunction",
        ),
    ),
}


class HeatAccumulation(EngineModel):
    """One heat event in the recent history.

    Attributes:
        source: What generated (or removed) the heat.
        amount: Heat points added; negative for cooling.
        timestamp: Caller-supplied time of the event.
        description: Free-text note.
    """

    source: HeatSource
    amount: int
    timestamp: datetime | None = None
    description: str = ""


class SteamVentHarness(EngineModel):
    """Steam vent harness used to dump heat.

    Attributes:
        type: Harness grade.
        charges: Vent charges remaining.
        max_charges: Charges restored on recharge.
        heat_reduction_per_use: Heat removed per charge spent.
        malfunction_risk_percent: Chance (0-100) that a vent fails.
        condition: Wear state; degrades on malfunction.
    """

    type: HarnessType = HarnessType.BASIC
    charges: int
    max_charges: int
    heat_reduction_per_use: int
    malfunction_risk_percent: float
    condition: HarnessCondition = HarnessCondition.PRISTINE


class HeatStressState(EngineModel):
    """Heat-stress tracking for a character.

    Attributes:
        current_heat_points: Accumulated heat (never negative).
        current_level: Heat-stress level derived from the points.
        recent_accumulation: Up to ten events, newest first.
        vent_harness: Equipped steam vent harness, if any.
        coolant_flasks: Emergency coolant flasks carried.
    """

    current_heat_points: int = 0
    current_level: HeatStressLevel = HeatStressLevel.NORMAL
    recent_accumulation: tuple[HeatAccumulation, ...] = ()
    vent_harness: SteamVentHarness | None = None
    coolant_flasks: int = 0

    @property
    def effects(self) -> tuple[HeatStressEffect, ...]:
        """Penalties active at the current level."""
        return HEAT_STRESS_EFFECTS[HeatStressLevel(self.current_level)]

    @property
    def next_level_threshold(self) -> int | None:
        """Heat points at which the next level starts, or None at the top."""
        if self.current_level >= MAX_HEAT_STRESS_LEVEL:
            return None
        return HEAT_LEVEL_THRESHOLDS[self.current_level + 1]


__all__ = [
    "HEAT_STRESS_EFFECTS",
    "HeatStressEffect",
    "HeatAccumulation",
    "SteamVentHarness",
    "HeatStressState",
]
