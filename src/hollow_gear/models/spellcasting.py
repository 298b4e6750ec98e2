"""Spellcasting resource models for Arcanists and Templars.

Both archetypes share one shape: a charge pool, a risk accumulator with
a cap, and a limited-use overdrive restored on a long rest.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from hollow_gear.models.base import EngineModel
from hollow_gear.models.enums import ResonanceType
from hollow_gear.models.pools import ResourcePool


# =============================================================================
# Arcanist
# =============================================================================


class AetherFormula(EngineModel):
    """An Aether Formula known by an Arcanist.

    Attributes:
        id: Formula identifier.
        name: Display name.
        level: Base spell level.
        afp_cost: AFP cost at base level.
        afp_scaling: Additional AFP per level cast above base.
        base_heat_generation: Heat generated at base level.
        can_overclock: Whether the formula accepts Overclocking.
        overclock_effects: Rules text for the overclocked version.
    """

    id: str
    name: str
    level: int
    afp_cost: int
    afp_scaling: int = 1
    base_heat_generation: int = 1
    can_overclock: bool = True
    overclock_effects: str | None = None


class ArcaneCast(EngineModel):
    """A completed Arcanist cast kept in recent history."""

    formula_id: str
    cast_level: int
    overclocked: bool = False
    afp_cost: int = 0
    heat_generated: int = 0
    at: datetime | None = None


class ArcanistState(EngineModel):
    """Arcanist spellcasting resources.

    Attributes:
        aether_flux_points: AFP charge pool.
        heat_points: Accumulated casting heat.
        max_heat_points: Heat cap; casts that would exceed it are refused.
        overclock_uses: Overclock uses remaining.
        max_overclock_uses: Overclock uses restored on a long rest.
        overclock_multiplier: Heat multiplier for overclocked casts.
        equilibrium_tier: Highest spell level castable.
        known_formulae: Formulae the Arcanist knows.
        recent_casts: Most recent casts, newest last.
    """

    aether_flux_points: ResourcePool
    heat_points: int = 0
    max_heat_points: int
    overclock_uses: int
    max_overclock_uses: int
    overclock_multiplier: float = Field(default=2.0)
    equilibrium_tier: int
    known_formulae: tuple[AetherFormula, ...] = ()
    recent_casts: tuple[ArcaneCast, ...] = ()


# =============================================================================
# Templar
# =============================================================================


class Miracle(EngineModel):
    """A Miracle known by a Templar.

    Attributes:
        id: Miracle identifier.
        name: Display name.
        level: Base spell level.
        rc_cost: Resonance Charge cost at base level.
        rc_scaling: Additional RC per level cast above base.
        base_faith_feedback: Faith feedback generated at base level.
        can_overchannel: Whether the miracle accepts Overchanneling.
        resonance_type: Category used for harmony streaks.
    """

    id: str
    name: str
    level: int
    rc_cost: int
    rc_scaling: int = 1
    base_faith_feedback: int = 1
    can_overchannel: bool = True
    resonance_type: ResonanceType = ResonanceType.DIVINE


class TemplarState(EngineModel):
    """Templar spellcasting resources.

    Attributes:
        resonance_charges: RC charge pool.
        faith_feedback: Accumulated faith feedback.
        max_faith_feedback: Feedback cap.
        overchannel_uses: Overchannel uses remaining.
        max_overchannel_uses: Overchannel uses restored on a long rest.
        resonance_harmony: Harmony score, 0-20.
        heat_points: Heat generated by channeling.
        max_heat_points: Heat cap.
        known_miracles: Miracles the Templar knows.
        recent_resonances: Resonance types of recent casts, newest last.
    """

    resonance_charges: ResourcePool
    faith_feedback: int = 0
    max_faith_feedback: int
    overchannel_uses: int
    max_overchannel_uses: int
    resonance_harmony: int = 0
    heat_points: int = 0
    max_heat_points: int
    known_miracles: tuple[Miracle, ...] = ()
    recent_resonances: tuple[ResonanceType, ...] = ()


__all__ = [
    "AetherFormula",
    "ArcaneCast",
    "ArcanistState",
    "Miracle",
    "TemplarState",
]
