"""Character aggregate owning every engine sub-state.

The aggregate is the unit that is snapshotted, diffed and patched. Each
sub-state belongs to exactly one character.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from hollow_gear.core.constants import CURRENT_SCHEMA_VERSION
from hollow_gear.models.base import EngineModel
from hollow_gear.models.heat import HeatStressState
from hollow_gear.models.pools import DeathSaves, HitPoints, ResourcePool
from hollow_gear.models.psionics import (
    PsionicFocusState,
    PsionicOverloadState,
    PsionicSignature,
    PsionicSurgeState,
)
from hollow_gear.models.spellcasting import ArcanistState, TemplarState


class AbilityScores(EngineModel):
    """The six ability scores."""

    strength: int = 10
    dexterity: int = 10
    constitution: int = 10
    intelligence: int = 10
    wisdom: int = 10
    charisma: int = 10


class CharacterState(EngineModel):
    """Complete rule-governed state of one character.

    Attributes:
        id: Stable character identifier.
        name: Character name.
        level: Character level, 1-20.
        version: Snapshot schema version.
        created: Creation time.
        last_modified: Time of the last recorded change.
        ability_scores: The six ability scores.
        hit_points: Hit point pool.
        death_saves: Death-save counters.
        heat_stress: Heat-stress tracking.
        psionic_flux: Psionic AFP pool, for psionic characters.
        psionic_focus: Maintained powers.
        psionic_overload: Overload status and feedback.
        psionic_surge: Psionic surge availability.
        psionic_signature: Detectable signature, for psionic characters.
        arcanist: Arcanist spellcasting resources.
        templar: Templar spellcasting resources.
    """

    id: str
    name: str
    level: int = 1
    version: str = CURRENT_SCHEMA_VERSION
    created: datetime
    last_modified: datetime
    ability_scores: AbilityScores = Field(default_factory=AbilityScores)
    hit_points: HitPoints
    death_saves: DeathSaves = Field(default_factory=DeathSaves)
    heat_stress: HeatStressState = Field(default_factory=HeatStressState)
    psionic_flux: ResourcePool | None = None
    psionic_focus: PsionicFocusState = Field(default_factory=PsionicFocusState)
    psionic_overload: PsionicOverloadState = Field(default_factory=PsionicOverloadState)
    psionic_surge: PsionicSurgeState = Field(default_factory=PsionicSurgeState)
    psionic_signature: PsionicSignature | None = None
    arcanist: ArcanistState | None = None
    templar: TemplarState | None = None


__all__ = ["AbilityScores", "CharacterState"]
