"""Pydantic state models for the Hollow Gear engine.

All models are frozen. Mutating operations live in the mechanics,
psionics and spellcasting packages and return new instances.
"""

from __future__ import annotations

from hollow_gear.models.base import EngineModel
from hollow_gear.models.character import AbilityScores, CharacterState
from hollow_gear.models.enums import (
    ChangeType,
    DurationKind,
    EmotionalState,
    FeedbackType,
    FocusBreakCause,
    HarnessCondition,
    HarnessType,
    HeatEffectType,
    HeatSource,
    HeatStressLevel,
    LifeState,
    ResonanceType,
    RestType,
    SignatureIntensity,
)
from hollow_gear.models.heat import (
    HEAT_STRESS_EFFECTS,
    HeatAccumulation,
    HeatStressEffect,
    HeatStressState,
    SteamVentHarness,
)
from hollow_gear.models.pools import DeathSaves, HitPoints, ResourcePool
from hollow_gear.models.psionics import (
    AreaEffect,
    ElapsedTime,
    FeedbackDamage,
    FeedbackEffect,
    FocusBreakRecord,
    MaintainedPower,
    OverloadRecovery,
    PowerDuration,
    PsionicFocusState,
    PsionicOverloadState,
    PsionicPower,
    PsionicSignature,
    PsionicSurgeState,
    SignatureManifestation,
)
from hollow_gear.models.results import ValidationIssue, ValidationResult
from hollow_gear.models.spellcasting import (
    AetherFormula,
    ArcaneCast,
    ArcanistState,
    Miracle,
    TemplarState,
)


__all__ = [
    # Base
    "EngineModel",
    "ValidationIssue",
    "ValidationResult",
    # Enums
    "ChangeType",
    "DurationKind",
    "EmotionalState",
    "FeedbackType",
    "FocusBreakCause",
    "HarnessCondition",
    "HarnessType",
    "HeatEffectType",
    "HeatSource",
    "HeatStressLevel",
    "LifeState",
    "ResonanceType",
    "RestType",
    "SignatureIntensity",
    # Pools
    "ResourcePool",
    "HitPoints",
    "DeathSaves",
    # Heat
    "HEAT_STRESS_EFFECTS",
    "HeatStressEffect",
    "HeatAccumulation",
    "SteamVentHarness",
    "HeatStressState",
    # Psionics
    "PowerDuration",
    "PsionicPower",
    "ElapsedTime",
    "MaintainedPower",
    "FocusBreakRecord",
    "PsionicFocusState",
    "FeedbackDamage",
    "AreaEffect",
    "FeedbackEffect",
    "OverloadRecovery",
    "PsionicOverloadState",
    "PsionicSurgeState",
    "SignatureManifestation",
    "PsionicSignature",
    # Spellcasting
    "AetherFormula",
    "ArcaneCast",
    "ArcanistState",
    "Miracle",
    "TemplarState",
    # Aggregate
    "AbilityScores",
    "CharacterState",
]
