"""Psionic state models: focus, overload, feedback, surge and signature."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from hollow_gear.models.base import EngineModel
from hollow_gear.models.enums import (
    DurationKind,
    EmotionalState,
    FeedbackType,
    FocusBreakCause,
    SignatureIntensity,
)


# =============================================================================
# Focus & Concentration
# =============================================================================


class PowerDuration(EngineModel):
    """How long a psionic power lasts.

    Attributes:
        kind: Duration category.
        amount: Count of the time unit for rounds, minutes and hours.
    """

    kind: DurationKind
    amount: int | None = None


class PsionicPower(EngineModel):
    """A psionic power as it is manifested.

    Attributes:
        id: Power identifier.
        name: Display name.
        tier: Power tier, 1-6.
        afp_cost: Base AFP cost.
        duration: Declared duration.
        requires_focus: Whether sustaining it occupies a focus slot.
        requires_concentration: Whether it needs concentration.
    """

    id: str
    name: str = ""
    tier: int = 1
    afp_cost: int = 1
    duration: PowerDuration
    requires_focus: bool = True
    requires_concentration: bool = False


class ElapsedTime(EngineModel):
    """Game time that has passed, per unit."""

    rounds: int = 0
    minutes: int = 0
    hours: int = 0


class MaintainedPower(EngineModel):
    """A power the character is currently sustaining.

    Attributes:
        power_id: Identifier of the power.
        start_time: When the power was manifested.
        duration: Declared duration.
        remaining_duration: Units left for timed durations, else None.
        concentration_required: Whether the power uses concentration.
        focus_required: Whether the power occupies a focus slot.
        amplification_level: AFP spent above the base cost.
        target: Optional target description.
    """

    power_id: str
    start_time: datetime
    duration: PowerDuration
    remaining_duration: int | None = None
    concentration_required: bool = False
    focus_required: bool = True
    amplification_level: int = 0
    target: str | None = None


class FocusBreakRecord(EngineModel):
    """The most recent time maintained powers were dropped."""

    cause: FocusBreakCause
    powers_lost: tuple[str, ...] = ()
    at: datetime | None = None


class PsionicFocusState(EngineModel):
    """Sustained-power bookkeeping.

    Attributes:
        focus_limit: Maximum focus-requiring powers at once.
        maintained_powers: Powers being sustained, in manifestation order.
        concentration_power: Id of the single concentration power, if any.
        last_focus_break: Record of the last dropped power.
    """

    focus_limit: int = 1
    maintained_powers: tuple[MaintainedPower, ...] = ()
    concentration_power: str | None = None
    last_focus_break: FocusBreakRecord | None = None

    @property
    def focus_in_use(self) -> int:
        """Number of maintained powers that occupy a focus slot."""
        return sum(1 for power in self.maintained_powers if power.focus_required)


# =============================================================================
# Overload & Feedback
# =============================================================================


class FeedbackDamage(EngineModel):
    """Damage dealt by a feedback effect."""

    dice: str
    type: str


class AreaEffect(EngineModel):
    """Area around the character affected by feedback."""

    radius: int
    effect: str


class FeedbackEffect(EngineModel):
    """A psionic feedback result from the d6 table.

    Attributes:
        type: Feedback kind; decides stacking and expiry.
        description: Rules text.
        damage: Damage dice, if the effect deals damage.
        conditions: Conditions the effect imposes.
        duration: Free-text duration.
        area_effect: Area the effect covers, if any.
    """

    type: FeedbackType
    description: str
    damage: FeedbackDamage | None = None
    conditions: tuple[str, ...] = ()
    duration: str | None = None
    area_effect: AreaEffect | None = None


class OverloadRecovery(EngineModel):
    """Recovery timer after a psionic overload.

    Attributes:
        is_recovering: Whether the timer is still running.
        recovery_start_time: When recovery began.
        recovery_duration: Length of recovery in minutes.
        penalties_active: Whether overload penalties still apply.
        next_afp_recovery_time: When AFP can be regained again.
    """

    is_recovering: bool = True
    recovery_start_time: datetime
    recovery_duration: int
    penalties_active: bool = True
    next_afp_recovery_time: datetime


class PsionicOverloadState(EngineModel):
    """Current overload status of a psionic character."""

    is_overloaded: bool = False
    excess_afp: int = 0
    save_dc: int = 0
    feedback_risk: bool = False
    last_overload_time: datetime | None = None
    recovery: OverloadRecovery | None = None
    accumulated_feedback: tuple[FeedbackEffect, ...] = ()


class PsionicSurgeState(EngineModel):
    """Once-per-short-rest psionic surge.

    Attributes:
        available: Whether the surge can be activated.
        last_used: When it was last activated.
        bonus_active: +2 to attack rolls and save DCs this turn.
        free_afp_used: Whether the free tier 1-2 power was spent.
        backlash_pending: 1d4 psychic damage due at end of turn.
        afp_recovery_blocked: No AFP recovery until the next rest.
    """

    available: bool = True
    last_used: datetime | None = None
    bonus_active: bool = False
    free_afp_used: bool = False
    backlash_pending: bool = False
    afp_recovery_blocked: bool = False


# =============================================================================
# Signature
# =============================================================================


class SignatureManifestation(EngineModel):
    """Sensory description of a psionic signature."""

    visual: str
    auditory: str
    emotional: str
    intensity: SignatureIntensity


class PsionicSignature(EngineModel):
    """Detectable trace a character leaves when using powers.

    Attributes:
        character_id: Owner of the signature.
        base_emotion: Emotional baseline.
        manifestation: Current sensory description.
        detectability_range: Range in feet at which it can be sensed.
        last_used: When a power was last used.
        power_level: Psionic level; scales intensity and linger time.
        last_power_tier: Tier of the most recent power.
    """

    character_id: str
    base_emotion: EmotionalState
    manifestation: SignatureManifestation
    detectability_range: int = Field(default=30, description="Range in feet")
    last_used: datetime | None = None
    power_level: int = 1
    last_power_tier: int | None = None


__all__ = [
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
]
