"""Psionic overload, feedback accumulation and the psionic surge.

Overloading starts a recovery timer of ten minutes per excess AFP.
Feedback effects rolled on the d6 table accumulate: sparks and flares
stack as separate instances, every other type replaces its predecessor.
Time is always supplied by the caller.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta

from hollow_gear.core.constants import FEEDBACK_EXPIRY_MINUTES, OVERLOAD_MINUTES_PER_EXCESS_AFP
from hollow_gear.core.exceptions import InvalidGameStateError
from hollow_gear.core.logging import get_logger
from hollow_gear.models.enums import FeedbackType, RestType
from hollow_gear.models.psionics import (
    FeedbackEffect,
    OverloadRecovery,
    PsionicOverloadState,
    PsionicSurgeState,
)
from hollow_gear.psionics.flux import check_overload_risk


logger = get_logger(__name__)

STACKABLE_FEEDBACK_TYPES = frozenset({FeedbackType.NEURAL_SPARK, FeedbackType.AETHER_FLARE})
PERSISTENT_FEEDBACK_TYPES = frozenset({FeedbackType.MINDFRACTURE})


@dataclass(frozen=True)
class RecoveryCheck:
    """Whether an overload recovery timer has run out."""

    is_complete: bool
    recovery: OverloadRecovery


# =============================================================================
# Overload Recovery
# =============================================================================


def create_overload_state() -> PsionicOverloadState:
    """Create a calm overload state."""
    return PsionicOverloadState()


def calculate_overload_recovery(excess_afp: int, *, start_time: datetime) -> OverloadRecovery:
    """Start an overload recovery timer.

    Args:
        excess_afp: AFP spent above the safe limit.
        start_time: When the overload happened.

    Returns:
        Recovery lasting ``excess_afp * 10`` minutes with penalties active.

    Example:
        >>> recovery = calculate_overload_recovery(3, start_time=now)
        >>> recovery.recovery_duration
        30
    """
    duration = max(0, excess_afp) * OVERLOAD_MINUTES_PER_EXCESS_AFP
    return OverloadRecovery(
        is_recovering=True,
        recovery_start_time=start_time,
        recovery_duration=duration,
        penalties_active=True,
        next_afp_recovery_time=start_time + timedelta(minutes=duration),
    )


def check_overload_recovery(recovery: OverloadRecovery, now: datetime) -> RecoveryCheck:
    """Check whether recovery has finished at ``now``.

    Args:
        recovery: Running recovery timer.
        now: Current game time.

    Returns:
        RecoveryCheck. Once complete, the returned recovery has
        ``is_recovering`` and ``penalties_active`` cleared.
    """
    elapsed = now - recovery.recovery_start_time
    if elapsed >= timedelta(minutes=recovery.recovery_duration):
        return RecoveryCheck(
            is_complete=True,
            recovery=recovery.evolve(is_recovering=False, penalties_active=False),
        )
    return RecoveryCheck(is_complete=False, recovery=recovery)


def enter_overload(
    state: PsionicOverloadState,
    afp_spent: int,
    character_level: int,
    *,
    at: datetime,
) -> PsionicOverloadState:
    """Record a manifestation and start recovery if it overloaded.

    Args:
        state: Current overload state.
        afp_spent: AFP committed to the manifestation.
        character_level: Character level (the safe limit).
        at: Time of the manifestation.

    Returns:
        The state unchanged if within the safe limit, else an overloaded
        state with a running recovery timer. Accumulated feedback is kept.
    """
    risk = check_overload_risk(afp_spent, character_level, at=at)
    if not risk.is_overloaded:
        return state
    logger.warning(
        "Psionic overload",
        excess_afp=risk.excess_afp,
        save_dc=risk.save_dc,
    )
    return risk.evolve(
        recovery=calculate_overload_recovery(risk.excess_afp, start_time=at),
        accumulated_feedback=state.accumulated_feedback,
    )


def update_overload_state(state: PsionicOverloadState, now: datetime) -> PsionicOverloadState:
    """Advance the recovery timer, clearing the overload once it completes.

    Completion resets the excess AFP and save DC; the finished recovery
    record and accumulated feedback are kept.
    """
    if state.recovery is None or not state.recovery.is_recovering:
        return state
    check = check_overload_recovery(state.recovery, now)
    if not check.is_complete:
        return state
    logger.info("Overload recovery complete")
    return state.evolve(
        is_overloaded=False,
        excess_afp=0,
        save_dc=0,
        feedback_risk=False,
        recovery=check.recovery,
    )


# =============================================================================
# Feedback
# =============================================================================


def accumulate_feedback_effects(
    effects: Sequence[FeedbackEffect],
    new_effect: FeedbackEffect,
) -> tuple[FeedbackEffect, ...]:
    """Add a feedback effect, stacking or replacing by type."""
    if new_effect.type in STACKABLE_FEEDBACK_TYPES:
        return (*effects, new_effect)
    kept = tuple(effect for effect in effects if effect.type != new_effect.type)
    return (*kept, new_effect)


def clear_expired_feedback_effects(
    effects: Sequence[FeedbackEffect],
    elapsed_minutes: int,
) -> tuple[FeedbackEffect, ...]:
    """Drop temporary feedback after ten minutes. Mindfracture lasts until rest."""
    return tuple(
        effect
        for effect in effects
        if effect.type in PERSISTENT_FEEDBACK_TYPES or elapsed_minutes < FEEDBACK_EXPIRY_MINUTES
    )


def apply_feedback(state: PsionicOverloadState, effect: FeedbackEffect) -> PsionicOverloadState:
    """Record a rolled feedback effect on the overload state."""
    logger.info("Psionic feedback", feedback=effect.type)
    return state.evolve(
        accumulated_feedback=accumulate_feedback_effects(state.accumulated_feedback, effect),
        feedback_risk=False,
    )


def clear_feedback_on_rest(state: PsionicOverloadState, rest_type: RestType) -> PsionicOverloadState:
    """Clear feedback over a rest; persistent feedback needs a long rest."""
    if rest_type == RestType.LONG:
        return state.evolve(accumulated_feedback=())
    return state.evolve(
        accumulated_feedback=clear_expired_feedback_effects(
            state.accumulated_feedback, FEEDBACK_EXPIRY_MINUTES
        )
    )


# =============================================================================
# Psionic Surge
# =============================================================================


def activate_psionic_surge(surge: PsionicSurgeState, *, at: datetime) -> PsionicSurgeState:
    """Activate the surge: +2 to attacks and DCs, 1d4 backlash at end of turn.

    Raises:
        InvalidGameStateError: If the surge was already used since the last rest.
    """
    if not surge.available:
        raise InvalidGameStateError(
            "Psionic surge is not available until the next rest",
            current_state="spent",
            expected_states=["available"],
        )
    logger.info("Psionic surge activated")
    return PsionicSurgeState(
        available=False,
        last_used=at,
        bonus_active=True,
        free_afp_used=False,
        backlash_pending=True,
        afp_recovery_blocked=True,
    )


def use_surge_free_power(surge: PsionicSurgeState) -> PsionicSurgeState:
    """Spend the free tier 1-2 manifestation granted by an active surge.

    Raises:
        InvalidGameStateError: If no surge is active or the free power was used.
    """
    if not surge.bonus_active or surge.free_afp_used:
        raise InvalidGameStateError("No free surge manifestation available")
    return surge.evolve(free_afp_used=True)


def end_psionic_surge_turn(surge: PsionicSurgeState) -> PsionicSurgeState:
    """End the surge turn; the caller applies the pending backlash damage."""
    return surge.evolve(bonus_active=False, backlash_pending=False)


def restore_psionic_surge(surge: PsionicSurgeState, rest_type: RestType) -> PsionicSurgeState:
    """Any rest restores the surge and lifts the AFP recovery block."""
    return PsionicSurgeState(last_used=surge.last_used)


__all__ = [
    "STACKABLE_FEEDBACK_TYPES",
    "PERSISTENT_FEEDBACK_TYPES",
    "RecoveryCheck",
    "create_overload_state",
    "calculate_overload_recovery",
    "check_overload_recovery",
    "enter_overload",
    "update_overload_state",
    "accumulate_feedback_effects",
    "clear_expired_feedback_effects",
    "apply_feedback",
    "clear_feedback_on_rest",
    "activate_psionic_surge",
    "use_surge_free_power",
    "end_psionic_surge_turn",
    "restore_psionic_surge",
]
