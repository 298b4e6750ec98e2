"""Psionic focus and concentration.

A character can sustain a limited number of focus-requiring powers (1,
2 from level 6, 3 from level 10) and at most one concentration power.
Losing a focus power for any reason other than choice deals psychic
backlash.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from hollow_gear.core.constants import BACKLASH_DAMAGE, MIN_CONCENTRATION_DC
from hollow_gear.core.exceptions import InvalidGameStateError
from hollow_gear.core.logging import get_logger
from hollow_gear.models.enums import DurationKind, FocusBreakCause
from hollow_gear.models.psionics import (
    ElapsedTime,
    FocusBreakRecord,
    MaintainedPower,
    PsionicFocusState,
    PsionicPower,
)


logger = get_logger(__name__)


@dataclass(frozen=True)
class MaintainCheck:
    """Whether another power can be sustained, and why not."""

    can_maintain: bool
    reason: str | None = None


@dataclass(frozen=True)
class FocusBreakResult:
    """Outcome of dropping one or more maintained powers.

    Attributes:
        success: False when there was nothing to drop.
        psychic_backlash: Whether backlash damage is due.
        backlash_damage: Dice expression for the backlash, if any.
        powers_dropped: Ids of the dropped powers.
        cause: Why the powers were dropped.
    """

    success: bool
    psychic_backlash: bool
    cause: FocusBreakCause
    powers_dropped: tuple[str, ...] = ()
    backlash_damage: str | None = None


@dataclass(frozen=True)
class FocusUsage:
    """Focus slots in use."""

    used: int
    limit: int
    available: int
    concentration_used: bool


@dataclass(frozen=True)
class ConcentrationCheck:
    """Outcome of a concentration save after taking damage."""

    dc: int
    save_total: int
    maintained: bool
    break_result: FocusBreakResult | None = None


def calculate_focus_limit(character_level: int) -> int:
    """Focus limit by level: 1, then 2 from level 6, then 3 from level 10."""
    if character_level >= 10:
        return 3
    if character_level >= 6:
        return 2
    return 1


def create_focus_state(character_level: int) -> PsionicFocusState:
    """Create an empty focus state for a character level."""
    return PsionicFocusState(focus_limit=calculate_focus_limit(character_level))


def get_focus_usage(state: PsionicFocusState) -> FocusUsage:
    """Summarize focus slots in use."""
    used = state.focus_in_use
    return FocusUsage(
        used=used,
        limit=state.focus_limit,
        available=state.focus_limit - used,
        concentration_used=state.concentration_power is not None,
    )


def can_maintain_additional_power(state: PsionicFocusState, power: PsionicPower) -> MaintainCheck:
    """Check a new power against those already sustained.

    Rejects a power that is already maintained, one that would exceed the
    focus limit, and a second concentration power.

    Args:
        state: Current focus state.
        power: Power about to be sustained.

    Returns:
        MaintainCheck with a reason when rejected.
    """
    if any(existing.power_id == power.id for existing in state.maintained_powers):
        return MaintainCheck(False, f"Power {power.id} is already being maintained")
    used = state.focus_in_use
    if power.requires_focus and used >= state.focus_limit:
        return MaintainCheck(False, f"Focus limit reached ({used}/{state.focus_limit})")
    if power.requires_concentration and state.concentration_power is not None:
        return MaintainCheck(False, "Already concentrating on another power")
    return MaintainCheck(True)


def _initial_remaining(power: PsionicPower) -> int | None:
    if power.duration.kind.is_timed:
        return power.duration.amount or 0
    return None


def add_maintained_power(
    state: PsionicFocusState,
    power: PsionicPower,
    *,
    start_time: datetime,
    amplification_level: int = 0,
    target: str | None = None,
) -> PsionicFocusState:
    """Start sustaining a power.

    Args:
        state: Current focus state.
        power: Power being sustained.
        start_time: When the power was manifested.
        amplification_level: AFP spent above the base cost.
        target: Optional target description.

    Returns:
        A new focus state with the power appended.

    Raises:
        InvalidGameStateError: If the power is already maintained or the
            focus or concentration limit rejects it.
    """
    if any(existing.power_id == power.id for existing in state.maintained_powers):
        raise InvalidGameStateError(
            f"Power {power.id} is already being maintained",
            details={"power_id": power.id},
        )
    check = can_maintain_additional_power(state, power)
    if not check.can_maintain:
        raise InvalidGameStateError(
            check.reason or "Cannot maintain power",
            details={"power_id": power.id},
        )

    maintained = MaintainedPower(
        power_id=power.id,
        start_time=start_time,
        duration=power.duration,
        remaining_duration=_initial_remaining(power),
        concentration_required=power.requires_concentration,
        focus_required=power.requires_focus,
        amplification_level=amplification_level,
        target=target,
    )
    logger.debug("Maintaining power", power_id=power.id, focus_used=state.focus_in_use + 1)
    return state.evolve(
        maintained_powers=(*state.maintained_powers, maintained),
        concentration_power=power.id if power.requires_concentration else state.concentration_power,
    )


def remove_maintained_power(
    state: PsionicFocusState,
    power_id: str,
    cause: FocusBreakCause = FocusBreakCause.VOLUNTARY,
    *,
    at: datetime | None = None,
) -> tuple[PsionicFocusState, FocusBreakResult]:
    """Stop sustaining one power.

    Involuntary removal of a focus-requiring power causes 1d4 psychic
    backlash. Voluntary removal never does.

    Args:
        state: Current focus state.
        power_id: Power to drop.
        cause: Why it is dropped.
        at: Time of the break.

    Returns:
        Tuple of the new state and the break result. An unknown id
        returns the state unchanged with ``success=False``.
    """
    target = next((p for p in state.maintained_powers if p.power_id == power_id), None)
    if target is None:
        return state, FocusBreakResult(success=False, psychic_backlash=False, cause=cause)

    backlash = cause != FocusBreakCause.VOLUNTARY and target.focus_required
    if backlash:
        logger.info("Psychic backlash", power_id=power_id, cause=cause)
    new_state = state.evolve(
        maintained_powers=tuple(p for p in state.maintained_powers if p.power_id != power_id),
        concentration_power=None
        if state.concentration_power == power_id
        else state.concentration_power,
        last_focus_break=FocusBreakRecord(cause=cause, powers_lost=(power_id,), at=at),
    )
    return new_state, FocusBreakResult(
        success=True,
        psychic_backlash=backlash,
        cause=cause,
        powers_dropped=(power_id,),
        backlash_damage=BACKLASH_DAMAGE if backlash else None,
    )


def break_all_maintained_powers(
    state: PsionicFocusState,
    cause: FocusBreakCause,
    *,
    at: datetime | None = None,
) -> tuple[PsionicFocusState, FocusBreakResult]:
    """Drop every maintained power at once (unconsciousness, death, overload)."""
    dropped = tuple(p.power_id for p in state.maintained_powers)
    backlash = cause != FocusBreakCause.VOLUNTARY and state.focus_in_use > 0
    if dropped:
        logger.info("All maintained powers broken", cause=cause, powers=list(dropped))
    new_state = state.evolve(
        maintained_powers=(),
        concentration_power=None,
        last_focus_break=FocusBreakRecord(cause=cause, powers_lost=dropped, at=at),
    )
    return new_state, FocusBreakResult(
        success=True,
        psychic_backlash=backlash,
        cause=cause,
        powers_dropped=dropped,
        backlash_damage=BACKLASH_DAMAGE if backlash else None,
    )


def _elapsed_for(kind: DurationKind, elapsed: ElapsedTime) -> int:
    if kind == DurationKind.ROUNDS:
        return elapsed.rounds
    if kind == DurationKind.MINUTES:
        return elapsed.minutes
    if kind == DurationKind.HOURS:
        return elapsed.hours
    return 0


def _is_expired(power: MaintainedPower) -> bool:
    if power.duration.kind == DurationKind.INSTANTANEOUS:
        return True
    return power.duration.kind.is_timed and (power.remaining_duration or 0) <= 0


def update_maintained_powers(state: PsionicFocusState, elapsed: ElapsedTime) -> PsionicFocusState:
    """Count down timed powers and prune the expired ones.

    Each power only counts the elapsed unit matching its own duration:
    a 10-minute power ignores elapsed rounds.

    Args:
        state: Current focus state.
        elapsed: Time that has passed.

    Returns:
        A new focus state. The concentration pointer is cleared if its
        power expired.
    """
    updated: list[MaintainedPower] = []
    for power in state.maintained_powers:
        if power.duration.kind.is_timed and power.remaining_duration is not None:
            reduction = _elapsed_for(power.duration.kind, elapsed)
            power = power.evolve(remaining_duration=max(0, power.remaining_duration - reduction))
        if _is_expired(power):
            logger.debug("Maintained power expired", power_id=power.power_id)
            continue
        updated.append(power)

    concentration = state.concentration_power
    if concentration is not None and all(p.power_id != concentration for p in updated):
        concentration = None
    return state.evolve(maintained_powers=tuple(updated), concentration_power=concentration)


def calculate_concentration_save_dc(damage_taken: int) -> int:
    """Concentration save DC: half the damage, minimum 10."""
    return max(MIN_CONCENTRATION_DC, damage_taken // 2)


def handle_concentration_failure(
    state: PsionicFocusState,
    *,
    at: datetime | None = None,
) -> tuple[PsionicFocusState, FocusBreakResult]:
    """Drop the concentration power after a failed save."""
    if state.concentration_power is None:
        return state, FocusBreakResult(
            success=False,
            psychic_backlash=False,
            cause=FocusBreakCause.FAILED_SAVE,
        )
    return remove_maintained_power(
        state, state.concentration_power, FocusBreakCause.FAILED_SAVE, at=at
    )


def check_concentration(
    state: PsionicFocusState,
    damage_taken: int,
    save_total: int,
    *,
    at: datetime | None = None,
) -> tuple[PsionicFocusState, ConcentrationCheck]:
    """Resolve a concentration save rolled by the caller.

    Args:
        state: Current focus state.
        damage_taken: Damage that forced the save.
        save_total: The Constitution save total.
        at: Time of the check.

    Returns:
        Tuple of the new state and the check outcome.
    """
    dc = calculate_concentration_save_dc(damage_taken)
    if state.concentration_power is None or save_total >= dc:
        return state, ConcentrationCheck(dc=dc, save_total=save_total, maintained=True)
    new_state, result = handle_concentration_failure(state, at=at)
    return new_state, ConcentrationCheck(
        dc=dc, save_total=save_total, maintained=False, break_result=result
    )


__all__ = [
    "MaintainCheck",
    "FocusBreakResult",
    "FocusUsage",
    "ConcentrationCheck",
    "calculate_focus_limit",
    "create_focus_state",
    "get_focus_usage",
    "can_maintain_additional_power",
    "add_maintained_power",
    "remove_maintained_power",
    "break_all_maintained_powers",
    "update_maintained_powers",
    "calculate_concentration_save_dc",
    "handle_concentration_failure",
    "check_concentration",
]
