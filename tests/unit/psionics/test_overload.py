"""Tests for overload recovery, feedback and the psionic surge."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from hollow_gear.core.exceptions import InvalidGameStateError
from hollow_gear.models.enums import FeedbackType, RestType
from hollow_gear.models.psionics import PsionicSurgeState
from hollow_gear.psionics.flux import roll_psionic_feedback
from hollow_gear.psionics.overload import (
    accumulate_feedback_effects,
    activate_psionic_surge,
    apply_feedback,
    calculate_overload_recovery,
    check_overload_recovery,
    clear_expired_feedback_effects,
    clear_feedback_on_rest,
    create_overload_state,
    end_psionic_surge_turn,
    enter_overload,
    restore_psionic_surge,
    update_overload_state,
    use_surge_free_power,
)


class TestOverloadRecovery:
    """Tests for the overload recovery timer."""

    def test_three_excess_is_thirty_minutes(self, now: datetime) -> None:
        """Test recovery lasts ten minutes per excess AFP."""
        recovery = calculate_overload_recovery(3, start_time=now)

        assert recovery.recovery_duration == 30
        assert recovery.is_recovering
        assert recovery.penalties_active
        assert recovery.next_afp_recovery_time == now + timedelta(minutes=30)

    def test_recovery_completes_at_duration(self, now: datetime) -> None:
        """Test the timer completes exactly at its duration."""
        recovery = calculate_overload_recovery(3, start_time=now)

        assert not check_overload_recovery(recovery, now + timedelta(minutes=29)).is_complete
        done = check_overload_recovery(recovery, now + timedelta(minutes=30))
        assert done.is_complete
        assert not done.recovery.is_recovering
        assert not done.recovery.penalties_active

    def test_enter_overload(self, now: datetime) -> None:
        """Test overspending starts recovery and keeps feedback."""
        state = apply_feedback(create_overload_state(), roll_psionic_feedback(1))

        overloaded = enter_overload(state, 8, 5, at=now)

        assert overloaded.is_overloaded
        assert overloaded.excess_afp == 3
        assert overloaded.save_dc == 15
        assert overloaded.recovery is not None
        assert overloaded.recovery.recovery_duration == 30
        assert len(overloaded.accumulated_feedback) == 1

    def test_within_limit_unchanged(self, now: datetime) -> None:
        """Test a safe manifestation leaves the state alone."""
        state = create_overload_state()

        assert enter_overload(state, 5, 5, at=now) == state

    def test_update_clears_overload(self, now: datetime) -> None:
        """Test the overload clears once recovery has elapsed."""
        state = enter_overload(create_overload_state(), 7, 5, at=now)

        early = update_overload_state(state, now + timedelta(minutes=10))
        late = update_overload_state(state, now + timedelta(minutes=20))

        assert early.is_overloaded
        assert not late.is_overloaded
        assert early.save_dc == 14
        assert late.excess_afp == 0
        assert late.save_dc == 0
        assert not late.feedback_risk
        assert late.recovery is not None
        assert not late.recovery.is_recovering


class TestFeedback:
    """Tests for feedback accumulation."""

    def test_sparks_stack(self) -> None:
        """Test neural sparks accumulate as separate instances."""
        spark = roll_psionic_feedback(3)

        effects = accumulate_feedback_effects((spark,), spark)

        assert len(effects) == 2

    def test_non_stackable_replaces(self) -> None:
        """Test a repeated headache replaces its predecessor."""
        headache = roll_psionic_feedback(1)
        flare = roll_psionic_feedback(4)

        effects = accumulate_feedback_effects((headache, flare), headache)

        assert [effect.type for effect in effects] == [
            FeedbackType.AETHER_FLARE,
            FeedbackType.MINOR_HEADACHE,
        ]

    def test_expiry_keeps_mindfracture(self) -> None:
        """Test only mindfracture survives ten minutes."""
        effects = (roll_psionic_feedback(3), roll_psionic_feedback(5), roll_psionic_feedback(6))

        assert clear_expired_feedback_effects(effects, 9) == effects
        remaining = clear_expired_feedback_effects(effects, 10)
        assert [effect.type for effect in remaining] == [FeedbackType.MINDFRACTURE]

    def test_rest_clears_feedback(self) -> None:
        """Test short rests keep mindfracture and long rests clear everything."""
        state = create_overload_state()
        for roll in (2, 5):
            state = apply_feedback(state, roll_psionic_feedback(roll))

        short = clear_feedback_on_rest(state, RestType.SHORT)
        long = clear_feedback_on_rest(state, RestType.LONG)

        assert [e.type for e in short.accumulated_feedback] == [FeedbackType.MINDFRACTURE]
        assert long.accumulated_feedback == ()


class TestPsionicSurge:
    """Tests for the psionic surge."""

    def test_activate(self, now: datetime) -> None:
        """Test activation sets the bonus, backlash and recovery block."""
        surge = activate_psionic_surge(PsionicSurgeState(), at=now)

        assert not surge.available
        assert surge.bonus_active
        assert surge.backlash_pending
        assert surge.afp_recovery_blocked
        assert surge.last_used == now

    def test_cannot_activate_twice(self, now: datetime) -> None:
        """Test a spent surge cannot be activated again."""
        surge = activate_psionic_surge(PsionicSurgeState(), at=now)

        with pytest.raises(InvalidGameStateError) as exc_info:
            activate_psionic_surge(surge, at=now)

        assert exc_info.value.details["current_state"] == "spent"

    def test_free_power_once(self, now: datetime) -> None:
        """Test the free manifestation can only be used once."""
        surge = use_surge_free_power(activate_psionic_surge(PsionicSurgeState(), at=now))

        assert surge.free_afp_used
        with pytest.raises(InvalidGameStateError):
            use_surge_free_power(surge)

    def test_end_turn_and_rest(self, now: datetime) -> None:
        """Test ending the turn and resting restore the surge."""
        surge = end_psionic_surge_turn(activate_psionic_surge(PsionicSurgeState(), at=now))

        assert not surge.bonus_active
        assert not surge.backlash_pending
        assert surge.afp_recovery_blocked

        restored = restore_psionic_surge(surge, RestType.SHORT)
        assert restored.available
        assert not restored.afp_recovery_blocked
        assert restored.last_used == now
