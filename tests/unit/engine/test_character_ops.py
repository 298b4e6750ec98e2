"""Tests for character creation, validation and aggregate operations."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from hollow_gear.core.exceptions import InvalidGameStateError
from hollow_gear.engine.character import (
    create_character,
    damage_character,
    heal,
    manifest_power,
    rest_character,
    roll_death_save,
    validate_character,
)
from hollow_gear.models.character import CharacterState
from hollow_gear.models.enums import (
    DurationKind,
    EmotionalState,
    FocusBreakCause,
    HeatSource,
    LifeState,
    RestType,
)
from hollow_gear.models.pools import DeathSaves, ResourcePool
from hollow_gear.mechanics.heat import add_heat_points
from hollow_gear.models.psionics import PowerDuration, PsionicPower
from hollow_gear.psionics.focus import create_focus_state


class TestCreateCharacter:
    """Tests for create_character."""

    def test_plain_character(self, character: CharacterState, now: datetime) -> None:
        """Test a non-psionic character has no flux or signature."""
        assert character.hit_points.current == 24
        assert character.created == character.last_modified == now
        assert character.psionic_flux is None
        assert character.psionic_signature is None
        assert character.psionic_focus.focus_limit == 1
        assert character.heat_stress.coolant_flasks == 2

    def test_psionic_character(self, psionic_character: CharacterState) -> None:
        """Test a psionic character gets AFP from level and Wisdom."""
        assert psionic_character.psionic_flux == ResourcePool(current=6, maximum=6)
        assert psionic_character.psionic_signature is not None
        assert psionic_character.psionic_signature.base_emotion is EmotionalState.CALM
        assert psionic_character.psionic_signature.power_level == 5
        assert psionic_character.arcanist is not None

    def test_defaults(self, now: datetime) -> None:
        """Test omitted ability scores default to 10."""
        created = create_character("c", "Nobody", max_hit_points=8, created=now)

        assert created.ability_scores.wisdom == 10
        assert created.level == 1
        assert validate_character(created).is_valid


class TestValidateCharacter:
    """Tests for whole-character validation."""

    def test_valid(self, character: CharacterState, psionic_character: CharacterState) -> None:
        """Test freshly created characters are valid."""
        assert validate_character(character).is_valid
        assert validate_character(psionic_character).data == psionic_character

    def test_envelope_issues(self, character: CharacterState, now: datetime) -> None:
        """Test version, id and timestamp problems come first."""
        broken = character.evolve(
            version="1.0",
            id="",
            last_modified=now - timedelta(days=1),
            level=0,
        )

        result = validate_character(broken)

        assert result.codes == ("INVALID_VERSION", "MISSING_ID", "INVALID_TIMESTAMPS", "INVALID_LEVEL")
        assert result.errors[3].field == "level"

    def test_nested_prefixes(self, character: CharacterState) -> None:
        """Test sub-state issues are nested under their document key."""
        broken = character.evolve(
            ability_scores=character.ability_scores.evolve(strength=31),
            death_saves=DeathSaves(failures=4),
            heat_stress=character.heat_stress.evolve(coolant_flasks=-1),
        )

        result = validate_character(broken)

        assert [issue.field for issue in result.errors] == [
            "abilityScores.strength",
            "deathSaves.failures",
            "heatStress.coolantFlasks",
        ]

    def test_psionic_and_casting_prefixes(self, psionic_character: CharacterState) -> None:
        """Test flux and Arcanist issues carry their prefixes."""
        arcanist = psionic_character.arcanist
        assert arcanist is not None
        broken = psionic_character.evolve(
            psionic_flux=ResourcePool(current=9, maximum=6),
            arcanist=arcanist.evolve(heat_points=11),
        )

        result = validate_character(broken)

        assert [issue.field for issue in result.errors] == [
            "psionicFlux.current",
            "arcanist.heatPoints",
        ]

    def test_focus_issues(
        self,
        psionic_character: CharacterState,
        focus_power: PsionicPower,
        now: datetime,
    ) -> None:
        """Test an over-full focus and a dangling concentration pointer."""
        character, _ = manifest_power(psionic_character, focus_power, at=now)
        broken = character.evolve(
            psionic_focus=character.psionic_focus.evolve(
                focus_limit=0,
                concentration_power="mind-link",
            )
        )

        result = validate_character(broken)

        assert result.codes == ("FOCUS_LIMIT_EXCEEDED", "INVALID_CONCENTRATION_POWER")


class TestDamageAndHealing:
    """Tests for damage, healing and death saves on a character."""

    def test_damage(self, character: CharacterState, now: datetime) -> None:
        """Test damage updates hit points and the modification time."""
        later = now + timedelta(minutes=1)

        damaged, outcome = damage_character(character, 10, at=later)

        assert damaged.hit_points.current == 14
        assert outcome.life_state is LifeState.CONSCIOUS
        assert damaged.last_modified == later

    def test_unconscious_breaks_focus(
        self,
        psionic_character: CharacterState,
        focus_power: PsionicPower,
        now: datetime,
    ) -> None:
        """Test dropping to 0 HP drops every maintained power."""
        character, _ = manifest_power(psionic_character, focus_power, at=now)

        downed, outcome = damage_character(character, 35, at=now)

        assert outcome.life_state is LifeState.UNCONSCIOUS
        assert downed.psionic_focus.maintained_powers == ()
        assert downed.psionic_focus.last_focus_break is not None
        assert downed.psionic_focus.last_focus_break.cause is FocusBreakCause.UNCONSCIOUS

    def test_massive_damage_death(
        self,
        psionic_character: CharacterState,
        focus_power: PsionicPower,
        now: datetime,
    ) -> None:
        """Test massive damage kills and records death as the break cause."""
        character, _ = manifest_power(psionic_character, focus_power, at=now)

        dead, outcome = damage_character(character, 60, at=now)

        assert outcome.instant_death
        assert dead.psionic_focus.last_focus_break is not None
        assert dead.psionic_focus.last_focus_break.cause is FocusBreakCause.DEATH

    def test_heal_from_zero(self, character: CharacterState, now: datetime) -> None:
        """Test healing an unconscious character resets death saves."""
        downed, _ = damage_character(character, 24, at=now)
        downed, _ = damage_character(downed, 1, at=now)

        healed = heal(downed, 5, at=now)

        assert healed.hit_points.current == 5
        assert healed.death_saves == DeathSaves()

    def test_death_save_requires_zero_hp(self, character: CharacterState, now: datetime) -> None:
        """Test death saves are refused for a conscious character."""
        with pytest.raises(InvalidGameStateError) as exc_info:
            roll_death_save(character, 12, at=now)

        assert exc_info.value.details["current_state"] == "conscious"

    def test_death_save_sequence(self, character: CharacterState, now: datetime) -> None:
        """Test rolled saves accumulate and a dead character cannot roll."""
        downed, _ = damage_character(character, 24, at=now)

        downed, first = roll_death_save(downed, 1, at=now)
        downed, second = roll_death_save(downed, 5, at=now)

        assert not first.success
        assert second.life_state is LifeState.DEAD
        with pytest.raises(InvalidGameStateError):
            roll_death_save(downed, 20, at=now)


class TestManifestPower:
    """Tests for manifesting psionic powers."""

    def test_requires_psionics(
        self,
        character: CharacterState,
        focus_power: PsionicPower,
        now: datetime,
    ) -> None:
        """Test a non-psionic character cannot manifest."""
        with pytest.raises(InvalidGameStateError):
            manifest_power(character, focus_power, at=now)

    def test_sustained_power(
        self,
        psionic_character: CharacterState,
        focus_power: PsionicPower,
        now: datetime,
    ) -> None:
        """Test a sustained power spends AFP, occupies focus and marks the signature."""
        character, result = manifest_power(psionic_character, focus_power, at=now, target="ally")

        assert result.success
        assert result.afp_spent == 2
        assert not result.overloaded
        assert character.psionic_flux is not None
        assert character.psionic_flux.current == 4
        assert character.psionic_focus.maintained_powers[0].target == "ally"
        assert character.psionic_signature is not None
        assert character.psionic_signature.last_used == now
        assert character.psionic_signature.last_power_tier == 2

    def test_instantaneous_power(self, psionic_character: CharacterState, now: datetime) -> None:
        """Test instantaneous powers are not maintained."""
        blast = PsionicPower(
            id="mind-spike",
            tier=1,
            afp_cost=1,
            duration=PowerDuration(kind=DurationKind.INSTANTANEOUS),
        )

        character, result = manifest_power(psionic_character, blast, at=now)

        assert result.success
        assert character.psionic_focus.maintained_powers == ()

    def test_amplified_overload(
        self,
        psionic_character: CharacterState,
        focus_power: PsionicPower,
        now: datetime,
    ) -> None:
        """Test spending past the level overloads the character."""
        flush = psionic_character.evolve(psionic_flux=ResourcePool(current=10, maximum=10))

        character, result = manifest_power(flush, focus_power, at=now, afp_spent=7)

        assert result.overloaded
        assert result.save_dc == 14
        assert character.psionic_overload.recovery is not None
        assert character.psionic_overload.recovery.recovery_duration == 20
        assert character.psionic_focus.maintained_powers[0].amplification_level == 5

    def test_focus_limit_refusal(
        self,
        psionic_character: CharacterState,
        focus_power: PsionicPower,
        concentration_power: PsionicPower,
        now: datetime,
    ) -> None:
        """Test a refused manifestation leaves the character unchanged."""
        character, _ = manifest_power(psionic_character, focus_power, at=now)

        unchanged, result = manifest_power(character, concentration_power, at=now)

        assert not result.success
        assert result.reason == "Focus limit reached (1/1)"
        assert unchanged == character

    def test_already_maintained_refusal(
        self,
        psionic_character: CharacterState,
        focus_power: PsionicPower,
        now: datetime,
    ) -> None:
        """Test re-manifesting a sustained power is refused without spending AFP."""
        roomy = psionic_character.evolve(psionic_focus=create_focus_state(6))
        character, _ = manifest_power(roomy, focus_power, at=now)

        unchanged, result = manifest_power(character, focus_power, at=now + timedelta(minutes=1))

        assert not result.success
        assert result.reason == "Power kinetic-shield is already being maintained"
        assert unchanged == character
        assert unchanged.psionic_flux is not None
        assert unchanged.psionic_flux.current == 4

    def test_safe_spend_during_recovery_is_not_overloaded(
        self,
        psionic_character: CharacterState,
        now: datetime,
    ) -> None:
        """Test the result reports only the risk of the current spend."""
        blast = PsionicPower(
            id="mind-spike",
            tier=1,
            afp_cost=1,
            duration=PowerDuration(kind=DurationKind.INSTANTANEOUS),
        )
        flush = psionic_character.evolve(psionic_flux=ResourcePool(current=10, maximum=10))
        character, first = manifest_power(flush, blast, at=now, afp_spent=7)

        character, second = manifest_power(character, blast, at=now + timedelta(minutes=5))

        assert first.overloaded
        assert first.save_dc == 14
        assert second.success
        assert not second.overloaded
        assert second.save_dc == 0
        assert character.psionic_overload.is_overloaded
        assert character.psionic_overload.save_dc == 14

    def test_manifesting_after_recovery_clears_overload(
        self,
        psionic_character: CharacterState,
        now: datetime,
    ) -> None:
        """Test a finished recovery is cleared by the next manifestation."""
        blast = PsionicPower(
            id="mind-spike",
            tier=1,
            afp_cost=1,
            duration=PowerDuration(kind=DurationKind.INSTANTANEOUS),
        )
        flush = psionic_character.evolve(psionic_flux=ResourcePool(current=10, maximum=10))
        character, _ = manifest_power(flush, blast, at=now, afp_spent=7)

        character, _ = manifest_power(character, blast, at=now + timedelta(minutes=20))

        assert not character.psionic_overload.is_overloaded
        assert character.psionic_overload.excess_afp == 0
        assert character.psionic_overload.save_dc == 0

    def test_insufficient_afp(
        self,
        psionic_character: CharacterState,
        focus_power: PsionicPower,
        now: datetime,
    ) -> None:
        """Test manifesting without enough AFP is refused."""
        drained = psionic_character.evolve(psionic_flux=ResourcePool(current=1, maximum=6))

        unchanged, result = manifest_power(drained, focus_power, at=now)

        assert result.reason == "Insufficient AFP"
        assert unchanged == drained


class TestRestCharacter:
    """Tests for resting."""

    def test_long_rest(
        self,
        psionic_character: CharacterState,
        focus_power: PsionicPower,
        now: datetime,
    ) -> None:
        """Test a long rest restores hit points, AFP, heat and overload."""
        flush = psionic_character.evolve(psionic_flux=ResourcePool(current=10, maximum=10))
        character, _ = manifest_power(flush, focus_power, at=now, afp_spent=7)
        character, _ = damage_character(character, 12, at=now)
        character = character.evolve(
            heat_stress=add_heat_points(character.heat_stress, HeatSource.ENVIRONMENTAL, 9)
        )
        later = now + timedelta(hours=8)

        rested = rest_character(character, RestType.LONG, at=later)

        assert rested.hit_points.current == 30
        assert rested.psionic_flux is not None
        assert rested.psionic_flux.current == 10
        assert rested.heat_stress.current_heat_points == 0
        assert not rested.psionic_overload.is_overloaded
        assert rested.last_modified == later

    def test_short_rest(self, character: CharacterState, now: datetime) -> None:
        """Test a short rest keeps damage but sheds some heat."""
        damaged, _ = damage_character(character, 5, at=now)
        damaged = damaged.evolve(
            heat_stress=add_heat_points(damaged.heat_stress, HeatSource.ENVIRONMENTAL, 6)
        )

        rested = rest_character(damaged, RestType.SHORT, at=now)

        assert rested.hit_points.current == 19
        assert rested.heat_stress.current_heat_points == 4

    def test_dead_cannot_rest(self, character: CharacterState, now: datetime) -> None:
        """Test a dead character cannot rest."""
        dead, _ = damage_character(character, 48, at=now)

        with pytest.raises(InvalidGameStateError):
            rest_character(dead, RestType.LONG, at=now)
