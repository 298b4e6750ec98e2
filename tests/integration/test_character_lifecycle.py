"""Integration tests for a character's lifecycle.

Tests the complete flow: create, manifest, cast, take damage, persist,
synchronize with a patch, and rest.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from hollow_gear.engine.character import (
    damage_character,
    manifest_power,
    rest_character,
    validate_character,
)
from hollow_gear.mechanics.heat import add_heat_points
from hollow_gear.models.character import CharacterState
from hollow_gear.models.enums import HeatSource, HeatStressLevel, LifeState, RestType
from hollow_gear.models.psionics import PsionicPower
from hollow_gear.models.spellcasting import TemplarState
from hollow_gear.serialization import (
    apply_patch,
    create_patch,
    deserialize,
    serialize,
    track_changes,
)
from hollow_gear.spellcasting.arcanist import cast_formula
from hollow_gear.spellcasting.templar import cast_miracle


def _cast_spark_bolt(character: CharacterState, at: datetime) -> CharacterState:
    assert character.arcanist is not None
    result = cast_formula(character.arcanist, "spark-bolt", 2, at=at)
    assert result.success
    return character.evolve(
        arcanist=result.state,
        heat_stress=add_heat_points(
            character.heat_stress,
            HeatSource.SPELLCASTING,
            result.heat_generated,
            "Spark Bolt",
            at=at,
        ),
        last_modified=at,
    )


class TestCharacterLifecycle:
    """Test an adventuring day for a psionic Arcanist."""

    def test_adventuring_day(
        self,
        psionic_character: CharacterState,
        focus_power: PsionicPower,
        now: datetime,
    ) -> None:
        """Run a character through combat, persistence and a long rest."""
        round_one = now + timedelta(seconds=6)
        round_two = now + timedelta(seconds=12)

        character, manifested = manifest_power(psionic_character, focus_power, at=round_one)
        assert manifested.success
        character = _cast_spark_bolt(character, round_one)
        character, outcome = damage_character(character, 12, at=round_two)

        assert outcome.life_state is LifeState.CONSCIOUS
        assert character.hit_points.current == 18
        assert character.psionic_flux is not None
        assert character.psionic_flux.current == 4
        assert character.arcanist is not None
        assert character.arcanist.aether_flux_points.current == 5
        assert character.heat_stress.current_heat_points == character.arcanist.heat_points
        assert validate_character(character).is_valid

        restored = deserialize(serialize(character))
        assert restored == character

        rested = rest_character(restored, RestType.LONG, at=now + timedelta(hours=8))

        assert rested.hit_points.current == rested.hit_points.maximum
        assert rested.psionic_flux is not None
        assert rested.psionic_flux.current == 6
        assert rested.arcanist is not None
        assert rested.arcanist.aether_flux_points.current == 8
        assert rested.arcanist.heat_points == 0
        assert rested.heat_stress.current_level is HeatStressLevel.NORMAL
        assert rested.psionic_focus.maintained_powers == character.psionic_focus.maintained_powers
        assert validate_character(rested).is_valid

    def test_going_down_drops_focus(
        self,
        psionic_character: CharacterState,
        focus_power: PsionicPower,
        now: datetime,
    ) -> None:
        """Dropping to 0 HP breaks focus and the state still validates."""
        character, _ = manifest_power(psionic_character, focus_power, at=now)

        downed, outcome = damage_character(character, 30, at=now)

        assert outcome.life_state is LifeState.UNCONSCIOUS
        assert downed.psionic_focus.maintained_powers == ()
        assert validate_character(downed).is_valid


class TestSynchronization:
    """Test keeping a remote copy in sync with patches."""

    def test_patch_keeps_replica_in_sync(
        self,
        character: CharacterState,
        templar: TemplarState,
        now: datetime,
    ) -> None:
        """Replaying patches on a replica reproduces the local character."""
        local = character.evolve(templar=templar)
        replica_document = local.to_document()

        for minute, miracle_id in enumerate(("blessing", "blessing", "ward"), start=1):
            at = now + timedelta(minutes=minute)
            assert local.templar is not None
            cast = cast_miracle(local.templar, miracle_id, 1)
            assert cast.success
            updated = local.evolve(templar=cast.state, last_modified=at)

            patch = create_patch(local.to_document(), updated.to_document(), timestamp=at)
            replica_document = apply_patch(replica_document, patch)
            local = updated

        assert replica_document == local.to_document()
        assert deserialize(replica_document) == local
        assert local.templar is not None
        assert len(local.templar.recent_resonances) == 3

    def test_diff_reports_only_changed_paths(self, character: CharacterState, now: datetime) -> None:
        """A single hit changes only hit points and the timestamp."""
        damaged, _ = damage_character(character, 3, at=now + timedelta(minutes=1))

        result = track_changes(character.to_document(), damaged.to_document())

        assert sorted(change.rendered_path for change in result.changes) == [
            "hitPoints.current",
            "lastModified",
        ]
