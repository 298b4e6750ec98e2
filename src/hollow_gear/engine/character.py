"""Character creation, whole-character validation and aggregate operations.

The rules modules each own one sub-state. The functions here thread a
single action through every affected sub-state of a CharacterState and
stamp ``last_modified`` with the caller's time.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

from hollow_gear.core.constants import CURRENT_SCHEMA_VERSION
from hollow_gear.core.exceptions import InvalidGameStateError
from hollow_gear.core.logging import character_context, get_logger
from hollow_gear.mechanics.abilities import calculate_modifier, validate_ability_scores, validate_level
from hollow_gear.mechanics.death import (
    DamageOutcome,
    DeathSaveOutcome,
    heal_character,
    is_dead,
    reset_death_saves,
    resolve_death_save,
    take_damage,
    validate_death_saves,
    validate_hit_points,
)
from hollow_gear.mechanics.heat import create_heat_stress_state, validate_heat_stress
from hollow_gear.mechanics.heat import rest as rest_heat
from hollow_gear.mechanics.resources import restore_pool, validate_resource_pool
from hollow_gear.models.character import AbilityScores, CharacterState
from hollow_gear.models.enums import DurationKind, EmotionalState, FocusBreakCause, LifeState, RestType
from hollow_gear.models.pools import HitPoints
from hollow_gear.models.psionics import PsionicPower
from hollow_gear.models.results import ValidationIssue, ValidationResult
from hollow_gear.models.spellcasting import ArcanistState, TemplarState
from hollow_gear.psionics.flux import check_overload_risk, create_afp_pool, restore_afp, spend_afp
from hollow_gear.psionics.focus import (
    add_maintained_power,
    break_all_maintained_powers,
    can_maintain_additional_power,
    create_focus_state,
)
from hollow_gear.psionics.overload import (
    clear_feedback_on_rest,
    create_overload_state,
    enter_overload,
    restore_psionic_surge,
    update_overload_state,
)
from hollow_gear.psionics.signature import create_psionic_signature, update_signature_after_power_use
from hollow_gear.spellcasting import arcanist as arcanist_rules
from hollow_gear.spellcasting import templar as templar_rules


logger = get_logger(__name__)

_SEMVER_PATTERN = re.compile(r"^\d+\.\d+\.\d+$")


@dataclass(frozen=True)
class ManifestResult:
    """Outcome of manifesting a psionic power.

    Attributes:
        success: Whether the power was manifested.
        afp_spent: AFP spent, amplification included.
        overloaded: Whether the spend exceeded the safe limit.
        save_dc: Overload save DC when overloaded.
        reason: Why a manifestation was refused.
    """

    success: bool
    afp_spent: int = 0
    overloaded: bool = False
    save_dc: int = 0
    reason: str | None = None


# =============================================================================
# Creation
# =============================================================================


def create_character(
    character_id: str,
    name: str,
    *,
    max_hit_points: int,
    created: datetime,
    level: int = 1,
    ability_scores: AbilityScores | None = None,
    psionic_emotion: EmotionalState | None = None,
    arcanist: ArcanistState | None = None,
    templar: TemplarState | None = None,
    coolant_flasks: int = 0,
) -> CharacterState:
    """Build a new, fully rested character.

    Args:
        character_id: Stable identifier.
        name: Character name.
        max_hit_points: Hit point maximum.
        created: Creation time, also used as ``last_modified``.
        level: Character level.
        ability_scores: Ability scores; all 10 when omitted.
        psionic_emotion: Emotional baseline. When given, the character is
            psionic and gets an AFP pool from level and Wisdom.
        arcanist: Arcanist resources, if the character is an Arcanist.
        templar: Templar resources, if the character is a Templar.
        coolant_flasks: Coolant flasks carried.

    Returns:
        A new CharacterState at the current schema version.
    """
    scores = ability_scores or AbilityScores()
    psionic = psionic_emotion is not None
    character = CharacterState(
        id=character_id,
        name=name,
        level=level,
        version=CURRENT_SCHEMA_VERSION,
        created=created,
        last_modified=created,
        ability_scores=scores,
        hit_points=HitPoints(current=max_hit_points, maximum=max_hit_points),
        heat_stress=create_heat_stress_state(coolant_flasks),
        psionic_flux=create_afp_pool(level, calculate_modifier(scores.wisdom)) if psionic else None,
        psionic_focus=create_focus_state(level),
        psionic_signature=(
            create_psionic_signature(character_id, psionic_emotion, level)
            if psionic_emotion is not None
            else None
        ),
        arcanist=arcanist,
        templar=templar,
    )
    logger.info("Character created", character_id=character_id, level=level, psionic=psionic)
    return character


# =============================================================================
# Validation
# =============================================================================


def _prefixed(prefix: str, issues: tuple[ValidationIssue, ...]) -> list[ValidationIssue]:
    return [issue.prefixed(prefix) for issue in issues]


def validate_character(character: CharacterState) -> ValidationResult[CharacterState]:
    """Validate every sub-state of a character.

    Issues from sub-validators keep their order and have their field
    nested under the sub-state's document key (``hitPoints.current``).

    Args:
        character: Character to validate.

    Returns:
        ValidationResult listing every violation found.
    """
    issues: list[ValidationIssue] = []

    if not _SEMVER_PATTERN.match(character.version):
        issues.append(
            ValidationIssue(
                "version",
                "Version must be a semantic version",
                "INVALID_VERSION",
                {"version": character.version},
            )
        )
    if not character.id:
        issues.append(ValidationIssue("id", "Character id is required", "MISSING_ID"))
    if character.last_modified < character.created:
        issues.append(
            ValidationIssue(
                "lastModified",
                "Last modification cannot precede creation",
                "INVALID_TIMESTAMPS",
            )
        )

    issues.extend(validate_level(character.level).errors)
    issues.extend(_prefixed("abilityScores", validate_ability_scores(character.ability_scores).errors))
    issues.extend(_prefixed("hitPoints", validate_hit_points(character.hit_points).errors))
    issues.extend(_prefixed("deathSaves", validate_death_saves(character.death_saves).errors))
    issues.extend(_prefixed("heatStress", validate_heat_stress(character.heat_stress).errors))

    if character.psionic_flux is not None:
        issues.extend(validate_resource_pool(character.psionic_flux, "psionicFlux").errors)

    focus = character.psionic_focus
    if focus.focus_in_use > focus.focus_limit:
        issues.append(
            ValidationIssue(
                "psionicFocus.maintainedPowers",
                f"Focus powers in use ({focus.focus_in_use}) exceed the limit ({focus.focus_limit})",
                "FOCUS_LIMIT_EXCEEDED",
            )
        )
    if focus.concentration_power is not None and all(
        power.power_id != focus.concentration_power for power in focus.maintained_powers
    ):
        issues.append(
            ValidationIssue(
                "psionicFocus.concentrationPower",
                "Concentration power is not among the maintained powers",
                "INVALID_CONCENTRATION_POWER",
            )
        )

    if character.arcanist is not None:
        issues.extend(
            _prefixed("arcanist", arcanist_rules.validate_arcanist_state(character.arcanist).errors)
        )
    if character.templar is not None:
        issues.extend(
            _prefixed("templar", templar_rules.validate_templar_state(character.templar).errors)
        )

    return ValidationResult.from_issues(character, issues)


# =============================================================================
# Aggregate Operations
# =============================================================================


def damage_character(
    character: CharacterState,
    amount: int,
    *,
    at: datetime,
    critical: bool = False,
) -> tuple[CharacterState, DamageOutcome]:
    """Deal damage and drop maintained powers if the character goes down.

    Args:
        character: Character taking damage.
        amount: Damage dealt.
        at: Time of the hit.
        critical: Whether the hit was a critical hit.

    Returns:
        Tuple of the updated character and the damage outcome.
    """
    with character_context(character.id):
        outcome = take_damage(character.hit_points, character.death_saves, amount, critical=critical)
    focus = character.psionic_focus
    if outcome.life_state in (LifeState.UNCONSCIOUS, LifeState.DEAD) and focus.maintained_powers:
        cause = FocusBreakCause.DEATH if outcome.life_state is LifeState.DEAD else FocusBreakCause.UNCONSCIOUS
        focus, _ = break_all_maintained_powers(focus, cause, at=at)
    updated = character.evolve(
        hit_points=outcome.hit_points,
        death_saves=outcome.death_saves,
        psionic_focus=focus,
        last_modified=at,
    )
    return updated, outcome


def heal(character: CharacterState, amount: int, *, at: datetime) -> CharacterState:
    """Heal a living character."""
    hit_points, saves = heal_character(character.hit_points, character.death_saves, amount)
    return character.evolve(hit_points=hit_points, death_saves=saves, last_modified=at)


def roll_death_save(
    character: CharacterState,
    roll: int,
    *,
    at: datetime,
) -> tuple[CharacterState, DeathSaveOutcome]:
    """Apply a death-save roll made by the caller.

    Raises:
        InvalidGameStateError: If the character is not dying.
    """
    if character.hit_points.current > 0 or is_dead(character.death_saves):
        raise InvalidGameStateError(
            "Death saves are only rolled at 0 hit points",
            current_state="conscious" if character.hit_points.current > 0 else "dead",
            expected_states=["unconscious"],
        )
    with character_context(character.id):
        outcome = resolve_death_save(character.hit_points, character.death_saves, roll)
    updated = character.evolve(
        hit_points=outcome.hit_points,
        death_saves=outcome.death_saves,
        last_modified=at,
    )
    return updated, outcome


def manifest_power(
    character: CharacterState,
    power: PsionicPower,
    *,
    at: datetime,
    afp_spent: int | None = None,
    current_emotion: EmotionalState | None = None,
    target: str | None = None,
) -> tuple[CharacterState, ManifestResult]:
    """Manifest a psionic power.

    Spends AFP, advances any earlier overload recovery to ``at``, starts
    an overload if this spend exceeds the safe limit, begins sustaining
    non-instantaneous powers and refreshes the signature. The result
    reports the overload risk of this spend only. A refused
    manifestation leaves the character unchanged.

    Args:
        character: Psionic character.
        power: Power being manifested.
        at: Time of the manifestation.
        afp_spent: AFP to commit; defaults to the power's base cost.
            Anything above the base cost is amplification.
        current_emotion: Emotion at the moment of use.
        target: Optional target description.

    Returns:
        Tuple of the updated character and the manifestation result.

    Raises:
        InvalidGameStateError: If the character is not psionic.
    """
    if character.psionic_flux is None:
        raise InvalidGameStateError("Character has no psionic abilities")

    cost = max(power.afp_cost, afp_spent if afp_spent is not None else power.afp_cost)
    sustained = power.duration.kind != DurationKind.INSTANTANEOUS and (
        power.requires_focus or power.requires_concentration
    )
    if sustained:
        check = can_maintain_additional_power(character.psionic_focus, power)
        if not check.can_maintain:
            return character, ManifestResult(success=False, reason=check.reason)

    flux, paid = spend_afp(character.psionic_flux, cost)
    if not paid:
        return character, ManifestResult(success=False, reason="Insufficient AFP")

    focus = character.psionic_focus
    if sustained:
        focus = add_maintained_power(
            focus,
            power,
            start_time=at,
            amplification_level=cost - power.afp_cost,
            target=target,
        )

    risk = check_overload_risk(cost, character.level, at=at)
    with character_context(character.id, power_id=power.id):
        overload = enter_overload(
            update_overload_state(character.psionic_overload, at),
            cost,
            character.level,
            at=at,
        )
    signature = character.psionic_signature
    if signature is not None:
        signature = update_signature_after_power_use(
            signature, power.tier, used_at=at, current_emotion=current_emotion
        )

    updated = character.evolve(
        psionic_flux=flux,
        psionic_focus=focus,
        psionic_overload=overload,
        psionic_signature=signature,
        last_modified=at,
    )
    logger.debug("Power manifested", power_id=power.id, afp_spent=cost)
    return updated, ManifestResult(
        success=True,
        afp_spent=cost,
        overloaded=risk.is_overloaded,
        save_dc=risk.save_dc if risk.is_overloaded else 0,
    )


def rest_character(character: CharacterState, rest_type: RestType, *, at: datetime) -> CharacterState:
    """Take a short or long rest.

    Every sub-state recovers by its own rule. A long rest also restores
    hit points and clears any overload.

    Raises:
        InvalidGameStateError: If the character is dead.
    """
    if is_dead(character.death_saves):
        raise InvalidGameStateError(
            "Dead characters cannot rest",
            current_state="dead",
            expected_states=["conscious", "unconscious", "stable"],
        )

    long_rest = rest_type == RestType.LONG
    overload = (
        create_overload_state()
        if long_rest
        else clear_feedback_on_rest(character.psionic_overload, rest_type)
    )
    rested = character.evolve(
        hit_points=restore_pool(character.hit_points, clear_temporary=True)
        if long_rest
        else character.hit_points,
        death_saves=reset_death_saves() if long_rest else character.death_saves,
        heat_stress=rest_heat(character.heat_stress, rest_type),
        psionic_flux=restore_afp(character.psionic_flux, rest_type)
        if character.psionic_flux is not None
        else None,
        psionic_overload=overload,
        psionic_surge=restore_psionic_surge(character.psionic_surge, rest_type),
        arcanist=arcanist_rules.rest(character.arcanist, rest_type)
        if character.arcanist is not None
        else None,
        templar=templar_rules.rest(character.templar, rest_type)
        if character.templar is not None
        else None,
        last_modified=at,
    )
    logger.info("Character rested", character_id=character.id, rest_type=rest_type)
    return rested


__all__ = [
    "ManifestResult",
    "create_character",
    "validate_character",
    "damage_character",
    "heal",
    "roll_death_save",
    "manifest_power",
    "rest_character",
]
