"""Enumeration types for the Hollow Gear engine.

String enums keep serialized snapshots readable: every value written to
a document is the lower-case rules term used at the table.
"""

from __future__ import annotations

from enum import IntEnum, StrEnum


class RestType(StrEnum):
    """Rest events that restore resources and shed accumulated risk."""

    SHORT = "short"
    LONG = "long"


class LifeState(StrEnum):
    """States of the hit-point and death-save state machine."""

    CONSCIOUS = "conscious"
    UNCONSCIOUS = "unconscious"
    STABLE = "stable"
    DEAD = "dead"


# =============================================================================
# Heat
# =============================================================================


class HeatStressLevel(IntEnum):
    """Heat-stress levels derived from accumulated heat points."""

    NORMAL = 0
    WARM = 1
    HOT = 2
    OVERHEATED = 3

    @property
    def label(self) -> str:
        """Get the display name of the level.

        Returns:
            Capitalized level name (e.g., 'Overheated').
        """
        return self.name.capitalize()


class HeatSource(StrEnum):
    """Sources that can generate heat."""

    SPELLCASTING = "spellcasting"
    PSIONIC_OVERLOAD = "psionic_overload"
    POWERED_EQUIPMENT = "powered_equipment"
    ENVIRONMENTAL = "environmental"
    COMBAT_EXERTION = "combat_exertion"
    STEAM_VENT_FAILURE = "steam_vent_failure"


class HeatEffectType(StrEnum):
    """Mechanical penalties applied at higher heat-stress levels."""

    DEXTERITY_PENALTY = "dexterity_penalty"
    SPEED_REDUCTION = "speed_reduction"
    DISADVANTAGE = "disadvantage"
    EXHAUSTION = "exhaustion"
    EQUIPMENT_MALFUNCTION = "equipment_malfunction"


class HarnessType(StrEnum):
    """Steam vent harness grades."""

    BASIC = "basic"
    IMPROVED = "improved"
    SUPERIOR = "superior"
    MASTERWORK = "masterwork"


class HarnessCondition(StrEnum):
    """Wear states of a steam vent harness, best first."""

    PRISTINE = "pristine"
    GOOD = "good"
    WORN = "worn"
    DAMAGED = "damaged"

    def degraded(self) -> HarnessCondition:
        """Get the next worse condition.

        Returns:
            The following condition, or DAMAGED if already damaged.
        """
        members = list(HarnessCondition)
        index = members.index(self)
        return members[min(index + 1, len(members) - 1)]


# =============================================================================
# Psionics
# =============================================================================


class FocusBreakCause(StrEnum):
    """Reasons a maintained power can end."""

    DAMAGE_TAKEN = "damage_taken"
    FAILED_SAVE = "failed_save"
    VOLUNTARY = "voluntary"
    OVERLOAD = "overload"
    UNCONSCIOUS = "unconscious"
    DEATH = "death"
    NEW_POWER_CONFLICT = "new_power_conflict"


class DurationKind(StrEnum):
    """How long a psionic power lasts."""

    INSTANTANEOUS = "instantaneous"
    CONCENTRATION = "concentration"
    SUSTAINED = "sustained"
    ROUNDS = "rounds"
    MINUTES = "minutes"
    HOURS = "hours"

    @property
    def is_timed(self) -> bool:
        """Check whether the duration counts down in a time unit.

        Returns:
            True for rounds, minutes and hours.
        """
        return self in (DurationKind.ROUNDS, DurationKind.MINUTES, DurationKind.HOURS)


class FeedbackType(StrEnum):
    """Psionic feedback results from the d6 feedback table."""

    MINOR_HEADACHE = "minor_headache"
    STATIC_ECHO = "static_echo"
    NEURAL_SPARK = "neural_spark"
    AETHER_FLARE = "aether_flare"
    MINDFRACTURE = "mindfracture"
    COLLAPSE = "collapse"


class EmotionalState(StrEnum):
    """Emotional baselines that shape a psionic signature."""

    RAGE = "rage"
    CALM = "calm"
    CURIOSITY = "curiosity"
    DESPAIR = "despair"
    JOY = "joy"
    FEAR = "fear"
    DETERMINATION = "determination"
    CONFUSION = "confusion"


class SignatureIntensity(StrEnum):
    """How strongly a psionic signature can be sensed."""

    FAINT = "faint"
    MODERATE = "moderate"
    STRONG = "strong"
    OVERWHELMING = "overwhelming"


# =============================================================================
# Spellcasting
# =============================================================================


class ResonanceType(StrEnum):
    """Categories of Templar miracles used for harmony streaks."""

    DIVINE = "divine"
    HARMONIC = "harmonic"
    PROTECTIVE = "protective"
    RESTORATIVE = "restorative"
    RIGHTEOUS = "righteous"
    REVELATORY = "revelatory"


# =============================================================================
# Serialization
# =============================================================================


class ChangeType(StrEnum):
    """Kinds of structural change recorded in a patch."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    ADD = "add"
    REMOVE = "remove"


__all__ = [
    "RestType",
    "LifeState",
    "HeatStressLevel",
    "HeatSource",
    "HeatEffectType",
    "HarnessType",
    "HarnessCondition",
    "FocusBreakCause",
    "DurationKind",
    "FeedbackType",
    "EmotionalState",
    "SignatureIntensity",
    "ResonanceType",
    "ChangeType",
]
