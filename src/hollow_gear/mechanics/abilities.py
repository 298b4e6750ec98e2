"""Ability, proficiency and initiative calculators plus their validators.

The calculators are total functions: they accept any integer and never
fail. Inputs from outside the engine go through the ``validate_*``
functions first, which report every problem with a value at once.
"""

from __future__ import annotations

import math
from numbers import Real

from hollow_gear.core.constants import (
    MAX_ABILITY_SCORE,
    MAX_LEVEL,
    MAX_PROFICIENCY_BONUS,
    MIN_ABILITY_SCORE,
    MIN_LEVEL,
    MIN_PROFICIENCY_BONUS,
)
from hollow_gear.models.character import AbilityScores
from hollow_gear.models.results import ValidationIssue, ValidationResult


# =============================================================================
# Calculators
# =============================================================================


def calculate_modifier(score: int) -> int:
    """Calculate the ability modifier from an ability score.

    Example:
        >>> calculate_modifier(10)
        0
        >>> calculate_modifier(7)
        -2
    """
    return (score - 10) // 2


def calculate_proficiency_bonus(level: int) -> int:
    """Calculate the proficiency bonus for a character level.

    Example:
        >>> calculate_proficiency_bonus(1)
        2
        >>> calculate_proficiency_bonus(17)
        6
    """
    return math.ceil(level / 4) + 1


def calculate_initiative(dexterity_modifier: int, bonus: int = 0) -> int:
    """Total initiative modifier."""
    return dexterity_modifier + bonus


# =============================================================================
# Validation
# =============================================================================


def _is_integer(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_ability_score(value: object, field: str = "score") -> ValidationResult[int]:
    """Validate a raw ability score.

    Every failing check is reported: ``25.5`` is only non-integer, while
    ``30.5`` is both non-integer and too high.

    Args:
        value: The untrusted score.
        field: Field name used in the issues.

    Returns:
        ValidationResult with the score or its issues.
    """
    issues: list[ValidationIssue] = []

    if not _is_integer(value):
        issues.append(
            ValidationIssue(
                field,
                "Ability score must be an integer",
                "INVALID_TYPE",
                {"value": value},
            )
        )

    if isinstance(value, Real) and not isinstance(value, bool):
        if value < MIN_ABILITY_SCORE:
            issues.append(
                ValidationIssue(
                    field,
                    f"Ability score must be at least {MIN_ABILITY_SCORE}",
                    "SCORE_TOO_LOW",
                    {"value": value},
                )
            )
        elif value > MAX_ABILITY_SCORE:
            issues.append(
                ValidationIssue(
                    field,
                    f"Ability score cannot exceed {MAX_ABILITY_SCORE}",
                    "SCORE_TOO_HIGH",
                    {"value": value},
                )
            )

    return ValidationResult.from_issues(value, issues)


def validate_ability_scores(scores: AbilityScores) -> ValidationResult[AbilityScores]:
    """Validate all six scores, collecting issues across abilities."""
    issues: list[ValidationIssue] = []
    for name, value in scores.model_dump().items():
        issues.extend(validate_ability_score(value, name).errors)
    return ValidationResult.from_issues(scores, issues)


def validate_level(value: object, field: str = "level") -> ValidationResult[int]:
    """Validate a character level (integer from 1 to 20)."""
    if not _is_integer(value) or not MIN_LEVEL <= value <= MAX_LEVEL:  # type: ignore[operator]
        issue = ValidationIssue(
            field,
            f"Level must be an integer between {MIN_LEVEL} and {MAX_LEVEL}",
            "INVALID_LEVEL",
            {"value": value},
        )
        return ValidationResult(errors=(issue,))
    return ValidationResult(data=value)  # type: ignore[arg-type]


def validate_proficiency_bonus(
    value: object,
    level: int | None = None,
    field: str = "proficiencyBonus",
) -> ValidationResult[int]:
    """Validate a proficiency bonus, optionally against a level.

    Args:
        value: The untrusted bonus.
        level: If given, the bonus must equal the bonus for this level.
        field: Field name used in the issues.

    Returns:
        ValidationResult with the bonus or its issues.
    """
    issues: list[ValidationIssue] = []
    if not _is_integer(value) or not MIN_PROFICIENCY_BONUS <= value <= MAX_PROFICIENCY_BONUS:  # type: ignore[operator]
        issues.append(
            ValidationIssue(
                field,
                f"Proficiency bonus must be between {MIN_PROFICIENCY_BONUS} "
                f"and {MAX_PROFICIENCY_BONUS}",
                "INVALID_PROFICIENCY_BONUS",
                {"value": value},
            )
        )
    if level is not None and value != calculate_proficiency_bonus(level):
        issues.append(
            ValidationIssue(
                field,
                "Proficiency bonus does not match character level",
                "PROFICIENCY_LEVEL_MISMATCH",
                {"value": value, "expected": calculate_proficiency_bonus(level)},
            )
        )
    return ValidationResult.from_issues(value, issues)  # type: ignore[arg-type]


__all__ = [
    "calculate_modifier",
    "calculate_proficiency_bonus",
    "calculate_initiative",
    "validate_ability_score",
    "validate_ability_scores",
    "validate_level",
    "validate_proficiency_bonus",
]
