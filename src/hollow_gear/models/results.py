"""Validation result types.

Validators never raise. They return a ValidationResult whose ``errors``
lists every violation found, in the order the checks ran.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field as dataclass_field
from typing import Any, Generic, TypeVar


T = TypeVar("T")


@dataclass(frozen=True)
class ValidationIssue:
    """A single field-coded validation failure.

    Attributes:
        field: Dotted name of the offending field.
        message: Human-readable description.
        code: Stable error code (e.g., 'SCORE_TOO_HIGH').
        context: Extra values that explain the failure.
    """

    field: str
    message: str
    code: str
    context: dict[str, Any] = dataclass_field(default_factory=dict)

    def prefixed(self, prefix: str) -> ValidationIssue:
        """Return the issue with its field nested under ``prefix``."""
        name = f"{prefix}.{self.field}" if self.field else prefix
        return ValidationIssue(name, self.message, self.code, dict(self.context))


@dataclass(frozen=True)
class ValidationResult(Generic[T]):
    """Outcome of a validation call.

    Attributes:
        data: The validated value when no errors were found.
        errors: Ordered, exhaustive tuple of issues.

    Example:
        >>> result = validate_ability_score(25.5)
        >>> [issue.code for issue in result.errors]
        ['INVALID_TYPE']
    """

    data: T | None = None
    errors: tuple[ValidationIssue, ...] = ()

    @property
    def is_valid(self) -> bool:
        """Check whether no issues were reported."""
        return not self.errors

    @property
    def codes(self) -> tuple[str, ...]:
        """Get the error codes in report order."""
        return tuple(issue.code for issue in self.errors)

    @classmethod
    def from_issues(cls, data: T, issues: Iterable[ValidationIssue]) -> ValidationResult[T]:
        """Build a result that carries ``data`` only when there are no issues.

        Args:
            data: The value that was checked.
            issues: Issues collected by the validator.

        Returns:
            A ValidationResult.
        """
        collected = tuple(issues)
        if collected:
            return cls(data=None, errors=collected)
        return cls(data=data, errors=())


__all__ = ["ValidationIssue", "ValidationResult"]
