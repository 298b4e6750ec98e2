"""Custom exception hierarchy for the Hollow Gear character engine.

Every structural failure raised by the engine inherits from
HollowGearError and carries a stable machine-readable ``code`` plus a
``details`` mapping. Domain validation (ability scores, pools, heat)
does not raise; it returns accumulated issues instead. These exceptions
are reserved for failures that abort an operation: malformed snapshots,
missing migration links, checksum mismatches, unknown referenced
entities and illegal state transitions.

Example:
    >>> from hollow_gear.core.exceptions import MigrationError
    >>> raise MigrationError("No migration path", from_version="0.9.0")
"""

from __future__ import annotations

from typing import Any


class HollowGearError(Exception):
    """Base exception for all Hollow Gear engine errors.

    Attributes:
        message: Human-readable error description.
        code: Stable error code for programmatic handling.
        details: Optional dictionary containing additional error context.
    """

    default_code = "HOLLOW_GEAR_ERROR"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            code: Error code; defaults to the class ``default_code``.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with its code and details.

        Returns:
            Formatted error message including any provided details.
        """
        base = f"[{self.code}] {self.message}"
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{base} [{detail_str}]"
        return base

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception.

        Returns:
            String representation suitable for debugging.
        """
        return (
            f"{self.__class__.__name__}(message={self.message!r}, "
            f"code={self.code!r}, details={self.details!r})"
        )


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(HollowGearError):
    """Raised when engine configuration is invalid."""

    default_code = "INVALID_CONFIGURATION"

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ValidationError(HollowGearError):
    """Raised when a validated value must be rejected outright.

    Validators themselves return issues; this exception is used at
    boundaries that cannot continue with invalid data, and it keeps the
    full ordered issue list.
    """

    default_code = "VALIDATION_FAILED"

    def __init__(
        self,
        message: str,
        *,
        issues: tuple[Any, ...] = (),
        field_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            issues: Ordered validation issues that caused the failure.
            field_name: Name of the field that failed validation.
            details: Optional dictionary containing additional error context.
        """
        self.issues = tuple(issues)
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if self.issues:
            combined_details["issue_codes"] = [
                getattr(issue, "code", str(issue)) for issue in self.issues
            ]
        super().__init__(message, details=combined_details)


class SnapshotValidationError(ValidationError):
    """Raised when a deserialized snapshot fails full character validation."""

    default_code = "SNAPSHOT_INVALID"


# =============================================================================
# Game Engine Exceptions
# =============================================================================


class GameEngineError(HollowGearError):
    """Base exception for rule-engine failures."""

    default_code = "ENGINE_ERROR"


class InvalidGameStateError(GameEngineError):
    """Raised when an operation is attempted in a state that forbids it.

    Examples are maintaining a power that the focus limit rejects, or
    activating a psionic surge that was already spent.
    """

    default_code = "INVALID_STATE"

    def __init__(
        self,
        message: str,
        *,
        current_state: str | None = None,
        expected_states: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize invalid state error with state context.

        Args:
            message: Human-readable error description.
            current_state: The current state of the subsystem.
            expected_states: List of valid states for the operation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if current_state:
            combined_details["current_state"] = current_state
        if expected_states:
            combined_details["expected_states"] = expected_states
        super().__init__(message, details=combined_details)


class EntityNotFoundError(GameEngineError):
    """Raised when an operation references an entity that does not exist."""

    default_code = "ENTITY_NOT_FOUND"

    def __init__(
        self,
        message: str,
        *,
        entity_type: str | None = None,
        entity_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize not-found error with entity context.

        Args:
            message: Human-readable error description.
            entity_type: Kind of entity that was looked up.
            entity_id: Identifier that could not be resolved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if entity_type:
            combined_details["entity_type"] = entity_type
        if entity_id:
            combined_details["entity_id"] = entity_id
        super().__init__(message, details=combined_details)


class DiceRollError(GameEngineError):
    """Raised when a dice expression cannot be parsed or rolled."""

    default_code = "DICE_ROLL_FAILED"

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize dice roll error with expression context.

        Args:
            message: Human-readable error description.
            expression: The dice expression that failed.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if expression:
            combined_details["expression"] = expression
        super().__init__(message, details=combined_details)


# =============================================================================
# Serialization Exceptions
# =============================================================================


class SerializationError(HollowGearError):
    """Base exception for snapshot, diff, patch and migration failures."""

    default_code = "SERIALIZATION_ERROR"


class SnapshotFormatError(SerializationError):
    """Raised when a snapshot document is malformed or cannot be rehydrated."""

    default_code = "MALFORMED_SNAPSHOT"


class MigrationError(SerializationError):
    """Raised when a snapshot cannot be migrated to the current version."""

    default_code = "NO_MIGRATION_PATH"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        from_version: str | None = None,
        to_version: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize migration error with version context.

        Args:
            message: Human-readable error description.
            code: NO_MIGRATION_PATH or MIGRATION_FAILED.
            from_version: Version the failing step started from.
            to_version: Version the caller was migrating to.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if from_version:
            combined_details["from_version"] = from_version
        if to_version:
            combined_details["to_version"] = to_version
        super().__init__(message, code=code, details=combined_details)


class ChecksumMismatchError(SerializationError):
    """Raised when a patched document does not hash to the declared checksum."""

    default_code = "CHECKSUM_MISMATCH"

    def __init__(
        self,
        message: str,
        *,
        expected: str | None = None,
        actual: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize checksum error with both digests.

        Args:
            message: Human-readable error description.
            expected: Checksum declared by the patch.
            actual: Checksum computed from the patched document.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if expected:
            combined_details["expected"] = expected
        if actual:
            combined_details["actual"] = actual
        super().__init__(message, details=combined_details)


class PatchApplicationError(SerializationError):
    """Raised when a patch change cannot be replayed against a document."""

    default_code = "PATCH_FAILED"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize patch error with the offending path.

        Args:
            message: Human-readable error description.
            code: PATCH_FAILED or PATCH_TARGET_MISMATCH.
            path: Rendered path of the change that failed.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if path is not None:
            combined_details["path"] = path
        super().__init__(message, code=code, details=combined_details)


__all__ = [
    # Base exception
    "HollowGearError",
    # Configuration & validation
    "ConfigurationError",
    "ValidationError",
    "SnapshotValidationError",
    # Game engine
    "GameEngineError",
    "InvalidGameStateError",
    "EntityNotFoundError",
    "DiceRollError",
    # Serialization
    "SerializationError",
    "SnapshotFormatError",
    "MigrationError",
    "ChecksumMismatchError",
    "PatchApplicationError",
]
