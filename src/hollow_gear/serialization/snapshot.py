"""Versioned character snapshots and schema migration.

A snapshot is the camelCase JSON document of a CharacterState. Loading a
snapshot written by an older schema walks an explicit MigrationRegistry
one link at a time until the current version is reached. There is no
global registry: callers build one and pass it in.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, cast

from pydantic import ValidationError as PydanticValidationError

from hollow_gear.core.config import get_settings
from hollow_gear.core.constants import CURRENT_SCHEMA_VERSION
from hollow_gear.core.exceptions import MigrationError, SnapshotFormatError, SnapshotValidationError
from hollow_gear.core.logging import get_logger
from hollow_gear.engine.character import validate_character
from hollow_gear.models.character import CharacterState
from hollow_gear.serialization.document import Document, clone_document


logger = get_logger(__name__)

REQUIRED_SNAPSHOT_FIELDS = ("id", "version", "created", "lastModified")
_SEMVER_PATTERN = re.compile(r"^\d+\.\d+\.\d+$")

MigrateFunction = Callable[[Document], Document]


# =============================================================================
# Migration Registry
# =============================================================================


@dataclass(frozen=True)
class Migration:
    """One upgrade step between adjacent schema versions.

    Attributes:
        from_version: Version the step accepts.
        to_version: Version the step produces.
        migrate: Pure function from an old document to a new one. The
            registry sets ``version`` after it returns.
    """

    from_version: str
    to_version: str
    migrate: MigrateFunction


@dataclass(frozen=True)
class MigrationRegistry:
    """Immutable map of schema versions to their upgrade step.

    Example:
        >>> registry = MigrationRegistry().with_migration(
        ...     Migration("0.9.0", "1.0.0", add_heat_stress)
        ... )
        >>> registry.has_path("0.9.0")
        True
    """

    migrations: Mapping[str, Migration] = field(default_factory=dict)

    def with_migration(self, migration: Migration) -> MigrationRegistry:
        """Return a registry that also contains ``migration``.

        Raises:
            MigrationError: If a step from the same version already exists.
        """
        if migration.from_version in self.migrations:
            raise MigrationError(
                f"A migration from {migration.from_version} is already registered",
                code="DUPLICATE_MIGRATION",
                from_version=migration.from_version,
            )
        return MigrationRegistry({**self.migrations, migration.from_version: migration})

    def get(self, from_version: str) -> Migration | None:
        """Look up the step that upgrades ``from_version``."""
        return self.migrations.get(from_version)

    def has_path(self, from_version: str, target: str = CURRENT_SCHEMA_VERSION) -> bool:
        """Check whether a complete chain leads to ``target``."""
        seen: set[str] = set()
        version = from_version
        while version != target:
            step = self.migrations.get(version)
            if step is None or version in seen:
                return False
            seen.add(version)
            version = step.to_version
        return True

    def migrate(self, document: Document, target: str = CURRENT_SCHEMA_VERSION) -> Document:
        """Upgrade a document to ``target`` one link at a time.

        Args:
            document: Snapshot document; it is not modified.
            target: Version to reach.

        Returns:
            A migrated copy of the document.

        Raises:
            MigrationError: NO_MIGRATION_PATH if a link is missing or the
                chain loops, MIGRATION_FAILED if a step raises.
        """
        current = cast(Document, clone_document(document))
        version = str(current.get("version"))
        seen: set[str] = set()

        while version != target:
            step = self.migrations.get(version)
            if step is None or version in seen:
                raise MigrationError(
                    f"No migration path found from version {version} to {target}",
                    from_version=version,
                    to_version=target,
                )
            seen.add(version)
            try:
                current = {**step.migrate(current), "version": step.to_version}
            except Exception as exc:
                raise MigrationError(
                    f"Migration from {step.from_version} to {step.to_version} failed: {exc}",
                    code="MIGRATION_FAILED",
                    from_version=step.from_version,
                    to_version=step.to_version,
                ) from exc
            logger.info("Snapshot migrated", from_version=version, to_version=step.to_version)
            version = step.to_version

        return current


# =============================================================================
# Serialize & Deserialize
# =============================================================================


def to_snapshot(character: CharacterState) -> Document:
    """Flatten a character to its snapshot document.

    Datetimes become ISO-8601 strings and keys are camelCase.
    """
    return character.to_document()


def serialize(character: CharacterState, *, indent: int | None = None) -> str:
    """Serialize a character to JSON text.

    Args:
        character: Character to serialize.
        indent: JSON indentation; defaults to ``serialization.indent``.

    Returns:
        The snapshot as a JSON string.
    """
    if indent is None:
        indent = get_settings().serialization.indent
    return json.dumps(to_snapshot(character), indent=indent)


def _parse(payload: str | bytes | Mapping[str, Any]) -> Document:
    if isinstance(payload, Mapping):
        return cast(Document, clone_document(dict(payload)))
    try:
        parsed = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise SnapshotFormatError(
            f"Snapshot is not valid JSON: {exc}",
            details={"original_error": str(exc)},
        ) from exc
    if not isinstance(parsed, dict):
        raise SnapshotFormatError(
            "Snapshot must be a JSON object",
            details={"type": type(parsed).__name__},
        )
    return cast(Document, parsed)


def _check_envelope(document: Document) -> None:
    missing = [key for key in REQUIRED_SNAPSHOT_FIELDS if not isinstance(document.get(key), str)]
    if missing:
        raise SnapshotFormatError(
            "Snapshot is missing required fields",
            details={"missing_fields": missing},
        )
    if not _SEMVER_PATTERN.match(cast(str, document["version"])):
        raise SnapshotFormatError(
            "Snapshot version is not a semantic version",
            details={"version": document["version"]},
        )


def deserialize(
    payload: str | bytes | Mapping[str, Any],
    *,
    registry: MigrationRegistry | None = None,
    validate: bool | None = None,
) -> CharacterState:
    """Load a character from a snapshot.

    Args:
        payload: JSON text or an already parsed document.
        registry: Migrations for older snapshots; empty when omitted.
        validate: Run ``validate_character`` on the result. Defaults to
            ``serialization.validate_on_load``.

    Returns:
        The rehydrated CharacterState.

    Raises:
        SnapshotFormatError: If the payload is malformed or does not
            describe a character.
        MigrationError: If the snapshot cannot be migrated.
        SnapshotValidationError: If validation finds any issue.
    """
    document = _parse(payload)
    _check_envelope(document)

    if document["version"] != CURRENT_SCHEMA_VERSION:
        document = (registry or MigrationRegistry()).migrate(document)

    try:
        character = CharacterState.model_validate(document)
    except PydanticValidationError as exc:
        raise SnapshotFormatError(
            "Snapshot does not describe a valid character",
            details={"errors": [error["loc"] for error in exc.errors()]},
        ) from exc

    if validate is None:
        validate = get_settings().serialization.validate_on_load
    if validate:
        result = validate_character(character)
        if not result.is_valid:
            raise SnapshotValidationError(
                "Snapshot failed character validation",
                issues=result.errors,
            )

    logger.debug("Snapshot loaded", character_id=character.id, version=character.version)
    return character


__all__ = [
    "REQUIRED_SNAPSHOT_FIELDS",
    "Migration",
    "MigrationRegistry",
    "to_snapshot",
    "serialize",
    "deserialize",
]
