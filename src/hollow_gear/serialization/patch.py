"""Checksum-guarded patches between snapshot documents.

A patch carries the diff from a base document to a target document and
the checksum of the target. Replaying it against any other base yields a
different document, the checksums disagree and the patch is rejected.
This is the only admission check for concurrent writers: a writer whose
base is stale must re-diff against the latest document.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from datetime import datetime
from typing import Any, cast

from hollow_gear.core.config import get_settings
from hollow_gear.core.exceptions import ChecksumMismatchError, PatchApplicationError
from hollow_gear.core.logging import get_logger
from hollow_gear.models.base import EngineModel
from hollow_gear.models.enums import ChangeType
from hollow_gear.serialization.diff import Change, track_changes
from hollow_gear.serialization.document import Document, JsonValue, clone_document, format_path


logger = get_logger(__name__)


class CharacterPatch(EngineModel):
    """Incremental update from one character document to another.

    Attributes:
        id: Character the patch applies to.
        version: Schema version of the target document.
        timestamp: When the patch was created.
        changes: Changes in replay order.
        checksum: ``<algorithm>:<hexdigest>`` of the target document.
    """

    id: str
    version: str
    timestamp: datetime
    changes: tuple[Change, ...] = ()
    checksum: str


# =============================================================================
# Checksums
# =============================================================================


def canonical_json(document: Mapping[str, Any]) -> str:
    """Serialize with sorted keys and compact separators."""
    return json.dumps(document, sort_keys=True, separators=(",", ":"))


def checksum(document: Mapping[str, Any], algorithm: str | None = None) -> str:
    """Hash a document's canonical JSON.

    Args:
        document: Document to hash.
        algorithm: hashlib algorithm name. Defaults to the configured
            ``serialization.checksum_algorithm``.

    Returns:
        Checksum in ``<algorithm>:<hexdigest>`` form.

    Example:
        >>> checksum({"b": 1, "a": 2}) == checksum({"a": 2, "b": 1})
        True
    """
    name = algorithm or get_settings().serialization.checksum_algorithm
    digest = hashlib.new(name, canonical_json(document).encode("utf-8")).hexdigest()
    return f"{name}:{digest}"


def _verify_checksum(document: Document, declared: str) -> None:
    algorithm, separator, _ = declared.partition(":")
    if (
        not separator
        or algorithm not in hashlib.algorithms_available
        or algorithm.startswith("shake_")
    ):
        raise ChecksumMismatchError(
            "Patch checksum is not in <algorithm>:<hexdigest> form",
            expected=declared,
        )
    actual = checksum(document, algorithm)
    if actual != declared:
        raise ChecksumMismatchError(
            "Patch checksum mismatch - data may be corrupted",
            expected=declared,
            actual=actual,
        )


# =============================================================================
# Patch Creation & Replay
# =============================================================================


def create_patch(
    old: Mapping[str, Any],
    new: Mapping[str, Any],
    *,
    timestamp: datetime,
    algorithm: str | None = None,
) -> CharacterPatch:
    """Bundle the diff from ``old`` to ``new`` with the checksum of ``new``.

    Args:
        old: Base document.
        new: Target document.
        timestamp: Creation time of the patch.
        algorithm: Checksum algorithm; defaults to the configured one.

    Returns:
        CharacterPatch targeting ``new["id"]`` at ``new["version"]``.
    """
    result = track_changes(old, new)
    patch = CharacterPatch(
        id=new["id"],
        version=new["version"],
        timestamp=timestamp,
        changes=result.changes,
        checksum=checksum(new, algorithm),
    )
    logger.debug("Patch created", character_id=patch.id, changes=len(patch.changes))
    return patch


def _step_into(container: JsonValue, step: str | int, change: Change) -> JsonValue:
    if isinstance(container, dict) and isinstance(step, str) and step in container:
        return container[step]
    if (
        isinstance(container, list)
        and isinstance(step, int)
        and not isinstance(step, bool)
        and 0 <= step < len(container)
    ):
        return container[step]
    raise PatchApplicationError(
        f"Path does not exist in document at step {step!r}",
        path=change.rendered_path,
    )


def _apply_to_dict(parent: dict[str, JsonValue], key: str, change: Change) -> None:
    if change.type in (ChangeType.DELETE, ChangeType.REMOVE):
        if key not in parent:
            raise PatchApplicationError("Cannot delete a missing key", path=change.rendered_path)
        del parent[key]
        return
    parent[key] = clone_document(change.new_value, change.path)


def _apply_to_list(parent: list[JsonValue], index: int, change: Change) -> None:
    size = len(parent)
    if change.type in (ChangeType.DELETE, ChangeType.REMOVE):
        if not 0 <= index < size:
            raise PatchApplicationError("Cannot remove a missing index", path=change.rendered_path)
        del parent[index]
        return

    value = clone_document(change.new_value, change.path)
    if change.type == ChangeType.ADD and index == size:
        parent.append(value)
    elif change.type == ChangeType.ADD and 0 <= index < size:
        parent.insert(index, value)
    elif 0 <= index < size:
        parent[index] = value
    else:
        raise PatchApplicationError(
            f"Index {index} is out of range for a list of {size}",
            path=change.rendered_path,
        )


def _apply_change(document: Document, change: Change) -> None:
    if not change.path:
        raise PatchApplicationError("Changes to the document root are not supported", path="")

    parent: JsonValue = document
    for step in change.path[:-1]:
        parent = _step_into(parent, step, change)

    last = change.path[-1]
    if isinstance(parent, dict) and isinstance(last, str):
        _apply_to_dict(parent, last, change)
    elif isinstance(parent, list) and isinstance(last, int) and not isinstance(last, bool):
        _apply_to_list(parent, last, change)
    else:
        raise PatchApplicationError(
            f"Step {last!r} does not match a {type(parent).__name__}",
            path=change.rendered_path,
        )


def apply_patch(document: Mapping[str, Any], patch: CharacterPatch) -> Document:
    """Replay a patch against a document.

    The input document is never modified.

    Args:
        document: Base document the patch was computed against.
        patch: Patch to replay.

    Returns:
        The patched document.

    Raises:
        PatchApplicationError: If the patch targets another character
            (PATCH_TARGET_MISMATCH) or a change path is unreachable
            (PATCH_FAILED).
        ChecksumMismatchError: If the result does not hash to the patch
            checksum.
        SnapshotFormatError: If the document holds non-JSON values.
    """
    patched = cast(Document, clone_document(dict(document)))

    if patched.get("id") != patch.id:
        raise PatchApplicationError(
            "Patch targets a different character",
            code="PATCH_TARGET_MISMATCH",
            details={"document_id": patched.get("id"), "patch_id": patch.id},
        )

    for change in patch.changes:
        _apply_change(patched, change)
    patched["version"] = patch.version

    _verify_checksum(patched, patch.checksum)
    logger.info(
        "Patch applied",
        character_id=patch.id,
        changes=len(patch.changes),
        paths=[format_path(c.path) for c in patch.changes[:5]],
    )
    return patched


__all__ = [
    "CharacterPatch",
    "canonical_json",
    "checksum",
    "create_patch",
    "apply_patch",
]
