"""Snapshot persistence and synchronization.

Submodules:
    document: JSON value union, structured paths and the typed clone
    diff: Positional structural diff between documents
    patch: Checksum-guarded patch creation and replay
    snapshot: Serialize, deserialize and migrate snapshots
"""

from __future__ import annotations

from hollow_gear.serialization.diff import MISSING, Change, ChangeTrackingResult, track_changes
from hollow_gear.serialization.document import Document, JsonValue, Path, clone_document, format_path
from hollow_gear.serialization.patch import CharacterPatch, apply_patch, checksum, create_patch
from hollow_gear.serialization.snapshot import (
    Migration,
    MigrationRegistry,
    deserialize,
    serialize,
    to_snapshot,
)


__all__ = [
    # Documents
    "Document",
    "JsonValue",
    "Path",
    "clone_document",
    "format_path",
    # Diff
    "MISSING",
    "Change",
    "ChangeTrackingResult",
    "track_changes",
    # Patch
    "CharacterPatch",
    "checksum",
    "create_patch",
    "apply_patch",
    # Snapshot
    "Migration",
    "MigrationRegistry",
    "to_snapshot",
    "serialize",
    "deserialize",
]
