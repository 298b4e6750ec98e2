"""Structural diff between two snapshot documents.

Lists are compared position by position. Reordering a list therefore
shows up as a run of per-index updates rather than a move, and a patch
built from such a diff only replays cleanly against the exact base it
was computed from.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from hollow_gear.models.base import EngineModel
from hollow_gear.models.enums import ChangeType
from hollow_gear.serialization.document import JsonValue, Path, format_path


class _Missing:
    """Marker for a key that is absent, as opposed to present with None."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


class Change(EngineModel):
    """One structural change between two documents.

    ``old_value`` is meaningless for create and add changes, and
    ``new_value`` for delete and remove changes; both are left as None.

    Attributes:
        path: Field names and list indices leading to the changed value.
        type: Kind of change.
        old_value: Value before the change.
        new_value: Value after the change.
    """

    path: tuple[str | int, ...]
    type: ChangeType
    old_value: Any = None
    new_value: Any = None

    @property
    def rendered_path(self) -> str:
        """Path in ``a.b[2].c`` form."""
        return format_path(self.path)


@dataclass(frozen=True)
class ChangeTrackingResult:
    """Changes found between two documents.

    Attributes:
        changes: Changes in replay order.
        has_changes: Whether anything differs.
        summary: Count of changes per type; every type is present.
    """

    changes: tuple[Change, ...]
    has_changes: bool
    summary: dict[ChangeType, int]


def _same_value(old: JsonValue, new: JsonValue) -> bool:
    # 1, 1.0 and True are distinct document values.
    return type(old) is type(new) and old == new


def _compare(path: Path, old: Any, new: Any, changes: list[Change]) -> None:
    if old is MISSING and new is MISSING:
        return
    if old is MISSING:
        changes.append(Change(path=path, type=ChangeType.CREATE, new_value=new))
        return
    if new is MISSING:
        changes.append(Change(path=path, type=ChangeType.DELETE, old_value=old))
        return

    if isinstance(old, Mapping) and isinstance(new, Mapping):
        for key in [*old.keys(), *(k for k in new.keys() if k not in old)]:
            _compare((*path, key), old.get(key, MISSING), new.get(key, MISSING), changes)
        return

    if isinstance(old, list) and isinstance(new, list):
        _compare_lists(path, old, new, changes)
        return

    if not _same_value(old, new):
        changes.append(
            Change(path=path, type=ChangeType.UPDATE, old_value=old, new_value=new)
        )


def _compare_lists(path: Path, old: list[Any], new: list[Any], changes: list[Change]) -> None:
    common = min(len(old), len(new))
    for index in range(common):
        _compare((*path, index), old[index], new[index], changes)
    for index in range(common, len(new)):
        changes.append(Change(path=(*path, index), type=ChangeType.ADD, new_value=new[index]))
    # Highest index first so each removal leaves earlier indices valid.
    for index in range(len(old) - 1, common - 1, -1):
        changes.append(Change(path=(*path, index), type=ChangeType.REMOVE, old_value=old[index]))


def track_changes(old: Mapping[str, Any], new: Mapping[str, Any]) -> ChangeTrackingResult:
    """Diff two documents recursively.

    Args:
        old: Base document.
        new: Changed document.

    Returns:
        ChangeTrackingResult listing every change in replay order.

    Example:
        >>> result = track_changes({"hp": 10, "tags": ["a"]}, {"hp": 7, "tags": []})
        >>> [(c.rendered_path, c.type.value) for c in result.changes]
        [('hp', 'update'), ('tags[0]', 'remove')]
    """
    changes: list[Change] = []
    _compare((), old, new, changes)

    summary = {change_type: 0 for change_type in ChangeType}
    for change in changes:
        summary[change.type] += 1

    return ChangeTrackingResult(
        changes=tuple(changes),
        has_changes=bool(changes),
        summary=summary,
    )


__all__ = [
    "MISSING",
    "Change",
    "ChangeTrackingResult",
    "track_changes",
]
