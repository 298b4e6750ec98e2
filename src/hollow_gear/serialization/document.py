"""JSON document values, structured paths and the typed clone.

A snapshot document only ever holds the JSON value union: dicts with
string keys, lists, strings, ints, floats, booleans and None. Paths into
a document are tuples of field names and list indices, rendered as
``a.b[2].c`` only for display.
"""

from __future__ import annotations

from typing import Any, TypeAlias, Union

from hollow_gear.core.exceptions import SnapshotFormatError


JsonPrimitive: TypeAlias = Union[str, int, float, bool, None]
JsonValue: TypeAlias = Union[JsonPrimitive, list["JsonValue"], dict[str, "JsonValue"]]
Document: TypeAlias = dict[str, JsonValue]
PathStep: TypeAlias = Union[str, int]
Path: TypeAlias = tuple[PathStep, ...]

_PRIMITIVE_TYPES = (str, int, float, bool, type(None))


def clone_document(value: Any, path: Path = ()) -> JsonValue:
    """Deep-copy a JSON value, checking every node on the way.

    Args:
        value: Value to clone.
        path: Location of ``value``, used in error messages.

    Returns:
        An independent copy sharing no containers with ``value``.

    Raises:
        SnapshotFormatError: If any node is not a JSON value.

    Example:
        >>> clone_document({"a": [1, {"b": None}]})
        {'a': [1, {'b': None}]}
    """
    if isinstance(value, _PRIMITIVE_TYPES):
        return value
    if isinstance(value, list):
        return [clone_document(item, (*path, index)) for index, item in enumerate(value)]
    if isinstance(value, dict):
        cloned: dict[str, JsonValue] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise SnapshotFormatError(
                    "Document keys must be strings",
                    details={"path": format_path(path), "key": repr(key)},
                )
            cloned[key] = clone_document(item, (*path, key))
        return cloned
    raise SnapshotFormatError(
        f"Unsupported document value of type {type(value).__name__}",
        details={"path": format_path(path)},
    )


def format_path(path: Path) -> str:
    """Render a structured path for logs and error messages.

    Example:
        >>> format_path(("heatStress", "recentAccumulation", 2, "amount"))
        'heatStress.recentAccumulation[2].amount'
    """
    rendered = ""
    for step in path:
        if isinstance(step, int):
            rendered += f"[{step}]"
        elif rendered:
            rendered += f".{step}"
        else:
            rendered = step
    return rendered


__all__ = [
    "JsonPrimitive",
    "JsonValue",
    "Document",
    "PathStep",
    "Path",
    "clone_document",
    "format_path",
]
