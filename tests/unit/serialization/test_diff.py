"""Tests for structural document diffs."""

from __future__ import annotations

from hollow_gear.models.enums import ChangeType
from hollow_gear.serialization.diff import MISSING, track_changes


def _summary(result_changes: object) -> list[tuple[str, str]]:
    return [(c.rendered_path, c.type.value) for c in result_changes]  # type: ignore[attr-defined]


class TestTrackChanges:
    """Tests for track_changes."""

    def test_identical_documents(self) -> None:
        """Test identical documents produce no changes."""
        doc = {"id": "char-001", "hitPoints": {"current": 10}, "tags": ["a"]}

        result = track_changes(doc, {"id": "char-001", "hitPoints": {"current": 10}, "tags": ["a"]})

        assert not result.has_changes
        assert result.changes == ()
        assert set(result.summary.values()) == {0}
        assert set(result.summary) == set(ChangeType)

    def test_nested_update(self) -> None:
        """Test a nested scalar change is one update with both values."""
        result = track_changes(
            {"hitPoints": {"current": 10, "maximum": 10}},
            {"hitPoints": {"current": 7, "maximum": 10}},
        )

        (change,) = result.changes
        assert change.path == ("hitPoints", "current")
        assert change.type is ChangeType.UPDATE
        assert (change.old_value, change.new_value) == (10, 7)
        assert result.summary[ChangeType.UPDATE] == 1

    def test_create_and_delete(self) -> None:
        """Test added keys are creates and missing keys are deletes."""
        result = track_changes({"a": 1, "b": 2}, {"a": 1, "c": 3})

        assert _summary(result.changes) == [("b", "delete"), ("c", "create")]
        assert result.changes[0].old_value == 2
        assert result.changes[1].new_value == 3

    def test_none_is_a_value(self) -> None:
        """Test a key set to None differs from a missing key."""
        result = track_changes({"arcanist": None}, {"arcanist": {"heatPoints": 0}})

        (change,) = result.changes
        assert change.type is ChangeType.UPDATE
        assert change.old_value is None

    def test_type_strict_comparison(self) -> None:
        """Test 1, 1.0 and True are different values."""
        result = track_changes({"a": 1, "b": 1, "c": 0}, {"a": 1.0, "b": True, "c": 0})

        assert _summary(result.changes) == [("a", "update"), ("b", "update")]

    def test_list_growth(self) -> None:
        """Test appended items are adds in ascending order."""
        result = track_changes({"tags": ["a"]}, {"tags": ["a", "b", "c"]})

        assert _summary(result.changes) == [("tags[1]", "add"), ("tags[2]", "add")]

    def test_list_shrink(self) -> None:
        """Test dropped items are removes from the highest index down."""
        result = track_changes({"tags": ["a", "b", "c"]}, {"tags": ["a"]})

        assert _summary(result.changes) == [("tags[2]", "remove"), ("tags[1]", "remove")]
        assert result.summary[ChangeType.REMOVE] == 2

    def test_reorder_is_positional(self) -> None:
        """Test a reordered list is reported as per-index updates."""
        result = track_changes({"tags": ["a", "b"]}, {"tags": ["b", "a"]})

        assert _summary(result.changes) == [("tags[0]", "update"), ("tags[1]", "update")]

    def test_nested_list_items(self) -> None:
        """Test objects inside lists are compared field by field."""
        result = track_changes(
            {"powers": [{"id": "x", "left": 3}]},
            {"powers": [{"id": "x", "left": 2}]},
        )

        assert result.changes[0].path == ("powers", 0, "left")
        assert result.changes[0].rendered_path == "powers[0].left"

    def test_container_type_change(self) -> None:
        """Test a list replaced by an object is a single update."""
        result = track_changes({"x": [1]}, {"x": {"a": 1}})

        assert _summary(result.changes) == [("x", "update")]


class TestMissingMarker:
    """Tests for the missing-value marker."""

    def test_singleton_and_falsy(self) -> None:
        """Test MISSING is falsy and distinct from None."""
        assert not MISSING
        assert MISSING is not None
        assert repr(MISSING) == "MISSING"
