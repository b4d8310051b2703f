"""Unit tests for the snapshot undo/redo history."""

import pytest

from chordgrid.grid_models import Document, Part
from chordgrid.history import History


def _doc(title: str) -> Document:
    return Document(title=title, parts=[Part.empty("Intro", 2, part_id="intro")])


def test_new_history_is_empty() -> None:
    history = History()
    assert len(history) == 0
    assert history.index == -1
    assert not history.can_undo()
    assert not history.can_redo()
    assert history.undo() is None
    assert history.redo() is None


def test_first_commit_seeds_history() -> None:
    history = History()
    history.commit(_doc("d0"))
    assert len(history) == 1
    assert history.index == 0
    assert not history.can_undo()


def test_undo_twice_returns_first_document() -> None:
    history = History()
    for title in ("d0", "d1", "d2"):
        history.commit(_doc(title))

    assert history.undo().title == "d1"
    assert history.undo().title == "d0"
    assert history.undo() is None
    assert history.index == 0


def test_redo_walks_forward() -> None:
    history = History()
    for title in ("d0", "d1", "d2"):
        history.commit(_doc(title))
    history.undo()
    history.undo()

    assert history.redo().title == "d1"
    assert history.redo().title == "d2"
    assert history.redo() is None


def test_commit_after_undo_discards_redo_branch() -> None:
    history = History()
    for title in ("d0", "d1", "d2"):
        history.commit(_doc(title))
    history.undo()
    history.undo()

    history.commit(_doc("d3"))

    assert not history.can_redo()
    assert history.redo() is None
    assert [history.snapshot(i).title for i in range(len(history))] == ["d0", "d3"]


def test_capacity_evicts_oldest_first() -> None:
    history = History(capacity=5)
    for i in range(10):
        history.commit(_doc(f"d{i}"))

    assert len(history) == 5
    assert history.index == 4
    assert [history.snapshot(i).title for i in range(5)] == ["d5", "d6", "d7", "d8", "d9"]


def test_default_capacity_overflow_keeps_capacity_snapshots() -> None:
    history = History()
    for i in range(history.capacity + 5):
        history.commit(_doc(f"d{i}"))

    assert len(history) == history.capacity == 200
    assert history.index == history.capacity - 1
    assert history.snapshot(0).title == "d5"
    assert history.snapshot(history.index).title == f"d{history.capacity + 4}"


def test_snapshot_is_not_affected_by_later_edits() -> None:
    history = History()
    live = _doc("d0")
    history.commit(live)

    live.title = "changed"
    live.parts[0].measures[0].chord1 = "C"

    stored = history.snapshot(0)
    assert stored.title == "d0"
    assert stored.parts[0].measures[0].chord1 == ""


def test_undo_returns_independent_copy() -> None:
    history = History()
    history.commit(_doc("d0"))
    history.commit(_doc("d1"))

    restored = history.undo()
    restored.parts[0].measures[0].chord1 = "G"
    history.redo()

    assert history.undo().parts[0].measures[0].chord1 == ""


def test_reset_clears_and_seeds() -> None:
    history = History()
    for title in ("d0", "d1", "d2"):
        history.commit(_doc(title))

    history.reset(_doc("loaded"))

    assert len(history) == 1
    assert history.index == 0
    assert not history.can_undo()
    assert history.snapshot(0).title == "loaded"


def test_capacity_must_be_positive() -> None:
    with pytest.raises(ValueError):
        History(capacity=0)
