"""Unit tests for the grid document models and their dict form."""

import pytest

from chordgrid.chord_model import SingleChord, SplitChord
from chordgrid.errors import GridFormatError
from chordgrid.grid_models import Document, Measure, Part


def _sample_document() -> Document:
    intro = Part.empty("Intro", 4, 2, part_id="intro")
    intro.measures[0].chord1 = "Am7"
    intro.measures[1] = Measure(chord1="C", chord2="G", split=True, oval=True)
    chorus = Part.empty("Chorus", 3, 3, part_id="chorus")
    chorus.measures[2].chord1 = "F#m"
    return Document(title="Demo", tempo=96, comments="Capo 2", parts=[intro, chorus])


# ---------------------------------------------------------------------------
# Measure
# ---------------------------------------------------------------------------

def test_measure_content_single_ignores_second_slot() -> None:
    measure = Measure(chord1="C", chord2="G", split=False)
    assert measure.content == SingleChord("C")


def test_measure_content_split() -> None:
    measure = Measure(chord1="C", chord2="G", split=True)
    assert measure.content == SplitChord("C", "G")


def test_set_single_content_preserves_hidden_slot() -> None:
    measure = Measure(chord1="C", chord2="G", split=True)
    measure.set_content(SingleChord("Dm"))
    assert measure.chord1 == "Dm"
    assert measure.chord2 == "G"
    assert measure.split is False


def test_measure_is_empty() -> None:
    assert Measure().is_empty
    assert Measure(chord1="  ", chord2="G").is_empty
    assert not Measure(chord1="", chord2="G", split=True).is_empty


def test_measure_from_legacy_split_chord() -> None:
    measure = Measure.from_dict({"chord": "C | G", "split": True})
    assert measure == Measure(chord1="C", chord2="G", split=True)


def test_measure_from_legacy_unsplit_chord_keeps_text() -> None:
    assert Measure.from_dict({"chord": "Am", "split": False}) == Measure(chord1="Am")


def test_measure_from_dict_rejects_non_object() -> None:
    with pytest.raises(GridFormatError):
        Measure.from_dict("C")


# ---------------------------------------------------------------------------
# Part
# ---------------------------------------------------------------------------

def test_empty_part_has_total_measures() -> None:
    part = Part.empty("Verse", 6, 4)
    assert len(part.measures) == part.measures_total == 6
    assert all(m.is_empty for m in part.measures)


def test_empty_part_clamps_measures_per_line() -> None:
    assert Part.empty("Verse", 4, 25).measures_per_line == 10


def test_part_reconciles_mismatched_measure_list() -> None:
    part = Part(id="x", name="X", measures_total=3, measures=[Measure("C")])
    assert len(part.measures) == 3
    assert part.measures[0].chord1 == "C"


@pytest.mark.parametrize("sizes", [[1, 5, 2], [8, 8, 3, 12], [200, 1, 7]])
def test_resize_keeps_length_equal_to_total(sizes: list[int]) -> None:
    part = Part.empty("Verse", 4)
    for size in sizes:
        part.resize(size)
        assert len(part.measures) == part.measures_total == size


def test_shrink_then_grow_loses_truncated_content() -> None:
    part = Part.empty("Verse", 4)
    part.measures[3].chord1 = "E7"
    part.resize(2)
    part.resize(4)
    assert part.measures[3] == Measure()


def test_resize_below_one_raises() -> None:
    with pytest.raises(ValueError):
        Part.empty("Verse", 4).resize(0)


def test_part_lines_groups_by_measures_per_line() -> None:
    part = Part.empty("Verse", 10, 4)
    assert [len(line) for line in part.lines()] == [4, 4, 2]


def test_part_copy_with_new_id_is_independent() -> None:
    part = Part.empty("Verse", 2, part_id="a")
    clone = part.copy(part_id="b")
    clone.measures[0].chord1 = "D"
    assert clone.id == "b"
    assert part.measures[0].chord1 == ""


def test_part_from_dict_clamps_counts() -> None:
    part = Part.from_dict({"id": "p", "name": "P", "measuresTotal": 500, "measuresPerLine": 15, "measures": []})
    assert part.measures_total == 200
    assert len(part.measures) == 200
    assert part.measures_per_line == 10


def test_part_from_dict_defaults_total_to_measure_count() -> None:
    part = Part.from_dict({"id": "p", "name": "P", "measures": [{"chord1": "C"}, {"chord1": "D"}]})
    assert part.measures_total == 2


def test_part_from_dict_mints_missing_id() -> None:
    part = Part.from_dict({"name": "P", "measuresTotal": 1, "measures": []})
    assert part.id


def test_part_from_dict_rejects_non_list_measures() -> None:
    with pytest.raises(GridFormatError):
        Part.from_dict({"id": "p", "name": "P", "measures": "C G"})


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------

def test_document_round_trip_preserves_everything() -> None:
    document = _sample_document()
    assert Document.from_dict(document.to_dict()) == document


def test_document_dict_uses_file_field_names() -> None:
    data = _sample_document().to_dict()
    assert set(data) == {"title", "tempo", "comments", "parts"}
    assert set(data["parts"][0]) == {"id", "name", "measuresTotal", "measuresPerLine", "measures"}
    assert data["parts"][0]["measures"][1] == {"chord1": "C", "chord2": "G", "split": True, "oval": True}


def test_document_copy_shares_no_state() -> None:
    document = _sample_document()
    clone = document.copy()
    clone.parts[0].measures[0].chord1 = "Bb"
    clone.parts.pop()
    clone.title = "Other"
    assert document == _sample_document()


@pytest.mark.parametrize("data", [{}, {"parts": None}, {"parts": "Intro"}, {"parts": {"id": "x"}}])
def test_document_from_dict_requires_parts_list(data: dict) -> None:
    with pytest.raises(GridFormatError):
        Document.from_dict(data)


def test_document_from_dict_rejects_non_object() -> None:
    with pytest.raises(GridFormatError):
        Document.from_dict(["parts"])


def test_document_from_dict_coerces_bad_tempo_to_zero() -> None:
    assert Document.from_dict({"tempo": "fast", "parts": []}).tempo == 0
    assert Document.from_dict({"tempo": -40, "parts": []}).tempo == 0


def test_document_rejects_negative_tempo() -> None:
    with pytest.raises(ValueError):
        Document(tempo=-1)
