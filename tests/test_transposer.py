"""Unit tests for chord and document transposition."""

import pytest

from chordgrid.chord_model import ROOTS, SingleChord, SplitChord
from chordgrid.grid_models import Document, Measure, Part
from chordgrid.transposer import (
    transpose_chord,
    transpose_content,
    transpose_document,
    transpose_measure,
)

CHORDS = [f"{root}{suffix}" for root in ROOTS for suffix in ("", "m7", "sus4")]
STEPS = [-13, -1, 0, 1, 5, 11, 24]


@pytest.mark.parametrize(
    ("symbol", "steps", "expected"),
    [
        ("C#m7", 1, "Dm7"),
        ("Ab", -1, "G"),
        ("C#", 2, "Eb"),
        ("Db7", 2, "Eb7"),
        ("A", -1, "Ab"),
        ("G", 1, "Ab"),
        ("Bb", 13, "B"),
        ("E", -13, "Eb"),
        ("fm", 1, "F#m"),
    ],
)
def test_transpose_chord(symbol: str, steps: int, expected: str) -> None:
    assert transpose_chord(symbol, steps) == expected


def test_transpose_empty_is_noop() -> None:
    assert transpose_chord("", 3) == ""
    assert transpose_chord("   ", 3) == "   "


def test_transpose_unrecognized_text_is_passed_through() -> None:
    assert transpose_chord("H7", 2) == "H7"
    assert transpose_chord("N.C.", -5) == "N.C."


def test_transpose_keeps_surrounding_whitespace() -> None:
    assert transpose_chord("  C ", 2) == "  D "
    assert transpose_chord(" Abm7", 1) == " Am7"


def test_transpose_zero_steps_is_identity_even_for_aliases() -> None:
    assert transpose_chord("Dbm", 0) == "Dbm"


def test_transpose_respells_aliases_canonically() -> None:
    assert transpose_chord(transpose_chord("Db", 1), -1) == "C#"


@pytest.mark.parametrize("chord", CHORDS)
def test_full_octave_is_identity(chord: str) -> None:
    assert transpose_chord(chord, 12) == chord
    assert transpose_chord(chord, -12) == chord


@pytest.mark.parametrize("chord", CHORDS)
def test_up_then_down_restores_chord(chord: str) -> None:
    assert transpose_chord(transpose_chord(chord, 1), -1) == chord


@pytest.mark.parametrize("chord", CHORDS)
@pytest.mark.parametrize("first", STEPS)
@pytest.mark.parametrize("second", STEPS)
def test_transpositions_compose_additively(chord: str, first: int, second: int) -> None:
    assert transpose_chord(transpose_chord(chord, first), second) == transpose_chord(chord, first + second)


# ---------------------------------------------------------------------------
# Measures and documents
# ---------------------------------------------------------------------------

def test_transpose_content_single() -> None:
    assert transpose_content(SingleChord("Am"), 3) == SingleChord("Cm")


def test_transpose_content_split_transposes_each_slot() -> None:
    assert transpose_content(SplitChord("C", "H"), 2) == SplitChord("D", "H")


def test_transpose_measure_split() -> None:
    measure = Measure(chord1="C", chord2="G7", split=True)
    transpose_measure(measure, 2)
    assert (measure.chord1, measure.chord2) == ("D", "A7")


def test_transpose_measure_leaves_hidden_second_slot() -> None:
    measure = Measure(chord1="C", chord2="G", split=False)
    transpose_measure(measure, 2)
    assert measure.chord1 == "D"
    assert measure.chord2 == "G"


def test_transpose_document_covers_every_part_and_measure() -> None:
    intro = Part(id="p1", name="Intro", measures_total=2, measures=[Measure("C"), Measure("")])
    verse = Part(id="p2", name="Verse", measures_total=1, measures=[Measure("Am", "F", split=True)])
    document = Document(title="Song", parts=[intro, verse])

    transpose_document(document, -2)

    assert [m.chord1 for m in intro.measures] == ["Bb", ""]
    assert (verse.measures[0].chord1, verse.measures[0].chord2) == ("Gm", "Eb")
