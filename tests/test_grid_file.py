"""Tests for JSON grid file save/load."""

import json
from pathlib import Path

import pytest

from chordgrid.errors import GridFormatError
from chordgrid.grid_file import document_from_json, document_to_json, load_document, save_document, title_to_filename
from chordgrid.grid_models import Document, Measure, Part


def _sample_document() -> Document:
    part = Part.empty("Refrain", 2, 2, part_id="r1")
    part.measures[0] = Measure(chord1="Eb", chord2="Bb", split=True)
    return Document(title="Été", tempo=88, comments="", parts=[part])


def test_save_then_load_round_trips(tmp_path: Path) -> None:
    document = _sample_document()
    path = save_document(document, tmp_path / "song.json")
    assert load_document(path) == document


def test_saved_file_is_readable_json(tmp_path: Path) -> None:
    path = save_document(_sample_document(), tmp_path / "song.json")
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["title"] == "Été"
    assert data["parts"][0]["measuresTotal"] == 2


def test_save_into_directory_derives_filename(tmp_path: Path) -> None:
    document = Document(title="AC/DC: Live", parts=[])
    path = save_document(document, tmp_path)
    assert path == tmp_path / "AC_DC_ Live.json"
    assert path.exists()


def test_title_to_filename() -> None:
    assert title_to_filename("My Song") == "My Song.json"
    assert title_to_filename("a\\b") == "a_b.json"
    assert title_to_filename("  ") == "grid.json"


def test_load_legacy_single_field_measures() -> None:
    text = json.dumps(
        {
            "title": "Old",
            "tempo": 100,
            "comments": "",
            "parts": [
                {
                    "id": "x",
                    "name": "Intro",
                    "measuresTotal": 2,
                    "measuresPerLine": 4,
                    "measures": [{"chord": "C | G", "split": True}, {"chord": "Am", "split": False}],
                }
            ],
        }
    )
    document = document_from_json(text)
    assert document.parts[0].measures == [Measure("C", "G", split=True), Measure("Am")]


@pytest.mark.parametrize("text", ["", "not json", "[]", '{"title": "x"}', '{"parts": "x"}'])
def test_invalid_content_is_rejected(text: str) -> None:
    with pytest.raises(GridFormatError):
        document_from_json(text)


def test_load_missing_file_raises_oserror(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        load_document(tmp_path / "missing.json")


def test_document_to_json_ends_with_newline() -> None:
    assert document_to_json(Document(parts=[])).endswith("}\n")


def test_load_non_utf8_file_is_a_format_error(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_bytes(b"\xff\xfe\x00garbage")
    with pytest.raises(GridFormatError):
        load_document(path)


def test_out_of_range_numbers_fall_back_to_defaults() -> None:
    text = '{"tempo": 1e400, "parts": [{"measuresTotal": 1e400, "measuresPerLine": -1e400, "measures": []}]}'
    document = document_from_json(text)
    part = document.parts[0]
    assert document.tempo == 0
    assert part.measures_total == 1
    assert part.measures_per_line == 4
