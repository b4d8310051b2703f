"""Tests for EditorConfig defaults and environment overrides."""

import pytest

from chordgrid.config import EditorConfig


def test_defaults() -> None:
    config = EditorConfig.from_env({})
    assert config.history_capacity == 200
    assert config.max_measures_total == 200
    assert config.default_part_names == ("Intro", "Verse", "Chorus")


def test_environment_overrides() -> None:
    config = EditorConfig.from_env({"CHORDGRID_HISTORY_CAPACITY": "25", "CHORDGRID_MAX_MEASURES": " 64 "})
    assert config.history_capacity == 25
    assert config.max_measures_total == 64


def test_blank_variables_keep_defaults() -> None:
    assert EditorConfig.from_env({"CHORDGRID_HISTORY_CAPACITY": "  "}) == EditorConfig()


@pytest.mark.parametrize("value", ["lots", "0"])
def test_invalid_capacity_is_rejected(value: str) -> None:
    with pytest.raises(ValueError):
        EditorConfig.from_env({"CHORDGRID_HISTORY_CAPACITY": value})
