"""
Data models for a chord grid document.

A Document holds an ordered list of Parts; a Part holds exactly
``measures_total`` Measures. Models are plain mutable dataclasses owned by the
DocumentStore. ``copy()`` produces an independent structural deep copy, which
is what the undo history stores.

The dict form uses the field names of the saved JSON file:
``title, tempo, comments, parts[]`` and per part
``id, name, measuresTotal, measuresPerLine, measures[]`` with measures as
``{chord1, chord2, split, oval}``.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any

from chordgrid.chord_model import SPLIT_SEPARATOR, MeasureContent, SingleChord, SplitChord
from chordgrid.config import MAX_MEASURES_PER_LINE, MIN_MEASURES_PER_LINE
from chordgrid.errors import GridFormatError

DEFAULT_MAX_MEASURES = 200


def new_part_id() -> str:
    """Return a short random part id."""
    return uuid.uuid4().hex[:8]


def clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(upper, value))


def _as_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


@dataclass
class Measure:
    """
    One metrical unit of the grid.

    Attributes:
        chord1: Primary chord slot (the only meaningful slot unless split).
        chord2: Secondary chord slot, kept verbatim while the measure is unsplit.
        split:  True when the measure is shared by chord1 and chord2.
        oval:   Visual highlight flag, carried through untouched.
    """

    chord1: str = ""
    chord2: str = ""
    split: bool = False
    oval: bool = False

    @property
    def content(self) -> MeasureContent:
        """The meaningful chords of this measure as a tagged variant."""
        if self.split:
            return SplitChord(first=self.chord1, second=self.chord2)
        return SingleChord(chord=self.chord1)

    def set_content(self, content: MeasureContent) -> None:
        """Replace the chords; a SingleChord leaves the hidden second slot alone."""
        if isinstance(content, SplitChord):
            self.chord1, self.chord2 = content.first, content.second
            self.split = True
        else:
            self.chord1 = content.chord
            self.split = False

    @property
    def is_empty(self) -> bool:
        return not any(slot.strip() for slot in self.content.slots)

    def copy(self) -> "Measure":
        return Measure(chord1=self.chord1, chord2=self.chord2, split=self.split, oval=self.oval)

    def to_dict(self) -> dict[str, Any]:
        return {
            "chord1": self.chord1,
            "chord2": self.chord2,
            "split": self.split,
            "oval": self.oval,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Measure":
        """
        Build a Measure from either the two-slot shape or the legacy
        ``{chord, split}`` shape, where a split measure stores "A | B".
        """
        if not isinstance(data, dict):
            raise GridFormatError(f"Measure must be an object, got {type(data).__name__}")
        split = bool(data.get("split", False))
        if "chord1" in data or "chord2" in data:
            return cls(
                chord1=str(data.get("chord1") or ""),
                chord2=str(data.get("chord2") or ""),
                split=split,
                oval=bool(data.get("oval", False)),
            )
        chord = str(data.get("chord") or "")
        if split and SPLIT_SEPARATOR in chord:
            first, second = chord.split(SPLIT_SEPARATOR, 1)
            return cls(chord1=first.strip(), chord2=second.strip(), split=True)
        return cls(chord1=chord, split=split)


@dataclass
class Part:
    """
    A named section of the grid.

    ``measures`` always has exactly ``measures_total`` entries; use
    :meth:`resize` to change the count.
    """

    id: str
    name: str
    measures_total: int = 8
    measures_per_line: int = 4
    measures: list[Measure] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.measures_total < 1:
            raise ValueError(f"measures_total must be at least 1, got {self.measures_total}")
        if len(self.measures) != self.measures_total:
            self.resize(self.measures_total)

    @classmethod
    def empty(cls, name: str, measures_total: int = 8, measures_per_line: int = 4,
              part_id: str | None = None) -> "Part":
        """Create a part of ``measures_total`` empty measures."""
        return cls(
            id=part_id or new_part_id(),
            name=name,
            measures_total=measures_total,
            measures_per_line=clamp(measures_per_line, MIN_MEASURES_PER_LINE, MAX_MEASURES_PER_LINE),
            measures=[Measure() for _ in range(measures_total)],
        )

    def resize(self, total: int) -> None:
        """
        Grow with empty measures at the tail or truncate the tail.

        Truncated measures are discarded; growing back does not restore them.
        """
        if total < 1:
            raise ValueError(f"A part needs at least one measure, got {total}")
        if total > len(self.measures):
            self.measures.extend(Measure() for _ in range(total - len(self.measures)))
        else:
            del self.measures[total:]
        self.measures_total = total

    def lines(self) -> list[list[Measure]]:
        """Measures grouped into rows of ``measures_per_line``."""
        per_line = clamp(self.measures_per_line, MIN_MEASURES_PER_LINE, MAX_MEASURES_PER_LINE)
        return [self.measures[i:i + per_line] for i in range(0, len(self.measures), per_line)]

    def copy(self, part_id: str | None = None) -> "Part":
        return Part(
            id=part_id or self.id,
            name=self.name,
            measures_total=self.measures_total,
            measures_per_line=self.measures_per_line,
            measures=[m.copy() for m in self.measures],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "measuresTotal": self.measures_total,
            "measuresPerLine": self.measures_per_line,
            "measures": [m.to_dict() for m in self.measures],
        }

    @classmethod
    def from_dict(cls, data: Any, max_measures: int = DEFAULT_MAX_MEASURES) -> "Part":
        """
        Build a Part from its dict form.

        ``measuresTotal`` defaults to the number of stored measures and is
        clamped to ``[1, max_measures]``; ``measuresPerLine`` is clamped to
        ``[1, 10]``. Missing ids are minted.

        Raises:
            GridFormatError: If ``data`` or its ``measures`` have the wrong shape.
        """
        if not isinstance(data, dict):
            raise GridFormatError(f"Part must be an object, got {type(data).__name__}")
        raw_measures = data.get("measures", [])
        if not isinstance(raw_measures, list):
            raise GridFormatError("Part 'measures' must be a list")
        measures = [Measure.from_dict(m) for m in raw_measures]
        total = clamp(_as_int(data.get("measuresTotal"), len(measures) or 1), 1, max_measures)
        return cls(
            id=str(data.get("id") or new_part_id()),
            name=str(data.get("name") or "Part"),
            measures_total=total,
            measures_per_line=clamp(
                _as_int(data.get("measuresPerLine"), 4), MIN_MEASURES_PER_LINE, MAX_MEASURES_PER_LINE
            ),
            measures=measures,
        )


@dataclass
class Document:
    """The whole editable chord grid."""

    title: str = ""
    tempo: int = 120
    comments: str = ""
    parts: list[Part] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.tempo < 0:
            raise ValueError(f"Tempo must be non-negative, got {self.tempo}")

    def copy(self) -> "Document":
        """Independent structural deep copy; shares no mutable state with ``self``."""
        return Document(
            title=self.title,
            tempo=self.tempo,
            comments=self.comments,
            parts=[p.copy() for p in self.parts],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "tempo": self.tempo,
            "comments": self.comments,
            "parts": [p.to_dict() for p in self.parts],
        }

    @classmethod
    def from_dict(cls, data: Any, max_measures: int = DEFAULT_MAX_MEASURES) -> "Document":
        """
        Build a Document from its dict form.

        Raises:
            GridFormatError: If ``data`` is not an object or ``parts`` is
                missing or not a list.
        """
        if not isinstance(data, dict):
            raise GridFormatError(f"Document must be an object, got {type(data).__name__}")
        parts = data.get("parts")
        if not isinstance(parts, list):
            raise GridFormatError("Document 'parts' must be a list")
        return cls(
            title=str(data.get("title") or ""),
            tempo=max(0, _as_int(data.get("tempo"), 0)),
            comments=str(data.get("comments") or ""),
            parts=[Part.from_dict(p, max_measures=max_measures) for p in parts],
        )
