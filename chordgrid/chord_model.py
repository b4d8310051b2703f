"""Chord model: parse chord symbols into a canonical root plus a free-form suffix."""

from dataclasses import dataclass
from typing import Final, Union

from chordgrid.errors import InvalidChordError

# Canonical pitch-class spellings, in scale order (index 0 = A)
ROOTS: Final[tuple[str, ...]] = ("A", "Bb", "B", "C", "C#", "D", "Eb", "E", "F", "F#", "G", "Ab")

#: Alternate spellings mapped onto their canonical root
ENHARMONIC_ALIASES: Final[dict[str, str]] = {
    "A#": "Bb",
    "Cb": "B",
    "B#": "C",
    "Db": "C#",
    "D#": "Eb",
    "Fb": "E",
    "E#": "F",
    "Gb": "F#",
    "G#": "Ab",
}

#: Common chord qualities, shown as input hints only (suffixes are free text)
KNOWN_SUFFIXES: Final[tuple[str, ...]] = ("M7", "m", "7", "°7", "5", "sus2", "sus4")

#: Separator between the two chords of a split measure in text input
SPLIT_SEPARATOR: Final[str] = "|"

SEMITONES: Final[int] = len(ROOTS)

# Every recognised spelling with its canonical root. Canonical spellings come
# first, so a stable sort by length keeps scale order for equal-length ties.
_SPELLINGS: Final[list[tuple[str, str]]] = sorted(
    [(root, root) for root in ROOTS] + list(ENHARMONIC_ALIASES.items()),
    key=lambda item: -len(item[0]),
)


@dataclass(frozen=True)
class ParsedChord:
    """
    A chord symbol split at its root.

    Attributes:
        root:   Canonical root spelling, e.g. "C#" for both "C#m7" and "Dbm7".
        suffix: Remainder of the symbol, verbatim, e.g. "m7".
    """

    root: str
    suffix: str

    @property
    def pitch_class(self) -> int:
        """Index of the root in :data:`ROOTS`."""
        return ROOTS.index(self.root)

    @property
    def symbol(self) -> str:
        return f"{self.root}{self.suffix}"


@dataclass(frozen=True)
class SingleChord:
    """Measure content holding one chord symbol (possibly empty)."""

    chord: str = ""

    @property
    def slots(self) -> tuple[str, ...]:
        return (self.chord,)


@dataclass(frozen=True)
class SplitChord:
    """Measure content holding two chords sharing the measure."""

    first: str = ""
    second: str = ""

    @property
    def slots(self) -> tuple[str, ...]:
        return (self.first, self.second)


MeasureContent = Union[SingleChord, SplitChord]


def normalize_root(spelling: str) -> str:
    """
    Return the canonical spelling for a root, case-insensitively.

    Raises:
        InvalidChordError: If ``spelling`` is not a recognised root.
    """
    folded = spelling.strip().upper()
    for candidate, canonical in _SPELLINGS:
        if candidate.upper() == folded:
            return canonical
    raise InvalidChordError(spelling, f"Unknown root '{spelling}'.")


def try_parse(symbol: str) -> ParsedChord | None:
    """Parse ``symbol``, returning None for empty or unrecognised input."""
    text = symbol.strip()
    if not text:
        return None
    folded = text.upper()
    for candidate, canonical in _SPELLINGS:
        if folded.startswith(candidate.upper()):
            return ParsedChord(root=canonical, suffix=text[len(candidate):])
    return None


def parse(symbol: str) -> ParsedChord | None:
    """
    Parse a chord symbol into its canonical root and verbatim suffix.

    The longest recognised spelling prefixing the (trimmed) symbol wins, so
    "C#m7" is C# + "m7" rather than C + "#m7". Equal-length candidates are
    resolved in scale order, canonical spellings before aliases.

    Args:
        symbol: Chord text such as "Abm7" or "Db".

    Returns:
        The parsed chord, or None when ``symbol`` is empty ("no chord").

    Raises:
        InvalidChordError: If no recognised root prefixes ``symbol``.
    """
    if not symbol.strip():
        return None
    parsed = try_parse(symbol)
    if parsed is None:
        raise InvalidChordError(symbol)
    return parsed


def is_valid_or_empty(symbol: str) -> bool:
    """True iff ``symbol`` is blank or starts with a recognised root."""
    return not symbol.strip() or try_parse(symbol) is not None


def scale_index(root: str) -> int:
    """Pitch-class index of any recognised root spelling."""
    return ROOTS.index(normalize_root(root))


def parse_measure_text(text: str) -> MeasureContent:
    """
    Parse user input for one measure into its content variant.

    "Am7" gives a SingleChord, "C|G" a SplitChord. Each slot is trimmed and
    must be blank or a valid chord.

    Raises:
        InvalidChordError: If a slot is invalid or there are more than two slots.
    """
    slots = [slot.strip() for slot in text.split(SPLIT_SEPARATOR)]
    if len(slots) > 2:
        raise InvalidChordError(text, f"A measure holds at most two chords, got '{text.strip()}'.")
    for slot in slots:
        if not is_valid_or_empty(slot):
            accepted = ", ".join(ROOTS)
            raise InvalidChordError(slot, f"Invalid chord '{slot}'. Accepted roots: {accepted}.")
    if len(slots) == 2:
        return SplitChord(first=slots[0], second=slots[1])
    return SingleChord(chord=slots[0])
