"""Transposer: shift chord symbols, measures and whole documents by semitones."""

import logging

from chordgrid.chord_model import ROOTS, SEMITONES, MeasureContent, SingleChord, SplitChord, try_parse
from chordgrid.grid_models import Document, Measure, Part

logger = logging.getLogger(__name__)


def transpose_chord(symbol: str, steps: int) -> str:
    """
    Transpose one chord symbol by ``steps`` semitones.

    The root is normalised to its canonical spelling, shifted around the
    12-step scale and re-spelled canonically; the suffix is kept verbatim.
    Blank input, unrecognised text and whole-octave shifts return ``symbol``
    unchanged, so user text is never lost. Whitespace around a chord is kept.

    Examples:
        >>> transpose_chord("C#m7", 1)
        'Dm7'
        >>> transpose_chord("Db7", 2)
        'Eb7'
    """
    if steps % SEMITONES == 0:
        return symbol
    parsed = try_parse(symbol)
    if parsed is None:
        return symbol
    leading = symbol[: len(symbol) - len(symbol.lstrip())]
    trailing = symbol[len(symbol.rstrip()):]
    return leading + ROOTS[(parsed.pitch_class + steps) % SEMITONES] + parsed.suffix + trailing


def transpose_content(content: MeasureContent, steps: int) -> MeasureContent:
    """Transpose every slot of a measure content variant independently."""
    if isinstance(content, SplitChord):
        return SplitChord(
            first=transpose_chord(content.first, steps),
            second=transpose_chord(content.second, steps),
        )
    return SingleChord(chord=transpose_chord(content.chord, steps))


def transpose_measure(measure: Measure, steps: int) -> None:
    """
    Transpose a measure in place.

    The secondary slot of an unsplit measure is hidden and left untouched.
    """
    measure.chord1 = transpose_chord(measure.chord1, steps)
    if measure.split:
        measure.chord2 = transpose_chord(measure.chord2, steps)


def transpose_part(part: Part, steps: int) -> None:
    """Transpose every measure of ``part`` in measure order."""
    for measure in part.measures:
        transpose_measure(measure, steps)


def transpose_document(document: Document, steps: int) -> None:
    """Transpose every measure of every part, in part order then measure order."""
    logger.debug("Transposing %d part(s) by %+d", len(document.parts), steps)
    for part in document.parts:
        transpose_part(part, steps)
