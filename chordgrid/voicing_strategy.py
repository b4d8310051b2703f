"""VoicingStrategy: Strategy pattern for mapping grid chords to MIDI note sets."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from chordgrid.chord_model import ParsedChord

# ── MIDI constants ──────────────────────────────────────────────────────────
SEMITONES_PER_OCTAVE = 12

# The grid scale starts on A; MIDI pitch classes start on C (A = 9)
GRID_TO_MIDI_OFFSET = 9


def pitch_class_to_midi(pitch_class: int, octave: int) -> int:
    """
    Convert a MIDI pitch class (0-11, 0=C) and an octave number to an absolute MIDI note.

    MIDI octave numbering: C-1 = 0, C0 = 12, C1 = 24, ... C4 (Middle C) = 60.
    """
    return (octave + 1) * SEMITONES_PER_OCTAVE + pitch_class


# ── Interval tables ─────────────────────────────────────────────────────────

#: Suffix prefixes and their chord tones, most specific first
QUALITY_INTERVALS: list[tuple[str, list[int]]] = [
    ("°7", [0, 3, 6, 9]),
    ("dim7", [0, 3, 6, 9]),
    ("maj7", [0, 4, 7, 11]),
    ("M7", [0, 4, 7, 11]),
    ("m7", [0, 3, 7, 10]),
    ("sus2", [0, 2, 7]),
    ("sus4", [0, 5, 7]),
    ("dim", [0, 3, 6]),
    ("°", [0, 3, 6]),
    ("m", [0, 3, 7]),
    ("7", [0, 4, 7, 10]),
    ("5", [0, 7]),
]

#: Root position major triad: root, major-3rd (+4), perfect-5th (+7)
MAJOR_INTERVALS: list[int] = [0, 4, 7]


def chord_intervals(suffix: str) -> list[int]:
    """Semitone intervals above the root implied by a chord suffix (major by default)."""
    for prefix, intervals in QUALITY_INTERVALS:
        if suffix.startswith(prefix):
            return intervals
    return MAJOR_INTERVALS


@dataclass
class GridChordEvent:
    """
    One chord of the grid placed on the timeline.

    Attributes:
        chord:          Parsed chord symbol.
        start_beat:     Start position in beats from the top of the document.
        duration_beats: Length in beats.
    """

    chord: ParsedChord
    start_beat: float
    duration_beats: float

    @property
    def root(self) -> int:
        """MIDI pitch class of the root (0=C)."""
        return (self.chord.pitch_class + GRID_TO_MIDI_OFFSET) % SEMITONES_PER_OCTAVE


@dataclass
class VoicedChord:
    """
    A chord event annotated with concrete MIDI note assignments.

    Attributes:
        event:            The GridChordEvent (chord and timing).
        right_hand_notes: MIDI note numbers for the right hand (treble track).
        left_hand_notes:  MIDI note numbers for the left hand (bass track).
                          Empty list for Grade 1.
    """

    event: GridChordEvent
    right_hand_notes: list[int] = field(default_factory=list)
    left_hand_notes: list[int] = field(default_factory=list)


# ── Abstract base ────────────────────────────────────────────────────────────

class VoicingStrategy(ABC):
    """
    Abstract Strategy for assigning MIDI pitches to a grid chord.

    Concrete subclasses implement ``voice()`` to produce different note
    layouts for different playing levels.
    """

    RH_OCTAVE = 4  # Middle C octave, C4 = MIDI 60

    def _right_hand(self, event: GridChordEvent) -> list[int]:
        root_midi = pitch_class_to_midi(event.root, self.RH_OCTAVE)
        return [root_midi + iv for iv in chord_intervals(event.chord.suffix)]

    @abstractmethod
    def voice(self, event: GridChordEvent) -> VoicedChord:
        """Map a GridChordEvent to a VoicedChord with concrete MIDI note numbers."""


# ── Concrete strategies ──────────────────────────────────────────────────────

class Grade1Voicer(VoicingStrategy):
    """
    Grade 1 voicing: root-position chord in the Middle C octave (C4), right hand only.

    The highest possible note is a major 7th above B4 (A#5 = 82).
    """

    def voice(self, event: GridChordEvent) -> VoicedChord:
        return VoicedChord(event=event, right_hand_notes=self._right_hand(event), left_hand_notes=[])


class Grade2Voicer(VoicingStrategy):
    """
    Grade 2 voicing: root-position chord (RH) plus the root one octave lower (LH).

    Left hand lives in octave 3 (C3 = MIDI 48 … B3 = MIDI 59).
    """

    LH_OCTAVE = 3

    def voice(self, event: GridChordEvent) -> VoicedChord:
        return VoicedChord(
            event=event,
            right_hand_notes=self._right_hand(event),
            left_hand_notes=[pitch_class_to_midi(event.root, self.LH_OCTAVE)],
        )
