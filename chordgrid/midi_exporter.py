"""MidiExporter: Converts a chord grid document into a 2-track MIDI file."""

import logging

from midiutil import MIDIFile

from chordgrid.chord_model import try_parse
from chordgrid.grid_models import Document
from chordgrid.voicing_strategy import Grade1Voicer, GridChordEvent, VoicedChord, VoicingStrategy

logger = logging.getLogger(__name__)

# In midiutil Format 1 MIDI, track 0 is the conductor/tempo track.
# Tracks 1 and 2 are the data tracks rendered as staves.
TRACK_CONDUCTOR = 0  # Tempo and time signature only, never notes
TRACK_RH = 1         # Right Hand / Chords: treble clef
TRACK_LH = 2         # Left Hand / Bass: bass clef

# General MIDI channel assignments
CHANNEL_RH = 0
CHANNEL_LH = 1


def collect_events(document: Document, beats_per_measure: int = 4) -> list[GridChordEvent]:
    """
    Lay the grid out on a beat timeline, parts in order then measures in order.

    Each measure lasts ``beats_per_measure`` beats; a split measure gives each
    of its two chords half of that. Empty or unrecognised slots become rests.
    """
    events: list[GridChordEvent] = []
    position = 0.0
    for part in document.parts:
        for measure in part.measures:
            slots = measure.content.slots
            slot_beats = beats_per_measure / len(slots)
            for offset, symbol in enumerate(slots):
                parsed = try_parse(symbol)
                if parsed is not None:
                    events.append(
                        GridChordEvent(
                            chord=parsed,
                            start_beat=position + offset * slot_beats,
                            duration_beats=slot_beats,
                        )
                    )
            position += beats_per_measure
    return events


class MidiExporter:
    """
    Plays a chord grid document back as a Standard MIDI File.

    Tracks
    ------
    0: conductor (tempo and meter)
    1: "Right Hand (Chords)", the voiced chord of every filled slot
    2: "Left Hand (Bass)", the bass root; empty for Grade 1 voicings

    Timing
    ------
    Grid positions are already in beats, so the document tempo only goes
    into the conductor track. A tempo of 0 (unset) falls back to
    ``DEFAULT_TEMPO``.
    """

    DEFAULT_TEMPO = 120    # BPM
    DEFAULT_VELOCITY = 80  # MIDI velocity for right-hand notes  (0-127)
    BASS_VELOCITY = 68     # Slightly softer left-hand bass notes

    def __init__(
        self,
        voicer: VoicingStrategy | None = None,
        beats_per_measure: int = 4,
        velocity: int = DEFAULT_VELOCITY,
    ) -> None:
        """
        Args:
            voicer:            Voicing strategy; Grade 1 when omitted.
            beats_per_measure: Length of one grid measure in beats.
            velocity:          MIDI note-on velocity for right-hand chord notes.
        """
        if beats_per_measure < 1:
            raise ValueError(f"beats_per_measure must be at least 1, got {beats_per_measure}")
        self.voicer = voicer or Grade1Voicer()
        self.beats_per_measure = beats_per_measure
        self.velocity = velocity

    def voice_document(self, document: Document) -> list[VoicedChord]:
        return [self.voicer.voice(event) for event in collect_events(document, self.beats_per_measure)]

    def export(self, document: Document, output_path: str) -> int:
        """
        Render the document to a Standard MIDI File (SMF format 1, 2 tracks).

        Args:
            document:    Chord grid to write.
            output_path: Destination file path (e.g. "song.mid").

        Returns:
            Number of chords written.

        Raises:
            OSError: If the output file cannot be opened for writing.
        """
        voiced_chords = self.voice_document(document)
        tempo = document.tempo or self.DEFAULT_TEMPO

        midi = MIDIFile(numTracks=3, removeDuplicates=False, deinterleave=False)

        # --- Track 0: conductor (tempo and meter only) ---
        midi.addTempo(TRACK_CONDUCTOR, 0, tempo)
        # Denominator is a power of two: 2 → quarter-note beats
        midi.addTimeSignature(TRACK_CONDUCTOR, 0, self.beats_per_measure, 2, 24)

        midi.addTrackName(TRACK_RH, 0, "Right Hand (Chords)")
        midi.addTrackName(TRACK_LH, 0, "Left Hand (Bass)")

        for vc in voiced_chords:
            for pitch in vc.left_hand_notes:
                midi.addNote(
                    track=TRACK_LH,
                    channel=CHANNEL_LH,
                    pitch=pitch,
                    time=vc.event.start_beat,
                    duration=vc.event.duration_beats,
                    volume=self.BASS_VELOCITY,
                )

            for pitch in vc.right_hand_notes:
                midi.addNote(
                    track=TRACK_RH,
                    channel=CHANNEL_RH,
                    pitch=pitch,
                    time=vc.event.start_beat,
                    duration=vc.event.duration_beats,
                    volume=self.velocity,
                )

        with open(output_path, "wb") as f:
            midi.writeFile(f)
        logger.info("Wrote %d chord(s) to %s at %d BPM", len(voiced_chords), output_path, tempo)
        return len(voiced_chords)
