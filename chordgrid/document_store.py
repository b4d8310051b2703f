"""DocumentStore: the single live document and every mutation applied to it."""

import json
import logging
import math
import re
from typing import Any

from chordgrid.chord_model import MeasureContent, is_valid_or_empty, parse_measure_text
from chordgrid.config import MAX_MEASURES_PER_LINE, MIN_MEASURES_PER_LINE, EditorConfig
from chordgrid.errors import GridFormatError, InvalidChordError, MeasureNotFoundError, PartNotFoundError
from chordgrid.grid_models import Document, Measure, Part, clamp, new_part_id
from chordgrid.transposer import transpose_document, transpose_measure, transpose_part

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

PartRef = str | int


def to_non_negative_int(value: Any) -> int:
    """
    Coerce form input (tempo, counts) to a non-negative integer.

    Leading digits are kept ("96 bpm" gives 96); anything unreadable or
    negative becomes 0.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(0, value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return 0
        return max(0, int(value))
    match = _LEADING_INT.match(str(value))
    if match is None:
        return 0
    return max(0, int(match.group(1)))


def invalid_chords(parts: list[Part]) -> list[tuple[Part, int, str]]:
    """
    List the chord slots that do not start with a recognised root.

    Hidden secondary slots of unsplit measures are not checked.

    Returns:
        ``(part, measure_index, slot_text)`` for each offending slot.
    """
    return [
        (part, index, slot)
        for part in parts
        for index, measure in enumerate(part.measures)
        for slot in measure.content.slots
        if not is_valid_or_empty(slot)
    ]


def log_invalid_chords(parts: list[Part], source: str) -> None:
    for part, index, slot in invalid_chords(parts):
        logger.warning("%s: part '%s', measure %d has unrecognised chord '%s'", source, part.name, index + 1, slot)


class DocumentStore:
    """
    Owns the live, mutable :class:`Document`.

    Every structural mutation of the grid goes through this class and keeps
    the model invariants: a part has exactly ``measures_total`` measures,
    ``measures_per_line`` stays in ``[1, 10]``, tempo is non-negative and
    part ids are never reused, even after the part is deleted.

    Parts are addressed by id (str) or by position (int). Mutations do not
    record history; the editor commits after each logical edit.
    """

    def __init__(self, document: Document | None = None, config: EditorConfig | None = None) -> None:
        self.config = config or EditorConfig()
        self._issued_ids: set[str] = set()
        self._document = Document()
        self.replace_document(document if document is not None else self.new_document())

    @property
    def document(self) -> Document:
        return self._document

    # ------------------------------------------------------------------
    # Document lifecycle
    # ------------------------------------------------------------------

    def new_document(self) -> Document:
        """Build a fresh document with the configured default parts."""
        cfg = self.config
        return Document(
            title=cfg.default_title,
            tempo=cfg.default_tempo,
            comments="",
            parts=[
                Part.empty(name, cfg.default_measures_total, cfg.default_measures_per_line,
                           part_id=self.mint_id())
                for name in cfg.default_part_names
            ],
        )

    def replace_document(self, document: Document) -> None:
        """
        Make ``document`` the live document.

        The store takes ownership of ``document``. Duplicate part ids inside it
        are re-minted so that ids stay unique.
        """
        seen: set[str] = set()
        for part in document.parts:
            if part.id in seen:
                old_id = part.id
                part.id = self.mint_id()
                logger.warning("Duplicate part id %s re-minted as %s", old_id, part.id)
            seen.add(part.id)
        self._issued_ids.update(seen)
        self._document = document

    def mint_id(self) -> str:
        """Return a part id never issued before by this store."""
        part_id = new_part_id()
        while part_id in self._issued_ids:
            part_id = new_part_id()
        self._issued_ids.add(part_id)
        return part_id

    # ------------------------------------------------------------------
    # Lookup helpers
    # ------------------------------------------------------------------

    def index_of(self, ref: PartRef) -> int:
        """
        Resolve a part id or position to a position.

        Raises:
            PartNotFoundError: If no such part exists.
        """
        parts = self._document.parts
        if isinstance(ref, int):
            if not 0 <= ref < len(parts):
                raise PartNotFoundError(f"Part index {ref} out of range (0-{len(parts) - 1})")
            return ref
        for index, part in enumerate(parts):
            if part.id == ref:
                return index
        raise PartNotFoundError(f"No part with id '{ref}'")

    def part(self, ref: PartRef) -> Part:
        return self._document.parts[self.index_of(ref)]

    def measure(self, ref: PartRef, index: int) -> Measure:
        """
        Raises:
            PartNotFoundError: If the part does not exist.
            MeasureNotFoundError: If ``index`` is outside the part.
        """
        part = self.part(ref)
        if not 0 <= index < len(part.measures):
            raise MeasureNotFoundError(
                f"Measure {index} out of range for part '{part.name}' (0-{len(part.measures) - 1})"
            )
        return part.measures[index]

    # ------------------------------------------------------------------
    # Part operations
    # ------------------------------------------------------------------

    def add_part(self, name: str | None = None, measures_total: int | None = None,
                 measures_per_line: int | None = None) -> Part:
        """Append an empty part with a fresh id."""
        cfg = self.config
        total = clamp(measures_total or cfg.default_measures_total, 1, cfg.max_measures_total)
        part = Part.empty(
            name or f"Part {len(self._document.parts) + 1}",
            total,
            measures_per_line or cfg.default_measures_per_line,
            part_id=self.mint_id(),
        )
        self._document.parts.append(part)
        logger.debug("Added part %s (%s)", part.id, part.name)
        return part

    def remove_part(self, ref: PartRef) -> Part:
        part = self._document.parts.pop(self.index_of(ref))
        logger.debug("Removed part %s (%s)", part.id, part.name)
        return part

    def move_part(self, source: int, target: int) -> None:
        """
        Move the part at ``source`` so it ends up at position ``target``.

        The relative order of all other parts is preserved; ``target`` is
        clamped into range.
        """
        parts = self._document.parts
        source = self.index_of(source)
        part = parts.pop(source)
        target = clamp(target, 0, len(parts))
        parts.insert(target, part)
        logger.debug("Moved part %s from %d to %d", part.id, source, target)

    def duplicate_part(self, ref: PartRef) -> Part:
        """Deep-copy a part under a new id, inserted right after the source."""
        index = self.index_of(ref)
        source = self._document.parts[index]
        duplicate = source.copy(part_id=self.mint_id())
        duplicate.name = f"{source.name} (copy)"
        self._document.parts.insert(index + 1, duplicate)
        logger.debug("Duplicated part %s as %s", source.id, duplicate.id)
        return duplicate

    def rename_part(self, ref: PartRef, name: str) -> None:
        self.part(ref).name = name

    def resize_part(self, ref: PartRef, total: Any) -> int:
        """
        Set a part's measure count, clamped to ``[1, max_measures_total]``.

        Growing appends empty measures, shrinking drops the tail.

        Returns:
            The measure count actually applied.
        """
        part = self.part(ref)
        applied = clamp(to_non_negative_int(total) or 1, 1, self.config.max_measures_total)
        part.resize(applied)
        logger.debug("Resized part %s to %d measure(s)", part.id, applied)
        return applied

    def set_measures_per_line(self, ref: PartRef, per_line: Any) -> int:
        """Set a part's layout width, clamped to ``[1, 10]``; returns the applied value."""
        applied = clamp(to_non_negative_int(per_line) or 1, MIN_MEASURES_PER_LINE, MAX_MEASURES_PER_LINE)
        self.part(ref).measures_per_line = applied
        return applied

    # ------------------------------------------------------------------
    # Measure operations
    # ------------------------------------------------------------------

    def edit_measure(self, ref: PartRef, index: int, text: str) -> Measure:
        """
        Replace a measure's chords from user text ("Am7" or "C|G").

        Raises:
            InvalidChordError: If any slot is not a valid chord; the measure
                is left unchanged.
        """
        return self.set_measure_content(ref, index, parse_measure_text(text))

    def set_measure_content(self, ref: PartRef, index: int, content: MeasureContent) -> Measure:
        """Validate and store a content variant in a measure."""
        for slot in content.slots:
            if not is_valid_or_empty(slot):
                raise InvalidChordError(slot)
        measure = self.measure(ref, index)
        measure.set_content(content)
        logger.debug("Edited measure %d of part %s: %r", index, self.part(ref).id, content)
        return measure

    def set_measure_split(self, ref: PartRef, index: int, split: bool | None = None) -> bool:
        """
        Set or toggle (``split=None``) a measure's split flag.

        Chord text in both slots is kept as is.
        """
        measure = self.measure(ref, index)
        measure.split = (not measure.split) if split is None else split
        return measure.split

    def clear_measure(self, ref: PartRef, index: int) -> None:
        """Reset a measure to the empty default."""
        part = self.part(ref)
        self.measure(ref, index)
        part.measures[index] = Measure()

    # ------------------------------------------------------------------
    # Transposition
    # ------------------------------------------------------------------

    def transpose_all(self, steps: int) -> None:
        transpose_document(self._document, steps)

    def transpose_part(self, ref: PartRef, steps: int) -> None:
        transpose_part(self.part(ref), steps)

    def transpose_measure(self, ref: PartRef, index: int, steps: int) -> None:
        transpose_measure(self.measure(ref, index), steps)

    # ------------------------------------------------------------------
    # Global fields
    # ------------------------------------------------------------------

    def set_title(self, title: str) -> None:
        self._document.title = title

    def set_tempo(self, tempo: Any) -> int:
        """Set the tempo, coercing unreadable or negative input to 0."""
        self._document.tempo = to_non_negative_int(tempo)
        return self._document.tempo

    def set_comments(self, comments: str) -> None:
        self._document.comments = comments

    # ------------------------------------------------------------------
    # Clipboard payloads
    # ------------------------------------------------------------------

    def part_payload(self, ref: PartRef) -> str:
        """Serialise one part as clipboard JSON."""
        return json.dumps(self.part(ref).to_dict(), ensure_ascii=False)

    def paste_payload(self, text: str) -> list[Part]:
        """
        Append parts from clipboard JSON: a single part or a whole document.

        Every pasted part gets a freshly minted id.

        Raises:
            GridFormatError: If ``text`` is not JSON of either shape; the
                document is left unchanged.
        """
        if not text or not text.strip():
            raise GridFormatError("Clipboard is empty")
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise GridFormatError(f"Clipboard content is not JSON: {exc}") from exc

        max_measures = self.config.max_measures_total
        if isinstance(payload, dict) and isinstance(payload.get("parts"), list):
            pasted = [Part.from_dict(p, max_measures=max_measures) for p in payload["parts"]]
        elif isinstance(payload, dict) and isinstance(payload.get("measures"), list):
            part = Part.from_dict(payload, max_measures=max_measures)
            part.name = f"{part.name} (pasted)"
            pasted = [part]
        else:
            raise GridFormatError("Clipboard content is not a part or a grid document")

        for part in pasted:
            part.id = self.mint_id()
        self._document.parts.extend(pasted)
        logger.debug("Pasted %d part(s)", len(pasted))
        log_invalid_chords(pasted, "Pasted")
        return pasted
