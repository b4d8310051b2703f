"""History: snapshot-based undo/redo over whole documents."""

import logging

from chordgrid.grid_models import Document

logger = logging.getLogger(__name__)


class History:
    """
    A bounded, linear list of document snapshots with a cursor.

    Every stored snapshot is an independent copy of the document passed to
    :meth:`commit`, and :meth:`undo`/:meth:`redo` hand out fresh copies, so
    neither the caller's live document nor later edits to it can reach the
    stored history.

    Granularity is decided by the caller: commit once per user-perceived
    edit (a button press, a structural action, a text field losing focus),
    never once per keystroke.

    Invariants
    ----------
    - ``-1 <= index < len(snapshots)``; ``index == -1`` only before the
      first commit.
    - After commit/undo/redo, ``snapshots[index]`` equals the live document.
    - ``len(snapshots) <= capacity``; the oldest snapshot is evicted first.
    """

    DEFAULT_CAPACITY = 200

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        """
        Args:
            capacity: Maximum number of snapshots kept (at least 1).
        """
        if capacity < 1:
            raise ValueError(f"History capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._snapshots: list[Document] = []
        self._index = -1

    def __len__(self) -> int:
        return len(self._snapshots)

    @property
    def index(self) -> int:
        return self._index

    def snapshot(self, position: int) -> Document:
        """Return a copy of the snapshot at ``position``."""
        return self._snapshots[position].copy()

    def commit(self, document: Document) -> None:
        """
        Record ``document`` as the newest state.

        Any redo branch beyond the cursor is discarded for good. When the
        history is full the oldest snapshot is evicted.
        """
        del self._snapshots[self._index + 1:]
        self._snapshots.append(document.copy())
        if len(self._snapshots) > self.capacity:
            self._snapshots.pop(0)
        self._index = len(self._snapshots) - 1
        logger.debug("Committed snapshot %d/%d", self._index + 1, len(self._snapshots))

    def can_undo(self) -> bool:
        return self._index > 0

    def can_redo(self) -> bool:
        return self._index < len(self._snapshots) - 1

    def undo(self) -> Document | None:
        """Step back one snapshot; returns a fresh copy, or None at the oldest."""
        if not self.can_undo():
            return None
        self._index -= 1
        logger.debug("Undo to snapshot %d/%d", self._index + 1, len(self._snapshots))
        return self._snapshots[self._index].copy()

    def redo(self) -> Document | None:
        """Step forward one snapshot; returns a fresh copy, or None at the newest."""
        if not self.can_redo():
            return None
        self._index += 1
        logger.debug("Redo to snapshot %d/%d", self._index + 1, len(self._snapshots))
        return self._snapshots[self._index].copy()

    def clear(self) -> None:
        self._snapshots.clear()
        self._index = -1

    def reset(self, document: Document) -> None:
        """Forget all history and seed it with ``document`` (used on load/new)."""
        self.clear()
        self.commit(document)
        logger.info("History reset")
