"""GridEditor: composes the document store, undo history and clipboard."""

import logging
from typing import Callable, TypeVar

from chordgrid.clipboard import Clipboard
from chordgrid.config import EditorConfig
from chordgrid.document_store import DocumentStore, PartRef, log_invalid_chords
from chordgrid.grid_models import Document, Part
from chordgrid.history import History

logger = logging.getLogger(__name__)

T = TypeVar("T")
DocumentListener = Callable[[Document], None]


class GridEditor:
    """
    One editing session over a chord grid.

    The editor owns a :class:`DocumentStore` and a :class:`History` and keeps
    them in step: :meth:`perform` applies a store mutation and commits it,
    :meth:`undo`/:meth:`redo` swap a fresh copy of a snapshot into the store.
    Listeners registered with :meth:`add_listener` are called with the live
    document after every commit, undo, redo and load, so a front end can
    re-render.

    Text fields (title, comments, part names) are edited on the store
    directly while the user types and committed once with :meth:`commit` at
    the end of the edit, so that one user-visible edit is one undo step.

    Usage:

        editor = GridEditor()
        editor.perform(editor.store.edit_measure, 0, 0, "Am7")
        editor.undo()
    """

    def __init__(
        self,
        document: Document | None = None,
        config: EditorConfig | None = None,
        clipboard: Clipboard | None = None,
    ) -> None:
        self.config = config or EditorConfig()
        self.store = DocumentStore(document, config=self.config)
        self.history = History(capacity=self.config.history_capacity)
        self.clipboard = clipboard or Clipboard()
        self._listeners: list[DocumentListener] = []
        self.history.reset(self.store.document)

    @property
    def document(self) -> Document:
        """The live document (owned by the store; do not keep references across undo)."""
        return self.store.document

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def add_listener(self, listener: DocumentListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: DocumentListener) -> None:
        self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self.store.document)

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def commit(self) -> None:
        """Record the live document as one undo step."""
        self.history.commit(self.store.document)
        self._notify()

    def perform(self, operation: Callable[..., T], *args, **kwargs) -> T:
        """
        Run a store mutation and commit it.

        If ``operation`` raises, nothing is committed and the exception
        propagates; store operations validate before mutating, so the live
        document is unchanged in that case.
        """
        result = operation(*args, **kwargs)
        self.commit()
        return result

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def can_redo(self) -> bool:
        return self.history.can_redo()

    def undo(self) -> bool:
        """Restore the previous snapshot; False when there is nothing to undo."""
        document = self.history.undo()
        if document is None:
            return False
        self.store.replace_document(document)
        self._notify()
        return True

    def redo(self) -> bool:
        """Re-apply the next snapshot; False when there is nothing to redo."""
        document = self.history.redo()
        if document is None:
            return False
        self.store.replace_document(document)
        self._notify()
        return True

    # ------------------------------------------------------------------
    # Document lifecycle
    # ------------------------------------------------------------------

    def load(self, document: Document) -> None:
        """Replace the live document and restart history from it."""
        self.store.replace_document(document)
        self.history.reset(self.store.document)
        logger.info("Loaded document '%s' with %d part(s)", document.title, len(document.parts))
        log_invalid_chords(document.parts, "Loaded")
        self._notify()

    def new_document(self) -> None:
        self.load(self.store.new_document())

    # ------------------------------------------------------------------
    # Clipboard
    # ------------------------------------------------------------------

    def copy_part(self, ref: PartRef) -> None:
        """Put one part on the clipboard as JSON."""
        self.clipboard.copy(self.store.part_payload(ref))

    def paste(self) -> list[Part]:
        """
        Append the part(s) on the clipboard and commit.

        The clipboard is read before the document is touched; every pasted
        part gets a fresh id.

        Raises:
            ClipboardError: If nothing can be read from any clipboard.
            GridFormatError: If the clipboard text is not a part or document.
        """
        text = self.clipboard.paste()
        return self.perform(self.store.paste_payload, text)
