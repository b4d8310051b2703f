"""Clipboard access with an in-process fallback buffer."""

import logging
from abc import ABC, abstractmethod

from chordgrid.errors import ClipboardError

logger = logging.getLogger(__name__)


class ClipboardBackend(ABC):
    """Platform clipboard access; implementations raise ClipboardError on failure."""

    @abstractmethod
    def read_text(self) -> str:
        """Return the clipboard text."""

    @abstractmethod
    def write_text(self, text: str) -> None:
        """Replace the clipboard text."""


class UnavailableClipboard(ClipboardBackend):
    """Backend used when no platform clipboard is wired in."""

    def read_text(self) -> str:
        raise ClipboardError("No platform clipboard available.")

    def write_text(self, text: str) -> None:
        raise ClipboardError("No platform clipboard available.")


class Clipboard:
    """
    Copy/paste text through a platform backend, remembering the last copy.

    When the platform clipboard is unavailable or denies access, reads fall
    back to the text of the last :meth:`copy` made in this process.

    Attributes:
        used_fallback: True when the most recent copy or paste had to use the
                       in-process buffer; callers use it to inform the user.
    """

    def __init__(self, backend: ClipboardBackend | None = None) -> None:
        self.backend = backend or UnavailableClipboard()
        self._last_copied: str | None = None
        self.used_fallback = False

    @property
    def has_content(self) -> bool:
        """True when a paste may succeed without asking the platform."""
        return self._last_copied is not None

    def copy(self, text: str) -> None:
        """Store ``text`` locally and try to publish it to the platform clipboard."""
        self._last_copied = text
        try:
            self.backend.write_text(text)
            self.used_fallback = False
        except ClipboardError as exc:
            self.used_fallback = True
            logger.warning("Clipboard write failed, kept local copy: %s", exc)

    def paste(self) -> str:
        """
        Return clipboard text, preferring the platform clipboard.

        Raises:
            ClipboardError: If the platform clipboard fails and nothing was
                copied in this process.
        """
        try:
            text = self.backend.read_text()
            self.used_fallback = False
            return text
        except ClipboardError as exc:
            if self._last_copied is None:
                raise
            self.used_fallback = True
            logger.warning("Clipboard read failed, using local copy: %s", exc)
            return self._last_copied
