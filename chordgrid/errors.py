"""Exception types raised by the chord grid core."""


class ChordGridError(Exception):
    """Base class for every recoverable chord grid failure."""


class InvalidChordError(ChordGridError, ValueError):
    """A chord symbol whose root is not one of the recognised spellings."""

    def __init__(self, symbol: str, message: str | None = None) -> None:
        self.symbol = symbol
        super().__init__(message or f"Invalid chord '{symbol}'.")


class GridFormatError(ChordGridError, ValueError):
    """A document or clipboard payload that does not have the grid shape."""


class PartNotFoundError(ChordGridError, LookupError):
    """A part id or index that does not exist in the live document."""


class MeasureNotFoundError(ChordGridError, LookupError):
    """A measure index outside the part's measure range."""


class ClipboardError(ChordGridError, OSError):
    """The platform clipboard is unavailable or access was denied."""
