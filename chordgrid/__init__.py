"""ChordGrid: chord grid editor core with undo/redo and transposition."""

__version__ = "0.1.0"
