"""Grid files: JSON save/load of chord grid documents."""

import json
import logging
import re
from pathlib import Path

from chordgrid.errors import GridFormatError
from chordgrid.grid_models import DEFAULT_MAX_MEASURES, Document

logger = logging.getLogger(__name__)

GRID_SUFFIX = ".json"


def title_to_filename(title: str) -> str:
    """Convert a document title to a grid filename.

    Path separators and colons become underscores; a blank title gives
    "grid.json".
    """
    sanitized = re.sub(r"[/\\:]", "_", title.strip())
    return f"{sanitized or 'grid'}{GRID_SUFFIX}"


def document_to_json(document: Document) -> str:
    return json.dumps(document.to_dict(), ensure_ascii=False, indent=2) + "\n"


def document_from_json(text: str, max_measures: int = DEFAULT_MAX_MEASURES) -> Document:
    """
    Parse a grid document from JSON text.

    Raises:
        GridFormatError: If the text is not JSON or lacks a ``parts`` list.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise GridFormatError(f"Not a JSON document: {exc}") from exc
    return Document.from_dict(data, max_measures=max_measures)


def save_document(document: Document, path: str | Path) -> Path:
    """
    Write ``document`` as JSON. A directory path gets a filename derived
    from the title.

    Returns:
        The path written.

    Raises:
        OSError: If the file cannot be written.
    """
    target = Path(path)
    if target.is_dir():
        target = target / title_to_filename(document.title)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(document_to_json(document), encoding="utf-8")
    logger.info("Saved '%s' to %s", document.title, target)
    return target


def load_document(path: str | Path, max_measures: int = DEFAULT_MAX_MEASURES) -> Document:
    """
    Read a grid document from a JSON file.

    Raises:
        OSError: If the file cannot be read.
        GridFormatError: If the content is not UTF-8 text of a grid document.
    """
    source = Path(path)
    try:
        text = source.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise GridFormatError(f"'{source}' is not UTF-8 text: {exc}") from exc
    document = document_from_json(text, max_measures=max_measures)
    logger.info("Loaded '%s' from %s", document.title, source)
    return document
