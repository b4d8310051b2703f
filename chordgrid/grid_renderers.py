"""Renderer implementations for chord grid output formats."""

from __future__ import annotations

from abc import ABC, abstractmethod

from chordgrid.grid_models import Document, Measure, Part

EMPTY_CELL = "·"


def measure_label(measure: Measure) -> str:
    """Display text of one measure: "C", "C / G" for split measures."""
    if measure.split:
        return f"{measure.chord1.strip() or EMPTY_CELL} / {measure.chord2.strip() or EMPTY_CELL}"
    return measure.chord1.strip() or EMPTY_CELL


def _escape_markdown(text: str) -> str:
    """Escape the characters that break a Markdown table cell."""
    return text.replace("\\", "\\\\").replace("|", "\\|")


class GridRenderer(ABC):
    """Abstract chord grid renderer."""

    @property
    @abstractmethod
    def default_extension(self) -> str:
        """Default filename extension for this renderer."""

    @abstractmethod
    def render(self, document: Document) -> str:
        """Render the document into a file content string."""


class TextGridRenderer(GridRenderer):
    """Render a document as a fixed-width text grid for the terminal."""

    def __init__(self, cell_width: int = 10, numbered: bool = False) -> None:
        """
        Args:
            cell_width: Minimum width of one measure cell.
            numbered:   Prefix part names with their 1-based position.
        """
        self.cell_width = cell_width
        self.numbered = numbered

    @property
    def default_extension(self) -> str:
        return ".txt"

    def render(self, document: Document) -> str:
        lines = [f"{document.title or 'Untitled'}  (tempo {document.tempo})"]
        for number, part in enumerate(document.parts, start=1):
            lines.append("")
            lines.extend(self.render_part(part, number))
        if document.comments.strip():
            lines.append("")
            lines.append(document.comments.strip())
        return "\n".join(lines) + "\n"

    def render_part(self, part: Part, number: int | None = None) -> list[str]:
        heading = f"[{part.name}]"
        if self.numbered and number is not None:
            heading = f"{number}. {heading}"
        rows = [heading]
        for row in part.lines():
            cells = [measure_label(m).ljust(self.cell_width) for m in row]
            rows.append("| " + " | ".join(cells) + " |")
        return rows


class MarkdownGridRenderer(GridRenderer):
    """Render a document as Markdown: one heading and one table per part."""

    @property
    def default_extension(self) -> str:
        return ".md"

    def render(self, document: Document) -> str:
        sections = [f"# {document.title or 'Untitled'}", "", f"Tempo: {document.tempo}"]
        for part in document.parts:
            per_line = len(part.lines()[0])
            sections.extend(["", f"## {_escape_markdown(part.name)}", ""])
            sections.append("|" + " |" * per_line)
            sections.append("|" + "---|" * per_line)
            for row in part.lines():
                cells = [_escape_markdown(measure_label(m)) for m in row]
                cells.extend([""] * (per_line - len(cells)))
                sections.append("| " + " | ".join(cells) + " |")
        if document.comments.strip():
            sections.extend(["", document.comments.strip()])
        return "\n".join(sections) + "\n"
