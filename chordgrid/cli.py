"""ChordGrid CLI entry point."""

import logging
import sys
from dataclasses import replace
from pathlib import Path

import click

from chordgrid import __version__
from chordgrid.config import EditorConfig
from chordgrid.document_store import DocumentStore, invalid_chords
from chordgrid.editor import GridEditor
from chordgrid.errors import ChordGridError
from chordgrid.grid_file import load_document, save_document
from chordgrid.grid_models import Document
from chordgrid.grid_renderers import GridRenderer, MarkdownGridRenderer, TextGridRenderer
from chordgrid.midi_exporter import MidiExporter
from chordgrid.shell import GridShell
from chordgrid.voicing_strategy import Grade1Voicer, Grade2Voicer, VoicingStrategy

MAX_GRADE = 8


def _get_voicer(grade: int) -> VoicingStrategy:
    """Return the appropriate VoicingStrategy for the requested grade."""
    if grade == 1:
        return Grade1Voicer()
    return Grade2Voicer()


def _get_renderer(output_format: str) -> GridRenderer:
    if output_format == "markdown":
        return MarkdownGridRenderer()
    return TextGridRenderer()


def _load_or_exit(path: str, config: EditorConfig) -> Document:
    try:
        return load_document(path, max_measures=config.max_measures_total)
    except (OSError, ChordGridError) as exc:
        click.echo(f"  ERROR: Could not load '{path}' — {exc}", err=True)
        sys.exit(1)


def _save_or_exit(document: Document, path: str | Path) -> Path:
    try:
        return save_document(document, path)
    except OSError as exc:
        click.echo(f"  ERROR: Could not write grid file — {exc}", err=True)
        sys.exit(1)


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="chordgrid")
@click.option("--verbose", "-v", count=True, help="Log core activity (-v info, -vv debug).")
@click.pass_context
def main(ctx: click.Context, verbose: int) -> None:
    """ChordGrid: chord grid editor with undo/redo and transposition."""
    if verbose:
        level = logging.DEBUG if verbose > 1 else logging.INFO
        logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    try:
        ctx.obj = EditorConfig.from_env()
    except ValueError as exc:
        click.echo(f"  ERROR: Invalid CHORDGRID_* environment setting — {exc}", err=True)
        sys.exit(1)


# ── new subcommand ─────────────────────────────────────────────────────────────

@main.command()
@click.argument("path", type=click.Path(dir_okay=True, writable=True))
@click.option("--title", default=None, metavar="TEXT", help="Song title.")
@click.option("--tempo", type=click.IntRange(min=0), default=None, help="Tempo in BPM.")
@click.option(
    "--part",
    "part_names",
    multiple=True,
    metavar="NAME",
    help="Part to create (repeatable). Defaults to Intro, Verse, Chorus.",
)
@click.option("--measures", type=click.IntRange(1, 200), default=None, help="Measures per part.")
@click.option("--per-line", type=click.IntRange(1, 10, clamp=True), default=None, help="Measures per line.")
@click.pass_obj
def new(
    config: EditorConfig,
    path: str,
    title: str | None,
    tempo: int | None,
    part_names: tuple[str, ...],
    measures: int | None,
    per_line: int | None,
) -> None:
    """
    Create a new chord grid file.

    PATH is a .json file, or a directory in which case the filename is
    derived from the title.

    \b
    Examples:
      chordgrid new song.json --title "My Song" --tempo 96
      chordgrid new . --title "Blues" --part A --part B --measures 12
    """
    overrides = {
        key: value
        for key, value in {
            "default_title": title,
            "default_tempo": tempo,
            "default_part_names": part_names or None,
            "default_measures_total": measures,
            "default_measures_per_line": per_line,
        }.items()
        if value is not None
    }
    store = DocumentStore(config=replace(config, **overrides))
    written = _save_or_exit(store.document, path)
    click.echo(f"Created '{written}' with {len(store.document.parts)} part(s).")


# ── show subcommand ────────────────────────────────────────────────────────────

@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, readable=True))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "markdown"], case_sensitive=False),
    default="text",
    show_default=True,
    help="Plain text grid or Markdown tables.",
)
@click.option("--output", "-o", default=None, metavar="PATH", help="Write to a file instead of stdout.")
@click.pass_obj
def show(config: EditorConfig, path: str, output_format: str, output: str | None) -> None:
    """Print a chord grid file as text or Markdown."""
    document = _load_or_exit(path, config)
    content = _get_renderer(output_format.lower()).render(document)
    if output is None:
        click.echo(content, nl=False)
        return
    try:
        Path(output).write_text(content, encoding="utf-8")
    except OSError as exc:
        click.echo(f"  ERROR: Could not write output file — {exc}", err=True)
        sys.exit(1)
    click.echo(f"Wrote '{output}'.")


# ── validate subcommand ────────────────────────────────────────────────────────

@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, readable=True))
@click.pass_obj
def validate(config: EditorConfig, path: str) -> None:
    """
    Check that a grid file loads and that every chord has a known root.

    Exits with status 1 when the file is malformed or a chord is invalid.
    """
    document = _load_or_exit(path, config)
    problems = invalid_chords(document.parts)
    for part, index, slot in problems:
        click.echo(f"  {part.name}, measure {index + 1}: invalid chord '{slot}'", err=True)
    if problems:
        click.echo(f"{len(problems)} invalid chord(s).", err=True)
        sys.exit(1)
    click.echo(f"OK: {len(document.parts)} part(s), no invalid chords.")


# ── transpose subcommand ───────────────────────────────────────────────────────

@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, readable=True))
@click.argument("steps", type=int)
@click.option("--output", "-o", default=None, metavar="PATH", help="Destination file. Defaults to PATH.")
@click.pass_obj
def transpose(config: EditorConfig, path: str, steps: int, output: str | None) -> None:
    """
    Transpose every chord of a grid file by STEPS semitones.

    Unrecognised chord text is left as it is.

    \b
    Examples:
      chordgrid transpose song.json 2
      chordgrid transpose song.json -o song_down.json -- -3
    """
    document = _load_or_exit(path, config)
    store = DocumentStore(document, config=config)
    store.transpose_all(steps)
    written = _save_or_exit(store.document, output or path)
    click.echo(f"Transposed by {steps:+d} semitone(s) → '{written}'.")


# ── export-midi subcommand ─────────────────────────────────────────────────────

@main.command("export-midi")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, readable=True))
@click.option(
    "--output",
    "-o",
    default=None,
    metavar="PATH",
    help="Destination MIDI file path. Defaults to PATH with a .mid suffix.",
)
@click.option(
    "--grade",
    type=click.IntRange(1, MAX_GRADE),
    default=1,
    show_default=True,
    help="Grade 1: right-hand chords only. Grade 2+: chords plus a left-hand bass root.",
)
@click.option(
    "--beats",
    type=click.IntRange(1, 16),
    default=4,
    show_default=True,
    help="Beats per measure.",
)
@click.pass_obj
def export_midi(config: EditorConfig, path: str, output: str | None, grade: int, beats: int) -> None:
    """Render a chord grid file as a two-track MIDI file at the grid's tempo."""
    document = _load_or_exit(path, config)
    resolved_output = output or str(Path(path).with_suffix(".mid"))
    exporter = MidiExporter(voicer=_get_voicer(grade), beats_per_measure=beats)
    try:
        count = exporter.export(document, resolved_output)
    except OSError as exc:
        click.echo(f"  ERROR: Could not write MIDI file — {exc}", err=True)
        sys.exit(1)
    click.echo(f"Wrote {count} chord(s) to '{resolved_output}'.")


# ── edit subcommand ────────────────────────────────────────────────────────────

@main.command()
@click.argument("path", type=click.Path(dir_okay=False), required=False)
@click.option(
    "--history",
    "history_capacity",
    type=click.IntRange(min=1),
    default=None,
    envvar="CHORDGRID_HISTORY_CAPACITY",
    help="Number of undo steps kept.",
)
@click.pass_obj
def edit(config: EditorConfig, path: str | None, history_capacity: int | None) -> None:
    """
    Edit a chord grid interactively. Type 'help' at the prompt for commands.

    PATH is opened when it exists and is the default target of 'save'.
    """
    if history_capacity is not None:
        config = replace(config, history_capacity=history_capacity)
    document = None
    if path is not None and Path(path).exists():
        document = _load_or_exit(path, config)
    editor = GridEditor(document, config=config)
    shell = GridShell(editor, path=Path(path) if path else None)
    click.echo(f"chordgrid v{__version__} — type 'help' for commands, 'quit' to leave.")
    shell.run(lambda: click.prompt("grid", prompt_suffix="> ", default="", show_default=False))
