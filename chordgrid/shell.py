"""GridShell: an interactive, line-oriented chord grid editing session."""

from __future__ import annotations

import logging
import shlex
from pathlib import Path
from typing import Callable

import click

from chordgrid.chord_model import KNOWN_SUFFIXES, ROOTS
from chordgrid.editor import GridEditor
from chordgrid.errors import ChordGridError
from chordgrid.grid_file import load_document, save_document
from chordgrid.grid_models import Document
from chordgrid.grid_renderers import TextGridRenderer

logger = logging.getLogger(__name__)

HELP_TEXT = f"""\
Parts (P) and measures (M) are numbered from 1.

  show                      print the grid
  add [NAME] [TOTAL] [PER]  append an empty part
  rm P                      delete a part
  mv P TO                   move a part to position TO
  dup P                     duplicate a part after itself
  rename P NAME             rename a part
  resize P N                set the number of measures (1-200)
  perline P N               set measures per line (1-10)
  set P M CHORD             edit a measure ("Am7", or "C|G" for two chords)
  split P M                 toggle the split of a measure
  clear P M                 empty a measure
  up [N] / down [N]         transpose everything by N semitones (default 1)
  tp P N                    transpose one part by N semitones
  tm P M N                  transpose one measure by N semitones
  title TEXT | tempo N | comments TEXT
  copy P / paste            copy a part / paste a part or grid
  undo / redo
  new | load PATH | save [PATH]
  quit

Roots: {", ".join(ROOTS)}
Common suffixes: {", ".join(KNOWN_SUFFIXES)}
"""


class ShellUsageError(ChordGridError):
    """A shell command with missing or malformed arguments."""


def _number(value: str, what: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ShellUsageError(f"{what} must be a number, got '{value}'") from None


class GridShell:
    """
    Read-eval loop over a :class:`GridEditor`.

    Each command is one logical edit, so every mutating command commits one
    undo step. The grid is re-rendered after each change when ``auto_show``
    is on.
    """

    def __init__(
        self,
        editor: GridEditor,
        path: Path | None = None,
        echo: Callable[[str], None] = click.echo,
        confirm: Callable[[str], bool] = click.confirm,
        auto_show: bool = True,
    ) -> None:
        self.editor = editor
        self.path = path
        self.echo = echo
        self.confirm = confirm
        self.renderer = TextGridRenderer(numbered=True)
        if auto_show:
            editor.add_listener(self._render)

    def _render(self, document: Document) -> None:
        self.echo(self.renderer.render(document))

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    def run(self, prompt: Callable[[], str]) -> None:
        """Execute commands from ``prompt`` until quit or end of input."""
        self._render(self.editor.document)
        while True:
            try:
                line = prompt()
            except (EOFError, click.Abort):
                break
            if not self.execute(line):
                break

    def execute(self, line: str) -> bool:
        """
        Execute one command line.

        Returns:
            False when the session should end.
        """
        try:
            words = shlex.split(line)
        except ValueError as exc:
            self.echo(f"  ERROR: {exc}")
            return True
        if not words:
            return True
        name, args = words[0].lower(), words[1:]
        if name in ("quit", "exit", "q"):
            return False
        handler = getattr(self, f"cmd_{name}", None)
        if handler is None:
            self.echo(f"  ERROR: Unknown command '{name}'. Type 'help' for the command list.")
            return True
        try:
            handler(args)
        except (ChordGridError, OSError) as exc:
            logger.debug("Command %r failed: %s", line, exc)
            self.echo(f"  ERROR: {exc}")
        return True

    # ------------------------------------------------------------------
    # Argument helpers
    # ------------------------------------------------------------------

    def _confirmed(self, message: str) -> bool:
        """Ask ``message``; Ctrl-C or end of input at the prompt counts as no."""
        try:
            return self.confirm(message)
        except (click.Abort, EOFError):
            self.echo("")
            return False

    @staticmethod
    def _require(args: list[str], count: int, usage: str) -> None:
        if len(args) < count:
            raise ShellUsageError(f"Usage: {usage}")

    def _part_index(self, value: str) -> int:
        return _number(value, "Part") - 1

    @staticmethod
    def _measure_index(value: str) -> int:
        return _number(value, "Measure") - 1

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def cmd_help(self, args: list[str]) -> None:
        self.echo(HELP_TEXT)

    def cmd_show(self, args: list[str]) -> None:
        self._render(self.editor.document)

    def cmd_add(self, args: list[str]) -> None:
        name = args[0] if args else None
        total = _number(args[1], "Total") if len(args) > 1 else None
        per_line = _number(args[2], "Per line") if len(args) > 2 else None
        self.editor.perform(self.editor.store.add_part, name, total, per_line)

    def cmd_rm(self, args: list[str]) -> None:
        self._require(args, 1, "rm P")
        index = self._part_index(args[0])
        part = self.editor.store.part(index)
        if self._confirmed(f"Delete part '{part.name}'?"):
            self.editor.perform(self.editor.store.remove_part, index)

    def cmd_mv(self, args: list[str]) -> None:
        self._require(args, 2, "mv P TO")
        self.editor.perform(self.editor.store.move_part, self._part_index(args[0]), self._part_index(args[1]))

    def cmd_dup(self, args: list[str]) -> None:
        self._require(args, 1, "dup P")
        self.editor.perform(self.editor.store.duplicate_part, self._part_index(args[0]))

    def cmd_rename(self, args: list[str]) -> None:
        self._require(args, 2, "rename P NAME")
        self.editor.perform(self.editor.store.rename_part, self._part_index(args[0]), " ".join(args[1:]))

    def cmd_resize(self, args: list[str]) -> None:
        self._require(args, 2, "resize P N")
        self.editor.perform(self.editor.store.resize_part, self._part_index(args[0]), args[1])

    def cmd_perline(self, args: list[str]) -> None:
        self._require(args, 2, "perline P N")
        self.editor.perform(self.editor.store.set_measures_per_line, self._part_index(args[0]), args[1])

    def cmd_set(self, args: list[str]) -> None:
        self._require(args, 2, "set P M CHORD")
        text = " ".join(args[2:])
        self.editor.perform(
            self.editor.store.edit_measure, self._part_index(args[0]), self._measure_index(args[1]), text
        )

    def cmd_split(self, args: list[str]) -> None:
        self._require(args, 2, "split P M")
        self.editor.perform(
            self.editor.store.set_measure_split, self._part_index(args[0]), self._measure_index(args[1])
        )

    def cmd_clear(self, args: list[str]) -> None:
        self._require(args, 2, "clear P M")
        self.editor.perform(
            self.editor.store.clear_measure, self._part_index(args[0]), self._measure_index(args[1])
        )

    def cmd_up(self, args: list[str]) -> None:
        steps = _number(args[0], "Steps") if args else 1
        self.editor.perform(self.editor.store.transpose_all, steps)

    def cmd_down(self, args: list[str]) -> None:
        steps = _number(args[0], "Steps") if args else 1
        self.editor.perform(self.editor.store.transpose_all, -steps)

    def cmd_tp(self, args: list[str]) -> None:
        self._require(args, 2, "tp P N")
        self.editor.perform(self.editor.store.transpose_part, self._part_index(args[0]), _number(args[1], "Steps"))

    def cmd_tm(self, args: list[str]) -> None:
        self._require(args, 3, "tm P M N")
        self.editor.perform(
            self.editor.store.transpose_measure,
            self._part_index(args[0]),
            self._measure_index(args[1]),
            _number(args[2], "Steps"),
        )

    def cmd_title(self, args: list[str]) -> None:
        self.editor.perform(self.editor.store.set_title, " ".join(args))

    def cmd_tempo(self, args: list[str]) -> None:
        self._require(args, 1, "tempo N")
        self.editor.perform(self.editor.store.set_tempo, args[0])

    def cmd_comments(self, args: list[str]) -> None:
        self.editor.perform(self.editor.store.set_comments, " ".join(args))

    def cmd_copy(self, args: list[str]) -> None:
        self._require(args, 1, "copy P")
        self.editor.copy_part(self._part_index(args[0]))
        if self.editor.clipboard.used_fallback:
            self.echo("Part copied to the local buffer (system clipboard unavailable).")
        else:
            self.echo("Part copied to the clipboard.")

    def cmd_paste(self, args: list[str]) -> None:
        pasted = self.editor.paste()
        self.echo(f"Pasted {len(pasted)} part(s).")

    def cmd_undo(self, args: list[str]) -> None:
        if not self.editor.undo():
            self.echo("Nothing to undo.")

    def cmd_redo(self, args: list[str]) -> None:
        if not self.editor.redo():
            self.echo("Nothing to redo.")

    def cmd_new(self, args: list[str]) -> None:
        if self._confirmed("Start a new grid? Unsaved work will be lost."):
            self.editor.new_document()
            self.path = None

    def cmd_load(self, args: list[str]) -> None:
        self._require(args, 1, "load PATH")
        path = Path(args[0])
        document = load_document(path, max_measures=self.editor.config.max_measures_total)
        self.editor.load(document)
        self.path = path

    def cmd_save(self, args: list[str]) -> None:
        target = Path(args[0]) if args else (self.path or Path.cwd())
        self.path = save_document(self.editor.document, target)
        self.echo(f"Saved to '{self.path}'.")
