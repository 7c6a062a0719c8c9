"""Archived mode: grep interactively through a fixed set of lines."""

from __future__ import annotations

import shutil
import sys
from collections.abc import Iterable

from siggrep.highlight import RESET, StyledLine, styled
from siggrep.keymap import (
    KeyEvent,
    Listbox,
    PromptSignal,
    TextEditor,
    archived_keymap,
)
from siggrep.terminal import RawMode, read_key

PREFIX = "❯❯❯ "
CURSOR = "❯ "
HIGHLIGHT = "\x1b[91m"
PREFIX_STYLE = "\x1b[34m"
ACTIVE_CHAR_STYLE = "\x1b[46m"
CLEAR_SCREEN = "\x1b[2J\x1b[3J\x1b[H"


def _prompt_row(editor: TextEditor, prefix: str, prefix_style: str) -> str:
    text = editor.text
    pos = editor.position
    under = text[pos] if pos < len(text) else " "
    return (
        f"{prefix_style}{prefix}{RESET}"
        f"{text[:pos]}{ACTIVE_CHAR_STYLE}{under}{RESET}{text[pos + 1:]}"
    )


class Archived:
    """The state of archived mode: the query editor and the filtered lines."""

    def __init__(
        self,
        lines: Iterable[str],
        case_insensitive: bool = False,
        cmd: str | None = None,
    ) -> None:
        self.lines = list(lines)
        self.case_insensitive = case_insensitive
        self.cmd = cmd
        self.editor = TextEditor()
        self.matches = [StyledLine(line) for line in self.lines]
        self.listbox = Listbox([line for line in self.lines])

    def _filter(self) -> None:
        query = self.editor.text
        found = (styled(query, line, self.case_insensitive) for line in self.lines)
        self.matches = [match for match in found if match is not None]
        self.listbox = Listbox([match.text for match in self.matches])

    def evaluate(self, event: KeyEvent) -> PromptSignal:
        """Apply a key press and refilter the lines when the query changed."""
        before = self.editor.text
        try:
            signal = archived_keymap(event, self.editor, self.listbox, self.cmd)
        finally:
            if self.editor.text != before:
                self._filter()
        return signal

    def visible_rows(self, width: int, height: int) -> list[str]:
        """Rendered rows for a screen of the given size, the prompt last."""
        budget = max(0, height - 1)
        blank = " " * len(CURSOR)
        row_width = max(1, width - len(CURSOR))
        rows: list[str] = []
        for offset, match in enumerate(self.matches[self.listbox.position:]):
            if len(rows) >= budget:
                break
            marker = CURSOR if offset == 0 else blank
            for index, row in enumerate(match.wrap(row_width, budget - len(rows))):
                rows.append((marker if index == 0 else blank) + row.render(HIGHLIGHT))
        rows.append(_prompt_row(self.editor, PREFIX, PREFIX_STYLE))
        return rows


def run(lines: Iterable[str], case_insensitive: bool = False, cmd: str | None = None) -> None:
    """Run archived mode on the terminal until it is left with ctrl+r (given ``cmd``).

    Raises ``Interrupted`` on ctrl+c.
    """
    archived = Archived(lines, case_insensitive, cmd)
    out = sys.stdout
    with RawMode(out=out) as raw:
        while True:
            width, height = shutil.get_terminal_size()
            out.write(CLEAR_SCREEN + "\r\n".join(archived.visible_rows(width, height)))
            out.flush()
            event = read_key(raw.tty)
            if event is None:
                continue
            if archived.evaluate(event) is PromptSignal.QUIT:
                return