"""Drawing the stream and the prompt, and reading keys from the terminal."""

from __future__ import annotations

import os
import select
import shutil
import sys
from typing import Callable, TextIO

from siggrep.keymap import KeyEvent

CLEAR_DOWN = "\x1b[J"
NEXT_LINE = "\x1b[1E"
HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"


def _move_to(col: int, row: int) -> str:
    return f"\x1b[{row + 1};{col + 1}H"


def _scroll_up(count: int) -> str:
    return f"\x1b[{count}S"


def _terminal_size() -> tuple[int, int]:
    size = shutil.get_terminal_size()
    return size.columns, size.lines


class Terminal:
    """Scrolls streamed lines above a prompt pane kept at the bottom of the screen.

    A pane is a list of already rendered rows.
    """

    def __init__(
        self,
        pane: list[str],
        out: TextIO | None = None,
        size: Callable[[], tuple[int, int]] | None = None,
    ) -> None:
        self._out = out if out is not None else sys.stdout
        self._size = size if size is not None else _terminal_size
        _, rows = self._size()
        self.anchor_position = (0, max(0, rows - 1 - len(pane)))

    def draw_stream_and_pane(self, items: list[str], pane: list[str]) -> None:
        """Scroll up and print ``items`` above the pane, then redraw the pane."""
        coefficient = max(0, len(items) - 1)
        col, row = self.anchor_position
        self._out.write(_move_to(col, max(0, row - coefficient)))
        self._out.write(_scroll_up(1 + coefficient))
        self._out.write(CLEAR_DOWN)
        for item in items:
            self._out.write(item + NEXT_LINE)
        self._out.flush()
        self._draw(pane)

    def draw_pane(self, pane: list[str]) -> None:
        """Clear the old pane, re-anchor to the current size and draw ``pane``."""
        _, rows = self._size()
        col, row = self.anchor_position
        self._out.write(_move_to(col, row + 1) + CLEAR_DOWN)
        self.anchor_position = (col, max(0, rows - 1 - len(pane)))
        self._draw(pane)

    def _draw(self, pane: list[str]) -> None:
        col, row = self.anchor_position
        self._out.write(_move_to(col, row + 1) + CLEAR_DOWN)
        self._out.write("".join(pane))
        self._out.flush()


class RawMode:
    """Context manager that puts the terminal in raw mode and hides the cursor."""

    def __init__(self, tty: TextIO | None = None, out: TextIO | None = None) -> None:
        self._given = tty
        self._out = out if out is not None else sys.stdout
        self.tty: TextIO | None = None
        self._saved = None

    def __enter__(self) -> RawMode:
        import termios
        import tty

        self.tty = self._given if self._given is not None else open("/dev/tty", "rb", buffering=0)
        fd = self.tty.fileno()
        self._saved = termios.tcgetattr(fd)
        tty.setraw(fd)
        self._out.write(HIDE_CURSOR)
        self._out.flush()
        return self

    def __exit__(self, *exc_info) -> None:
        import termios

        termios.tcsetattr(self.tty.fileno(), termios.TCSADRAIN, self._saved)
        self._out.write(SHOW_CURSOR)
        self._out.flush()
        if self._given is None:
            self.tty.close()


_SEQUENCES = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1b[3~": "delete",
}

_SINGLE = {
    "\x1b": "esc",
    "\x7f": "backspace",
    "\x08": "backspace",
    "\r": "enter",
    "\n": "enter",
    "\t": "tab",
}


def parse_key(data: bytes | str) -> KeyEvent | None:
    """Turn the bytes of one key press into a ``KeyEvent``; ``None`` if unknown."""
    if isinstance(data, bytes):
        data = data.decode("utf-8", "replace")
    if not data:
        return None
    if data in _SEQUENCES:
        return KeyEvent(_SEQUENCES[data])
    if data in _SINGLE:
        return KeyEvent(_SINGLE[data])
    if len(data) == 2 and data[0] == "\x1b" and data[1].isprintable():
        return KeyEvent(data[1], alt=True, shift=data[1].isupper())
    if len(data) == 1:
        code = ord(data)
        if 1 <= code <= 26:
            return KeyEvent(chr(code + ord("a") - 1), ctrl=True)
        if data.isprintable():
            return KeyEvent(data, shift=data.isupper())
    return None


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


def read_key(stream) -> KeyEvent | None:
    """Block until one key press arrives on ``stream`` (a file or descriptor)."""
    fd = stream if isinstance(stream, int) else stream.fileno()
    data = os.read(fd, 1)
    if not data:
        raise EOFError("terminal closed")
    if data == b"\x1b":
        while select.select([fd], [], [], 0.01)[0]:
            chunk = os.read(fd, 16)
            if not chunk:
                break
            data += chunk
    else:
        missing = _utf8_length(data[0]) - 1
        while missing > 0:
            chunk = os.read(fd, missing)
            if not chunk:
                break
            data += chunk
            missing -= len(chunk)
    return parse_key(data)