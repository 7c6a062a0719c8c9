"""Key events, editing state and the key bindings of both modes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class Signal(Enum):
    """Outcome of a key press in streaming mode."""

    CONTINUE = auto()
    GOTO_ARCHIVED = auto()
    GOTO_STREAMING = auto()


class PromptSignal(Enum):
    """Outcome of a key press in archived mode."""

    CONTINUE = auto()
    QUIT = auto()


class EditMode(Enum):
    INSERT = auto()
    OVERWRITE = auto()


class Interrupted(Exception):
    """Raised when the user presses ctrl+c."""


@dataclass(frozen=True)
class KeyEvent:
    """A key press: a single character or a named key such as ``left``."""

    code: str
    ctrl: bool = False
    shift: bool = False
    alt: bool = False

    @property
    def is_char(self) -> bool:
        return len(self.code) == 1


class TextEditor:
    """A single-line editor with a cursor."""

    def __init__(self, text: str = "", edit_mode: EditMode = EditMode.INSERT) -> None:
        self.chars = list(text)
        self.position = len(self.chars)
        self.edit_mode = edit_mode

    @property
    def text(self) -> str:
        return "".join(self.chars)

    def insert(self, ch: str) -> None:
        self.chars.insert(self.position, ch)
        self.position += 1

    def overwrite(self, ch: str) -> None:
        if self.position < len(self.chars):
            self.chars[self.position] = ch
            self.position += 1
        else:
            self.insert(ch)

    def backward(self) -> None:
        if self.position > 0:
            self.position -= 1

    def forward(self) -> None:
        if self.position < len(self.chars):
            self.position += 1

    def move_to_head(self) -> None:
        self.position = 0

    def move_to_tail(self) -> None:
        self.position = len(self.chars)

    def erase(self) -> None:
        if self.position > 0:
            del self.chars[self.position - 1]
            self.position -= 1

    def erase_all(self) -> None:
        self.chars.clear()
        self.position = 0


@dataclass
class Listbox:
    """A list of items with a selected position."""

    items: list[str] = field(default_factory=list)
    position: int = 0

    @property
    def selected(self) -> str | None:
        return self.items[self.position] if self.items else None

    def backward(self) -> bool:
        if self.position > 0:
            self.position -= 1
            return True
        return False

    def forward(self) -> bool:
        if self.position < len(self.items) - 1:
            self.position += 1
            return True
        return False


_CTRL_C = KeyEvent("c", ctrl=True)
_CTRL_R = KeyEvent("r", ctrl=True)
_CTRL_F = KeyEvent("f", ctrl=True)


def _edit(event: KeyEvent, editor: TextEditor) -> None:
    actions = {
        KeyEvent("left"): editor.backward,
        KeyEvent("right"): editor.forward,
        KeyEvent("a", ctrl=True): editor.move_to_head,
        KeyEvent("e", ctrl=True): editor.move_to_tail,
        KeyEvent("backspace"): editor.erase,
        KeyEvent("u", ctrl=True): editor.erase_all,
    }
    action = actions.get(event)
    if action is not None:
        action()
    elif event.is_char and not event.ctrl and not event.alt:
        if editor.edit_mode is EditMode.INSERT:
            editor.insert(event.code)
        else:
            editor.overwrite(event.code)


def streaming_keymap(event: KeyEvent, editor: TextEditor, cmd: str | None = None) -> Signal:
    """Apply a key press in streaming mode."""
    if event == _CTRL_F:
        return Signal.GOTO_ARCHIVED
    if event == _CTRL_R:
        return Signal.GOTO_STREAMING if cmd is not None else Signal.CONTINUE
    if event == _CTRL_C:
        raise Interrupted("ctrl+c")
    _edit(event, editor)
    return Signal.CONTINUE


def archived_keymap(
    event: KeyEvent, editor: TextEditor, listbox: Listbox, cmd: str | None = None
) -> PromptSignal:
    """Apply a key press in archived mode."""
    if event == _CTRL_R:
        # Leaving lets the caller start streaming again.
        return PromptSignal.QUIT if cmd is not None else PromptSignal.CONTINUE
    if event == _CTRL_C:
        raise Interrupted("ctrl+c")
    if event == KeyEvent("up"):
        listbox.backward()
    elif event == KeyEvent("down"):
        listbox.forward()
    else:
        _edit(event, editor)
    return PromptSignal.CONTINUE