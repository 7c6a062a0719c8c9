import pytest

from siggrep.keymap import (
    EditMode,
    Interrupted,
    KeyEvent,
    Listbox,
    PromptSignal,
    Signal,
    TextEditor,
    archived_keymap,
    streaming_keymap,
)


def type_text(editor, text, keymap=streaming_keymap):
    for ch in text:
        keymap(KeyEvent(ch, shift=ch.isupper()), editor)


def test_typing_inserts_characters():
    editor = TextEditor()
    type_text(editor, "Hello")
    assert editor.text == "Hello"
    assert editor.position == len("Hello")


def test_ctrl_f_goes_to_archived():
    assert streaming_keymap(KeyEvent("f", ctrl=True), TextEditor()) is Signal.GOTO_ARCHIVED


def test_ctrl_r_restarts_only_with_command():
    assert streaming_keymap(KeyEvent("r", ctrl=True), TextEditor(), "ls") is Signal.GOTO_STREAMING
    assert streaming_keymap(KeyEvent("r", ctrl=True), TextEditor(), None) is Signal.CONTINUE


def test_ctrl_c_interrupts_both_modes():
    with pytest.raises(Interrupted):
        streaming_keymap(KeyEvent("c", ctrl=True), TextEditor())
    with pytest.raises(Interrupted):
        archived_keymap(KeyEvent("c", ctrl=True), TextEditor(), Listbox())


def test_cursor_movement_and_insert():
    editor = TextEditor("ac")
    streaming_keymap(KeyEvent("left"), editor)
    streaming_keymap(KeyEvent("b"), editor)
    assert editor.text == "abc"
    streaming_keymap(KeyEvent("a", ctrl=True), editor)
    assert editor.position == 0
    streaming_keymap(KeyEvent("e", ctrl=True), editor)
    assert editor.position == len(editor.text)
    streaming_keymap(KeyEvent("right"), editor)
    assert editor.position == len(editor.text)


def test_backspace_and_erase_all():
    editor = TextEditor("abc")
    streaming_keymap(KeyEvent("backspace"), editor)
    assert editor.text == "ab"
    streaming_keymap(KeyEvent("u", ctrl=True), editor)
    assert editor.text == ""
    assert editor.position == 0


def test_backspace_at_head_does_nothing():
    editor = TextEditor("ab")
    editor.move_to_head()
    editor.erase()
    assert editor.text == "ab"


def test_overwrite_mode_replaces_then_appends():
    editor = TextEditor("abc", EditMode.OVERWRITE)
    editor.move_to_head()
    type_text(editor, "xyzw")
    assert editor.text == "xyzw"


def test_alt_chars_and_unknown_keys_are_ignored():
    editor = TextEditor("a")
    assert streaming_keymap(KeyEvent("x", alt=True), editor) is Signal.CONTINUE
    streaming_keymap(KeyEvent("home"), editor)
    assert editor.text == "a"


def test_archived_ctrl_r_quits_only_with_command():
    assert archived_keymap(KeyEvent("r", ctrl=True), TextEditor(), Listbox(), "ls") is PromptSignal.QUIT
    assert archived_keymap(KeyEvent("r", ctrl=True), TextEditor(), Listbox()) is PromptSignal.CONTINUE


def test_archived_up_down_move_listbox():
    listbox = Listbox(["one", "two", "three"])
    editor = TextEditor()
    archived_keymap(KeyEvent("down"), editor, listbox)
    archived_keymap(KeyEvent("down"), editor, listbox)
    archived_keymap(KeyEvent("down"), editor, listbox)
    assert listbox.selected == "three"
    archived_keymap(KeyEvent("up"), editor, listbox)
    assert listbox.selected == "two"


def test_archived_typing_edits_query():
    editor = TextEditor()
    listbox = Listbox(["x"])
    for ch in "err":
        archived_keymap(KeyEvent(ch), editor, listbox)
    assert editor.text == "err"
    assert listbox.position == 0


def test_listbox_bounds():
    listbox = Listbox()
    assert listbox.selected is None
    assert listbox.forward() is False
    assert listbox.backward() is False