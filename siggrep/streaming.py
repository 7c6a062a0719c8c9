"""Streaming mode: grep lines as they arrive."""

from __future__ import annotations

import asyncio
import shutil
from collections import deque
from typing import Callable

from siggrep.highlight import RESET, styled
from siggrep.keymap import Signal, TextEditor, streaming_keymap
from siggrep.sources import execute, read_stdin
from siggrep.terminal import RawMode, Terminal, read_key

PREFIX = "❯❯ "
HIGHLIGHT = "\x1b[91m"
PREFIX_STYLE = "\x1b[32m"
ACTIVE_CHAR_STYLE = "\x1b[46m"


def push_bounded(queue: deque, line: str, capacity: int) -> None:
    """Append ``line``, dropping the oldest line once the queue exceeds ``capacity``."""
    if len(queue) > capacity:
        queue.popleft()
    queue.append(line)


def _pane(editor: TextEditor) -> list[str]:
    text = editor.text
    pos = editor.position
    under = text[pos] if pos < len(text) else " "
    return [
        f"{PREFIX_STYLE}{PREFIX}{RESET}"
        f"{text[:pos]}{ACTIVE_CHAR_STYLE}{under}{RESET}{text[pos + 1:]}"
    ]


async def _keep(
    lines: asyncio.Queue,
    capacity: int,
    render_interval: float,
    on_line: Callable[[str], None],
) -> deque[str]:
    """Take lines until ``None``, keeping the latest and handing each to ``on_line``."""
    kept: deque[str] = deque()
    loop = asyncio.get_running_loop()
    next_tick = loop.time()
    while True:
        delay = next_tick - loop.time()
        if delay > 0:
            await asyncio.sleep(delay)
        next_tick = max(next_tick + render_interval, loop.time())
        line = await lines.get()
        if line is None:
            break
        push_bounded(kept, line, capacity)
        on_line(line)
    return kept


async def run(
    retrieval_timeout: float,
    render_interval: float,
    queue_capacity: int,
    case_insensitive: bool = False,
    cmd: str | None = None,
) -> tuple[Signal, deque[str]]:
    """Stream lines from ``cmd`` (or stdin) through the query until a mode switch.

    Returns the signal that ended streaming and the lines kept so far.
    Raises ``Interrupted`` on ctrl+c.
    """
    editor = TextEditor()
    loop = asyncio.get_running_loop()
    with RawMode() as raw:
        term = Terminal(_pane(editor))
        term.draw_pane(_pane(editor))

        lines: asyncio.Queue = asyncio.Queue(maxsize=1)
        canceled = asyncio.Event()
        if cmd is not None:
            producer = asyncio.ensure_future(execute(cmd, lines, retrieval_timeout, canceled))
        else:
            producer = asyncio.ensure_future(read_stdin(lines, retrieval_timeout, canceled))

        def show(line: str) -> None:
            found = styled(editor.text, line, case_insensitive)
            if found is None:
                return
            width, height = shutil.get_terminal_size()
            rows = [row.render(HIGHLIGHT) for row in found.wrap(max(1, width), height)]
            term.draw_stream_and_pane(rows, _pane(editor))

        keeper = asyncio.ensure_future(_keep(lines, queue_capacity, render_interval, show))

        try:
            while True:
                event = await loop.run_in_executor(None, read_key, raw.tty)
                if event is None:
                    continue
                signal = streaming_keymap(event, editor, cmd)
                if signal in (Signal.GOTO_ARCHIVED, Signal.GOTO_STREAMING):
                    break
                term.draw_pane(_pane(editor))
        except BaseException:
            canceled.set()
            producer.cancel()
            keeper.cancel()
            await asyncio.gather(producer, keeper, return_exceptions=True)
            raise

        canceled.set()
        (outcome,) = await asyncio.gather(producer, return_exceptions=True)
        if isinstance(outcome, BaseException):
            # A failed source never ends the stream itself.
            await lines.put(None)
        kept = await keeper
    return signal, kept