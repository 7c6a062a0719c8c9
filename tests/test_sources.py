import asyncio
import sys

import pytest

from siggrep.sources import execute, read_stdin, sanitize


async def drain(queue):
    items = []
    while True:
        item = await asyncio.wait_for(queue.get(), 10)
        if item is None:
            return items
        items.append(item)


def test_sanitize_strips_color_codes():
    assert sanitize("\x1b[31mred\x1b[0m") == "red"


def test_sanitize_replaces_tabs_and_newlines():
    assert sanitize("a\tb\nc") == "a b c"


def test_sanitize_strips_osc_and_control_characters():
    assert sanitize("\x1b]0;title\x07text\r\x07") == "text"


def test_sanitize_keeps_plain_text():
    assert sanitize("plain text ✓") == "plain text ✓"


@pytest.mark.asyncio
async def test_read_stdin_reads_lines_until_eof():
    stream = asyncio.StreamReader()
    stream.feed_data(b"first\n\x1b[1mbold\x1b[0m\r\nlast")
    stream.feed_eof()
    queue = asyncio.Queue()
    await asyncio.wait_for(read_stdin(queue, 0.01, asyncio.Event(), stream), 10)
    assert await drain(queue) == ["first", "bold", "last"]


@pytest.mark.asyncio
async def test_read_stdin_stops_when_canceled():
    stream = asyncio.StreamReader()
    queue = asyncio.Queue()
    canceled = asyncio.Event()
    task = asyncio.create_task(read_stdin(queue, 0.01, canceled, stream))
    stream.feed_data(b"one\n")
    assert await asyncio.wait_for(queue.get(), 10) == "one"
    canceled.set()
    await asyncio.wait_for(task, 10)
    assert await drain(queue) == []


@pytest.mark.asyncio
async def test_execute_streams_stdout():
    queue = asyncio.Queue()
    canceled = asyncio.Event()
    task = asyncio.create_task(
        execute(f"{sys.executable} -c print('hello')", queue, 0.01, canceled)
    )
    line = await asyncio.wait_for(queue.get(), 10)
    canceled.set()
    await asyncio.wait_for(task, 10)
    assert line == "hello"
    assert await drain(queue) == []


@pytest.mark.asyncio
async def test_execute_streams_stderr():
    queue = asyncio.Queue()
    canceled = asyncio.Event()
    task = asyncio.create_task(
        execute(f"{sys.executable} -c raise(SystemExit('oops'))", queue, 0.01, canceled)
    )
    line = await asyncio.wait_for(queue.get(), 10)
    canceled.set()
    await asyncio.wait_for(task, 10)
    assert line == "oops"


@pytest.mark.asyncio
async def test_execute_rejects_empty_command():
    with pytest.raises(ValueError):
        await execute("   ", asyncio.Queue(), 0.01, asyncio.Event())