import asyncio
from collections import deque

import pytest

from siggrep.streaming import _keep, _pane, push_bounded
from siggrep.keymap import TextEditor


def test_push_bounded_keeps_latest():
    queue = deque()
    lines = [f"line {n}" for n in range(10)]
    capacity = 3
    for line in lines:
        push_bounded(queue, line, capacity)
    assert len(queue) == capacity + 1
    assert list(queue) == lines[-(capacity + 1):]


def test_push_bounded_below_capacity_keeps_all():
    queue = deque()
    for line in ["a", "b"]:
        push_bounded(queue, line, 5)
    assert list(queue) == ["a", "b"]


def test_push_bounded_zero_capacity():
    queue = deque()
    for line in ["a", "b", "c"]:
        push_bounded(queue, line, 0)
    assert list(queue) == ["c"]


def test_pane_shows_prefix_and_text():
    editor = TextEditor("error")
    rows = _pane(editor)
    assert len(rows) == 1
    assert "❯❯ " in rows[0]
    assert "error" in rows[0]


@pytest.mark.asyncio
async def test_keep_collects_until_end():
    lines = asyncio.Queue()
    sent = ["one", "two", "three"]
    for line in sent:
        await lines.put(line)
    await lines.put(None)
    seen = []
    kept = await _keep(lines, 100, 0, seen.append)
    assert list(kept) == sent
    assert seen == sent


@pytest.mark.asyncio
async def test_keep_bounds_queue_but_sees_every_line():
    lines = asyncio.Queue()
    sent = [str(n) for n in range(20)]
    for line in sent:
        await lines.put(line)
    await lines.put(None)
    seen = []
    kept = await _keep(lines, 4, 0, seen.append)
    assert seen == sent
    assert list(kept) == sent[-5:]


@pytest.mark.asyncio
async def test_keep_with_producer_task():
    lines = asyncio.Queue(maxsize=1)

    async def produce():
        for line in ["x", "y"]:
            await lines.put(line)
        await lines.put(None)

    producer = asyncio.ensure_future(produce())
    seen = []
    kept = await _keep(lines, 10, 0.001, seen.append)
    await producer
    assert list(kept) == ["x", "y"]
    assert seen == ["x", "y"]