"""Line sources: a command's output or standard input."""

from __future__ import annotations

import asyncio
import re
import sys
from contextlib import suppress

_ESCAPE = re.compile(
    r"\x1b\[[0-?]*[ -/]*[@-~]"
    r"|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)"
    r"|\x1b[PX^_][^\x1b]*\x1b\\"
    r"|\x1b[ -/]*[0-~]"
)
_CONTROL = re.compile(r"[\x00-\x1f\x7f]")


def sanitize(line: str) -> str:
    """Turn newlines and tabs into spaces and drop escape sequences and control characters."""
    line = line.replace("\n", " ").replace("\t", " ")
    return _CONTROL.sub("", _ESCAPE.sub("", line))


def _decode(raw: bytes) -> str:
    if raw.endswith(b"\n"):
        raw = raw[:-1]
        if raw.endswith(b"\r"):
            raw = raw[:-1]
    return raw.decode("utf-8", "replace")


async def _wait_canceled(canceled: asyncio.Event, timeout: float) -> None:
    with suppress(asyncio.TimeoutError):
        await asyncio.wait_for(canceled.wait(), timeout)


async def execute(
    cmdstr: str,
    queue: asyncio.Queue,
    retrieval_timeout: float,
    canceled: asyncio.Event,
) -> None:
    """Run a command and put each line of its stdout and stderr on ``queue``.

    Runs until ``canceled`` is set, then kills the command and puts ``None``.
    """
    args = cmdstr.split()
    if not args:
        raise ValueError("empty command")
    process = await asyncio.create_subprocess_exec(
        *args, stdout=asyncio.subprocess.PIPE, stderr=asyncio.subprocess.PIPE
    )
    open_streams = [process.stdout, process.stderr]
    pending: dict[asyncio.StreamReader, asyncio.Task] = {}
    try:
        while not canceled.is_set():
            for stream in open_streams:
                if stream not in pending:
                    pending[stream] = asyncio.ensure_future(stream.readline())
            if not pending:
                await _wait_canceled(canceled, retrieval_timeout)
                continue
            done, _ = await asyncio.wait(
                pending.values(), timeout=retrieval_timeout, return_when=asyncio.FIRST_COMPLETED
            )
            for stream, task in list(pending.items()):
                if task not in done:
                    continue
                del pending[stream]
                if task.exception() is not None:
                    continue
                raw = task.result()
                if not raw:
                    open_streams.remove(stream)
                    continue
                await queue.put(sanitize(_decode(raw)))
    finally:
        for task in pending.values():
            task.cancel()
        if process.returncode is None:
            with suppress(ProcessLookupError):
                process.kill()
        await process.wait()
    await queue.put(None)


async def _stdin_reader() -> asyncio.StreamReader:
    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader()
    protocol = asyncio.StreamReaderProtocol(reader)
    await loop.connect_read_pipe(lambda: protocol, sys.stdin)
    return reader


async def read_stdin(
    queue: asyncio.Queue,
    retrieval_timeout: float,
    canceled: asyncio.Event,
    stream: asyncio.StreamReader | None = None,
) -> None:
    """Put each line of standard input (or ``stream``) on ``queue``.

    Stops at end of input, on a read error, or when ``canceled`` is set,
    then puts ``None``.
    """
    reader = stream if stream is not None else await _stdin_reader()
    pending: asyncio.Task | None = None
    try:
        while not canceled.is_set():
            if pending is None:
                pending = asyncio.ensure_future(reader.readline())
            # Time out regularly so cancellation is noticed; keep the read pending.
            done, _ = await asyncio.wait({pending}, timeout=retrieval_timeout)
            if not done:
                continue
            task, pending = pending, None
            if task.exception() is not None:
                break
            raw = task.result()
            if not raw:
                break
            await queue.put(sanitize(_decode(raw)))
    finally:
        if pending is not None:
            pending.cancel()
    await queue.put(None)