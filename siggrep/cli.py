"""Command line entry point."""

from __future__ import annotations

import argparse
import asyncio
import functools
import sys
from collections import deque
from typing import Awaitable, Callable

from siggrep import archived, streaming
from siggrep.keymap import Interrupted, Signal
from siggrep.sources import execute, read_stdin
from siggrep.streaming import push_bounded

CLEAR_SCREEN = "\x1b[2J\x1b[3J\x1b[H"

EXAMPLES = """\
Examples:

$ stern --context kind-kind etcd |& sig
Or the method to retry command by pressing ctrl+r:
$ sig --cmd "stern --context kind-kind etcd"

Archived mode:
$ cat README.md |& sig -a
Or
$ sig -a --cmd "cat README.md"
"""

Source = Callable[[asyncio.Queue, float, asyncio.Event], Awaitable[None]]


def _non_negative(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value!r}")
    return number


def _version() -> str:
    from importlib.metadata import PackageNotFoundError, version

    try:
        return version("siggrep")
    except PackageNotFoundError:
        return "unknown"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse the command line."""
    parser = argparse.ArgumentParser(
        prog="sig",
        description="Interactive grep (for streaming)",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {_version()}")
    parser.add_argument(
        "--retrieval-timeout",
        dest="retrieval_timeout",
        type=_non_negative,
        default=10,
        help="Timeout to read a next line from the stream in milliseconds.",
    )
    parser.add_argument(
        "--render-interval",
        dest="render_interval",
        type=_non_negative,
        default=10,
        help="Interval to render a line in milliseconds.",
    )
    parser.add_argument(
        "-q",
        "--queue-capacity",
        dest="queue_capacity",
        type=_non_negative,
        default=1000,
        help="Queue capacity to store lines.",
    )
    parser.add_argument(
        "-a",
        "--archived",
        action="store_true",
        help="Archived mode to grep through static data.",
    )
    parser.add_argument(
        "-i",
        "--ignore-case",
        dest="case_insensitive",
        action="store_true",
        help="Case insensitive search.",
    )
    parser.add_argument(
        "--cmd",
        default=None,
        help="Command to execute on initial and retries.",
    )
    return parser.parse_args(argv)


async def collect_archived(
    source: Source, retrieval_timeout: float, queue_capacity: int
) -> deque[str]:
    """Gather lines from ``source`` until it ends or stays silent for ``retrieval_timeout``."""
    lines: asyncio.Queue = asyncio.Queue(maxsize=1)
    canceled = asyncio.Event()
    task = asyncio.ensure_future(source(lines, retrieval_timeout, canceled))
    kept: deque[str] = deque()
    try:
        while True:
            try:
                line = await asyncio.wait_for(lines.get(), retrieval_timeout)
            except asyncio.TimeoutError:
                break
            if line is None:
                break
            push_bounded(kept, line, queue_capacity)
    finally:
        canceled.set()
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
    return kept


def _clear() -> None:
    sys.stdout.write(CLEAR_SCREEN)
    sys.stdout.flush()


def main(argv: list[str] | None = None) -> int:
    """Run the program; return the exit status."""
    args = parse_args(argv)
    retrieval_timeout = args.retrieval_timeout / 1000
    render_interval = args.render_interval / 1000

    try:
        if args.archived:
            source: Source = (
                functools.partial(execute, args.cmd) if args.cmd is not None else read_stdin
            )
            kept = asyncio.run(collect_archived(source, retrieval_timeout, args.queue_capacity))
            _clear()
            # Retrying a command means nothing in archived mode.
            archived.run(list(kept), args.case_insensitive, None)
            return 0

        while True:
            try:
                signal, kept = asyncio.run(
                    streaming.run(
                        retrieval_timeout,
                        render_interval,
                        args.queue_capacity,
                        args.case_insensitive,
                        args.cmd,
                    )
                )
            except Exception:
                break
            _clear()
            if signal is Signal.GOTO_ARCHIVED:
                archived.run(list(kept), args.case_insensitive, args.cmd)
                _clear()
    except Interrupted as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())