"""Query matching and highlighting of lines."""

from __future__ import annotations

import re
from dataclasses import dataclass

RESET = "\x1b[0m"


@dataclass(frozen=True)
class StyledLine:
    """A line of text and the character positions to highlight in it."""

    text: str
    highlighted: frozenset[int] = frozenset()

    def render(self, style: str) -> str:
        """Return the text with highlighted runs wrapped in ``style`` and a reset."""
        parts: list[str] = []
        active = False
        for index, ch in enumerate(self.text):
            lit = index in self.highlighted
            if lit and not active:
                parts.append(style)
            elif active and not lit:
                parts.append(RESET)
            active = lit
            parts.append(ch)
        if active:
            parts.append(RESET)
        return "".join(parts)

    def wrap(self, width: int, height: int) -> list[StyledLine]:
        """Split the line into rows of at most ``width`` characters, keeping at most ``height`` rows."""
        if width < 1:
            raise ValueError("width must be positive")
        rows: list[StyledLine] = []
        for start in range(0, max(len(self.text), 1), width):
            if len(rows) >= height:
                break
            end = start + width
            rows.append(
                StyledLine(
                    self.text[start:end],
                    frozenset(i - start for i in self.highlighted if start <= i < end),
                )
            )
        return rows


def matched(queries: list[str], line: str, case_insensitive: bool) -> list[tuple[int, int]]:
    """Return the spans in ``line`` matched by any of the patterns.

    Raises ``re.error`` when a pattern is invalid.
    """
    if not queries:
        return []
    flags = re.IGNORECASE if case_insensitive else 0
    for query in queries:
        re.compile(query, flags)
    pattern = re.compile("|".join(f"(?:{query})" for query in queries), flags)
    spans: list[tuple[int, int]] = []
    for match in pattern.finditer(line):
        if match.start() >= len(line):
            break
        spans.append(match.span())
    return spans


def styled(query: str, line: str, case_insensitive: bool = False) -> StyledLine | None:
    """Highlight ``line`` with a ``|``-separated query; ``None`` if it does not match."""
    if not query:
        return StyledLine(line)
    queries = [part.strip() for part in query.split("|") if part.strip()]
    try:
        spans = matched(queries, line, case_insensitive)
    except re.error:
        return None
    if not spans:
        return None
    return StyledLine(line, frozenset(i for start, end in spans for i in range(start, end)))