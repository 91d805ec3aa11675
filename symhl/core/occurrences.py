"""Occurrence counting, ranking and bounded searches over buffer text."""

from __future__ import annotations

import re
from dataclasses import dataclass

from symhl.core.symbols import Symbol


@dataclass(frozen=True, slots=True)
class OccurrenceLine:
    line: int
    column: int
    line_text: str


def _regex(pattern: str | re.Pattern[str] | Symbol) -> re.Pattern[str]:
    if isinstance(pattern, Symbol):
        return pattern.regex
    if isinstance(pattern, re.Pattern):
        return pattern
    return re.compile(str(pattern))


def _clamp_bounds(text: str, bounds: tuple[int, int] | None) -> tuple[int, int]:
    size = len(text)
    if bounds is None:
        return 0, size
    start = max(0, min(int(bounds[0]), size))
    end = max(start, min(int(bounds[1]), size))
    return start, end


def iter_spans(pattern, text: str, bounds: tuple[int, int] | None = None):
    regex = _regex(pattern)
    lo, hi = _clamp_bounds(text, bounds)
    for match in regex.finditer(text, lo, hi):
        if match.end() > match.start():
            yield match.start(), match.end()


def count(pattern, text: str, bounds: tuple[int, int] | None = None) -> int:
    """Total non-overlapping boundary-matched occurrences (always case-sensitive)."""
    return sum(1 for _ in iter_spans(pattern, text, bounds))


def rank_before_cursor(
    pattern,
    text: str,
    cursor_offset: int,
    bounds: tuple[int, int] | None = None,
) -> int:
    """Occurrences that end strictly before ``cursor_offset``."""
    offset = int(cursor_offset)
    total = 0
    for _start, end in iter_spans(pattern, text, bounds):
        if end >= offset:
            break
        total += 1
    return total


def search_forward(
    pattern,
    text: str,
    from_offset: int,
    bounds: tuple[int, int] | None = None,
) -> tuple[int, int] | None:
    lo, hi = _clamp_bounds(text, bounds)
    start = max(lo, min(int(from_offset), hi))
    for span in iter_spans(pattern, text, (start, hi)):
        return span
    return None


def search_backward(
    pattern,
    text: str,
    from_offset: int,
    bounds: tuple[int, int] | None = None,
) -> tuple[int, int] | None:
    """Last occurrence that ends at or before ``from_offset``."""
    lo, hi = _clamp_bounds(text, bounds)
    end = max(lo, min(int(from_offset), hi))
    found: tuple[int, int] | None = None
    for span in iter_spans(pattern, text, (lo, hi)):
        if span[1] > end:
            break
        found = span
    return found


def occurrence_message(total: int, rank: int, *, where: str = "buffer") -> str:
    if total <= 0:
        return f"No occurrences in {where}"
    if total == 1:
        return f"Only occurrence in {where}"
    return f"Occurrence {max(1, min(rank, total))}/{total} in {where}"


def report(
    pattern,
    text: str,
    cursor_offset: int,
    bounds: tuple[int, int] | None = None,
    *,
    where: str = "buffer",
) -> str:
    total = count(pattern, text, bounds)
    rank = rank_before_cursor(pattern, text, cursor_offset, bounds) + 1
    return occurrence_message(total, rank, where=where)


def list_occurrences(pattern, text: str) -> list[OccurrenceLine]:
    out: list[OccurrenceLine] = []
    line_starts = [0]
    line_starts.extend(idx + 1 for idx, ch in enumerate(text) if ch == "\n")
    line_idx = 0
    for start, _end in iter_spans(pattern, text):
        while line_idx + 1 < len(line_starts) and line_starts[line_idx + 1] <= start:
            line_idx += 1
        line_start = line_starts[line_idx]
        line_end = text.find("\n", line_start)
        if line_end < 0:
            line_end = len(text)
        out.append(
            OccurrenceLine(
                line=line_idx + 1,
                column=start - line_start + 1,
                line_text=text[line_start:line_end],
            )
        )
    return out
