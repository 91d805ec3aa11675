"""Symbol values, boundary-anchored match patterns and ignore-list filtering."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Iterable

from symhl.services.language_id import symbol_char_class

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Symbol:
    """A literal token plus its boundary-anchored pattern; equal by text only."""

    text: str
    pattern: str = field(compare=False)

    @property
    def regex(self) -> re.Pattern[str]:
        return _compile(self.pattern)


@lru_cache(maxsize=512)
def _compile(pattern: str) -> re.Pattern[str]:
    # Case-sensitive regardless of any ambient case folding.
    return re.compile(pattern)


def boundary_markers(language_id: str = "") -> tuple[str, str]:
    chars = symbol_char_class(language_id)
    return rf"(?<![{chars}])", rf"(?![{chars}])"


def anchored_pattern(text: str, language_id: str = "") -> str:
    prefix, suffix = boundary_markers(language_id)
    return f"{prefix}{re.escape(text)}{suffix}"


def symbol_span_at(text: str, offset: int, language_id: str = "") -> tuple[str, int, int] | None:
    """Return ``(token, start, end)`` for the symbol touching ``offset``.

    A cursor sitting just after the last character of a symbol still counts as
    being on it.
    """
    source = str(text or "")
    if not source:
        return None
    is_symbol_char = _symbol_char_matcher(language_id)
    pos = max(0, min(int(offset), len(source)))
    if pos >= len(source) or not is_symbol_char(source[pos]):
        if pos > 0 and is_symbol_char(source[pos - 1]):
            pos -= 1
        else:
            return None

    start = pos
    while start > 0 and is_symbol_char(source[start - 1]):
        start -= 1
    end = pos
    while end < len(source) and is_symbol_char(source[end]):
        end += 1
    token = source[start:end]
    if not token:
        return None
    return token, start, end


@lru_cache(maxsize=32)
def _symbol_char_matcher(language_id: str):
    char_re = re.compile(rf"[{symbol_char_class(language_id)}]")
    return lambda ch: bool(char_re.match(ch))


class SymbolMatcher:
    def __init__(self, ignore_list: Iterable[str] = ()) -> None:
        self._ignore_rules: list[re.Pattern[str]] = []
        self.set_ignore_list(ignore_list)

    def set_ignore_list(self, ignore_list: Iterable[str]) -> None:
        rules: list[re.Pattern[str]] = []
        for raw in ignore_list or ():
            text = str(raw or "")
            if not text:
                continue
            try:
                rules.append(re.compile(text))
            except re.error as exc:
                _LOG.warning("Skipping invalid ignore pattern %r: %s", text, exc)
        self._ignore_rules = rules

    def is_ignored(self, raw_text: str) -> bool:
        return any(rule.search(raw_text) for rule in self._ignore_rules)

    def pattern_for(self, raw_text: str | None, language_id: str = "") -> str | None:
        text = str(raw_text or "")
        if not text or self.is_ignored(text):
            return None
        return anchored_pattern(text, language_id)

    def symbol_for(self, raw_text: str | None, language_id: str = "") -> Symbol | None:
        pattern = self.pattern_for(raw_text, language_id)
        if pattern is None:
            return None
        return Symbol(str(raw_text), pattern)

    def symbol_at_cursor(self, buffer) -> tuple[Symbol, int, int] | None:
        """Derive the symbol under the buffer's cursor, with its bounds."""
        span = buffer.symbol_at_cursor()
        if span is None:
            return None
        raw, start, end = span
        symbol = self.symbol_for(raw, buffer.language_id())
        if symbol is None:
            return None
        return symbol, int(start), int(end)

    @staticmethod
    def is_highlighted(symbol: Symbol | None, registry) -> bool:
        if symbol is None:
            return False
        return registry.is_explicit(symbol.text)
