"""Replace every boundary-matched occurrence of a symbol in one buffer."""

from __future__ import annotations

from dataclasses import dataclass

from symhl.core import occurrences
from symhl.core.protocols import TextBuffer
from symhl.core.symbols import Symbol


@dataclass(frozen=True, slots=True)
class ReplaceResult:
    old_text: str
    new_text: str
    replacements: int

    def summary(self) -> str:
        noun = "occurrence" if self.replacements == 1 else "occurrences"
        return f"Replaced {self.replacements} {noun} of '{self.old_text}' with '{self.new_text}'."


def replacement_ranges(
    symbol: Symbol,
    text: str,
    bounds: tuple[int, int] | None = None,
) -> list[tuple[int, int]]:
    return list(occurrences.iter_spans(symbol, text, bounds))


def replace_symbol(
    buffer: TextBuffer,
    symbol: Symbol,
    replacement: str,
    *,
    bounds: tuple[int, int] | None = None,
) -> ReplaceResult:
    new_text = str(replacement if replacement is not None else "")
    if new_text == symbol.text:
        return ReplaceResult(symbol.text, new_text, 0)
    ranges = replacement_ranges(symbol, buffer.text(), bounds)
    if ranges:
        buffer.replace_ranges(ranges, new_text)
    return ReplaceResult(symbol.text, new_text, len(ranges))
