"""Collaborator interfaces consumed by the highlight core."""

from __future__ import annotations

from typing import Any, Callable, Protocol, Sequence

from symhl.core.styles import HighlightStyle

SymbolSpan = tuple[str, int, int]


class HighlightRenderer(Protocol):
    def register_highlight(self, buffer_id: str, pattern: str, style: HighlightStyle) -> None: ...
    def unregister_highlight(self, buffer_id: str, pattern: str) -> None: ...
    def refresh(self, buffer_id: str) -> None: ...


class TextBuffer(Protocol):
    @property
    def buffer_id(self) -> str: ...
    def text(self) -> str: ...
    def cursor_offset(self) -> int: ...
    def move_cursor(self, offset: int) -> None: ...
    def symbol_at_cursor(self) -> SymbolSpan | None: ...
    def buffer_bounds(self) -> tuple[int, int]: ...
    def language_id(self) -> str: ...
    def replace_ranges(self, ranges: Sequence[tuple[int, int]], replacement: str) -> None: ...


class Scheduler(Protocol):
    def schedule_repeating(self, delay_seconds: float, callback: Callable[[], None]) -> Any: ...
    def cancel(self, handle: Any) -> None: ...
