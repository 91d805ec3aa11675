"""Cyclic jumps between occurrences of a symbol.

A jump keeps the cursor's column inside the symbol: starting on the 2nd
character of one occurrence lands on the 2nd character of the next one.
When no occurrence remains in the jump direction, the search wraps to the
opposite end of the buffer (or of the narrowed range) once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from symhl.core import occurrences
from symhl.core.errors import NoSymbolAtCursor, SymbolNotFound
from symhl.core.protocols import TextBuffer
from symhl.core.symbols import Symbol, SymbolMatcher

_LOG = logging.getLogger(__name__)

FORWARD = 1
BACKWARD = -1
FORWARD_REPEAT = 2
BACKWARD_REPEAT = -2

JUMP_COMMAND = "symbol-jump"


@dataclass(slots=True)
class NavigationState:
    symbol: Symbol
    start: int
    end: int
    cursor: int
    buffer_id: str


@dataclass(frozen=True, slots=True)
class JumpResult:
    symbol: Symbol
    offset: int
    start: int
    end: int
    wrapped: bool
    direction: int
    where: str = "buffer"

    @property
    def wrap_notice(self) -> str:
        if not self.wrapped:
            return ""
        edge = "beginning" if self.direction > 0 else "end"
        return f"Continued from {edge} of {self.where}"


class NavigationEngine:
    def __init__(self, matcher: SymbolMatcher) -> None:
        self._matcher = matcher
        self.state: NavigationState | None = None
        self.history: list[tuple[str, int]] = []
        self._last_command = ""
        self._this_command = ""

    @property
    def last_command_was_jump(self) -> bool:
        return self._last_command == JUMP_COMMAND

    def remember(self, symbol: Symbol, start: int, end: int, cursor: int, buffer_id: str) -> None:
        self.state = NavigationState(symbol, int(start), int(end), int(cursor), str(buffer_id))

    def finish_command(self, command: str = "") -> bool:
        """Record the command that just completed; True if it was a jump."""
        finished = self._this_command or str(command or "")
        self._this_command = ""
        self._last_command = finished
        return finished == JUMP_COMMAND

    def jump(
        self,
        buffer: TextBuffer,
        direction: int,
        *,
        bounds: tuple[int, int] | None = None,
    ) -> JumpResult:
        if direction not in (FORWARD, BACKWARD, FORWARD_REPEAT, BACKWARD_REPEAT):
            raise ValueError(f"Unsupported jump direction: {direction}")
        sign = 1 if direction > 0 else -1
        cursor = int(buffer.cursor_offset())
        symbol, origin, rel = self._resolve(buffer, cursor, sign, repeat=abs(direction) == 2)

        if not self.last_command_was_jump:
            self.history.append((buffer.buffer_id, cursor))

        text = buffer.text()
        lo, hi = bounds if bounds is not None else buffer.buffer_bounds()
        if sign > 0:
            found = occurrences.search_forward(symbol, text, origin, (lo, hi))
        else:
            found = occurrences.search_backward(symbol, text, origin, (lo, hi))
        wrapped = found is None
        if found is None:
            if sign > 0:
                found = occurrences.search_forward(symbol, text, lo, (lo, hi))
            else:
                found = occurrences.search_backward(symbol, text, hi, (lo, hi))
        if found is None:
            raise SymbolNotFound(f"'{symbol.text}' no longer occurs in the buffer")

        start, end = found
        target = start + max(0, min(rel, end - start))
        buffer.move_cursor(target)
        self.remember(symbol, start, end, target, buffer.buffer_id)
        self._this_command = JUMP_COMMAND
        _LOG.debug("Jumped to %r at %d (wrapped=%s)", symbol.text, target, wrapped)
        return JumpResult(
            symbol=symbol,
            offset=target,
            start=start,
            end=end,
            wrapped=wrapped,
            direction=sign,
            where="function" if bounds is not None else "buffer",
        )

    def _resolve(self, buffer: TextBuffer, cursor: int, sign: int, *, repeat: bool) -> tuple[Symbol, int, int]:
        """Return ``(symbol, search_origin, offset_within_symbol)``."""
        fresh = None if repeat and self.state is not None else self._matcher.symbol_at_cursor(buffer)
        if fresh is not None:
            symbol, start, end = fresh
            self.remember(symbol, start, end, cursor, buffer.buffer_id)
            return symbol, (end if sign > 0 else start), cursor - start

        state = self.state
        if state is None:
            raise NoSymbolAtCursor()
        symbol = self._matcher.symbol_for(state.symbol.text, buffer.language_id()) or state.symbol
        if state.buffer_id == buffer.buffer_id and state.start <= cursor <= state.end:
            return symbol, (state.end if sign > 0 else state.start), cursor - state.start
        return symbol, cursor, 0

    def jump_back(self) -> tuple[str, int] | None:
        if not self.history:
            return None
        return self.history.pop()

    def forget_buffer(self, buffer_id: str) -> None:
        self.history = [item for item in self.history if item[0] != buffer_id]
        if self.state is not None and self.state.buffer_id == buffer_id:
            self.state.buffer_id = ""
