"""Idle-timer driven highlight of the symbol under the cursor."""

from __future__ import annotations

import logging
from typing import Any, Callable

from symhl.core import occurrences
from symhl.core.protocols import Scheduler, TextBuffer
from symhl.core.registry import HighlightRegistry
from symhl.core.symbols import Symbol, SymbolMatcher

_LOG = logging.getLogger(__name__)


class TransientHighlightController:
    """Per-buffer two-state machine: a transient symbol is shown, or nothing is.

    An idle timeout picks up the symbol at the cursor; any later command that
    moves the cursor off that symbol clears it again. With an idle delay of
    zero no timer runs and every command re-evaluates immediately.
    """

    def __init__(
        self,
        registry: HighlightRegistry,
        matcher: SymbolMatcher,
        scheduler: Scheduler,
        current_buffer: Callable[[], TextBuffer | None],
        *,
        idle_delay: float = 1.5,
        highlight_single_occurrence: bool = True,
        highlight_on_navigation: bool = False,
        on_highlighted: Callable[[TextBuffer, Symbol], None] | None = None,
    ) -> None:
        self._registry = registry
        self._matcher = matcher
        self._scheduler = scheduler
        self._current_buffer = current_buffer
        self._on_highlighted = on_highlighted
        self.highlight_single_occurrence = bool(highlight_single_occurrence)
        self.highlight_on_navigation = bool(highlight_on_navigation)
        self._idle_delay = 0.0
        self._timer: Any = None
        self.set_idle_delay(idle_delay)

    @property
    def idle_delay(self) -> float:
        return self._idle_delay

    @property
    def every_event(self) -> bool:
        return self._idle_delay <= 0

    def set_idle_delay(self, delay: float) -> None:
        """Re-arm the idle timer, cancelling the previous one exactly once."""
        self._idle_delay = max(0.0, float(delay))
        self._cancel_timer()
        if not self.every_event:
            self._timer = self._scheduler.schedule_repeating(self._idle_delay, self._on_timer)
            _LOG.debug("Idle timer armed at %.3fs", self._idle_delay)

    def shutdown(self) -> None:
        self._cancel_timer()

    def _cancel_timer(self) -> None:
        timer, self._timer = self._timer, None
        if timer is not None:
            self._scheduler.cancel(timer)

    def _on_timer(self) -> None:
        buffer = self._current_buffer()
        if buffer is not None:
            self.on_idle_timeout(buffer)

    def on_idle_timeout(self, buffer: TextBuffer) -> Symbol | None:
        buffer_id = buffer.buffer_id
        resolved = self._matcher.symbol_at_cursor(buffer)
        symbol = resolved[0] if resolved is not None else None
        current = self._registry.transient_symbol(buffer_id)
        if symbol == current:
            return current
        if symbol is not None and self._registry.is_explicit(symbol.text):
            return current

        self._registry.clear_transient(buffer_id)
        if symbol is None:
            return None
        if not self.highlight_single_occurrence and occurrences.count(symbol, buffer.text()) <= 1:
            return None
        if not self._registry.set_transient(buffer_id, symbol):
            return None
        if self._on_highlighted is not None:
            self._on_highlighted(buffer, symbol)
        return symbol

    def on_command(self, buffer: TextBuffer, *, was_jump: bool = False) -> None:
        if self.every_event:
            self.on_idle_timeout(buffer)
            return
        current = self._registry.transient_symbol(buffer.buffer_id)
        if current is not None:
            resolved = self._matcher.symbol_at_cursor(buffer)
            if resolved is None or resolved[0] != current:
                self._registry.clear_transient(buffer.buffer_id)
        if was_jump and self.highlight_on_navigation:
            self.on_idle_timeout(buffer)

    def clear(self, buffer_id: str) -> bool:
        return self._registry.clear_transient(buffer_id)
