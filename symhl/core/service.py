"""User-facing symbol highlight commands over a set of open buffers.

The host editor owns the event loop. It calls ``on_buffer_opened`` when a
buffer becomes visible, ``on_command_completed`` after every user command and
runs the commands below. Idle timeouts arrive through the injected scheduler.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from symhl.core import occurrences
from symhl.core.colors import make_color_assigner
from symhl.core.errors import NoEnclosingScope, NoSymbolAtCursor
from symhl.core.navigation import (
    BACKWARD,
    BACKWARD_REPEAT,
    FORWARD,
    FORWARD_REPEAT,
    JumpResult,
    NavigationEngine,
)
from symhl.core.protocols import HighlightRenderer, Scheduler, TextBuffer
from symhl.core.registry import HighlightRegistry
from symhl.core.styles import HighlightStyle
from symhl.core.symbols import Symbol, SymbolMatcher
from symhl.core.transient import TransientHighlightController
from symhl.services.replace_service import ReplaceResult, replace_symbol
from symhl.services.scope_service import enclosing_function_span
from symhl.settings_models import SymbolHighlightSettings, normalize_symbol_highlight_settings

_LOG = logging.getLogger(__name__)

ScopeResolver = Callable[[str, int, str], tuple[int, int] | None]


class SymbolHighlightService:
    def __init__(
        self,
        renderer: HighlightRenderer,
        scheduler: Scheduler,
        settings: Mapping[str, Any] | None = None,
        *,
        show_message: Callable[[str], None] | None = None,
        scope_resolver: ScopeResolver = enclosing_function_span,
    ) -> None:
        self.settings: SymbolHighlightSettings = normalize_symbol_highlight_settings(settings)
        self._show_message = show_message
        self._scope_resolver = scope_resolver
        self._buffers: dict[str, TextBuffer] = {}
        self._current_id = ""
        self._running_command = ""

        self.matcher = SymbolMatcher(self.settings["ignore_list"])
        self.registry = HighlightRegistry(
            renderer,
            make_color_assigner(self.settings["color_mode"], self.settings["palette"]),
            foreground_color=self.settings["foreground_color"],
        )
        self.navigation = NavigationEngine(self.matcher)
        self.transient = TransientHighlightController(
            self.registry,
            self.matcher,
            scheduler,
            self.current_buffer,
            idle_delay=self.settings["idle_delay"],
            highlight_single_occurrence=self.settings["highlight_single_occurrence"],
            highlight_on_navigation=self.settings["highlight_on_navigation"],
            on_highlighted=self._on_transient_highlighted,
        )

    # ---------- settings ----------
    def apply_settings(self, settings: Mapping[str, Any] | None) -> None:
        previous = self.settings
        self.settings = normalize_symbol_highlight_settings(settings)
        self.matcher.set_ignore_list(self.settings["ignore_list"])
        self.registry.set_foreground_color(self.settings["foreground_color"])
        if (
            previous["color_mode"] != self.settings["color_mode"]
            or previous["palette"] != self.settings["palette"]
        ):
            self.registry.set_color_assigner(
                make_color_assigner(self.settings["color_mode"], self.settings["palette"])
            )
        self.transient.highlight_single_occurrence = self.settings["highlight_single_occurrence"]
        self.transient.highlight_on_navigation = self.settings["highlight_on_navigation"]
        if previous["idle_delay"] != self.settings["idle_delay"]:
            self.transient.set_idle_delay(self.settings["idle_delay"])

    def message_enabled(self, mode: str) -> bool:
        return mode in self.settings["occurrence_message"]

    def _message(self, text: str) -> None:
        if text and self._show_message is not None:
            self._show_message(text)

    # ---------- buffer lifecycle ----------
    def on_buffer_opened(self, buffer: TextBuffer) -> None:
        buffer_id = buffer.buffer_id
        self._buffers[buffer_id] = buffer
        self.registry.rehighlight(buffer_id, buffer.language_id())
        if not self._current_id:
            self._current_id = buffer_id

    def on_buffer_closed(self, buffer_id: str) -> None:
        self._buffers.pop(buffer_id, None)
        self.registry.detach_buffer(buffer_id)
        self.navigation.forget_buffer(buffer_id)
        if self._current_id == buffer_id:
            self._current_id = next(iter(self._buffers), "")

    def set_current_buffer(self, buffer_id: str) -> None:
        if buffer_id in self._buffers:
            self._current_id = buffer_id

    def current_buffer(self) -> TextBuffer | None:
        return self._buffers.get(self._current_id)

    def buffer(self, buffer_id: str) -> TextBuffer | None:
        return self._buffers.get(buffer_id)

    def _require_buffer(self) -> TextBuffer:
        buffer = self.current_buffer()
        if buffer is None:
            raise NoSymbolAtCursor("No active buffer")
        return buffer

    def _symbol_at_cursor(self, buffer: TextBuffer) -> tuple[Symbol, int, int]:
        resolved = self.matcher.symbol_at_cursor(buffer)
        if resolved is None:
            raise NoSymbolAtCursor()
        symbol, start, end = resolved
        self.navigation.remember(symbol, start, end, buffer.cursor_offset(), buffer.buffer_id)
        return resolved

    # ---------- events ----------
    def on_command_completed(self, command: str = "") -> None:
        if self._running_command:
            return
        was_jump = self.navigation.finish_command(command)
        buffer = self.current_buffer()
        if buffer is not None:
            self.transient.on_command(buffer, was_jump=was_jump)

    def on_idle_timeout(self) -> Symbol | None:
        buffer = self.current_buffer()
        if buffer is None:
            return None
        return self.transient.on_idle_timeout(buffer)

    def _on_transient_highlighted(self, buffer: TextBuffer, symbol: Symbol) -> None:
        if self.message_enabled("transient"):
            self._message(occurrences.report(symbol, buffer.text(), buffer.cursor_offset()))

    def run_command(self, command: str, func: Callable[[], Any]) -> Any:
        """Run one user command, turning expected failures into messages."""
        if self._running_command:
            _LOG.debug("Ignoring nested command %s during %s", command, self._running_command)
            return None
        self._running_command = command
        try:
            return func()
        except (NoSymbolAtCursor, NoEnclosingScope) as exc:
            self._message(str(exc))
            return None
        finally:
            self._running_command = ""
            self.on_command_completed(command)

    def shutdown(self) -> None:
        self.transient.shutdown()

    # ---------- commands ----------
    def toggle_highlight(self) -> bool:
        buffer = self._require_buffer()
        symbol, _start, _end = self._symbol_at_cursor(buffer)
        enabled = self.registry.toggle(symbol)
        if enabled and self.message_enabled("explicit"):
            self._message(occurrences.report(symbol, buffer.text(), buffer.cursor_offset()))
        return enabled

    def remove_all_highlights(self) -> int:
        return self.registry.remove_all()

    def list_highlighted(self) -> list[tuple[str, HighlightStyle]]:
        listed = self.registry.list_all()
        if listed:
            self._message("Highlighted: " + ", ".join(text for text, _style in listed))
        else:
            self._message("No highlighted symbols")
        return listed

    def report_occurrence(self) -> str:
        buffer = self._require_buffer()
        symbol, _start, _end = self._symbol_at_cursor(buffer)
        text = occurrences.report(symbol, buffer.text(), buffer.cursor_offset())
        self._message(text)
        return text

    def list_occurrences(self) -> list[occurrences.OccurrenceLine]:
        buffer = self._require_buffer()
        symbol, _start, _end = self._symbol_at_cursor(buffer)
        found = occurrences.list_occurrences(symbol, buffer.text())
        noun = "occurrence" if len(found) == 1 else "occurrences"
        self._message(f"{len(found)} {noun} of '{symbol.text}'")
        return found

    def jump_next(self) -> JumpResult:
        return self._jump(FORWARD)

    def jump_previous(self) -> JumpResult:
        return self._jump(BACKWARD)

    def jump_next_force(self) -> JumpResult:
        return self._jump(FORWARD_REPEAT)

    def jump_previous_force(self) -> JumpResult:
        return self._jump(BACKWARD_REPEAT)

    def jump_next_in_scope(self) -> JumpResult:
        return self._jump(FORWARD, scoped=True)

    def jump_previous_in_scope(self) -> JumpResult:
        return self._jump(BACKWARD, scoped=True)

    def _jump(self, direction: int, *, scoped: bool = False) -> JumpResult:
        buffer = self._require_buffer()
        bounds = None
        if scoped:
            bounds = self._scope_resolver(buffer.text(), buffer.cursor_offset(), buffer.language_id())
            if bounds is None:
                raise NoEnclosingScope()
        result = self.navigation.jump(buffer, direction, bounds=bounds)
        if self.message_enabled("navigation"):
            self._message(occurrences.report(result.symbol, buffer.text(), result.offset, bounds, where=result.where))
        elif result.wrapped:
            self._message(result.wrap_notice)
        return result

    def jump_back(self) -> bool:
        while True:
            target = self.navigation.jump_back()
            if target is None:
                self._message("No earlier jump position")
                return False
            buffer_id, offset = target
            buffer = self._buffers.get(buffer_id)
            if buffer is None:
                continue
            self._current_id = buffer_id
            lo, hi = buffer.buffer_bounds()
            buffer.move_cursor(max(lo, min(offset, hi)))
            return True

    def replace_symbol_interactive(self, replacement_text: str) -> ReplaceResult:
        buffer = self._require_buffer()
        symbol, _start, _end = self._symbol_at_cursor(buffer)
        replacement = str(replacement_text or "")
        if not replacement:
            raise ValueError("Replacement text cannot be empty")
        self.transient.clear(buffer.buffer_id)
        result = replace_symbol(buffer, symbol, replacement)
        if result.replacements and self.registry.is_explicit(symbol.text):
            self.registry.remove(symbol)
            new_symbol = self.matcher.symbol_for(replacement, buffer.language_id())
            if new_symbol is not None:
                self.registry.add(new_symbol)
        self._message(result.summary())
        return result
