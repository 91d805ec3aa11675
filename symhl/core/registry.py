"""Process-wide set of highlighted symbols, kept in sync across open buffers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from symhl.core.colors import ColorAssigner
from symhl.core.errors import HighlightRenderError
from symhl.core.protocols import HighlightRenderer
from symhl.core.styles import TRANSIENT_STYLE, HighlightStyle
from symhl.core.symbols import Symbol, anchored_pattern

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class HighlightEntry:
    symbol: Symbol
    style: HighlightStyle


@dataclass(slots=True)
class _BufferSlot:
    language_id: str
    registered: dict[str, HighlightStyle]
    transient: Symbol | None = None


class HighlightRegistry:
    """Explicit (user-toggled) highlights shared by every buffer, plus one
    transient symbol per buffer.

    A literal is never explicit and transient in the same buffer: making a
    symbol explicit clears any transient copy of it first.
    """

    def __init__(
        self,
        renderer: HighlightRenderer,
        color_assigner=None,
        *,
        foreground_color: str = "",
    ) -> None:
        self._renderer = renderer
        self._colors = color_assigner or ColorAssigner()
        self._foreground = str(foreground_color or "")
        self._entries: dict[str, HighlightEntry] = {}
        self._slots: dict[str, _BufferSlot] = {}
        self._in_flight: set[str] = set()

    # ---------- configuration ----------
    def set_color_assigner(self, color_assigner) -> None:
        self._colors = color_assigner

    def set_foreground_color(self, color: str) -> None:
        self._foreground = str(color or "")

    # ---------- buffers ----------
    def attach_buffer(self, buffer_id: str, language_id: str = "") -> None:
        language = str(language_id or "")
        slot = self._slots.get(buffer_id)
        if slot is None:
            self._slots[buffer_id] = _BufferSlot(language_id=language, registered={})
            return
        if not language or language == slot.language_id:
            return
        # Patterns are anchored per language; drop them before the boundary class changes.
        stale = list(slot.registered)
        for pattern in stale:
            self._renderer.unregister_highlight(buffer_id, pattern)
            del slot.registered[pattern]
        slot.transient = None
        slot.language_id = language
        if stale:
            self._renderer.refresh(buffer_id)

    def detach_buffer(self, buffer_id: str) -> None:
        """Forget a closed buffer without calling back into the renderer."""
        self._slots.pop(buffer_id, None)

    def buffer_ids(self) -> list[str]:
        return list(self._slots)

    def registered_patterns(self, buffer_id: str) -> dict[str, HighlightStyle]:
        slot = self._slots.get(buffer_id)
        return dict(slot.registered) if slot is not None else {}

    def pattern_in(self, buffer_id: str, text: str) -> str:
        slot = self._slots.get(buffer_id)
        return anchored_pattern(text, slot.language_id if slot is not None else "")

    # ---------- explicit set ----------
    def is_explicit(self, text: str) -> bool:
        return str(text) in self._entries

    def entries(self) -> list[HighlightEntry]:
        return list(self._entries.values())

    def toggle(self, symbol: Symbol) -> bool:
        """Flip ``symbol``'s explicit highlight; return True when it is now on."""
        if symbol.text in self._in_flight:
            _LOG.debug("Ignoring nested toggle of %r", symbol.text)
            return self.is_explicit(symbol.text)
        if self.is_explicit(symbol.text):
            self.remove(symbol)
            return False
        self.add(symbol)
        return True

    def add(self, symbol: Symbol) -> HighlightEntry:
        existing = self._entries.get(symbol.text)
        if existing is not None:
            return existing
        self._in_flight.add(symbol.text)
        try:
            style = HighlightStyle.colors(self._colors.color_for(symbol.text).name(), self._foreground)
            self._register_everywhere(symbol, style)
            # The explicit registration has already replaced any transient one.
            for buffer_id, slot in self._slots.items():
                if slot.transient is not None and slot.transient.text == symbol.text:
                    self._clear_transient_slot(buffer_id, slot)
            entry = HighlightEntry(symbol=symbol, style=style)
            self._entries[symbol.text] = entry
            _LOG.debug("Highlighted %r as %s", symbol.text, style.background)
            return entry
        finally:
            self._in_flight.discard(symbol.text)

    def remove(self, symbol: Symbol) -> bool:
        entry = self._entries.get(symbol.text)
        if entry is None:
            return False
        self._in_flight.add(symbol.text)
        try:
            changes: list[tuple[str, HighlightStyle | None]] = []
            try:
                for buffer_id, slot in list(self._slots.items()):
                    if anchored_pattern(symbol.text, slot.language_id) not in slot.registered:
                        continue
                    changes.append((buffer_id, entry.style))
                    self._unregister(buffer_id, slot, symbol.text)
            except Exception as exc:
                self._restore(symbol.text, changes)
                raise HighlightRenderError(f"Could not remove highlight of '{symbol.text}': {exc}") from exc
            for buffer_id, _style in changes:
                self._renderer.refresh(buffer_id)
            del self._entries[symbol.text]
            _LOG.debug("Removed highlight of %r", symbol.text)
            return True
        finally:
            self._in_flight.discard(symbol.text)

    def remove_all(self) -> int:
        removed = 0
        for entry in list(self._entries.values()):
            if self.remove(entry.symbol):
                removed += 1
        return removed

    def list_all(self) -> list[tuple[str, HighlightStyle]]:
        return [(entry.symbol.text, entry.style) for entry in self._entries.values()]

    def rehighlight(self, buffer_id: str, language_id: str | None = None) -> int:
        """Register every explicit symbol in one (newly visible) buffer."""
        if buffer_id not in self._slots or language_id is not None:
            self.attach_buffer(buffer_id, language_id or "")
        slot = self._slots[buffer_id]
        added = 0
        for entry in list(self._entries.values()):
            if self._register(buffer_id, slot, entry.symbol.text, entry.style):
                added += 1
        if added:
            self._renderer.refresh(buffer_id)
        return added

    # ---------- transient slot ----------
    def transient_symbol(self, buffer_id: str) -> Symbol | None:
        slot = self._slots.get(buffer_id)
        return slot.transient if slot is not None else None

    def set_transient(self, buffer_id: str, symbol: Symbol) -> bool:
        if self.is_explicit(symbol.text):
            return False
        if buffer_id not in self._slots:
            self.attach_buffer(buffer_id)
        slot = self._slots[buffer_id]
        if slot.transient is not None:
            if slot.transient.text == symbol.text:
                return True
            self._clear_transient_slot(buffer_id, slot)
        self._register(buffer_id, slot, symbol.text, TRANSIENT_STYLE)
        slot.transient = symbol
        self._renderer.refresh(buffer_id)
        return True

    def clear_transient(self, buffer_id: str) -> bool:
        slot = self._slots.get(buffer_id)
        if slot is None or slot.transient is None:
            return False
        self._clear_transient_slot(buffer_id, slot)
        return True

    def _clear_transient_slot(self, buffer_id: str, slot: _BufferSlot) -> None:
        symbol = slot.transient
        slot.transient = None
        if symbol is None:
            return
        pattern = anchored_pattern(symbol.text, slot.language_id)
        # An explicit highlight owns the registration once it exists.
        if slot.registered.get(pattern) == TRANSIENT_STYLE:
            self._unregister(buffer_id, slot, symbol.text)
            self._renderer.refresh(buffer_id)

    # ---------- renderer bookkeeping ----------
    def _register(self, buffer_id: str, slot: _BufferSlot, text: str, style: HighlightStyle) -> bool:
        pattern = anchored_pattern(text, slot.language_id)
        if slot.registered.get(pattern) == style:
            return False
        if pattern in slot.registered:
            self._renderer.unregister_highlight(buffer_id, pattern)
            del slot.registered[pattern]
        self._renderer.register_highlight(buffer_id, pattern, style)
        slot.registered[pattern] = style
        return True

    def _unregister(self, buffer_id: str, slot: _BufferSlot, text: str) -> bool:
        pattern = anchored_pattern(text, slot.language_id)
        if pattern not in slot.registered:
            return False
        self._renderer.unregister_highlight(buffer_id, pattern)
        del slot.registered[pattern]
        return True

    def _register_everywhere(self, symbol: Symbol, style: HighlightStyle) -> None:
        changes: list[tuple[str, HighlightStyle | None]] = []
        done: list[str] = []
        try:
            for buffer_id, slot in list(self._slots.items()):
                previous = slot.registered.get(anchored_pattern(symbol.text, slot.language_id))
                changes.append((buffer_id, previous))
                if self._register(buffer_id, slot, symbol.text, style):
                    done.append(buffer_id)
        except Exception as exc:
            self._restore(symbol.text, changes)
            raise HighlightRenderError(f"Could not highlight '{symbol.text}': {exc}") from exc
        for buffer_id in done:
            self._renderer.refresh(buffer_id)

    def _restore(self, text: str, changes: Iterable[tuple[str, HighlightStyle | None]]) -> None:
        """Put each buffer's registration of ``text`` back to its recorded style."""
        for buffer_id, previous in changes:
            slot = self._slots.get(buffer_id)
            if slot is None:
                continue
            pattern = anchored_pattern(text, slot.language_id)
            if slot.registered.get(pattern) == previous:
                continue
            try:
                if previous is None:
                    self._unregister(buffer_id, slot, text)
                else:
                    self._register(buffer_id, slot, text, previous)
            except Exception:
                _LOG.exception("Restoring %r failed in buffer %s", text, buffer_id)
