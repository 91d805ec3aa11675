"""Controller wiring Qt editors, timers and actions to the highlight service."""

from __future__ import annotations

from typing import Any, Callable, Mapping

from PySide6.QtCore import QObject, Signal
from PySide6.QtWidgets import QInputDialog, QPlainTextEdit

from symhl.core.service import SymbolHighlightService
from symhl.settings_models import normalize_symbol_highlight_settings
from symhl.ui.editor_buffer import EditorBuffer
from symhl.ui.extra_selection_renderer import ExtraSelectionRenderer
from symhl.ui.qt_scheduler import QtScheduler


class SymbolHighlightController(QObject):
    messageRequested = Signal(str)
    bufferActivated = Signal(str)

    def __init__(self, settings: Mapping[str, Any] | None = None, parent: QObject | None = None) -> None:
        super().__init__(parent)
        normalized = normalize_symbol_highlight_settings(settings)
        self.scheduler = QtScheduler(self)
        self.renderer = ExtraSelectionRenderer(transient_color=normalized["transient_color"])
        self.service = SymbolHighlightService(
            self.renderer,
            self.scheduler,
            normalized,
            show_message=self.messageRequested.emit,
        )
        self._buffers: dict[str, EditorBuffer] = {}
        self._commands: dict[str, Callable[[], Any]] = {
            "action.toggle_highlight": self.service.toggle_highlight,
            "action.remove_all_highlights": self.service.remove_all_highlights,
            "action.list_highlighted": self.service.list_highlighted,
            "action.report_occurrence": self.service.report_occurrence,
            "action.list_occurrences": self.service.list_occurrences,
            "action.jump_next": self.service.jump_next,
            "action.jump_previous": self.service.jump_previous,
            "action.jump_next_force": self.service.jump_next_force,
            "action.jump_previous_force": self.service.jump_previous_force,
            "action.jump_next_in_scope": self.service.jump_next_in_scope,
            "action.jump_previous_in_scope": self.service.jump_previous_in_scope,
            "action.jump_back": self._jump_back,
            "action.replace_symbol": self._prompt_replace,
        }

    def command_ids(self) -> list[str]:
        return list(self._commands)

    def attach_editor(self, editor: QPlainTextEdit, file_path: str = "") -> EditorBuffer:
        buffer = EditorBuffer(editor, file_path)
        self._buffers[buffer.buffer_id] = buffer
        self.renderer.attach(buffer.buffer_id, editor)
        self.service.on_buffer_opened(buffer)
        self.renderer.refresh(buffer.buffer_id)
        editor.cursorPositionChanged.connect(self._on_cursor_moved)
        return buffer

    def detach_editor(self, buffer_id: str) -> None:
        buffer = self._buffers.pop(buffer_id, None)
        if buffer is None:
            return
        buffer.editor.cursorPositionChanged.disconnect(self._on_cursor_moved)
        self.service.on_buffer_closed(buffer_id)
        self.renderer.detach(buffer_id)

    def activate(self, buffer_id: str) -> None:
        self.service.set_current_buffer(buffer_id)

    def run(self, action_id: str) -> Any:
        command = self._commands.get(action_id)
        if command is None:
            raise KeyError(f"Unknown symbol highlight action: {action_id}")
        return self.service.run_command(action_id, command)

    def apply_settings(self, settings: Mapping[str, Any] | None) -> None:
        normalized = normalize_symbol_highlight_settings(settings)
        self.renderer.set_transient_color(normalized["transient_color"])
        self.service.apply_settings(normalized)
        for buffer_id in self._buffers:
            self.renderer.refresh(buffer_id)

    def shutdown(self) -> None:
        self.service.shutdown()

    def _on_cursor_moved(self) -> None:
        self.scheduler.restart_all()
        self.service.on_command_completed()

    def _jump_back(self) -> bool:
        moved = self.service.jump_back()
        if moved:
            current = self.service.current_buffer()
            if isinstance(current, EditorBuffer):
                self.bufferActivated.emit(current.buffer_id)
                current.editor.setFocus()
        return moved

    def _prompt_replace(self):
        buffer = self.service.current_buffer()
        if not isinstance(buffer, EditorBuffer):
            return None
        span = buffer.symbol_at_cursor()
        old_text = span[0] if span is not None else ""
        replacement, accepted = QInputDialog.getText(
            buffer.editor,
            "Replace Symbol",
            f"Replace '{old_text}' with:" if old_text else "Replace with:",
            text=old_text,
        )
        if not accepted or not str(replacement or ""):
            return None
        return self.service.replace_symbol_interactive(str(replacement))
