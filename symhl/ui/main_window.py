"""Tabbed file viewer hosting the symbol highlight commands."""

from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtGui import QAction, QFont, QKeySequence
from PySide6.QtWidgets import QFileDialog, QMainWindow, QPlainTextEdit, QTabWidget

from symhl.settings_store import JsonSettingsStore, SettingsStoreError
from symhl.ui.controllers.action_registry import ActionRegistry
from symhl.ui.controllers.symbol_highlight_controller import SymbolHighlightController

_LOG = logging.getLogger(__name__)


class SymbolViewerWindow(QMainWindow):
    APP_NAME = "Symbol Highlight Viewer"
    MAX_RECENT_FILES = 12

    def __init__(self, settings_store: JsonSettingsStore, parent=None) -> None:
        super().__init__(parent)
        self.settings_store = settings_store
        self.setWindowTitle(self.APP_NAME)
        self.resize(1100, 760)

        self.tabs = QTabWidget(self)
        self.tabs.setTabsClosable(True)
        self.tabs.setDocumentMode(True)
        self.tabs.currentChanged.connect(self._on_current_tab_changed)
        self.tabs.tabCloseRequested.connect(self._close_tab)
        self.setCentralWidget(self.tabs)

        self.controller = SymbolHighlightController(settings_store.symbol_highlight_settings(), self)
        self.controller.messageRequested.connect(lambda text: self.statusBar().showMessage(text, 3200))
        self.controller.bufferActivated.connect(self.show_buffer)
        self._buffer_ids: dict[QPlainTextEdit, str] = {}

        file_menu = self.menuBar().addMenu("&File")
        open_action = QAction("Open...", self)
        open_action.setShortcut(QKeySequence.StandardKey.Open)
        open_action.triggered.connect(self.open_file_dialog)
        file_menu.addAction(open_action)

        symbols_menu = self.menuBar().addMenu("&Symbols")
        self._symbol_actions = ActionRegistry.create_actions(self, self.controller, symbols_menu)
        ActionRegistry.apply_keybindings(
            self._symbol_actions,
            settings_store.get("symbol_highlight.keybindings", {}),
        )

    def _editor_font(self) -> QFont:
        font = QFont()
        family = str(self.settings_store.get("window.font_family", "") or "").strip()
        if family:
            font.setFamily(family)
        font.setStyleHint(QFont.StyleHint.Monospace)
        try:
            font.setPointSize(max(6, int(self.settings_store.get("window.font_size", 10))))
        except (TypeError, ValueError):
            font.setPointSize(10)
        return font

    def open_file_dialog(self) -> None:
        paths, _filter = QFileDialog.getOpenFileNames(self, "Open Files", str(Path.cwd()))
        for path in paths:
            self.open_file(path)

    def open_file(self, file_path: str) -> bool:
        path = Path(file_path).expanduser()
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            self.statusBar().showMessage(f"Could not open {path}: {exc}", 4000)
            return False

        editor = QPlainTextEdit(self)
        editor.setFont(self._editor_font())
        editor.setLineWrapMode(QPlainTextEdit.LineWrapMode.NoWrap)
        editor.setPlainText(text)
        buffer = self.controller.attach_editor(editor, str(path))
        self._buffer_ids[editor] = buffer.buffer_id
        index = self.tabs.addTab(editor, path.name)
        self.tabs.setTabToolTip(index, str(path))
        self.tabs.setCurrentIndex(index)
        self._remember_recent(str(path.resolve()))
        return True

    def _remember_recent(self, path_text: str) -> None:
        recent = [item for item in self.settings_store.get("window.recent_files", []) if item != path_text]
        recent.insert(0, path_text)
        self.settings_store.set("window.recent_files", recent[: self.MAX_RECENT_FILES])

    def show_buffer(self, buffer_id: str) -> None:
        for editor, known_id in self._buffer_ids.items():
            if known_id == buffer_id:
                self.tabs.setCurrentWidget(editor)
                return

    def _on_current_tab_changed(self, index: int) -> None:
        editor = self.tabs.widget(index)
        buffer_id = self._buffer_ids.get(editor) if isinstance(editor, QPlainTextEdit) else None
        if buffer_id:
            self.controller.activate(buffer_id)

    def _close_tab(self, index: int) -> None:
        editor = self.tabs.widget(index)
        if isinstance(editor, QPlainTextEdit):
            buffer_id = self._buffer_ids.pop(editor, "")
            if buffer_id:
                self.controller.detach_editor(buffer_id)
        self.tabs.removeTab(index)
        if editor is not None:
            editor.deleteLater()

    def closeEvent(self, event) -> None:
        self.controller.shutdown()
        if self.settings_store.dirty:
            try:
                self.settings_store.save()
            except SettingsStoreError as exc:
                _LOG.warning("%s", exc)
        super().closeEvent(event)
