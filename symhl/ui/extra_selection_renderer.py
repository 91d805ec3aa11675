"""Paints registered symbol patterns onto editors with ``QTextEdit.ExtraSelection``."""

from __future__ import annotations

import re

from PySide6.QtGui import QColor, QTextCursor
from PySide6.QtWidgets import QPlainTextEdit, QTextEdit

from symhl.core.styles import TRANSIENT_STYLE_NAME, HighlightStyle
from symhl.ui.editor_buffer import _qt_position

MAX_PAINTED_MATCHES = 3000


class ExtraSelectionRenderer:
    def __init__(self, *, transient_color: str = "#4b5263") -> None:
        self._editors: dict[str, QPlainTextEdit] = {}
        self._patterns: dict[str, dict[str, HighlightStyle]] = {}
        self._named_styles: dict[str, HighlightStyle] = {}
        self.set_transient_color(transient_color)

    def set_transient_color(self, color: str) -> None:
        self._named_styles[TRANSIENT_STYLE_NAME] = HighlightStyle.colors(str(color or "#4b5263"))

    def attach(self, buffer_id: str, editor: QPlainTextEdit) -> None:
        self._editors[buffer_id] = editor
        self._patterns.setdefault(buffer_id, {})
        editor.textChanged.connect(lambda bid=buffer_id: self.refresh(bid))

    def detach(self, buffer_id: str) -> None:
        self._editors.pop(buffer_id, None)
        self._patterns.pop(buffer_id, None)

    def registered(self, buffer_id: str) -> dict[str, HighlightStyle]:
        return dict(self._patterns.get(buffer_id, {}))

    # HighlightRenderer
    def register_highlight(self, buffer_id: str, pattern: str, style: HighlightStyle) -> None:
        self._patterns.setdefault(buffer_id, {})[pattern] = style

    def unregister_highlight(self, buffer_id: str, pattern: str) -> None:
        self._patterns.get(buffer_id, {}).pop(pattern, None)

    def refresh(self, buffer_id: str) -> None:
        editor = self._editors.get(buffer_id)
        if editor is None:
            return
        text = editor.toPlainText()
        selections: list[QTextEdit.ExtraSelection] = []
        for pattern, style in self._patterns.get(buffer_id, {}).items():
            resolved = self._named_styles.get(style.name, style) if style.is_named else style
            painted = 0
            for match in re.finditer(pattern, text):
                if match.end() <= match.start():
                    continue
                selections.append(self._selection(editor, text, match.start(), match.end(), resolved))
                painted += 1
                if painted >= MAX_PAINTED_MATCHES:
                    break
        editor.setExtraSelections(selections)

    @staticmethod
    def _selection(
        editor: QPlainTextEdit,
        text: str,
        start: int,
        end: int,
        style: HighlightStyle,
    ) -> QTextEdit.ExtraSelection:
        sel = QTextEdit.ExtraSelection()
        cur = QTextCursor(editor.document())
        cur.setPosition(_qt_position(text, start))
        cur.setPosition(_qt_position(text, end), QTextCursor.KeepAnchor)
        sel.cursor = cur
        if style.background:
            sel.format.setBackground(QColor(style.background))
        if style.foreground:
            sel.format.setForeground(QColor(style.foreground))
        return sel
