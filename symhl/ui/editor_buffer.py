"""QPlainTextEdit adapter exposing the text/cursor interface the core expects."""

from __future__ import annotations

import itertools
from typing import Sequence

from PySide6.QtGui import QTextCursor
from PySide6.QtWidgets import QPlainTextEdit

from symhl.core.symbols import symbol_span_at
from symhl.services.language_id import language_id_for_path

_BUFFER_IDS = itertools.count(1)


def _qt_position(text: str, offset: int) -> int:
    """Python string index -> Qt document position (UTF-16 code units)."""
    prefix = text[: max(0, offset)]
    return len(prefix) + sum(1 for ch in prefix if ord(ch) > 0xFFFF)


def _py_offset(text: str, position: int) -> int:
    """Qt document position (UTF-16 code units) -> Python string index."""
    units = 0
    for idx, ch in enumerate(text):
        if units >= position:
            return idx
        units += 2 if ord(ch) > 0xFFFF else 1
    return len(text)


class EditorBuffer:
    def __init__(self, editor: QPlainTextEdit, file_path: str = "", *, buffer_id: str = "") -> None:
        self.editor = editor
        self.file_path = str(file_path or "")
        self._buffer_id = buffer_id or f"buffer-{next(_BUFFER_IDS)}"
        self._language_id = language_id_for_path(self.file_path)

    @property
    def buffer_id(self) -> str:
        return self._buffer_id

    def language_id(self) -> str:
        return self._language_id

    def set_language_id(self, language_id: str) -> None:
        self._language_id = str(language_id or "plaintext")

    def text(self) -> str:
        return self.editor.toPlainText()

    def cursor_offset(self) -> int:
        return _py_offset(self.text(), int(self.editor.textCursor().position()))

    def move_cursor(self, offset: int) -> None:
        text = self.text()
        cur = self.editor.textCursor()
        cur.setPosition(_qt_position(text, max(0, min(int(offset), len(text)))))
        self.editor.setTextCursor(cur)
        self.editor.ensureCursorVisible()

    def symbol_at_cursor(self) -> tuple[str, int, int] | None:
        cur = self.editor.textCursor()
        text = self.text()
        selected = str(cur.selectedText() or "").replace("\u2029", "\n")
        # A single-line selection overrides the token under the cursor.
        if selected and "\n" not in selected and selected.strip() == selected:
            start = _py_offset(text, int(cur.selectionStart()))
            end = _py_offset(text, int(cur.selectionEnd()))
            return text[start:end], start, end
        return symbol_span_at(text, self.cursor_offset(), self._language_id)

    def buffer_bounds(self) -> tuple[int, int]:
        return 0, len(self.text())

    def replace_ranges(self, ranges: Sequence[tuple[int, int]], replacement: str) -> None:
        text = self.text()
        cur = self.editor.textCursor()
        cur.beginEditBlock()
        for start, end in sorted(ranges, reverse=True):
            span_cursor = QTextCursor(self.editor.document())
            span_cursor.setPosition(_qt_position(text, start))
            span_cursor.setPosition(_qt_position(text, end), QTextCursor.KeepAnchor)
            span_cursor.insertText(replacement)
        cur.endEditBlock()
