"""Enclosing-function lookup used to narrow scoped symbol jumps."""

from __future__ import annotations

import ast
import re

from symhl.services.language_id import BRACE_LANGUAGES

_FUNCTION_HEAD_RE = re.compile(
    r"\)\s*"
    r"(?:(?:const|noexcept|override|final|mut|async|throws\s+[\w.,\s]+)\b\s*)*"
    r"(?:->\s*[^{;]+?)?\s*$"
)
_FN_KEYWORD_RE = re.compile(r"\b(?:fn|func|function)\b")
_CONTROL_KEYWORDS = {"if", "for", "while", "switch", "catch", "return", "sizeof", "decltype", "else", "do"}


def enclosing_function_span(source_text: str, offset: int, language_id: str = "") -> tuple[int, int] | None:
    """Return ``(start, end)`` of the innermost function containing ``offset``."""
    lang = str(language_id or "").strip().lower()
    text = str(source_text or "")
    if not text.strip():
        return None
    if lang == "python":
        return _python_function_span(text, int(offset))
    if lang in BRACE_LANGUAGES:
        return _brace_function_span(text, int(offset))
    return None


def _line_starts(text: str) -> list[int]:
    starts = [0]
    starts.extend(idx + 1 for idx, ch in enumerate(text) if ch == "\n")
    return starts


def _python_function_span(text: str, offset: int) -> tuple[int, int] | None:
    try:
        tree = ast.parse(text)
    except SyntaxError:
        return None

    starts = _line_starts(text)

    def to_offset(line: int, col: int) -> int:
        idx = max(1, min(line, len(starts))) - 1
        return min(len(text), starts[idx] + max(0, col))

    best: tuple[int, int] | None = None
    for node in ast.walk(tree):
        if not isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef, ast.Lambda)):
            continue
        first_line = min([node.lineno] + [dec.lineno for dec in getattr(node, "decorator_list", [])])
        start = starts[first_line - 1]
        end_line = int(getattr(node, "end_lineno", node.lineno) or node.lineno)
        end = to_offset(end_line, int(getattr(node, "end_col_offset", 0) or 0))
        if not (start <= offset <= end):
            continue
        if best is None or (end - start) < (best[1] - best[0]):
            best = (start, end)
    return best


def _strip_comments_and_strings(text: str) -> str:
    """Blank out comments and string literals, preserving offsets."""
    out = list(text)
    i = 0
    size = len(text)
    while i < size:
        ch = text[i]
        nxt = text[i + 1] if i + 1 < size else ""
        if ch == "/" and nxt == "/":
            j = text.find("\n", i)
            j = size if j < 0 else j
            out[i:j] = " " * (j - i)
            i = j
            continue
        if ch == "/" and nxt == "*":
            j = text.find("*/", i + 2)
            j = size if j < 0 else j + 2
            out[i:j] = [c if c == "\n" else " " for c in text[i:j]]
            i = j
            continue
        if ch in ("'", '"', "`"):
            j = i + 1
            while j < size and text[j] != ch:
                if text[j] == "\\":
                    j += 1
                elif text[j] == "\n" and ch != "`":
                    break
                j += 1
            j = min(size, j + 1)
            out[i:j] = [c if c == "\n" else " " for c in text[i:j]]
            i = j
            continue
        i += 1
    return "".join(out)


def _brace_pairs(code: str) -> list[tuple[int, int]]:
    pairs: list[tuple[int, int]] = []
    stack: list[int] = []
    for idx, ch in enumerate(code):
        if ch == "{":
            stack.append(idx)
        elif ch == "}" and stack:
            pairs.append((stack.pop(), idx))
    return pairs


def _head_start(code: str, brace: int) -> int:
    idx = brace - 1
    depth = 0
    while idx >= 0:
        ch = code[idx]
        if ch == ")":
            depth += 1
        elif ch == "(":
            depth -= 1
        elif depth == 0 and ch in ";{}":
            break
        idx -= 1
    return idx + 1


def _looks_like_function(head: str) -> bool:
    stripped = head.strip()
    if not stripped:
        return False
    first_word = re.match(r"[A-Za-z_]\w*", stripped)
    if first_word and first_word.group(0) in _CONTROL_KEYWORDS:
        return False
    if _FN_KEYWORD_RE.search(stripped):
        return True
    return bool(_FUNCTION_HEAD_RE.search(stripped))


def _brace_function_span(text: str, offset: int) -> tuple[int, int] | None:
    code = _strip_comments_and_strings(text)
    candidates = [
        (open_idx, close_idx)
        for open_idx, close_idx in _brace_pairs(code)
        if open_idx <= offset <= close_idx + 1
    ]
    candidates.sort(key=lambda pair: pair[1] - pair[0])
    for open_idx, close_idx in candidates:
        start = _head_start(code, open_idx)
        if _looks_like_function(code[start:open_idx]):
            while start < open_idx and code[start].isspace():
                start += 1
            return start, close_idx + 1
    return None
