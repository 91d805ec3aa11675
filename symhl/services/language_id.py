"""Language-id resolution helpers for editor files.

Maps filenames/extensions to a language id, and a language id to the set of
characters that make up one symbol in that language.
"""

from __future__ import annotations

from pathlib import Path

_EXTENSION_LANGUAGE_IDS: dict[str, str] = {
    ".py": "python",
    ".pyw": "python",
    ".pyi": "python",
    ".rs": "rust",
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".hpp": "cpp",
    ".cxx": "cpp",
    ".hxx": "cpp",
    ".cc": "cpp",
    ".hh": "cpp",
    ".java": "java",
    ".go": "go",
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".jsx": "javascriptreact",
    ".ts": "typescript",
    ".tsx": "typescriptreact",
    ".css": "css",
    ".scss": "scss",
    ".less": "less",
    ".el": "lisp",
    ".lisp": "lisp",
    ".clj": "lisp",
    ".scm": "lisp",
    ".sh": "shell",
    ".bash": "shell",
    ".zsh": "shell",
    ".md": "markdown",
    ".txt": "plaintext",
}

_FILENAME_LANGUAGE_IDS: dict[str, str] = {
    "makefile": "make",
    ".bashrc": "shell",
    ".zshrc": "shell",
}

BRACE_LANGUAGES: frozenset[str] = frozenset(
    {
        "c",
        "cpp",
        "rust",
        "java",
        "go",
        "javascript",
        "javascriptreact",
        "typescript",
        "typescriptreact",
    }
)

_DEFAULT_SYMBOL_CHARS = r"\w"
# Identifiers in these languages may contain hyphens.
_SYMBOL_CHARS_BY_LANGUAGE: dict[str, str] = {
    "css": r"\w\-",
    "scss": r"\w\-",
    "less": r"\w\-",
    "lisp": r"\w\-!?*+<>=/",
    "shell": r"\w\-",
    "make": r"\w\-",
}


def language_id_for_path(file_path: str | None, *, default: str = "plaintext") -> str:
    """Return a normalized language id for a file path."""
    path_text = str(file_path or "").strip()
    if not path_text:
        return str(default or "plaintext").strip().lower() or "plaintext"

    name = Path(path_text).name.lower()
    if name in _FILENAME_LANGUAGE_IDS:
        return _FILENAME_LANGUAGE_IDS[name]

    suffix = Path(path_text).suffix.lower()
    if suffix in _EXTENSION_LANGUAGE_IDS:
        return _EXTENSION_LANGUAGE_IDS[suffix]

    return str(default or "plaintext").strip().lower() or "plaintext"


def symbol_char_class(language_id: str | None) -> str:
    """Regex character-class body (no brackets) for one symbol character."""
    lang = str(language_id or "").strip().lower()
    return _SYMBOL_CHARS_BY_LANGUAGE.get(lang, _DEFAULT_SYMBOL_CHARS)
