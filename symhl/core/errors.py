"""Exception classes raised by the highlight and navigation core."""

from __future__ import annotations


class SymbolHighlightError(Exception):
    """Base class for expected symbol-highlight failures."""


class NoSymbolAtCursor(SymbolHighlightError):
    """Raised when no symbol can be derived at the cursor and none is remembered."""

    def __init__(self, message: str = "No symbol at point") -> None:
        super().__init__(message)


class NoEnclosingScope(SymbolHighlightError):
    """Raised when a scoped jump is requested outside any function body."""

    def __init__(self, message: str = "Not inside a function") -> None:
        super().__init__(message)


class SymbolNotFound(SymbolHighlightError, RuntimeError):
    """Raised when a search that must succeed finds no occurrence.

    This only happens when the buffer changed between deriving the symbol and
    searching for it.
    """


class HighlightRenderError(SymbolHighlightError, RuntimeError):
    """Raised when the rendering collaborator fails; registry state is rolled back."""
