from __future__ import annotations

from dataclasses import dataclass

TRANSIENT_STYLE_NAME = "symbol-transient"


@dataclass(frozen=True, slots=True)
class HighlightStyle:
    """Either a named semantic style or an explicit background/foreground pair."""

    name: str = ""
    background: str = ""
    foreground: str = ""

    @property
    def is_named(self) -> bool:
        return bool(self.name)

    @staticmethod
    def named(name: str) -> "HighlightStyle":
        return HighlightStyle(name=str(name or "").strip())

    @staticmethod
    def colors(background: str, foreground: str = "") -> "HighlightStyle":
        return HighlightStyle(background=str(background or ""), foreground=str(foreground or ""))


TRANSIENT_STYLE = HighlightStyle.named(TRANSIENT_STYLE_NAME)
