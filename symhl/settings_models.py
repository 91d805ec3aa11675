from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Mapping, TypedDict

from symhl.core.colors import DEFAULT_PALETTE
from symhl.core.keybindings import default_keybindings, normalize_keybindings

OccurrenceMessageMode = Literal["explicit", "transient", "navigation"]
ColorMode = Literal["hash", "palette"]

OCCURRENCE_MESSAGE_MODES: tuple[str, ...] = ("explicit", "transient", "navigation")
COLOR_MODES: tuple[str, ...] = ("hash", "palette")


class SymbolHighlightSettings(TypedDict, total=False):
    idle_delay: float  # seconds; 0 re-evaluates on every command
    highlight_single_occurrence: bool
    highlight_on_navigation: bool
    ignore_list: list[str]
    foreground_color: str
    occurrence_message: list[str]
    color_mode: str  # hash | palette
    palette: list[str]
    transient_color: str
    keybindings: dict[str, dict[str, list[str]]]


class ViewerWindowSettings(TypedDict, total=False):
    font_family: str
    font_size: int
    recent_files: list[str]


class AppSettings(TypedDict, total=False):
    symbol_highlight: SymbolHighlightSettings
    window: ViewerWindowSettings


@dataclass(slots=True, frozen=True)
class SettingsPaths:
    app_dir: Path
    settings_filename: str = "symhl-settings.json"
    settings_file: Path = field(init=False)

    def __post_init__(self) -> None:
        app_dir = Path(self.app_dir).expanduser().resolve()
        object.__setattr__(self, "app_dir", app_dir)
        object.__setattr__(self, "settings_file", app_dir / self.settings_filename)


def default_symbol_highlight_settings() -> SymbolHighlightSettings:
    defaults: SymbolHighlightSettings = {
        "idle_delay": 1.5,
        "highlight_single_occurrence": True,
        "highlight_on_navigation": False,
        "ignore_list": [],
        "foreground_color": "",
        "occurrence_message": ["explicit", "navigation"],
        "color_mode": "hash",
        "palette": list(DEFAULT_PALETTE),
        "transient_color": "#4b5263",
        "keybindings": default_keybindings(),
    }
    return deepcopy(defaults)


def default_app_settings() -> AppSettings:
    defaults: AppSettings = {
        "symbol_highlight": default_symbol_highlight_settings(),
        "window": {
            "font_family": "",
            "font_size": 10,
            "recent_files": [],
        },
    }
    return deepcopy(defaults)


def _coerce_bool(value: object, *, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in {"1", "true", "yes", "on"}:
            return True
        if text in {"0", "false", "no", "off"}:
            return False
    return default


def _string_list(value: object) -> list[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return []
    return [str(item) for item in value if isinstance(item, str) and item]


def normalize_symbol_highlight_settings(raw: Mapping[str, Any] | None) -> SymbolHighlightSettings:
    """Coerce a raw (JSON-loaded) mapping into valid settings, falling back to defaults."""
    out = default_symbol_highlight_settings()
    data = raw if isinstance(raw, Mapping) else {}

    try:
        out["idle_delay"] = max(0.0, float(data.get("idle_delay", out["idle_delay"])))
    except (TypeError, ValueError):
        pass
    out["highlight_single_occurrence"] = _coerce_bool(
        data.get("highlight_single_occurrence"), default=out["highlight_single_occurrence"]
    )
    out["highlight_on_navigation"] = _coerce_bool(
        data.get("highlight_on_navigation"), default=out["highlight_on_navigation"]
    )
    if "ignore_list" in data:
        out["ignore_list"] = _string_list(data.get("ignore_list"))
    out["foreground_color"] = str(data.get("foreground_color") or "").strip()
    if "occurrence_message" in data:
        modes = {item.strip().lower() for item in _string_list(data.get("occurrence_message"))}
        out["occurrence_message"] = [mode for mode in OCCURRENCE_MESSAGE_MODES if mode in modes]

    color_mode = str(data.get("color_mode") or out["color_mode"]).strip().lower()
    out["color_mode"] = color_mode if color_mode in COLOR_MODES else "hash"
    palette = _string_list(data.get("palette"))
    if palette:
        out["palette"] = palette
    transient_color = str(data.get("transient_color") or "").strip()
    if transient_color:
        out["transient_color"] = transient_color
    out["keybindings"] = normalize_keybindings(data.get("keybindings"))
    return out
