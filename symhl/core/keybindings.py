"""Keybinding models, defaults, normalization, and conflict helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from PySide6.QtGui import QKeySequence

KeybindingScope = str


@dataclass(frozen=True, slots=True)
class KeybindingAction:
    scope: KeybindingScope
    action_id: str
    action_name: str
    default_sequence: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class KeybindingConflict:
    scope: KeybindingScope
    action_id: str
    action_name: str
    sequence_text: str


KEYBINDING_ACTIONS: tuple[KeybindingAction, ...] = (
    KeybindingAction("editor", "action.toggle_highlight", "Toggle Symbol Highlight", ("Ctrl+F3",)),
    KeybindingAction("editor", "action.remove_all_highlights", "Remove All Highlights", ("Ctrl+Shift+F3",)),
    KeybindingAction("editor", "action.list_highlighted", "List Highlighted Symbols", ("Alt+F3",)),
    KeybindingAction("editor", "action.report_occurrence", "Count Occurrences", ("Ctrl+Alt+C",)),
    KeybindingAction("editor", "action.list_occurrences", "List Occurrences", ("Ctrl+Alt+O",)),
    KeybindingAction("editor", "action.jump_next", "Next Occurrence", ("Alt+N",)),
    KeybindingAction("editor", "action.jump_previous", "Previous Occurrence", ("Alt+P",)),
    KeybindingAction("editor", "action.jump_next_force", "Next Occurrence (Last Symbol)", ("Alt+Shift+N",)),
    KeybindingAction(
        "editor",
        "action.jump_previous_force",
        "Previous Occurrence (Last Symbol)",
        ("Alt+Shift+P",),
    ),
    KeybindingAction("editor", "action.jump_next_in_scope", "Next Occurrence in Function", ("Ctrl+Alt+N",)),
    KeybindingAction(
        "editor",
        "action.jump_previous_in_scope",
        "Previous Occurrence in Function",
        ("Ctrl+Alt+P",),
    ),
    KeybindingAction("editor", "action.jump_back", "Jump Back", ("Alt+Left",)),
    KeybindingAction("editor", "action.replace_symbol", "Replace Symbol", ("Ctrl+Alt+R",)),
)

_ACTION_BY_SCOPE_ID: dict[tuple[KeybindingScope, str], KeybindingAction] = {
    (entry.scope, entry.action_id): entry for entry in KEYBINDING_ACTIONS
}


def default_keybindings() -> dict[str, dict[str, list[str]]]:
    out: dict[str, dict[str, list[str]]] = {"editor": {}}
    for action in KEYBINDING_ACTIONS:
        out.setdefault(action.scope, {})[action.action_id] = list(action.default_sequence)
    return out


def action_definition(scope: KeybindingScope, action_id: str) -> KeybindingAction | None:
    return _ACTION_BY_SCOPE_ID.get((str(scope or "").strip().lower(), str(action_id or "").strip()))


def _split_sequence_tokens(text: str) -> list[str]:
    raw = str(text or "").strip()
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


_MODIFIER_ALIASES: dict[str, str] = {
    "ctrl": "Ctrl",
    "control": "Ctrl",
    "alt": "Alt",
    "shift": "Shift",
    "meta": "Meta",
    "cmd": "Meta",
    "command": "Meta",
    "super": "Meta",
    "win": "Meta",
}
_MODIFIER_ORDER = ("Ctrl", "Alt", "Shift", "Meta")


def _manual_canonical_chord(text: str) -> str:
    parts = [part.strip() for part in str(text or "").split("+") if part.strip()]
    if not parts:
        return ""
    modifiers: set[str] = set()
    key_token = ""
    for part in parts:
        alias = _MODIFIER_ALIASES.get(part.lower())
        if alias:
            modifiers.add(alias)
        else:
            key_token = part
    if not key_token:
        return ""
    if len(key_token) == 1 and key_token.isalpha():
        key_token = key_token.upper()
    ordered = [mod for mod in _MODIFIER_ORDER if mod in modifiers]
    return "+".join(ordered + [key_token])


def canonicalize_chord_text(text: str) -> str:
    chord_text = str(text or "").strip()
    if not chord_text:
        return ""
    manual = _manual_canonical_chord(chord_text)
    normalized = QKeySequence(chord_text).toString(QKeySequence.PortableText).strip()
    if not normalized:
        return manual
    # Keep only the first chord when an entire sequence string is provided.
    first = _split_sequence_tokens(normalized)[0] if "," in normalized else normalized
    return _manual_canonical_chord(first) or manual


def normalize_sequence(value: Any) -> list[str]:
    tokens: list[str] = []
    if isinstance(value, str):
        tokens.extend(_split_sequence_tokens(value))
    elif isinstance(value, (list, tuple)):
        for item in value:
            if isinstance(item, str):
                tokens.extend(_split_sequence_tokens(item))
    normalized: list[str] = []
    for token in tokens:
        text = canonicalize_chord_text(token)
        if text:
            normalized.append(text)
    return normalized


def sequence_to_text(sequence: list[str] | tuple[str, ...]) -> str:
    return ", ".join(normalize_sequence(list(sequence)))


def normalize_keybindings(raw: Any) -> dict[str, dict[str, list[str]]]:
    merged = default_keybindings()
    if not isinstance(raw, Mapping):
        return merged

    for scope_key, scope_payload in raw.items():
        scope = str(scope_key or "").strip().lower()
        if not scope or not isinstance(scope_payload, Mapping):
            continue
        scope_map = merged.setdefault(scope, {})
        for action_key, value in scope_payload.items():
            action_id = str(action_key or "").strip()
            if not action_id:
                continue
            normalized = normalize_sequence(value)
            if normalized:
                scope_map[action_id] = normalized
    return merged


def get_action_sequence(
    keybindings: Mapping[str, Mapping[str, list[str]]] | None,
    *,
    scope: KeybindingScope,
    action_id: str,
) -> list[str]:
    normalized = normalize_keybindings(keybindings)
    scope_key = str(scope or "").strip().lower()
    action_key = str(action_id or "").strip()
    from_scope = normalized.get(scope_key, {})
    if action_key in from_scope:
        return normalize_sequence(from_scope.get(action_key))
    definition = action_definition(scope_key, action_key)
    if definition is not None:
        return list(definition.default_sequence)
    return []


def qkeysequence_from_sequence(sequence: list[str] | tuple[str, ...]) -> QKeySequence:
    return QKeySequence(sequence_to_text(list(sequence)))


def find_conflicts(
    keybindings: Mapping[str, Mapping[str, list[str]]] | None,
) -> list[tuple[KeybindingConflict, KeybindingConflict]]:
    """Pairs of actions in the same scope bound to the same chord sequence."""
    normalized = normalize_keybindings(keybindings)
    seen: dict[tuple[str, str], KeybindingAction] = {}
    conflicts: list[tuple[KeybindingConflict, KeybindingConflict]] = []
    for action in KEYBINDING_ACTIONS:
        sequence = get_action_sequence(normalized, scope=action.scope, action_id=action.action_id)
        text = sequence_to_text(sequence)
        if not text:
            continue
        key = (action.scope, text)
        other = seen.get(key)
        if other is None:
            seen[key] = action
            continue
        conflicts.append(
            (
                KeybindingConflict(other.scope, other.action_id, other.action_name, text),
                KeybindingConflict(action.scope, action.action_id, action.action_name, text),
            )
        )
    return conflicts


__all__ = [
    "KeybindingScope",
    "KeybindingAction",
    "KeybindingConflict",
    "KEYBINDING_ACTIONS",
    "default_keybindings",
    "action_definition",
    "canonicalize_chord_text",
    "normalize_sequence",
    "sequence_to_text",
    "normalize_keybindings",
    "get_action_sequence",
    "qkeysequence_from_sequence",
    "find_conflicts",
]
