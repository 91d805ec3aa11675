"""Central QAction/QMenu construction for the symbol highlight commands."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from PySide6.QtGui import QAction
from PySide6.QtWidgets import QMenu

from symhl.core.keybindings import (
    KEYBINDING_ACTIONS,
    find_conflicts,
    get_action_sequence,
    normalize_keybindings,
    qkeysequence_from_sequence,
)

_LOG = logging.getLogger(__name__)

_SEPARATOR_AFTER = {
    "action.list_occurrences",
    "action.jump_previous_in_scope",
    "action.jump_back",
}


class ActionRegistry:
    @staticmethod
    def create_actions(window: Any, controller: Any, menu: QMenu) -> dict[str, QAction]:
        actions: dict[str, QAction] = {}
        known = set(controller.command_ids())
        for entry in KEYBINDING_ACTIONS:
            if entry.action_id not in known:
                continue
            action = QAction(entry.action_name, window)
            action.triggered.connect(lambda _checked=False, aid=entry.action_id: controller.run(aid))
            menu.addAction(action)
            window.addAction(action)
            actions[entry.action_id] = action
            if entry.action_id in _SEPARATOR_AFTER:
                menu.addSeparator()
        return actions

    @staticmethod
    def apply_keybindings(actions: Mapping[str, QAction], keybindings: Any) -> None:
        normalized = normalize_keybindings(keybindings)
        for first, second in find_conflicts(normalized):
            _LOG.warning(
                "Keybinding %s is bound to both %s and %s",
                first.sequence_text,
                first.action_name,
                second.action_name,
            )
        for entry in KEYBINDING_ACTIONS:
            action = actions.get(entry.action_id)
            if not isinstance(action, QAction):
                continue
            sequence = get_action_sequence(normalized, scope=entry.scope, action_id=entry.action_id)
            qseq = qkeysequence_from_sequence(sequence)
            if qseq.isEmpty():
                action.setShortcut("")
                continue
            action.setShortcut(qseq)
