"""Built-in keymaps for a plain-text markdown editor."""

from __future__ import annotations

from typing import Iterable, Sequence

from jot_engine.actions import cursor as cursor_actions
from jot_engine.actions import editing as editing_actions
from jot_engine.actions import history as history_actions
from jot_engine.actions import structure as structure_actions

from .models import ActionRef, Binding, WhenClause
from .registry import KeymapRegistry

_MOTIONS = (
    ("left", "left"),
    ("right", "right"),
    ("up", "up"),
    ("down", "down"),
    ("home", "home"),
    ("end", "end"),
    ("document_start", "ctrl+home"),
    ("document_end", "ctrl+end"),
)


def _cursor_actions() -> tuple[ActionRef, ...]:
    actions: list[ActionRef] = []
    for motion, _ in _MOTIONS:
        actions.append(
            ActionRef(
                id=f"cursor.move_{motion}",
                handler=cursor_actions.move,
                description=f"Move cursor {motion.replace('_', ' ')}",
                metadata={"motion": motion},
            )
        )
        actions.append(
            ActionRef(
                id=f"cursor.extend_{motion}",
                handler=cursor_actions.extend,
                description=f"Extend selection {motion.replace('_', ' ')}",
                metadata={"motion": motion},
            )
        )
    return tuple(actions)


def _cursor_bindings() -> tuple[Binding, ...]:
    bindings: list[Binding] = []
    for motion, key in _MOTIONS:
        bindings.append(
            Binding(
                id=f"cursor.move_{motion}",
                key=key,
                action_id=f"cursor.move_{motion}",
            )
        )
        bindings.append(
            Binding(
                id=f"cursor.extend_{motion}",
                key=f"shift+{key}",
                action_id=f"cursor.extend_{motion}",
            )
        )
    return tuple(bindings)


DEFAULT_ACTIONS: tuple[ActionRef, ...] = (
    ActionRef(
        id="edit.newline",
        handler=editing_actions.newline,
        description="Split the line, continuing lists",
    ),
    ActionRef(
        id="edit.backspace",
        handler=editing_actions.backspace,
        description="Delete backwards",
    ),
    ActionRef(
        id="edit.delete",
        handler=editing_actions.delete_forward,
        description="Delete forwards",
    ),
    ActionRef(
        id="edit.cut",
        handler=editing_actions.cut,
        description="Cut the selection or the current line",
    ),
    ActionRef(
        id="edit.copy",
        handler=editing_actions.copy,
        description="Copy the selection or the current line",
    ),
    ActionRef(
        id="edit.paste",
        handler=editing_actions.paste,
        description="Paste the clipboard",
    ),
    ActionRef(
        id="structure.indent",
        handler=structure_actions.indent,
        description="Indent list items or raise heading level",
    ),
    ActionRef(
        id="structure.outdent",
        handler=structure_actions.outdent,
        description="Outdent list items or lower heading level",
    ),
    ActionRef(
        id="structure.move_up",
        handler=structure_actions.move_up,
        description="Move lines up",
    ),
    ActionRef(
        id="structure.move_down",
        handler=structure_actions.move_down,
        description="Move lines down",
    ),
    ActionRef(
        id="structure.toggle_todo",
        handler=structure_actions.toggle_todo,
        description="Toggle the todo checkbox on the cursor line",
    ),
    ActionRef(
        id="history.undo",
        handler=history_actions.undo,
        description="Undo the last edit",
    ),
    ActionRef(
        id="history.redo",
        handler=history_actions.redo,
        description="Redo the last undone edit",
    ),
    ActionRef(
        id="cursor.select_all",
        handler=cursor_actions.select_all,
        description="Select the whole document",
    ),
    *_cursor_actions(),
)

DEFAULT_BINDINGS: tuple[Binding, ...] = (
    Binding(
        id="edit.enter",
        key="enter",
        action_id="edit.newline",
        description="New line",
    ),
    Binding(
        id="edit.backspace",
        key="backspace",
        action_id="edit.backspace",
        description="Delete backwards",
    ),
    Binding(
        id="edit.delete",
        key="delete",
        action_id="edit.delete",
        description="Delete forwards",
    ),
    Binding(
        id="edit.cut",
        key="ctrl+x",
        action_id="edit.cut",
        description="Cut",
    ),
    Binding(
        id="edit.copy",
        key="ctrl+c",
        action_id="edit.copy",
        description="Copy",
    ),
    Binding(
        id="edit.paste",
        key="ctrl+v",
        action_id="edit.paste",
        description="Paste",
    ),
    Binding(
        id="structure.tab",
        key="tab",
        action_id="structure.indent",
        description="Indent",
    ),
    Binding(
        id="structure.shift_tab",
        key="shift+tab",
        action_id="structure.outdent",
        description="Outdent",
    ),
    Binding(
        id="structure.move_up",
        key="ctrl+up",
        action_id="structure.move_up",
        description="Move lines up",
    ),
    Binding(
        id="structure.move_down",
        key="ctrl+down",
        action_id="structure.move_down",
        description="Move lines down",
    ),
    Binding(
        id="structure.toggle_todo",
        key="ctrl+t",
        action_id="structure.toggle_todo",
        description="Toggle todo",
        when=(WhenClause("on_todo"),),
    ),
    Binding(
        id="history.undo",
        key="ctrl+z",
        action_id="history.undo",
        description="Undo",
    ),
    Binding(
        id="history.redo",
        key="ctrl+shift+z",
        action_id="history.redo",
        description="Redo",
    ),
    Binding(
        id="history.redo_alt",
        key="ctrl+y",
        action_id="history.redo",
        description="Redo",
    ),
    Binding(
        id="cursor.select_all",
        key="ctrl+a",
        action_id="cursor.select_all",
        description="Select all",
    ),
    *_cursor_bindings(),
)


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    replace: bool = False,
    extra_bindings: Iterable[Binding] | None = None,
    include_actions: Sequence[str] | None = None,
    exclude_actions: Sequence[str] | None = None,
    include_bindings: Sequence[str] | None = None,
    exclude_bindings: Sequence[str] | None = None,
    overrides: Iterable[Binding] | None = None,
) -> None:
    """Register built-in actions and bindings.

    ``overrides`` are registered last with ``replace=True`` so they win over
    any default bound to the same keys.
    """

    allowed_actions = _build_filters(include_actions, exclude_actions)
    allowed_bindings = _build_filters(include_bindings, exclude_bindings)

    for action in DEFAULT_ACTIONS:
        if not _selected(action.id, allowed_actions):
            continue
        registry.register_action(action, replace=replace)

    for binding in DEFAULT_BINDINGS:
        if not _selected(binding.id, allowed_bindings):
            continue
        if not _selected(binding.action_id, allowed_actions):
            continue
        registry.register_binding(binding, replace=replace)

    if extra_bindings:
        for binding in extra_bindings:
            registry.register_binding(binding, replace=replace)

    if overrides:
        for binding in overrides:
            registry.register_binding(binding, replace=True)


__all__ = ["load_default_keymaps", "DEFAULT_ACTIONS", "DEFAULT_BINDINGS"]


def _build_filters(
    include: Sequence[str] | None, exclude: Sequence[str] | None
) -> tuple[set[str] | None, set[str]]:
    include_set = set(include) if include else None
    exclude_set = set(exclude or ())
    return include_set, exclude_set


def _selected(item_id: str, filters: tuple[set[str] | None, set[str]]) -> bool:
    include, exclude = filters
    if include is not None and item_id not in include:
        return False
    if item_id in exclude:
        return False
    return True
