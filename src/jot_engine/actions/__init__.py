"""Editing verbs bound to keys by the default keymaps."""

from .cursor import extend, move, select_all
from .editing import backspace, copy, cut, delete_forward, newline, paste
from .history import redo, undo
from .structure import indent, move_down, move_up, outdent, toggle_todo

__all__ = [
    "backspace",
    "copy",
    "cut",
    "delete_forward",
    "extend",
    "indent",
    "move",
    "move_down",
    "move_up",
    "newline",
    "outdent",
    "paste",
    "redo",
    "select_all",
    "toggle_todo",
    "undo",
]
