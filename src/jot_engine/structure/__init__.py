"""Structural editing: list items, renumbering and line movement."""

from .lists import MAX_HEADING_LEVEL, ListEditor
from .movement import move_line, move_lines, move_selection
from .numbering import block_items, renumber_operations, with_renumbering

__all__ = [
    "ListEditor",
    "MAX_HEADING_LEVEL",
    "block_items",
    "move_line",
    "move_lines",
    "move_selection",
    "renumber_operations",
    "with_renumbering",
]
