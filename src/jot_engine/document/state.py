"""Cursor and selection state tied to a document."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

Position = Tuple[int, int]  # (line, column)
Selection = Tuple[Position, Position]


def ordered(selection: Selection) -> Selection:
    start, end = selection
    return (start, end) if start <= end else (end, start)


def selected_lines(selection: Selection) -> tuple[int, int]:
    """Return the inclusive line span covered by ``selection``.

    A selection that ends at column 0 of a later line does not include that
    line.
    """

    (first, _), (last, last_col) = ordered(selection)
    if last_col == 0 and last > first:
        last -= 1
    return first, last


@dataclass(slots=True)
class CursorState:
    """Mutable cursor + selection info owned by a Document."""

    cursor: Position = (0, 0)
    selection: Optional[Selection] = None

    def set_cursor(self, line: int, column: int) -> None:
        self.cursor = (line, column)

    def clear_selection(self) -> None:
        self.selection = None

    def set_selection(self, start: Position, end: Position) -> None:
        self.selection = None if start == end else (start, end)

    @property
    def has_selection(self) -> bool:
        return self.selection is not None


__all__ = ["Position", "Selection", "CursorState", "ordered", "selected_lines"]
