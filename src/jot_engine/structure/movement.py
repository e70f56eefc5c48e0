"""Moving whole lines (or a block of them) past their neighbour."""

from __future__ import annotations

from jot_engine.document import (
    Direction,
    Document,
    EditOperation,
    MoveLines,
    OutOfRange,
    selected_lines,
)

from .numbering import with_renumbering


def move_lines(
    document: Document, first: int, last: int, direction: Direction
) -> EditOperation:
    """Swap lines ``first..last`` with the line above or below them.

    Raises ``OutOfRange`` when the block already touches the document edge
    in ``direction``.  Numbered blocks on either side are renumbered.
    """

    first, last = sorted((first, last))
    if first < 0 or last >= document.line_count:
        raise OutOfRange("Line out of range", line=first if first < 0 else last)
    if direction == "up":
        if first == 0:
            raise OutOfRange("Cannot move the first line up", line=first)
        touched = range(first - 1, last + 1)
    elif direction == "down":
        if last == document.line_count - 1:
            raise OutOfRange("Cannot move the last line down", line=last)
        touched = range(first, last + 2)
    else:
        raise ValueError(f"Unknown direction {direction!r}")
    operation = MoveLines(first, last, direction)
    return with_renumbering(document, operation, touched, label="move_lines")


def move_line(document: Document, index: int, direction: Direction) -> EditOperation:
    return move_lines(document, index, index, direction)


def move_selection(document: Document, direction: Direction) -> EditOperation:
    """Move the lines spanned by the selection, or the cursor line."""

    if document.selection is None:
        line = document.cursor[0]
        return move_lines(document, line, line, direction)
    first, last = selected_lines(document.selection)
    return move_lines(document, first, last, direction)


__all__ = ["move_line", "move_lines", "move_selection"]
