"""Atomic edit records.

Operations are plain frozen values.  ``Document.apply_operation`` interprets
them and hands back the inverse operation, which is what the undo timeline
replays.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Union

from .state import Position

Direction = Literal["up", "down"]


@dataclass(frozen=True, slots=True)
class InsertText:
    position: Position
    text: str
    label: str = "insert_text"


@dataclass(frozen=True, slots=True)
class DeleteRange:
    start: Position
    end: Position
    label: str = "delete_range"


@dataclass(frozen=True, slots=True)
class SplitLine:
    """Break a line at ``position``; the new line starts with ``continuation``."""

    position: Position
    continuation: str = ""
    label: str = "split_line"


@dataclass(frozen=True, slots=True)
class JoinLines:
    """Append line ``line + 1`` to ``line``, dropping its first ``drop`` chars."""

    line: int
    drop: int = 0
    label: str = "join_lines"


@dataclass(frozen=True, slots=True)
class Indent:
    """Add (positive ``width``) or remove leading whitespace on one line."""

    line: int
    width: int
    label: str = "indent"


@dataclass(frozen=True, slots=True)
class ToggleCheckbox:
    line: int
    mark: str = "x"
    label: str = "toggle_checkbox"


@dataclass(frozen=True, slots=True)
class MoveLines:
    first: int
    last: int
    direction: Direction
    label: str = "move_lines"


@dataclass(frozen=True, slots=True)
class ReplaceLine:
    line: int
    text: str
    label: str = "replace_line"


@dataclass(frozen=True, slots=True)
class InsertLine:
    index: int
    text: str
    label: str = "insert_line"


@dataclass(frozen=True, slots=True)
class RemoveLine:
    index: int
    label: str = "remove_line"


@dataclass(frozen=True, slots=True)
class CompoundEdit:
    """Ordered group applied atomically and undone as one step.

    ``cursor`` optionally pins the cursor once every part has been applied.
    """

    operations: tuple["EditOperation", ...]
    label: str = "compound"
    cursor: Optional[Position] = None


EditOperation = Union[
    InsertText,
    DeleteRange,
    SplitLine,
    JoinLines,
    Indent,
    ToggleCheckbox,
    MoveLines,
    ReplaceLine,
    InsertLine,
    RemoveLine,
    CompoundEdit,
]


def compound(
    operations: "list[EditOperation] | tuple[EditOperation, ...]",
    *,
    label: str,
    cursor: Optional[Position] = None,
) -> EditOperation:
    """Collapse ``operations`` into one operation.

    A single part with no cursor pin is returned as-is.
    """

    parts = tuple(operations)
    if len(parts) == 1 and cursor is None:
        return parts[0]
    return CompoundEdit(operations=parts, label=label, cursor=cursor)


__all__ = [
    "Direction",
    "EditOperation",
    "InsertText",
    "DeleteRange",
    "SplitLine",
    "JoinLines",
    "Indent",
    "ToggleCheckbox",
    "MoveLines",
    "ReplaceLine",
    "InsertLine",
    "RemoveLine",
    "CompoundEdit",
    "compound",
]
