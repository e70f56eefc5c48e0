"""Document model: lines, cursor state and the edit operations that mutate them."""

from jot_engine.lines import ListKind, ListKindTag, classify_line

from .document import AppliedEdit, Document
from .errors import EditError, LoadFailure, NotATodo, OutOfRange
from .operations import (
    CompoundEdit,
    DeleteRange,
    Direction,
    EditOperation,
    Indent,
    InsertLine,
    InsertText,
    JoinLines,
    MoveLines,
    RemoveLine,
    ReplaceLine,
    SplitLine,
    ToggleCheckbox,
    compound,
)
from .state import CursorState, Position, Selection, ordered, selected_lines

__all__ = [
    "AppliedEdit",
    "CompoundEdit",
    "CursorState",
    "DeleteRange",
    "Direction",
    "Document",
    "EditError",
    "EditOperation",
    "Indent",
    "InsertLine",
    "InsertText",
    "JoinLines",
    "ListKind",
    "ListKindTag",
    "LoadFailure",
    "MoveLines",
    "NotATodo",
    "OutOfRange",
    "Position",
    "RemoveLine",
    "ReplaceLine",
    "Selection",
    "SplitLine",
    "ToggleCheckbox",
    "classify_line",
    "compound",
    "ordered",
    "selected_lines",
]
