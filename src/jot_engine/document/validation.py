"""Bounds checks shared by the document and structure editors."""

from __future__ import annotations

from typing import Sequence

from .errors import OutOfRange
from .state import Position


def ensure_line(lines: Sequence[str], index: int) -> int:
    if index < 0 or index >= len(lines):
        raise OutOfRange("Line out of range", line=index)
    return index


def ensure_position(lines: Sequence[str], position: Position) -> Position:
    line, column = position
    if line < 0 or line >= len(lines):
        raise OutOfRange("Line out of range", position=position)
    if column < 0 or column > len(lines[line]):
        raise OutOfRange("Column out of range", position=position)
    return position


def clamp_position(lines: Sequence[str], position: Position) -> Position:
    line, column = position
    line = max(0, min(line, len(lines) - 1))
    column = max(0, min(column, len(lines[line])))
    return (line, column)


__all__ = ["ensure_line", "ensure_position", "clamp_position"]
