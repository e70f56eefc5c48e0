"""Recoverable error kinds raised by the editing core."""

from __future__ import annotations

from typing import Optional

from .state import Position


class EditError(RuntimeError):
    """Base class for edits the core refuses to apply."""


class OutOfRange(EditError):
    """Raised when an operation references a stale or invalid line/column."""

    def __init__(
        self,
        message: str,
        *,
        position: Optional[Position] = None,
        line: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.position = position
        self.line = line if line is not None else (position[0] if position else None)


class NotATodo(EditError):
    """Raised when a checkbox toggle targets a line without a checkbox."""

    def __init__(self, line: int, text: str = "") -> None:
        super().__init__(f"Line {line} is not a todo item")
        self.line = line
        self.text = text


class LoadFailure(EditError):
    """Raised when a document cannot be read from disk."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


__all__ = ["EditError", "OutOfRange", "NotATodo", "LoadFailure"]
