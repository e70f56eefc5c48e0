"""Bounded linear undo/redo history of applied edits."""

from __future__ import annotations

from dataclasses import replace
from typing import List, Optional

from jot_engine.document import AppliedEdit, DeleteRange, InsertText


def _extends_typing(previous: AppliedEdit, current: AppliedEdit) -> bool:
    prev_op, cur_op = previous.operation, current.operation
    if not isinstance(prev_op, InsertText) or not isinstance(cur_op, InsertText):
        return False
    if "\n" in prev_op.text or "\n" in cur_op.text:
        return False
    if not isinstance(previous.inverse, DeleteRange):
        return False
    if previous.inverse.end != cur_op.position:
        return False
    # A space after a word starts a new undo step.
    return not (cur_op.text.isspace() and not prev_op.text[-1:].isspace())


def merge_typing(previous: AppliedEdit, current: AppliedEdit) -> AppliedEdit:
    """Fold ``current`` keystrokes into the ``previous`` typing entry."""

    first, latest = previous.operation, current.operation
    if not isinstance(first, InsertText) or not isinstance(latest, InsertText):
        raise TypeError("only text insertions can be merged")
    position = first.position
    text = first.text + latest.text
    return replace(
        current,
        operation=InsertText(position, text),
        inverse=DeleteRange(position, current.cursor_after),
        cursor_before=previous.cursor_before,
        selection_before=previous.selection_before,
        changed_lines=tuple(sorted(set(previous.changed_lines) | set(current.changed_lines))),
    )


class UndoTimeline:
    """Linear undo/redo history that forgets its oldest entries on overflow."""

    def __init__(self, *, max_entries: int = 500) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self._entries: List[AppliedEdit] = []
        self._index: int = -1

    def __len__(self) -> int:
        return len(self._entries)

    def push(self, entry: AppliedEdit, *, merge: bool = False) -> None:
        if self._index < len(self._entries) - 1:
            self._entries = self._entries[: self._index + 1]
        elif merge and self._entries and _extends_typing(self._entries[-1], entry):
            self._entries[-1] = merge_typing(self._entries[-1], entry)
            return
        self._entries.append(entry)
        if len(self._entries) > self.max_entries:
            self._entries.pop(0)
        self._index = len(self._entries) - 1

    def clear(self) -> None:
        self._entries.clear()
        self._index = -1

    def can_undo(self) -> bool:
        return self._index >= 0

    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    def peek_undo(self) -> Optional[AppliedEdit]:
        return self._entries[self._index] if self.can_undo() else None

    def undo(self) -> Optional[AppliedEdit]:
        if not self.can_undo():
            return None
        entry = self._entries[self._index]
        self._index -= 1
        return entry

    def redo(self) -> Optional[AppliedEdit]:
        if not self.can_redo():
            return None
        self._index += 1
        return self._entries[self._index]


__all__ = ["UndoTimeline", "merge_typing"]
