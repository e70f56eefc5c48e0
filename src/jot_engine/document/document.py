"""Authoritative line buffer mutated exclusively through edit operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Set

from jot_engine.lines import DEFAULT_BULLET_MARKERS, ListKind, classify_line
from jot_engine.render.renderer import fence_states, render_line
from jot_engine.render.runs import StyledRun
from jot_engine.runtime import telemetry

from .errors import EditError, NotATodo, OutOfRange
from .operations import (
    CompoundEdit,
    DeleteRange,
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
)
from .state import CursorState, Position, Selection, ordered
from .validation import clamp_position, ensure_line, ensure_position


@dataclass(frozen=True, slots=True)
class AppliedEdit:
    """Outcome of a successful ``Document.apply_operation`` call."""

    operation: EditOperation
    inverse: EditOperation
    cursor_before: Position
    cursor_after: Position
    selection_before: Optional[Selection]
    selection_after: Optional[Selection]
    changed_lines: tuple[int, ...]
    line_count: int
    version: int

    @property
    def label(self) -> str:
        return self.operation.label


@dataclass(slots=True)
class _Scratch:
    """Working copy an operation is applied to before it is committed."""

    lines: List[str]
    cursor: Position
    selection: Optional[Selection]
    changed: Set[int] = field(default_factory=set)
    tail_from: Optional[int] = None

    def touch(self, *indices: int) -> None:
        self.changed.update(indices)

    def shift_from(self, index: int) -> None:
        if self.tail_from is None or index < self.tail_from:
            self.tail_from = index

    def remap(self, mapping: Callable[[Position], Position]) -> None:
        self.cursor = mapping(self.cursor)
        if self.selection is not None:
            start, end = self.selection
            self.selection = (mapping(start), mapping(end))


def _split_text(text: str) -> List[str]:
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


class Document:
    """Ordered lines plus cursor/selection, the single source of truth.

    Every mutation goes through :meth:`apply_operation`, which validates the
    operation against the current lines, applies it atomically, and reports
    which line indices need re-rendering.  Styled runs are cached per line and
    dropped only for those indices.
    """

    def __init__(
        self,
        lines: Optional[Iterable[str]] = None,
        *,
        markers: Sequence[str] = DEFAULT_BULLET_MARKERS,
        name: str = "untitled",
    ) -> None:
        self.name = name
        self.markers = tuple(markers)
        self.state = CursorState()
        self.version = 0
        self._lines: List[str] = list(lines) if lines is not None else [""]
        if not self._lines:
            self._lines = [""]
        self._fences = fence_states(self._lines)
        self._runs: Dict[int, tuple[StyledRun, ...]] = {}
        self._dirty: Set[int] = set(range(len(self._lines)))

    @classmethod
    def from_text(
        cls,
        text: str,
        *,
        markers: Sequence[str] = DEFAULT_BULLET_MARKERS,
        name: str = "untitled",
    ) -> "Document":
        return cls(_split_text(text), markers=markers, name=name)

    # -- serialization -------------------------------------------------

    def to_plain_text(self) -> str:
        return "\n".join(self._lines)

    def load_from_plain_text(self, text: str) -> None:
        """Replace the whole document; cursor returns to the top."""

        with telemetry.span(
            "document::load",
            component="document",
            metadata={"document": self.name, "chars": len(text)},
        ):
            self._lines = _split_text(text)
            self.state = CursorState()
            self.version += 1
            self._fences = fence_states(self._lines)
            self._runs.clear()
            self._dirty = set(range(len(self._lines)))

    # -- accessors -----------------------------------------------------

    @property
    def lines(self) -> tuple[str, ...]:
        return tuple(self._lines)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    @property
    def cursor(self) -> Position:
        return self.state.cursor

    @property
    def selection(self) -> Optional[Selection]:
        return self.state.selection

    def get_line(self, index: int) -> str:
        return self._lines[ensure_line(self._lines, index)]

    def list_kind(self, index: int) -> ListKind:
        return classify_line(self.get_line(index), self.markers)

    def in_code_block(self, index: int) -> bool:
        ensure_line(self._lines, index)
        return self._fences[index]

    def set_cursor(self, line: int, column: int, *, keep_selection: bool = False) -> None:
        ensure_position(self._lines, (line, column))
        self.state.set_cursor(line, column)
        if not keep_selection:
            self.state.clear_selection()

    def set_selection(self, start: Position, end: Position) -> None:
        """Select ``start``..``end``; the cursor sits at ``end``."""

        ensure_position(self._lines, start)
        ensure_position(self._lines, end)
        self.state.set_selection(start, end)
        self.state.set_cursor(*end)

    def clear_selection(self) -> None:
        self.state.clear_selection()

    def selected_text(self) -> str:
        if self.state.selection is None:
            return ""
        (start_line, start_col), (end_line, end_col) = ordered(self.state.selection)
        if start_line == end_line:
            return self._lines[start_line][start_col:end_col]
        parts = [self._lines[start_line][start_col:]]
        parts.extend(self._lines[start_line + 1 : end_line])
        parts.append(self._lines[end_line][:end_col])
        return "\n".join(parts)

    # -- rendering cache ----------------------------------------------

    def runs_for(self, index: int) -> tuple[StyledRun, ...]:
        ensure_line(self._lines, index)
        cached = self._runs.get(index)
        if cached is None:
            cached = render_line(
                self._lines[index],
                in_code_block=self._fences[index],
                markers=self.markers,
            )
            self._runs[index] = cached
        return cached

    def is_cached(self, index: int) -> bool:
        return index in self._runs

    def take_dirty(self) -> tuple[int, ...]:
        """Return and clear the lines changed since the last call."""

        dirty = tuple(sorted(i for i in self._dirty if i < len(self._lines)))
        self._dirty.clear()
        return dirty

    # -- mutation ------------------------------------------------------

    def preview(self, operation: EditOperation) -> tuple[str, ...]:
        """Return the lines ``operation`` would produce, without applying it."""

        scratch = _Scratch(
            lines=list(self._lines),
            cursor=self.state.cursor,
            selection=self.state.selection,
        )
        self._dispatch(scratch, operation)
        return tuple(scratch.lines)

    def apply_operation(self, operation: EditOperation) -> AppliedEdit:
        """Apply ``operation`` or raise without touching the document."""

        cursor_before = self.state.cursor
        selection_before = self.state.selection
        scratch = _Scratch(
            lines=list(self._lines),
            cursor=cursor_before,
            selection=selection_before,
        )
        try:
            inverse = self._dispatch(scratch, operation)
        except EditError as exc:
            telemetry.record_event(
                "document.rejected",
                level="warning",
                data={"op": operation.label, "reason": str(exc)},
            )
            raise

        with telemetry.span(
            f"document::{operation.label}",
            component="document",
            metadata={"document": self.name, "version": self.version + 1},
        ) as handle:
            changed = self._commit(scratch)
            handle.add_metadata("changed", len(changed))

        return AppliedEdit(
            operation=operation,
            inverse=inverse,
            cursor_before=cursor_before,
            cursor_after=self.state.cursor,
            selection_before=selection_before,
            selection_after=self.state.selection,
            changed_lines=changed,
            line_count=len(self._lines),
            version=self.version,
        )

    def _commit(self, scratch: _Scratch) -> tuple[int, ...]:
        lines = scratch.lines
        old_fences = self._fences
        new_fences = fence_states(lines)

        dirty = {i for i in scratch.changed if 0 <= i < len(lines)}
        if scratch.tail_from is not None:
            dirty.update(range(scratch.tail_from, len(lines)))
            for index in [i for i in self._runs if i >= scratch.tail_from]:
                del self._runs[index]
        for index, state in enumerate(new_fences):
            if index >= len(old_fences) or old_fences[index] != state:
                dirty.add(index)
        for index in dirty:
            self._runs.pop(index, None)
        for index in [i for i in self._runs if i >= len(lines)]:
            del self._runs[index]

        self._lines = lines
        self._fences = new_fences
        self.state.cursor = clamp_position(lines, scratch.cursor)
        if scratch.selection is not None:
            start, end = scratch.selection
            self.state.set_selection(
                clamp_position(lines, start), clamp_position(lines, end)
            )
        else:
            self.state.clear_selection()
        self.version += 1
        self._dirty.update(dirty)
        return tuple(sorted(dirty))

    def _dispatch(self, scratch: _Scratch, operation: EditOperation) -> EditOperation:
        handler = _HANDLERS.get(type(operation))
        if handler is None:
            raise TypeError(f"Unsupported operation {operation!r}")
        return handler(self, scratch, operation)

    # -- primitive handlers --------------------------------------------

    def _insert_text(self, s: _Scratch, op: InsertText) -> EditOperation:
        line, column = ensure_position(s.lines, op.position)
        current = s.lines[line]
        head, tail = current[:column], current[column:]
        pieces = _split_text(op.text)
        if len(pieces) == 1:
            s.lines[line] = head + op.text + tail
            s.touch(line)
            end = (line, column + len(op.text))
        else:
            new_lines = [head + pieces[0], *pieces[1:-1], pieces[-1] + tail]
            s.lines[line : line + 1] = new_lines
            s.shift_from(line)
            end = (line + len(pieces) - 1, len(pieces[-1]))
        s.cursor = end
        s.selection = None
        return DeleteRange(op.position, end)

    def _delete_range(self, s: _Scratch, op: DeleteRange) -> EditOperation:
        start, end = ordered((op.start, op.end))
        ensure_position(s.lines, start)
        ensure_position(s.lines, end)
        (start_line, start_col), (end_line, end_col) = start, end
        if start_line == end_line:
            current = s.lines[start_line]
            removed = current[start_col:end_col]
            s.lines[start_line] = current[:start_col] + current[end_col:]
            s.touch(start_line)
        else:
            parts = [s.lines[start_line][start_col:]]
            parts.extend(s.lines[start_line + 1 : end_line])
            parts.append(s.lines[end_line][:end_col])
            removed = "\n".join(parts)
            merged = s.lines[start_line][:start_col] + s.lines[end_line][end_col:]
            s.lines[start_line : end_line + 1] = [merged]
            s.shift_from(start_line)
        s.cursor = start
        s.selection = None
        return InsertText(start, removed)

    def _split_line(self, s: _Scratch, op: SplitLine) -> EditOperation:
        line, column = ensure_position(s.lines, op.position)
        current = s.lines[line]
        s.lines[line : line + 1] = [current[:column], op.continuation + current[column:]]
        s.shift_from(line)
        s.cursor = (line + 1, len(op.continuation))
        s.selection = None
        return JoinLines(line, drop=len(op.continuation))

    def _join_lines(self, s: _Scratch, op: JoinLines) -> EditOperation:
        line = ensure_line(s.lines, op.line)
        if line + 1 >= len(s.lines):
            raise OutOfRange("No line below to join", line=line + 1)
        following = s.lines[line + 1]
        if op.drop < 0 or op.drop > len(following):
            raise OutOfRange("Join drops past the end of line", line=line + 1)
        column = len(s.lines[line])
        dropped = following[: op.drop]
        s.lines[line : line + 2] = [s.lines[line] + following[op.drop :]]
        s.shift_from(line)
        s.cursor = (line, column)
        s.selection = None
        return SplitLine((line, column), continuation=dropped)

    def _indent(self, s: _Scratch, op: Indent) -> EditOperation:
        line = ensure_line(s.lines, op.line)
        current = s.lines[line]
        if op.width >= 0:
            updated = " " * op.width + current
            inverse: EditOperation = Indent(line, -op.width)
        else:
            leading = len(current) - len(current.lstrip(" \t"))
            remove = min(-op.width, leading)
            updated = current[remove:]
            inverse = InsertText((line, 0), current[:remove])
        delta = len(updated) - len(current)
        s.lines[line] = updated
        s.touch(line)

        def shift(position: Position) -> Position:
            row, col = position
            if row != line:
                return position
            return (row, max(0, col + delta))

        s.remap(shift)
        return inverse

    def _toggle_checkbox(self, s: _Scratch, op: ToggleCheckbox) -> EditOperation:
        line = ensure_line(s.lines, op.line)
        current = s.lines[line]
        kind = classify_line(current, self.markers)
        if not kind.is_todo or kind.checkbox_start is None:
            raise NotATodo(line, current)
        index = kind.checkbox_start + 1
        previous = current[index]
        mark = " " if kind.checked else op.mark
        s.lines[line] = current[:index] + mark + current[index + 1 :]
        s.touch(line)
        return ToggleCheckbox(line, mark=previous if previous != " " else op.mark)

    def _move_lines(self, s: _Scratch, op: MoveLines) -> EditOperation:
        first, last = sorted((op.first, op.last))
        ensure_line(s.lines, first)
        ensure_line(s.lines, last)
        block = s.lines[first : last + 1]
        if op.direction == "up":
            if first == 0:
                raise OutOfRange("Cannot move the first line up", line=first)
            neighbour = first - 1
            s.lines[neighbour : last + 1] = block + [s.lines[neighbour]]
            s.touch(*range(neighbour, last + 1))
            inverse = MoveLines(first - 1, last - 1, "down")
            offset, neighbour_target = -1, last
        else:
            if last >= len(s.lines) - 1:
                raise OutOfRange("Cannot move the last line down", line=last)
            neighbour = last + 1
            s.lines[first : neighbour + 1] = [s.lines[neighbour]] + block
            s.touch(*range(first, neighbour + 1))
            inverse = MoveLines(first + 1, last + 1, "up")
            offset, neighbour_target = 1, first

        def follow(position: Position) -> Position:
            row, col = position
            if first <= row <= last:
                return (row + offset, col)
            if row == neighbour:
                return (neighbour_target, col)
            return position

        s.remap(follow)
        return inverse

    def _replace_line(self, s: _Scratch, op: ReplaceLine) -> EditOperation:
        line = ensure_line(s.lines, op.line)
        if "\n" in op.text or "\r" in op.text:
            raise ValueError("ReplaceLine text must be a single line")
        previous = s.lines[line]
        s.lines[line] = op.text
        s.touch(line)
        common = 0
        limit = min(len(previous), len(op.text))
        while common < limit and previous[common] == op.text[common]:
            common += 1
        delta = len(op.text) - len(previous)

        def adjust(position: Position) -> Position:
            row, col = position
            if row != line or col <= common:
                return position
            return (row, max(common, min(len(op.text), col + delta)))

        s.remap(adjust)
        return ReplaceLine(line, previous)

    def _insert_line(self, s: _Scratch, op: InsertLine) -> EditOperation:
        if op.index < 0 or op.index > len(s.lines):
            raise OutOfRange("Insert index out of range", line=op.index)
        if "\n" in op.text or "\r" in op.text:
            raise ValueError("InsertLine text must be a single line")
        s.lines.insert(op.index, op.text)
        s.shift_from(op.index)

        def push(position: Position) -> Position:
            row, col = position
            return (row + 1, col) if row >= op.index else position

        s.remap(push)
        s.selection = None
        return RemoveLine(op.index)

    def _remove_line(self, s: _Scratch, op: RemoveLine) -> EditOperation:
        index = ensure_line(s.lines, op.index)
        if len(s.lines) == 1:
            raise OutOfRange("Cannot remove the only line", line=index)
        removed = s.lines.pop(index)
        s.shift_from(index)

        def pull(position: Position) -> Position:
            row, col = position
            if row > index:
                return (row - 1, col)
            if row == index:
                row = min(index, len(s.lines) - 1)
                return (row, min(col, len(s.lines[row])))
            return position

        s.remap(pull)
        s.selection = None
        return InsertLine(index, removed)

    def _compound(self, s: _Scratch, op: CompoundEdit) -> EditOperation:
        cursor_before = s.cursor
        inverses = [self._dispatch(s, part) for part in op.operations]
        if op.cursor is not None:
            s.cursor = ensure_position(s.lines, op.cursor)
            s.selection = None
        return CompoundEdit(
            operations=tuple(reversed(inverses)),
            label=op.label,
            cursor=cursor_before,
        )


_HANDLERS: Dict[type, Callable[[Document, _Scratch, EditOperation], EditOperation]] = {
    InsertText: Document._insert_text,
    DeleteRange: Document._delete_range,
    SplitLine: Document._split_line,
    JoinLines: Document._join_lines,
    Indent: Document._indent,
    ToggleCheckbox: Document._toggle_checkbox,
    MoveLines: Document._move_lines,
    ReplaceLine: Document._replace_line,
    InsertLine: Document._insert_line,
    RemoveLine: Document._remove_line,
    CompoundEdit: Document._compound,
}  # type: ignore[dict-item]


__all__ = ["AppliedEdit", "Document"]
