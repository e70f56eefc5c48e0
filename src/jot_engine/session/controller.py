"""Editing session: turns input events into edit operations.

The session owns the document exclusively.  Every editing event resolves to
exactly one operation (compound operations count as one), which is applied,
recorded in the undo timeline, rendered for its dirty lines only and followed
by a debounced save request.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Literal, Optional

from jot_engine.document import (
    CompoundEdit,
    DeleteRange,
    Document,
    EditError,
    EditOperation,
    InsertText,
    JoinLines,
    OutOfRange,
    Position,
    Selection,
    compound,
    ordered,
)
from jot_engine.keymaps import (
    KeymapRegistry,
    KeymapResolver,
    KeyStroke,
    load_default_keymaps,
)
from jot_engine.lines import classify_line
from jot_engine.render import link_at
from jot_engine.runtime import telemetry
from jot_engine.runtime.config import DEFAULT_CONFIG, EditorConfig
from jot_engine.runtime.timers import Clock, TimerBank
from jot_engine.storage import read_document
from jot_engine.structure import ListEditor, move_selection, with_renumbering

from .hooks import SessionHooks, SessionResult
from .undo import UndoTimeline

SAVE_TIMER = "save"

CursorMotion = Literal[
    "left", "right", "up", "down", "home", "end", "document_start", "document_end"
]

_LINK_SCHEMES = ("http://", "https://", "ftp://", "file://")


class EditingSession:
    """Composes document, list editor, keymaps, history and host hooks."""

    def __init__(
        self,
        document: Optional[Document] = None,
        *,
        config: EditorConfig = DEFAULT_CONFIG,
        hooks: Optional[SessionHooks] = None,
        keymap_registry: KeymapRegistry | None = None,
        keymap_resolver: KeymapResolver | None = None,
        load_defaults: bool = True,
        clock: Optional[Clock] = None,
    ) -> None:
        self.config = config
        self.document = document or Document(markers=config.bullet_markers)
        self.hooks = hooks or SessionHooks()
        self.lists = ListEditor(config)
        self.history = UndoTimeline(max_entries=config.undo_depth)
        self.timers = TimerBank(clock=clock)
        self.keymap_registry = keymap_registry or KeymapRegistry(
            logger_name="jot_engine.keymaps"
        )
        if load_defaults and keymap_registry is None:
            load_default_keymaps(self.keymap_registry)
        self.keymap_resolver = keymap_resolver or KeymapResolver(
            self.keymap_registry, logger_name="jot_engine.keymaps"
        )
        self.clipboard = ""
        self.path: Optional[str] = None
        self._dirty = False
        self._line_count = self.document.line_count
        self._render_dirty()

    # -- state -----------------------------------------------------------

    @property
    def is_dirty(self) -> bool:
        return self._dirty

    @property
    def text(self) -> str:
        return self.document.to_plain_text()

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def can_redo(self) -> bool:
        return self.history.can_redo()

    def key_context(self) -> Dict[str, bool]:
        line = self.document.cursor[0]
        kind = self.document.list_kind(line)
        in_code = self.document.in_code_block(line)
        return {
            "has_selection": self.document.selection is not None,
            "in_list": kind.is_list and not in_code,
            "on_todo": kind.is_todo and not in_code,
            "in_code_block": in_code,
            "can_undo": self.history.can_undo(),
            "can_redo": self.history.can_redo(),
        }

    # -- key input -------------------------------------------------------

    def handle_key(self, stroke: KeyStroke) -> SessionResult:
        """Resolve ``stroke`` through the keymaps and run the bound action."""

        match = self.keymap_resolver.resolve(stroke, context=self.key_context())
        if match is not None:
            with telemetry.span(
                f"action::{match.action.id}",
                logger_name="jot_engine.session",
                component="session",
                metadata={"binding": match.binding.id, "key": stroke.token},
            ):
                result = match.action(self, match)
            if isinstance(result, SessionResult):
                return result
            return SessionResult("noop")

        if stroke.text and not stroke.is_command and stroke.text.isprintable():
            return self.insert_text(stroke.text)
        return SessionResult("ignored")

    # -- editing events --------------------------------------------------

    def insert_text(self, text: str) -> SessionResult:
        if not text:
            return SessionResult("noop")
        selection = self.document.selection
        if selection is not None:
            start, end = ordered(selection)
            operation: EditOperation = compound(
                [DeleteRange(start, end), InsertText(start, text)], label="insert_text"
            )
            return self._edit("insert_text", lambda: operation)
        operation = InsertText(self.document.cursor, text)
        typing = len(text) == 1 and text != "\n"
        return self._edit("insert_text", lambda: operation, merge=typing)

    def paste(self, text: Optional[str] = None) -> SessionResult:
        payload = self.clipboard if text is None else text
        if not payload:
            return SessionResult("noop")

        def build() -> EditOperation:
            selection = self.document.selection
            if selection is not None:
                start, end = ordered(selection)
                parts: List[EditOperation] = [DeleteRange(start, end)]
            else:
                start = self.document.cursor
                parts = []
            parts.append(InsertText(start, payload))
            operation = compound(parts, label="paste")
            span_end = start[0] + payload.count("\n") + 1
            return with_renumbering(
                self.document, operation, range(start[0], span_end), label="paste"
            )

        return self._edit("paste", build)

    def press_enter(self) -> SessionResult:
        return self._edit("enter", lambda: self.lists.on_enter(self.document))

    def backspace(self) -> SessionResult:
        def build() -> Optional[EditOperation]:
            document = self.document
            if document.selection is not None:
                return self._delete_selection_op(document.selection)
            line, column = document.cursor
            if column > 0:
                return DeleteRange((line, column - 1), (line, column), label="backspace")
            if line == 0:
                return None
            return with_renumbering(
                document, JoinLines(line - 1, label="backspace"), [line - 1]
            )

        return self._edit("backspace", build)

    def delete_forward(self) -> SessionResult:
        def build() -> Optional[EditOperation]:
            document = self.document
            if document.selection is not None:
                return self._delete_selection_op(document.selection)
            line, column = document.cursor
            if column < len(document.get_line(line)):
                return DeleteRange((line, column), (line, column + 1), label="delete")
            if line >= document.line_count - 1:
                return None
            return with_renumbering(document, JoinLines(line, label="delete"), [line])

        return self._edit("delete", build)

    def _delete_selection_op(self, selection: Selection) -> EditOperation:
        start, end = ordered(selection)
        operation = DeleteRange(start, end, label="delete_selection")
        return with_renumbering(
            self.document, operation, [start[0]], label="delete_selection"
        )

    def indent(self) -> SessionResult:
        return self._edit("indent", lambda: self.lists.indent(self.document))

    def outdent(self) -> SessionResult:
        return self._edit("outdent", lambda: self.lists.outdent(self.document))

    def move_line_up(self) -> SessionResult:
        return self._edit(
            "move_up", lambda: move_selection(self.document, "up"), quiet=OutOfRange
        )

    def move_line_down(self) -> SessionResult:
        return self._edit(
            "move_down", lambda: move_selection(self.document, "down"), quiet=OutOfRange
        )

    def toggle_checkbox(self, line: Optional[int] = None) -> SessionResult:
        return self._edit(
            "toggle_checkbox", lambda: self.lists.toggle_checkbox(self.document, line)
        )

    def insert_item(self, index: int, text: str) -> SessionResult:
        return self._edit(
            "insert_item", lambda: self.lists.insert_item(self.document, index, text)
        )

    def cut(self) -> SessionResult:
        """Cut the selection, or the whole cursor line when nothing is selected."""

        document = self.document
        selection = document.selection
        if selection is not None:
            clipped = document.selected_text()
            result = self._edit("cut", lambda: self._delete_selection_op(selection))
        else:
            line = document.cursor[0]
            clipped = document.get_line(line) + "\n"
            result = self._edit(
                "cut_line", lambda: self.lists.remove_item(document, line)
            )
        if result.status == "applied":
            self.clipboard = clipped
        return result

    def copy(self) -> SessionResult:
        document = self.document
        if document.selection is not None:
            self.clipboard = document.selected_text()
        else:
            self.clipboard = document.get_line(document.cursor[0]) + "\n"
        return SessionResult("noop", message="copied")

    # -- history ---------------------------------------------------------

    def undo(self) -> SessionResult:
        entry = self.history.undo()
        if entry is None:
            return SessionResult("noop")
        telemetry.record_event(
            "session.undo",
            level="debug",
            data={"op": entry.label},
            logger_name="jot_engine.session",
        )
        edit = self.document.apply_operation(entry.inverse)
        self._restore(entry.cursor_before, entry.selection_before)
        self._after_edit()
        return SessionResult("applied", edit=edit)

    def redo(self) -> SessionResult:
        entry = self.history.redo()
        if entry is None:
            return SessionResult("noop")
        telemetry.record_event(
            "session.redo",
            level="debug",
            data={"op": entry.label},
            logger_name="jot_engine.session",
        )
        edit = self.document.apply_operation(entry.operation)
        self._restore(entry.cursor_after, entry.selection_after)
        self._after_edit()
        return SessionResult("applied", edit=edit)

    def _restore(self, cursor: Position, selection: Optional[Selection]) -> None:
        document = self.document
        try:
            if selection is not None:
                document.set_selection(*selection)
            document.set_cursor(*cursor, keep_selection=selection is not None)
        except OutOfRange:
            document.clear_selection()

    # -- cursor ----------------------------------------------------------

    def set_cursor(self, line: int, column: int) -> SessionResult:
        try:
            self.document.set_cursor(line, column)
        except OutOfRange as exc:
            return self._reject(exc, "set_cursor")
        self._cursor_changed()
        return SessionResult("moved")

    def select(self, start: Position, end: Position) -> SessionResult:
        try:
            self.document.set_selection(start, end)
        except OutOfRange as exc:
            return self._reject(exc, "select")
        self._cursor_changed()
        return SessionResult("moved")

    def select_all(self) -> SessionResult:
        last = self.document.line_count - 1
        return self.select((0, 0), (last, len(self.document.get_line(last))))

    def move_cursor(self, motion: CursorMotion, *, extend: bool = False) -> SessionResult:
        document = self.document
        line, column = document.cursor
        last = document.line_count - 1
        length = len(document.get_line(line))
        target: Position = (line, column)
        if motion == "left":
            if column > 0:
                target = (line, column - 1)
            elif line > 0:
                target = (line - 1, len(document.get_line(line - 1)))
        elif motion == "right":
            if column < length:
                target = (line, column + 1)
            elif line < last:
                target = (line + 1, 0)
        elif motion == "up":
            if line > 0:
                target = (line - 1, min(column, len(document.get_line(line - 1))))
            else:
                target = (0, 0)
        elif motion == "down":
            if line < last:
                target = (line + 1, min(column, len(document.get_line(line + 1))))
            else:
                target = (last, length)
        elif motion == "home":
            target = (line, 0)
        elif motion == "end":
            target = (line, length)
        elif motion == "document_start":
            target = (0, 0)
        else:
            target = (last, len(document.get_line(last)))

        if extend:
            anchor = document.selection[0] if document.selection else document.cursor
            document.set_selection(anchor, target)
            if document.selection is None:
                document.set_cursor(*target)
        else:
            document.set_cursor(*target)
        self._cursor_changed()
        return SessionResult("moved")

    def click(self, line: int, column: int, *, follow_link: bool = False) -> SessionResult:
        """Pointer press: toggles a clicked checkbox, opens links on request."""

        document = self.document
        try:
            text = document.get_line(line)
        except OutOfRange as exc:
            return self._reject(exc, "click")
        kind = classify_line(text, document.markers)
        start = kind.checkbox_start
        on_box = start is not None and start <= column < start + 3
        if kind.is_todo and on_box and not document.in_code_block(line):
            return self.toggle_checkbox(line)
        if follow_link:
            target = link_at(text, column, markers=document.markers)
            if target and target.lower().startswith(_LINK_SCHEMES):
                telemetry.record_event(
                    "session.open_link",
                    data={"target": target},
                    logger_name="jot_engine.session",
                )
                self.hooks.open_link(target)
                return SessionResult("noop", message=target)
        return self.set_cursor(line, min(column, len(text)))

    # -- documents -------------------------------------------------------

    def load_text(self, text: str, *, path: Optional[str] = None) -> SessionResult:
        with telemetry.span(
            "session::load",
            logger_name="jot_engine.session",
            component="session",
            metadata={"path": path or ""},
        ):
            self.document.load_from_plain_text(text)
            self.history.clear()
            self.timers.cancel(SAVE_TIMER)
            self.path = path
            self._set_dirty(False)
            self._render_dirty()
            self._cursor_changed()
        return SessionResult("applied")

    def load_file(self, path: str) -> SessionResult:
        try:
            text = read_document(path, self.config)
        except EditError as exc:
            return self._reject(exc, "load")
        return self.load_text(text, path=path)

    def mark_saved(self, path: Optional[str] = None) -> None:
        if path is not None:
            self.path = path
        self.timers.cancel(SAVE_TIMER)
        self._set_dirty(False)

    # -- timers ----------------------------------------------------------

    def process_timers(self, now: Optional[float] = None) -> List[str]:
        """Fire every expired timer; hosts call this from their event loop."""

        fired = self.timers.due(now)
        for name in fired:
            if name == SAVE_TIMER:
                self._request_save()
        return fired

    def flush_save(self) -> bool:
        """Emit a pending save request immediately."""

        if not self.timers.fire_now(SAVE_TIMER):
            return False
        self._request_save()
        return True

    def _request_save(self) -> None:
        text = self.document.to_plain_text()
        telemetry.record_event(
            "session.save_requested",
            data={"path": self.path or "", "chars": len(text)},
            logger_name="jot_engine.session",
        )
        self.hooks.save_requested(text)

    # -- plumbing --------------------------------------------------------

    def _edit(
        self,
        label: str,
        build: Callable[[], Optional[EditOperation]],
        *,
        merge: bool = False,
        quiet: type[EditError] | None = None,
    ) -> SessionResult:
        try:
            operation = build()
            if operation is None:
                return SessionResult("noop")
            edit = self.document.apply_operation(operation)
        except EditError as exc:
            if quiet is not None and isinstance(exc, quiet):
                telemetry.record_event(
                    "session.noop",
                    level="debug",
                    data={"action": label, "reason": str(exc)},
                    logger_name="jot_engine.session",
                )
                return SessionResult("noop", message=str(exc))
            return self._reject(exc, label)
        self.history.push(edit, merge=merge and not isinstance(operation, CompoundEdit))
        self._after_edit()
        return SessionResult("applied", edit=edit)

    def _reject(self, exc: EditError, label: str) -> SessionResult:
        telemetry.record_event(
            "session.rejected",
            level="warning",
            data={"action": label, "error": type(exc).__name__, "reason": str(exc)},
            logger_name="jot_engine.session",
        )
        self.hooks.notify(str(exc))
        return SessionResult("rejected", message=str(exc))

    def _after_edit(self) -> None:
        self._render_dirty()
        self._cursor_changed()
        self._set_dirty(True)
        self.timers.arm(SAVE_TIMER, self.config.save_debounce_ms)

    def _render_dirty(self) -> None:
        count = self.document.line_count
        if count != self._line_count:
            self._line_count = count
            self.hooks.line_count_changed(count)
        for index in self.document.take_dirty():
            self.hooks.render_line(index, self.document.runs_for(index))

    def _cursor_changed(self) -> None:
        self.hooks.cursor_changed(self.document.cursor, self.document.selection)

    def _set_dirty(self, dirty: bool) -> None:
        if dirty == self._dirty:
            return
        self._dirty = dirty
        telemetry.record_event(
            "session.dirty",
            level="debug",
            data={"dirty": dirty},
            logger_name="jot_engine.session",
        )
        self.hooks.dirty_changed(dirty)


__all__ = ["CursorMotion", "EditingSession", "SAVE_TIMER"]
