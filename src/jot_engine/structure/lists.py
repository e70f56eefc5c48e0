"""List-aware editing: continuation, checkboxes, nesting and insertion."""

from __future__ import annotations

from typing import List, Optional

from jot_engine.document import (
    DeleteRange,
    Document,
    EditOperation,
    Indent,
    InsertLine,
    InsertText,
    NotATodo,
    OutOfRange,
    RemoveLine,
    ReplaceLine,
    SplitLine,
    ToggleCheckbox,
    compound,
    ordered,
    selected_lines,
)
from jot_engine.lines import ListKind, classify_line, heading_level, set_heading_level
from jot_engine.runtime.config import DEFAULT_CONFIG, EditorConfig

from .numbering import with_renumbering

MAX_HEADING_LEVEL = 6


class ListEditor:
    """Builds the edit operations for structural list commands.

    Methods never mutate the document; they inspect it and return one
    operation (possibly compound) for the caller to apply, or ``None`` when
    the command has nothing to do.
    """

    def __init__(self, config: EditorConfig = DEFAULT_CONFIG) -> None:
        self.config = config

    def kind(self, document: Document, index: int) -> ListKind:
        return classify_line(document.get_line(index), self.config.bullet_markers)

    # -- enter -----------------------------------------------------------

    def on_enter(self, document: Document) -> EditOperation:
        if document.selection is not None:
            start, end = ordered(document.selection)
            return compound(
                [DeleteRange(start, end), SplitLine(start)], label="split_line"
            )

        line, column = document.cursor
        text = document.get_line(line)
        kind = self.kind(document, line)
        if not kind.is_list or column < kind.content_start:
            return SplitLine((line, column))
        if kind.is_empty_item(text):
            return ReplaceLine(line, "", label="exit_list")

        split = SplitLine((line, column), continuation=kind.continuation(), label="continue_list")
        if not kind.is_numbered:
            return split
        return with_renumbering(document, split, [line + 1], label="continue_list")

    # -- checkboxes ------------------------------------------------------

    def toggle_checkbox(self, document: Document, line: Optional[int] = None) -> EditOperation:
        index = document.cursor[0] if line is None else line
        kind = self.kind(document, index)
        if not kind.is_todo or document.in_code_block(index):
            raise NotATodo(index, document.get_line(index))
        return ToggleCheckbox(index, mark=self.config.checked_mark)

    # -- nesting ---------------------------------------------------------

    def _target_lines(self, document: Document, lines: Optional[range]) -> range:
        if lines is not None:
            return lines
        if document.selection is not None:
            first, last = selected_lines(document.selection)
            return range(first, last + 1)
        return range(document.cursor[0], document.cursor[0] + 1)

    def indent(self, document: Document, lines: Optional[range] = None) -> Optional[EditOperation]:
        """Nest list items one level deeper; raise heading levels.

        With no selection on a plain line the configured tab text is typed
        at the cursor instead.
        """

        targets = self._target_lines(document, lines)
        single = lines is None and document.selection is None
        if single:
            index = targets[0]
            text = document.get_line(index)
            if not heading_level(text) and not self.kind(document, index).is_list:
                return InsertText(document.cursor, self.config.tab_text, label="insert_tab")

        operations: List[EditOperation] = []
        fresh: List[int] = []
        for index in targets:
            text = document.get_line(index)
            level = heading_level(text)
            if level:
                if level < MAX_HEADING_LEVEL:
                    operations.append(
                        ReplaceLine(
                            index, set_heading_level(text, level + 1), label="heading_level"
                        )
                    )
                continue
            if not text.strip():
                continue
            kind = self.kind(document, index)
            if kind.is_list:
                operations.append(Indent(index, self.config.indent_width(kind.is_numbered)))
                if kind.is_numbered:
                    fresh.append(index)
            else:
                operations.append(Indent(index, len(self.config.tab_text)))
        return self._finish(document, operations, targets, fresh, label="indent")

    def outdent(self, document: Document, lines: Optional[range] = None) -> Optional[EditOperation]:
        """Undo one level of nesting; level 0 lines are left alone."""

        targets = self._target_lines(document, lines)
        operations: List[EditOperation] = []
        for index in targets:
            text = document.get_line(index)
            level = heading_level(text)
            if level:
                if level > 1:
                    operations.append(
                        ReplaceLine(
                            index, set_heading_level(text, level - 1), label="heading_level"
                        )
                    )
                continue
            leading = len(text) - len(text.lstrip(" \t"))
            if not leading:
                continue
            kind = self.kind(document, index)
            if kind.is_list:
                width = self.config.indent_width(kind.is_numbered)
            else:
                width = len(self.config.tab_text)
            operations.append(Indent(index, -width))
        return self._finish(document, operations, targets, [], label="outdent")

    def _finish(
        self,
        document: Document,
        operations: List[EditOperation],
        targets: range,
        fresh: List[int],
        *,
        label: str,
    ) -> Optional[EditOperation]:
        if not operations:
            return None
        operation = compound(operations, label=label)
        return with_renumbering(
            document,
            operation,
            [*targets, targets[-1] + 1],
            fresh=fresh,
            label=label,
        )

    # -- insertion and removal -------------------------------------------

    def item_text(self, document: Document, index: int, text: str) -> str:
        """Return ``text`` carrying the marker of the list it lands in."""

        markers = self.config.bullet_markers
        if classify_line(text, markers).is_list:
            return text
        if index > 0:
            previous = self.kind(document, index - 1)
            if previous.is_list:
                return previous.continuation() + text
        if index < document.line_count:
            following = self.kind(document, index)
            if following.is_list:
                if following.number is not None:
                    head = f"{following.indent}{following.number}. "
                else:
                    head = f"{following.indent}{following.marker} "
                if following.is_todo:
                    head += "[ ] "
                return head + text
        return text

    def insert_item(self, document: Document, index: int, text: str) -> EditOperation:
        if index < 0 or index > document.line_count:
            raise OutOfRange("Insert index out of range", line=index)
        insert = InsertLine(index, self.item_text(document, index, text), label="insert_item")
        return with_renumbering(document, insert, [index], label="insert_item")

    def remove_item(self, document: Document, index: int) -> EditOperation:
        if index < 0 or index >= document.line_count:
            raise OutOfRange("Line out of range", line=index)
        if document.line_count == 1:
            return ReplaceLine(index, "", label="remove_item")
        remove = RemoveLine(index, label="remove_item")
        return with_renumbering(document, remove, [index], label="remove_item")


__all__ = ["ListEditor", "MAX_HEADING_LEVEL"]
