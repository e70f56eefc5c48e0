"""Sequential renumbering of numbered list blocks."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from jot_engine.document import Document, EditOperation, ReplaceLine, compound
from jot_engine.lines import DEFAULT_BULLET_MARKERS, classify_line, leading_width, renumbered


def _is_item(text: str, indent: int, markers: Sequence[str]) -> bool:
    kind = classify_line(text, markers)
    return kind.is_numbered and kind.indent_width == indent


def _is_nested(text: str, indent: int) -> bool:
    return bool(text.strip()) and leading_width(text) > indent


def block_items(
    lines: Sequence[str],
    index: int,
    markers: Sequence[str] = DEFAULT_BULLET_MARKERS,
) -> List[int]:
    """Indices of the numbered items sharing a block with line ``index``.

    A block is a run of numbered items at one indent.  Deeper-indented lines
    may sit between items; a blank line, a shallower line or any other line
    at the block's indent ends it.  Returns ``[]`` when ``index`` is not a
    numbered item.
    """

    if not 0 <= index < len(lines):
        return []
    kind = classify_line(lines[index], markers)
    if not kind.is_numbered:
        return []
    indent = kind.indent_width

    items = [index]
    cursor = index - 1
    while cursor >= 0:
        text = lines[cursor]
        if _is_item(text, indent, markers):
            items.insert(0, cursor)
        elif not _is_nested(text, indent):
            break
        cursor -= 1

    cursor = index + 1
    while cursor < len(lines):
        text = lines[cursor]
        if _is_item(text, indent, markers):
            items.append(cursor)
        elif not _is_nested(text, indent):
            break
        cursor += 1
    return items


def _start_value(
    lines: Sequence[str],
    first: int,
    before: Optional[Sequence[str]],
    fresh: set[int],
    markers: Sequence[str],
) -> int:
    kind = classify_line(lines[first], markers)
    if first in fresh:
        return 1
    if before is not None and first < len(before):
        previous = classify_line(before[first], markers)
        if previous.is_numbered and previous.indent_width == kind.indent_width:
            return previous.number or 0
    return kind.number or 0


def renumber_operations(
    lines: Sequence[str],
    touched: Iterable[int],
    *,
    before: Optional[Sequence[str]] = None,
    fresh: Iterable[int] = (),
    markers: Sequence[str] = DEFAULT_BULLET_MARKERS,
) -> List[ReplaceLine]:
    """Rewrite markers of every block near ``touched`` so they count up by one.

    ``lines`` is the text after the edit, ``before`` the text prior to it;
    a block keeps the start value its first line had before the edit.
    ``fresh`` names lines that restart their block at 1 when they head it.
    """

    fresh_set = set(fresh)
    seen: set[int] = set()
    operations: List[ReplaceLine] = []
    candidates = sorted({n for t in touched for n in (t - 1, t, t + 1)})
    for candidate in candidates:
        if candidate in seen:
            continue
        items = block_items(lines, candidate, markers)
        if not items:
            continue
        seen.update(items)
        start = _start_value(lines, items[0], before, fresh_set, markers)
        for offset, index in enumerate(items):
            text = lines[index]
            kind = classify_line(text, markers)
            wanted = start + offset
            if kind.number != wanted:
                operations.append(
                    ReplaceLine(index, renumbered(text, kind, wanted), label="renumber")
                )
    return operations


def with_renumbering(
    document: Document,
    operation: EditOperation,
    touched: Iterable[int],
    *,
    fresh: Iterable[int] = (),
    label: Optional[str] = None,
) -> EditOperation:
    """Append renumbering of affected blocks to ``operation``."""

    after = document.preview(operation)
    fixes = renumber_operations(
        after,
        touched,
        before=document.lines,
        fresh=fresh,
        markers=document.markers,
    )
    if not fixes:
        return operation
    return compound([operation, *fixes], label=label or operation.label)


__all__ = ["block_items", "renumber_operations", "with_renumbering"]
