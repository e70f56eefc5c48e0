"""Pure markdown line renderer.

``render_line`` never raises and never looks beyond the line it is given;
the only cross-line context it needs (whether the line sits inside a fenced
code block) is passed in by the caller, typically from ``fence_states``.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from jot_engine.lines import (
    DEFAULT_BULLET_MARKERS,
    classify_line,
    heading_level,
    is_fence,
    is_rule,
)

from .inline import scan_inline
from .runs import RunBuilder, StyledRun


def render_line(
    text: str,
    *,
    in_code_block: bool = False,
    markers: Sequence[str] = DEFAULT_BULLET_MARKERS,
) -> tuple[StyledRun, ...]:
    if not text:
        return ()

    builder = RunBuilder()
    if in_code_block:
        builder.add(len(text), "code_fence" if is_fence(text) else "code_block")
        return builder.build()

    if is_rule(text):
        builder.add(len(text), "rule")
        return builder.build()

    level = heading_level(text)
    if level:
        hashes_end = len(text) - len(text.lstrip("#"))
        gap_end = len(text) - len(text[hashes_end:].lstrip(" \t"))
        builder.add(gap_end, "syntax", level=level, extent=(0, len(text)))
        scan_inline(text, builder, len(text), plain="heading", level=level)
        return builder.build()

    kind = classify_line(text, markers)
    if kind.is_list:
        builder.add(len(kind.indent), "plain")
        marker_end = len(kind.indent) + len(kind.marker)
        builder.add(marker_end, "list_marker")
        if kind.checkbox_start is not None:
            builder.add(kind.checkbox_start, "plain")
            box_style = "todo_checked" if kind.checked else "todo_unchecked"
            builder.add(kind.checkbox_start + 3, box_style)
        builder.add(kind.content_start, "plain")
        plain = "todo_done" if kind.checked else "plain"
        scan_inline(text, builder, len(text), plain=plain)
        return builder.build()

    scan_inline(text, builder, len(text))
    return builder.build()


def fence_states(lines: Iterable[str]) -> list[bool]:
    """Return, per line, whether it renders as part of a fenced code block.

    Fence lines that open or close a block count as inside it.  A fence that
    is never closed does not turn the rest of the document into code.
    """

    states: list[bool] = []
    open_at: Optional[int] = None
    for index, line in enumerate(lines):
        if is_fence(line):
            states.append(True)
            open_at = index if open_at is None else None
        else:
            states.append(open_at is not None)
    if open_at is not None:
        for index in range(open_at, len(states)):
            states[index] = False
    return states


def render_lines(
    lines: Sequence[str],
    indices: Optional[Iterable[int]] = None,
    *,
    markers: Sequence[str] = DEFAULT_BULLET_MARKERS,
) -> dict[int, tuple[StyledRun, ...]]:
    """Render ``indices`` of ``lines`` (all of them by default)."""

    states = fence_states(lines)
    targets = range(len(lines)) if indices is None else indices
    return {
        index: render_line(lines[index], in_code_block=states[index], markers=markers)
        for index in targets
        if 0 <= index < len(lines)
    }


def link_at(
    text: str,
    column: int,
    *,
    markers: Sequence[str] = DEFAULT_BULLET_MARKERS,
) -> Optional[str]:
    """Return the link target under ``column`` on a rendered line, if any."""

    for run in render_line(text, markers=markers):
        if run.target is not None and run.start <= column < run.end:
            return run.target
    return None


__all__ = ["render_line", "render_lines", "fence_states", "link_at"]
