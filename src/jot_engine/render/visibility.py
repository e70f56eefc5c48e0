"""Cursor-aware concealment of markdown delimiters.

Rendered runs describe the source line.  A view that shows ``bold`` instead
of ``**bold**`` while the cursor is elsewhere asks :func:`visible_runs` for
the runs to draw.  The two column helpers translate between source columns
and the columns of the drawn text, which omits every ``hidden`` run.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from .runs import StyledRun


def _cursor_inside(run: StyledRun, cursor_column: Optional[int]) -> bool:
    if run.extent is None or cursor_column is None:
        return False
    start, end = run.extent
    return start <= cursor_column <= end


def visible_runs(
    runs: Sequence[StyledRun], cursor_column: Optional[int] = None
) -> tuple[StyledRun, ...]:
    """Restyle markup runs as ``hidden`` unless the cursor touches their construct.

    ``cursor_column`` is the cursor's column when it sits on this line and
    ``None`` otherwise.  A cursor at either edge of a construct counts as
    inside it, so typing right after ``**bold**`` keeps the stars visible.
    """

    return tuple(
        replace(run, style="hidden")
        if run.extent is not None and not _cursor_inside(run, cursor_column)
        else run
        for run in runs
    )


def display_column(runs: Sequence[StyledRun], column: int) -> int:
    """Map a source column to its column in the drawn text."""

    concealed = 0
    for run in runs:
        if run.style != "hidden" or run.start >= column:
            continue
        concealed += min(run.end, column) - run.start
    return column - concealed


def source_column(runs: Sequence[StyledRun], column: int) -> int:
    """Map a column of the drawn text back to the source line.

    Columns past the drawn text land after the last source character.
    """

    shown = 0
    for run in runs:
        if run.style == "hidden":
            continue
        if column < shown + run.length:
            return run.start + (column - shown)
        shown += run.length
    return runs[-1].end if runs else 0


__all__ = ["display_column", "source_column", "visible_runs"]
