"""Rich styling for rendered runs."""

from __future__ import annotations

from typing import Dict, Optional, Sequence

from rich.text import Text

from jot_engine.render import StyledRun, StyleKind, display_column

STYLE_MAP: Dict[StyleKind, str] = {
    "plain": "",
    "syntax": "dim",
    "hidden": "",
    "heading": "bold",
    "bold": "bold",
    "italic": "italic",
    "code": "bold cyan on grey15",
    "link": "underline bright_blue",
    "url": "underline blue",
    "strikethrough": "strike",
    "underline": "underline",
    "list_marker": "bold yellow",
    "todo_unchecked": "bold yellow",
    "todo_checked": "bold green",
    "todo_done": "strike dim",
    "rule": "dim",
    "code_fence": "dim cyan",
    "code_block": "cyan on grey11",
}

HEADING_STYLES: Dict[int, str] = {
    1: "bold magenta",
    2: "bold bright_magenta",
    3: "bold blue",
    4: "bold bright_blue",
    5: "bold cyan",
    6: "bold bright_cyan",
}


def style_for(run: StyledRun) -> str:
    base = STYLE_MAP.get(run.style, "")
    if not run.level:
        return base
    heading = HEADING_STYLES.get(run.level, "bold")
    if run.style == "heading":
        return heading
    if run.style == "syntax":
        return f"dim {heading}"
    return f"{heading} {base}".strip()


def styled_line(
    text: str, runs: Sequence[StyledRun], *, cursor_column: Optional[int] = None
) -> Text:
    """Build a rich ``Text`` for one line, optionally showing the cursor.

    ``hidden`` runs are left out; ``cursor_column`` is a source column.
    """

    result = Text()
    for run in runs:
        if run.style != "hidden":
            result.append(run.slice(text), style=style_for(run) or None)
    if cursor_column is not None:
        column = display_column(runs, cursor_column)
        if column < len(result):
            result.stylize("reverse", column, column + 1)
        else:
            result.append(" ", style="reverse")
    return result


__all__ = ["HEADING_STYLES", "STYLE_MAP", "style_for", "styled_line"]
