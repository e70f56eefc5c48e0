"""Markdown-to-styled-run rendering."""

from .renderer import fence_states, link_at, render_line, render_lines
from .runs import RunBuilder, StyledRun, StyleKind
from .visibility import display_column, source_column, visible_runs

__all__ = [
    "RunBuilder",
    "StyledRun",
    "StyleKind",
    "display_column",
    "fence_states",
    "link_at",
    "render_line",
    "render_lines",
    "source_column",
    "visible_runs",
]
