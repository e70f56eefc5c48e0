"""Styled run records and the builder that keeps them contiguous."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Optional

StyleKind = Literal[
    "plain",
    "syntax",
    "hidden",
    "heading",
    "bold",
    "italic",
    "code",
    "link",
    "url",
    "strikethrough",
    "underline",
    "list_marker",
    "todo_unchecked",
    "todo_checked",
    "todo_done",
    "rule",
    "code_fence",
    "code_block",
]


@dataclass(frozen=True, slots=True)
class StyledRun:
    """Half-open span ``[start, end)`` of a line tagged with one style.

    ``level`` is the heading level for runs on heading lines and 0 elsewhere;
    ``target`` holds the URL for ``link`` and ``url`` runs.  Markup runs (the
    ``**`` around bold text, the ``(url)`` of a link, heading hashes) carry
    the ``extent`` of the construct they belong to so a view can conceal them
    while the cursor is elsewhere.
    """

    start: int
    end: int
    style: StyleKind
    level: int = 0
    target: Optional[str] = None
    extent: Optional[tuple[int, int]] = None

    @property
    def length(self) -> int:
        return self.end - self.start

    def slice(self, text: str) -> str:
        return text[self.start : self.end]


class RunBuilder:
    """Accumulates runs left to right, merging equal neighbours."""

    def __init__(self) -> None:
        self._runs: List[StyledRun] = []

    @property
    def position(self) -> int:
        return self._runs[-1].end if self._runs else 0

    def add(
        self,
        end: int,
        style: StyleKind,
        *,
        level: int = 0,
        target: Optional[str] = None,
        extent: Optional[tuple[int, int]] = None,
    ) -> None:
        start = self.position
        if end <= start:
            return
        key = (style, level, target, extent)
        if self._runs:
            last = self._runs[-1]
            if (last.style, last.level, last.target, last.extent) == key:
                self._runs[-1] = StyledRun(last.start, end, *key)
                return
        self._runs.append(StyledRun(start, end, *key))

    def build(self) -> tuple[StyledRun, ...]:
        return tuple(self._runs)


__all__ = ["StyleKind", "StyledRun", "RunBuilder"]
