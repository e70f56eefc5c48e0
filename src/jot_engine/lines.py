"""Structural classification of single lines.

``ListKind`` is derived from a line's leading marker every time it is needed;
nothing here is cached on the document.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal, Optional, Sequence

ListKindTag = Literal["none", "bullet", "numbered", "todo"]

DEFAULT_BULLET_MARKERS: tuple[str, ...] = ("-", "*", "+")
TAB_WIDTH = 4

_NUMBERED = r"(?P<number>\d{1,9})\."
_CHECKBOX = re.compile(r"\[(?P<mark>[ xX])\](?:[ \t]+|$)")
_HEADING = re.compile(r"^(?P<hashes>#{1,6})(?P<gap>[ \t]+)")
_FENCE = re.compile(r"^[ \t]*```")
_RULE = re.compile(r"^[ \t]*---+[ \t]*$")


def _marker_pattern(markers: Sequence[str]) -> str:
    bullet = "".join(re.escape(marker) for marker in markers)
    return (
        r"^(?P<indent>[ \t]*)"
        rf"(?:(?P<bullet>[{bullet}])|{_NUMBERED})"
        r"(?P<gap>[ \t]+)"
    )


@dataclass(frozen=True, slots=True)
class ListKind:
    """Closed tagged variant describing a line's list role.

    ``kind`` is one of ``none``, ``bullet``, ``numbered`` or ``todo``.  Todo
    items keep the bullet or number they were written with in ``marker`` and
    ``number``.  Offsets index into the line the kind was computed from.
    """

    kind: ListKindTag = "none"
    indent: str = ""
    marker: str = ""
    number: Optional[int] = None
    checked: Optional[bool] = None
    checkbox_start: Optional[int] = None
    content_start: int = 0

    @property
    def is_list(self) -> bool:
        return self.kind != "none"

    @property
    def is_numbered(self) -> bool:
        return self.number is not None

    @property
    def is_todo(self) -> bool:
        return self.kind == "todo"

    @property
    def indent_width(self) -> int:
        return len(self.indent.expandtabs(TAB_WIDTH))

    def prefix(self, line: str) -> str:
        return line[: self.content_start]

    def content(self, line: str) -> str:
        return line[self.content_start :]

    def is_empty_item(self, line: str) -> bool:
        return self.is_list and not self.content(line).strip()

    def continuation(self) -> str:
        """Marker text that starts the next item of the same list."""

        if self.kind == "none":
            return ""
        if self.number is not None:
            head = f"{self.indent}{self.number + 1}. "
        else:
            head = f"{self.indent}{self.marker} "
        if self.kind == "todo":
            head += "[ ] "
        return head


NONE = ListKind()


def classify_line(
    text: str, markers: Sequence[str] = DEFAULT_BULLET_MARKERS
) -> ListKind:
    match = re.match(_marker_pattern(markers), text)
    if match is None:
        return NONE

    indent = match.group("indent")
    number: Optional[int] = None
    if match.group("bullet") is not None:
        marker = match.group("bullet")
        kind: ListKindTag = "bullet"
    else:
        number = int(match.group("number"))
        marker = f"{match.group('number')}."
        kind = "numbered"

    content_start = match.end()
    checked: Optional[bool] = None
    checkbox_start: Optional[int] = None
    box = _CHECKBOX.match(text, content_start)
    if box is not None:
        kind = "todo"
        checked = box.group("mark") in {"x", "X"}
        checkbox_start = content_start
        content_start = box.end()

    return ListKind(
        kind=kind,
        indent=indent,
        marker=marker,
        number=number,
        checked=checked,
        checkbox_start=checkbox_start,
        content_start=content_start,
    )


def heading_level(text: str) -> int:
    match = _HEADING.match(text)
    return len(match.group("hashes")) if match else 0


def set_heading_level(text: str, level: int) -> str:
    """Rewrite the ``#`` run of a heading line; level 0 strips the marker."""

    match = _HEADING.match(text)
    if match is None:
        return text
    rest = text[match.end() :]
    if level <= 0:
        return rest
    gap = match.group("gap")
    return f"{'#' * level}{gap}{rest}"


def is_fence(text: str) -> bool:
    return _FENCE.match(text) is not None


def is_rule(text: str) -> bool:
    return _RULE.match(text) is not None


def leading_width(text: str) -> int:
    stripped = text[: len(text) - len(text.lstrip(" \t"))]
    return len(stripped.expandtabs(TAB_WIDTH))


def renumbered(text: str, kind: ListKind, number: int) -> str:
    """Return ``text`` with its numbered marker replaced by ``number``."""

    if kind.number is None:
        return text
    start = len(kind.indent)
    end = start + len(kind.marker)
    return f"{text[:start]}{number}.{text[end:]}"


__all__ = [
    "DEFAULT_BULLET_MARKERS",
    "ListKind",
    "ListKindTag",
    "NONE",
    "classify_line",
    "heading_level",
    "set_heading_level",
    "is_fence",
    "is_rule",
    "leading_width",
    "renumbered",
]
