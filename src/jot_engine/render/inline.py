"""Leftmost-longest inline markdown scanner."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional, Pattern

from .runs import RunBuilder, StyleKind

_URL_TRAILING = ".,;:!?'\")]}"


@dataclass(frozen=True, slots=True)
class InlineMatch:
    """Candidate span found at a scan position.

    ``parts`` lists ``(end, style, target, markup)`` segments in order; every
    end is an absolute offset into the line.  ``markup`` parts are delimiters
    rather than content.
    """

    end: int
    parts: tuple[tuple[int, StyleKind, Optional[str], bool], ...]


Matcher = Callable[[str, int], Optional[InlineMatch]]


def _word_char(text: str, index: int) -> bool:
    return 0 <= index < len(text) and (text[index].isalnum() or text[index] == "_")


def _delimited(
    pattern: str, style: StyleKind, open_len: int, *, flanked: bool = False
) -> Matcher:
    compiled: Pattern[str] = re.compile(pattern)

    def match(text: str, pos: int) -> Optional[InlineMatch]:
        if flanked and _word_char(text, pos - 1):
            return None
        found = compiled.match(text, pos)
        if found is None:
            return None
        body_end = found.end("body")
        return InlineMatch(
            end=found.end(),
            parts=(
                (pos + open_len, "syntax", None, True),
                (body_end, style, None, False),
                (found.end(), "syntax", None, True),
            ),
        )

    return match


_LINK = re.compile(r"\[(?P<body>[^\[\]\n]+)\]\((?P<target>[^()\s]+)\)")


def _link(text: str, pos: int) -> Optional[InlineMatch]:
    found = _LINK.match(text, pos)
    if found is None:
        return None
    target = found.group("target")
    body_end = found.end("body")
    target_start, target_end = found.span("target")
    return InlineMatch(
        end=found.end(),
        parts=(
            (pos + 1, "syntax", None, True),
            (body_end, "link", target, False),
            (target_start, "syntax", None, True),
            (target_end, "url", target, True),
            (found.end(), "syntax", None, True),
        ),
    )


_URL = re.compile(r"(?:(?:https?|ftp|file)://|www\.)[^\s<>]+", re.IGNORECASE)


def _raw_url(text: str, pos: int) -> Optional[InlineMatch]:
    if _word_char(text, pos - 1):
        return None
    found = _URL.match(text, pos)
    if found is None:
        return None
    end = found.end()
    while end > pos and text[end - 1] in _URL_TRAILING:
        end -= 1
    url = text[pos:end]
    if url.endswith("://") or url.lower() == "www.":
        return None
    target = url if "://" in url else f"http://{url}"
    return InlineMatch(end=end, parts=((end, "url", target, False),))


# Order breaks ties between equally long candidates.
INLINE_RULES: tuple[tuple[str, Matcher], ...] = (
    ("code", _delimited(r"`(?P<body>[^`]+)`", "code", 1)),
    ("bold", _delimited(r"\*\*(?!\s)(?P<body>.+?)(?<!\s)\*\*", "bold", 2)),
    (
        "bold_underscore",
        _delimited(
            r"__(?!\s)(?P<body>.+?)(?<!\s)__(?!\w)", "bold", 2, flanked=True
        ),
    ),
    ("italic", _delimited(r"\*(?![\s*])(?P<body>[^*]+?)(?<!\s)\*", "italic", 1)),
    (
        "italic_underscore",
        _delimited(
            r"_(?![\s_])(?P<body>[^_]+?)(?<!\s)_(?!\w)", "italic", 1, flanked=True
        ),
    ),
    (
        "strikethrough",
        _delimited(r"~~(?!\s)(?P<body>.+?)(?<!\s)~~", "strikethrough", 2),
    ),
    (
        "underline",
        _delimited(r"\+\+(?!\s)(?P<body>.+?)(?<!\s)\+\+", "underline", 2),
    ),
    ("link", _link),
    ("url", _raw_url),
)

_TRIGGERS = frozenset("`*_~+[hHfFwW")


def longest_match(text: str, pos: int) -> Optional[InlineMatch]:
    if text[pos] not in _TRIGGERS:
        return None
    best: Optional[InlineMatch] = None
    for _, matcher in INLINE_RULES:
        candidate = matcher(text, pos)
        if candidate is None:
            continue
        if best is None or candidate.end > best.end:
            best = candidate
    return best


def scan_inline(
    text: str,
    builder: RunBuilder,
    end: int,
    *,
    plain: StyleKind = "plain",
    level: int = 0,
) -> None:
    """Emit runs for ``text[builder.position:end]`` into ``builder``."""

    limited = text[:end]
    pos = builder.position
    while pos < end:
        found = longest_match(limited, pos)
        if found is None:
            pos += 1
            continue
        builder.add(pos, plain, level=level)
        extent = (pos, found.end)
        for part_end, style, target, markup in found.parts:
            builder.add(
                part_end,
                style,
                level=level,
                target=target,
                extent=extent if markup else None,
            )
        pos = found.end
    builder.add(end, plain, level=level)


__all__ = ["INLINE_RULES", "InlineMatch", "longest_match", "scan_inline"]
