"""Textual host adapter; ``app`` needs the ``textual`` package at runtime."""

from .controller import TextualJotAdapter, TextualUIHooks
from .styles import STYLE_MAP, style_for, styled_line

__all__ = [
    "STYLE_MAP",
    "TextualJotAdapter",
    "TextualUIHooks",
    "style_for",
    "styled_line",
]
