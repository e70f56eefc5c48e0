"""Text-entry actions bound to editing keys."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from jot_engine.keymaps import ResolutionMatch
    from jot_engine.session import EditingSession
    from jot_engine.session.hooks import SessionResult


def newline(session: EditingSession, match: ResolutionMatch) -> SessionResult:
    del match
    return session.press_enter()


def backspace(session: EditingSession, match: ResolutionMatch) -> SessionResult:
    del match
    return session.backspace()


def delete_forward(session: EditingSession, match: ResolutionMatch) -> SessionResult:
    del match
    return session.delete_forward()


def cut(session: EditingSession, match: ResolutionMatch) -> SessionResult:
    del match
    return session.cut()


def copy(session: EditingSession, match: ResolutionMatch) -> SessionResult:
    del match
    return session.copy()


def paste(session: EditingSession, match: ResolutionMatch) -> SessionResult:
    del match
    return session.paste()


__all__ = ["newline", "backspace", "delete_forward", "cut", "copy", "paste"]
