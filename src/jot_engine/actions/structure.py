"""List, heading and line-movement actions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from jot_engine.keymaps import ResolutionMatch
    from jot_engine.session import EditingSession
    from jot_engine.session.hooks import SessionResult


def indent(session: EditingSession, match: ResolutionMatch) -> SessionResult:
    del match
    return session.indent()


def outdent(session: EditingSession, match: ResolutionMatch) -> SessionResult:
    del match
    return session.outdent()


def move_up(session: EditingSession, match: ResolutionMatch) -> SessionResult:
    del match
    return session.move_line_up()


def move_down(session: EditingSession, match: ResolutionMatch) -> SessionResult:
    del match
    return session.move_line_down()


def toggle_todo(session: EditingSession, match: ResolutionMatch) -> SessionResult:
    del match
    return session.toggle_checkbox()


__all__ = ["indent", "outdent", "move_up", "move_down", "toggle_todo"]
