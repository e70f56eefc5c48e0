"""Cursor motion and selection actions.

Each binding carries its motion in ``ActionRef.metadata`` so a single
handler serves every arrow, Home and End key.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

if TYPE_CHECKING:  # pragma: no cover
    from jot_engine.keymaps import ResolutionMatch
    from jot_engine.session import EditingSession
    from jot_engine.session.hooks import SessionResult
    from jot_engine.session.controller import CursorMotion


def _motion(match: ResolutionMatch) -> CursorMotion:
    return cast("CursorMotion", match.action.metadata["motion"])


def move(session: EditingSession, match: ResolutionMatch) -> SessionResult:
    return session.move_cursor(_motion(match))


def extend(session: EditingSession, match: ResolutionMatch) -> SessionResult:
    return session.move_cursor(_motion(match), extend=True)


def select_all(session: EditingSession, match: ResolutionMatch) -> SessionResult:
    del match
    return session.select_all()


__all__ = ["move", "extend", "select_all"]
