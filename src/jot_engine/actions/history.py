"""Undo and redo actions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from jot_engine.keymaps import ResolutionMatch
    from jot_engine.session import EditingSession
    from jot_engine.session.hooks import SessionResult


def undo(session: EditingSession, match: ResolutionMatch) -> SessionResult:
    del match
    return session.undo()


def redo(session: EditingSession, match: ResolutionMatch) -> SessionResult:
    del match
    return session.redo()


__all__ = ["undo", "redo"]
