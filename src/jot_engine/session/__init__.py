"""Editing session controller, undo history and host hooks."""

from .controller import SAVE_TIMER, CursorMotion, EditingSession
from .hooks import SessionHooks, SessionResult, SessionStatus
from .undo import UndoTimeline, merge_typing

__all__ = [
    "CursorMotion",
    "EditingSession",
    "SAVE_TIMER",
    "SessionHooks",
    "SessionResult",
    "SessionStatus",
    "UndoTimeline",
    "merge_typing",
]
