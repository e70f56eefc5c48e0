"""Host callbacks and result records exchanged with the editing session."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal, Optional

from jot_engine.document import AppliedEdit, Position, Selection
from jot_engine.render import StyledRun


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class SessionHooks:
    """Callbacks the session invokes; every one defaults to a no-op."""

    render_line: Callable[[int, tuple[StyledRun, ...]], None] = _noop
    line_count_changed: Callable[[int], None] = _noop
    dirty_changed: Callable[[bool], None] = _noop
    save_requested: Callable[[str], None] = _noop
    notify: Callable[[str], None] = _noop
    cursor_changed: Callable[[Position, Optional[Selection]], None] = _noop
    open_link: Callable[[str], None] = _noop


SessionStatus = Literal["applied", "moved", "noop", "rejected", "ignored"]


@dataclass(frozen=True, slots=True)
class SessionResult:
    """Outcome of one input event."""

    status: SessionStatus
    edit: Optional[AppliedEdit] = None
    message: Optional[str] = None

    @property
    def consumed(self) -> bool:
        return self.status != "ignored"


__all__ = ["SessionHooks", "SessionResult", "SessionStatus"]
