"""Cancellable deadline timers polled by the host event loop."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

Clock = Callable[[], float]


@dataclass
class PendingTimer:
    deadline: float
    delay_ms: int
    generation: int


class TimerBank:
    """Named one-shot timers keyed by purpose (``"save"``, ``"keys"`` ...).

    Arming a name that is already pending replaces it, which is how repeated
    edits inside the coalescing window push the save deadline back.  Nothing
    fires on its own: hosts call :meth:`due` from their event loop.
    """

    def __init__(self, *, clock: Optional[Clock] = None) -> None:
        self._clock: Clock = clock or time.monotonic
        self._pending: Dict[str, PendingTimer] = {}
        self._counter = 0

    def now(self) -> float:
        return self._clock()

    def arm(self, name: str, delay_ms: int) -> PendingTimer:
        self._counter += 1
        timer = PendingTimer(
            deadline=self._clock() + (delay_ms / 1000.0),
            delay_ms=delay_ms,
            generation=self._counter,
        )
        self._pending[name] = timer
        return timer

    def cancel(self, name: str) -> None:
        self._pending.pop(name, None)

    def is_pending(self, name: str) -> bool:
        return name in self._pending

    def get(self, name: str) -> Optional[PendingTimer]:
        return self._pending.get(name)

    def due(self, now: Optional[float] = None) -> list[str]:
        """Pop and return every timer whose deadline has passed."""

        current = self._clock() if now is None else now
        expired = sorted(
            (
                (timer.generation, name)
                for name, timer in self._pending.items()
                if timer.deadline <= current
            )
        )
        for _, name in expired:
            self._pending.pop(name, None)
        return [name for _, name in expired]

    def fire_now(self, name: str) -> bool:
        """Drop a pending timer as if it expired; ``False`` when none was armed."""

        return self._pending.pop(name, None) is not None


__all__ = ["PendingTimer", "TimerBank", "Clock"]
