"""Runtime services: telemetry, configuration, timers."""

from .config import DEFAULT_CONFIG, EditorConfig
from .timers import PendingTimer, TimerBank

__all__ = ["DEFAULT_CONFIG", "EditorConfig", "PendingTimer", "TimerBank"]
