"""Focus mode - the Pomodoro session model.

Session record and store, cycle rule, load-time recovery, the state
machine, and the rendering helpers both front ends share.
"""

from .exceptions import InvalidTransitionError, PersistenceError, PomodoroError
from .machine import Completion, Notifier, PomodoroTimer
from .recovery import Recovery, recover
from .state import (
    SESSION_INFO,
    STALE_AFTER,
    Session,
    SessionStore,
    SessionType,
    TimerState,
)
from .ui import format_time, progress_bar, progress_percent

__all__ = [
    "Completion",
    "InvalidTransitionError",
    "Notifier",
    "PersistenceError",
    "PomodoroError",
    "PomodoroTimer",
    "Recovery",
    "SESSION_INFO",
    "STALE_AFTER",
    "Session",
    "SessionStore",
    "SessionType",
    "TimerState",
    "format_time",
    "progress_bar",
    "progress_percent",
    "recover",
]
