"""Wall-clock access for the timer.

The state machine never reads the clock directly; it is handed a
zero-argument callable so tests can pin "now" to any instant.
"""

from collections.abc import Callable
from datetime import datetime

Clock = Callable[[], datetime]


def now() -> datetime:
    """Current local time, timezone-aware."""
    return datetime.now().astimezone()
