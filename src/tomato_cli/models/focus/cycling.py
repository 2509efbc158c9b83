"""Pomodoro cycle rule: which interval follows which."""

from .state import SessionType


def next_session(
    finished: SessionType, completed_cycles: int, cycles_before_long_break: int
) -> tuple[SessionType, int]:
    """Return the next session type and the updated cycle count.

    Every finished Work interval counts towards the long break. Reaching
    the threshold moves to a Long Break and resets the count; any break
    is followed by Work with the count untouched.
    """
    if finished is SessionType.WORK:
        completed_cycles += 1
        if completed_cycles >= cycles_before_long_break:
            return SessionType.LONG_BREAK, 0
        return SessionType.SHORT_BREAK, completed_cycles

    return SessionType.WORK, completed_cycles


def cycle_position(session_type: SessionType, completed_cycles: int) -> int:
    """Number of the Work interval in progress, for "Cycle n/N" labels."""
    return completed_cycles + (1 if session_type is SessionType.WORK else 0)
