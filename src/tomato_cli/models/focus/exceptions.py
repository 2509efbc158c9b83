"""Custom exceptions for the Pomodoro timer."""


class PomodoroError(Exception):
    """Base exception for all timer errors."""


class InvalidTransitionError(PomodoroError):
    """Raised when a command is not legal in the timer's current state.

    The message is meant for the user as-is. The timer is left untouched.
    """


class PersistenceError(PomodoroError):
    """Raised when the session record cannot be written or removed."""
