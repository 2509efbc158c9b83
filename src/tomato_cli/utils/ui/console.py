"""Console utilities for the pomodoro CLI."""

from functools import lru_cache

from rich.console import Console


@lru_cache(maxsize=2)
def get_console(highlight: bool = False) -> Console:
    """Get a shared Rich Console.

    Highlighting is off by default so timer digits keep their session color.
    """
    return Console(highlight=highlight)
