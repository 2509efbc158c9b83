"""Tomato Pomodoro - a command-line Pomodoro timer."""

__version__ = "1.0.0"
