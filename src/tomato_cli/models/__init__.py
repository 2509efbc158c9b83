"""Domain models for the Pomodoro timer."""
