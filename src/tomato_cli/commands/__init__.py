"""Command handlers for the pomodoro CLI."""
