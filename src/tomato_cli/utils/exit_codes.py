"""
Exit codes for the pomodoro CLI.

State-machine refusals (pausing an idle timer and the like) are not
errors and exit with SUCCESS; only failures produce a non-zero code.
Click's own usage errors keep exiting with 2.
"""

# Success
SUCCESS = 0

# General error (unspecified)
ERROR_GENERAL = 1

# Session or settings file could not be written
ERROR_PERSISTENCE = 3
