"""Services backing the timer: settings and desktop notifications."""
