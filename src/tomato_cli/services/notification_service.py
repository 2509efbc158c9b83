"""Desktop notifications.

Delivery is best effort: a missing notifier binary or a failing backend
is logged and reported through the return value, never raised, so a
session transition can't be blocked by the desktop.
"""

from __future__ import annotations

import subprocess
import sys

from tomato_cli.utils.logger import get_logger

_TIMEOUT_SECONDS = 5


def _escape_applescript(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


class DesktopNotifier:
    """Shows alerts through the platform's own notification service.

    - macOS: ``osascript`` with ``display notification``
    - Linux: ``notify-send``
    - Windows: ``plyer``
    """

    def __init__(self, platform: str | None = None):
        self.platform = platform or sys.platform
        self.logger = get_logger()

    def notify(self, title: str, body: str, with_sound: bool = True) -> bool:
        """Deliver a notification. Returns False if it could not be shown."""
        try:
            if self.platform == "darwin":
                self._notify_macos(title, body, with_sound)
            elif self.platform.startswith("linux"):
                self._notify_linux(title, body)
            elif self.platform == "win32":
                self._notify_windows(title, body)
            else:
                self.logger.info("no notification backend for %s", self.platform)
                return False
        except Exception as e:
            # Missing binaries, timeouts and plyer backend errors alike
            self.logger.warning("failed to send notification %r: %s", title, e)
            return False

        self.logger.debug("notification sent: %s", title)
        return True

    def _notify_macos(self, title: str, body: str, with_sound: bool) -> None:
        script = (
            f'display notification "{_escape_applescript(body)}" '
            f'with title "{_escape_applescript(title)}"'
        )
        if with_sound:
            script += ' sound name "Glass"'
        # Argument list, so apostrophes in the text need no shell quoting
        subprocess.run(
            ["osascript", "-e", script],
            check=True,
            capture_output=True,
            timeout=_TIMEOUT_SECONDS,
        )

    def _notify_linux(self, title: str, body: str) -> None:
        subprocess.run(
            ["notify-send", "-u", "normal", "-a", "Tomato Pomodoro", title, body],
            check=True,
            capture_output=True,
            timeout=_TIMEOUT_SECONDS,
        )

    def _notify_windows(self, title: str, body: str) -> None:
        from plyer import notification

        notification.notify(title=title, message=body, app_name="Tomato Pomodoro")
