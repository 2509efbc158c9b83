"""Interactive command - the full-screen timer."""

import signal

from tomato_cli.ui.interactive import InteractiveController, PomodoroApp
from tomato_cli.utils.logger import get_logger

from .decorators import command_wrapper
from .timer import load_timer


@command_wrapper
def interactive() -> None:
    """Start interactive mode with real-time display."""
    controller = InteractiveController(load_timer())
    app = PomodoroApp(controller)

    def _on_terminate(signum, frame):
        get_logger().info("received signal %s, saving session", signum)
        controller.shutdown()
        raise SystemExit(0)

    previous = signal.signal(signal.SIGTERM, _on_terminate)
    try:
        app.run()
    finally:
        # Covers crashes and interrupts that bypass the app's own quit path
        controller.shutdown()
        signal.signal(signal.SIGTERM, previous)
