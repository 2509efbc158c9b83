"""Textual-based interactive timer.

The screen is a thin view: :class:`InteractiveController` turns typed
commands into calls on a :class:`PomodoroTimer` and answers with log
messages, and :class:`PomodoroApp` draws the timer box, the message log,
and a single-line command input. A one-second interval re-renders the box
and lets the timer notice that its time is up.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass
from datetime import datetime

from rich.text import Text
from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Input, RichLog, Static

from tomato_cli.models.focus.exceptions import InvalidTransitionError
from tomato_cli.models.focus.machine import Completion, Notifier, PomodoroTimer
from tomato_cli.models.focus.state import TimerState
from tomato_cli.models.focus.ui import (
    EMPTY,
    FILLED,
    cycle_label,
    format_time,
    progress_bar,
    progress_percent,
    status_word,
)

LEVEL_STYLES = {
    "info": "cyan",
    "success": "green",
    "warning": "yellow",
    "error": "red",
}

HELP_LINES = [
    "🍅 Tomato Pomodoro Commands:",
    "  /start  - Start/Resume the timer",
    "  /pause  - Pause the timer",
    "  /resume - Resume a paused timer",
    "  /stop   - Stop and reset timer",
    "  /skip   - Skip to next session",
    "  /status - Show current status",
    "  /config - Show configuration",
    "  /exit   - Save & exit (auto-resumes next time)",
    "  /help   - Show this help",
]

# Commands still honoured while a y/n answer is pending
_CONFIRMATION_PASSTHROUGH = {"/stop", "/status", "/config", "/help", "/exit", "/quit"}


@dataclass(frozen=True)
class Message:
    """One line for the message log."""

    text: str
    level: str = "info"


class InteractiveController:
    """Command interpreter for the interactive screen."""

    def __init__(self, timer: PomodoroTimer):
        self.timer = timer
        self.should_exit = False
        self.restored = timer.state is not TimerState.IDLE

    @property
    def awaiting_start(self) -> bool:
        return self.timer.state in (TimerState.IDLE, TimerState.AWAITING_START)

    @property
    def awaiting_confirmation(self) -> bool:
        return self.timer.state is TimerState.AWAITING_CONFIRMATION

    def welcome(self) -> list[Message]:
        timer = self.timer
        if timer.expired_completion is not None:
            return [
                Message("⚠️  Your previous session expired while you were away", "warning"),
                *self._completion_messages(timer.expired_completion),
            ]

        if not self.restored:
            return [
                Message("Welcome to 🍅 Tomato Pomodoro! Type /help for commands."),
                Message("Type /start to begin your first productivity session."),
            ]

        remaining = format_time(timer.refresh())
        messages = [
            Message("Welcome back! Session restored from previous run.", "success"),
            Message(f"Current: {timer.session.info.name} - {remaining} remaining"),
        ]
        if timer.state is TimerState.RUNNING:
            messages.append(Message("Timer is running. Type /pause or /stop."))
        else:
            messages.append(Message("Type /start to continue or /stop to reset."))
        return messages

    def tick(self) -> list[Message]:
        """Called once a second by the screen."""
        completion = self.timer.check_expiry()
        if completion is None:
            return []
        return self._completion_messages(completion)

    def handle(self, raw: str) -> list[Message]:
        """Run one typed command and describe the result."""
        cmd = raw.strip().lower()
        if not cmd:
            return []

        if self.awaiting_confirmation and cmd not in _CONFIRMATION_PASSTHROUGH:
            return self._answer(cmd)

        handler = {
            "/start": self._start,
            "/pause": self._pause,
            "/resume": self._resume,
            "/stop": self._stop,
            "/skip": self._skip,
            "/status": self._status,
            "/config": self._config,
            "/help": self._help,
            "/exit": self._exit,
            "/quit": self._exit,
        }.get(cmd)

        if handler is not None:
            try:
                return handler()
            except InvalidTransitionError as e:
                return [Message(str(e), "error")]

        if cmd.startswith("/"):
            return [
                Message(
                    f"Unknown command: {cmd}. Type /help for available commands.",
                    "error",
                )
            ]
        return []

    def shutdown(self) -> list[Message]:
        """Save a session worth resuming. Safe to call more than once."""
        if self.timer.save_if_active():
            return [Message("Session saved! Will resume next time.", "success")]
        return []

    def display(self) -> str:
        """Rich markup for the timer box."""
        timer = self.timer
        info = timer.session.info
        remaining = timer.refresh()
        total = timer.total_seconds

        title = f"{info.emoji} [bold]{info.name.upper()}[/bold]"
        if self.awaiting_confirmation:
            status = f"[dim]Ready for {info.name}? (y/n)[/dim]"
        elif self.awaiting_start:
            status = "[dim]Type /start to begin[/dim]"
        else:
            status = f"[bold cyan]{format_time(remaining)}[/bold cyan]"
            if timer.state is TimerState.PAUSED:
                status += " [yellow](PAUSED)[/yellow]"

        bar = progress_bar(remaining, total, bar_length=40)
        filled = bar.count(FILLED)
        gauge = (
            f"[green]{FILLED * filled}[/green][dim]{EMPTY * (len(bar) - filled)}[/dim] "
            f"{progress_percent(remaining, total)}%"
        )
        return f"{title}\n{status}\n{gauge}\n[dim]{cycle_label(timer)}[/dim]"

    # ------------------------------------------------------------------

    def _answer(self, cmd: str) -> list[Message]:
        if cmd in ("y", "yes", "/start"):
            self.timer.confirm(True)
            return [Message(f"Starting {self.timer.session.info.name}...", "success")]
        if cmd in ("n", "no"):
            self.timer.confirm(False)
            return [Message("Timer stopped. Type /start to begin again.")]
        return [Message(f"Ready for {self.timer.session.info.name}? (y/n)")]

    def _start(self) -> list[Message]:
        previous = self.timer.state
        self.timer.start()
        if previous is TimerState.PAUSED:
            return [Message("▶️  Timer resumed", "success")]
        if previous is TimerState.AWAITING_START:
            return [Message("🍅 Session resumed! Stay focused! 🚀", "success")]
        return [Message("🍅 Tomato Timer started! Stay focused! 🚀", "success")]

    def _pause(self) -> list[Message]:
        self.timer.pause()
        return [Message("⏸  Timer paused", "warning")]

    def _resume(self) -> list[Message]:
        self.timer.resume()
        return [Message("▶️  Timer resumed", "success")]

    def _stop(self) -> list[Message]:
        self.timer.stop()
        return [Message("⏹  Timer stopped and reset", "warning")]

    def _skip(self) -> list[Message]:
        return self._completion_messages(self.timer.skip())

    def _status(self) -> list[Message]:
        session = self.timer.session
        settings = self.timer.settings
        return [
            Message(
                f"Status: {status_word(self.timer.state)} | {session.info.name} | "
                f"Cycles: {session.completed_cycles}/{settings.cycles_before_long_break}"
            )
        ]

    def _config(self) -> list[Message]:
        s = self.timer.settings
        return [
            Message(
                f"Work: {s.work_minutes}min | Short: {s.short_break_minutes}min | "
                f"Long: {s.long_break_minutes}min | "
                f"Cycles: {s.cycles_before_long_break}"
            )
        ]

    def _help(self) -> list[Message]:
        return [Message(line) for line in HELP_LINES]

    def _exit(self) -> list[Message]:
        self.should_exit = True
        return self.shutdown()

    def _completion_messages(self, completion: Completion) -> list[Message]:
        return [
            Message(f"{completion.title}  {completion.body}", "success"),
            Message("🎉 Session complete!", "success"),
            Message(f"Ready for {self.timer.session.info.name}? (y/n)"),
        ]


class BackgroundNotifier:
    """Hands notifications to a worker thread so the screen keeps ticking."""

    def __init__(self, app: App, notifier: Notifier):
        self.app = app
        self.notifier = notifier

    def notify(self, title: str, body: str, with_sound: bool = True) -> bool:
        self.app.run_worker(
            functools.partial(self.notifier.notify, title, body, with_sound),
            name="notify",
            group="notify",
            thread=True,
            exit_on_error=False,
        )
        return True


class PomodoroApp(App):
    """Full-screen timer with a message log and a command line."""

    TITLE = "🍅 Tomato Pomodoro"

    CSS = """
    Screen {
        background: $background;
        padding: 0 2;
    }

    #timer {
        height: 8;
        content-align: center middle;
        text-align: center;
        border: round red;
    }

    #messages {
        height: 1fr;
        border: round #00bfa5;
        border-title-color: #00bfa5;
    }

    #command-input {
        height: 3;
        border: round #4caf50;
    }
    """

    BINDINGS = [
        Binding("ctrl+c", "save_and_quit", "Save & quit", priority=True),
        Binding("escape", "save_and_quit", "Save & quit", show=False),
    ]

    def __init__(self, controller: InteractiveController):
        super().__init__()
        self.controller = controller

    def compose(self) -> ComposeResult:
        """Compose the app layout."""
        with Vertical():
            yield Static("", id="timer")
            yield RichLog(id="messages", wrap=True)
            yield Input(placeholder="Type /help for commands", id="command-input")

    def on_mount(self) -> None:
        self.query_one("#messages", RichLog).border_title = "Messages"
        self.query_one("#command-input", Input).border_title = "Command"
        timer = self.controller.timer
        if timer.notifier is not None and not isinstance(
            timer.notifier, BackgroundNotifier
        ):
            timer.notifier = BackgroundNotifier(self, timer.notifier)
        self._show(self.controller.welcome())
        self._redraw()
        self.set_interval(1.0, self._tick)
        self.query_one("#command-input", Input).focus()

    def _tick(self) -> None:
        self._show(self.controller.tick())
        self._redraw()

    @on(Input.Submitted)
    def handle_submit(self, event: Input.Submitted) -> None:
        """Run the typed command."""
        event.input.value = ""
        self._show(self.controller.handle(event.value))
        self._redraw()
        if self.controller.should_exit:
            self.exit()

    def action_save_and_quit(self) -> None:
        self._show(self.controller.shutdown())
        self.exit()

    def _show(self, messages: list[Message]) -> None:
        log = self.query_one("#messages", RichLog)
        for message in messages:
            stamp = datetime.now().strftime("%H:%M:%S")
            log.write(
                Text.assemble(
                    (f"{stamp} ", "dim"),
                    (message.text, LEVEL_STYLES.get(message.level, "white")),
                )
            )

    def _redraw(self) -> None:
        timer_box = self.query_one("#timer", Static)
        timer_box.update(Text.from_markup(self.controller.display()))
        timer_box.styles.border = ("round", self.controller.timer.session.info.color)
