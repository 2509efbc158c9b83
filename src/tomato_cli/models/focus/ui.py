"""Rendering helpers shared by both front ends.

The arithmetic helpers are pure functions of their arguments. The panel
builders read a timer and at most refresh its live remaining time.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .cycling import cycle_position
from .state import TimerState

if TYPE_CHECKING:
    from tomato_cli.models.config_models import PomodoroSettings

    from .machine import Completion, PomodoroTimer

BAR_LENGTH = 25
FILLED = "█"
EMPTY = "░"


def format_time(seconds: int) -> str:
    """Format seconds as MM:SS."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


def progress_percent(remaining: int, total: int) -> int:
    """Share of the interval already used, 0-100."""
    if total <= 0:
        return 0
    # Half-up, so 12.5% shows as 13%
    percent = math.floor(100 * (total - remaining) / total + 0.5)
    return min(100, max(0, percent))


def progress_bar(remaining: int, total: int, bar_length: int = BAR_LENGTH) -> str:
    """Fixed-width bar of filled and empty glyphs."""
    percent = progress_percent(remaining, total)
    filled = bar_length * percent // 100
    return FILLED * filled + EMPTY * (bar_length - filled)


def cycle_label(timer: PomodoroTimer) -> str:
    session = timer.session
    position = cycle_position(session.session_type, session.completed_cycles)
    return f"Cycle {position}/{timer.settings.cycles_before_long_break}"


def status_word(state: TimerState) -> str:
    if state is TimerState.PAUSED:
        return "PAUSED"
    if state is TimerState.RUNNING:
        return "RUNNING"
    return "STOPPED"


def render_status(timer: PomodoroTimer) -> Panel:
    """Status box for a running or paused session."""
    session = timer.session
    info = session.info
    remaining = timer.refresh()
    total = timer.total_seconds
    status = (
        "[yellow]PAUSED[/yellow]"
        if timer.state is TimerState.PAUSED
        else "[green]RUNNING[/green]"
    )

    body = (
        f"{info.emoji} [bold]{info.name}[/bold]\n\n"
        f"Status: {status}\n"
        f"Time Remaining: [cyan]{format_time(remaining)}[/cyan]\n"
        f"Progress: [{progress_bar(remaining, total)}] "
        f"{progress_percent(remaining, total)}%\n"
        f"Completed Cycles: {session.completed_cycles}/"
        f"{timer.settings.cycles_before_long_break}"
    )
    return Panel(body, border_style=info.color, padding=(1, 2), expand=False)


def render_idle_status(timer: PomodoroTimer) -> Text:
    """Lines shown by ``status`` when nothing is running."""
    session = timer.session
    text = Text(style="dim")
    text.append("No timer is currently running\n")
    text.append(f"Next session: {session.info.emoji} {session.info.name}\n")
    text.append(
        f"Completed cycles: {session.completed_cycles}/"
        f"{timer.settings.cycles_before_long_break}"
    )
    return text


def render_started(timer: PomodoroTimer) -> Panel:
    """Box announcing that an interval has started."""
    info = timer.session.info
    body = (
        f"{info.emoji} [bold]{info.name}[/bold] Started!\n"
        f"[dim]Duration: {format_time(timer.session.remaining_seconds)}[/dim]"
    )
    return Panel(body, border_style=info.color, padding=(1, 2), expand=False)


def render_completion(completion: Completion) -> Text:
    """Terminal mirror of the desktop notification."""
    text = Text()
    text.append(f" {completion.title} ", style="bold white on blue")
    text.append(" ")
    text.append(completion.body, style="cyan")
    return text


def render_config(settings: PomodoroSettings) -> Panel:
    """Box listing the current settings."""
    body = Group(
        Text("Current Configuration", style="bold"),
        Text(""),
        Text.from_markup(f"Work Session: [cyan]{settings.work_minutes}[/cyan] minutes"),
        Text.from_markup(
            f"Short Break: [green]{settings.short_break_minutes}[/green] minutes"
        ),
        Text.from_markup(
            f"Long Break: [blue]{settings.long_break_minutes}[/blue] minutes"
        ),
        Text.from_markup(
            "Cycles before Long Break: "
            f"[yellow]{settings.cycles_before_long_break}[/yellow]"
        ),
    )
    return Panel(body, border_style="cyan", padding=(1, 2), expand=False)
