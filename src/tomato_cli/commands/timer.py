"""One-shot timer commands: start, pause, resume, stop, status, skip.

Every command is its own process. It restores the saved session, applies
at most one transition, saves, prints, and exits. Nothing keeps running in
the background; the next command works out the elapsed time from the saved
timestamps.
"""

from rich.prompt import Confirm

from tomato_cli.models.focus.exceptions import InvalidTransitionError
from tomato_cli.models.focus.machine import Completion, PomodoroTimer
from tomato_cli.models.focus.state import SessionStore, TimerState
from tomato_cli.models.focus.ui import (
    format_time,
    render_completion,
    render_idle_status,
    render_started,
    render_status,
)
from tomato_cli.services.config_service import get_settings_service
from tomato_cli.services.notification_service import DesktopNotifier
from tomato_cli.utils.ui.console import get_console
from tomato_cli.utils.ui.formatters import format_info, format_warning

from .decorators import command_wrapper

console = get_console()


def load_timer() -> PomodoroTimer:
    """Restore the timer from the session store and current settings."""
    return PomodoroTimer.restore(
        SessionStore(),
        get_settings_service().get(),
        notifier=DesktopNotifier(),
    )


def _pending_completion(timer: PomodoroTimer) -> Completion | None:
    """Completion that has to be dealt with before anything else."""
    if timer.expired_completion is not None:
        console.print(
            "[yellow]⚠️  Your previous session expired while you were away[/yellow]"
        )
        return timer.expired_completion
    return timer.check_expiry()


def _print_running_hints() -> None:
    console.print("\n[dim]💡 The timer keeps counting while this terminal is closed[/dim]")
    console.print('[cyan]   Use "pomodoro status" to check progress[/cyan]')
    console.print('[cyan]   Use "pomodoro pause" to pause[/cyan]')
    console.print('[cyan]   Use "pomodoro stop" to cancel[/cyan]\n')


def handle_completion(timer: PomodoroTimer, completion: Completion) -> None:
    """Show the finished interval and ask whether to start the next one."""
    console.print()
    console.print(render_completion(completion))
    console.print()

    next_name = timer.session.info.name
    try:
        accept = Confirm.ask(
            f"Ready to start {next_name}?", default=True, console=console
        )
    except (KeyboardInterrupt, EOFError):
        # The advanced session is already saved; "start" picks it up later
        console.print(
            "\n[cyan]Timer state saved. Session will resume when you return.[/cyan]"
        )
        return

    if accept:
        timer.confirm(True)
        console.print(render_started(timer))
        _print_running_hints()
    else:
        timer.confirm(False)
        format_info('Timer stopped. Use "pomodoro start" to begin again.')


@command_wrapper
def start_timer() -> None:
    """Start a new Pomodoro session, or resume a paused one."""
    timer = load_timer()
    completion = _pending_completion(timer)
    if completion is not None:
        handle_completion(timer, completion)
        return

    if timer.state is TimerState.RUNNING:
        format_warning("Timer is already running!")
        console.print(render_status(timer))
        return

    if timer.state is TimerState.PAUSED:
        timer.resume()
        console.print(
            f"[green]▶️  Resuming timer at {format_time(timer.refresh())}[/green]"
        )
        _print_running_hints()
        return

    timer.start()
    console.print(render_started(timer))
    _print_running_hints()


@command_wrapper
def pause_timer() -> None:
    """Pause the current timer."""
    timer = load_timer()
    completion = _pending_completion(timer)
    if completion is not None:
        handle_completion(timer, completion)
        return

    try:
        timer.pause()
    except InvalidTransitionError as e:
        format_warning(str(e))
        return
    console.print(
        f"[yellow]⏸  Timer paused at {format_time(timer.session.remaining_seconds)}[/yellow]"
    )


@command_wrapper
def resume_timer() -> None:
    """Resume a paused timer."""
    timer = load_timer()
    completion = _pending_completion(timer)
    if completion is not None:
        handle_completion(timer, completion)
        return

    try:
        timer.resume()
    except InvalidTransitionError as e:
        format_warning(str(e))
        return
    console.print(f"[green]▶️  Resuming timer at {format_time(timer.refresh())}[/green]")
    _print_running_hints()


@command_wrapper
def stop_timer() -> None:
    """Stop and reset the current timer."""
    store = SessionStore()
    if store.load() is None:
        format_info("No timer to stop")
        return

    timer = PomodoroTimer(get_settings_service().get(), store=store)
    timer.stop()
    console.print("[red]⏹  Timer stopped and reset[/red]")


@command_wrapper
def timer_status() -> None:
    """Show current timer status."""
    timer = load_timer()
    completion = _pending_completion(timer)
    if completion is not None:
        handle_completion(timer, completion)
        return

    if timer.is_active:
        console.print(render_status(timer))
        return

    if timer.state is TimerState.IDLE:
        format_info("No active timer session")
    console.print(render_idle_status(timer))


@command_wrapper
def skip_timer() -> None:
    """Finish the current interval now and move on to the next one."""
    timer = load_timer()
    completion = _pending_completion(timer)
    if completion is None:
        try:
            completion = timer.skip()
        except InvalidTransitionError as e:
            format_warning(str(e))
            return
    handle_completion(timer, completion)
