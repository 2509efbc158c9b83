"""Settings command."""

import typer

from tomato_cli.models.focus.ui import render_config
from tomato_cli.services.config_service import get_settings_service
from tomato_cli.utils.exit_codes import ERROR_PERSISTENCE
from tomato_cli.utils.ui.console import get_console
from tomato_cli.utils.ui.formatters import format_success, format_warning

from .decorators import AppError, command_wrapper

console = get_console()


@command_wrapper
def configure(
    ctx: typer.Context,
    work: int | None = typer.Option(
        None, "--work", "-w", help="Set work session duration (default: 25)"
    ),
    short_break: int | None = typer.Option(
        None, "--short", "-s", help="Set short break duration (default: 5)"
    ),
    long_break: int | None = typer.Option(
        None, "--long", "-l", help="Set long break duration (default: 15)"
    ),
    cycles: int | None = typer.Option(
        None, "--cycles", "-c", help="Set work cycles before long break (default: 4)"
    ),
    show: bool = typer.Option(False, "--show", help="Show current configuration"),
    reset: bool = typer.Option(False, "--reset", help="Reset to default configuration"),
) -> None:
    """Configure Tomato Pomodoro settings."""
    service = get_settings_service()

    if reset:
        try:
            service.reset()
        except RuntimeError as e:
            raise AppError(str(e), ERROR_PERSISTENCE) from e
        format_success("Configuration reset to defaults")
        return

    if show:
        console.print(render_config(service.get()))
        return

    requested = [work, short_break, long_break, cycles]
    if all(value is None for value in requested):
        console.print(ctx.get_help())
        return

    try:
        applied = service.set(
            work=work, short_break=short_break, long_break=long_break, cycles=cycles
        )
    except RuntimeError as e:
        raise AppError(str(e), ERROR_PERSISTENCE) from e

    if applied:
        format_success(f"Configuration updated: {', '.join(applied)}")
    else:
        format_warning("Values must be positive numbers; nothing changed")
