"""Main entry point for the Tomato Pomodoro CLI."""

import typer

from tomato_cli import __version__
from tomato_cli.commands import config, interactive, timer
from tomato_cli.utils.logger import log_file
from tomato_cli.utils.typer_helpers import SuggestingGroup
from tomato_cli.utils.ui.console import get_console

app = typer.Typer(
    name="pomodoro",
    cls=SuggestingGroup,
    help="🍅 Tomato Pomodoro - a CLI productivity timer with desktop notifications",
    no_args_is_help=True,
)

console = get_console()


# Timer commands (one-shot, each run restores and saves the session)
app.command("start")(timer.start_timer)
app.command("pause")(timer.pause_timer)
app.command("resume")(timer.resume_timer)
app.command("stop")(timer.stop_timer)
app.command("status")(timer.timer_status)
app.command("skip")(timer.skip_timer)

# Settings
app.command("config")(config.configure)

# Full-screen mode
app.command("interactive")(interactive.interactive)
app.command("i", hidden=True)(interactive.interactive)


@app.command()
def version() -> None:
    """Show version information and where the log is written."""
    console.print(f"[bold]Tomato Pomodoro[/bold] version [cyan]{__version__}[/cyan]")
    console.print(f"[dim]Log file: {log_file()}[/dim]")


# Main entry point
def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
