"""One-line status message formatters."""

from .console import get_console


def format_error(message: str) -> None:
    """Format and display an error message."""
    get_console().print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    get_console().print(f"[bold green]✓[/bold green] {message}")


def format_warning(message: str) -> None:
    """Format and display a warning message."""
    get_console().print(f"[yellow]{message}[/yellow]")


def format_info(message: str) -> None:
    """Format and display an info message."""
    get_console().print(f"[dim]{message}[/dim]")
