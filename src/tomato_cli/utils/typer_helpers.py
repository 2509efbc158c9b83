"""Typer helper utilities."""

from difflib import get_close_matches

import typer
from typer.core import TyperGroup

from tomato_cli.utils.ui.console import get_console


def close_commands(attempted: str, names) -> list[str]:
    """Up to three command names that look like *attempted*."""
    return get_close_matches(attempted, list(names), n=3, cutoff=0.6)


class SuggestingGroup(TyperGroup):
    """Typer group that answers a typo with the commands it probably meant.

    ``pomodoro pasue`` prints "Did you mean this?  pomodoro pause" and
    exits 1. Anything without a close match fails the usual Click way.
    """

    def resolve_command(self, ctx, args):
        try:
            return super().resolve_command(ctx, args)
        except Exception as e:
            suggestions = close_commands(args[0], self.commands) if args else []
            if not suggestions:
                raise
            self._print_suggestions(ctx.info_name, args[0], suggestions)
            raise typer.Exit(1) from e

    @staticmethod
    def _print_suggestions(prog: str, attempted: str, suggestions: list[str]) -> None:
        console = get_console()
        console.print(f'[red]Error:[/red] no such command "{attempted}"')
        if len(suggestions) == 1:
            console.print("\n[yellow]Did you mean this?[/yellow]")
        else:
            console.print("\n[yellow]Did you mean one of these?[/yellow]")
        for name in suggestions:
            console.print(f"  {prog} {name}")
