"""Main entry point for STRIDE CLI."""

import typer
from rich.console import Console

from stride_cli import __version__
from stride_cli.commands import board, config, invites, members, notes, projects

app = typer.Typer(
    name="stride",
    help="Command-line front end for STRIDE projects, with optimistic local sync",
    no_args_is_help=True,
)

console = Console()


# Add subcommands
app.add_typer(projects.app, name="projects", help="Project management commands")
app.add_typer(notes.app, name="notes", help="Project note commands")
app.add_typer(members.app, name="members", help="Project member commands")
app.add_typer(invites.app, name="invites", help="Project invite commands")
app.add_typer(board.app, name="board", help="Weekly task board commands")
app.add_typer(config.app, name="config", help="Configuration management")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]STRIDE CLI[/bold] version [cyan]{__version__}[/cyan]")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
