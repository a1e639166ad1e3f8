"""Weekly task board commands."""

import typer

from stride_cli.services.board_service import BoardService
from stride_cli.utils.ui.formatters import format_board, format_success

from .decorators import AppError, command_wrapper
from .helpers import OUTPUT_HELP, open_store, require_project

app = typer.Typer(help="Weekly task board commands", no_args_is_help=True)

PRIORITIES = ("low", "medium", "high", "critical")


@app.command("show")
@command_wrapper
async def show_board(
    project: str = typer.Argument(..., help="Project id or name"),
    output: str = typer.Option("pretty", "--output", "-o", help=OUTPUT_HELP),
) -> None:
    """Show a project's board for the stored (or current) week."""
    store = await open_store()
    target = require_project(store, project)
    columns = await BoardService(store.repository).load_board(target.id)
    format_board(columns, output)


@app.command("add")
@command_wrapper
async def add_task(
    project: str = typer.Argument(..., help="Project id or name"),
    title: str = typer.Argument(..., help="Task title"),
    day: int = typer.Option(0, "--day", help="Day column, 0 for Monday"),
    description: str = typer.Option("", "--description", "-d", help="Task details"),
    priority: str | None = typer.Option(None, "--priority", "-p", help="low, medium, high or critical"),
) -> None:
    """Add a task to a project's board."""
    if priority is not None and priority not in PRIORITIES:
        raise AppError(f"Invalid priority '{priority}'")

    store = await open_store()
    target = require_project(store, project)
    try:
        task = await BoardService(store.repository).add_task(
            target.id, day, title, description=description, priority=priority
        )
    except ValueError as e:
        raise AppError(str(e)) from e
    format_success(f"Task added: {task.id}")
