"""Project note commands."""

import typer

from stride_cli.utils.ui.formatters import format_success

from .decorators import AppError, command_wrapper
from .helpers import current_user, open_store, require_project, settle

app = typer.Typer(help="Project note commands", no_args_is_help=True)


@app.command("add")
@command_wrapper
async def add_note(
    project: str = typer.Argument(..., help="Project id or name"),
    content: str = typer.Argument(..., help="Note text"),
) -> None:
    """Add a note as the configured user."""
    store = await open_store()
    target = require_project(store, project)
    name, initials, _ = current_user()
    if not store.sanitize(content):
        raise AppError("Note is empty after cleaning")

    note = store.add_note(target.id, content, name, initials)
    await settle(store)
    format_success(f"Note added: {note.id}")


@app.command("delete")
@command_wrapper
async def delete_note(
    project: str = typer.Argument(..., help="Project id or name"),
    note_id: str = typer.Argument(..., help="Note id"),
) -> None:
    """Delete a note."""
    store = await open_store()
    target = require_project(store, project)
    if not any(note.id == note_id for note in target.notes):
        raise AppError(f"Note not found: {note_id}")

    store.delete_note(target.id, note_id)
    await settle(store)
    format_success(f"Note deleted: {note_id}")
