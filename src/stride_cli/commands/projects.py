"""Project management commands."""

import typer
from pydantic import ValidationError

from stride_cli.models import ProjectCreate, ProjectMember, ProjectTag
from stride_cli.utils.id_utils import new_id
from stride_cli.utils.ui.formatters import (
    format_error,
    format_project_detail,
    format_projects,
    format_success,
)

from .decorators import AppError, command_wrapper
from .helpers import OUTPUT_HELP, current_user, open_store, require_project, settle

app = typer.Typer(help="Project management commands", no_args_is_help=True)


@app.command("list")
@command_wrapper
async def list_projects(
    output: str = typer.Option("pretty", "--output", "-o", help=OUTPUT_HELP),
) -> None:
    """List projects."""
    store = await open_store()
    format_projects(store.list(), output)


@app.command("show")
@command_wrapper
async def show_project(
    project: str = typer.Argument(..., help="Project id or name"),
    output: str = typer.Option("pretty", "--output", "-o", help=OUTPUT_HELP),
) -> None:
    """Show project details."""
    store = await open_store()
    format_project_detail(require_project(store, project), output)


@app.command("create")
@command_wrapper
async def create_project(
    name: str = typer.Argument(..., help="Project name"),
    description: str = typer.Option("", "--description", "-d", help="Description"),
    color: str = typer.Option("indigo", "--color", help="Accent color"),
    team: bool = typer.Option(False, "--team", help="Create a team project"),
    estimated_days: int = typer.Option(0, "--days", help="Estimated duration in days"),
    tags: list[str] = typer.Option([], "--tag", "-t", help="Tag label (repeatable)"),
) -> None:
    """Create a new project owned by the configured user."""
    user_name, initials, email = current_user()
    try:
        data = ProjectCreate(
            name=name,
            description=description,
            color=color,
            mode="team" if team else "solo",
            estimated_days=estimated_days,
            members=(
                ProjectMember(
                    id=new_id("member"),
                    name=user_name,
                    initials=initials,
                    email=email,
                    role="owner",
                ),
            ),
            tags=tuple(
                ProjectTag(id=new_id("tag"), label=label, color=color) for label in tags
            ),
        )
    except ValidationError as e:
        raise AppError(f"Invalid project: {e.errors()[0]['msg']}") from e

    store = await open_store()
    project = store.add_project(data)
    await settle(store)

    confirmed = store.get(project.id)
    format_success(f"Project created: {confirmed.id if confirmed else project.id}")


@app.command("update")
@command_wrapper
async def update_project(
    project: str = typer.Argument(..., help="Project id or name"),
    name: str | None = typer.Option(None, "--name", help="Project name"),
    description: str | None = typer.Option(None, "--description", "-d", help="Description"),
    status: str | None = typer.Option(
        None, "--status", help="on-track, delayed or completed"
    ),
    progress: int | None = typer.Option(None, "--progress", help="Completion 0-100"),
    color: str | None = typer.Option(None, "--color", help="Accent color"),
    view_mode: str | None = typer.Option(None, "--view", help="simple or advanced"),
) -> None:
    """Update a project."""
    raw = {
        "name": name,
        "description": description,
        "status": status,
        "progress": progress,
        "color": color,
        "view_mode": view_mode,
    }
    updates = {key: value for key, value in raw.items() if value is not None}
    if not updates:
        format_error("No updates specified")
        raise typer.Exit(1)

    store = await open_store()
    target = require_project(store, project)
    try:
        store.update_project(target.id, updates)
    except ValidationError as e:
        raise AppError(f"Invalid update: {e.errors()[0]['msg']}") from e
    await settle(store)
    format_success(f"Project updated: {target.id}")


@app.command("delete")
@command_wrapper
async def delete_project(
    project: str = typer.Argument(..., help="Project id or name"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a project."""
    store = await open_store()
    target = require_project(store, project)

    if not yes and not typer.confirm(f"Are you sure you want to delete {target.name}?"):
        format_error("Cancelled")
        raise typer.Exit(0)

    store.delete_project(target.id)
    await settle(store)
    format_success(f"Project deleted: {target.id}")
