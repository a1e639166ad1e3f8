"""Project member commands."""

import typer

from stride_cli.models import ProjectMember
from stride_cli.services import guards
from stride_cli.utils.id_utils import new_id
from stride_cli.utils.ui.formatters import format_success

from .decorators import AppError, command_wrapper
from .helpers import open_store, require_project, settle

app = typer.Typer(help="Project member commands", no_args_is_help=True)

ROLES = ("owner", "admin", "editor", "viewer")


def _check_role(role: str) -> str:
    if role not in ROLES:
        raise AppError(f"Invalid role '{role}'. Choose from: {', '.join(ROLES)}")
    return role


def _initials(name: str) -> str:
    parts = [part for part in name.split() if part]
    return "".join(part[0] for part in parts[:2]).upper() or "?"


@app.command("add")
@command_wrapper
async def add_member(
    project: str = typer.Argument(..., help="Project id or name"),
    name: str = typer.Argument(..., help="Member display name"),
    email: str = typer.Option("", "--email", "-e", help="Member email"),
    role: str = typer.Option("editor", "--role", "-r", help="owner, admin, editor or viewer"),
    initials: str | None = typer.Option(None, "--initials", help="Avatar initials"),
) -> None:
    """Add a member to a project."""
    store = await open_store()
    target = require_project(store, project)

    member = ProjectMember(
        id=new_id("member", {m.id for m in target.members}),
        name=name,
        initials=initials or _initials(name),
        email=email,
        role=_check_role(role),
    )
    store.add_member(target.id, member)
    await settle(store)
    format_success(f"Member added: {member.id}")


@app.command("remove")
@command_wrapper
async def remove_member(
    project: str = typer.Argument(..., help="Project id or name"),
    member_id: str = typer.Argument(..., help="Member id"),
) -> None:
    """Remove a member from a project."""
    store = await open_store()
    target = require_project(store, project)
    if not guards.has_member(target, member_id):
        raise AppError(f"Member not found: {member_id}")
    if guards.is_last_owner(target, member_id):
        raise AppError("Cannot remove the last owner of a project")

    store.remove_member(target.id, member_id)
    await settle(store)
    format_success(f"Member removed: {member_id}")


@app.command("role")
@command_wrapper
async def change_role(
    project: str = typer.Argument(..., help="Project id or name"),
    member_id: str = typer.Argument(..., help="Member id"),
    role: str = typer.Argument(..., help="owner, admin, editor or viewer"),
) -> None:
    """Change a member's role."""
    store = await open_store()
    target = require_project(store, project)
    _check_role(role)
    if not guards.has_member(target, member_id):
        raise AppError(f"Member not found: {member_id}")
    if not guards.can_change_role(target, member_id, role):
        if guards.is_last_owner(target, member_id):
            raise AppError("Cannot demote the last owner of a project")
        raise AppError(f"Member already has role {role}")

    store.update_member_role(target.id, member_id, role)
    await settle(store)
    format_success(f"Role of {member_id} changed to {role}")
