"""Project invite commands."""

import typer

from stride_cli.services import guards
from stride_cli.utils.ui.formatters import format_success, format_warning

from .decorators import AppError, command_wrapper
from .helpers import current_user, open_store, require_project, settle
from .members import _check_role

app = typer.Typer(help="Project invite commands", no_args_is_help=True)


@app.command("send")
@command_wrapper
async def send_invite(
    project: str = typer.Argument(..., help="Project id or name"),
    email: str = typer.Argument(..., help="Email to invite"),
    role: str = typer.Option("editor", "--role", "-r", help="Role granted on acceptance"),
) -> None:
    """Invite an email address to a project."""
    store = await open_store()
    target = require_project(store, project)
    inviter, _, _ = current_user()

    invite = store.send_invite(target.id, email, _check_role(role), inviter)
    await settle(store)
    format_success(f"Invite sent: {invite.id}")


@app.command("accept")
@command_wrapper
async def accept_invite(
    project: str = typer.Argument(..., help="Project id or name"),
    invite_id: str = typer.Argument(..., help="Invite id"),
    name: str | None = typer.Option(None, "--name", help="Name to join with"),
    initials: str | None = typer.Option(None, "--initials", help="Initials to join with"),
) -> None:
    """Accept a pending invite, joining as the configured user by default."""
    store = await open_store()
    target = require_project(store, project)
    if guards.find_pending_invite(target, invite_id) is None:
        raise AppError(f"No pending invite {invite_id}")

    user_name, user_initials, _ = current_user()
    store.accept_invite(target.id, invite_id, name or user_name, initials or user_initials)
    await settle(store)
    format_success(f"Invite accepted: {invite_id}")


@app.command("decline")
@command_wrapper
async def decline_invite(
    project: str = typer.Argument(..., help="Project id or name"),
    invite_id: str = typer.Argument(..., help="Invite id"),
) -> None:
    """Decline a pending invite."""
    store = await open_store()
    target = require_project(store, project)
    if guards.find_pending_invite(target, invite_id) is None:
        format_warning(f"No pending invite {invite_id}, nothing to decline")
        return

    store.decline_invite(target.id, invite_id)
    await settle(store)
    format_success(f"Invite declined: {invite_id}")
