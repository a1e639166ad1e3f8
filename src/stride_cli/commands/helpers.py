"""Shared plumbing for store-backed commands."""

from stride_cli.models import Project
from stride_cli.services.config_service import get_config_service
from stride_cli.services.notifications import ConsoleErrorReporter
from stride_cli.services.project_store import ProjectStore, get_project_store
from stride_cli.utils.id_utils import resolve_project_id

from .decorators import AppError

OUTPUT_HELP = "Output format (pretty, table, json, yaml)"


async def open_store() -> ProjectStore:
    """Build the configured store and hydrate it."""
    store = get_project_store(ConsoleErrorReporter())
    await store.load()
    return store


def require_project(store: ProjectStore, value: str) -> Project:
    """Look a project up by id, id body or name, or fail the command."""
    try:
        project_id = resolve_project_id(value, store.list())
    except ValueError as e:
        raise AppError(str(e)) from e
    return store.get(project_id)


def current_user() -> tuple[str, str, str]:
    """Configured (name, initials, email) of the person running the CLI."""
    user = get_config_service().config.user
    return user.name, user.initials, user.email


async def settle(store: ProjectStore) -> None:
    """Wait for every confirmation.

    Raises:
        AppError: If a change was reverted (the reporter already printed why)
    """
    before = store.reporter.count
    await store.wait_for_pending()
    if store.reporter.count > before:
        raise AppError("Change was not saved", exit_code=2)
