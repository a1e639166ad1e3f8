"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from real filesystem state and a few
builders for Project aggregates.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from stride_cli.adapters import LocalProjectRepository, MemoryStorage
from stride_cli.models import Project, ProjectInvite, ProjectMember
from stride_cli.repositories import ProjectRepository
from stride_cli.services.notifications import RecordingErrorReporter

# ---------------------------------------------------------------------------
# Filesystem isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolate_logger(tmp_path):
    """Send the application log to tmp_path and reset the logger singleton."""
    import stride_cli.utils.logger as logger_mod

    logger_mod._logger = None
    logging.getLogger("stride_cli").handlers.clear()

    with patch("stride_cli.utils.logger.user_log_dir", return_value=str(tmp_path / "logs")):
        yield

    for handler in logging.getLogger("stride_cli").handlers:
        handler.close()
    logging.getLogger("stride_cli").handlers.clear()
    logger_mod._logger = None


@pytest.fixture()
def tmp_config(tmp_path):
    """Provide a real ConfigService backed by a temporary directory.

    Patches platform dirs so config/data files land in *tmp_path* only.
    Also clears the lru_cache so each test gets a fresh service instance.
    """
    from stride_cli.services.config_service import ConfigService, get_config_service

    get_config_service.cache_clear()
    with patch(
        "stride_cli.services.config_service.user_config_dir",
        return_value=str(tmp_path / "config"),
    ):
        with patch(
            "stride_cli.services.config_service.user_data_dir",
            return_value=str(tmp_path / "data"),
        ):
            yield ConfigService()
    get_config_service.cache_clear()


# ---------------------------------------------------------------------------
# Sync layer collaborators
# ---------------------------------------------------------------------------


@pytest.fixture()
def reporter():
    return RecordingErrorReporter()


@pytest.fixture()
def storage():
    return MemoryStorage()


@pytest.fixture()
def repository(storage):
    """Local repository over empty in-memory storage, no demo data."""
    return LocalProjectRepository(storage, seed_on_empty=False)


@pytest.fixture()
def mock_repo():
    """A repository whose every call succeeds and returns nothing useful."""
    repo = MagicMock(spec=ProjectRepository)
    for name in (
        "fetch_projects",
        "create_project",
        "update_project",
        "delete_project",
        "add_note",
        "delete_note",
        "add_member",
        "remove_member",
        "update_member_role",
        "send_invite",
        "accept_invite",
        "decline_invite",
        "fetch_tasks",
        "save_tasks",
    ):
        setattr(repo, name, AsyncMock(return_value=None))
    repo.fetch_projects.return_value = []
    return repo


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

CREATED = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)


@pytest.fixture()
def make_member():
    def _make(member_id: str = "m1", role: str = "owner", **fields) -> ProjectMember:
        defaults = {
            "initials": member_id.upper()[:2],
            "name": f"Member {member_id}",
            "email": f"{member_id}@example.com",
        }
        defaults.update(fields)
        return ProjectMember(id=member_id, role=role, **defaults)

    return _make


@pytest.fixture()
def make_invite():
    def _make(invite_id: str = "inv-1", **fields) -> ProjectInvite:
        defaults = {
            "email": "guest@example.com",
            "role": "editor",
            "invited_by": "Owner",
            "status": "pending",
            "created_at": CREATED,
        }
        defaults.update(fields)
        return ProjectInvite(id=invite_id, **defaults)

    return _make


@pytest.fixture()
def make_project(make_member):
    def _make(project_id: str = "p1", name: str | None = None, **fields) -> Project:
        if "members" not in fields:
            fields["members"] = (make_member("m1", "owner"),)
        return Project(
            id=project_id,
            name=name or f"Project {project_id}",
            created_at=CREATED,
            **fields,
        )

    return _make
