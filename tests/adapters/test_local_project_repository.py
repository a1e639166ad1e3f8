"""Tests for LocalProjectRepository."""

from __future__ import annotations

import json
from datetime import datetime

import pytest

from stride_cli.adapters import LocalProjectRepository, MemoryStorage
from stride_cli.adapters.local_project_repository import PROJECTS_KEY, TASKS_KEY_PREFIX
from stride_cli.models import DayColumn, NotFoundError, ProjectCreate, ProjectUpdate, Task


def _write(storage, projects):
    storage.set_item(PROJECTS_KEY, json.dumps([p.model_dump(mode="json") for p in projects]))


@pytest.fixture()
def owner(make_member):
    return make_member("m1", "owner")


# ---------------------------------------------------------------------------
# Reads and fallback
# ---------------------------------------------------------------------------


class TestFetchProjects:
    @pytest.mark.asyncio
    async def test_empty_storage_yields_seed(self, storage):
        repo = LocalProjectRepository(storage)
        projects = await repo.fetch_projects()
        assert [p.id for p in projects] == ["proj-1", "proj-2", "proj-3", "proj-4", "proj-5"]

    @pytest.mark.asyncio
    async def test_empty_storage_without_seed(self, repository):
        assert await repository.fetch_projects() == []

    @pytest.mark.asyncio
    async def test_returns_stored_projects(self, storage, repository, make_project):
        _write(storage, [make_project("p1"), make_project("p2")])
        projects = await repository.fetch_projects()
        assert [p.id for p in projects] == ["p1", "p2"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            "{not json",
            '{"id": "p1"}',
            '[{"id": 1, "name": "x", "members": []}]',
            '[{"id": "p1", "name": "x"}]',
            '["p1"]',
        ],
    )
    async def test_structurally_invalid_payload_falls_back(self, storage, payload):
        storage.set_item(PROJECTS_KEY, payload)
        projects = await LocalProjectRepository(storage).fetch_projects()
        assert projects[0].id == "proj-1"

    @pytest.mark.asyncio
    async def test_schema_invalid_payload_falls_back(self, storage):
        storage.set_item(
            PROJECTS_KEY,
            '[{"id": "p1", "name": "x", "members": [], "progress": 500}]',
        )
        projects = await LocalProjectRepository(storage).fetch_projects()
        assert projects[0].id == "proj-1"

    @pytest.mark.asyncio
    async def test_fallback_does_not_overwrite_storage(self, storage):
        storage.set_item(PROJECTS_KEY, "{not json")
        await LocalProjectRepository(storage).fetch_projects()
        assert storage.get_item(PROJECTS_KEY) == "{not json"


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


class TestProjectWrites:
    @pytest.mark.asyncio
    async def test_create_honors_proposed_id(self, repository, owner):
        created = await repository.create_project(
            ProjectCreate(name="Launch", members=(owner,)), project_id="proj-aaaaaaaa"
        )
        assert created.id == "proj-aaaaaaaa"
        assert [p.id for p in await repository.fetch_projects()] == ["proj-aaaaaaaa"]

    @pytest.mark.asyncio
    async def test_create_replaces_taken_id(self, storage, repository, make_project, owner):
        _write(storage, [make_project("proj-aaaaaaaa")])
        created = await repository.create_project(
            ProjectCreate(name="Launch", members=(owner,)), project_id="proj-aaaaaaaa"
        )
        assert created.id != "proj-aaaaaaaa"
        assert len(await repository.fetch_projects()) == 2

    @pytest.mark.asyncio
    async def test_round_trip(self, storage, owner):
        """Whatever is written is read back equal by a fresh adapter."""
        repo = LocalProjectRepository(storage, seed_on_empty=False)
        created = await repo.create_project(ProjectCreate(name="Launch", members=(owner,)))
        await repo.update_project(created.id, ProjectUpdate(progress=40, view_mode="simple"))
        await repo.add_note(created.id, "hello", "Owner", "OW")

        reread = await LocalProjectRepository(storage, seed_on_empty=False).fetch_projects()
        assert reread == await repo.fetch_projects()
        assert reread[0].progress == 40
        assert reread[0].notes[0].content == "hello"

    @pytest.mark.asyncio
    async def test_update_returns_updated_project(self, storage, repository, make_project):
        _write(storage, [make_project("p1")])
        updated = await repository.update_project("p1", ProjectUpdate(name="Renamed"))
        assert updated.name == "Renamed"

    @pytest.mark.asyncio
    async def test_delete(self, storage, repository, make_project):
        _write(storage, [make_project("p1"), make_project("p2")])
        await repository.delete_project("p1")
        assert [p.id for p in await repository.fetch_projects()] == ["p2"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("method", "args"),
        [
            ("update_project", (ProjectUpdate(name="x"),)),
            ("delete_project", ()),
            ("add_note", ("c", "n", "i")),
            ("delete_note", ("n1",)),
            ("remove_member", ("m1",)),
            ("update_member_role", ("m1", "viewer")),
            ("send_invite", ("a@b.c", "editor", "me")),
            ("accept_invite", ("inv-1", "n", "i")),
            ("decline_invite", ("inv-1",)),
        ],
    )
    async def test_unknown_project_raises_not_found(self, repository, method, args):
        with pytest.raises(NotFoundError):
            await getattr(repository, method)("missing", *args)

    @pytest.mark.asyncio
    async def test_quota_fault_is_swallowed(self, owner):
        storage = MemoryStorage(quota_bytes=50)
        repo = LocalProjectRepository(storage, seed_on_empty=False)

        created = await repo.create_project(ProjectCreate(name="Launch", members=(owner,)))

        assert created.name == "Launch"
        assert storage.get_item(PROJECTS_KEY) is None


class TestNestedWrites:
    @pytest.mark.asyncio
    async def test_note_prepended(self, storage, repository, make_project):
        _write(storage, [make_project("p1")])
        first = await repository.add_note("p1", "first", "A", "A")
        second = await repository.add_note("p1", "second", "A", "A", note_id="note-00000002")

        project = (await repository.fetch_projects())[0]
        assert second.id == "note-00000002"
        assert [n.id for n in project.notes] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_unknown_nested_entities_are_no_ops(self, storage, repository, make_project):
        _write(storage, [make_project("p1")])
        before = await repository.fetch_projects()

        await repository.delete_note("p1", "ghost")
        await repository.remove_member("p1", "ghost")
        await repository.decline_invite("p1", "ghost")

        assert await repository.fetch_projects() == before

    @pytest.mark.asyncio
    async def test_last_owner_kept(self, storage, repository, make_project):
        _write(storage, [make_project("p1")])
        await repository.remove_member("p1", "m1")
        await repository.update_member_role("p1", "m1", "viewer")

        project = (await repository.fetch_projects())[0]
        assert [(m.id, m.role) for m in project.members] == [("m1", "owner")]

    @pytest.mark.asyncio
    async def test_invite_accept_flow(self, storage, repository, make_project):
        _write(storage, [make_project("p1")])
        invite = await repository.send_invite("p1", "new@example.com", "admin", "Owner")
        await repository.accept_invite("p1", invite.id, "New Person", "NP", member_id="m-00000001")
        await repository.accept_invite("p1", invite.id, "Again", "AG")

        project = (await repository.fetch_projects())[0]
        assert project.invites[0].status == "accepted"
        joined = [m for m in project.members if m.id == "m-00000001"]
        assert len(project.members) == 2
        assert joined[0].email == "new@example.com"
        assert joined[0].role == "admin"


class TestTaskBoards:
    @pytest.mark.asyncio
    async def test_missing_board(self, repository):
        assert await repository.fetch_tasks("p1") is None

    @pytest.mark.asyncio
    async def test_board_round_trip(self, repository):
        columns = [
            DayColumn(date=datetime(2024, 1, 1), tasks=[Task(id="task-1", title="Write")]),
            DayColumn(date=datetime(2024, 1, 2)),
        ]
        await repository.save_tasks("p1", columns)
        assert await repository.fetch_tasks("p1") == columns

    @pytest.mark.asyncio
    async def test_invalid_board_ignored(self, storage, repository):
        storage.set_item(TASKS_KEY_PREFIX + "p1", '{"not": "a list"}')
        assert await repository.fetch_tasks("p1") is None

    @pytest.mark.asyncio
    async def test_board_quota_fault_swallowed(self):
        repo = LocalProjectRepository(MemoryStorage(quota_bytes=10), seed_on_empty=False)
        await repo.save_tasks("p1", [DayColumn(date=datetime(2024, 1, 1))])
        assert await repo.fetch_tasks("p1") is None
