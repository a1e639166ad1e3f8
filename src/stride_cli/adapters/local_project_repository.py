"""Local storage implementation of ProjectRepository.

All projects live as one JSON array under ``wf_projects``; each project's
task board lives under ``stride_tasks_<project_id>``. Calls add no latency
beyond one event-loop turn.

Reads are validated twice, structurally (array of objects with a string id,
string name and list of members) and then by the pydantic models. Anything
that fails falls back to the seed dataset instead of raising. Failed writes
(quota, I/O) are logged and dropped, so a persistence fault never turns into
a rejected call.
"""

from __future__ import annotations

import asyncio
import json
from datetime import UTC, datetime
from typing import Any

from pydantic import TypeAdapter, ValidationError

from stride_cli.adapters.seed import seed_projects
from stride_cli.adapters.storage import KeyValueStorage
from stride_cli.models import (
    DayColumn,
    NotFoundError,
    Project,
    ProjectCreate,
    ProjectInvite,
    ProjectMember,
    ProjectNote,
    ProjectRole,
    ProjectUpdate,
    StorageError,
)
from stride_cli.repositories import ProjectRepository
from stride_cli.services import reducers
from stride_cli.services.reducers import State
from stride_cli.utils.id_utils import new_id
from stride_cli.utils.logger import get_component_logger

PROJECTS_KEY = "wf_projects"
TASKS_KEY_PREFIX = "stride_tasks_"

_PROJECT_LIST = TypeAdapter(list[Project])
_BOARD = TypeAdapter(list[DayColumn])


def _now() -> datetime:
    return datetime.now(UTC)


def _looks_like_projects(payload: Any) -> bool:
    if not isinstance(payload, list):
        return False
    return all(
        isinstance(item, dict)
        and isinstance(item.get("id"), str)
        and isinstance(item.get("name"), str)
        and isinstance(item.get("members"), list)
        for item in payload
    )


class LocalProjectRepository(ProjectRepository):
    """Project repository backed by a key/value storage."""

    def __init__(self, storage: KeyValueStorage, *, seed_on_empty: bool = True):
        """Initialize the local repository.

        Args:
            storage: Key/value backend holding the serialized data
            seed_on_empty: Fall back to the demo dataset rather than an empty list
        """
        self.storage = storage
        self.seed_on_empty = seed_on_empty
        self._seed: tuple[Project, ...] | None = None
        self._log = get_component_logger("adapters.local")

    # -- storage helpers ------------------------------------------------------

    def _fallback(self) -> State:
        if not self.seed_on_empty:
            return ()
        if self._seed is None:
            self._seed = tuple(seed_projects())
        return self._seed

    def _read_all(self) -> State:
        try:
            raw = self.storage.get_item(PROJECTS_KEY)
        except StorageError as e:
            self._log.warning("Unreadable project storage, using fallback: %s", e)
            return self._fallback()
        if raw is None:
            return self._fallback()

        try:
            payload = json.loads(raw)
        except (TypeError, ValueError) as e:
            self._log.warning("Malformed project payload, using fallback: %s", e)
            return self._fallback()

        if not _looks_like_projects(payload):
            self._log.warning("Project payload failed structural validation, using fallback")
            return self._fallback()

        try:
            return tuple(_PROJECT_LIST.validate_python(payload))
        except ValidationError as e:
            self._log.warning(
                "Project payload failed schema validation (%d errors), using fallback",
                e.error_count(),
            )
            return self._fallback()

    def _write_all(self, state: State) -> None:
        payload = json.dumps([project.model_dump(mode="json") for project in state])
        try:
            self.storage.set_item(PROJECTS_KEY, payload)
        except StorageError as e:
            self._log.warning("Dropped project write: %s", e)

    def _load_project_state(self, project_id: str) -> tuple[State, Project]:
        state = self._read_all()
        position = reducers.index_of(state, project_id)
        if position is None:
            raise NotFoundError(f"Project {project_id} not found")
        return state, state[position]

    def _commit(self, previous: State, state: State) -> None:
        if state is not previous:
            self._write_all(state)

    async def _tick(self) -> None:
        # Zero-latency stand-in for a network round trip
        await asyncio.sleep(0)

    # -- projects -------------------------------------------------------------

    async def fetch_projects(self) -> list[Project]:
        await self._tick()
        return list(self._read_all())

    async def create_project(
        self, project_data: ProjectCreate, *, project_id: str | None = None
    ) -> Project:
        await self._tick()
        state = self._read_all()
        taken = {project.id for project in state}
        if project_id is None or project_id in taken:
            project_id = new_id("project", taken)

        fields = {name: getattr(project_data, name) for name in ProjectCreate.model_fields}
        project = Project(id=project_id, created_at=_now(), **fields)
        self._write_all(reducers.insert_project(state, project))
        return project

    async def update_project(self, project_id: str, updates: ProjectUpdate) -> Project:
        await self._tick()
        state, _ = self._load_project_state(project_id)
        next_state = reducers.update_project(state, project_id, updates.changes())
        self._commit(state, next_state)
        return next_state[reducers.index_of(next_state, project_id)]

    async def delete_project(self, project_id: str) -> None:
        await self._tick()
        state, _ = self._load_project_state(project_id)
        self._write_all(reducers.remove_project(state, project_id))

    # -- notes ----------------------------------------------------------------

    async def add_note(
        self,
        project_id: str,
        content: str,
        author_name: str,
        author_initials: str,
        *,
        note_id: str | None = None,
    ) -> ProjectNote:
        await self._tick()
        state, project = self._load_project_state(project_id)
        taken = {note.id for note in project.notes}
        if note_id is None or note_id in taken:
            note_id = new_id("note", taken)

        note = ProjectNote(
            id=note_id,
            content=content,
            author_name=author_name,
            author_initials=author_initials,
            created_at=_now(),
        )
        self._write_all(reducers.prepend_note(state, project_id, note))
        return note

    async def delete_note(self, project_id: str, note_id: str) -> None:
        await self._tick()
        state, _ = self._load_project_state(project_id)
        self._commit(state, reducers.remove_note(state, project_id, note_id))

    # -- members --------------------------------------------------------------

    async def add_member(self, project_id: str, member: ProjectMember) -> None:
        await self._tick()
        state, _ = self._load_project_state(project_id)
        self._commit(state, reducers.append_member(state, project_id, member))

    async def remove_member(self, project_id: str, member_id: str) -> None:
        await self._tick()
        state, _ = self._load_project_state(project_id)
        self._commit(state, reducers.remove_member(state, project_id, member_id))

    async def update_member_role(
        self, project_id: str, member_id: str, role: ProjectRole
    ) -> None:
        await self._tick()
        state, _ = self._load_project_state(project_id)
        self._commit(state, reducers.change_member_role(state, project_id, member_id, role))

    # -- invites --------------------------------------------------------------

    async def send_invite(
        self,
        project_id: str,
        email: str,
        role: ProjectRole,
        invited_by: str,
        *,
        invite_id: str | None = None,
    ) -> ProjectInvite:
        await self._tick()
        state, project = self._load_project_state(project_id)
        taken = {invite.id for invite in project.invites}
        if invite_id is None or invite_id in taken:
            invite_id = new_id("invite", taken)

        invite = ProjectInvite(
            id=invite_id,
            email=email,
            role=role,
            invited_by=invited_by,
            status="pending",
            created_at=_now(),
        )
        self._write_all(reducers.append_invite(state, project_id, invite))
        return invite

    async def accept_invite(
        self,
        project_id: str,
        invite_id: str,
        name: str,
        initials: str,
        *,
        member_id: str | None = None,
    ) -> None:
        await self._tick()
        state, project = self._load_project_state(project_id)
        taken = {member.id for member in project.members}
        if member_id is None or member_id in taken:
            member_id = new_id("member", taken)

        # email and role are filled in from the invite by the reducer
        member = ProjectMember(id=member_id, initials=initials, name=name, role="viewer")
        self._commit(state, reducers.accept_invite(state, project_id, invite_id, member))

    async def decline_invite(self, project_id: str, invite_id: str) -> None:
        await self._tick()
        state, _ = self._load_project_state(project_id)
        self._commit(state, reducers.decline_invite(state, project_id, invite_id))

    # -- task boards ----------------------------------------------------------

    async def fetch_tasks(self, project_id: str) -> list[DayColumn] | None:
        await self._tick()
        try:
            raw = self.storage.get_item(TASKS_KEY_PREFIX + project_id)
        except StorageError as e:
            self._log.warning("Unreadable board for %s: %s", project_id, e)
            return None
        if not isinstance(raw, str):
            return None
        try:
            return _BOARD.validate_json(raw)
        except ValidationError:
            self._log.warning("Invalid board payload for %s, ignoring", project_id)
            return None

    async def save_tasks(self, project_id: str, columns: list[DayColumn]) -> None:
        await self._tick()
        try:
            self.storage.set_item(
                TASKS_KEY_PREFIX + project_id, _BOARD.dump_json(columns).decode("utf-8")
            )
        except StorageError as e:
            self._log.warning("Dropped board write for %s: %s", project_id, e)
