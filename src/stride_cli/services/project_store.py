"""Project store - the optimistic sync layer's public surface.

Callers read from the store synchronously and change it through the
operations below. Each operation sanitizes its free text, builds the new
entities (with temporary ids where something is created), and hands a pure
reducer plus the matching persistence call to the mutation engine. The
change is visible as soon as the operation returns; confirmation happens in
the background.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from stride_cli.models import (
    Project,
    ProjectCreate,
    ProjectInvite,
    ProjectMember,
    ProjectNote,
    ProjectRole,
    ProjectTag,
    ProjectUpdate,
)
from stride_cli.repositories import ProjectRepository
from stride_cli.services import reducers
from stride_cli.services.entity_store import EntityStore, Subscriber
from stride_cli.services.mutation_engine import MutationEngine, RollbackPolicy
from stride_cli.services.notifications import ConsoleErrorReporter, ErrorReporter
from stride_cli.services.reducers import State
from stride_cli.utils.id_utils import new_id
from stride_cli.utils.logger import get_component_logger
from stride_cli.utils.sanitize import Sanitizer, sanitize_input


def _now() -> datetime:
    return datetime.now(UTC)


class ProjectStore:
    """Optimistic, observable store of Project aggregates."""

    def __init__(
        self,
        repository: ProjectRepository,
        *,
        reporter: ErrorReporter | None = None,
        sanitizer: Sanitizer = sanitize_input,
        rollback: RollbackPolicy = "store",
        projects: tuple[Project, ...] = (),
    ):
        """Initialize the store.

        Args:
            repository: Persistence adapter every change is confirmed against
            reporter: Receives a notice for each reverted change
            sanitizer: Applied to every free-text field before it enters state
            rollback: "store" restores the whole snapshot, "aggregate" only
                the aggregate the failed change touched
            projects: Initial state, before ``load()``
        """
        self.repository = repository
        self.reporter = reporter or ConsoleErrorReporter()
        self.sanitize = sanitizer
        self.entities = EntityStore(projects)
        self.engine = MutationEngine(self.entities, self.reporter, rollback=rollback)
        self._log = get_component_logger("project_store")

    # -- reads ----------------------------------------------------------------

    def list(self) -> State:
        return self.entities.list()

    def get(self, project_id: str) -> Project | None:
        return self.entities.get(project_id)

    def role_of(self, project_id: str, email: str) -> ProjectRole | None:
        return self.entities.role_of(project_id, email)

    def is_provisional(self, project_id: str) -> bool:
        return self.entities.is_provisional(project_id)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        return self.entities.subscribe(callback)

    @property
    def pending_count(self) -> int:
        return self.engine.pending_count

    async def wait_for_pending(self) -> None:
        await self.engine.wait_for_pending()

    def _resolve(self, project_id: str) -> str:
        return self.entities.resolve(project_id)

    async def load(self) -> State:
        """Hydrate the store from persistence.

        A failing fetch is reported and leaves the current state in place.
        """
        try:
            projects = await self.repository.fetch_projects()
        except Exception as e:
            self._log.warning("Loading projects failed: %s", e)
            self.reporter.report("Loading projects failed", e)
            return self.entities.state
        self.entities.publish(tuple(projects))
        self._log.debug("Loaded %d projects", len(projects))
        return self.entities.state

    # -- sanitization ---------------------------------------------------------

    def _clean_member(self, member: ProjectMember) -> ProjectMember:
        return member.model_copy(
            update={
                "name": self.sanitize(member.name),
                "initials": self.sanitize(member.initials),
                "email": self.sanitize(member.email),
            }
        )

    def _clean_tag(self, tag: ProjectTag) -> ProjectTag:
        return tag.model_copy(update={"label": self.sanitize(tag.label)})

    def _clean_project_fields(self, fields: dict[str, Any]) -> dict[str, Any]:
        clean = dict(fields)
        for name in ("name", "description"):
            if isinstance(clean.get(name), str):
                clean[name] = self.sanitize(clean[name])
        if clean.get("members") is not None:
            clean["members"] = tuple(self._clean_member(m) for m in clean["members"])
        if clean.get("tags") is not None:
            clean["tags"] = tuple(self._clean_tag(t) for t in clean["tags"])
        if clean.get("notes") is not None:
            clean["notes"] = tuple(
                n.model_copy(
                    update={
                        "content": self.sanitize(n.content),
                        "author_name": self.sanitize(n.author_name),
                        "author_initials": self.sanitize(n.author_initials),
                    }
                )
                for n in clean["notes"]
            )
        if clean.get("invites") is not None:
            clean["invites"] = tuple(
                i.model_copy(
                    update={
                        "email": self.sanitize(i.email),
                        "invited_by": self.sanitize(i.invited_by),
                    }
                )
                for i in clean["invites"]
            )
        return clean

    # -- projects -------------------------------------------------------------

    def add_project(self, project_data: ProjectCreate | dict) -> Project:
        """Create a project and return it at once under a temporary id.

        Raises:
            pydantic.ValidationError: If the data is invalid (e.g., no owner)
        """
        if not isinstance(project_data, ProjectCreate):
            project_data = ProjectCreate.model_validate(project_data)
        fields = {name: getattr(project_data, name) for name in ProjectCreate.model_fields}
        clean_data = project_data.model_copy(update=self._clean_project_fields(fields))

        taken = {p.id for p in self.entities.state}
        temporary_id = new_id("project", taken)
        project = Project(
            id=temporary_id,
            created_at=_now(),
            notes=(),
            invites=(),
            **{name: getattr(clean_data, name) for name in ProjectCreate.model_fields},
        )

        def reconcile(confirmed: Project) -> None:
            present = self.entities.get(temporary_id) is not None
            self.entities.confirm(temporary_id, confirmed.id)
            if not present:
                self._log.debug("Confirmed project %s is gone, merge skipped", temporary_id)
                return
            changes = reducers.changed_fields(project, confirmed)
            self.entities.publish(
                reducers.merge_project(self.entities.state, temporary_id, changes)
            )

        self.entities.mark_provisional(temporary_id)
        try:
            self.engine.apply(
                f"Create project '{project.name}'",
                temporary_id,
                lambda state: reducers.insert_project(state, project),
                lambda: self.repository.create_project(clean_data, project_id=temporary_id),
                reconcile,
            )
        except RuntimeError:
            self.entities.unmark_provisional(temporary_id)
            raise
        return project

    def update_project(self, project_id: str, updates: ProjectUpdate | dict) -> None:
        """Apply a partial update. Identity fields cannot change."""
        if not isinstance(updates, ProjectUpdate):
            updates = ProjectUpdate.model_validate(updates)
        changes = self._clean_project_fields(updates.changes())
        clean_updates = ProjectUpdate.model_validate(changes)
        project_id = self._resolve(project_id)

        self.engine.apply(
            f"Update project {project_id}",
            project_id,
            lambda state: reducers.update_project(state, project_id, changes),
            lambda: self.repository.update_project(self._resolve(project_id), clean_updates),
        )

    def delete_project(self, project_id: str) -> None:
        project_id = self._resolve(project_id)
        self.engine.apply(
            f"Delete project {project_id}",
            project_id,
            lambda state: reducers.remove_project(state, project_id),
            lambda: self.repository.delete_project(self._resolve(project_id)),
        )

    # -- notes ----------------------------------------------------------------

    def add_note(
        self, project_id: str, content: str, author_name: str, author_initials: str
    ) -> ProjectNote | None:
        """Prepend a note.

        Returns:
            The note under its temporary id, or None when the project is not
            in the store (the call is still dispatched and will be reported)
        """
        project_id = self._resolve(project_id)
        project = self.entities.get(project_id)
        taken = {n.id for n in project.notes} if project else set()
        note = ProjectNote(
            id=new_id("note", taken),
            content=self.sanitize(content),
            author_name=self.sanitize(author_name),
            author_initials=self.sanitize(author_initials),
            created_at=_now(),
        )

        def reconcile(confirmed: ProjectNote) -> None:
            changes = reducers.changed_fields(note, confirmed)
            self.entities.publish(
                reducers.merge_nested(
                    self.entities.state, self._resolve(project_id), "notes", note.id, changes
                )
            )

        self.engine.apply(
            f"Add note to {project_id}",
            project_id,
            lambda state: reducers.prepend_note(state, project_id, note),
            lambda: self.repository.add_note(
                self._resolve(project_id),
                note.content,
                note.author_name,
                note.author_initials,
                note_id=note.id,
            ),
            reconcile,
        )
        return note if project is not None else None

    def delete_note(self, project_id: str, note_id: str) -> None:
        project_id = self._resolve(project_id)
        self.engine.apply(
            f"Delete note {note_id}",
            project_id,
            lambda state: reducers.remove_note(state, project_id, note_id),
            lambda: self.repository.delete_note(self._resolve(project_id), note_id),
        )

    # -- members --------------------------------------------------------------

    def add_member(self, project_id: str, member: ProjectMember | dict) -> None:
        if not isinstance(member, ProjectMember):
            member = ProjectMember.model_validate(member)
        clean = self._clean_member(member)
        project_id = self._resolve(project_id)

        self.engine.apply(
            f"Add member {clean.name} to {project_id}",
            project_id,
            lambda state: reducers.append_member(state, project_id, clean),
            lambda: self.repository.add_member(self._resolve(project_id), clean),
        )

    def remove_member(self, project_id: str, member_id: str) -> None:
        """Remove a member. Removing the last owner is silently refused."""
        project_id = self._resolve(project_id)
        self.engine.apply(
            f"Remove member {member_id} from {project_id}",
            project_id,
            lambda state: reducers.remove_member(state, project_id, member_id),
            lambda: self.repository.remove_member(self._resolve(project_id), member_id),
        )

    def update_member_role(self, project_id: str, member_id: str, role: ProjectRole) -> None:
        """Change a member's role. Demoting the last owner is silently refused."""
        project_id = self._resolve(project_id)
        self.engine.apply(
            f"Change role of {member_id} to {role}",
            project_id,
            lambda state: reducers.change_member_role(state, project_id, member_id, role),
            lambda: self.repository.update_member_role(
                self._resolve(project_id), member_id, role
            ),
        )

    # -- invites --------------------------------------------------------------

    def send_invite(
        self, project_id: str, email: str, role: ProjectRole, invited_by: str
    ) -> ProjectInvite | None:
        """Add a pending invite.

        Returns:
            The invite under its temporary id, or None when the project is not
            in the store
        """
        project_id = self._resolve(project_id)
        project = self.entities.get(project_id)
        taken = {i.id for i in project.invites} if project else set()
        invite = ProjectInvite(
            id=new_id("invite", taken),
            email=self.sanitize(email),
            role=role,
            invited_by=self.sanitize(invited_by),
            status="pending",
            created_at=_now(),
        )

        def reconcile(confirmed: ProjectInvite) -> None:
            # status is owned locally; accept/decline may already have moved it
            changes = reducers.changed_fields(invite, confirmed)
            changes.pop("status", None)
            self.entities.publish(
                reducers.merge_nested(
                    self.entities.state, self._resolve(project_id), "invites", invite.id, changes
                )
            )

        self.engine.apply(
            f"Invite {invite.email} to {project_id}",
            project_id,
            lambda state: reducers.append_invite(state, project_id, invite),
            lambda: self.repository.send_invite(
                self._resolve(project_id),
                invite.email,
                role,
                invite.invited_by,
                invite_id=invite.id,
            ),
            reconcile,
        )
        return invite if project is not None else None

    def accept_invite(self, project_id: str, invite_id: str, name: str, initials: str) -> None:
        """Accept a pending invite; no-op for unknown or already settled invites."""
        project_id = self._resolve(project_id)
        project = self.entities.get(project_id)
        taken = {m.id for m in project.members} if project else set()
        # email and role come from the invite inside the reducer
        member = ProjectMember(
            id=new_id("member", taken),
            initials=self.sanitize(initials),
            name=self.sanitize(name),
            role="viewer",
        )

        self.engine.apply(
            f"Accept invite {invite_id}",
            project_id,
            lambda state: reducers.accept_invite(state, project_id, invite_id, member),
            lambda: self.repository.accept_invite(
                self._resolve(project_id),
                invite_id,
                member.name,
                member.initials,
                member_id=member.id,
            ),
        )

    def decline_invite(self, project_id: str, invite_id: str) -> None:
        """Decline a pending invite; no-op for unknown or already settled invites."""
        project_id = self._resolve(project_id)
        self.engine.apply(
            f"Decline invite {invite_id}",
            project_id,
            lambda state: reducers.decline_invite(state, project_id, invite_id),
            lambda: self.repository.decline_invite(self._resolve(project_id), invite_id),
        )


def get_project_store(reporter: ErrorReporter | None = None) -> ProjectStore:
    """Factory function to build a ProjectStore from the current configuration."""
    from stride_cli.adapters.local_project_repository import LocalProjectRepository
    from stride_cli.adapters.storage import FileStorage, MemoryStorage
    from stride_cli.services.config_service import get_config_service

    config_service = get_config_service()
    config = config_service.config

    if config.storage.backend == "memory":
        storage = MemoryStorage(quota_bytes=config.storage.quota_bytes)
    else:
        storage = FileStorage(
            config_service.get_data_dir(), quota_bytes=config.storage.quota_bytes
        )

    repository = LocalProjectRepository(storage, seed_on_empty=config.storage.seed_on_empty)
    return ProjectStore(repository, reporter=reporter, rollback=config.sync.rollback)
