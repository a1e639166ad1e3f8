"""Pure reducers over the Project list.

Each function takes the current state (a tuple of projects) and returns the
next one. Nothing is mutated: changed aggregates are rebuilt with
``model_copy`` and untouched ones are shared with the previous state. When a
reducer changes nothing (unknown id, guard refusal) it returns the very same
state object, which lets the store skip notifying subscribers.

The local storage adapter applies the same reducers to its persisted list, so
durable state follows the exact rules the optimistic state follows.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from stride_cli.models import (
    Project,
    ProjectInvite,
    ProjectMember,
    ProjectNote,
    ProjectRole,
)
from stride_cli.services import guards

State = tuple[Project, ...]


def index_of(state: State, project_id: str) -> int | None:
    for position, project in enumerate(state):
        if project.id == project_id:
            return position
    return None


def map_project(
    state: State, project_id: str, transform: Callable[[Project], Project]
) -> State:
    """Apply ``transform`` to the project with ``project_id``.

    Returns ``state`` itself when the project is absent or the transform
    returned the project unchanged.
    """
    position = index_of(state, project_id)
    if position is None:
        return state
    current = state[position]
    updated = transform(current)
    if updated is current:
        return state
    return state[:position] + (updated,) + state[position + 1 :]


# -- projects ---------------------------------------------------------------


def insert_project(state: State, project: Project) -> State:
    if index_of(state, project.id) is not None:
        return state
    return state + (project,)


def update_project(state: State, project_id: str, changes: dict[str, Any]) -> State:
    if not changes:
        return state
    return map_project(state, project_id, lambda p: p.model_copy(update=changes))


def remove_project(state: State, project_id: str) -> State:
    position = index_of(state, project_id)
    if position is None:
        return state
    return state[:position] + state[position + 1 :]


def rename_project(state: State, old_id: str, new_id: str) -> State:
    """Give an aggregate a new id; a no-op if the new id is already present."""
    if old_id == new_id or index_of(state, new_id) is not None:
        return state
    return map_project(state, old_id, lambda p: p.model_copy(update={"id": new_id}))


def restore_project(state: State, project: Project | None, project_id: str, position: int) -> State:
    """Put one aggregate back to a prior value.

    ``project`` None means the aggregate did not exist before and is removed.
    A deleted aggregate is re-inserted at its previous position.
    """
    if project is None:
        return remove_project(state, project_id)
    current = index_of(state, project_id)
    if current is None:
        position = min(position, len(state))
        return state[:position] + (project,) + state[position:]
    if state[current] is project:
        return state
    return state[:current] + (project,) + state[current + 1 :]


# -- notes ------------------------------------------------------------------


def prepend_note(state: State, project_id: str, note: ProjectNote) -> State:
    return map_project(
        state, project_id, lambda p: p.model_copy(update={"notes": (note,) + p.notes})
    )


def remove_note(state: State, project_id: str, note_id: str) -> State:
    def transform(project: Project) -> Project:
        notes = tuple(n for n in project.notes if n.id != note_id)
        if len(notes) == len(project.notes):
            return project
        return project.model_copy(update={"notes": notes})

    return map_project(state, project_id, transform)


# -- members ----------------------------------------------------------------


def append_member(state: State, project_id: str, member: ProjectMember) -> State:
    def transform(project: Project) -> Project:
        if guards.has_member(project, member.id):
            return project
        return project.model_copy(update={"members": project.members + (member,)})

    return map_project(state, project_id, transform)


def remove_member(state: State, project_id: str, member_id: str) -> State:
    def transform(project: Project) -> Project:
        if not guards.can_remove_member(project, member_id):
            return project
        members = tuple(m for m in project.members if m.id != member_id)
        return project.model_copy(update={"members": members})

    return map_project(state, project_id, transform)


def change_member_role(
    state: State, project_id: str, member_id: str, role: ProjectRole
) -> State:
    def transform(project: Project) -> Project:
        if not guards.can_change_role(project, member_id, role):
            return project
        members = tuple(
            m.model_copy(update={"role": role}) if m.id == member_id else m
            for m in project.members
        )
        return project.model_copy(update={"members": members})

    return map_project(state, project_id, transform)


# -- invites ----------------------------------------------------------------


def append_invite(state: State, project_id: str, invite: ProjectInvite) -> State:
    def transform(project: Project) -> Project:
        if guards.find_invite(project, invite.id) is not None:
            return project
        return project.model_copy(update={"invites": project.invites + (invite,)})

    return map_project(state, project_id, transform)


def _set_invite_status(project: Project, invite_id: str, status: str) -> tuple[ProjectInvite, ...]:
    return tuple(
        i.model_copy(update={"status": status}) if i.id == invite_id else i
        for i in project.invites
    )


def accept_invite(
    state: State, project_id: str, invite_id: str, member: ProjectMember
) -> State:
    """Mark a pending invite accepted and append ``member``.

    The member's email and role are taken from the invite.
    """

    def transform(project: Project) -> Project:
        invite = guards.find_pending_invite(project, invite_id)
        if invite is None:
            return project
        joined = member.model_copy(update={"email": invite.email, "role": invite.role})
        return project.model_copy(
            update={
                "invites": _set_invite_status(project, invite_id, "accepted"),
                "members": project.members + (joined,),
            }
        )

    return map_project(state, project_id, transform)


def decline_invite(state: State, project_id: str, invite_id: str) -> State:
    def transform(project: Project) -> Project:
        if guards.find_pending_invite(project, invite_id) is None:
            return project
        return project.model_copy(
            update={"invites": _set_invite_status(project, invite_id, "declined")}
        )

    return map_project(state, project_id, transform)


# -- reconciliation ---------------------------------------------------------


def merge_project(state: State, project_id: str, fields: dict[str, Any]) -> State:
    """Merge confirmed fields into the aggregate currently under ``project_id``.

    ``fields`` may carry a new ``id``; the aggregate is replaced in place so
    no duplicate appears. Missing aggregates are left alone.
    """
    return update_project(state, project_id, fields)


def merge_nested(
    state: State,
    project_id: str,
    collection: str,
    entity_id: str,
    fields: dict[str, Any],
) -> State:
    """Merge confirmed fields into one note, invite or member, matched by id."""
    if not fields:
        return state

    def transform(project: Project) -> Project:
        items = getattr(project, collection)
        if not any(item.id == entity_id for item in items):
            return project
        merged = tuple(
            item.model_copy(update=fields) if item.id == entity_id else item
            for item in items
        )
        return project.model_copy(update={collection: merged})

    return map_project(state, project_id, transform)


def changed_fields(provisional: Any, confirmed: Any) -> dict[str, Any]:
    """Fields whose confirmed value differs from the provisional one."""
    result = {}
    for name in type(confirmed).model_fields:
        value = getattr(confirmed, name)
        if getattr(provisional, name, None) != value:
            result[name] = value
    return result
