"""Invariant guards for Project aggregates.

Pure predicates consulted by the reducers before a change is accepted. A
change that fails its guard is dropped silently: the reducer hands back the
aggregate it was given.
"""

from __future__ import annotations

from collections.abc import Iterable

from stride_cli.models import Project, ProjectInvite, ProjectMember, ProjectRole


def owner_count(members: Iterable[ProjectMember]) -> int:
    """Count members holding the owner role."""
    return sum(1 for member in members if member.role == "owner")


def find_member(project: Project, member_id: str) -> ProjectMember | None:
    for member in project.members:
        if member.id == member_id:
            return member
    return None


def has_member(project: Project, member_id: str) -> bool:
    return find_member(project, member_id) is not None


def is_last_owner(project: Project, member_id: str) -> bool:
    """True when the member is an owner and no other owner exists."""
    member = find_member(project, member_id)
    if member is None or member.role != "owner":
        return False
    return owner_count(project.members) <= 1


def can_remove_member(project: Project, member_id: str) -> bool:
    """Removal is refused for unknown members and for the last owner."""
    return has_member(project, member_id) and not is_last_owner(project, member_id)


def can_change_role(project: Project, member_id: str, role: ProjectRole) -> bool:
    """Role changes are refused when they would demote the last owner.

    Removal and demotion share the same last-owner rule.
    """
    member = find_member(project, member_id)
    if member is None or member.role == role:
        return False
    if role != "owner" and is_last_owner(project, member_id):
        return False
    return True


def find_invite(project: Project, invite_id: str) -> ProjectInvite | None:
    for invite in project.invites:
        if invite.id == invite_id:
            return invite
    return None


def find_pending_invite(project: Project, invite_id: str) -> ProjectInvite | None:
    """Return the invite only while it can still be accepted or declined."""
    invite = find_invite(project, invite_id)
    if invite is None or invite.status != "pending":
        return None
    return invite
