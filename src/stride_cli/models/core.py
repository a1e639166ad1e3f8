"""Project aggregate data models.

Every model here is frozen: a mutation always builds a new object with
``model_copy(update=...)``. Ordered collections are tuples so that nothing
reachable from a published aggregate can be edited in place.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

ProjectRole = Literal["owner", "admin", "editor", "viewer"]
ProjectMode = Literal["solo", "team"]
ProjectStatus = Literal["on-track", "delayed", "completed"]
ProjectViewMode = Literal["simple", "advanced"]
InviteStatus = Literal["pending", "accepted", "declined"]
Priority = Literal["low", "medium", "high", "critical"]

DEFAULT_MEMBER_COLOR = "bg-indigo-500"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class ProjectMember(_Frozen):
    """A member of a project.

    Attributes:
        id: Unique identifier within the project
        initials: Short avatar label (e.g., "AK")
        name: Display name
        email: Contact email, not required to be unique
        color: Avatar color token
        role: Access role inside the project
    """

    id: str
    initials: str
    name: str
    email: str = ""
    color: str = DEFAULT_MEMBER_COLOR
    role: ProjectRole


class ProjectInvite(_Frozen):
    """An invitation for an email address to join a project.

    Attributes:
        id: Unique identifier within the project
        email: Invited email address
        role: Role granted when the invite is accepted
        invited_by: Display name of the inviting member
        status: pending, accepted or declined
        created_at: Creation timestamp
    """

    id: str
    email: str
    role: ProjectRole
    invited_by: str
    status: InviteStatus = "pending"
    created_at: datetime


class ProjectNote(_Frozen):
    """A note attached to a project."""

    id: str
    content: str
    author_name: str
    author_initials: str
    created_at: datetime


class ProjectTag(_Frozen):
    """A project-scoped tag."""

    id: str
    label: str
    color: str


def _require_owner(members: tuple[ProjectMember, ...]) -> tuple[ProjectMember, ...]:
    if not any(member.role == "owner" for member in members):
        raise ValueError("a project needs at least one member with role 'owner'")
    return members


class Project(_Frozen):
    """Project aggregate root.

    Attributes:
        id: Unique identifier for the project
        name: Project name
        description: Free-text description
        icon_name: Icon reference used by the UI
        progress: Completion percentage (0-100)
        status: on-track, delayed or completed
        color: Accent color token
        mode: solo or team
        view_mode: Optional preferred dashboard layout
        members: Members in display order
        invites: Invites in creation order
        notes: Notes, newest first
        tags: Tags in display order
        created_at: Creation timestamp
        estimated_days: Estimated duration in days
    """

    id: str
    name: str
    description: str = ""
    icon_name: str = "Folder"
    progress: int = Field(default=0, ge=0, le=100)
    status: ProjectStatus = "on-track"
    color: str = "indigo"
    mode: ProjectMode = "solo"
    view_mode: ProjectViewMode | None = None
    members: tuple[ProjectMember, ...] = ()
    invites: tuple[ProjectInvite, ...] = ()
    notes: tuple[ProjectNote, ...] = ()
    tags: tuple[ProjectTag, ...] = ()
    created_at: datetime
    estimated_days: int = Field(default=0, ge=0)


class ProjectCreate(_Frozen):
    """Fields for creating a project.

    ``id``, ``created_at``, ``notes`` and ``invites`` are assigned when the
    project is created. At least one owner is required.
    """

    name: str
    description: str = ""
    icon_name: str = "Folder"
    progress: int = Field(default=0, ge=0, le=100)
    status: ProjectStatus = "on-track"
    color: str = "indigo"
    mode: ProjectMode = "solo"
    view_mode: ProjectViewMode | None = None
    members: tuple[ProjectMember, ...]
    tags: tuple[ProjectTag, ...] = ()
    estimated_days: int = Field(default=0, ge=0)

    @field_validator("members")
    @classmethod
    def validate_members(cls, v: tuple[ProjectMember, ...]) -> tuple[ProjectMember, ...]:
        return _require_owner(v)


class ProjectUpdate(_Frozen):
    """Partial update of a project.

    Only fields that were explicitly set (``model_fields_set``) are applied.
    """

    name: str | None = None
    description: str | None = None
    icon_name: str | None = None
    progress: int | None = Field(default=None, ge=0, le=100)
    status: ProjectStatus | None = None
    color: str | None = None
    mode: ProjectMode | None = None
    view_mode: ProjectViewMode | None = None
    members: tuple[ProjectMember, ...] | None = None
    invites: tuple[ProjectInvite, ...] | None = None
    notes: tuple[ProjectNote, ...] | None = None
    tags: tuple[ProjectTag, ...] | None = None
    estimated_days: int | None = Field(default=None, ge=0)

    @field_validator("members")
    @classmethod
    def validate_members(
        cls, v: tuple[ProjectMember, ...] | None
    ) -> tuple[ProjectMember, ...] | None:
        if v is None:
            return v
        return _require_owner(v)

    def changes(self) -> dict:
        """Return the explicitly set fields as model-typed values.

        ``None`` means "not provided" for every field except ``view_mode``,
        which is nullable on the project itself.
        """
        result = {}
        for name in self.model_fields_set:
            value = getattr(self, name)
            if value is None and name != "view_mode":
                continue
            result[name] = value
        return result


class Tag(BaseModel):
    """Task tag."""

    label: str
    color: str


class Task(BaseModel):
    """Task card on a project board."""

    id: str
    title: str
    description: str = ""
    tags: list[Tag] = Field(default_factory=list)
    assignees: list[str] = Field(default_factory=list)
    done: bool = False
    rolled_over: bool = False
    priority: Priority | None = None
    due_date: datetime | None = None


class DayColumn(BaseModel):
    """One day of a weekly task board."""

    date: datetime
    tasks: list[Task] = Field(default_factory=list)
