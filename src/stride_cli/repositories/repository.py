"""Persistence boundary for the STRIDE sync layer.

This module defines the abstract base class (interface) that every storage
backend implements, following the Ports & Adapters pattern. The optimistic
store only ever talks to this interface, so a network-backed adapter can
replace the local stub without changing any call site.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from stride_cli.models import (
    DayColumn,
    Project,
    ProjectCreate,
    ProjectInvite,
    ProjectMember,
    ProjectNote,
    ProjectRole,
    ProjectUpdate,
)


class ProjectRepository(ABC):
    """Abstract base class for Project aggregate persistence.

    Every method may raise. Calls that target a project absent from durable
    storage raise ``NotFoundError``. Misses on nested entities (notes,
    members, invites) are no-ops.
    """

    @abstractmethod
    async def fetch_projects(self) -> list[Project]:
        """List all stored projects.

        Returns:
            Stored projects in display order
        """
        raise NotImplementedError(
            "ProjectRepository.fetch_projects() must be implemented by adapter"
        )

    @abstractmethod
    async def create_project(
        self, project_data: ProjectCreate, *, project_id: str | None = None
    ) -> Project:
        """Create a new project.

        Args:
            project_data: ProjectCreate object with project details
            project_id: Client-proposed id; the adapter may assign its own

        Returns:
            Created Project with its durable id and timestamps
        """
        raise NotImplementedError(
            "ProjectRepository.create_project() must be implemented by adapter"
        )

    @abstractmethod
    async def update_project(self, project_id: str, updates: ProjectUpdate) -> Project:
        """Update an existing project.

        Args:
            project_id: Unique identifier for the project
            updates: ProjectUpdate object with fields to update

        Returns:
            Updated Project

        Raises:
            NotFoundError: If project does not exist
        """
        raise NotImplementedError(
            "ProjectRepository.update_project() must be implemented by adapter"
        )

    @abstractmethod
    async def delete_project(self, project_id: str) -> None:
        """Delete a project.

        Raises:
            NotFoundError: If project does not exist
        """
        raise NotImplementedError(
            "ProjectRepository.delete_project() must be implemented by adapter"
        )

    @abstractmethod
    async def add_note(
        self,
        project_id: str,
        content: str,
        author_name: str,
        author_initials: str,
        *,
        note_id: str | None = None,
    ) -> ProjectNote:
        """Prepend a note to a project.

        Args:
            project_id: Parent project
            content: Note text
            author_name: Author display name
            author_initials: Author avatar label
            note_id: Client-proposed id; the adapter may assign its own

        Returns:
            The stored note
        """
        raise NotImplementedError(
            "ProjectRepository.add_note() must be implemented by adapter"
        )

    @abstractmethod
    async def delete_note(self, project_id: str, note_id: str) -> None:
        """Remove a note from a project."""
        raise NotImplementedError(
            "ProjectRepository.delete_note() must be implemented by adapter"
        )

    @abstractmethod
    async def add_member(self, project_id: str, member: ProjectMember) -> None:
        """Append a member to a project."""
        raise NotImplementedError(
            "ProjectRepository.add_member() must be implemented by adapter"
        )

    @abstractmethod
    async def remove_member(self, project_id: str, member_id: str) -> None:
        """Remove a member, unless it is the project's last owner."""
        raise NotImplementedError(
            "ProjectRepository.remove_member() must be implemented by adapter"
        )

    @abstractmethod
    async def update_member_role(
        self, project_id: str, member_id: str, role: ProjectRole
    ) -> None:
        """Change a member's role, unless that demotes the last owner."""
        raise NotImplementedError(
            "ProjectRepository.update_member_role() must be implemented by adapter"
        )

    @abstractmethod
    async def send_invite(
        self,
        project_id: str,
        email: str,
        role: ProjectRole,
        invited_by: str,
        *,
        invite_id: str | None = None,
    ) -> ProjectInvite:
        """Create a pending invite.

        Returns:
            The stored invite, with status "pending"
        """
        raise NotImplementedError(
            "ProjectRepository.send_invite() must be implemented by adapter"
        )

    @abstractmethod
    async def accept_invite(
        self,
        project_id: str,
        invite_id: str,
        name: str,
        initials: str,
        *,
        member_id: str | None = None,
    ) -> None:
        """Accept a pending invite and add the invitee as a member."""
        raise NotImplementedError(
            "ProjectRepository.accept_invite() must be implemented by adapter"
        )

    @abstractmethod
    async def decline_invite(self, project_id: str, invite_id: str) -> None:
        """Decline a pending invite."""
        raise NotImplementedError(
            "ProjectRepository.decline_invite() must be implemented by adapter"
        )

    @abstractmethod
    async def fetch_tasks(self, project_id: str) -> list[DayColumn] | None:
        """Load the task board of a project.

        Returns:
            Stored columns, or None when nothing valid is stored
        """
        raise NotImplementedError(
            "ProjectRepository.fetch_tasks() must be implemented by adapter"
        )

    @abstractmethod
    async def save_tasks(self, project_id: str, columns: list[DayColumn]) -> None:
        """Store the task board of a project."""
        raise NotImplementedError(
            "ProjectRepository.save_tasks() must be implemented by adapter"
        )
