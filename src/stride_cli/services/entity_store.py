"""Reactive container for the current list of Project aggregates."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from stride_cli.models import Project, ProjectRole
from stride_cli.services.reducers import State, rename_project
from stride_cli.utils.logger import get_component_logger

Subscriber = Callable[[State], None]


class EntityStore:
    """Holds the published project list and notifies subscribers on replacement.

    The store keeps three derived structures next to the list itself: an
    id-to-aggregate index, a per-aggregate version counter that moves every
    time the aggregate object under an id is replaced, and the set of ids
    that are still provisional (created locally, not yet confirmed).

    When persistence confirms a project under a different id, the temporary
    id is kept as an alias of the confirmed one, so changes still addressed
    to the temporary id land on the right aggregate.
    """

    def __init__(self, projects: Iterable[Project] = ()):
        self._state: State = tuple(projects)
        self._index: dict[str, Project] = {p.id: p for p in self._state}
        self._versions: dict[str, int] = {p.id: 1 for p in self._state}
        self._provisional: set[str] = set()
        self._aliases: dict[str, str] = {}
        self._subscribers: list[Subscriber] = []
        self._log = get_component_logger("store")

    @property
    def state(self) -> State:
        return self._state

    def list(self) -> State:
        """Current snapshot; tuples of frozen models, so read-only."""
        return self._state

    def get(self, project_id: str) -> Project | None:
        return self._index.get(project_id)

    def role_of(self, project_id: str, email: str) -> ProjectRole | None:
        """Role of the first member of a project whose email matches."""
        project = self._index.get(project_id)
        if project is None or not email:
            return None
        wanted = email.strip().lower()
        for member in project.members:
            if member.email.lower() == wanted:
                return member.role
        return None

    def version_of(self, project_id: str) -> int:
        """Version of an aggregate; 0 when the id is not in the store."""
        return self._versions.get(project_id, 0)

    # -- provisional ids ------------------------------------------------------

    def is_provisional(self, project_id: str) -> bool:
        return project_id in self._provisional

    def mark_provisional(self, project_id: str) -> None:
        self._provisional.add(project_id)

    def unmark_provisional(self, project_id: str) -> None:
        self._provisional.discard(project_id)

    def confirm(self, temporary_id: str, confirmed_id: str | None = None) -> None:
        """Drop the provisional mark, following an id replacement if any."""
        self._provisional.discard(temporary_id)
        if confirmed_id is None or confirmed_id == temporary_id:
            return
        self._provisional.discard(confirmed_id)
        self._aliases[temporary_id] = confirmed_id
        # the renamed aggregate keeps counting from its temporary version
        self._versions.setdefault(confirmed_id, self._versions.get(temporary_id, 0))

    def resolve(self, project_id: str) -> str:
        """Current id of a project, following temporary-to-confirmed replacements."""
        return self._aliases.get(project_id, project_id)

    def rebase(self, state: State) -> State:
        """Rename aggregates of an older state that have been confirmed since."""
        for temporary_id, confirmed_id in self._aliases.items():
            state = rename_project(state, temporary_id, confirmed_id)
        return state

    # -- publish/subscribe ----------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback for every published state.

        Returns:
            A function that removes the subscription
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, next_state: State) -> None:
        """Replace the state wholesale and notify subscribers.

        Publishing the current state object again is a no-op.
        """
        next_state = tuple(next_state)
        if next_state is self._state:
            return

        index = {p.id: p for p in next_state}
        versions: dict[str, int] = {}
        for project_id, project in index.items():
            previous = self._index.get(project_id)
            version = self._versions.get(project_id, 0)
            versions[project_id] = version if previous is project else version + 1

        # ids marked before their first publish stay marked
        self._provisional -= set(self._index) - set(index)
        self._state = next_state
        self._index = index
        self._versions = versions

        for callback in list(self._subscribers):
            try:
                callback(next_state)
            except Exception:
                self._log.exception("Subscriber %r failed", callback)
