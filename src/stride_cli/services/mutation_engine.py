"""Optimistic mutation engine.

Every change goes through one protocol:

1. snapshot the published state (by reference; aggregates are immutable),
2. compute the next state with a pure reducer and publish it at once,
3. dispatch the matching persistence call as an independent task,
4. on success run the reconciliation callback, on failure roll back and
   report.

Steps 1 and 2 run synchronously, so no other change can interleave with
them. Confirmations, on the other hand, settle in whatever order the
persistence layer answers.

Two rollback policies exist. ``"store"`` restores the whole snapshot taken in
step 1, which also throws away every unrelated change published after it
(the lost-update hazard). ``"aggregate"`` restores only the aggregate the
failed change touched.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Literal

from stride_cli.models import Project
from stride_cli.services.entity_store import EntityStore
from stride_cli.services.notifications import ErrorReporter
from stride_cli.services.reducers import State, index_of, restore_project
from stride_cli.utils.logger import get_component_logger

RollbackPolicy = Literal["store", "aggregate"]

Reducer = Callable[[State], State]
Dispatch = Callable[[], Awaitable[Any]]
Reconcile = Callable[[Any], None]


@dataclass(frozen=True)
class PendingMutation:
    """Everything needed to settle one dispatched change."""

    label: str
    project_id: str
    snapshot: State
    prior: Project | None
    position: int
    version: int
    dispatch: Dispatch
    on_success: Reconcile | None = None


class MutationEngine:
    """Applies changes optimistically and settles them against persistence."""

    def __init__(
        self,
        store: EntityStore,
        reporter: ErrorReporter,
        *,
        rollback: RollbackPolicy = "store",
    ):
        if rollback not in ("store", "aggregate"):
            raise ValueError(f"Unknown rollback policy: {rollback}")
        self.store = store
        self.reporter = reporter
        self.rollback = rollback
        self._tasks: set[asyncio.Task] = set()
        self._log = get_component_logger("engine")

    @property
    def pending_count(self) -> int:
        return len(self._tasks)

    def apply(
        self,
        label: str,
        project_id: str,
        reducer: Reducer,
        dispatch: Dispatch,
        on_success: Reconcile | None = None,
    ) -> State:
        """Publish ``reducer(state)`` now and confirm it in the background.

        Args:
            label: Human-readable description used in logs and reports
            project_id: Aggregate the change targets
            reducer: Pure function computing the next state
            dispatch: Zero-argument coroutine factory for the persistence call
            on_success: Called with the persistence result once it resolves

        Returns:
            The published state

        Raises:
            RuntimeError: If no event loop is running (nothing is published)
        """
        loop = asyncio.get_running_loop()

        snapshot = self.store.state
        position = index_of(snapshot, project_id)
        prior = snapshot[position] if position is not None else None

        next_state = reducer(snapshot)
        if next_state is snapshot:
            self._log.debug("%s: no state change", label)
        self.store.publish(next_state)

        mutation = PendingMutation(
            label=label,
            project_id=project_id,
            snapshot=snapshot,
            prior=prior,
            position=position if position is not None else len(snapshot),
            version=self.store.version_of(project_id),
            dispatch=dispatch,
            on_success=on_success,
        )
        task = loop.create_task(self._settle(mutation))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self._log.debug("%s: dispatched (%d pending)", label, len(self._tasks))
        return next_state

    async def wait_for_pending(self) -> None:
        """Wait until every dispatched change, including late ones, has settled."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def _settle(self, mutation: PendingMutation) -> None:
        try:
            result = await mutation.dispatch()
        except Exception as e:
            self._roll_back(mutation)
            self._log.warning("%s: rejected, change reverted: %s", mutation.label, e)
            self.reporter.report(f"{mutation.label} failed and was reverted", e)
            return

        if mutation.on_success is not None:
            mutation.on_success(result)
        self._log.debug("%s: confirmed", mutation.label)

    def _roll_back(self, mutation: PendingMutation) -> None:
        # the aggregate may have been confirmed under a new id meanwhile
        if self.rollback == "store":
            self.store.publish(self.store.rebase(mutation.snapshot))
            return

        project_id = self.store.resolve(mutation.project_id)
        prior = mutation.prior
        if prior is not None and prior.id != project_id:
            prior = prior.model_copy(update={"id": project_id})

        current_version = self.store.version_of(project_id)
        if current_version not in (0, mutation.version):
            self._log.warning(
                "%s: %s changed again since (v%d to v%d); those changes are reverted too",
                mutation.label,
                project_id,
                mutation.version,
                current_version,
            )
        self.store.publish(
            restore_project(self.store.state, prior, project_id, mutation.position)
        )
