"""Tests for the reactive EntityStore."""

from __future__ import annotations

from unittest.mock import MagicMock

from stride_cli.services import reducers
from stride_cli.services.entity_store import EntityStore


def test_initial_state(make_project):
    store = EntityStore([make_project("p1")])
    assert [p.id for p in store.list()] == ["p1"]
    assert store.get("p1").id == "p1"
    assert store.get("ghost") is None
    assert store.version_of("p1") == 1
    assert store.version_of("ghost") == 0


def test_publish_notifies_subscribers(make_project):
    store = EntityStore()
    seen = []
    store.subscribe(seen.append)

    next_state = (make_project("p1"),)
    store.publish(next_state)

    assert seen == [next_state]
    assert store.get("p1") is next_state[0]


def test_publishing_same_state_does_not_notify(make_project):
    store = EntityStore([make_project("p1")])
    callback = MagicMock()
    store.subscribe(callback)

    store.publish(store.state)

    callback.assert_not_called()


def test_unsubscribe(make_project):
    store = EntityStore()
    callback = MagicMock()
    unsubscribe = store.subscribe(callback)
    unsubscribe()
    unsubscribe()

    store.publish((make_project("p1"),))

    callback.assert_not_called()


def test_failing_subscriber_does_not_block_others(make_project):
    store = EntityStore()
    broken = MagicMock(side_effect=RuntimeError("boom"))
    healthy = MagicMock()
    store.subscribe(broken)
    store.subscribe(healthy)

    store.publish((make_project("p1"),))

    healthy.assert_called_once()


def test_versions_move_only_for_replaced_aggregates(make_project):
    store = EntityStore([make_project("p1"), make_project("p2")])

    store.publish(reducers.update_project(store.state, "p1", {"name": "x"}))

    assert store.version_of("p1") == 2
    assert store.version_of("p2") == 1


def test_role_of_matches_email_case_insensitively(make_project, make_member):
    store = EntityStore(
        [
            make_project(
                "p1",
                members=(
                    make_member("m1", "owner", email="Owner@Example.com"),
                    make_member("m2", "viewer", email="owner@example.com"),
                ),
            )
        ]
    )
    assert store.role_of("p1", "owner@example.com") == "owner"
    assert store.role_of("p1", "nobody@example.com") is None
    assert store.role_of("ghost", "owner@example.com") is None
    assert store.role_of("p1", "") is None


class TestProvisional:
    def test_mark_before_publish_survives(self, make_project):
        store = EntityStore()
        store.mark_provisional("p1")
        store.publish((make_project("p1"),))
        assert store.is_provisional("p1")

    def test_confirm_clears_mark(self, make_project):
        store = EntityStore()
        store.mark_provisional("p1")
        store.confirm("p1", "proj-final")
        assert not store.is_provisional("p1")

    def test_mark_dropped_when_aggregate_disappears(self, make_project):
        store = EntityStore()
        store.mark_provisional("p1")
        store.publish((make_project("p1"),))
        store.publish(())
        assert not store.is_provisional("p1")


class TestConfirmedIds:
    def test_confirm_under_new_id_records_alias(self):
        store = EntityStore()
        store.mark_provisional("p1")
        store.confirm("p1", "proj-final")

        assert store.resolve("p1") == "proj-final"
        assert store.resolve("p2") == "p2"
        assert not store.is_provisional("proj-final")

    def test_confirm_under_same_id_records_nothing(self):
        store = EntityStore()
        store.confirm("p1", "p1")
        assert store.resolve("p1") == "p1"

    def test_rebase_renames_older_state(self, make_project):
        store = EntityStore()
        store.confirm("p1", "proj-final")

        older = (make_project("p1"), make_project("p2"))
        rebased = store.rebase(older)

        assert [p.id for p in rebased] == ["proj-final", "p2"]
        assert rebased[1] is older[1]

    def test_renamed_aggregate_keeps_counting_versions(self, make_project):
        store = EntityStore([make_project("p1")])
        store.publish((make_project("p1", name="Edited"),))
        assert store.version_of("p1") == 2

        store.confirm("p1", "proj-final")
        store.publish((store.get("p1").model_copy(update={"id": "proj-final"}),))

        assert store.version_of("proj-final") == 3
