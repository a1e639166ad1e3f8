"""Tests for the pure Project reducers."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from stride_cli.models import ProjectNote
from stride_cli.services import reducers


@pytest.fixture()
def state(make_project, make_member, make_invite):
    return (
        make_project("p1", members=(make_member("m1", "owner"), make_member("m2", "editor"))),
        make_project("p2", invites=(make_invite("inv-1"),)),
        make_project("p3"),
    )


def _note(note_id="note-1", content="hello"):
    return ProjectNote(
        id=note_id,
        content=content,
        author_name="A",
        author_initials="A",
        created_at=datetime(2024, 1, 1, tzinfo=UTC),
    )


def test_update_shares_untouched_aggregates(state):
    next_state = reducers.update_project(state, "p1", {"name": "Renamed"})
    assert next_state[0].name == "Renamed"
    assert next_state[1] is state[1]
    assert next_state[2] is state[2]
    assert state[0].name == "Project p1"


@pytest.mark.parametrize(
    "apply",
    [
        lambda s: reducers.update_project(s, "ghost", {"name": "x"}),
        lambda s: reducers.update_project(s, "p1", {}),
        lambda s: reducers.remove_project(s, "ghost"),
        lambda s: reducers.remove_note(s, "p1", "ghost"),
        lambda s: reducers.remove_member(s, "p1", "m1"),
        lambda s: reducers.change_member_role(s, "p1", "m1", "viewer"),
        lambda s: reducers.decline_invite(s, "p1", "ghost"),
        lambda s: reducers.merge_nested(s, "p1", "notes", "ghost", {"content": "x"}),
    ],
)
def test_no_change_returns_same_state(state, apply):
    assert apply(state) is state


def test_insert_project_appends_once(state, make_project):
    extra = make_project("p4")
    once = reducers.insert_project(state, extra)
    assert [p.id for p in once] == ["p1", "p2", "p3", "p4"]
    assert reducers.insert_project(once, extra) is once


def test_remove_project(state):
    assert [p.id for p in reducers.remove_project(state, "p2")] == ["p1", "p3"]


def test_prepend_note_keeps_newest_first(state):
    one = reducers.prepend_note(state, "p1", _note("note-1"))
    two = reducers.prepend_note(one, "p1", _note("note-2"))
    assert [n.id for n in two[0].notes] == ["note-2", "note-1"]
    assert [n.id for n in reducers.remove_note(two, "p1", "note-1")[0].notes] == ["note-2"]


def test_append_member_ignores_duplicate_id(state, make_member):
    assert reducers.append_member(state, "p1", make_member("m2", "viewer")) is state
    added = reducers.append_member(state, "p1", make_member("m9", "viewer"))
    assert [m.id for m in added[0].members] == ["m1", "m2", "m9"]


def test_change_member_role(state):
    next_state = reducers.change_member_role(state, "p1", "m2", "admin")
    assert next_state[0].members[1].role == "admin"


def test_accept_invite_uses_invite_email_and_role(state, make_member):
    member = make_member("m9", "viewer", email="")
    next_state = reducers.accept_invite(state, "p2", "inv-1", member)

    project = next_state[1]
    assert project.invites[0].status == "accepted"
    assert project.members[-1].id == "m9"
    assert project.members[-1].email == "guest@example.com"
    assert project.members[-1].role == "editor"


def test_accept_invite_is_idempotent(state, make_member):
    once = reducers.accept_invite(state, "p2", "inv-1", make_member("m9", "viewer"))
    assert reducers.accept_invite(once, "p2", "inv-1", make_member("m10", "viewer")) is once
    assert reducers.decline_invite(once, "p2", "inv-1") is once


def test_decline_invite(state):
    declined = reducers.decline_invite(state, "p2", "inv-1")
    assert declined[1].invites[0].status == "declined"
    assert declined[1].members == state[1].members


class TestRestoreProject:
    def test_restores_prior_value(self, state):
        changed = reducers.update_project(state, "p2", {"name": "x"})
        assert reducers.restore_project(changed, state[1], "p2", 1) == state

    def test_reinserts_deleted_aggregate_at_position(self, state):
        removed = reducers.remove_project(state, "p2")
        assert reducers.restore_project(removed, state[1], "p2", 1) == state

    def test_removes_created_aggregate(self, state, make_project):
        added = reducers.insert_project(state, make_project("p4"))
        assert reducers.restore_project(added, None, "p4", 3) == state

    def test_position_clamped(self, state):
        assert reducers.restore_project((), state[2], "p3", 5) == (state[2],)


class TestReconciliation:
    def test_changed_fields_only_reports_differences(self, state):
        confirmed = state[0].model_copy(update={"id": "proj-final", "progress": 5})
        assert reducers.changed_fields(state[0], confirmed) == {"id": "proj-final", "progress": 5}

    def test_merge_project_replaces_id_in_place(self, state):
        merged = reducers.merge_project(state, "p2", {"id": "proj-final"})
        assert [p.id for p in merged] == ["p1", "proj-final", "p3"]

    def test_merge_nested_by_id(self, state):
        with_note = reducers.prepend_note(state, "p1", _note("note-tmp"))
        merged = reducers.merge_nested(with_note, "p1", "notes", "note-tmp", {"id": "note-final"})
        assert [n.id for n in merged[0].notes] == ["note-final"]
        assert merged[0].notes[0].content == "hello"


class TestRenameProject:
    def test_renames_in_place(self, state):
        renamed = reducers.rename_project(state, "p2", "proj-final")
        assert [p.id for p in renamed] == ["p1", "proj-final", "p3"]
        assert renamed[1].name == state[1].name

    def test_unknown_id_returns_same_state(self, state):
        assert reducers.rename_project(state, "ghost", "proj-final") is state

    def test_existing_target_is_not_duplicated(self, state):
        assert reducers.rename_project(state, "p1", "p2") is state
