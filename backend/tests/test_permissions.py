"""Tests for the authorization predicate."""

import pytest

from app.db.models import UserRole
from app.services.permissions import Action, can_perform

STUDENT = UserRole.STUDENT
COUNSELLOR = UserRole.COUNSELLOR
ADMIN = UserRole.ADMIN


@pytest.mark.parametrize("action", list(Action))
def test_admin_may_act_on_anything_not_tied_to_their_own_role(action):
    if action in (Action.SESSION_CREATE, Action.SESSION_LIST_COUNSELLOR):
        assert not can_perform(ADMIN, action, "someone-else", "admin-1")
    else:
        assert can_perform(ADMIN, action, "someone-else", "admin-1")


def test_student_may_only_book_for_themselves():
    assert can_perform(STUDENT, Action.SESSION_CREATE, "alice", "alice")
    assert not can_perform(STUDENT, Action.SESSION_CREATE, "bob", "alice")
    assert not can_perform(COUNSELLOR, Action.SESSION_CREATE, "c1", "c1")


def test_ownership_rules_need_both_ids():
    assert not can_perform(STUDENT, Action.SESSION_CREATE, None, None)
    assert not can_perform(COUNSELLOR, Action.RESOURCE_UPDATE, None, "c1")


def test_counsellor_manages_only_their_own_resources():
    assert can_perform(COUNSELLOR, Action.RESOURCE_CREATE)
    assert can_perform(COUNSELLOR, Action.RESOURCE_UPDATE, "c1", "c1")
    assert not can_perform(COUNSELLOR, Action.RESOURCE_UPDATE, "c2", "c1")
    assert not can_perform(COUNSELLOR, Action.RESOURCE_DELETE, "c2", "c1")
    assert not can_perform(STUDENT, Action.RESOURCE_CREATE)


def test_session_transitions_by_role():
    # counsellor assigned to the session
    assert can_perform(COUNSELLOR, Action.SESSION_CONFIRM, "c1", "c1")
    assert can_perform(COUNSELLOR, Action.SESSION_COMPLETE, "c1", "c1")
    assert not can_perform(COUNSELLOR, Action.SESSION_CONFIRM, "c2", "c1")
    # student owning the session may cancel but never confirm or complete
    assert can_perform(STUDENT, Action.SESSION_CANCEL, "s1", "s1")
    assert not can_perform(STUDENT, Action.SESSION_CANCEL, "s2", "s1")
    assert not can_perform(STUDENT, Action.SESSION_CONFIRM, "s1", "s1")
    assert not can_perform(STUDENT, Action.SESSION_COMPLETE, "s1", "s1")


def test_admin_only_actions():
    for action in (Action.USER_LIST, Action.USER_CHANGE_ROLE, Action.SESSION_LIST_ALL, Action.ANALYTICS_VIEW):
        assert not can_perform(STUDENT, action, "x", "x")
        assert not can_perform(COUNSELLOR, action, "x", "x")


def test_role_may_be_given_as_string_and_unknown_roles_are_denied():
    assert can_perform("admin", Action.ANALYTICS_VIEW)
    assert not can_perform("superuser", Action.RESOURCE_VIEW)
