"""
Authorization predicate.

Every role check on the platform goes through can_perform(). The rules
are a table: for each action, the roles that may always perform it and
the roles that may perform it only on something they own.

What "owns" means depends on the action and is decided by the caller:
for session actions the owner id passed in is the session's student id
when the caller is a student and its counsellor id when the caller is a
counsellor; for resources and per-resource progress it is the uploader;
for messages the receiver.
"""

from enum import Enum

from app.db.models import UserRole


class Action(str, Enum):
    """Operations subject to authorization."""

    # Users
    USER_LIST = "user:list"
    USER_CHANGE_ROLE = "user:change_role"
    # Resources
    RESOURCE_VIEW = "resource:view"
    RESOURCE_CREATE = "resource:create"
    RESOURCE_UPDATE = "resource:update"
    RESOURCE_DELETE = "resource:delete"
    RESOURCE_UPLOAD = "resource:upload"
    # Counselling sessions
    SESSION_CREATE = "session:create"
    SESSION_VIEW = "session:view"
    SESSION_LIST_COUNSELLOR = "session:list_counsellor"
    SESSION_LIST_PENDING = "session:list_pending"
    SESSION_LIST_ALL = "session:list_all"
    SESSION_CONFIRM = "session:confirm"
    SESSION_COMPLETE = "session:complete"
    SESSION_CANCEL = "session:cancel"
    SESSION_EDIT_NOTES = "session:edit_notes"
    SESSION_EDIT_STUDENT_NOTES = "session:edit_student_notes"
    # Messages
    MESSAGE_SEND = "message:send"
    MESSAGE_MARK_READ = "message:mark_read"
    # Progress
    PROGRESS_VIEW_RESOURCE = "progress:view_resource"
    # Analytics
    ANALYTICS_VIEW = "analytics:view"


_STUDENT = UserRole.STUDENT
_COUNSELLOR = UserRole.COUNSELLOR
_ADMIN = UserRole.ADMIN
_EVERYONE = frozenset(UserRole)

# action -> (roles always allowed, roles allowed only as owner)
_RULES: dict[Action, tuple[frozenset[UserRole], frozenset[UserRole]]] = {
    Action.USER_LIST: (frozenset({_ADMIN}), frozenset()),
    Action.USER_CHANGE_ROLE: (frozenset({_ADMIN}), frozenset()),
    Action.RESOURCE_VIEW: (_EVERYONE, frozenset()),
    Action.RESOURCE_CREATE: (frozenset({_COUNSELLOR, _ADMIN}), frozenset()),
    Action.RESOURCE_UPDATE: (frozenset({_ADMIN}), frozenset({_COUNSELLOR})),
    Action.RESOURCE_DELETE: (frozenset({_ADMIN}), frozenset({_COUNSELLOR})),
    Action.RESOURCE_UPLOAD: (frozenset({_COUNSELLOR, _ADMIN}), frozenset()),
    Action.SESSION_CREATE: (frozenset(), frozenset({_STUDENT})),
    Action.SESSION_VIEW: (frozenset({_ADMIN}), frozenset({_STUDENT, _COUNSELLOR})),
    Action.SESSION_LIST_COUNSELLOR: (frozenset({_COUNSELLOR}), frozenset()),
    Action.SESSION_LIST_PENDING: (frozenset({_COUNSELLOR, _ADMIN}), frozenset()),
    Action.SESSION_LIST_ALL: (frozenset({_ADMIN}), frozenset()),
    Action.SESSION_CONFIRM: (frozenset({_ADMIN}), frozenset({_COUNSELLOR})),
    Action.SESSION_COMPLETE: (frozenset({_ADMIN}), frozenset({_COUNSELLOR})),
    Action.SESSION_CANCEL: (frozenset({_ADMIN}), frozenset({_COUNSELLOR, _STUDENT})),
    Action.SESSION_EDIT_NOTES: (frozenset({_ADMIN}), frozenset({_COUNSELLOR})),
    Action.SESSION_EDIT_STUDENT_NOTES: (frozenset({_ADMIN}), frozenset({_STUDENT})),
    Action.MESSAGE_SEND: (_EVERYONE, frozenset()),
    Action.MESSAGE_MARK_READ: (frozenset({_ADMIN}), frozenset({_STUDENT, _COUNSELLOR})),
    Action.PROGRESS_VIEW_RESOURCE: (frozenset({_ADMIN}), frozenset({_COUNSELLOR})),
    Action.ANALYTICS_VIEW: (frozenset({_ADMIN}), frozenset()),
}


def can_perform(
    role: UserRole | str,
    action: Action,
    resource_owner_id: str | None = None,
    caller_id: str | None = None,
) -> bool:
    """
    Decide whether a caller with `role` may perform `action`.

    Ownership-gated rules pass only when both ids are given and equal.
    Unknown roles are denied.
    """
    try:
        role = UserRole(role)
    except ValueError:
        return False

    always, as_owner = _RULES[action]
    if role in always:
        return True
    if role in as_owner:
        return resource_owner_id is not None and resource_owner_id == caller_id
    return False
