"""
Counselling-session booking and lifecycle.

Status moves along a fixed edge set:

    pending   -> confirmed | cancelled
    confirmed -> completed | cancelled

completed and cancelled are terminal. Each edge has its own permission
(see app.services.permissions), so a student may cancel their own
session but never confirm or complete one.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from app.db.models import CounsellingSession, SessionStatus, SessionType, User, UserRole
from app.db.storage import Storage
from app.errors import AuthorizationError, NotFoundError, ValidationError
from app.services.permissions import Action, can_perform

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[SessionStatus, frozenset[SessionStatus]] = {
    SessionStatus.PENDING: frozenset({SessionStatus.CONFIRMED, SessionStatus.CANCELLED}),
    SessionStatus.CONFIRMED: frozenset({SessionStatus.COMPLETED, SessionStatus.CANCELLED}),
    SessionStatus.COMPLETED: frozenset(),
    SessionStatus.CANCELLED: frozenset(),
}

_TRANSITION_ACTIONS: dict[SessionStatus, Action] = {
    SessionStatus.CONFIRMED: Action.SESSION_CONFIRM,
    SessionStatus.COMPLETED: Action.SESSION_COMPLETE,
    SessionStatus.CANCELLED: Action.SESSION_CANCEL,
}


def is_valid_transition(current: SessionStatus, target: SessionStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def validate_transition(current: SessionStatus, target: SessionStatus) -> None:
    """Raise ValidationError unless current -> target is an allowed edge."""
    if not is_valid_transition(current, target):
        raise ValidationError(
            f"Cannot change session status from {current.value} to {target.value}"
        )


def session_owner_for(user: User, session: CounsellingSession) -> str | None:
    """The id that counts as 'owner' of a session for the caller's role."""
    if user.role == UserRole.STUDENT:
        return session.student_id
    if user.role == UserRole.COUNSELLOR:
        return session.counsellor_id
    return None


def _require(user: User, action: Action, owner_id: str | None, message: str) -> None:
    if not can_perform(user.role, action, owner_id, user.id):
        raise AuthorizationError(message)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


async def create_session(
    storage: Storage,
    caller: User,
    *,
    counsellor_id: str,
    scheduled_at: datetime,
    student_id: str | None = None,
    session_type: SessionType = SessionType.INDIVIDUAL,
    notes: str | None = None,
    student_notes: str | None = None,
    now: datetime | None = None,
) -> CounsellingSession:
    """
    Book a session for the calling student.

    student_id defaults to the caller and, if given, must name the caller.
    The counsellor must exist with the counsellor role, and the slot must
    lie in the future.
    """
    student_id = student_id or caller.id
    if caller.role != UserRole.STUDENT:
        raise AuthorizationError("Only students can book sessions")
    _require(caller, Action.SESSION_CREATE, student_id, "Students can only book sessions for themselves")

    counsellor = await storage.get_user(counsellor_id)
    if counsellor is None or counsellor.role != UserRole.COUNSELLOR:
        raise ValidationError("counsellorId must refer to an existing counsellor")

    now = now or datetime.now(timezone.utc)
    scheduled_at = _as_utc(scheduled_at)
    if scheduled_at <= now:
        raise ValidationError("scheduledAt must be in the future")

    session = await storage.create_session(
        student_id=student_id,
        counsellor_id=counsellor.id,
        scheduled_at=scheduled_at,
        status=SessionStatus.PENDING,
        type=session_type,
        notes=notes,
        student_notes=student_notes,
    )
    logger.info(
        "Session %s booked: student=%s counsellor=%s at %s",
        session.id, student_id, counsellor.id, scheduled_at.isoformat(),
    )
    return session


async def get_session_for(storage: Storage, caller: User, session_id: int, *, for_update: bool = False) -> CounsellingSession:
    """Fetch a session the caller is allowed to see, or raise NotFound/Authorization."""
    session = await storage.get_session(session_id, for_update=for_update)
    if session is None:
        raise NotFoundError("Session not found")
    _require(caller, Action.SESSION_VIEW, session_owner_for(caller, session), "Access denied")
    return session


async def update_session(
    storage: Storage,
    caller: User,
    session_id: int,
    patch: dict[str, Any],
) -> tuple[CounsellingSession, SessionStatus | None]:
    """
    Apply a partial update to a session.

    `patch` may hold status, notes and student_notes. Returns the updated
    session and its previous status when the status changed (else None).
    """
    session = await get_session_for(storage, caller, session_id, for_update=True)
    owner_id = session_owner_for(caller, session)
    changes: dict[str, Any] = {}
    previous_status: SessionStatus | None = None

    target = patch.get("status")
    if target is not None:
        target = SessionStatus(target)
        # Re-sending the current status is not an edge either
        validate_transition(session.status, target)
        _require(
            caller,
            _TRANSITION_ACTIONS[target],
            owner_id,
            f"You are not allowed to mark this session as {target.value}",
        )
        previous_status = session.status
        changes["status"] = target

    if "notes" in patch:
        _require(caller, Action.SESSION_EDIT_NOTES, owner_id, "Only the counsellor can edit session notes")
        changes["notes"] = patch["notes"]

    if "student_notes" in patch:
        _require(
            caller,
            Action.SESSION_EDIT_STUDENT_NOTES,
            owner_id,
            "Only the student can edit their notes",
        )
        changes["student_notes"] = patch["student_notes"]

    if changes:
        session = await storage.update_session(session, changes)
    if previous_status is not None:
        logger.info(
            "Session %s status %s -> %s by user %s",
            session.id, previous_status.value, session.status.value, caller.id,
        )
    return session, previous_status
