"""
Counselling session routes.

Endpoints:
- POST /api/sessions - Student books a session (status starts as pending)
- GET /api/sessions/student - Caller's own sessions as a student
- GET /api/sessions/counsellor - Sessions assigned to the calling counsellor
- GET /api/sessions/pending - Pending sessions (admin: all, counsellor: assigned)
- GET /api/sessions/all - Every session with both parties' names (admin)
- GET /api/sessions/{id} - One session, for its parties or an admin
- PATCH /api/sessions/{id} - Status transition and/or notes

Booking and status changes notify the people involved in the background.
"""

from fastapi import APIRouter, BackgroundTasks, status

from app.api.deps import CurrentUser, NotifierDep, StorageDep, require
from app.db.models import UserRole
from app.schemas.sessions import SessionCreate, SessionRead, SessionUpdate, SessionWithUsersRead
from app.services import booking
from app.services.permissions import Action

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


@router.post("", response_model=SessionRead, status_code=status.HTTP_201_CREATED)
async def create_session(
    data: SessionCreate,
    current_user: CurrentUser,
    storage: StorageDep,
    notifier: NotifierDep,
    background_tasks: BackgroundTasks,
) -> SessionRead:
    """Book a session with a counsellor. Students only, for themselves."""
    session = await booking.create_session(
        storage,
        current_user,
        counsellor_id=data.counsellor_id,
        scheduled_at=data.scheduled_at,
        student_id=data.student_id,
        session_type=data.type,
        notes=data.notes,
        student_notes=data.student_notes,
    )
    counsellor = await storage.get_user(session.counsellor_id)
    await storage.commit()

    background_tasks.add_task(
        notifier.notify_session_booked,
        session_id=session.id,
        student_id=current_user.id,
        student_name=current_user.full_name,
        counsellor_id=counsellor.id,
        counsellor_name=counsellor.full_name,
        scheduled_at=session.scheduled_at,
    )
    return SessionRead.model_validate(session)


@router.get("/student", response_model=list[SessionRead])
async def list_student_sessions(current_user: CurrentUser, storage: StorageDep) -> list[SessionRead]:
    """Sessions booked by the caller, latest slot first."""
    return [SessionRead.model_validate(s) for s in await storage.list_sessions_for_student(current_user.id)]


@router.get("/counsellor", response_model=list[SessionRead])
async def list_counsellor_sessions(current_user: CurrentUser, storage: StorageDep) -> list[SessionRead]:
    """Sessions assigned to the calling counsellor."""
    require(current_user, Action.SESSION_LIST_COUNSELLOR)
    return [SessionRead.model_validate(s) for s in await storage.list_sessions_for_counsellor(current_user.id)]


@router.get("/pending", response_model=list[SessionRead])
async def list_pending_sessions(current_user: CurrentUser, storage: StorageDep) -> list[SessionRead]:
    """Pending sessions, earliest slot first. Counsellors only see their own."""
    require(current_user, Action.SESSION_LIST_PENDING)
    counsellor_id = current_user.id if current_user.role == UserRole.COUNSELLOR else None
    return [SessionRead.model_validate(s) for s in await storage.list_pending_sessions(counsellor_id)]


@router.get("/all", response_model=list[SessionWithUsersRead])
async def list_all_sessions(current_user: CurrentUser, storage: StorageDep) -> list[SessionWithUsersRead]:
    """Every session joined with student and counsellor details. Admin only."""
    require(current_user, Action.SESSION_LIST_ALL)
    rows = await storage.list_sessions_with_users()
    return [
        SessionWithUsersRead(
            id=row.session.id,
            scheduled_at=row.session.scheduled_at,
            status=row.session.status,
            type=row.session.type,
            notes=row.session.notes,
            student_id=row.session.student_id,
            counsellor_id=row.session.counsellor_id,
            student_name=row.student_name,
            student_email=row.student_email,
            counsellor_name=row.counsellor_name,
            counsellor_email=row.counsellor_email,
        )
        for row in rows
    ]


@router.get("/{session_id}", response_model=SessionRead)
async def get_session(session_id: int, current_user: CurrentUser, storage: StorageDep) -> SessionRead:
    session = await booking.get_session_for(storage, current_user, session_id)
    return SessionRead.model_validate(session)


@router.patch("/{session_id}", response_model=SessionRead)
async def update_session(
    session_id: int,
    data: SessionUpdate,
    current_user: CurrentUser,
    storage: StorageDep,
    notifier: NotifierDep,
    background_tasks: BackgroundTasks,
) -> SessionRead:
    """
    Update a session.

    status must follow pending -> confirmed -> completed, with cancelled
    reachable from pending or confirmed. Confirming and completing are for
    the assigned counsellor or an admin; the student may cancel.
    """
    session, previous_status = await booking.update_session(
        storage,
        current_user,
        session_id,
        data.model_dump(exclude_unset=True),
    )
    await storage.commit()

    if previous_status is not None:
        recipients = {session.student_id, session.counsellor_id} - {current_user.id}
        for user_id in sorted(recipients):
            background_tasks.add_task(
                notifier.notify_session_updated,
                user_id=user_id,
                session_id=session.id,
                status=session.status.value,
                scheduled_at=session.scheduled_at,
            )
    return SessionRead.model_validate(session)
