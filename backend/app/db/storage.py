"""
Storage layer.

One canonical data-access interface over the async SQLAlchemy session.
Route handlers and services never build queries themselves; they call
Storage methods and commit once per request via Storage.commit().

Methods that create or modify rows flush (so generated ids and defaults
are populated) but do not commit.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import and_, case, func, null, or_, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from app.db.models import (
    CounsellingSession,
    Message,
    MessageStatus,
    Resource,
    ResourceType,
    SessionStatus,
    User,
    UserProgress,
    UserRole,
)


@dataclass
class SessionWithUsers:
    """A counselling session joined with both parties' names and emails."""

    session: CounsellingSession
    student_name: str
    student_email: str
    counsellor_name: str
    counsellor_email: str


@dataclass
class ConversationSummary:
    """Latest message exchanged with one partner plus unread count."""

    partner_id: str
    partner_name: str
    last_message: Message
    unread_count: int


class Storage:
    """Data access for users, resources, sessions, messages and progress."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def commit(self) -> None:
        await self.db.commit()

    async def _save(self, obj: Any) -> Any:
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    # =========================================================================
    # USERS
    # =========================================================================

    async def get_user(self, user_id: str) -> User | None:
        return await self.db.get(User, user_id)

    async def get_user_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def create_user(self, **values: Any) -> User:
        return await self._save(User(**values))

    async def list_users(self) -> list[User]:
        result = await self.db.execute(select(User).order_by(User.created_at.asc()))
        return list(result.scalars())

    async def list_users_by_role(self, role: UserRole) -> list[User]:
        result = await self.db.execute(
            select(User).where(User.role == role).order_by(User.last_name, User.first_name)
        )
        return list(result.scalars())

    async def update_user_role(self, user: User, role: UserRole) -> User:
        user.role = role
        return await self._save(user)

    # =========================================================================
    # RESOURCES
    # =========================================================================

    async def create_resource(self, **values: Any) -> Resource:
        return await self._save(Resource(**values))

    async def list_resources(self, resource_type: ResourceType | None = None) -> list[Resource]:
        query = select(Resource).where(Resource.is_active.is_(True))
        if resource_type:
            query = query.where(Resource.type == resource_type)
        query = query.order_by(Resource.created_at.desc(), Resource.id.desc())
        result = await self.db.execute(query)
        return list(result.scalars())

    async def get_resource(self, resource_id: int) -> Resource | None:
        return await self.db.get(Resource, resource_id)

    async def update_resource(self, resource: Resource, changes: dict[str, Any]) -> Resource:
        for key, value in changes.items():
            setattr(resource, key, value)
        return await self._save(resource)

    async def deactivate_resource(self, resource: Resource) -> Resource:
        resource.is_active = False
        return await self._save(resource)

    # =========================================================================
    # COUNSELLING SESSIONS
    # =========================================================================

    async def create_session(self, **values: Any) -> CounsellingSession:
        return await self._save(CounsellingSession(**values))

    async def get_session(self, session_id: int, *, for_update: bool = False) -> CounsellingSession | None:
        query = select(CounsellingSession).where(CounsellingSession.id == session_id)
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def update_session(self, session: CounsellingSession, changes: dict[str, Any]) -> CounsellingSession:
        for key, value in changes.items():
            setattr(session, key, value)
        return await self._save(session)

    async def list_sessions_for_student(self, student_id: str) -> list[CounsellingSession]:
        result = await self.db.execute(
            select(CounsellingSession)
            .where(CounsellingSession.student_id == student_id)
            .order_by(CounsellingSession.scheduled_at.desc())
        )
        return list(result.scalars())

    async def list_sessions_for_counsellor(self, counsellor_id: str) -> list[CounsellingSession]:
        result = await self.db.execute(
            select(CounsellingSession)
            .where(CounsellingSession.counsellor_id == counsellor_id)
            .order_by(CounsellingSession.scheduled_at.desc())
        )
        return list(result.scalars())

    async def list_pending_sessions(self, counsellor_id: str | None = None) -> list[CounsellingSession]:
        query = select(CounsellingSession).where(CounsellingSession.status == SessionStatus.PENDING)
        if counsellor_id:
            query = query.where(CounsellingSession.counsellor_id == counsellor_id)
        result = await self.db.execute(query.order_by(CounsellingSession.scheduled_at.asc()))
        return list(result.scalars())

    async def list_sessions_with_users(self) -> list[SessionWithUsers]:
        student = aliased(User)
        counsellor = aliased(User)
        result = await self.db.execute(
            select(CounsellingSession, student, counsellor)
            .join(student, CounsellingSession.student_id == student.id)
            .join(counsellor, CounsellingSession.counsellor_id == counsellor.id)
            .order_by(CounsellingSession.scheduled_at.desc())
        )
        return [
            SessionWithUsers(
                session=row[0],
                student_name=row[1].full_name,
                student_email=row[1].email,
                counsellor_name=row[2].full_name,
                counsellor_email=row[2].email,
            )
            for row in result.all()
        ]

    # =========================================================================
    # MESSAGES
    # =========================================================================

    async def create_message(self, **values: Any) -> Message:
        return await self._save(Message(**values))

    async def get_message(self, message_id: int) -> Message | None:
        return await self.db.get(Message, message_id)

    async def mark_message_read(self, message: Message) -> Message:
        message.status = MessageStatus.READ
        return await self._save(message)

    async def list_messages_between(self, user_a: str, user_b: str) -> list[Message]:
        result = await self.db.execute(
            select(Message)
            .where(
                or_(
                    and_(Message.sender_id == user_a, Message.receiver_id == user_b),
                    and_(Message.sender_id == user_b, Message.receiver_id == user_a),
                )
            )
            .order_by(Message.created_at.asc(), Message.id.asc())
        )
        return list(result.scalars())

    async def list_conversations(self, user_id: str) -> list[ConversationSummary]:
        """One summary per conversation partner, most recent conversation first."""
        result = await self.db.execute(
            select(Message)
            .where(or_(Message.sender_id == user_id, Message.receiver_id == user_id))
            .order_by(Message.created_at.desc(), Message.id.desc())
        )
        latest: dict[str, Message] = {}
        unread: dict[str, int] = {}
        for message in result.scalars():
            partner_id = message.receiver_id if message.sender_id == user_id else message.sender_id
            latest.setdefault(partner_id, message)
            if message.receiver_id == user_id and message.status == MessageStatus.SENT:
                unread[partner_id] = unread.get(partner_id, 0) + 1

        if not latest:
            return []

        partners = await self.db.execute(select(User).where(User.id.in_(list(latest))))
        names = {user.id: user.full_name for user in partners.scalars()}
        return [
            ConversationSummary(
                partner_id=partner_id,
                partner_name=names.get(partner_id, ""),
                last_message=message,
                unread_count=unread.get(partner_id, 0),
            )
            for partner_id, message in latest.items()
        ]

    # =========================================================================
    # PROGRESS
    # =========================================================================

    async def get_progress(self, user_id: str, resource_id: int) -> UserProgress | None:
        result = await self.db.execute(
            select(UserProgress)
            .where(UserProgress.user_id == user_id, UserProgress.resource_id == resource_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def upsert_progress(
        self,
        *,
        user_id: str,
        resource_id: int,
        progress: int,
        completed_at: datetime | None,
        now: datetime,
    ) -> UserProgress:
        """
        Insert or update the (user, resource) row in one statement.

        Uses INSERT ... ON CONFLICT DO UPDATE on the unique pair, so two
        concurrent first writes end in one row. An existing completed_at is
        kept while progress stays at 100; any lower value clears it.
        """
        insert = pg_insert if self.db.get_bind().dialect.name == "postgresql" else sqlite_insert
        stmt = insert(UserProgress).values(
            user_id=user_id,
            resource_id=resource_id,
            progress=progress,
            completed_at=completed_at,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[UserProgress.user_id, UserProgress.resource_id],
            set_={
                "progress": stmt.excluded.progress,
                "completed_at": case(
                    (
                        stmt.excluded.completed_at.is_not(None),
                        func.coalesce(UserProgress.completed_at, stmt.excluded.completed_at),
                    ),
                    else_=null(),
                ),
                "updated_at": stmt.excluded.updated_at,
            },
        )
        await self.db.execute(stmt)
        return await self.get_progress(user_id, resource_id)

    async def list_progress_for_user(self, user_id: str) -> list[UserProgress]:
        result = await self.db.execute(
            select(UserProgress)
            .where(UserProgress.user_id == user_id)
            .order_by(UserProgress.updated_at.desc(), UserProgress.id.desc())
        )
        return list(result.scalars())

    async def list_progress_for_resource(self, resource_id: int) -> list[UserProgress]:
        result = await self.db.execute(
            select(UserProgress)
            .where(UserProgress.resource_id == resource_id)
            .order_by(UserProgress.updated_at.desc(), UserProgress.id.desc())
        )
        return list(result.scalars())

    # =========================================================================
    # ANALYTICS
    # =========================================================================

    async def get_system_stats(self) -> dict[str, int]:
        async def _count(query) -> int:
            return (await self.db.execute(query)).scalar_one()

        return {
            "total_users": await _count(select(func.count(User.id))),
            "total_students": await _count(
                select(func.count(User.id)).where(User.role == UserRole.STUDENT)
            ),
            "total_counsellors": await _count(
                select(func.count(User.id)).where(User.role == UserRole.COUNSELLOR)
            ),
            "total_sessions": await _count(select(func.count(CounsellingSession.id))),
            "total_resources": await _count(
                select(func.count(Resource.id)).where(Resource.is_active.is_(True))
            ),
            "completed_sessions": await _count(
                select(func.count(CounsellingSession.id)).where(
                    CounsellingSession.status == SessionStatus.COMPLETED
                )
            ),
        }
