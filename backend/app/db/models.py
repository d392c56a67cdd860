"""
SQLAlchemy 2.0 Models for the Youth Empowerment Hub.

Uses modern declarative syntax with Mapped[] type annotations.
Users carry opaque string ids; every other entity uses an integer
autoincrement primary key.
"""

import secrets
from datetime import datetime, timezone
from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_user_id() -> str:
    return secrets.token_hex(16)


def _enum_values(enum_cls: type[PyEnum]) -> list[str]:
    return [member.value for member in enum_cls]


# =============================================================================
# ENUMS
# =============================================================================


class UserRole(str, PyEnum):
    """Role of an account on the platform."""

    STUDENT = "student"
    COUNSELLOR = "counsellor"
    ADMIN = "admin"


class SessionStatus(str, PyEnum):
    """Lifecycle status of a counselling session."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class SessionType(str, PyEnum):
    INDIVIDUAL = "individual"
    GROUP = "group"


class ResourceType(str, PyEnum):
    """Kind of CBT resource."""

    WORKSHEET = "worksheet"
    VIDEO = "video"
    AUDIO = "audio"
    INTERACTIVE = "interactive"


class MessageStatus(str, PyEnum):
    SENT = "sent"
    READ = "read"


# =============================================================================
# MODELS
# =============================================================================


class User(Base):
    """
    Platform account.

    Email is unique and stored lower-cased. The password is kept as a
    SHA-256 digest of password + salt.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_user_id)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    profile_image_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role", values_callable=_enum_values),
        nullable=False,
        default=UserRole.STUDENT,
    )
    password_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    password_salt: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Resource(Base):
    """
    CBT resource (worksheet, video, audio or interactive exercise).

    Deleting a resource only clears is_active.
    """

    __tablename__ = "resources"
    __table_args__ = (Index("idx_resources_active_type", "is_active", "type"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    type: Mapped[ResourceType] = mapped_column(
        Enum(ResourceType, name="resource_type", values_callable=_enum_values), nullable=False
    )
    file_url: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True)
    duration: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # minutes
    uploaded_by: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id"), nullable=False, index=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    uploader: Mapped["User"] = relationship("User")


class CounsellingSession(Base):
    """Scheduled appointment between a student and a counsellor."""

    __tablename__ = "counselling_sessions"
    __table_args__ = (
        Index("idx_counselling_sessions_status", "status", "scheduled_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id"), nullable=False, index=True
    )
    counsellor_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id"), nullable=False, index=True
    )
    scheduled_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[SessionStatus] = mapped_column(
        Enum(SessionStatus, name="session_status", values_callable=_enum_values),
        nullable=False,
        default=SessionStatus.PENDING,
    )
    type: Mapped[SessionType] = mapped_column(
        Enum(SessionType, name="session_type", values_callable=_enum_values),
        nullable=False,
        default=SessionType.INDIVIDUAL,
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)  # counsellor-facing
    student_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    student: Mapped["User"] = relationship("User", foreign_keys=[student_id])
    counsellor: Mapped["User"] = relationship("User", foreign_keys=[counsellor_id])


class Message(Base):
    """Direct message between two users."""

    __tablename__ = "messages"
    __table_args__ = (
        Index("idx_messages_pair", "sender_id", "receiver_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sender_id: Mapped[str] = mapped_column(String(64), ForeignKey("users.id"), nullable=False)
    receiver_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id"), nullable=False, index=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[MessageStatus] = mapped_column(
        Enum(MessageStatus, name="message_status", values_callable=_enum_values),
        nullable=False,
        default=MessageStatus.SENT,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)


class UserProgress(Base):
    """Completion percentage of one user on one resource."""

    __tablename__ = "user_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "resource_id", name="unique_user_resource_progress"),
        CheckConstraint("progress >= 0 AND progress <= 100", name="progress_percentage"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    resource_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("resources.id"), nullable=False, index=True
    )
    progress: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )


class AuthToken(Base):
    """
    Persisted bearer token for the database token store.

    Only the SHA-256 digest of the token is stored.
    """

    __tablename__ = "auth_tokens"

    token_hash: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
