"""Initial schema with all tables.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-18

This migration creates the complete Youth Empowerment Hub schema:
- Enums: user_role, session_status, session_type, resource_type, message_status
- Tables: users, resources, counselling_sessions, messages, user_progress, auth_tokens
- Indexes: lookup indexes used by the session, message and progress listings
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ==========================================================================
    # ENUMS
    # ==========================================================================
    user_role = postgresql.ENUM("student", "counsellor", "admin", name="user_role", create_type=False)
    session_status = postgresql.ENUM(
        "pending", "confirmed", "completed", "cancelled", name="session_status", create_type=False
    )
    session_type = postgresql.ENUM("individual", "group", name="session_type", create_type=False)
    resource_type = postgresql.ENUM(
        "worksheet", "video", "audio", "interactive", name="resource_type", create_type=False
    )
    message_status = postgresql.ENUM("sent", "read", name="message_status", create_type=False)
    for enum in (user_role, session_status, session_type, resource_type, message_status):
        enum.create(op.get_bind(), checkfirst=True)

    # ==========================================================================
    # USERS TABLE
    # ==========================================================================
    op.create_table(
        "users",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(255), nullable=False),
        sa.Column("last_name", sa.String(255), nullable=False),
        sa.Column("profile_image_url", sa.String(1024), nullable=True),
        sa.Column("role", user_role, nullable=False, server_default="student"),
        sa.Column("password_hash", sa.String(64), nullable=False),
        sa.Column("password_salt", sa.String(64), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("NOW()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("NOW()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # ==========================================================================
    # RESOURCES TABLE
    # ==========================================================================
    op.create_table(
        "resources",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("type", resource_type, nullable=False),
        sa.Column("file_url", sa.String(2048), nullable=True),
        sa.Column("duration", sa.Integer(), nullable=True),
        sa.Column("uploaded_by", sa.String(64), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("NOW()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("NOW()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["uploaded_by"], ["users.id"]),
    )
    op.create_index("ix_resources_uploaded_by", "resources", ["uploaded_by"])
    op.create_index("idx_resources_active_type", "resources", ["is_active", "type"])

    # ==========================================================================
    # COUNSELLING_SESSIONS TABLE
    # ==========================================================================
    op.create_table(
        "counselling_sessions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("student_id", sa.String(64), nullable=False),
        sa.Column("counsellor_id", sa.String(64), nullable=False),
        sa.Column("scheduled_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", session_status, nullable=False, server_default="pending"),
        sa.Column("type", session_type, nullable=False, server_default="individual"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("student_notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("NOW()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("NOW()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["student_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["counsellor_id"], ["users.id"]),
    )
    op.create_index("ix_counselling_sessions_student_id", "counselling_sessions", ["student_id"])
    op.create_index("ix_counselling_sessions_counsellor_id", "counselling_sessions", ["counsellor_id"])
    op.create_index("idx_counselling_sessions_status", "counselling_sessions", ["status", "scheduled_at"])

    # ==========================================================================
    # MESSAGES TABLE
    # ==========================================================================
    op.create_table(
        "messages",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("sender_id", sa.String(64), nullable=False),
        sa.Column("receiver_id", sa.String(64), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("status", message_status, nullable=False, server_default="sent"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("NOW()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["sender_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["receiver_id"], ["users.id"]),
    )
    op.create_index("ix_messages_receiver_id", "messages", ["receiver_id"])
    op.create_index("idx_messages_pair", "messages", ["sender_id", "receiver_id", "created_at"])

    # ==========================================================================
    # USER_PROGRESS TABLE
    # ==========================================================================
    op.create_table(
        "user_progress",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("resource_id", sa.Integer(), nullable=False),
        sa.Column("progress", sa.Integer(), server_default="0", nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("NOW()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("NOW()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["resource_id"], ["resources.id"]),
        sa.UniqueConstraint("user_id", "resource_id", name="unique_user_resource_progress"),
        sa.CheckConstraint("progress >= 0 AND progress <= 100", name="progress_percentage"),
    )
    op.create_index("ix_user_progress_user_id", "user_progress", ["user_id"])
    op.create_index("ix_user_progress_resource_id", "user_progress", ["resource_id"])

    # ==========================================================================
    # AUTH_TOKENS TABLE
    # ==========================================================================
    op.create_table(
        "auth_tokens",
        sa.Column("token_hash", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("NOW()"), nullable=False),
        sa.PrimaryKeyConstraint("token_hash"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_auth_tokens_user_id", "auth_tokens", ["user_id"])
    op.create_index("ix_auth_tokens_expires_at", "auth_tokens", ["expires_at"])


def downgrade() -> None:
    op.drop_table("auth_tokens")
    op.drop_table("user_progress")
    op.drop_table("messages")
    op.drop_table("counselling_sessions")
    op.drop_table("resources")
    op.drop_table("users")

    for name in ("message_status", "resource_type", "session_type", "session_status", "user_role"):
        op.execute(f"DROP TYPE IF EXISTS {name}")
