"""API routes package."""

from app.api.routes import (
    analytics,
    auth,
    messages,
    progress,
    resources,
    sessions,
    uploads,
    users,
)

__all__ = [
    "analytics",
    "auth",
    "messages",
    "progress",
    "resources",
    "sessions",
    "uploads",
    "users",
]
