"""Domain services and external integrations."""

from app.services.notifications import notification_service
from app.services.uploads import upload_service

__all__ = ["notification_service", "upload_service"]
