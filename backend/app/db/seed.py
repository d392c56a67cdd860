"""Development seed accounts."""

import logging

from app.db.models import UserRole
from app.db.storage import Storage
from app.services.auth_service import AuthService

logger = logging.getLogger(__name__)

DEV_USERS = [
    ("admin@example.com", "Dev", "Admin", UserRole.ADMIN),
    ("student@example.com", "Student", "Test", UserRole.STUDENT),
    ("counsellor@example.com", "Counsellor", "Test", UserRole.COUNSELLOR),
]


async def seed_dev_users(storage: Storage, auth: AuthService, password: str) -> int:
    """Create the development accounts that don't exist yet. Returns how many were created."""
    created = 0
    for email, first_name, last_name, role in DEV_USERS:
        if await storage.get_user_by_email(email) is not None:
            continue
        await auth.register(
            storage,
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            role=role,
        )
        created += 1
    await storage.commit()
    if created:
        logger.info("Seeded %d development users", created)
    return created
