"""Writes that race on a unique key: first-time progress rows and registrations."""

from datetime import datetime, timezone

import pytest

from app.db.models import ResourceType, UserRole
from app.db.storage import Storage
from app.errors import ConflictError
from app.services.progress import upsert_progress

T1 = datetime(2030, 1, 1, 9, 0, tzinfo=timezone.utc)
T2 = datetime(2030, 1, 2, 9, 0, tzinfo=timezone.utc)


class StaleEmailLookup(Storage):
    """Storage whose email check ran before another request inserted the row."""

    async def get_user_by_email(self, email: str):
        return None


@pytest.fixture
async def student_and_resource(session_factory, auth_service):
    async with session_factory() as db:
        storage = Storage(db)
        student = await auth_service.register(
            storage,
            email="sam@example.com",
            password="pw12345678",
            first_name="Sam",
            last_name="Lee",
            role=UserRole.STUDENT,
        )
        counsellor = await auth_service.register(
            storage,
            email="cora@example.com",
            password="pw12345678",
            first_name="Cora",
            last_name="Diaz",
            role=UserRole.COUNSELLOR,
        )
        resource = await storage.create_resource(
            title="Worry time", type=ResourceType.WORKSHEET, uploaded_by=counsellor.id
        )
        await storage.commit()
        return student, resource.id


async def test_second_first_write_updates_the_same_row(session_factory, student_and_resource):
    student, resource_id = student_and_resource

    # Two requests that each found no row and both insert
    for value in (40, 70):
        async with session_factory() as db:
            await upsert_progress(Storage(db), student, resource_id=resource_id, progress=value)
            await db.commit()

    async with session_factory() as db:
        rows = await Storage(db).list_progress_for_user(student.id)
    assert [(r.resource_id, r.progress) for r in rows] == [(resource_id, 70)]


async def test_completed_at_survives_repeat_completion(session_factory, student_and_resource):
    student, resource_id = student_and_resource

    async with session_factory() as db:
        storage = Storage(db)
        first = await upsert_progress(storage, student, resource_id=resource_id, progress=100, now=T1)
        assert first.completed_at.replace(tzinfo=None) == T1.replace(tzinfo=None)

        again = await upsert_progress(storage, student, resource_id=resource_id, progress=100, now=T2)
        assert again.completed_at.replace(tzinfo=None) == T1.replace(tzinfo=None)

        lowered = await upsert_progress(storage, student, resource_id=resource_id, progress=60, now=T2)
        assert lowered.completed_at is None
        assert lowered.id == first.id


async def test_duplicate_registration_race_is_a_conflict(session_factory, auth_service, student_and_resource):
    async with session_factory() as db:
        with pytest.raises(ConflictError, match="already exists"):
            await auth_service.register(
                StaleEmailLookup(db),
                email="sam@example.com",
                password="pw12345678",
                first_name="Sam",
                last_name="Again",
                role=UserRole.STUDENT,
            )
        await db.rollback()

    async with session_factory() as db:
        users = await Storage(db).list_users()
    assert [u.email for u in users].count("sam@example.com") == 1
