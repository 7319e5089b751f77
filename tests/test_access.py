"""Tests for session roster and subject access propagation."""

import uuid
from datetime import date

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from tutordesk.core import access
from tutordesk.core.errors import NotFoundError
from tutordesk.models.user import User
from tests.factories import TutoringSessionFactory, UserFactory


class TestSessionsInPeriod:
    """Test the month range used to match sessions."""

    @pytest.mark.asyncio
    async def test_matches_half_open_month_range(self, db_session: AsyncSession) -> None:
        """Test the first day is included and the next month's first day is not."""
        await TutoringSessionFactory.create(db_session, subject="ICT", date=date(2030, 1, 31))
        first = await TutoringSessionFactory.create(
            db_session, subject="ICT", date=date(2030, 2, 1)
        )
        last = await TutoringSessionFactory.create(
            db_session, subject="ICT", date=date(2030, 2, 28)
        )
        await TutoringSessionFactory.create(db_session, subject="ICT", date=date(2030, 3, 1))

        sessions = await access.sessions_in_period(db_session, "ICT", 2030, 2)

        assert [s.id for s in sessions] == [first.id, last.id]

    @pytest.mark.asyncio
    async def test_december_rolls_into_next_year(self, db_session: AsyncSession) -> None:
        december = await TutoringSessionFactory.create(
            db_session, subject="ICT", date=date(2030, 12, 31)
        )
        await TutoringSessionFactory.create(db_session, subject="ICT", date=date(2031, 1, 1))

        sessions = await access.sessions_in_period(db_session, "ICT", 2030, 12)

        assert [s.id for s in sessions] == [december.id]

    @pytest.mark.asyncio
    async def test_filters_by_subject(self, db_session: AsyncSession) -> None:
        await TutoringSessionFactory.create(db_session, subject="Physics", date=date(2030, 5, 5))

        assert await access.sessions_in_period(db_session, "Chemistry", 2030, 5) == []


class TestEnrollInSessions:
    """Test roster appends."""

    @pytest.mark.asyncio
    async def test_adds_user_once(self, db_session: AsyncSession) -> None:
        """Test a second run does not duplicate the roster entry."""
        user = await UserFactory.create(db_session)
        tutoring_session = await TutoringSessionFactory.create(
            db_session, subject="Physics", date=date(2030, 5, 5)
        )

        first = await access.enroll_in_sessions(db_session, user.id, "Physics", 2030, 5)
        second = await access.enroll_in_sessions(db_session, user.id, "Physics", 2030, 5)
        await db_session.commit()

        assert first == 1
        assert second == 0
        await db_session.refresh(tutoring_session)
        assert tutoring_session.enrolled_students == [str(user.id)]

    @pytest.mark.asyncio
    async def test_keeps_existing_students(self, db_session: AsyncSession) -> None:
        existing = str(uuid.uuid4())
        user = await UserFactory.create(db_session)
        tutoring_session = await TutoringSessionFactory.create(
            db_session, subject="Physics", date=date(2030, 5, 5), enrolled_students=[existing]
        )

        await access.enroll_in_sessions(db_session, user.id, "Physics", 2030, 5)
        await db_session.commit()

        await db_session.refresh(tutoring_session)
        assert tutoring_session.enrolled_students == [existing, str(user.id)]

    @pytest.mark.asyncio
    async def test_no_matching_sessions(self, db_session: AsyncSession) -> None:
        user = await UserFactory.create(db_session)

        assert await access.enroll_in_sessions(db_session, user.id, "Physics", 2030, 5) == 0


class TestSubjectAccess:
    """Test accessible subject set operations."""

    @pytest.mark.asyncio
    async def test_add_is_idempotent(self, db_session: AsyncSession) -> None:
        user = await UserFactory.create(db_session, accessible_subjects=["ICT"])

        assert await access.add_accessible_subject(db_session, user.id, "Physics") is True
        assert await access.add_accessible_subject(db_session, user.id, "Physics") is False
        await db_session.commit()

        await db_session.refresh(user)
        assert user.accessible_subjects == ["ICT", "Physics"]

    @pytest.mark.asyncio
    async def test_remove_absent_subject_is_noop(self, db_session: AsyncSession) -> None:
        user = await UserFactory.create(db_session, accessible_subjects=["ICT"])

        assert await access.remove_accessible_subject(db_session, user.id, "Physics") is False
        assert await access.remove_accessible_subject(db_session, user.id, "ICT") is True
        await db_session.commit()

        await db_session.refresh(user)
        assert user.accessible_subjects == []

    @pytest.mark.asyncio
    async def test_unknown_user_raises_not_found(self, db_session: AsyncSession) -> None:
        with pytest.raises(NotFoundError):
            await access.add_accessible_subject(db_session, uuid.uuid4(), "ICT")


class TestGrant:
    """Test the combined grant used on approval."""

    @pytest.mark.asyncio
    async def test_grant_updates_rosters_and_subjects(self, db_session: AsyncSession) -> None:
        user = await UserFactory.create(db_session)
        tutoring_session = await TutoringSessionFactory.create(
            db_session, subject="Geography", date=date(2030, 8, 12)
        )

        await access.grant(db_session, user.id, "Geography", month=8, year=2030)
        await db_session.commit()

        await db_session.refresh(user)
        await db_session.refresh(tutoring_session)
        assert user.accessible_subjects == ["Geography"]
        assert tutoring_session.enrolled_students == [str(user.id)]


class TestInterleavedSessions:
    """Test two transactions that both read a row before either writes it."""

    @pytest.mark.asyncio
    async def test_concurrent_grants_keep_both_subjects(
        self, db_session: AsyncSession, session_factory
    ) -> None:
        """Test approvals from two admins for the same student both land."""
        student = await UserFactory.create(db_session)

        async with session_factory() as first, session_factory() as second:
            await first.get(User, student.id)
            await second.get(User, student.id)

            await access.add_accessible_subject(first, student.id, "Physics")
            await first.commit()
            await access.add_accessible_subject(second, student.id, "Chemistry")
            await second.commit()

        await db_session.refresh(student)
        assert set(student.accessible_subjects) == {"Physics", "Chemistry"}

    @pytest.mark.asyncio
    async def test_concurrent_revoke_keeps_other_grant(
        self, db_session: AsyncSession, session_factory
    ) -> None:
        student = await UserFactory.create(db_session, accessible_subjects=["ICT"])

        async with session_factory() as first, session_factory() as second:
            await first.get(User, student.id)
            await second.get(User, student.id)

            await access.add_accessible_subject(first, student.id, "Physics")
            await first.commit()
            await access.remove_accessible_subject(second, student.id, "ICT")
            await second.commit()

        await db_session.refresh(student)
        assert student.accessible_subjects == ["Physics"]

    @pytest.mark.asyncio
    async def test_concurrent_roster_adds_keep_both_students(
        self, db_session: AsyncSession, session_factory
    ) -> None:
        """Test two students enrolling into the same session both end up on it."""
        nimal = await UserFactory.create(db_session, email="nimal@example.com")
        kamala = await UserFactory.create(db_session, email="kamala@example.com")
        tutoring_session = await TutoringSessionFactory.create(
            db_session, subject="Physics", date=date(2030, 5, 5)
        )

        async with session_factory() as first, session_factory() as second:
            await access.sessions_in_period(first, "Physics", 2030, 5)
            await access.sessions_in_period(second, "Physics", 2030, 5)

            await access.enroll_in_sessions(first, nimal.id, "Physics", 2030, 5)
            await first.commit()
            await access.enroll_in_sessions(second, kamala.id, "Physics", 2030, 5)
            await second.commit()

        await db_session.refresh(tutoring_session)
        assert set(tutoring_session.enrolled_students) == {str(nimal.id), str(kamala.id)}
