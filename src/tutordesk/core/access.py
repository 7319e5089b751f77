"""Session roster and subject access propagation.

Functions here only stage changes on the session (flush); the caller owns the
transaction so an enrollment write and its side effects commit together.

Rows whose JSON sets get rewritten are read with SELECT ... FOR UPDATE and
reloaded over the identity map first, so two grants touching the same user or
session apply one after the other.
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tutordesk.core.errors import NotFoundError
from tutordesk.core.logging import get_logger
from tutordesk.models.tutoring_session import TutoringSession
from tutordesk.models.user import User
from tutordesk.utils.periods import period_bounds

logger = get_logger(__name__)


async def sessions_in_period(
    db: AsyncSession, subject: str, year: int, month: int, for_update: bool = False
) -> list[TutoringSession]:
    """Fetch sessions of a subject dated within the given month.

    With for_update the rows are locked and reloaded for a roster change.
    """
    start, end = period_bounds(year, month)
    stmt = (
        select(TutoringSession)
        .where(
            TutoringSession.subject == subject,
            TutoringSession.date >= start,
            TutoringSession.date < end,
        )
        .order_by(TutoringSession.date)
    )
    if for_update:
        stmt = stmt.with_for_update().execution_options(populate_existing=True)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def enroll_in_sessions(
    db: AsyncSession, user_id: UUID, subject: str, year: int, month: int
) -> int:
    """
    Add a user to the roster of every matching session.

    Users already on a roster are left alone, so calling this twice is a
    no-op the second time.

    Returns:
        Number of rosters that gained the user
    """
    sessions = await sessions_in_period(db, subject, year, month, for_update=True)
    added = 0
    for session in sessions:
        if session.has_student(user_id):
            continue
        # Reassign so the JSON column is marked dirty
        session.enrolled_students = [*session.enrolled_students, str(user_id)]
        added += 1

    await db.flush()
    logger.info(
        "access.sessions_enrolled",
        user_id=str(user_id),
        subject=subject,
        period=f"{year}-{month:02d}",
        matched=len(sessions),
        added=added,
    )
    return added


async def _get_user(db: AsyncSession, user_id: UUID) -> User:
    stmt = (
        select(User)
        .where(User.id == user_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError("User", str(user_id))
    return user


async def add_accessible_subject(db: AsyncSession, user_id: UUID, subject: str) -> bool:
    """Add subject to the user's accessible subjects. Returns False if already present."""
    user = await _get_user(db, user_id)
    if subject in user.accessible_subjects:
        return False

    user.accessible_subjects = [*user.accessible_subjects, subject]
    await db.flush()
    logger.info("access.subject_granted", user_id=str(user_id), subject=subject)
    return True


async def remove_accessible_subject(db: AsyncSession, user_id: UUID, subject: str) -> bool:
    """Remove subject from the user's accessible subjects. Returns False if it was absent."""
    user = await _get_user(db, user_id)
    if subject not in user.accessible_subjects:
        return False

    user.accessible_subjects = [s for s in user.accessible_subjects if s != subject]
    await db.flush()
    logger.info("access.subject_revoked", user_id=str(user_id), subject=subject)
    return True


async def grant(db: AsyncSession, user_id: UUID, subject: str, month: int, year: int) -> None:
    """Give a user the sessions and notes of a subject for one month."""
    await enroll_in_sessions(db, user_id, subject, year, month)
    await add_accessible_subject(db, user_id, subject)
