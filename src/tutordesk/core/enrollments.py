"""Enrollment request workflow: submission, review and admin maintenance."""

from typing import Any
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tutordesk.core import access
from tutordesk.core.errors import (
    DatabaseError,
    ForbiddenError,
    NotFoundError,
    PastPeriodError,
    ValidationError,
)
from tutordesk.core.logging import get_logger
from tutordesk.models.enrollment import Enrollment
from tutordesk.models.enrollment_schemas import EnrollmentSubmission, EnrollmentUpdate
from tutordesk.models.enums import REVIEW_DECISIONS, EnrollmentStatus
from tutordesk.models.user import User
from tutordesk.utils.datetime import now_utc
from tutordesk.utils.periods import is_past_period

logger = get_logger(__name__)

REQUIRED_FIELDS = ("message", "subject", "month", "year", "image")


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _format_errors(exc: PydanticValidationError) -> list[dict[str, str]]:
    return [
        {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
        for error in exc.errors()
    ]


def check_required_fields(fields: dict[str, Any]) -> None:
    """Reject a submission with any required field absent or blank."""
    missing = [name for name in REQUIRED_FIELDS if _is_blank(fields.get(name))]
    if missing:
        logger.info("enrollment.missing_fields", missing=missing)
        raise ValidationError(
            "All fields are required (including image)",
            details={"missing": missing},
        )


def parse_submission(
    message: str, subject: str, month: str | int, year: str | int
) -> EnrollmentSubmission:
    """
    Validate raw form values into a submission.

    Raises:
        ValidationError: Unknown subject, non-integer or out-of-range month/year
        PastPeriodError: The month is already over
    """
    try:
        submission = EnrollmentSubmission(
            message=message,
            subject=subject,
            month=month,
            year=year,
        )
    except PydanticValidationError as exc:
        raise ValidationError(
            "Validation failed",
            details={"errors": _format_errors(exc)},
        ) from exc

    if is_past_period(submission.year, submission.month):
        raise PastPeriodError(submission.month, submission.year)

    return submission


def ensure_admin(user: User, action: str) -> None:
    if not user.is_admin:
        logger.warning(
            "auth.permission_denied",
            user_id=str(user.id),
            required_role="admin",
            user_role=user.role,
            action=action,
        )
        raise ForbiddenError()


async def _commit(db: AsyncSession, action: str) -> None:
    try:
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error("enrollment.commit_failed", action=action, error=str(exc))
        raise DatabaseError(f"Failed to {action}") from exc


async def _load_people(db: AsyncSession, enrollment: Enrollment) -> Enrollment:
    await db.refresh(enrollment, attribute_names=["user", "reviewer"])
    return enrollment


async def get_enrollment(db: AsyncSession, enrollment_id: str) -> Enrollment:
    """Fetch an enrollment by id or raise NotFoundError."""
    try:
        enrollment_uuid = UUID(enrollment_id)
    except (ValueError, TypeError):
        raise ValidationError(
            "Invalid enrollment_id format",
            details={"enrollment_id": enrollment_id},
        )

    enrollment = await db.get(Enrollment, enrollment_uuid)
    if enrollment is None:
        raise NotFoundError("Enrollment", enrollment_id)
    return enrollment


async def create_enrollment(
    db: AsyncSession,
    user: User,
    submission: EnrollmentSubmission,
    image_url: str,
) -> Enrollment:
    """
    Store a pending enrollment and put the student on the month's session rosters.

    Roster changes commit together with the enrollment.
    """
    enrollment = Enrollment(
        user_id=user.id,
        message=submission.message,
        subject=submission.subject.value,
        month=submission.month,
        year=submission.year,
        image_url=image_url,
        status=EnrollmentStatus.PENDING.value,
    )
    db.add(enrollment)
    await db.flush()

    await access.enroll_in_sessions(
        db, user.id, enrollment.subject, enrollment.year, enrollment.month
    )
    await _commit(db, "submit enrollment")
    await _load_people(db, enrollment)

    logger.info(
        "enrollment.created",
        enrollment_id=str(enrollment.id),
        user_id=str(user.id),
        subject=enrollment.subject,
        period=f"{enrollment.year}-{enrollment.month:02d}",
    )
    return enrollment


async def list_enrollments(db: AsyncSession, acting_user: User) -> list[Enrollment]:
    """All enrollments, newest first. Admin only."""
    ensure_admin(acting_user, "list_enrollments")

    stmt = select(Enrollment).order_by(Enrollment.created_at.desc(), Enrollment.id)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def update_enrollment_status(
    db: AsyncSession,
    enrollment_id: str,
    status: str,
    acting_user: User,
) -> Enrollment:
    """
    Record an admin decision and sync the student's access.

    Approval grants the subject and the month's sessions. Rejection revokes
    the subject even when another approved enrollment still covers it.
    """
    ensure_admin(acting_user, "update_enrollment_status")

    allowed = [decision.value for decision in REVIEW_DECISIONS]
    if status not in allowed:
        raise ValidationError("Invalid status", details={"status": status, "allowed": allowed})

    enrollment = await get_enrollment(db, enrollment_id)
    previous_status = enrollment.status

    enrollment.status = status
    enrollment.reviewed_by = acting_user.id
    enrollment.reviewed_at = now_utc()
    await db.flush()

    if status == EnrollmentStatus.APPROVED:
        await access.grant(
            db, enrollment.user_id, enrollment.subject, enrollment.month, enrollment.year
        )
    else:
        await access.remove_accessible_subject(db, enrollment.user_id, enrollment.subject)

    await _commit(db, "update enrollment status")
    await _load_people(db, enrollment)

    logger.info(
        "enrollment.status_updated",
        enrollment_id=enrollment_id,
        previous_status=previous_status,
        status=status,
        reviewed_by=str(acting_user.id),
    )
    return enrollment


async def update_enrollment(
    db: AsyncSession,
    enrollment_id: str,
    changes: EnrollmentUpdate,
    acting_user: User,
) -> Enrollment:
    """Edit subject, period or message. Session rosters and access are not re-synced."""
    ensure_admin(acting_user, "update_enrollment")
    enrollment = await get_enrollment(db, enrollment_id)

    update_data = changes.model_dump(mode="json", exclude_unset=True, exclude_none=True)
    for key, value in update_data.items():
        setattr(enrollment, key, value)

    await _commit(db, "update enrollment")
    await _load_people(db, enrollment)

    logger.info(
        "enrollment.updated",
        enrollment_id=enrollment_id,
        fields=sorted(update_data),
        updated_by=str(acting_user.id),
    )
    return enrollment


async def delete_enrollment(db: AsyncSession, enrollment_id: str, acting_user: User) -> None:
    """Hard delete. Access already granted by the enrollment stays in place."""
    ensure_admin(acting_user, "delete_enrollment")
    enrollment = await get_enrollment(db, enrollment_id)

    await db.delete(enrollment)
    await _commit(db, "delete enrollment")

    logger.info(
        "enrollment.deleted",
        enrollment_id=enrollment_id,
        deleted_by=str(acting_user.id),
    )


async def count_pending(db: AsyncSession) -> int:
    stmt = (
        select(func.count())
        .select_from(Enrollment)
        .where(Enrollment.status == EnrollmentStatus.PENDING.value)
    )
    result = await db.execute(stmt)
    return result.scalar_one()


def clear_notifications(user: User) -> dict[str, bool]:
    """Acknowledge a notification clear. Notifications live client-side, nothing is stored."""
    logger.info("enrollment.notifications_cleared", user_id=str(user.id))
    return {"success": True}
