"""Enrollment request endpoints (submit, list, review, edit, delete)."""

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from tutordesk.api.auth import get_current_user
from tutordesk.core import enrollments
from tutordesk.core.db import get_db
from tutordesk.core.logging import get_logger
from tutordesk.core.uploads import delete_upload, save_upload
from tutordesk.models.enrollment_schemas import (
    AcknowledgeResponse,
    EnrollmentRead,
    EnrollmentResponse,
    EnrollmentStatusUpdate,
    EnrollmentUpdate,
    MessageResponse,
    PendingCountResponse,
)
from tutordesk.models.user import User

logger = get_logger(__name__)

router = APIRouter(prefix="/enrollments", tags=["enrollments"])


@router.post(
    "/enroll",
    response_model=EnrollmentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_enrollment(
    message: str | None = Form(None),
    subject: str | None = Form(None),
    month: str | None = Form(None),
    year: str | None = Form(None),
    image: UploadFile | None = File(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Submit an enrollment request with a proof-of-payment image."""
    enrollments.check_required_fields(
        {
            "message": message,
            "subject": subject,
            "month": month,
            "year": year,
            "image": image.filename if image is not None else None,
        }
    )
    submission = enrollments.parse_submission(message, subject, month, year)

    image_url = await save_upload(image)
    try:
        enrollment = await enrollments.create_enrollment(db, current_user, submission, image_url)
    except Exception:
        logger.warning("enrollment.upload_discarded", path=image_url)
        delete_upload(image_url)
        raise

    return EnrollmentResponse(
        message="Enrollment submitted successfully",
        enrollment=EnrollmentRead.model_validate(enrollment),
    )


@router.get("", response_model=list[EnrollmentRead])
@router.get("/", response_model=list[EnrollmentRead], include_in_schema=False)
async def list_enrollments(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List all enrollments, newest first. Admin only."""
    return await enrollments.list_enrollments(db, current_user)


@router.get("/pending-count", response_model=PendingCountResponse)
async def get_pending_count(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Number of enrollments waiting for review."""
    return PendingCountResponse(count=await enrollments.count_pending(db))


@router.post("/clear-notifications", response_model=AcknowledgeResponse)
async def clear_notifications(current_user: User = Depends(get_current_user)):
    """Acknowledge that the client cleared its enrollment notifications."""
    return enrollments.clear_notifications(current_user)


@router.patch("/{enrollment_id}/status", response_model=EnrollmentResponse)
async def update_enrollment_status(
    enrollment_id: str,
    body: EnrollmentStatusUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Approve or reject an enrollment. Admin only."""
    enrollment = await enrollments.update_enrollment_status(
        db, enrollment_id, body.status, current_user
    )
    return EnrollmentResponse(
        message=f"Enrollment {enrollment.status} successfully",
        enrollment=EnrollmentRead.model_validate(enrollment),
    )


@router.patch("/{enrollment_id}", response_model=EnrollmentResponse)
async def update_enrollment(
    enrollment_id: str,
    changes: EnrollmentUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Edit an enrollment's subject, period or message. Admin only."""
    enrollment = await enrollments.update_enrollment(db, enrollment_id, changes, current_user)
    return EnrollmentResponse(
        message="Enrollment updated successfully",
        enrollment=EnrollmentRead.model_validate(enrollment),
    )


@router.delete("/{enrollment_id}", response_model=MessageResponse)
async def delete_enrollment(
    enrollment_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete an enrollment. Admin only."""
    await enrollments.delete_enrollment(db, enrollment_id, current_user)
    return MessageResponse(message="Enrollment deleted successfully")
