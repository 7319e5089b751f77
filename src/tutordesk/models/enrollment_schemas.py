"""Pydantic schemas for Enrollment API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tutordesk.models.enums import Subject


def _clean_message(v: str | None) -> str | None:
    if v is None:
        return None
    cleaned = v.strip()
    if not cleaned:
        raise ValueError("Message cannot be blank")
    return cleaned


class EnrollmentSubmission(BaseModel):
    """Fields a student submits with the enrollment form (image handled separately)."""

    message: str = Field(..., max_length=2000)
    subject: Subject
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=2000, le=2100)

    @field_validator("message")
    @classmethod
    def validate_message(cls, v: str) -> str:
        return _clean_message(v)


class EnrollmentUpdate(BaseModel):
    """Schema for admin edits (partial update allowed)."""

    message: str | None = Field(None, max_length=2000)
    subject: Subject | None = None
    month: int | None = Field(None, ge=1, le=12)
    year: int | None = Field(None, ge=2000, le=2100)

    @field_validator("message")
    @classmethod
    def validate_message(cls, v: str | None) -> str | None:
        return _clean_message(v)


class EnrollmentStatusUpdate(BaseModel):
    """Review decision body. Checked against the allowed decisions in the service."""

    status: str


class StudentSummary(BaseModel):
    """Enrolled user fields shown to admins."""

    id: UUID
    first_name: str
    last_name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class ReviewerSummary(BaseModel):
    """Reviewing admin fields."""

    id: UUID
    first_name: str
    last_name: str

    model_config = ConfigDict(from_attributes=True)


class EnrollmentRead(BaseModel):
    """Schema for reading an enrollment with its user and reviewer expanded."""

    id: UUID
    user: StudentSummary
    message: str
    subject: str
    month: int
    year: int
    image_url: str
    status: str
    reviewed_by: ReviewerSummary | None = Field(None, validation_alias="reviewer")
    reviewed_at: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class EnrollmentResponse(BaseModel):
    """Envelope returned by create, edit and review endpoints."""

    message: str
    enrollment: EnrollmentRead


class MessageResponse(BaseModel):
    message: str


class PendingCountResponse(BaseModel):
    count: int


class AcknowledgeResponse(BaseModel):
    success: bool = True
