"""Domain models package."""

from tutordesk.models.enrollment import Enrollment
from tutordesk.models.enrollment_schemas import (
    EnrollmentRead,
    EnrollmentResponse,
    EnrollmentStatusUpdate,
    EnrollmentSubmission,
    EnrollmentUpdate,
)
from tutordesk.models.enums import SUBJECTS, EnrollmentStatus, Subject
from tutordesk.models.tutoring_session import TutoringSession
from tutordesk.models.user import User, UserRole

__all__ = [
    "Enrollment",
    "EnrollmentRead",
    "EnrollmentResponse",
    "EnrollmentStatus",
    "EnrollmentStatusUpdate",
    "EnrollmentSubmission",
    "EnrollmentUpdate",
    "SUBJECTS",
    "Subject",
    "TutoringSession",
    "User",
    "UserRole",
]
