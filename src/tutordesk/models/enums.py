"""
Enums for domain models.
Enums provide type safety and clarity. Validation for categorical fields.
"""

import enum


class EnrollmentStatus(str, enum.Enum):
    """Enrollment review states. Decisions can be reversed by a later review."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# Statuses an admin may set when reviewing
REVIEW_DECISIONS = (EnrollmentStatus.APPROVED, EnrollmentStatus.REJECTED)


class Subject(str, enum.Enum):
    """Subjects offered by the tutoring platform."""

    SINHALA = "Sinhala"
    GEOGRAPHY = "Geography"
    ECONOMICS = "Economics"
    BIOLOGY = "Biology"
    BUDDHIST_CULTURE_AND_LOGIC = "Buddhist Culture and Logic"
    PHYSICS = "Physics"
    CHEMISTRY = "Chemistry"
    COMBINED_MATHEMATICS = "Combined Mathematics"
    ENGINEERING_AND_BIO_SYSTEM_TECHNOLOGY = "Engineering & Bio System Technology"
    SCIENCE_FOR_TECHNOLOGY = "Science for Technology"
    ICT = "ICT"
    AGRICULTURE_AND_APPLIED_SCIENCES = "Agriculture and Applied Sciences"


SUBJECTS = tuple(subject.value for subject in Subject)
