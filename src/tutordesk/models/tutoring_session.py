"""TutoringSession model: a scheduled class for one subject on one date."""

import uuid
from datetime import date as date_type
from datetime import datetime

from sqlalchemy import JSON, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from tutordesk.core.db import Base
from tutordesk.utils.datetime import now_utc


class TutoringSession(Base):
    """
    Scheduled tutoring session.

    Sessions are scheduled elsewhere on the platform. The enrollment flow
    only appends to enrolled_students and never removes entries.
    """

    __tablename__ = "tutoring_sessions"
    __table_args__ = (Index("ix_tutoring_sessions_subject_date", "subject", "date"),)

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    subject: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    date: Mapped[date_type] = mapped_column(nullable=False)

    title: Mapped[str | None] = mapped_column(String(200), nullable=True)

    # User ids as strings; unique values
    enrolled_students: Mapped[list[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
    )

    created_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc,
    )

    def has_student(self, user_id: uuid.UUID) -> bool:
        return str(user_id) in self.enrolled_students

    def __repr__(self) -> str:
        return f"<TutoringSession(subject={self.subject}, date={self.date})>"
