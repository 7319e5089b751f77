"""Enrollment model: a student's request to join a subject for one month."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tutordesk.core.db import Base
from tutordesk.models.enums import EnrollmentStatus
from tutordesk.utils.datetime import now_utc

if TYPE_CHECKING:
    from tutordesk.models.user import User


class Enrollment(Base):
    """
    Subject enrollment request with a proof-of-payment image.

    Created by a student as pending. Admins approve or reject it, and may
    reverse an earlier decision. Several enrollments for the same
    (user, subject, month, year) may coexist.
    """

    __tablename__ = "enrollments"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    user: Mapped["User"] = relationship(
        "User",
        foreign_keys=[user_id],
        back_populates="enrollments",
        lazy="selectin",
    )

    message: Mapped[str] = mapped_column(Text, nullable=False)

    subject: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    month: Mapped[int] = mapped_column(Integer, nullable=False)

    year: Mapped[int] = mapped_column(Integer, nullable=False)

    image_url: Mapped[str] = mapped_column(String(500), nullable=False)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=EnrollmentStatus.PENDING.value,
        index=True,
    )

    # Admin who made the latest decision
    reviewed_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    reviewer: Mapped["User | None"] = relationship(
        "User",
        foreign_keys=[reviewed_by],
        lazy="selectin",
    )

    reviewed_at: Mapped[datetime | None] = mapped_column(nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc,
        index=True,
    )

    updated_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc,
        onupdate=now_utc,
    )

    def __repr__(self) -> str:
        return (
            f"<Enrollment(subject={self.subject}, period={self.year}-{self.month:02d}, "
            f"status={self.status})>"
        )
