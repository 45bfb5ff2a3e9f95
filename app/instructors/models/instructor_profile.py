import enum
import uuid
from datetime import datetime

from sqlalchemy import JSON, Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.datetime_utils import utcnow
from app.db.session import Base


class InstructorStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class InstructorProfile(Base):
    __tablename__ = "instructor_profiles"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), unique=True, index=True
    )
    title: Mapped[str | None] = mapped_column(String(100), default=None)
    bio: Mapped[str | None] = mapped_column(Text, default=None)
    expertise: Mapped[list[str]] = mapped_column(JSON, default=list)
    achievements: Mapped[list[str]] = mapped_column(JSON, default=list)
    educations: Mapped[list[str]] = mapped_column(JSON, default=list)
    status: Mapped[InstructorStatus] = mapped_column(
        Enum(
            InstructorStatus,
            values_callable=lambda obj: [e.value for e in obj],
            name="instructor_status",
        ),
        default=InstructorStatus.PENDING,
    )
    approved_at: Mapped[datetime | None] = mapped_column(default=None)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="instructor_profile")
    courses = relationship("Course", back_populates="instructor")

    def __repr__(self) -> str:
        return f"<InstructorProfile(id={self.id}, user_id={self.user_id}, status={self.status})>"
