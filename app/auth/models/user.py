import enum
import uuid
from datetime import datetime

from sqlalchemy import JSON, Enum, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.datetime_utils import utcnow
from app.db.session import Base


class UserRole(str, enum.Enum):
    STUDENT = "STUDENT"
    INSTRUCTOR = "INSTRUCTOR"
    ADMIN = "ADMIN"


class UserType(str, enum.Enum):
    TRAINER = "TRAINER"
    OPERATOR = "OPERATOR"
    MANAGER = "MANAGER"
    FREELANCER = "FREELANCER"
    ENTREPRENEUR = "ENTREPRENEUR"


class UserStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"


class User(Base):
    """
    Platform account.

    Attributes:
        id: UUID primary key
        email: Unique login email
        hashed_password: Argon2 hash
        name: Display name
        nickname: Unique public handle
        role: STUDENT, INSTRUCTOR or ADMIN
        user_type: Professional segment, drives course recommendations
        status: Only ACTIVE users may authenticate
        specialties: Free-form list of tags
        last_login_at: Set on every successful sign-in
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255))
    name: Mapped[str] = mapped_column(String(50))
    nickname: Mapped[str | None] = mapped_column(String(50), unique=True, default=None)
    phone: Mapped[str | None] = mapped_column(String(30), default=None)
    avatar: Mapped[str | None] = mapped_column(String(500), default=None)
    introduction: Mapped[str | None] = mapped_column(Text, default=None)
    experience: Mapped[str | None] = mapped_column(Text, default=None)
    location: Mapped[str | None] = mapped_column(String(100), default=None)
    specialties: Mapped[list[str]] = mapped_column(JSON, default=list)

    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, values_callable=lambda obj: [e.value for e in obj], name="user_role"),
        default=UserRole.STUDENT,
    )
    user_type: Mapped[UserType] = mapped_column(
        Enum(UserType, values_callable=lambda obj: [e.value for e in obj], name="user_type"),
        default=UserType.TRAINER,
    )
    status: Mapped[UserStatus] = mapped_column(
        Enum(UserStatus, values_callable=lambda obj: [e.value for e in obj], name="user_status"),
        default=UserStatus.ACTIVE,
    )

    last_login_at: Mapped[datetime | None] = mapped_column(default=None)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow)

    instructor_profile = relationship(
        "InstructorProfile", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
