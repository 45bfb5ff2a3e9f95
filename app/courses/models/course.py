import enum
import uuid
from datetime import datetime

from sqlalchemy import Enum, Float, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.datetime_utils import utcnow
from app.db.session import Base


def is_paid(price: int, is_free: bool) -> bool:
    """A course is sold only when it has a price and is not flagged free."""
    return price > 0 and not is_free


class CourseLevel(str, enum.Enum):
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"


class CourseStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


class Category(Base):
    __tablename__ = "categories"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    name: Mapped[str] = mapped_column(String(100), index=True)
    slug: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    sort_order: Mapped[int] = mapped_column(default=0)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)

    courses = relationship("Course", back_populates="category")

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, slug={self.slug})>"


class Course(Base):
    """
    Catalog entry owned by an instructor profile.

    enrollment_count, review_count and average_rating are denormalized
    counters kept up to date by the enrollment and review services.
    duration is the sum of lesson durations in minutes.
    """

    __tablename__ = "courses"
    __table_args__ = (Index("ix_courses_status_created", "status", "created_at"),)

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[str] = mapped_column(Text, default="")
    thumbnail: Mapped[str | None] = mapped_column(String(500), default=None)
    category_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("categories.id", ondelete="SET NULL"), default=None, index=True
    )
    instructor_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("instructor_profiles.id", ondelete="CASCADE"), index=True
    )
    level: Mapped[CourseLevel] = mapped_column(
        Enum(CourseLevel, values_callable=lambda obj: [e.value for e in obj], name="course_level"),
        default=CourseLevel.BEGINNER,
    )
    status: Mapped[CourseStatus] = mapped_column(
        Enum(
            CourseStatus, values_callable=lambda obj: [e.value for e in obj], name="course_status"
        ),
        default=CourseStatus.DRAFT,
    )
    price: Mapped[int] = mapped_column(default=0)
    original_price: Mapped[int | None] = mapped_column(default=None)
    is_free: Mapped[bool] = mapped_column(default=False)
    duration: Mapped[int] = mapped_column(default=0)
    average_rating: Mapped[float] = mapped_column(Float, default=0.0)
    review_count: Mapped[int] = mapped_column(default=0)
    enrollment_count: Mapped[int] = mapped_column(default=0)
    published_at: Mapped[datetime | None] = mapped_column(default=None)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow)

    category = relationship("Category", back_populates="courses")
    instructor = relationship("InstructorProfile", back_populates="courses")
    lessons = relationship(
        "Lesson",
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="Lesson.order",
    )
    enrollments = relationship("Enrollment", back_populates="course", cascade="all, delete-orphan")
    reviews = relationship("Review", back_populates="course", cascade="all, delete-orphan")
    questions = relationship("Question", back_populates="course", cascade="all, delete-orphan")
    certificates = relationship(
        "Certificate", back_populates="course", cascade="all, delete-orphan"
    )

    @property
    def is_paid(self) -> bool:
        return is_paid(self.price, self.is_free)

    def __repr__(self) -> str:
        return f"<Course(id={self.id}, title={self.title}, status={self.status})>"


class Lesson(Base):
    __tablename__ = "lessons"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    course_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"), index=True
    )
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[str | None] = mapped_column(Text, default=None)
    video_url: Mapped[str | None] = mapped_column(String(500), default=None)
    duration: Mapped[int] = mapped_column(default=0)
    order: Mapped[int] = mapped_column(default=0)
    is_preview: Mapped[bool] = mapped_column(default=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow)

    course = relationship("Course", back_populates="lessons")
    progress_records = relationship(
        "LessonProgress", back_populates="lesson", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Lesson(id={self.id}, title={self.title}, course_id={self.course_id})>"
