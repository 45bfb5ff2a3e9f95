from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.auth.schemas.user import UserSummary
from app.core.datetime_utils import UTCDatetime
from app.courses.models.enrollment import EnrollmentStatus
from app.courses.schemas.course import InstructorCourseResponse
from app.instructors.models.instructor_profile import InstructorStatus


class InstructorStats(BaseModel):
    total_courses: int
    total_students: int
    average_rating: float
    total_reviews: int


class InstructorCourseCard(BaseModel):
    id: str
    title: str
    thumbnail: str | None = None
    price: int
    is_paid: bool
    level: str
    enrollment_count: int
    average_rating: float


class InstructorUserInfo(BaseModel):
    id: str
    name: str
    avatar: str | None = None
    specialties: list[str] = Field(default_factory=list)
    experience: str | None = None
    location: str | None = None
    introduction: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v: Any) -> str:
        return str(v)

    @field_validator("specialties", mode="before")
    @classmethod
    def validate_specialties(cls, v: Any) -> list[str]:
        return list(v or [])

    model_config = ConfigDict(from_attributes=True)


class InstructorProfileResponse(BaseModel):
    """Public instructor page."""

    id: str
    user: InstructorUserInfo
    title: str | None = None
    bio: str | None = None
    expertise: list[str] = Field(default_factory=list)
    achievements: list[str] = Field(default_factory=list)
    educations: list[str] = Field(default_factory=list)
    stats: InstructorStats
    courses: list[InstructorCourseCard]


class InstructorApplyRequest(BaseModel):
    title: str | None = Field(None, max_length=100)
    bio: str | None = None
    expertise: list[str] = Field(default_factory=list)
    achievements: list[str] = Field(default_factory=list)
    educations: list[str] = Field(default_factory=list)


class InstructorApplicationResponse(BaseModel):
    id: str
    user_id: str
    title: str | None = None
    bio: str | None = None
    status: InstructorStatus
    approved_at: UTCDatetime | None = None
    created_at: UTCDatetime

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def validate_ids(cls, v: Any) -> str:
        return str(v)

    model_config = ConfigDict(from_attributes=True)


class RecentEnrollment(BaseModel):
    enrollment_id: str
    student_name: str
    student_email: str
    course_id: str
    course_title: str
    enrolled_at: UTCDatetime


class InstructorDashboardResponse(BaseModel):
    stats: InstructorStats
    estimated_revenue: int
    courses: list[InstructorCourseResponse]
    recent_enrollments: list[RecentEnrollment]


class StudentProgress(BaseModel):
    enrollment_id: str
    student: UserSummary
    email: str
    course_id: str
    course_title: str
    status: EnrollmentStatus
    enrolled_at: UTCDatetime
    total_lessons: int
    completed_lessons: int
    progress_percentage: int
    last_activity_at: UTCDatetime


class InstructorStudentsResponse(BaseModel):
    total_students: int
    active_students: int
    completed_students: int
    average_progress: int
    students: list[StudentProgress]


class CoursePerformance(BaseModel):
    course_id: str
    title: str
    price: int
    enrollment_count: int
    average_rating: float
    completion_rate: int
    active_students: int
    total_revenue: int


class InstructorAnalyticsResponse(BaseModel):
    """Course performance and learner behaviour across the instructor's courses."""

    total_students: int
    active_students: int
    completion_rate: int
    average_rating: float
    monthly_enrollments: dict[str, int]
    course_performance: list[CoursePerformance]
    learning_pattern: list[int] = Field(
        ..., description="Lesson progress updates per UTC hour (0-23) over the last 7 days"
    )
