"""Pydantic schemas for the admin panel."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.auth.models.user import UserRole, UserStatus
from app.auth.schemas.user import UserResponse
from app.commerce.schemas.order import OrderResponse
from app.core.datetime_utils import UTCDatetime
from app.core.schemas import Pagination
from app.courses.models.course import CourseStatus
from app.courses.schemas.course import InstructorCourseResponse
from app.instructors.models.instructor_profile import InstructorStatus

# =============================================================================
# Dashboard
# =============================================================================


class TopCourse(BaseModel):
    """Course ranked by enrollment count."""

    id: str
    title: str
    price: int
    enrollment_count: int
    average_rating: float


class AdminDashboardResponse(BaseModel):
    """Site-wide KPIs for the admin dashboard."""

    total_users: int
    total_courses: int
    total_instructors: int
    total_enrollments: int
    total_revenue: int
    platform_fee: float
    revenue_last_30_days: int
    revenue_last_7_days: int
    new_users_last_30_days: int
    new_users_last_7_days: int
    enrollments_last_30_days: int
    monthly_signups: dict[str, int]
    monthly_revenue: dict[str, int]
    top_courses: list[TopCourse]
    average_rating: float


# =============================================================================
# Users
# =============================================================================


class UserStats(BaseModel):
    enrollments_count: int = 0
    completed_courses_count: int = 0
    certificates_count: int = 0


class AdminUserRow(UserResponse):
    stats: UserStats


class AdminUserListResponse(BaseModel):
    users: list[AdminUserRow]
    pagination: Pagination


class AdminUserUpdateRequest(BaseModel):
    role: UserRole | None = None
    status: UserStatus | None = None


# =============================================================================
# Courses
# =============================================================================


class AdminCourseRow(InstructorCourseResponse):
    instructor_name: str | None = None
    category: str | None = None


class AdminCourseListResponse(BaseModel):
    courses: list[AdminCourseRow]
    pagination: Pagination


class CourseStatusUpdateRequest(BaseModel):
    status: CourseStatus


# =============================================================================
# Instructors
# =============================================================================


class InstructorApplicationRow(BaseModel):
    id: str
    user_id: str
    name: str
    email: str
    title: str | None = None
    bio: str | None = None
    expertise: list[str] = Field(default_factory=list)
    status: InstructorStatus
    approved_at: UTCDatetime | None = None
    created_at: UTCDatetime

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def validate_ids(cls, v: Any) -> str:
        return str(v)

    model_config = ConfigDict(from_attributes=True)


class InstructorApplicationListResponse(BaseModel):
    instructors: list[InstructorApplicationRow]
    pagination: Pagination


class InstructorReviewRequest(BaseModel):
    status: InstructorStatus


# =============================================================================
# Orders
# =============================================================================


class AdminOrderListResponse(BaseModel):
    orders: list[OrderResponse]
    pagination: Pagination
