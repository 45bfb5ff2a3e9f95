from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.datetime_utils import UTCDatetime
from app.core.schemas import Pagination
from app.courses.models.course import CourseLevel, CourseStatus


class CourseCounts(BaseModel):
    enrollments: int = 0
    reviews: int = 0


class CourseInstructorSummary(BaseModel):
    """Instructor reference on catalog cards; id is the instructor's user id."""

    id: str
    name: str
    avatar: str | None = None


class CourseListItem(BaseModel):
    id: str
    title: str
    description: str
    thumbnail: str | None = None
    category: str | None = None
    level: str
    duration: int = 0
    price: int
    is_paid: bool
    rating: float = 0.0
    instructor: CourseInstructorSummary
    counts: CourseCounts


class CourseListResponse(BaseModel):
    courses: list[CourseListItem]
    pagination: Pagination


class CategoryResponse(BaseModel):
    id: str
    name: str
    slug: str

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v: Any) -> str:
        return str(v)

    model_config = ConfigDict(from_attributes=True)


class LessonResponse(BaseModel):
    id: str
    title: str
    description: str | None = None
    duration: int = 0
    order: int
    is_preview: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v: Any) -> str:
        return str(v)

    model_config = ConfigDict(from_attributes=True)


class CourseInstructorDetail(CourseInstructorSummary):
    profile_id: str
    title: str | None = None
    bio: str | None = None
    expertise: list[str] = Field(default_factory=list)
    achievements: list[str] = Field(default_factory=list)


class CourseDetailResponse(BaseModel):
    id: str
    title: str
    description: str
    thumbnail: str | None = None
    category: CategoryResponse | None = None
    level: str
    status: CourseStatus
    duration: int = 0
    price: int
    original_price: int | None = None
    is_free: bool
    is_paid: bool
    average_rating: float = 0.0
    instructor: CourseInstructorDetail
    lessons: list[LessonResponse] = Field(default_factory=list)
    counts: CourseCounts
    created_at: UTCDatetime


class CourseCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    thumbnail: str | None = Field(None, max_length=500)
    category_id: UUID | None = None
    level: CourseLevel = CourseLevel.BEGINNER
    price: int = Field(0, ge=0)
    original_price: int | None = Field(None, ge=0)
    is_free: bool = False


class CourseUpdateRequest(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    thumbnail: str | None = Field(None, max_length=500)
    category_id: UUID | None = None
    level: CourseLevel | None = None
    price: int | None = Field(None, ge=0)
    original_price: int | None = Field(None, ge=0)
    is_free: bool | None = None
    status: CourseStatus | None = None


class LessonCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    video_url: str | None = Field(None, max_length=500)
    duration: int = Field(0, ge=0)
    order: int | None = Field(None, ge=0)
    is_preview: bool = False


class InstructorCourseResponse(BaseModel):
    """Course row on the instructor's own dashboards."""

    id: str
    title: str
    thumbnail: str | None = None
    status: CourseStatus
    level: str
    price: int
    is_free: bool
    is_paid: bool
    average_rating: float = 0.0
    review_count: int = 0
    enrollment_count: int = 0
    created_at: UTCDatetime
