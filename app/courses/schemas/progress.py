from pydantic import BaseModel, Field

from app.core.datetime_utils import UTCDatetime
from app.courses.models.progress import LessonProgressStatus


class ProgressUpdateRequest(BaseModel):
    progress_percentage: int = Field(..., ge=0, le=100)
    watched_seconds: int = Field(0, ge=0)


class LessonProgressResponse(BaseModel):
    id: str
    enrollment_id: str
    lesson_id: str
    status: LessonProgressStatus
    progress_percentage: int
    watched_seconds: int
    completed_at: UTCDatetime | None = None
    updated_at: UTCDatetime


class CourseProgressSummary(BaseModel):
    course_id: str
    enrollment_id: str
    total_lessons: int
    completed_lessons: int
    progress_percentage: int
    can_get_certificate: bool
    lessons: list[LessonProgressResponse] = Field(default_factory=list)


class RecentLessonProgress(BaseModel):
    lesson_id: str
    lesson_title: str
    course_id: str
    course_title: str
    status: LessonProgressStatus
    progress_percentage: int
    updated_at: UTCDatetime


class MyCourseItem(BaseModel):
    enrollment_id: str
    course_id: str
    title: str
    thumbnail: str | None = None
    instructor_name: str | None = None
    enrollment_status: str
    enrolled_at: UTCDatetime
    total_lessons: int
    completed_lessons: int
    progress_percentage: int
    last_progress_at: UTCDatetime | None = None
    can_get_certificate: bool


class MyDashboardResponse(BaseModel):
    total_enrollments: int
    completed_courses: int
    average_progress: int
    total_watch_time: int
    recent_progress: list[RecentLessonProgress] = Field(default_factory=list)
