"""Course schemas."""

from app.courses.schemas.certificate import CertificateResponse
from app.courses.schemas.course import (
    CategoryResponse,
    CourseCounts,
    CourseCreateRequest,
    CourseDetailResponse,
    CourseInstructorDetail,
    CourseInstructorSummary,
    CourseListItem,
    CourseListResponse,
    CourseUpdateRequest,
    InstructorCourseResponse,
    LessonCreateRequest,
    LessonResponse,
)
from app.courses.schemas.progress import (
    CourseProgressSummary,
    LessonProgressResponse,
    MyCourseItem,
    MyDashboardResponse,
    ProgressUpdateRequest,
    RecentLessonProgress,
)
from app.courses.schemas.question import (
    AnswerCreateRequest,
    AnswerResponse,
    QuestionCreateRequest,
    QuestionDetailResponse,
    QuestionFilter,
    QuestionListResponse,
    QuestionResponse,
    QuestionSort,
    ResolveRequest,
)
from app.courses.schemas.review import (
    RatingBucket,
    ReviewCreateRequest,
    ReviewListResponse,
    ReviewResponse,
    ReviewSort,
    ReviewStats,
    ReviewUpdateRequest,
)

__all__ = [
    "AnswerCreateRequest",
    "AnswerResponse",
    "CategoryResponse",
    "CertificateResponse",
    "CourseCounts",
    "CourseCreateRequest",
    "CourseDetailResponse",
    "CourseInstructorDetail",
    "CourseInstructorSummary",
    "CourseListItem",
    "CourseListResponse",
    "CourseProgressSummary",
    "CourseUpdateRequest",
    "InstructorCourseResponse",
    "LessonCreateRequest",
    "LessonProgressResponse",
    "LessonResponse",
    "MyCourseItem",
    "MyDashboardResponse",
    "ProgressUpdateRequest",
    "QuestionCreateRequest",
    "QuestionDetailResponse",
    "QuestionFilter",
    "QuestionListResponse",
    "QuestionResponse",
    "QuestionSort",
    "RatingBucket",
    "RecentLessonProgress",
    "ResolveRequest",
    "ReviewCreateRequest",
    "ReviewListResponse",
    "ReviewResponse",
    "ReviewSort",
    "ReviewStats",
    "ReviewUpdateRequest",
]
