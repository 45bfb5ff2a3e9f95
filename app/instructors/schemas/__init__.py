"""Instructor schemas."""

from app.instructors.schemas.instructor import (
    CoursePerformance,
    InstructorAnalyticsResponse,
    InstructorApplicationResponse,
    InstructorApplyRequest,
    InstructorCourseCard,
    InstructorDashboardResponse,
    InstructorProfileResponse,
    InstructorStats,
    InstructorStudentsResponse,
    InstructorUserInfo,
    RecentEnrollment,
    StudentProgress,
)

__all__ = [
    "CoursePerformance",
    "InstructorAnalyticsResponse",
    "InstructorApplicationResponse",
    "InstructorApplyRequest",
    "InstructorCourseCard",
    "InstructorDashboardResponse",
    "InstructorProfileResponse",
    "InstructorStats",
    "InstructorStudentsResponse",
    "InstructorUserInfo",
    "RecentEnrollment",
    "StudentProgress",
]
