"""Endpoints for the signed-in instructor's own dashboards and course authoring."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.auth.dependencies import get_current_instructor, require_instructor
from app.auth.models.user import User
from app.commerce.schemas.revenue import RevenueSummary
from app.courses.schemas.course import (
    CourseCreateRequest,
    CourseDetailResponse,
    CourseUpdateRequest,
    InstructorCourseResponse,
    LessonCreateRequest,
    LessonResponse,
)
from app.courses.services.course_service import (
    CourseService,
    course_to_detail,
    course_to_instructor_row,
)
from app.db.session import get_db
from app.instructors.models.instructor_profile import InstructorProfile
from app.instructors.schemas.instructor import (
    InstructorAnalyticsResponse,
    InstructorDashboardResponse,
    InstructorStudentsResponse,
)
from app.instructors.services.instructor_service import InstructorService

router = APIRouter()


@router.get("/instructor/dashboard", response_model=InstructorDashboardResponse)
async def get_dashboard(
    db: Session = Depends(get_db),
    profile: InstructorProfile = Depends(get_current_instructor),
) -> InstructorDashboardResponse:
    return InstructorService.get_dashboard(profile, db)


@router.get("/instructor/revenue", response_model=RevenueSummary)
async def get_revenue(
    db: Session = Depends(get_db),
    profile: InstructorProfile = Depends(get_current_instructor),
) -> RevenueSummary:
    """Paid order revenue with the platform fee deducted."""
    return InstructorService.get_revenue(profile, db)


@router.get("/instructor/students", response_model=InstructorStudentsResponse)
async def get_students(
    db: Session = Depends(get_db),
    profile: InstructorProfile = Depends(get_current_instructor),
) -> InstructorStudentsResponse:
    return InstructorService.get_students(profile, db)


@router.get("/instructor/analytics", response_model=InstructorAnalyticsResponse)
async def get_analytics(
    db: Session = Depends(get_db),
    profile: InstructorProfile = Depends(get_current_instructor),
) -> InstructorAnalyticsResponse:
    return InstructorService.get_analytics(profile, db)


@router.get("/instructor/courses", response_model=list[InstructorCourseResponse])
async def list_my_courses(
    db: Session = Depends(get_db),
    profile: InstructorProfile = Depends(get_current_instructor),
) -> list[InstructorCourseResponse]:
    return [course_to_instructor_row(c) for c in InstructorService.list_courses(profile, db)]


@router.post(
    "/instructor/courses",
    response_model=CourseDetailResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_course(
    data: CourseCreateRequest,
    db: Session = Depends(get_db),
    profile: InstructorProfile = Depends(get_current_instructor),
) -> CourseDetailResponse:
    """Create a course as a DRAFT owned by the caller."""
    course = CourseService.create_course(db, profile, data)
    return course_to_detail(CourseService.get_course(db, course.id))


@router.patch("/instructor/courses/{course_id}", response_model=CourseDetailResponse)
async def update_course(
    course_id: UUID,
    data: CourseUpdateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_instructor),
) -> CourseDetailResponse:
    course = CourseService.get_editable_course(db, course_id, current_user)
    CourseService.update_course(db, course, data)
    return course_to_detail(CourseService.get_course(db, course_id))


@router.post(
    "/instructor/courses/{course_id}/lessons",
    response_model=LessonResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_lesson(
    course_id: UUID,
    data: LessonCreateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_instructor),
) -> LessonResponse:
    course = CourseService.get_editable_course(db, course_id, current_user)
    lesson = CourseService.add_lesson(db, course, data)
    return LessonResponse.model_validate(lesson)
