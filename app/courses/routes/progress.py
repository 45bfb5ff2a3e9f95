from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth.dependencies import get_current_user
from app.auth.models.user import User
from app.courses.schemas.progress import (
    CourseProgressSummary,
    LessonProgressResponse,
    MyCourseItem,
    MyDashboardResponse,
    ProgressUpdateRequest,
)
from app.courses.services.progress_service import ProgressService, lesson_progress_to_response
from app.db.session import get_db

router = APIRouter()


@router.post("/progress/lessons/{lesson_id}", response_model=LessonProgressResponse)
async def update_lesson_progress(
    lesson_id: UUID,
    data: ProgressUpdateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> LessonProgressResponse:
    """Report playback progress on a lesson; 100% completes it."""
    progress = ProgressService.update_lesson_progress(
        current_user.id, lesson_id, data.progress_percentage, data.watched_seconds, db
    )
    return lesson_progress_to_response(progress)


@router.post("/progress/lessons/{lesson_id}/complete", response_model=LessonProgressResponse)
async def complete_lesson(
    lesson_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> LessonProgressResponse:
    progress = ProgressService.mark_lesson_complete(current_user.id, lesson_id, db)
    return lesson_progress_to_response(progress)


@router.get("/progress/courses/{course_id}", response_model=CourseProgressSummary)
async def get_course_progress(
    course_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CourseProgressSummary:
    return ProgressService.get_course_summary(current_user.id, course_id, db)


@router.get("/my/courses", response_model=list[MyCourseItem])
async def get_my_courses(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[MyCourseItem]:
    return ProgressService.get_my_courses(current_user.id, db)


@router.get("/my/dashboard", response_model=MyDashboardResponse)
async def get_my_dashboard(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MyDashboardResponse:
    return ProgressService.get_dashboard(current_user.id, db)
