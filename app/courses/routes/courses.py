from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.constants import DEFAULT_COURSE_PAGE_SIZE, DEFAULT_RAIL_LIMIT, MAX_PAGE_SIZE
from app.courses.schemas.course import CourseDetailResponse, CourseListItem, CourseListResponse
from app.courses.services.course_query import CourseFilters
from app.courses.services.course_service import CourseService, course_to_detail
from app.db.session import get_db

router = APIRouter()


@router.get("/courses", response_model=CourseListResponse)
async def list_courses(
    category: str | None = Query(None, description="Category name"),
    level: str | None = Query(None, description="초급 / 중급 / 고급 or BEGINNER / ..."),
    is_paid: bool | None = Query(None),
    search: str | None = Query(None, max_length=100),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_COURSE_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
) -> CourseListResponse:
    """Published course catalog, newest first."""
    filters = CourseFilters(
        category=category,
        level=level,
        is_paid=is_paid,
        search=search,
        page=page,
        limit=limit,
    )
    return CourseService.list_courses(db, filters)


@router.get("/courses/popular", response_model=list[CourseListItem])
async def get_popular_courses(
    limit: int = Query(DEFAULT_RAIL_LIMIT, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
) -> list[CourseListItem]:
    return CourseService.popular(db, limit)


@router.get("/courses/recommended/{user_type}", response_model=list[CourseListItem])
async def get_recommended_courses(
    user_type: str,
    limit: int = Query(DEFAULT_RAIL_LIMIT, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
) -> list[CourseListItem]:
    """Courses in the categories suggested for a user type (TRAINER, OPERATOR, ...)."""
    return CourseService.recommended(db, user_type, limit)


@router.get("/courses/{course_id}", response_model=CourseDetailResponse)
async def get_course(course_id: UUID, db: Session = Depends(get_db)) -> CourseDetailResponse:
    return course_to_detail(CourseService.get_published_course(db, course_id))
