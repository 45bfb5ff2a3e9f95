"""Admin panel routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.admin.schemas.admin import (
    AdminCourseListResponse,
    AdminDashboardResponse,
    AdminOrderListResponse,
    AdminUserListResponse,
    AdminUserUpdateRequest,
    CourseStatusUpdateRequest,
    InstructorApplicationListResponse,
    InstructorApplicationRow,
    InstructorReviewRequest,
)
from app.admin.services.admin_service import AdminService, instructor_to_row
from app.admin.services.statistics_service import StatisticsService
from app.auth.dependencies import require_admin
from app.auth.models.user import User, UserRole
from app.auth.schemas.user import UserResponse
from app.commerce.models.order import OrderStatus
from app.commerce.schemas.order import OrderResponse, OrderStatusUpdateRequest
from app.commerce.services.order_service import OrderService, order_to_response
from app.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from app.courses.models.course import CourseStatus
from app.courses.schemas.course import InstructorCourseResponse
from app.courses.services.course_service import course_to_instructor_row
from app.db.session import get_db
from app.instructors.models.instructor_profile import InstructorStatus

router = APIRouter()


@router.get("/statistics/dashboard", response_model=AdminDashboardResponse)
async def get_dashboard_summary(
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> AdminDashboardResponse:
    """
    Get dashboard summary with all KPIs.

    Returns aggregated metrics for:
    - Totals (users, courses, instructors, enrollments, revenue)
    - Rolling 30 / 7 day windows for revenue and signups
    - Monthly signups and revenue
    - Top 5 courses by enrollment
    """
    return StatisticsService.get_dashboard(db)


@router.get("/users", response_model=AdminUserListResponse)
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    role: UserRole | None = Query(None, description="Filter by role"),
    search: str | None = Query(None, description="Search by name, nickname or email"),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> AdminUserListResponse:
    return AdminService.list_users(db, page, limit, search=search, role=role)


@router.patch("/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    data: AdminUserUpdateRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> UserResponse:
    """Change a user's role and/or status."""
    return UserResponse.model_validate(AdminService.update_user(db, user_id, data, admin))


@router.get("/courses", response_model=AdminCourseListResponse)
async def list_courses(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    status: CourseStatus | None = Query(None),
    search: str | None = Query(None),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> AdminCourseListResponse:
    return AdminService.list_courses(db, page, limit, status=status, search=search)


@router.patch("/courses/{course_id}/status", response_model=InstructorCourseResponse)
async def update_course_status(
    course_id: UUID,
    data: CourseStatusUpdateRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> InstructorCourseResponse:
    """Move a course between DRAFT, PUBLISHED and ARCHIVED."""
    course = AdminService.set_course_status(db, course_id, data.status)
    return course_to_instructor_row(course)


@router.get("/instructors", response_model=InstructorApplicationListResponse)
async def list_instructors(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    status: InstructorStatus | None = Query(None),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> InstructorApplicationListResponse:
    return AdminService.list_instructors(db, page, limit, status=status)


@router.patch("/instructors/{profile_id}/status", response_model=InstructorApplicationRow)
async def review_instructor(
    profile_id: UUID,
    data: InstructorReviewRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> InstructorApplicationRow:
    """Approve or reject an instructor application."""
    return instructor_to_row(AdminService.review_instructor(db, profile_id, data.status))


@router.get("/orders", response_model=AdminOrderListResponse)
async def list_all_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    status: OrderStatus | None = Query(None),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> AdminOrderListResponse:
    return AdminService.list_orders(db, page, limit, status=status)


@router.patch("/orders/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: UUID,
    data: OrderStatusUpdateRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> OrderResponse:
    """Set an order's status; PAID enrolls the buyer."""
    return order_to_response(OrderService.update_status(order_id, data.status, db))
