"""Statistics service for the admin dashboard."""

from datetime import datetime, timedelta

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.orm import Session, joinedload

from app.admin.schemas.admin import AdminDashboardResponse, TopCourse
from app.auth.models.user import User
from app.commerce.models.order import Order, OrderStatus
from app.commerce.services.revenue import PaidOrder, revenue_since, summarize_orders
from app.core.constants import ADMIN_TOP_COURSES_LIMIT, REVENUE_RECENT_WINDOW_DAYS
from app.core.datetime_utils import monthly_counts, to_naive_utc, utcnow
from app.courses.models import Course, Enrollment, Review
from app.courses.services.review_service import average_rating
from app.instructors.models.instructor_profile import InstructorProfile

WEEK_DAYS = 7


def count_rows(db: Session, model: type, *conditions: ColumnElement[bool]) -> int:
    return db.scalar(select(func.count()).select_from(model).where(*conditions)) or 0


class StatisticsService:
    """Service for aggregating site-wide KPIs."""

    @staticmethod
    def get_dashboard(db: Session, now: datetime | None = None) -> AdminDashboardResponse:
        """Get the admin dashboard summary.

        Args:
            db: Database session.
            now: Reference time for the rolling windows; defaults to utcnow().

        Returns:
            AdminDashboardResponse with totals, rolling windows, monthly
            breakdowns and the top courses by enrollment.
        """
        now = to_naive_utc(now) if now is not None else utcnow()
        month_ago = now - timedelta(days=REVENUE_RECENT_WINDOW_DAYS)
        week_ago = now - timedelta(days=WEEK_DAYS)

        paid_orders = [
            PaidOrder.from_model(o)
            for o in db.query(Order)
            .options(joinedload(Order.course), joinedload(Order.user))
            .filter(Order.status == OrderStatus.PAID)
            .order_by(Order.created_at.desc())
            .all()
        ]
        revenue = summarize_orders(paid_orders, now=now)

        signups = list(db.scalars(select(User.created_at)))

        top_courses = (
            db.query(Course)
            .order_by(Course.enrollment_count.desc(), Course.created_at.desc())
            .limit(ADMIN_TOP_COURSES_LIMIT)
            .all()
        )

        return AdminDashboardResponse(
            total_users=len(signups),
            total_courses=count_rows(db, Course),
            total_instructors=count_rows(db, InstructorProfile),
            total_enrollments=count_rows(db, Enrollment),
            total_revenue=revenue.total_revenue,
            platform_fee=revenue.platform_fee,
            revenue_last_30_days=revenue.last_30_days_revenue,
            revenue_last_7_days=revenue_since(paid_orders, week_ago),
            new_users_last_30_days=sum(1 for ts in signups if ts >= month_ago),
            new_users_last_7_days=sum(1 for ts in signups if ts >= week_ago),
            enrollments_last_30_days=count_rows(
                db, Enrollment, Enrollment.enrolled_at >= month_ago
            ),
            monthly_signups=monthly_counts(signups),
            monthly_revenue=revenue.monthly_revenue,
            top_courses=[
                TopCourse(
                    id=str(c.id),
                    title=c.title,
                    price=c.price,
                    enrollment_count=c.enrollment_count,
                    average_rating=c.average_rating or 0.0,
                )
                for c in top_courses
            ],
            average_rating=average_rating(list(db.scalars(select(Review.rating)))),
        )
