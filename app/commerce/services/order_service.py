"""
Order service for course purchases and payment state.
"""

import logging
from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from app.auth.models.user import User
from app.commerce.models.order import Order, OrderStatus
from app.commerce.schemas.order import OrderCourseSummary, OrderCreateResponse, OrderResponse
from app.commerce.services.cart_service import CartService
from app.commerce.utils.order_number import generate_order_number
from app.core.datetime_utils import utcnow
from app.core.exceptions import ConflictError, ForbiddenError, NotFoundError
from app.courses.models import Course
from app.courses.services.course_service import CourseService
from app.courses.services.enrollment_service import EnrollmentService
from app.notifications.models.notification import NotificationType
from app.notifications.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


def order_to_response(order: Order) -> OrderResponse:
    return OrderResponse(
        id=order.id,
        order_number=order.order_number,
        user_id=order.user_id,
        status=order.status,
        amount=order.amount,
        original_amount=order.original_amount,
        discount_amount=order.discount_amount,
        payment_method=order.payment_method,
        paid_at=order.paid_at,
        created_at=order.created_at,
        course=OrderCourseSummary.model_validate(order.course),
    )


class OrderService:
    """Service for creating orders and moving them through their statuses."""

    @staticmethod
    def create_order(
        user: User, course_id: UUID, db: Session, payment_method: str | None = None
    ) -> OrderCreateResponse:
        """
        Start a purchase of a course.

        Free courses skip the order entirely and enroll the user right away.
        Paid courses get a PENDING order priced from the course.

        Raises:
            NotFoundError: Course does not exist or is not published
            ConflictError: User is already enrolled
        """
        course = CourseService.get_published_course(db, course_id)

        if EnrollmentService.is_enrolled(user.id, course.id, db):
            raise ConflictError("이미 수강 중인 강의입니다.", resource="enrollment")

        if not course.is_paid:
            enrollment = EnrollmentService.enroll_user(user.id, course, db, commit=False)
            CartService.remove_course(user.id, course.id, db)
            db.commit()
            return OrderCreateResponse(
                is_free=True,
                enrollment_id=str(enrollment.id),
                message="무료 강의 수강 등록이 완료되었습니다.",
            )

        original_amount = course.original_price or course.price
        order = Order(
            order_number=generate_order_number(),
            user_id=user.id,
            course_id=course.id,
            status=OrderStatus.PENDING,
            amount=course.price,
            original_amount=original_amount,
            discount_amount=original_amount - course.price,
            payment_method=payment_method,
        )
        db.add(order)
        db.commit()
        db.refresh(order)

        logger.info(
            "Order created",
            extra={"order_number": order.order_number, "user_id": str(user.id)},
        )
        return OrderCreateResponse(
            is_free=False,
            order=order_to_response(order),
            message="주문이 생성되었습니다.",
        )

    @staticmethod
    def list_user_orders(user_id: UUID, db: Session) -> list[Order]:
        return (
            db.query(Order)
            .options(joinedload(Order.course))
            .filter(Order.user_id == user_id)
            .order_by(Order.created_at.desc())
            .all()
        )

    @staticmethod
    def _get(order_id: UUID, db: Session) -> Order:
        order = (
            db.query(Order)
            .options(joinedload(Order.course), joinedload(Order.user))
            .filter(Order.id == order_id)
            .first()
        )
        if order is None:
            raise NotFoundError("주문을 찾을 수 없습니다.", resource="order")
        return order

    @staticmethod
    def get_order(user: User, order_id: UUID, db: Session) -> Order:
        """The caller's own order; admins may read any order."""
        order = OrderService._get(order_id, db)
        if order.user_id != user.id and not user.is_admin:
            raise ForbiddenError("본인의 주문만 조회할 수 있습니다.")
        return order

    @staticmethod
    def update_status(order_id: UUID, new_status: OrderStatus, db: Session) -> Order:
        """
        Set an order's status without checking the prior state.

        Entering PAID stamps paid_at, enrolls the buyer if they are not enrolled
        yet and notifies them.
        """
        order = OrderService._get(order_id, db)
        previous = order.status
        order.status = new_status

        if new_status == OrderStatus.PAID and previous != OrderStatus.PAID:
            order.paid_at = utcnow()
            course: Course = order.course
            NotificationService.create(
                order.user_id,
                NotificationType.PAYMENT_SUCCESS,
                "결제가 완료되었습니다",
                f"{course.title} 결제가 성공적으로 완료되었습니다. 이제 수강을 시작할 수 있습니다.",
                db,
                data={
                    "order_id": str(order.id),
                    "order_number": order.order_number,
                    "course_id": str(course.id),
                    "course_title": course.title,
                    "amount": order.amount,
                },
                commit=False,
            )
            if not EnrollmentService.is_enrolled(order.user_id, course.id, db):
                EnrollmentService.enroll_user(order.user_id, course, db, commit=False)
            CartService.remove_course(order.user_id, course.id, db)

        db.commit()
        db.refresh(order)
        logger.info(
            "Order status changed",
            extra={
                "order_number": order.order_number,
                "from": previous.value,
                "to": new_status.value,
            },
        )
        return order
