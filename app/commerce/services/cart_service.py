import logging
from uuid import UUID

from sqlalchemy import delete
from sqlalchemy.orm import Session, joinedload

from app.commerce.models.cart_item import CartItem
from app.commerce.schemas.cart import CartItemResponse, CartResponse, CartSummary
from app.core.exceptions import ConflictError, NotFoundError
from app.courses.models import Course
from app.courses.services.course_service import CourseService, course_to_list_item
from app.courses.services.enrollment_service import EnrollmentService
from app.instructors.models.instructor_profile import InstructorProfile

logger = logging.getLogger(__name__)


def build_cart_response(items: list[CartItem]) -> CartResponse:
    return CartResponse(
        items=[
            CartItemResponse(
                id=str(item.id), course=course_to_list_item(item.course), added_at=item.added_at
            )
            for item in items
        ],
        summary=CartSummary(
            item_count=len(items),
            total_amount=sum(item.course.price for item in items if item.course.is_paid),
        ),
    )


class CartService:
    @staticmethod
    def get_items(user_id: UUID, db: Session) -> list[CartItem]:
        return (
            db.query(CartItem)
            .options(
                joinedload(CartItem.course).joinedload(Course.category),
                joinedload(CartItem.course)
                .joinedload(Course.instructor)
                .joinedload(InstructorProfile.user),
            )
            .filter(CartItem.user_id == user_id)
            .order_by(CartItem.added_at.desc())
            .all()
        )

    @staticmethod
    def add_item(user_id: UUID, course_id: UUID, db: Session) -> CartItem:
        course = CourseService.get_published_course(db, course_id)

        if EnrollmentService.is_enrolled(user_id, course.id, db):
            raise ConflictError("이미 수강 중인 강의입니다.", resource="enrollment")

        existing = (
            db.query(CartItem)
            .filter(CartItem.user_id == user_id, CartItem.course_id == course.id)
            .first()
        )
        if existing:
            raise ConflictError("이미 장바구니에 담긴 강의입니다.", resource="cart_item")

        item = CartItem(user_id=user_id, course_id=course.id)
        db.add(item)
        db.commit()
        db.refresh(item)
        logger.info("Cart item added", extra={"user_id": str(user_id), "course_id": str(course_id)})
        return item

    @staticmethod
    def remove_item(user_id: UUID, item_id: UUID, db: Session) -> None:
        item = (
            db.query(CartItem).filter(CartItem.id == item_id, CartItem.user_id == user_id).first()
        )
        if item is None:
            raise NotFoundError("장바구니 항목을 찾을 수 없습니다.", resource="cart_item")
        db.delete(item)
        db.commit()

    @staticmethod
    def clear(user_id: UUID, db: Session) -> int:
        result = db.execute(delete(CartItem).where(CartItem.user_id == user_id))
        db.commit()
        return result.rowcount or 0

    @staticmethod
    def remove_course(user_id: UUID, course_id: UUID, db: Session) -> None:
        """Drop a course from the cart once it has been ordered; caller commits."""
        db.execute(
            delete(CartItem).where(CartItem.user_id == user_id, CartItem.course_id == course_id)
        )
