import enum
import uuid
from datetime import datetime

from sqlalchemy import Enum, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.datetime_utils import utcnow
from app.db.session import Base


class OrderStatus(str, enum.Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    REFUNDED = "REFUNDED"
    CANCELLED = "CANCELLED"


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    order_number: Mapped[str] = mapped_column(
        String(40), unique=True, index=True
    )  # LVUP-<epoch ms>-XXXXXX
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    course_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"), index=True
    )

    status: Mapped[OrderStatus] = mapped_column(
        Enum(OrderStatus, values_callable=lambda obj: [e.value for e in obj], name="order_status"),
        default=OrderStatus.PENDING,
        index=True,
    )
    amount: Mapped[int] = mapped_column()  # In KRW
    original_amount: Mapped[int] = mapped_column()
    discount_amount: Mapped[int] = mapped_column(default=0)
    payment_method: Mapped[str | None] = mapped_column(String(50), default=None)
    paid_at: Mapped[datetime | None] = mapped_column(default=None)

    created_at: Mapped[datetime] = mapped_column(default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow)

    user = relationship("User", backref="orders")
    course = relationship("Course")

    def __repr__(self) -> str:
        return (
            f"<Order(id={self.id}, order_number={self.order_number}, status={self.status.value})>"
        )
