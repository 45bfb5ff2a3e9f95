"""Commerce schemas."""

from app.commerce.schemas.cart import (
    CartAddRequest,
    CartClearResponse,
    CartItemResponse,
    CartResponse,
    CartSummary,
)
from app.commerce.schemas.order import (
    OrderCourseSummary,
    OrderCreateRequest,
    OrderCreateResponse,
    OrderResponse,
    OrderStatusUpdateRequest,
)
from app.commerce.schemas.revenue import (
    CourseRevenue,
    FeeBreakdown,
    RevenueOrderRow,
    RevenueSummary,
)

__all__ = [
    "CartAddRequest",
    "CartClearResponse",
    "CartItemResponse",
    "CartResponse",
    "CartSummary",
    "CourseRevenue",
    "FeeBreakdown",
    "OrderCourseSummary",
    "OrderCreateRequest",
    "OrderCreateResponse",
    "OrderResponse",
    "OrderStatusUpdateRequest",
    "RevenueOrderRow",
    "RevenueSummary",
]
