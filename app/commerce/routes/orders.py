"""
Order API endpoints.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.auth.dependencies import get_current_user
from app.auth.models.user import User
from app.commerce.schemas.order import OrderCreateRequest, OrderCreateResponse, OrderResponse
from app.commerce.services.order_service import OrderService, order_to_response
from app.db.session import get_db

router = APIRouter()


@router.post("/orders", response_model=OrderCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    data: OrderCreateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> OrderCreateResponse:
    """
    Purchase a course.

    Free courses are enrolled immediately (is_free=true, no order).
    Paid courses return a PENDING order.

    Raises:
        404: Course not found
        409: Already enrolled
    """
    return OrderService.create_order(current_user, data.course_id, db, data.payment_method)


@router.get("/orders", response_model=list[OrderResponse])
async def get_my_orders(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[OrderResponse]:
    """Get current user's orders, newest first."""
    return [order_to_response(o) for o in OrderService.list_user_orders(current_user.id, db)]


@router.get("/orders/{order_id}", response_model=OrderResponse)
async def get_order_details(
    order_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> OrderResponse:
    """
    Get order details.

    Raises:
        403: User doesn't own this order (and is not an admin)
        404: Order not found
    """
    return order_to_response(OrderService.get_order(current_user, order_id, db))
