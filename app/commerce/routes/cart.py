from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.auth.dependencies import get_current_user
from app.auth.models.user import User
from app.commerce.schemas.cart import CartAddRequest, CartClearResponse, CartResponse
from app.commerce.services.cart_service import CartService, build_cart_response
from app.db.session import get_db

router = APIRouter()


@router.get("/cart", response_model=CartResponse)
async def get_cart(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CartResponse:
    """Get the current user's cart with its summary."""
    return build_cart_response(CartService.get_items(current_user.id, db))


@router.post("/cart", response_model=CartResponse, status_code=status.HTTP_201_CREATED)
async def add_to_cart(
    data: CartAddRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CartResponse:
    CartService.add_item(current_user.id, data.course_id, db)
    return build_cart_response(CartService.get_items(current_user.id, db))


@router.delete("/cart/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_from_cart(
    item_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> None:
    CartService.remove_item(current_user.id, item_id, db)


@router.delete("/cart", response_model=CartClearResponse)
async def clear_cart(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CartClearResponse:
    return CartClearResponse(deleted=CartService.clear(current_user.id, db))
