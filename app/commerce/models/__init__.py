"""Commerce models."""

from app.commerce.models.cart_item import CartItem
from app.commerce.models.order import Order, OrderStatus

__all__ = ["CartItem", "Order", "OrderStatus"]
