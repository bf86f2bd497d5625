from stall_orders.models.catalog import Customer, ItemType, MenuItem, MenuItemOption
from stall_orders.models.order import Order, OrderItem, OrderStatus

__all__ = [
    "Customer",
    "ItemType",
    "MenuItem",
    "MenuItemOption",
    "Order",
    "OrderItem",
    "OrderStatus",
]
