"""
Stall Orders — Error taxonomy

Every domain error carries the HTTP status it maps to and a message that
is safe to show to the caller. The handlers in main.py render them.
"""
from typing import Any


class StallError(Exception):
    status_code: int = 500
    message: str = "Internal error."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message}


class ValidationError(StallError):
    """Malformed or missing input. Raised before any mutation."""
    status_code = 400
    message = "Validation failed"

    def __init__(self, message: str | None = None, fields: list[dict[str, str]] | None = None):
        super().__init__(message)
        self.fields = fields or []

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        if self.fields:
            body["fields"] = self.fields
        return body


class UnknownOption(ValidationError):
    def __init__(self, menu_item_id: int, option_ids: list[int]):
        ids = ", ".join(str(i) for i in option_ids)
        super().__init__(f"Option(s) {ids} do not belong to menu item {menu_item_id}")
        self.menu_item_id = menu_item_id
        self.option_ids = option_ids


class NotFound(StallError):
    status_code = 404
    message = "Not found"


class MenuItemNotFound(NotFound):
    def __init__(self, menu_item_id: int):
        super().__init__(f"Menu item {menu_item_id} not found")
        self.menu_item_id = menu_item_id


class OptionNotFound(NotFound):
    def __init__(self, option_id: int):
        super().__init__(f"Option {option_id} not found")
        self.option_id = option_id


class OrderNotFound(NotFound):
    def __init__(self, order_id: int):
        super().__init__(f"Order {order_id} not found")
        self.order_id = order_id


class CustomerNotFound(NotFound):
    def __init__(self, customer_id: int):
        super().__init__(f"Customer {customer_id} not found")
        self.customer_id = customer_id


class InvalidTransition(StallError):
    status_code = 409

    def __init__(self, order_id: int, current: str, target: str):
        super().__init__(f"Cannot move order {order_id} from '{current}' to '{target}'")
        self.order_id = order_id
        self.current = current
        self.target = target


class MenuItemInUse(StallError):
    status_code = 409

    def __init__(self, menu_item_id: int):
        super().__init__(f"Menu item {menu_item_id} is referenced by existing orders")
        self.menu_item_id = menu_item_id


class Unauthorized(StallError):
    status_code = 403
    message = "Unauthorized access."


class PersistenceFailure(StallError):
    status_code = 500
    message = "Failed to save changes, try again."
