"""
Stall Orders — Order schemas

Request models ignore unknown fields, so any client-supplied price or
total is dropped before it reaches the pricing engine.
"""
import datetime as dt

from pydantic import BaseModel, Field, computed_field

from stall_orders.core.pricing import MAX_QUANTITY
from stall_orders.models.order import OrderStatus
from stall_orders.schemas.common import Money
from stall_orders.schemas.customer import CustomerRead
from stall_orders.schemas.menu import MenuItemBrief


class OrderItemRequest(BaseModel):
    model_config = {"extra": "ignore"}

    menu_item_id: int = Field(..., examples=[1])
    quantity: int = Field(..., ge=1, le=MAX_QUANTITY, examples=[2])
    selected_options: list[int] = Field(default_factory=list, examples=[[3]])


class CreateOrderRequest(BaseModel):
    model_config = {"extra": "ignore"}

    customer_id: int
    items: list[OrderItemRequest] = Field(..., min_length=1)


class OrderSearch(BaseModel):
    customer_name: str | None = Field(None, description="Case-insensitive substring of the customer name")
    date: dt.date | None = Field(None, description="Calendar date of created_at (YYYY-MM-DD)")


class OrderItemRead(BaseModel):
    id: int
    order_id: int
    menu_item_id: int
    quantity: int
    selected_options: list[int]
    item_total: Money
    created_at: dt.datetime | None = None

    model_config = {"from_attributes": True}


class OrderSummary(BaseModel):
    id: int
    customer_id: int
    total_amount: Money
    status: OrderStatus
    created_at: dt.datetime
    updated_at: dt.datetime | None = None

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def is_ready(self) -> bool:
        return self.status == OrderStatus.READY

    @computed_field
    @property
    def is_completed(self) -> bool:
        return self.status == OrderStatus.COMPLETED


class OrderRead(OrderSummary):
    items: list[OrderItemRead]


class AdminOrderItemRead(OrderItemRead):
    menu_item: MenuItemBrief


class AdminOrderRead(OrderSummary):
    customer: CustomerRead
    items: list[AdminOrderItemRead]
