"""
Stall Orders — Analytics schemas
"""
import datetime as dt

from pydantic import BaseModel

from stall_orders.models.catalog import ItemType
from stall_orders.schemas.common import Money


class DailyTotals(BaseModel):
    date: dt.date
    window_start: dt.datetime
    window_end: dt.datetime
    total_orders: int
    total_quantity: int
    total_amount: Money


class MenuAnalyticsRow(BaseModel):
    id: int
    name: str
    item_type: ItemType
    total_quantity: int
    order_count: int
