"""
Stall Orders — Menu schemas
"""
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from stall_orders.models.catalog import ItemType
from stall_orders.schemas.common import Money


class MenuItemWrite(BaseModel):
    model_config = {"str_strip_whitespace": True}

    name: str = Field(..., min_length=1, max_length=255, examples=["Fried Rice"])
    base_price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2, examples=["5.00"])
    item_type: ItemType


class OptionWrite(BaseModel):
    model_config = {"str_strip_whitespace": True}

    option_name: str = Field(..., min_length=1, max_length=255, examples=["Extra Egg"])
    price_modifier: Decimal = Field(Decimal("0"), max_digits=10, decimal_places=2)


class OptionRead(BaseModel):
    id: int
    menu_item_id: int
    option_name: str
    price_modifier: Money
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class MenuItemBrief(BaseModel):
    id: int
    name: str
    base_price: Money
    item_type: ItemType

    model_config = {"from_attributes": True}


class MenuItemRead(MenuItemBrief):
    created_at: datetime | None = None
    updated_at: datetime | None = None
    options: list[OptionRead] = []
