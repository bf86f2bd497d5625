"""
Stall Orders — Customer schemas
"""
from datetime import datetime

from pydantic import BaseModel, Field


class CustomerCreate(BaseModel):
    model_config = {"str_strip_whitespace": True}

    name: str = Field(..., min_length=1, max_length=255)
    phone: str = Field(..., min_length=1, max_length=64)


class CustomerRead(BaseModel):
    id: int
    name: str
    phone: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
