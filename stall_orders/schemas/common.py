"""
Stall Orders — Shared Pydantic types
"""
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, PlainSerializer

# Decimal internally, JSON number on the wire
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class ActionResponse(BaseModel):
    success: bool = True
    updated: int | None = None
    message: str | None = None


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    dependencies: dict[str, str]
