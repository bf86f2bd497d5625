"""
Stall Orders — Customer routes
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from stall_orders.db.database import get_db
from stall_orders.db import catalog_ops
from stall_orders.schemas.customer import CustomerCreate, CustomerRead

router = APIRouter(prefix="/customers", tags=["customers"])


@router.post("", response_model=CustomerRead, status_code=status.HTTP_201_CREATED)
async def create_customer(payload: CustomerCreate, db: AsyncSession = Depends(get_db)):
    """Register a walk-in customer for this visit."""
    return await catalog_ops.create_customer(db, payload.name, payload.phone)


@router.get("/{customer_id}", response_model=CustomerRead)
async def get_customer(customer_id: int, db: AsyncSession = Depends(get_db)):
    return await catalog_ops.get_customer(db, customer_id)
