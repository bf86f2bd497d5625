"""
Stall Orders — Orders API

Flow for POST /orders:
  1. Payload validated by Pydantic (client prices are never read)
  2. Idempotency enforced by IdempotencyMiddleware when a key is sent
  3. Line totals recomputed from the catalog by the pricing engine
  4. Order + items committed as one unit
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from stall_orders.core.errors import NotFound, ValidationError
from stall_orders.db.database import get_db
from stall_orders.db import order_ops
from stall_orders.schemas.order import CreateOrderRequest, OrderRead, OrderSummary

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", response_model=OrderRead, status_code=status.HTTP_201_CREATED)
async def create_order(payload: CreateOrderRequest, db: AsyncSession = Depends(get_db)):
    """Place an order. Unknown customers or menu items are a bad request."""
    try:
        return await order_ops.create_order(db, payload.customer_id, payload.items)
    except NotFound as exc:
        raise ValidationError(exc.message) from exc


@router.get("/customer/{customer_id}", response_model=list[OrderSummary])
async def list_customer_orders(customer_id: int, db: AsyncSession = Depends(get_db)):
    """A customer's orders, newest first."""
    return await order_ops.list_orders_by_customer(db, customer_id)


@router.get("/{order_id}", response_model=OrderRead)
async def get_order(order_id: int, db: AsyncSession = Depends(get_db)):
    return await order_ops.get_order(db, order_id)
