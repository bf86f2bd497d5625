"""
Stall Orders — Admin routes (orders, lifecycle, analytics)

Every route here sits behind JWTAuthMiddleware (authentication) and the
require_admin router dependency (allow-list), which runs before any
database work.
"""
import datetime as dt
import logging

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from stall_orders.core.security import is_admin_email, require_admin
from stall_orders.db.database import get_db
from stall_orders.db import analytics, lifecycle, order_ops
from stall_orders.models.order import utcnow
from stall_orders.schemas.analytics import DailyTotals, MenuAnalyticsRow
from stall_orders.schemas.common import ActionResponse
from stall_orders.schemas.order import AdminOrderRead, OrderRead, OrderSearch

logger = logging.getLogger(__name__)

# /admin/me only needs a valid token, so it lives outside the allow-listed router
session_router = APIRouter(prefix="/admin", tags=["admin"])
router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@session_router.get("/me")
async def whoami(request: Request):
    """Claims of the authenticated caller, plus whether they may administer."""
    user = dict(request.state.user)
    user["is_admin"] = is_admin_email(user.get("email"))
    return user


# ─── Orders ───────────────────────────────────────────────────────────────────

@router.get("/orders", response_model=list[AdminOrderRead])
async def list_orders(search: OrderSearch = Depends(), db: AsyncSession = Depends(get_db)):
    """Orders with customer and itemized details, filterable by name and date."""
    return await order_ops.list_orders(db, customer_name=search.customer_name, on_date=search.date)


@router.post("/orders/mark-all-ready", response_model=ActionResponse)
async def mark_all_ready(db: AsyncSession = Depends(get_db)):
    updated = await lifecycle.mark_all_ready(db)
    if updated == 0:
        return ActionResponse(updated=0, message="No pending orders to mark ready.")
    return ActionResponse(updated=updated)


@router.post("/orders/{order_id}/ready", response_model=OrderRead)
async def mark_ready(order_id: int, db: AsyncSession = Depends(get_db)):
    return await lifecycle.mark_ready(db, order_id)


@router.post("/orders/{order_id}/complete", response_model=ActionResponse)
async def complete_order(order_id: int, db: AsyncSession = Depends(get_db)):
    await lifecycle.complete(db, order_id)
    return ActionResponse()


@router.delete("/orders/{order_id}", response_model=ActionResponse)
async def delete_order(order_id: int, db: AsyncSession = Depends(get_db)):
    await lifecycle.delete(db, order_id)
    return ActionResponse()


# ─── Analytics ────────────────────────────────────────────────────────────────

@router.get("/daily-totals", response_model=DailyTotals)
async def daily_totals(
    date: dt.date | None = Query(None, description="Business day (YYYY-MM-DD); defaults to the current one"),
    db: AsyncSession = Depends(get_db),
):
    day = date or analytics.business_day_of(utcnow())
    return await analytics.daily_totals(db, day)


@router.get("/menu-analytics", response_model=list[MenuAnalyticsRow])
async def menu_analytics(
    date: dt.date | None = Query(None, description="Calendar date of created_at (YYYY-MM-DD)"),
    db: AsyncSession = Depends(get_db),
):
    return await analytics.menu_analytics(db, on_date=date)
