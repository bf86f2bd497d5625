"""
Stall Orders — Sales analytics

Two different day notions are used on purpose:
  - daily_totals groups by business day: [day HH:00, day+1 HH:00) with
    HH = BUSINESS_DAY_START_HOUR, so a shift that runs past midnight
    stays in one bucket.
  - menu_analytics filters by the plain calendar date of created_at.
"""
from datetime import date, datetime, time, timedelta
from decimal import Decimal

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from stall_orders.core.config import get_settings
from stall_orders.core.pricing import to_money
from stall_orders.db.order_ops import calendar_day_bounds
from stall_orders.models.catalog import MenuItem
from stall_orders.models.order import Order, OrderItem

settings = get_settings()


def business_day_window(day: date, start_hour: int | None = None) -> tuple[datetime, datetime]:
    hour = settings.BUSINESS_DAY_START_HOUR if start_hour is None else start_hour
    start = datetime.combine(day, time(hour=hour))
    return start, start + timedelta(days=1)


def business_day_of(moment: datetime, start_hour: int | None = None) -> date:
    """The business day a timestamp falls into (e.g. 01-01 11:59 → 12-31)."""
    hour = settings.BUSINESS_DAY_START_HOUR if start_hour is None else start_hour
    return (moment - timedelta(hours=hour)).date()


async def daily_totals(db: AsyncSession, day: date) -> dict:
    start, end = business_day_window(day)
    in_window = (Order.created_at >= start, Order.created_at < end)

    order_row = (await db.execute(
        select(
            func.count(Order.id),
            func.coalesce(func.sum(Order.total_amount), 0),
        ).where(*in_window)
    )).one()

    total_quantity = await db.scalar(
        select(func.coalesce(func.sum(OrderItem.quantity), 0))
        .join(Order, Order.id == OrderItem.order_id)
        .where(*in_window)
    )

    return {
        "date": day,
        "window_start": start,
        "window_end": end,
        "total_orders": int(order_row[0] or 0),
        "total_quantity": int(total_quantity or 0),
        "total_amount": to_money(order_row[1] or Decimal("0")),
    }


async def menu_analytics(db: AsyncSession, on_date: date | None = None) -> list[dict]:
    """
    Per menu item: total quantity sold and number of order lines.
    Every catalog item appears, with zeros when unsold (also when a date
    filter excludes all its sales). Sorted by quantity desc, then name.
    """
    lines = select(
        OrderItem.id,
        OrderItem.menu_item_id,
        OrderItem.quantity,
    ).join(Order, Order.id == OrderItem.order_id)
    if on_date is not None:
        start, end = calendar_day_bounds(on_date)
        lines = lines.where(Order.created_at >= start, Order.created_at < end)
    lines = lines.subquery()

    total_quantity = func.coalesce(func.sum(lines.c.quantity), 0)
    stmt = (
        select(
            MenuItem.id,
            MenuItem.name,
            MenuItem.item_type,
            total_quantity.label("total_quantity"),
            func.count(lines.c.id).label("order_count"),
        )
        .outerjoin(lines, lines.c.menu_item_id == MenuItem.id)
        .group_by(MenuItem.id, MenuItem.name, MenuItem.item_type)
        .order_by(total_quantity.desc(), MenuItem.name.asc())
    )

    result = await db.execute(stmt)
    return [
        {
            "id": row.id,
            "name": row.name,
            "item_type": row.item_type,
            "total_quantity": int(row.total_quantity or 0),
            "order_count": int(row.order_count or 0),
        }
        for row in result
    ]
