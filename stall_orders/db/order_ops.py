"""
Stall Orders — Order repository

Orders and their line items are written in one unit of work: either
every row is committed or the transaction is rolled back and
PersistenceFailure is raised.
"""
import logging
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Sequence

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager

from stall_orders.core.errors import MenuItemNotFound, OrderNotFound, ValidationError
from stall_orders.core.pricing import MAX_AMOUNT, compute_line_total, to_money
from stall_orders.db.catalog_ops import get_customer, get_menu_items
from stall_orders.db.database import unit_of_work
from stall_orders.models.catalog import Customer
from stall_orders.models.order import Order, OrderItem, OrderStatus, utcnow
from stall_orders.schemas.order import OrderItemRequest

logger = logging.getLogger(__name__)


async def create_order(
    db: AsyncSession,
    customer_id: int,
    items: Sequence[OrderItemRequest],
    created_at: datetime | None = None,
) -> Order:
    """
    Price every line against the live catalog and persist the order.

      - VALIDATE: customer and every menu item exist, options belong to
                  their menu item, quantity >= 1 (nothing written yet)
      - PRICE:    item_total = quantity * (base_price + option modifiers)
      - WRITE:    order row + N item rows, single commit

    total_amount is the sum of the already-rounded line totals, so the
    stored total always equals the sum of the stored items.
    """
    await get_customer(db, customer_id)

    catalog = await get_menu_items(db, [i.menu_item_id for i in items])

    lines: list[OrderItem] = []
    total = Decimal("0.00")
    for item in items:
        menu_item = catalog.get(item.menu_item_id)
        if menu_item is None:
            raise MenuItemNotFound(item.menu_item_id)

        option_ids = list(dict.fromkeys(item.selected_options))
        item_total = to_money(compute_line_total(menu_item, option_ids, item.quantity))
        total += item_total
        lines.append(OrderItem(
            menu_item_id=menu_item.id,
            quantity=item.quantity,
            selected_options=option_ids,
            item_total=item_total,
        ))

    if total > MAX_AMOUNT:
        raise ValidationError(
            f"Order total {total} exceeds the maximum of {MAX_AMOUNT}",
            fields=[{"field": "items", "message": "order total too large"}],
        )

    order = Order(
        customer_id=customer_id,
        total_amount=total,
        status=OrderStatus.PENDING,
        created_at=created_at or utcnow(),
        items=lines,
    )
    async with unit_of_work(db, "Failed to submit order, try again."):
        db.add(order)

    logger.info(
        "Order %s created for customer %s: %d item(s), total %s",
        order.id, customer_id, len(lines), order.total_amount,
    )
    return order


async def get_order(db: AsyncSession, order_id: int) -> Order:
    result = await db.execute(
        select(Order).where(Order.id == order_id).execution_options(populate_existing=True)
    )
    order = result.scalar_one_or_none()
    if order is None:
        raise OrderNotFound(order_id)
    return order


async def list_orders_by_customer(db: AsyncSession, customer_id: int) -> Sequence[Order]:
    """A customer's orders, most recent first."""
    result = await db.execute(
        select(Order)
        .where(Order.customer_id == customer_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
    )
    return result.scalars().all()


def calendar_day_bounds(day: date) -> tuple[datetime, datetime]:
    """[day 00:00, day+1 00:00) — the plain calendar date of a timestamp."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


async def list_orders(
    db: AsyncSession,
    customer_name: str | None = None,
    on_date: date | None = None,
) -> Sequence[Order]:
    """
    Admin view: orders joined with customer, items and menu items.

    customer_name is a case-insensitive substring match; on_date matches
    the calendar date of created_at. Newest first.
    """
    stmt = (
        select(Order)
        .join(Order.customer)
        .options(contains_eager(Order.customer))
        .execution_options(populate_existing=True)
    )
    if customer_name:
        stmt = stmt.where(Customer.name.icontains(customer_name.strip(), autoescape=True))
    if on_date is not None:
        start, end = calendar_day_bounds(on_date)
        stmt = stmt.where(Order.created_at >= start, Order.created_at < end)

    result = await db.execute(stmt.order_by(Order.created_at.desc(), Order.id.desc()))
    return result.scalars().all()


async def delete_order(db: AsyncSession, order_id: int) -> None:
    """Remove the item rows, then the order row."""
    exists = await db.scalar(select(Order.id).where(Order.id == order_id))
    if exists is None:
        raise OrderNotFound(order_id)

    async with unit_of_work(db, "Failed to delete order, try again."):
        await db.execute(delete(OrderItem).where(OrderItem.order_id == order_id))
        await db.execute(delete(Order).where(Order.id == order_id))

    logger.info("Order %s deleted", order_id)
