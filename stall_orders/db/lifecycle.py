"""
Stall Orders — Order lifecycle (pickup state machine)

State transitions: PENDING → READY → COMPLETED
complete() may skip READY; nothing ever moves backwards.

Each transition is a single conditional UPDATE guarded by the allowed
source states, so a concurrent writer can never regress an order.
"""
import logging

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from stall_orders.core.errors import InvalidTransition, OrderNotFound
from stall_orders.db.database import unit_of_work
from stall_orders.db.order_ops import delete_order, get_order
from stall_orders.models.order import Order, OrderStatus

logger = logging.getLogger(__name__)

# target state -> states it may be entered from
ALLOWED_FROM: dict[OrderStatus, tuple[OrderStatus, ...]] = {
    OrderStatus.READY:     (OrderStatus.PENDING,),
    OrderStatus.COMPLETED: (OrderStatus.PENDING, OrderStatus.READY),
}


async def _current_status(db: AsyncSession, order_id: int) -> OrderStatus:
    status = await db.scalar(select(Order.status).where(Order.id == order_id))
    if status is None:
        raise OrderNotFound(order_id)
    return OrderStatus(status)


async def _transition(db: AsyncSession, order_id: int, target: OrderStatus) -> int:
    async with unit_of_work(db, f"Failed to mark order {order_id} {target.value}, try again."):
        result = await db.execute(
            update(Order)
            .where(Order.id == order_id, Order.status.in_(ALLOWED_FROM[target]))
            .values(status=target)
            .execution_options(synchronize_session=False)
        )
    return result.rowcount


async def mark_ready(db: AsyncSession, order_id: int) -> Order:
    """pending → ready. InvalidTransition if the order is already past pending."""
    if await _transition(db, order_id, OrderStatus.READY) == 0:
        current = await _current_status(db, order_id)
        raise InvalidTransition(order_id, current.value, OrderStatus.READY.value)
    logger.info("Order %s marked ready", order_id)
    return await get_order(db, order_id)


async def mark_all_ready(db: AsyncSession) -> int:
    """
    Move every pending order to ready in one statement.
    Orders inserted after the statement's snapshot stay pending.
    Returns the number of orders affected (0 is not an error).
    """
    async with unit_of_work(db, "Failed to mark orders ready, try again."):
        result = await db.execute(
            update(Order)
            .where(Order.status == OrderStatus.PENDING)
            .values(status=OrderStatus.READY)
            .execution_options(synchronize_session=False)
        )
    logger.info("Bulk mark-ready affected %d order(s)", result.rowcount)
    return result.rowcount


async def complete(db: AsyncSession, order_id: int) -> Order:
    """pending|ready → completed. Idempotent when already completed."""
    if await _transition(db, order_id, OrderStatus.COMPLETED) == 0:
        # raises OrderNotFound when absent; otherwise it is already completed
        await _current_status(db, order_id)
    else:
        logger.info("Order %s completed", order_id)
    return await get_order(db, order_id)


async def delete(db: AsyncSession, order_id: int) -> None:
    """Permitted from any state; irreversible."""
    await delete_order(db, order_id)
