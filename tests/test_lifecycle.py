"""
Order lifecycle — pending → ready → completed, forward only.
"""
import pytest
from sqlalchemy.exc import OperationalError

from stall_orders.core.errors import InvalidTransition, OrderNotFound, PersistenceFailure
from stall_orders.db import lifecycle, order_ops
from stall_orders.models.order import OrderStatus
from stall_orders.schemas.order import OrderItemRequest


@pytest.fixture
def place(db, customer, milk_tea):
    async def _place():
        return await order_ops.create_order(db, customer.id, [OrderItemRequest(menu_item_id=milk_tea.id, quantity=1)])
    return _place


@pytest.mark.asyncio
async def test_mark_ready_from_pending(db, place):
    order = await place()
    updated = await lifecycle.mark_ready(db, order.id)
    assert updated.status == OrderStatus.READY


@pytest.mark.asyncio
async def test_mark_ready_twice_is_invalid(db, place):
    order = await place()
    await lifecycle.mark_ready(db, order.id)
    with pytest.raises(InvalidTransition) as exc_info:
        await lifecycle.mark_ready(db, order.id)
    assert exc_info.value.current == "ready"


@pytest.mark.asyncio
async def test_mark_ready_missing_order(db):
    with pytest.raises(OrderNotFound):
        await lifecycle.mark_ready(db, 77)


@pytest.mark.asyncio
async def test_mark_all_ready_only_touches_pending(db, place):
    a, b, c = await place(), await place(), await place()
    await lifecycle.mark_ready(db, c.id)

    assert await lifecycle.mark_all_ready(db) == 2

    statuses = {o.id: o.status for o in await order_ops.list_orders(db)}
    assert statuses == {a.id: OrderStatus.READY, b.id: OrderStatus.READY, c.id: OrderStatus.READY}


@pytest.mark.asyncio
async def test_mark_all_ready_with_nothing_pending(db, place):
    assert await lifecycle.mark_all_ready(db) == 0
    order = await place()
    await lifecycle.complete(db, order.id)
    assert await lifecycle.mark_all_ready(db) == 0
    assert (await order_ops.get_order(db, order.id)).status == OrderStatus.COMPLETED


@pytest.mark.asyncio
async def test_complete_directly_from_pending(db, place):
    order = await place()
    assert (await lifecycle.complete(db, order.id)).status == OrderStatus.COMPLETED


@pytest.mark.asyncio
async def test_complete_is_idempotent(db, place):
    order = await place()
    await lifecycle.mark_ready(db, order.id)
    first = await lifecycle.complete(db, order.id)
    second = await lifecycle.complete(db, order.id)
    assert first.status == second.status == OrderStatus.COMPLETED


@pytest.mark.asyncio
async def test_complete_missing_order(db):
    with pytest.raises(OrderNotFound):
        await lifecycle.complete(db, 5)


@pytest.mark.asyncio
async def test_completed_never_regresses(db, place):
    order = await place()
    await lifecycle.complete(db, order.id)

    with pytest.raises(InvalidTransition):
        await lifecycle.mark_ready(db, order.id)
    await lifecycle.mark_all_ready(db)

    assert (await order_ops.get_order(db, order.id)).status == OrderStatus.COMPLETED


@pytest.mark.asyncio
async def test_delete_from_any_state(db, place):
    pending, ready, done = await place(), await place(), await place()
    await lifecycle.mark_ready(db, ready.id)
    await lifecycle.complete(db, done.id)

    for order in (pending, ready, done):
        await lifecycle.delete(db, order.id)

    assert await order_ops.list_orders(db) == []


@pytest.mark.asyncio
async def test_store_failure_leaves_status_unchanged(db, place, monkeypatch):
    order_id = (await place()).id

    async def broken_commit():
        raise OperationalError("UPDATE orders", {}, Exception("connection reset"))

    monkeypatch.setattr(db, "commit", broken_commit)
    with pytest.raises(PersistenceFailure):
        await lifecycle.mark_ready(db, order_id)
    with pytest.raises(PersistenceFailure):
        await lifecycle.mark_all_ready(db)
    monkeypatch.undo()

    assert (await order_ops.get_order(db, order_id)).status == OrderStatus.PENDING
