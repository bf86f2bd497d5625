"""
Stall Orders — Catalog and customer data access
"""
import logging
from typing import Sequence

from sqlalchemy import select, delete, exists
from sqlalchemy.ext.asyncio import AsyncSession

from stall_orders.core.errors import CustomerNotFound, MenuItemInUse, MenuItemNotFound, OptionNotFound
from stall_orders.db.database import unit_of_work
from stall_orders.models.catalog import Customer, MenuItem, MenuItemOption
from stall_orders.models.order import OrderItem
from stall_orders.schemas.menu import MenuItemWrite, OptionWrite

logger = logging.getLogger(__name__)


# ─── Customers ────────────────────────────────────────────────────────────────

async def create_customer(db: AsyncSession, name: str, phone: str) -> Customer:
    customer = Customer(name=name, phone=phone)
    async with unit_of_work(db, "Failed to register customer, try again."):
        db.add(customer)
    await db.refresh(customer)
    return customer


async def get_customer(db: AsyncSession, customer_id: int) -> Customer:
    customer = await db.get(Customer, customer_id)
    if customer is None:
        raise CustomerNotFound(customer_id)
    return customer


# ─── Menu ─────────────────────────────────────────────────────────────────────

async def list_menu(db: AsyncSession) -> Sequence[MenuItem]:
    """All menu items with their options, ordered by type then name."""
    result = await db.execute(
        select(MenuItem)
        .order_by(MenuItem.item_type, MenuItem.name)
        .execution_options(populate_existing=True)
    )
    return result.scalars().all()


async def get_menu_item(db: AsyncSession, menu_item_id: int) -> MenuItem:
    item = await db.get(MenuItem, menu_item_id, populate_existing=True)
    if item is None:
        raise MenuItemNotFound(menu_item_id)
    return item


async def get_menu_items(db: AsyncSession, menu_item_ids: Sequence[int]) -> dict[int, MenuItem]:
    """Resolve several menu items (options loaded) in one round trip."""
    if not menu_item_ids:
        return {}
    result = await db.execute(
        select(MenuItem)
        .where(MenuItem.id.in_(set(menu_item_ids)))
        .execution_options(populate_existing=True)
    )
    return {item.id: item for item in result.scalars().all()}


async def create_menu_item(db: AsyncSession, payload: MenuItemWrite) -> MenuItem:
    item = MenuItem(name=payload.name, base_price=payload.base_price, item_type=payload.item_type)
    async with unit_of_work(db, "Failed to create menu item, try again."):
        db.add(item)
    await db.refresh(item)
    logger.info("Menu item %s created: %s @ %s", item.id, item.name, item.base_price)
    return item


async def update_menu_item(db: AsyncSession, menu_item_id: int, payload: MenuItemWrite) -> MenuItem:
    """
    Edit a catalog entry. Existing orders are unaffected: their line
    totals were frozen when they were placed.
    """
    item = await get_menu_item(db, menu_item_id)
    async with unit_of_work(db, f"Failed to update menu item {menu_item_id}, try again."):
        item.name = payload.name
        item.base_price = payload.base_price
        item.item_type = payload.item_type
    await db.refresh(item)
    return item


async def delete_menu_item(db: AsyncSession, menu_item_id: int) -> None:
    """Delete a menu item and its options. Refused while orders reference it."""
    await get_menu_item(db, menu_item_id)

    referenced = await db.scalar(select(exists().where(OrderItem.menu_item_id == menu_item_id)))
    if referenced:
        raise MenuItemInUse(menu_item_id)

    async with unit_of_work(db, f"Failed to delete menu item {menu_item_id}, try again."):
        await db.execute(delete(MenuItemOption).where(MenuItemOption.menu_item_id == menu_item_id))
        await db.execute(delete(MenuItem).where(MenuItem.id == menu_item_id))
    logger.info("Menu item %s deleted with its options", menu_item_id)


async def add_option(db: AsyncSession, menu_item_id: int, payload: OptionWrite) -> MenuItemOption:
    await get_menu_item(db, menu_item_id)
    option = MenuItemOption(
        menu_item_id=menu_item_id,
        option_name=payload.option_name,
        price_modifier=payload.price_modifier,
    )
    async with unit_of_work(db, f"Failed to add option to menu item {menu_item_id}, try again."):
        db.add(option)
    await db.refresh(option)
    return option


async def update_option(db: AsyncSession, option_id: int, payload: OptionWrite) -> MenuItemOption:
    option = await db.get(MenuItemOption, option_id)
    if option is None:
        raise OptionNotFound(option_id)
    async with unit_of_work(db, f"Failed to update option {option_id}, try again."):
        option.option_name = payload.option_name
        option.price_modifier = payload.price_modifier
    await db.refresh(option)
    return option


async def delete_option(db: AsyncSession, option_id: int) -> None:
    # Historical order items keep the id in selected_options; nothing to cascade
    option = await db.get(MenuItemOption, option_id)
    if option is None:
        raise OptionNotFound(option_id)
    async with unit_of_work(db, f"Failed to delete option {option_id}, try again."):
        await db.delete(option)
