"""
Stall Orders — Menu management (admin only)
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from stall_orders.core.security import require_admin
from stall_orders.db.database import get_db
from stall_orders.db import catalog_ops
from stall_orders.schemas.common import ActionResponse
from stall_orders.schemas.menu import MenuItemRead, MenuItemWrite, OptionRead, OptionWrite

router = APIRouter(prefix="/admin/menu", tags=["menu-admin"], dependencies=[Depends(require_admin)])


@router.post("", response_model=MenuItemRead, status_code=status.HTTP_201_CREATED)
async def create_menu_item(payload: MenuItemWrite, db: AsyncSession = Depends(get_db)):
    return await catalog_ops.create_menu_item(db, payload)


# Declared before "/{menu_item_id}" so "options" is not parsed as an id
@router.put("/options/{option_id}", response_model=OptionRead)
async def update_option(option_id: int, payload: OptionWrite, db: AsyncSession = Depends(get_db)):
    return await catalog_ops.update_option(db, option_id, payload)


@router.delete("/options/{option_id}", response_model=ActionResponse)
async def delete_option(option_id: int, db: AsyncSession = Depends(get_db)):
    await catalog_ops.delete_option(db, option_id)
    return ActionResponse()


@router.put("/{menu_item_id}", response_model=MenuItemRead)
async def update_menu_item(menu_item_id: int, payload: MenuItemWrite, db: AsyncSession = Depends(get_db)):
    return await catalog_ops.update_menu_item(db, menu_item_id, payload)


@router.delete("/{menu_item_id}", response_model=ActionResponse)
async def delete_menu_item(menu_item_id: int, db: AsyncSession = Depends(get_db)):
    """Deletes the item and all of its options."""
    await catalog_ops.delete_menu_item(db, menu_item_id)
    return ActionResponse()


@router.post("/{menu_item_id}/options", response_model=OptionRead, status_code=status.HTTP_201_CREATED)
async def add_option(menu_item_id: int, payload: OptionWrite, db: AsyncSession = Depends(get_db)):
    return await catalog_ops.add_option(db, menu_item_id, payload)
