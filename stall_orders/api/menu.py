"""
Stall Orders — Public menu listing
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from stall_orders.db.database import get_db
from stall_orders.db import catalog_ops
from stall_orders.schemas.menu import MenuItemRead

router = APIRouter(prefix="/menu", tags=["menu"])


@router.get("", response_model=list[MenuItemRead])
async def list_menu(db: AsyncSession = Depends(get_db)):
    """Menu items ordered by type and name, each with its options."""
    return await catalog_ops.list_menu(db)
