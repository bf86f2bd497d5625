"""
Shared fixtures: a per-test SQLite file database, sessions, an in-process HTTP
client bound to the app, and JWT helpers for admin callers.
"""
import os

# Settings are cached at import time, so the environment goes first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("ADMIN_EMAILS", '["admin@stall.test"]')
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("METRICS_ENABLED", "false")

from decimal import Decimal

import httpx
import pytest
import pytest_asyncio
from jose import jwt
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from stall_orders.core.config import get_settings
from stall_orders.db import catalog_ops
from stall_orders.db.database import Base, get_db
from stall_orders.main import app
from stall_orders.models.catalog import ItemType
from stall_orders.schemas.menu import MenuItemWrite, OptionWrite

settings = get_settings()

ADMIN_EMAIL = "admin@stall.test"


# ─── Database ──────────────────────────────────────────────────────────────────
@pytest_asyncio.fixture
async def engine(tmp_path):
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'orders.db'}", poolclass=NullPool)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


# ─── HTTP ──────────────────────────────────────────────────────────────────────
@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


def make_token(email: str, **claims) -> str:
    payload = {"sub": email, "email": email, **claims}
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(ADMIN_EMAIL)}"}


@pytest.fixture
def staff_headers() -> dict[str, str]:
    """Authenticated, but not on the admin allow-list."""
    return {"Authorization": f"Bearer {make_token('someone@else.test')}"}


# ─── Catalog seed ──────────────────────────────────────────────────────────────
@pytest_asyncio.fixture
async def fried_rice(db):
    """Fried Rice 5.00 with Extra Egg +1.00 and No Onion -0.50."""
    item = await catalog_ops.create_menu_item(
        db, MenuItemWrite(name="Fried Rice", base_price=Decimal("5.00"), item_type=ItemType.FRIED_RICE)
    )
    await catalog_ops.add_option(db, item.id, OptionWrite(option_name="Extra Egg", price_modifier=Decimal("1.00")))
    await catalog_ops.add_option(db, item.id, OptionWrite(option_name="No Onion", price_modifier=Decimal("-0.50")))
    return await catalog_ops.get_menu_item(db, item.id)


@pytest_asyncio.fixture
async def milk_tea(db):
    return await catalog_ops.create_menu_item(
        db, MenuItemWrite(name="Milk Tea", base_price=Decimal("1.50"), item_type=ItemType.TEA)
    )


@pytest_asyncio.fixture
async def customer(db):
    return await catalog_ops.create_customer(db, "Aung Aung", "0812345678")


def option_id(menu_item, name: str) -> int:
    return next(o.id for o in menu_item.options if o.option_name == name)
