"""
Stall Orders — Async engine, session factory and declarative base
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from stall_orders.core.config import get_settings
from stall_orders.core.errors import PersistenceFailure

settings = get_settings()
logger = logging.getLogger(__name__)

engine = create_async_engine(settings.database_url, pool_pre_ping=True, echo=settings.DEBUG)

AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase):
    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session


@asynccontextmanager
async def unit_of_work(db: AsyncSession, failure_message: str) -> AsyncIterator[AsyncSession]:
    """
    Run the statements in the block and commit them together.

    Any store error rolls the whole block back and surfaces as
    PersistenceFailure(failure_message); driver details stay in the log.
    Domain errors raised inside the block pass through untouched.
    """
    try:
        yield db
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Rolled back: %s", failure_message)
        raise PersistenceFailure(failure_message) from exc
