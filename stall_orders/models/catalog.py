"""
Stall Orders — Catalog and customer models

[CONFIG DATA]        menu_items, menu_item_options — edited by admins only
[TRANSACTIONAL DATA] customers — one row per walk-in registration
"""
from datetime import datetime
from decimal import Decimal
from enum import Enum as PyEnum

from sqlalchemy import String, Integer, DateTime, Numeric, ForeignKey, Enum, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stall_orders.db.database import Base


class ItemType(str, PyEnum):
    FRIED_RICE = "fried_rice"
    CURRY = "curry"
    SNACK = "snack"
    TEA = "tea"


class MenuItem(Base):
    __tablename__ = "menu_items"
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    base_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    item_type: Mapped[ItemType] = mapped_column(
        Enum(
            ItemType,
            name="item_type",
            values_callable=lambda e: [m.value for m in e],
            native_enum=False,
            length=16,
        ),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )

    options: Mapped[list["MenuItemOption"]] = relationship(
        back_populates="menu_item",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="MenuItemOption.option_name",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<MenuItem id={self.id} name={self.name!r} base_price={self.base_price}>"


class MenuItemOption(Base):
    __tablename__ = "menu_item_options"
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    menu_item_id: Mapped[int] = mapped_column(
        ForeignKey("menu_items.id", ondelete="CASCADE"), index=True, nullable=False
    )
    option_name: Mapped[str] = mapped_column(String(255), nullable=False)
    # Signed delta applied to the base price
    price_modifier: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )

    menu_item: Mapped[MenuItem] = relationship(back_populates="options")


class Customer(Base):
    """No uniqueness on phone: repeat visits create new rows."""
    __tablename__ = "customers"
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )
