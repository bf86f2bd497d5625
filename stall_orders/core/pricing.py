"""
Stall Orders — Pricing engine

Pure functions: no session, no I/O. The menu item passed in must have
its options loaded.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from stall_orders.core.errors import UnknownOption, ValidationError

CENTS = Decimal("0.01")

# Numeric(10,2) holds at most 8 integer digits
MAX_AMOUNT = Decimal("99999999.99")
MAX_QUANTITY = 1000


def to_money(value) -> Decimal:
    """Quantize to two decimal places for storage."""
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def unit_price(menu_item, option_ids: Iterable[int]) -> Decimal:
    """Base price plus the modifiers of the selected options."""
    by_id = {opt.id: opt for opt in menu_item.options}
    wanted = list(dict.fromkeys(option_ids))
    unknown = [oid for oid in wanted if oid not in by_id]
    if unknown:
        raise UnknownOption(menu_item.id, unknown)

    price = Decimal(str(menu_item.base_price))
    for oid in wanted:
        price += Decimal(str(by_id[oid].price_modifier))
    return price


def compute_line_total(menu_item, option_ids: Iterable[int], quantity: int) -> Decimal:
    """
    line_total = quantity * (base_price + sum(option modifiers)).

    Duplicate option ids count once. No intermediate rounding is applied;
    callers quantize with to_money() when persisting. A line that would not
    fit a stored amount is rejected as bad input.
    """
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise ValidationError(
            "Quantity must be a positive integer",
            fields=[{"field": "quantity", "message": "must be >= 1"}],
        )
    if quantity > MAX_QUANTITY:
        raise ValidationError(
            f"Quantity must not exceed {MAX_QUANTITY}",
            fields=[{"field": "quantity", "message": f"must be <= {MAX_QUANTITY}"}],
        )
    total = unit_price(menu_item, option_ids) * quantity
    if abs(to_money(total)) > MAX_AMOUNT:
        raise ValidationError(
            f"Line total {total} for menu item {menu_item.id} exceeds the maximum of {MAX_AMOUNT}",
            fields=[{"field": "quantity", "message": "line total too large"}],
        )
    return total
