"""
Pricing engine — pure line-total computation.
"""
from decimal import Decimal

import pytest

from stall_orders.core.errors import UnknownOption, ValidationError
from stall_orders.core.pricing import MAX_QUANTITY, compute_line_total, to_money, unit_price
from stall_orders.models.catalog import ItemType, MenuItem, MenuItemOption


@pytest.fixture
def curry():
    return MenuItem(
        id=7,
        name="Chicken Curry",
        base_price=Decimal("6.00"),
        item_type=ItemType.CURRY,
        options=[
            MenuItemOption(id=71, option_name="Extra Rice", price_modifier=Decimal("1.25")),
            MenuItemOption(id=72, option_name="Small Portion", price_modifier=Decimal("-1.00")),
            MenuItemOption(id=73, option_name="Spicy", price_modifier=Decimal("0")),
        ],
    )


@pytest.mark.parametrize("option_ids, quantity, expected", [
    ([], 1, Decimal("6.00")),
    ([], 3, Decimal("18.00")),
    ([71], 2, Decimal("14.50")),
    ([72], 1, Decimal("5.00")),
    ([71, 72, 73], 4, Decimal("25.00")),
])
def test_line_total_is_quantity_times_unit_price(curry, option_ids, quantity, expected):
    assert compute_line_total(curry, option_ids, quantity) == expected


def test_extra_egg_scenario():
    rice = MenuItem(
        id=1, name="Fried Rice", base_price=Decimal("5.00"), item_type=ItemType.FRIED_RICE,
        options=[MenuItemOption(id=1, option_name="Extra Egg", price_modifier=Decimal("1.00"))],
    )
    assert compute_line_total(rice, [1], 2) == Decimal("12.00")


def test_duplicate_option_ids_count_once(curry):
    assert compute_line_total(curry, [71, 71], 1) == Decimal("7.25")


def test_option_of_another_item_is_rejected(curry):
    with pytest.raises(UnknownOption) as exc_info:
        compute_line_total(curry, [71, 999], 1)
    assert exc_info.value.option_ids == [999]
    assert exc_info.value.status_code == 400


@pytest.mark.parametrize("quantity", [0, -1, True, 1.5])
def test_quantity_must_be_positive_integer(curry, quantity):
    with pytest.raises(ValidationError):
        compute_line_total(curry, [], quantity)


def test_unit_price_has_no_intermediate_rounding():
    snack = MenuItem(
        id=3, name="Samosa", base_price=Decimal("0.333"), item_type=ItemType.SNACK,
        options=[MenuItemOption(id=31, option_name="Chutney", price_modifier=Decimal("0.333"))],
    )
    assert unit_price(snack, [31]) == Decimal("0.666")
    assert compute_line_total(snack, [31], 3) == Decimal("1.998")
    assert to_money(compute_line_total(snack, [31], 3)) == Decimal("2.00")


def test_quantity_above_limit_is_rejected(curry):
    assert compute_line_total(curry, [], MAX_QUANTITY) == Decimal("6.00") * MAX_QUANTITY
    with pytest.raises(ValidationError) as exc_info:
        compute_line_total(curry, [], MAX_QUANTITY + 1)
    assert exc_info.value.status_code == 400


def test_line_total_must_fit_stored_amount():
    platter = MenuItem(
        id=9, name="Wedding Platter", base_price=Decimal("99999.99"), item_type=ItemType.CURRY, options=[],
    )
    assert compute_line_total(platter, [], 1000) == Decimal("99999990.00")

    platter.base_price = Decimal("100000.00")
    with pytest.raises(ValidationError) as exc_info:
        compute_line_total(platter, [], 1000)
    assert exc_info.value.fields[0]["field"] == "quantity"
