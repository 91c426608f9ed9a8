# purchase_sdk/tests/builders/test_totals.py
from decimal import Decimal
from types import SimpleNamespace

import pytest

from purchase_sdk.builders.totals import compute_totals, line_total, quantize_money, to_decimal


def _item(quantity, unit_price):
    return SimpleNamespace(quantity=quantity, unit_price=unit_price)


def test_reference_order_totals():
    totals = compute_totals([_item(2, Decimal("10.00")), _item(1, Decimal("5.50"))], 15)

    assert totals.line_totals == (Decimal("20.00"), Decimal("5.50"))
    assert totals.subtotal == Decimal("25.50")
    assert totals.vat_amount == Decimal("3.83")  # 3.825 округляется вверх
    assert totals.grand_total == Decimal("29.33")


def test_empty_order_is_zero():
    totals = compute_totals([], 20)
    assert totals.line_totals == ()
    assert totals.subtotal == Decimal("0.00")
    assert totals.grand_total == Decimal("0.00")


def test_subtotal_does_not_depend_on_item_order():
    items = [_item(3, "1.15"), _item(7, "0.33"), _item(1, "99.99")]
    forward = compute_totals(items, 10)
    backward = compute_totals(list(reversed(items)), 10)
    assert forward.subtotal == backward.subtotal
    assert forward.grand_total == backward.grand_total


@pytest.mark.parametrize("vat_rate", [5, 10, 15, 20])
def test_grand_total_is_subtotal_plus_vat(vat_rate):
    totals = compute_totals([_item(3, "12.345"), _item(2, "0.99")], vat_rate)
    assert totals.grand_total == totals.subtotal + totals.vat_amount
    assert totals.vat_amount == quantize_money(totals.subtotal * vat_rate / Decimal(100))


@pytest.mark.parametrize(
    "quantity, unit_price, expected",
    [
        (2, "10", Decimal("20.00")),
        (3, "0.335", Decimal("1.01")),  # 1.005 -> 1.01
        (None, "5", Decimal("0.00")),
        (2, None, Decimal("0.00")),
        ("abc", "5", Decimal("0.00")),
        (1, 5.1, Decimal("5.10")),
    ],
)
def test_line_total(quantity, unit_price, expected):
    assert line_total(quantity, unit_price) == expected


@pytest.mark.parametrize("value", [None, True, "", "n/a", float("nan"), Decimal("Infinity")])
def test_to_decimal_treats_garbage_as_zero(value):
    assert to_decimal(value) == Decimal("0")
