# purchase_sdk/builders/totals.py
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Iterable, Tuple

from pydantic import BaseModel, ConfigDict

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(value: Any) -> Decimal:
    """Число из поля формы; пустое или нечисловое значение считается нулем."""
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    try:
        # через str, чтобы 5.1 не превратилось в 5.0999999...
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return ZERO
    return result if result.is_finite() else ZERO


def quantize_money(value: Any) -> Decimal:
    return to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def line_total(quantity: Any, unit_price: Any) -> Decimal:
    return quantize_money(to_decimal(quantity) * to_decimal(unit_price))


class OrderTotals(BaseModel):
    line_totals: Tuple[Decimal, ...] = ()
    subtotal: Decimal = ZERO
    vat_amount: Decimal = ZERO
    grand_total: Decimal = ZERO

    model_config = ConfigDict(frozen=True)


def compute_totals(items: Iterable[Any], vat_rate: Any) -> OrderTotals:
    """
    Пересчитывает все производные суммы заказа разом.

    line_total = round(quantity * unit_price, 2)
    subtotal   = sum(line_total)
    vat_amount = round(subtotal * vat_rate / 100, 2)
    grand_total = subtotal + vat_amount

    Округление ROUND_HALF_UP до 2 знаков (3.825 -> 3.83).
    """
    line_totals = tuple(line_total(item.quantity, item.unit_price) for item in items)
    subtotal = sum(line_totals, ZERO)
    vat_amount = quantize_money(subtotal * to_decimal(vat_rate) / Decimal(100))
    return OrderTotals(
        line_totals=line_totals,
        subtotal=subtotal,
        vat_amount=vat_amount,
        grand_total=subtotal + vat_amount,
    )
