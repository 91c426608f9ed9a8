# purchase_sdk/builders/validation.py
from typing import Iterable, List, Sequence, Tuple

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from purchase_sdk.schemas.purchase_order import MIN_UNIT_PRICE
from .draft import OrderDraft

REQUIRED_HEADER_FIELDS: Tuple[str, ...] = (
    "supplier_id",
    "warehouse_id",
    "shipping_address",
    "vat_rate",
    "order_date",
)


class Violation(BaseModel):
    """Нарушение на уровне поля. field - путь в camelCase: 'supplierId', 'items[1].unitPrice'."""
    field: str
    code: str
    message: str

    model_config = ConfigDict(frozen=True)


def item_path(index: int, name: str) -> str:
    return f"items[{index}].{to_camel(name)}"


def validate_draft(draft: OrderDraft, allowed_vat_rates: Iterable[int]) -> List[Violation]:
    """Проверяет черновик целиком. Состояние не меняет."""
    violations: List[Violation] = []

    for name in REQUIRED_HEADER_FIELDS:
        value = getattr(draft, name)
        if value is None or (isinstance(value, str) and not value.strip()):
            violations.append(Violation(field=to_camel(name), code="required", message=f"{to_camel(name)} is required"))

    allowed = sorted(set(allowed_vat_rates))
    if draft.vat_rate is not None and draft.vat_rate not in allowed:
        violations.append(
            Violation(field="vatRate", code="not_allowed", message=f"vatRate must be one of {allowed}")
        )

    if not draft.items:
        violations.append(
            Violation(field="items", code="min_items", message="Add at least one item to the purchase order")
        )

    for index, item in enumerate(draft.items):
        if item.product_id is None:
            violations.append(
                Violation(field=item_path(index, "product_id"), code="required", message="productId is required")
            )
        if item.quantity is None:
            violations.append(
                Violation(field=item_path(index, "quantity"), code="required", message="quantity is required")
            )
        elif item.quantity < 1:
            violations.append(
                Violation(field=item_path(index, "quantity"), code="min_value", message="quantity must be at least 1")
            )
        if item.unit_price is None:
            violations.append(
                Violation(field=item_path(index, "unit_price"), code="required", message="unitPrice is required")
            )
        elif item.unit_price < MIN_UNIT_PRICE:
            violations.append(
                Violation(
                    field=item_path(index, "unit_price"),
                    code="min_value",
                    message=f"unitPrice must be at least {MIN_UNIT_PRICE}",
                )
            )

    return violations


def _loc_to_path(loc: Sequence, prefix: str = "") -> str:
    path = prefix
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path = f"{path}.{to_camel(str(part))}" if path else to_camel(str(part))
    return path or "__root__"


def violations_from_pydantic(exc: PydanticValidationError, prefix: str = "") -> List[Violation]:
    """Переводит ошибки pydantic в нарушения с путями полей в нашем формате."""
    return [
        Violation(field=_loc_to_path(error.get("loc", ()), prefix), code="invalid", message=error.get("msg", "invalid value"))
        for error in exc.errors()
    ]
