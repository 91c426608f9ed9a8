# purchase_sdk/builders/draft.py
from datetime import date
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from purchase_sdk.schemas.base import RecordId
from purchase_sdk.schemas.purchase_order import PurchaseOrderStatus, normalize_date

ZERO = Decimal("0.00")


def _blank_to_none(v: Any) -> Any:
    # Незаполненный select формы приходит пустой строкой
    if isinstance(v, str) and not v.strip():
        return None
    return v


class DraftItem(BaseModel):
    """
    Строка черновика. В отличие от PurchaseOrderItemCreate допускает незаполненные
    и неверные значения: о них сообщает validate(), а не конструктор.
    """
    model_config = ConfigDict(extra="forbid")

    id: Optional[RecordId] = None
    product_id: Optional[RecordId] = None
    quantity: Optional[int] = 1
    unit_price: Optional[Decimal] = None
    line_total: Decimal = ZERO

    @field_validator("product_id", "quantity", "unit_price", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        return _blank_to_none(v)


class OrderDraft(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: Optional[RecordId] = None
    po_number: Optional[str] = None
    supplier_id: Optional[RecordId] = None
    warehouse_id: Optional[RecordId] = None
    shipping_address: Optional[str] = None
    vat_rate: Optional[int] = None
    order_date: Optional[date] = None
    status: PurchaseOrderStatus = PurchaseOrderStatus.DRAFT
    memo: Optional[str] = None
    items: List[DraftItem] = Field(default_factory=list)

    subtotal: Decimal = ZERO
    vat_amount: Decimal = ZERO
    grand_total: Decimal = ZERO

    @field_validator("supplier_id", "warehouse_id", "vat_rate", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("order_date", mode="before")
    @classmethod
    def strip_time_component(cls, v: Any) -> Any:
        return normalize_date(v)


HEADER_FIELDS = frozenset(
    {"po_number", "supplier_id", "warehouse_id", "shipping_address", "vat_rate", "order_date", "memo"}
)
ITEM_FIELDS = frozenset({"product_id", "quantity", "unit_price"})
DERIVED_FIELDS = frozenset({"subtotal", "vat_amount", "grand_total", "line_total"})
