# purchase_sdk/schemas/purchase_order.py
import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional

from pydantic import Field, ValidationInfo, field_validator

from purchase_sdk.config import settings
from .base import BaseSchema, Money, RecordId

logger = logging.getLogger("purchase_sdk.schemas.purchase_order")

ZERO = Decimal("0.00")
MIN_UNIT_PRICE = Decimal("0.01")
ALLOWED_VAT_RATES_CONTEXT_KEY = "allowed_vat_rates"


class PurchaseOrderStatus(str, Enum):
    DRAFT = "Draft"
    APPROVED = "Approved"
    RECEIVED = "Received"


def normalize_date(value: Any) -> Any:
    """
    Приводит дату к календарной (без времени).
    Строки с временной частью ("2024-05-01T10:00:00Z") обрезаются до даты в UTC,
    пустые строки превращаются в None. Остальное отдаем pydantic как есть.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        if "T" in value:
            try:
                return normalize_date(datetime.fromisoformat(value.replace("Z", "+00:00")))
            except ValueError:
                return value.split("T", 1)[0]
    return value


class PurchaseOrderItemBase(BaseSchema):
    product_id: RecordId = Field(description="ID товара")
    quantity: int = Field(description="Количество")
    unit_price: Money = Field(description="Цена за единицу")
    line_total: Money = Field(default=ZERO, description="Сумма строки (quantity x unitPrice), вычисляемое")


class PurchaseOrderItem(PurchaseOrderItemBase):
    pass


class PurchaseOrderItemCreate(PurchaseOrderItemBase):
    quantity: int = Field(ge=1, description="Количество, не меньше 1")
    unit_price: Money = Field(ge=MIN_UNIT_PRICE, description="Цена за единицу, не меньше 0.01")


class PurchaseOrderBase(BaseSchema):
    po_number: str = Field(default="", description="Номер заказа на закупку (PO-<timestamp>)")
    supplier_id: RecordId = Field(description="ID поставщика")
    warehouse_id: RecordId = Field(description="ID склада")
    shipping_address: str = Field(description="Адрес доставки")
    vat_rate: int = Field(description="Ставка НДС в процентах")
    order_date: date = Field(description="Дата заказа (YYYY-MM-DD)")
    status: PurchaseOrderStatus = Field(default=PurchaseOrderStatus.DRAFT, description="Статус заказа")
    memo: Optional[str] = Field(default=None, description="Примечание")
    subtotal: Money = Field(default=ZERO, description="Сумма без НДС, вычисляемое")
    vat_amount: Money = Field(default=ZERO, description="Сумма НДС, вычисляемое")
    grand_total: Money = Field(default=ZERO, description="Итого с НДС, вычисляемое")

    @field_validator("order_date", mode="before")
    @classmethod
    def strip_time_component(cls, v: Any) -> Any:
        return normalize_date(v)


class PurchaseOrder(PurchaseOrderBase):
    """Заказ в том виде, в каком его отдает бэкенд."""
    items: List[PurchaseOrderItem] = Field(default_factory=list)


class PurchaseOrderCreate(PurchaseOrderBase):
    """Тело POST /purchaseOrders. Собирается OrderBuilder'ом после валидации."""
    po_number: str = Field(min_length=1, description="Номер заказа на закупку")
    items: List[PurchaseOrderItemCreate] = Field(min_length=1)

    @field_validator("vat_rate")
    @classmethod
    def check_vat_rate(cls, v: int, info: ValidationInfo) -> int:
        # Набор ставок можно передать через context={"allowed_vat_rates": [...]}
        context = info.context or {}
        allowed = sorted(set(context.get(ALLOWED_VAT_RATES_CONTEXT_KEY) or settings.ALLOWED_VAT_RATES))
        if v not in allowed:
            raise ValueError(f"vatRate must be one of {allowed}, got {v}")
        return v

    def to_payload(self, **kwargs) -> dict:
        # id назначает бэкенд
        return super().to_payload(exclude={"id"}, exclude_none=True, **kwargs)


class PurchaseOrderUpdate(PurchaseOrderCreate):
    """Тело PUT /purchaseOrders/{id}: полный заказ вместе с id."""
    id: RecordId
    # Номер не редактируется и уходит таким, каким пришел с бэкенда (в том числе пустым)
    po_number: str = Field(default="", description="Номер заказа на закупку")

    def to_payload(self, **kwargs) -> dict:
        return BaseSchema.to_payload(self, exclude_none=True, **kwargs)


logger.debug("PurchaseOrder schemas defined.")
