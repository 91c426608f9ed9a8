# purchase_sdk/builders/order_builder.py
import logging
import time
from datetime import date
from typing import Any, Callable, Iterable, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from purchase_sdk.config import settings
from purchase_sdk.data_access.gateway import BackendGateway
from purchase_sdk.data_access.reference import ReferenceData
from purchase_sdk.exceptions import ValidationError
from purchase_sdk.schemas.base import RecordId
from purchase_sdk.schemas.purchase_order import (
    ALLOWED_VAT_RATES_CONTEXT_KEY,
    PurchaseOrder,
    PurchaseOrderCreate,
    PurchaseOrderItemCreate,
    PurchaseOrderStatus,
    PurchaseOrderUpdate,
)
from .draft import DERIVED_FIELDS, HEADER_FIELDS, ITEM_FIELDS, DraftItem, OrderDraft
from .totals import OrderTotals, compute_totals
from .validation import Violation, validate_draft, violations_from_pydantic

logger = logging.getLogger("purchase_sdk.builders.order_builder")


def generate_po_number() -> str:
    return f"PO-{int(time.time() * 1000)}"


class OrderBuilder:
    """
    Черновик заказа на закупку с пересчетом сумм "на лету".

    После каждой правки шапки или строк все производные поля (lineTotal,
    subtotal, vatAmount, grandTotal) пересчитываются синхронно и целиком
    из текущих строк и ставки НДС. Отправка на бэкенд возможна только
    для черновика без нарушений.
    """

    def __init__(
        self,
        gateway: BackendGateway,
        default_vat_rate: Optional[int] = None,
        allowed_vat_rates: Optional[Iterable[int]] = None,
        today: Callable[[], date] = date.today,
        po_number_factory: Callable[[], str] = generate_po_number,
    ):
        self._gateway = gateway
        self.default_vat_rate = settings.DEFAULT_VAT_RATE if default_vat_rate is None else default_vat_rate
        self.allowed_vat_rates = sorted(set(allowed_vat_rates or settings.ALLOWED_VAT_RATES))
        self._today = today
        self._po_number_factory = po_number_factory
        self._totals = OrderTotals()
        self.reference = ReferenceData()
        self._draft = OrderDraft()
        self.init_create()

    # --- Состояние ---

    @property
    def draft(self) -> OrderDraft:
        """Копия черновика; менять его нужно через методы билдера."""
        return self._draft.model_copy(deep=True)

    @property
    def totals(self) -> OrderTotals:
        return self._totals

    @property
    def items(self) -> List[DraftItem]:
        return [item.model_copy() for item in self._draft.items]

    @property
    def is_edit_mode(self) -> bool:
        return self._draft.id is not None

    # --- Инициализация ---

    def init_create(self) -> None:
        self._draft = OrderDraft(
            vat_rate=self.default_vat_rate,
            order_date=self._today(),
            status=PurchaseOrderStatus.DRAFT,
        )
        self._recalculate()
        logger.debug("Draft reset for a new purchase order.")

    def init_edit(self, order: PurchaseOrder) -> None:
        self._draft = OrderDraft(
            id=order.id,
            po_number=order.po_number,
            supplier_id=order.supplier_id,
            warehouse_id=order.warehouse_id,
            shipping_address=order.shipping_address,
            vat_rate=order.vat_rate,
            order_date=order.order_date,
            status=order.status,
            memo=order.memo,
            items=[
                DraftItem(id=item.id, product_id=item.product_id, quantity=item.quantity, unit_price=item.unit_price)
                for item in order.items
            ],
        )
        self._recalculate()

        stored = (order.subtotal, order.vat_amount, order.grand_total)
        computed = (self._totals.subtotal, self._totals.vat_amount, self._totals.grand_total)
        if stored != computed:
            logger.warning(
                f"Stored totals of purchase order {order.id} {tuple(map(str, stored))} differ from recomputed "
                f"{tuple(map(str, computed))}; using recomputed values."
            )
        logger.debug(f"Draft loaded from purchase order {order.id} with {len(order.items)} items.")

    async def load(self, order_id: RecordId) -> OrderDraft:
        """Загружает заказ с бэкенда для редактирования. NotFoundError/NetworkError пробрасываются."""
        order = await self._gateway.get_purchase_order(order_id)
        self.init_edit(order)
        return self.draft

    async def load_reference_data(self) -> ReferenceData:
        self.reference = await ReferenceData.load(self._gateway, include_products=True)
        return self.reference

    # --- Правки ---

    def add_item(self, **fields: Any) -> int:
        self._check_fields(fields, ITEM_FIELDS)
        index = len(self._draft.items)
        item = self._validated(DraftItem, fields, prefix=f"items[{index}]")
        self._draft.items.append(item)
        self._recalculate()
        return index

    def remove_item(self, index: int) -> None:
        self._check_index(index)
        del self._draft.items[index]
        self._recalculate()

    def update_item(self, index: int, **fields: Any) -> None:
        self._check_index(index)
        self._check_fields(fields, ITEM_FIELDS)
        current = self._draft.items[index]
        self._draft.items[index] = self._validated(
            DraftItem, {**current.model_dump(), **fields}, prefix=f"items[{index}]"
        )
        self._recalculate()

    def update_header(self, **fields: Any) -> None:
        self._check_fields(fields, HEADER_FIELDS)
        data = {**self._draft.model_dump(), **fields}
        self._draft = self._validated(OrderDraft, data)
        self._recalculate()

    # --- Проверка и отправка ---

    def validate(self) -> List[Violation]:
        return validate_draft(self._draft, self.allowed_vat_rates)

    def build_payload(self) -> Union[PurchaseOrderCreate, PurchaseOrderUpdate]:
        """Собирает тело запроса из проверенного черновика (номер заказа генерируется только при создании)."""
        draft = self._draft
        items = [
            PurchaseOrderItemCreate(
                id=item.id,
                product_id=item.product_id,
                quantity=item.quantity,
                unit_price=item.unit_price,
                line_total=line_total,
            )
            for item, line_total in zip(draft.items, self._totals.line_totals)
        ]
        common = dict(
            supplier_id=draft.supplier_id,
            warehouse_id=draft.warehouse_id,
            shipping_address=draft.shipping_address,
            vat_rate=draft.vat_rate,
            order_date=draft.order_date,
            memo=draft.memo or None,
            items=items,
            subtotal=self._totals.subtotal,
            vat_amount=self._totals.vat_amount,
            grand_total=self._totals.grand_total,
        )
        # Те же ставки НДС, по которым проверял validate()
        context = {ALLOWED_VAT_RATES_CONTEXT_KEY: self.allowed_vat_rates}
        if self.is_edit_mode:
            return PurchaseOrderUpdate.model_validate(
                dict(id=draft.id, po_number=draft.po_number or "", status=draft.status, **common), context=context
            )
        po_number = (draft.po_number or "").strip() or self._po_number_factory()
        return PurchaseOrderCreate.model_validate(
            dict(po_number=po_number, status=PurchaseOrderStatus.DRAFT, **common), context=context
        )

    async def submit(self) -> PurchaseOrder:
        violations = self.validate()
        if violations:
            logger.info(f"Submit blocked by {len(violations)} violation(s): {[v.field for v in violations]}")
            raise ValidationError(violations)

        try:
            payload = self.build_payload()
        except PydanticValidationError as e:
            raise ValidationError(violations_from_pydantic(e)) from e

        if isinstance(payload, PurchaseOrderUpdate):
            logger.info(f"Updating purchase order {payload.id} ({payload.po_number}).")
            saved = await self._gateway.update_purchase_order(payload.id, payload)
        else:
            logger.info(f"Creating purchase order {payload.po_number}.")
            saved = await self._gateway.create_purchase_order(payload)

        # Повторный submit того же черновика должен обновлять, а не создавать дубликат
        self.init_edit(saved)
        return saved

    # --- Справочники ---

    def product_name(self, product_id: Optional[RecordId]) -> str:
        return self.reference.product_name(product_id)

    def supplier_name(self, supplier_id: Optional[RecordId]) -> str:
        return self.reference.supplier_name(supplier_id)

    def warehouse_name(self, warehouse_id: Optional[RecordId]) -> str:
        return self.reference.warehouse_name(warehouse_id)

    # --- Внутреннее ---

    def _recalculate(self) -> None:
        totals = compute_totals(self._draft.items, self._draft.vat_rate)
        for item, line_total in zip(self._draft.items, totals.line_totals):
            item.line_total = line_total
        self._draft.subtotal = totals.subtotal
        self._draft.vat_amount = totals.vat_amount
        self._draft.grand_total = totals.grand_total
        self._totals = totals

    def _check_index(self, index: int) -> None:
        if not isinstance(index, int) or not 0 <= index < len(self._draft.items):
            raise ValidationError(
                [Violation(field="items", code="out_of_range", message=f"No item at index {index}")],
                message=f"Item index {index} is out of range (items: {len(self._draft.items)})",
            )

    @staticmethod
    def _check_fields(fields: dict, allowed: frozenset) -> None:
        derived = set(fields) & DERIVED_FIELDS
        if derived:
            raise ValueError(f"Derived fields are always recomputed and cannot be set: {sorted(derived)}")
        unknown = set(fields) - allowed
        if unknown:
            raise ValueError(f"Unknown fields: {sorted(unknown)}")

    @staticmethod
    def _validated(model_cls, data: dict, prefix: str = ""):
        try:
            return model_cls.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(violations_from_pydantic(e, prefix=prefix)) from e
