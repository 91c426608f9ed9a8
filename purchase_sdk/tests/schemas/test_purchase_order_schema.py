# purchase_sdk/tests/schemas/test_purchase_order_schema.py
from datetime import date, datetime, timezone, timedelta
from decimal import Decimal

import pytest
from pydantic import ValidationError

from purchase_sdk.schemas.pagination import DisplayRange, display_range, total_pages
from purchase_sdk.schemas.purchase_order import (
    PurchaseOrder,
    PurchaseOrderCreate,
    PurchaseOrderItemCreate,
    PurchaseOrderStatus,
    PurchaseOrderUpdate,
    normalize_date,
)
from purchase_sdk.schemas.reference import Product, Supplier
from purchase_sdk.tests.conftest import order_payload


def _create_kwargs(**overrides):
    data = dict(
        po_number="PO-1",
        supplier_id=1,
        warehouse_id=2,
        shipping_address="12 Dock Road",
        vat_rate=15,
        order_date=date(2024, 3, 1),
        items=[PurchaseOrderItemCreate(product_id=10, quantity=2, unit_price=Decimal("10.00"), line_total=Decimal("20.00"))],
        subtotal=Decimal("20.00"),
        vat_amount=Decimal("3.00"),
        grand_total=Decimal("23.00"),
    )
    data.update(overrides)
    return data


def test_purchase_order_parses_camel_case_payload():
    order = PurchaseOrder.model_validate(order_payload(7))

    assert order.id == 7
    assert order.supplier_id == 1
    assert order.warehouse_id == 2
    assert order.order_date == date(2024, 3, 1)
    assert order.status is PurchaseOrderStatus.DRAFT
    assert len(order.items) == 2
    assert order.items[1].unit_price == Decimal("5.5")
    assert order.grand_total == Decimal("29.33")


def test_purchase_order_accepts_string_ids():
    order = PurchaseOrder.model_validate(order_payload("a1b2", supplierId="s-1"))
    assert order.id == "a1b2"
    assert order.supplier_id == "s-1"


def test_order_date_time_component_is_stripped():
    order = PurchaseOrder.model_validate(order_payload(1, orderDate="2024-03-01T22:15:00Z"))
    assert order.order_date == date(2024, 3, 1)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2024-03-01", "2024-03-01"),
        ("2024-03-01T10:00:00", date(2024, 3, 1)),
        ("2024-03-01T23:30:00-02:00", date(2024, 3, 2)),  # в UTC это уже 2 марта
        (datetime(2024, 3, 1, 8, 0), date(2024, 3, 1)),
        (datetime(2024, 3, 1, 1, 0, tzinfo=timezone(timedelta(hours=3))), date(2024, 2, 29)),
        (date(2024, 3, 1), date(2024, 3, 1)),
        ("", None),
        (None, None),
    ],
)
def test_normalize_date(value, expected):
    assert normalize_date(value) == expected


def test_create_payload_is_camel_case_with_numeric_money():
    payload = PurchaseOrderCreate(**_create_kwargs()).to_payload()

    assert "id" not in payload
    assert payload["poNumber"] == "PO-1"
    assert payload["supplierId"] == 1
    assert payload["orderDate"] == "2024-03-01"
    assert payload["status"] == "Draft"
    assert payload["grandTotal"] == 23.0
    assert isinstance(payload["vatAmount"], float)
    assert payload["items"][0] == {"productId": 10, "quantity": 2, "unitPrice": 10.0, "lineTotal": 20.0}
    assert "memo" not in payload


def test_update_payload_keeps_id_and_status():
    payload = PurchaseOrderUpdate(id=5, status=PurchaseOrderStatus.APPROVED, **_create_kwargs()).to_payload()
    assert payload["id"] == 5
    assert payload["status"] == "Approved"


@pytest.mark.parametrize(
    "overrides",
    [
        {"items": []},
        {"vat_rate": 12},
        {"po_number": ""},
    ],
)
def test_create_schema_rejects_invalid_orders(overrides):
    with pytest.raises(ValidationError):
        PurchaseOrderCreate(**_create_kwargs(**overrides))


@pytest.mark.parametrize(
    "quantity, unit_price",
    [(0, Decimal("1.00")), (1, Decimal("0.00")), (-2, Decimal("5"))],
)
def test_item_create_constraints(quantity, unit_price):
    with pytest.raises(ValidationError):
        PurchaseOrderItemCreate(product_id=1, quantity=quantity, unit_price=unit_price)


def test_reference_entities_ignore_unknown_fields():
    supplier = Supplier.model_validate({"id": 1, "name": "Acme", "email": "a@acme.io", "rating": 5})
    product = Product.model_validate({"id": "p1", "name": "Bolt", "sku": "B-1"})
    assert supplier.name == "Acme"
    assert not hasattr(supplier, "rating")
    assert product.category is None


@pytest.mark.parametrize(
    "total_count, page_size, expected",
    [(0, 10, 1), (25, 10, 3), (10, 10, 1), (11, 10, 2), (1, 1, 1), (5, 0, 5)],
)
def test_total_pages(total_count, page_size, expected):
    assert total_pages(total_count, page_size) == expected


@pytest.mark.parametrize(
    "page, page_size, total_count, expected",
    [
        (1, 10, 0, DisplayRange(0, 0)),
        (1, 10, 25, DisplayRange(1, 10)),
        (3, 10, 25, DisplayRange(21, 25)),
        (2, 5, 7, DisplayRange(6, 7)),
    ],
)
def test_display_range(page, page_size, total_count, expected):
    assert display_range(page, page_size, total_count) == expected


def test_vat_rate_set_can_come_from_validation_context():
    data = _create_kwargs(vat_rate=7)

    with pytest.raises(ValidationError):
        PurchaseOrderCreate.model_validate(data)

    order = PurchaseOrderCreate.model_validate(data, context={"allowed_vat_rates": [7]})
    assert order.vat_rate == 7

    with pytest.raises(ValidationError):
        PurchaseOrderCreate.model_validate(_create_kwargs(vat_rate=15), context={"allowed_vat_rates": [7]})


def test_update_schema_accepts_empty_stored_po_number():
    payload = PurchaseOrderUpdate(id=3, **_create_kwargs(po_number="")).to_payload()
    assert payload["poNumber"] == ""
    assert payload["id"] == 3
