# purchase_sdk/tests/conftest.py
import logging
from datetime import date
from typing import Any, Dict, List, Optional
from unittest import mock

import httpx
import pytest
import pytest_asyncio

from purchase_sdk.data_access.gateway import BackendGateway, PaginationMode
from purchase_sdk.schemas.pagination import PageResult
from purchase_sdk.schemas.purchase_order import PurchaseOrder

logger = logging.getLogger("purchase_sdk.tests.conftest")

API_URL = "http://fake-backend.io"
ORDERS_URL = f"{API_URL}/purchaseOrders"


def order_payload(order_id: Any = 1, **overrides: Any) -> Dict[str, Any]:
    """JSON заказа в том виде, как его отдает бэкенд (camelCase)."""
    data: Dict[str, Any] = {
        "id": order_id,
        "poNumber": f"PO-{1700000000000 + (order_id if isinstance(order_id, int) else 0)}",
        "supplierId": 1,
        "warehouseId": 2,
        "shippingAddress": "12 Dock Road",
        "vatRate": 15,
        "orderDate": "2024-03-01",
        "status": "Draft",
        "memo": None,
        "items": [
            {"id": 1, "productId": 10, "quantity": 2, "unitPrice": 10.0, "lineTotal": 20.0},
            {"id": 2, "productId": 11, "quantity": 1, "unitPrice": 5.5, "lineTotal": 5.5},
        ],
        "subtotal": 25.5,
        "vatAmount": 3.83,
        "grandTotal": 29.33,
    }
    data.update(overrides)
    return data


def make_order(order_id: Any = 1, **overrides: Any) -> PurchaseOrder:
    return PurchaseOrder.model_validate(order_payload(order_id, **overrides))


def make_page(orders: List[PurchaseOrder], total: Optional[int] = None, page: int = 1, page_size: int = 10) -> PageResult[PurchaseOrder]:
    return PageResult[PurchaseOrder](
        items=orders,
        total_count=len(orders) if total is None else total,
        page=page,
        page_size=page_size,
    )


@pytest.fixture
def fixed_today() -> date:
    return date(2024, 5, 17)


@pytest.fixture
def mock_gateway() -> mock.AsyncMock:
    """Гейтвей-заглушка: async методы BackendGateway становятся AsyncMock."""
    gateway = mock.AsyncMock(spec=BackendGateway)
    gateway.list_purchase_orders.return_value = make_page([])
    gateway.list_suppliers.return_value = []
    gateway.list_warehouses.return_value = []
    gateway.list_products.return_value = []
    return gateway


@pytest_asyncio.fixture
async def http_client() -> httpx.AsyncClient:
    async with httpx.AsyncClient() as client:
        yield client


@pytest_asyncio.fixture
async def server_gateway(http_client: httpx.AsyncClient) -> BackendGateway:
    gateway = BackendGateway(API_URL, http_client=http_client, pagination_mode=PaginationMode.SERVER)
    yield gateway
    await gateway.close()


@pytest_asyncio.fixture
async def client_gateway(http_client: httpx.AsyncClient) -> BackendGateway:
    gateway = BackendGateway(API_URL, http_client=http_client, pagination_mode=PaginationMode.CLIENT)
    yield gateway
    await gateway.close()


__all__ = ["API_URL", "ORDERS_URL", "order_payload", "make_order", "make_page"]
