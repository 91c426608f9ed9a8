# purchase_sdk/data_access/gateway.py
import logging
from enum import Enum
from typing import Any, List, Optional, Union

import httpx
from pydantic import ValidationError as PydanticValidationError

from purchase_sdk.clients.base import RemoteServiceClient
from purchase_sdk.exceptions import ConfigurationError, NetworkError, NotFoundError
from purchase_sdk.filters.base import PurchaseOrderFilter
from purchase_sdk.schemas.base import RecordId
from purchase_sdk.schemas.pagination import PageResult
from purchase_sdk.schemas.purchase_order import PurchaseOrder, PurchaseOrderCreate, PurchaseOrderUpdate
from purchase_sdk.schemas.reference import Product, Supplier, Warehouse

logger = logging.getLogger("purchase_sdk.data_access.gateway")

PURCHASE_ORDERS_ENDPOINT = "purchaseOrders"
SUPPLIERS_ENDPOINT = "suppliers"
WAREHOUSES_ENDPOINT = "warehouses"
PRODUCTS_ENDPOINT = "products"


class PaginationMode(str, Enum):
    # бэкенд режет страницу сам (_page/_limit) и сообщает total
    SERVER = "server"
    # бэкенд отдает весь отфильтрованный список, страницу режем локально
    CLIENT = "client"


class BackendGateway:
    """
    Единая точка доступа к REST бэкенду заказов и справочников.

    Режим пагинации выбирается явно при создании и не смешивается:
    в режиме SERVER total берется только из X-Total-Count (или конверта json-server 1.x),
    ответ без total считается ошибкой, а не угадывается по длине массива.
    """

    def __init__(
        self,
        base_url: str,
        http_client: Optional[httpx.AsyncClient] = None,
        pagination_mode: Union[PaginationMode, str] = PaginationMode.SERVER,
        timeout: float = 10.0,
    ):
        try:
            self.pagination_mode = PaginationMode(pagination_mode)
        except ValueError as e:
            raise ConfigurationError(f"Unknown pagination mode: '{pagination_mode}'") from e

        self.base_url = str(base_url).rstrip("/")
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = http_client is None

        self.orders = RemoteServiceClient(self.base_url, PURCHASE_ORDERS_ENDPOINT, PurchaseOrder, http_client=self._http_client)
        self.suppliers = RemoteServiceClient(self.base_url, SUPPLIERS_ENDPOINT, Supplier, http_client=self._http_client)
        self.warehouses = RemoteServiceClient(self.base_url, WAREHOUSES_ENDPOINT, Warehouse, http_client=self._http_client)
        self.products = RemoteServiceClient(self.base_url, PRODUCTS_ENDPOINT, Product, http_client=self._http_client)

        logger.info(f"BackendGateway initialized for '{self.base_url}', pagination mode: {self.pagination_mode.value}.")

    @classmethod
    def from_settings(cls, app_settings: Any = None, http_client: Optional[httpx.AsyncClient] = None) -> "BackendGateway":
        if app_settings is None:
            from purchase_sdk.config import settings as app_settings
        return cls(
            base_url=app_settings.API_URL,
            http_client=http_client,
            pagination_mode=app_settings.PAGINATION_MODE,
            timeout=app_settings.REQUEST_TIMEOUT,
        )

    async def __aenter__(self) -> "BackendGateway":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_client:
            logger.info(f"Closing owned HTTP client for {self.base_url}")
            await self._http_client.aclose()

    # --- Заказы ---

    async def list_purchase_orders(self, flt: PurchaseOrderFilter) -> PageResult[PurchaseOrder]:
        page, page_size = flt.effective_page, flt.effective_page_size
        logger.debug(f"Gateway LIST purchase orders ({self.pagination_mode.value} mode). Filter: {flt!r}")

        if self.pagination_mode is PaginationMode.SERVER:
            items, total = await self.orders.list_page(flt.to_query_params(include_paging=True))
            if total is None:
                raise NetworkError(
                    "Server pagination expects a total count (X-Total-Count header or paged envelope), none received",
                    url=self.orders.api_base_url,
                )
            if len(items) > page_size:
                logger.warning(f"Backend returned {len(items)} rows for page size {page_size}; extra rows dropped.")
                items = items[:page_size]
        else:
            all_items = await self.orders.list_all(flt.to_query_params(include_paging=False))
            total = len(all_items)
            items = all_items[flt.offset:flt.offset + page_size]

        try:
            return PageResult[PurchaseOrder](items=items, total_count=total, page=page, page_size=page_size)
        except PydanticValidationError as e:
            logger.error(f"Could not assemble purchase order page from backend response: {e}")
            raise NetworkError(
                f"Invalid purchase order page: {e.error_count()} error(s)", url=self.orders.api_base_url
            ) from e

    async def get_purchase_order(self, order_id: RecordId) -> PurchaseOrder:
        order = await self.orders.get(order_id)
        if order is None:
            logger.info(f"Purchase order {order_id} not found (404).")
            raise NotFoundError("PurchaseOrder", order_id)
        return order

    async def create_purchase_order(self, data: PurchaseOrderCreate) -> PurchaseOrder:
        logger.debug(f"Gateway CREATE purchase order '{data.po_number}'.")
        return await self.orders.create(data)

    async def update_purchase_order(self, order_id: RecordId, data: PurchaseOrderUpdate) -> PurchaseOrder:
        logger.debug(f"Gateway UPDATE purchase order {order_id}.")
        try:
            return await self.orders.update(order_id, data)
        except NetworkError as e:
            if e.status_code == 404:
                raise NotFoundError("PurchaseOrder", order_id) from e
            raise

    async def delete_purchase_order(self, order_id: RecordId) -> None:
        logger.debug(f"Gateway DELETE purchase order {order_id}.")
        try:
            await self.orders.delete(order_id)
        except NetworkError as e:
            if e.status_code == 404:
                raise NotFoundError("PurchaseOrder", order_id) from e
            raise

    # --- Справочники (только чтение) ---

    async def list_suppliers(self) -> List[Supplier]:
        return await self.suppliers.list_all()

    async def list_warehouses(self) -> List[Warehouse]:
        return await self.warehouses.list_all()

    async def list_products(self) -> List[Product]:
        return await self.products.list_all()
