# purchase_sdk/controllers/order_list.py
import asyncio
import logging
from typing import Any, Callable, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from purchase_sdk.config import settings
from purchase_sdk.data_access.gateway import BackendGateway
from purchase_sdk.data_access.reference import ReferenceData
from purchase_sdk.exceptions import ErrorKind, PurchaseSDKError, error_kind_for
from purchase_sdk.filters.base import PurchaseOrderFilter, STATUS_ALL
from purchase_sdk.schemas.base import RecordId
from purchase_sdk.schemas.pagination import DisplayRange, display_range, total_pages
from purchase_sdk.schemas.purchase_order import PurchaseOrder
from .scheduling import Debouncer, SingleFlight

logger = logging.getLogger("purchase_sdk.controllers.order_list")

StateListener = Callable[["ListState"], Any]


class ListState(BaseModel):
    """Снимок видимого состояния списка. Каждое изменение - новый экземпляр."""
    rows: List[PurchaseOrder] = Field(default_factory=list)
    total_count: int = 0
    is_loading: bool = False
    last_error: Optional[ErrorKind] = None
    error_message: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class OrderListController:
    """
    Контроллер списка заказов: держит фильтр, страницу и видимое состояние.

    - set_filter() сливает поля в фильтр, сбрасывает страницу на 1 и
      откладывает запрос до окна тишины (debounce);
    - set_page() и refresh() отправляют запрос сразу;
    - в каждый момент "текущим" считается только последний отправленный запрос,
      ответы вытесненных запросов отбрасываются, даже если пришли позже;
    - ошибки запроса списка не пробрасываются, а превращаются в пустой список
      с выставленным last_error.
    """

    def __init__(
        self,
        gateway: BackendGateway,
        page_size: Optional[int] = None,
        debounce_seconds: Optional[float] = None,
        cancel_in_flight: bool = True,
        initial_filter: Optional[PurchaseOrderFilter] = None,
    ):
        self._gateway = gateway
        if initial_filter is None:
            initial_filter = PurchaseOrderFilter(page_size=page_size or settings.DEFAULT_PAGE_SIZE)
        elif page_size is not None:
            initial_filter = initial_filter.merged(page_size=page_size)
        self._filter = initial_filter
        self._state = ListState()
        self._listeners: List[StateListener] = []

        delay = settings.filter_debounce_seconds if debounce_seconds is None else debounce_seconds
        self._debouncer = Debouncer(delay, self._issue_query)
        self._flight = SingleFlight(cancel_superseded=cancel_in_flight)
        self.reference = ReferenceData()
        logger.debug(f"OrderListController initialized. Debounce: {delay}s, page size: {self._filter.page_size}, cancel in flight: {cancel_in_flight}")

    # --- Состояние ---

    @property
    def state(self) -> ListState:
        return self._state

    @property
    def filter(self) -> PurchaseOrderFilter:
        return self._filter

    @property
    def page(self) -> int:
        return self._filter.effective_page

    @property
    def page_size(self) -> int:
        return self._filter.effective_page_size

    @property
    def total_pages(self) -> int:
        return total_pages(self._state.total_count, self.page_size)

    @property
    def display_range(self) -> DisplayRange:
        return display_range(self.page, self.page_size, self._state.total_count)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Подписывает слушателя на каждое новое состояние. Возвращает функцию отписки."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, **changes: Any) -> None:
        self._state = self._state.model_copy(update=changes)
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                logger.exception(f"State listener {listener!r} failed.")

    # --- Публичные операции ---

    def set_filter(self, **fields: Any) -> None:
        if "page" in fields:
            raise ValueError("set_filter() always resets the page; use set_page() to change it")
        self._filter = self._filter.merged(page=1, **fields)
        logger.debug(f"Filter changed, reload scheduled: {self._filter!r}")
        self._debouncer.trigger()

    def clear_filters(self) -> None:
        self.set_filter(search="", status=STATUS_ALL, start_date=None, end_date=None)

    def set_page(self, page: int) -> Optional[asyncio.Task]:
        page = max(1, int(page))
        if page == self._filter.page:
            logger.debug(f"set_page({page}) is the current page, no query issued.")
            return None
        self._filter = self._filter.merged(page=page)
        return self._issue_query()

    async def refresh(self) -> ListState:
        task = self._issue_query()
        await asyncio.wait({task})
        return self._state

    async def delete(self, order_id: RecordId) -> bool:
        """
        Удаляет заказ и перечитывает текущую страницу.
        Подтверждение у пользователя - забота вызывающего кода.
        При ошибке строки не меняются, last_error выставляется, исключение пробрасывается.
        """
        logger.info(f"Deleting purchase order {order_id}.")
        try:
            await self._gateway.delete_purchase_order(order_id)
        except PurchaseSDKError as e:
            logger.error(f"Error deleting purchase order {order_id}: {e}")
            self._set_state(last_error=error_kind_for(e), error_message=str(e))
            raise

        await self.refresh()
        # Удалили последнюю запись на последней странице - остаемся на ближайшей существующей
        if self._state.total_count and self.page > self.total_pages:
            task = self.set_page(self.total_pages)
            if task is not None:
                await asyncio.wait({task})
        return True

    async def load_reference_data(self) -> ReferenceData:
        self.reference = await ReferenceData.load(self._gateway, include_products=False)
        return self.reference

    def supplier_name(self, supplier_id: RecordId) -> str:
        return self.reference.supplier_name(supplier_id, default=f"Supplier {supplier_id}")

    def warehouse_name(self, warehouse_id: RecordId) -> str:
        return self.reference.warehouse_name(warehouse_id, default=f"Warehouse {warehouse_id}")

    async def wait_idle(self) -> ListState:
        """Ждет, пока отработают отложенный фильтр и текущий запрос."""
        while self._debouncer.pending or self._flight.in_flight:
            await self._debouncer.wait()
            await self._flight.wait()
        return self._state

    def close(self) -> None:
        self._debouncer.cancel()
        self._flight.cancel()
        self._listeners.clear()

    # --- Внутреннее ---

    def _issue_query(self) -> asyncio.Task:
        # Запрос уже несет актуальный фильтр, отложенный запуск больше не нужен
        self._debouncer.cancel()
        flt = self._filter
        self._set_state(is_loading=True, last_error=None, error_message=None)
        return self._flight.start(lambda token: self._run_query(token, flt))

    async def _run_query(self, token: int, flt: PurchaseOrderFilter) -> None:
        logger.debug(f"List query #{token} started: {flt!r}")
        try:
            result = await self._gateway.list_purchase_orders(flt)
        except PurchaseSDKError as e:
            if not self._flight.is_current(token):
                logger.debug(f"Dropping stale failure of list query #{token}: {e}")
                return
            logger.error(f"List query #{token} failed: {e}")
            self._set_state(
                rows=[], total_count=0, is_loading=False,
                last_error=error_kind_for(e), error_message=str(e),
            )
            return

        if not self._flight.is_current(token):
            logger.debug(f"Dropping stale result of list query #{token} (current #{self._flight.token}).")
            return
        logger.debug(f"List query #{token} applied: {len(result.items)} rows of {result.total_count}.")
        self._set_state(
            rows=result.items, total_count=result.total_count, is_loading=False,
            last_error=None, error_message=None,
        )
