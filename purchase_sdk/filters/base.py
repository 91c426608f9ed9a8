# purchase_sdk/filters/base.py

import logging
from datetime import date
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from purchase_sdk.config import settings
from purchase_sdk.schemas.purchase_order import PurchaseOrderStatus, normalize_date

logger = logging.getLogger(__name__)  # purchase_sdk.filters.base

STATUS_ALL = "All"
STATUS_OPTIONS = [STATUS_ALL] + [s.value for s in PurchaseOrderStatus]


class PurchaseOrderFilter(BaseModel):
    """
    Состояние фильтра списка заказов: поиск, статус, диапазон дат, страница и сортировка.

    Экземпляр неизменяемый по смыслу: контроллер списка не правит поля на месте,
    а получает новую копию через `merged()`. Перевод в query-параметры бэкенда
    (json-server конвенции: q, _page, _limit, _sort, _order, <field>_gte/_lte)
    выполняет `to_query_params()`.
    """
    search: Optional[str] = Field(
        default=None,
        title="Search term",
        description="Full-text search; trimmed, empty means no filter."
    )
    status: str = Field(
        default=STATUS_ALL,
        title="Status",
        description="Order status or 'All' for no status filter."
    )
    start_date: Optional[date] = Field(
        default=None,
        title="Order date from",
        description="Inclusive lower bound on orderDate."
    )
    end_date: Optional[date] = Field(
        default=None,
        title="Order date to",
        description="Inclusive upper bound on orderDate."
    )
    page: int = Field(default=1, title="Page", description="1-based page number.")
    page_size: int = Field(
        default_factory=lambda: settings.DEFAULT_PAGE_SIZE,
        title="Page size",
        description="Records per page."
    )
    sort_field: Optional[str] = Field(default=None, title="Sort field")
    sort_direction: Optional[Literal["asc", "desc"]] = Field(default=None, title="Sort direction")

    @field_validator("status", mode="before")
    @classmethod
    def check_status(cls, v: Any) -> str:
        if v is None or v == "":
            return STATUS_ALL
        if isinstance(v, PurchaseOrderStatus):
            return v.value
        if v not in STATUS_OPTIONS:
            raise ValueError(f"status must be one of {STATUS_OPTIONS}, got '{v}'")
        return v

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def strip_time_component(cls, v: Any) -> Any:
        return normalize_date(v)

    @property
    def effective_page(self) -> int:
        return max(1, self.page or 1)

    @property
    def effective_page_size(self) -> int:
        return max(1, self.page_size or 1)

    @property
    def offset(self) -> int:
        return (self.effective_page - 1) * self.effective_page_size

    def merged(self, **fields: Any) -> "PurchaseOrderFilter":
        """Возвращает новый фильтр с замененными полями (с повторной валидацией)."""
        unknown = set(fields) - set(type(self).model_fields)
        if unknown:
            raise ValueError(f"Unknown filter fields: {sorted(unknown)}")
        return type(self).model_validate({**self.model_dump(), **fields})

    def to_query_params(self, include_paging: bool = True) -> Dict[str, str]:
        params: Dict[str, str] = {}

        search = (self.search or "").strip()
        if search:
            params["q"] = search

        if self.status and self.status != STATUS_ALL:
            params["status"] = self.status

        if self.start_date:
            params["orderDate_gte"] = self.start_date.isoformat()
        if self.end_date:
            params["orderDate_lte"] = self.end_date.isoformat()

        if self.sort_field:
            params["_sort"] = self.sort_field
            params["_order"] = self.sort_direction or "asc"

        if include_paging:
            params["_page"] = str(self.effective_page)
            params["_limit"] = str(self.effective_page_size)

        logger.debug(f"Filter {self!r} mapped to query params: {params}")
        return params
