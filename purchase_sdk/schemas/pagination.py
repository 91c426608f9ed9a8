# purchase_sdk/schemas/pagination.py
import math
from typing import Generic, List, NamedTuple, TypeVar

from pydantic import BaseModel, Field

DataType = TypeVar("DataType")


class PageResult(BaseModel, Generic[DataType]):
    """
    Одна страница списка и общее количество записей под текущим фильтром.
    Формируется гейтвеем одинаково для обоих режимов пагинации.
    """

    items: List[DataType] = Field(default_factory=list, description="Записи текущей страницы.")
    total_count: int = Field(0, ge=0, description="Всего записей под фильтром (не только на странице).")
    page: int = Field(1, ge=1, description="Номер страницы, начиная с 1.")
    page_size: int = Field(10, ge=1, description="Размер страницы.")

    model_config = {
        "arbitrary_types_allowed": True
    }


class DisplayRange(NamedTuple):
    start: int
    end: int


def total_pages(total_count: int, page_size: int) -> int:
    """Количество страниц; пустой список - это все равно одна страница."""
    page_size = max(1, page_size)
    return max(1, math.ceil(total_count / page_size))


def display_range(page: int, page_size: int, total_count: int) -> DisplayRange:
    """Номера первой и последней записи на странице ("Showing 11-20 of 25")."""
    if total_count <= 0:
        return DisplayRange(0, 0)
    start = (page - 1) * page_size + 1
    end = min(page * page_size, total_count)
    return DisplayRange(start, end)
