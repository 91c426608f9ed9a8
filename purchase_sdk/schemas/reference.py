# purchase_sdk/schemas/reference.py
from typing import Optional

from pydantic import Field

from .base import BaseSchema, RecordId


class ReferenceEntity(BaseSchema):
    """Справочная запись: id + отображаемое имя. Только для чтения."""
    id: RecordId
    name: str = Field(description="Отображаемое имя")


class Supplier(ReferenceEntity):
    email: Optional[str] = None
    phone: Optional[str] = None


class Warehouse(ReferenceEntity):
    address: Optional[str] = None


class Product(ReferenceEntity):
    sku: Optional[str] = None
    category: Optional[str] = None
