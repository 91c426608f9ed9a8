# purchase_sdk/schemas/__init__.py

from .base import BaseSchema, Money, RecordId
from .pagination import PageResult, DisplayRange, total_pages, display_range
from .purchase_order import (
    PurchaseOrderStatus,
    PurchaseOrder,
    PurchaseOrderItem,
    PurchaseOrderCreate,
    PurchaseOrderItemCreate,
    PurchaseOrderUpdate,
)
from .reference import Supplier, Warehouse, Product

__all__ = [
    "BaseSchema",
    "Money",
    "RecordId",
    "PageResult",
    "DisplayRange",
    "total_pages",
    "display_range",
    "PurchaseOrderStatus",
    "PurchaseOrder",
    "PurchaseOrderItem",
    "PurchaseOrderCreate",
    "PurchaseOrderItemCreate",
    "PurchaseOrderUpdate",
    "Supplier",
    "Warehouse",
    "Product",
]
