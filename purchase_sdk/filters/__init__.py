from .base import PurchaseOrderFilter, STATUS_ALL, STATUS_OPTIONS

__all__ = ["PurchaseOrderFilter", "STATUS_ALL", "STATUS_OPTIONS"]
