# purchase_sdk/__init__.py
from .exceptions import (
    PurchaseSDKError,
    ConfigurationError,
    NetworkError,
    NotFoundError,
    ValidationError,
    ErrorKind,
)
from .data_access import BackendGateway, PaginationMode, ReferenceData
from .filters import PurchaseOrderFilter
from .controllers import OrderListController, ListState
from .builders import OrderBuilder, Violation
from .logging_config import setup_sdk_logging

__all__ = [
    "PurchaseSDKError",
    "ConfigurationError",
    "NetworkError",
    "NotFoundError",
    "ValidationError",
    "ErrorKind",
    "BackendGateway",
    "PaginationMode",
    "ReferenceData",
    "PurchaseOrderFilter",
    "OrderListController",
    "ListState",
    "OrderBuilder",
    "Violation",
    "setup_sdk_logging",
]
