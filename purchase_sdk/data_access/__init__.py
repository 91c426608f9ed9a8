# purchase_sdk/data_access/__init__.py
from .gateway import BackendGateway, PaginationMode
from .reference import ReferenceData, LookupSet

__all__ = [
    "BackendGateway",
    "PaginationMode",
    "ReferenceData",
    "LookupSet",
]
