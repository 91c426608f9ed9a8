from .base import RemoteServiceClient, TOTAL_COUNT_HEADER

__all__ = ["RemoteServiceClient", "TOTAL_COUNT_HEADER"]
