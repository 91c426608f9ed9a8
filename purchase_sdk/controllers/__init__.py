from .scheduling import Debouncer, SingleFlight
from .order_list import OrderListController, ListState

__all__ = [
    "Debouncer",
    "SingleFlight",
    "OrderListController",
    "ListState",
]
