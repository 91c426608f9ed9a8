from .draft import OrderDraft, DraftItem
from .totals import OrderTotals, compute_totals, line_total, quantize_money
from .validation import Violation, validate_draft
from .order_builder import OrderBuilder, generate_po_number

__all__ = [
    "OrderDraft",
    "DraftItem",
    "OrderTotals",
    "compute_totals",
    "line_total",
    "quantize_money",
    "Violation",
    "validate_draft",
    "OrderBuilder",
    "generate_po_number",
]
