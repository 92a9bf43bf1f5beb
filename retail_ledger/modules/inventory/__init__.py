"""
Inventory package exports.

- closing_stock / closing_stock_totals / load_closing_stock
- record_purchase / new_purchased_item
"""

from .closing_stock import ClosingStockRow, closing_stock, closing_stock_totals, load_closing_stock
from .purchases import new_purchased_item, record_purchase

__all__ = [
    "ClosingStockRow",
    "closing_stock",
    "closing_stock_totals",
    "load_closing_stock",
    "new_purchased_item",
    "record_purchase",
]
