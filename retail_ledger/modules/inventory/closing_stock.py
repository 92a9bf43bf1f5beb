"""
Closing stock per (item code, size).

On-hand quantity = everything purchased - everything billed. Returned lines
carry negative quantities, so netting them puts the units back on the shelf.
Derived on demand from the full history; never stored.

Tie-breaks are explicit rather than order-dependent:
- last purchase of a key: latest date, then greatest purchase id
- last known MRP of a code: line from the bill with the latest (date, id);
  within one bill the later line wins
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import Iterable, Optional

from ...database.repositories.bills_repo import Bill, BillsRepo
from ...database.repositories.purchases_repo import Purchase, PurchasesRepo


@dataclass
class ClosingStockRow:
    code: str
    size: str
    name: str
    quantity_on_hand: int
    last_known_mrp: Optional[float]
    last_supplier: Optional[str]
    last_purchase_date: str
    last_known_cost: float

    @property
    def total_value_at_cost(self) -> float:
        return self.quantity_on_hand * self.last_known_cost


@dataclass
class _StockAccumulator:
    name: str
    quantity: int
    cost: float
    supplier: Optional[str]
    purchase_date: str
    purchase_id: str


def closing_stock(purchases: Iterable[Purchase], bills: Iterable[Bill]) -> list[ClosingStockRow]:
    """
    Rows with a positive on-hand quantity, sorted by (code, size).
    Sold items that were never purchased here (opening inventory) add nothing.
    """
    stock: dict[tuple[str, str], _StockAccumulator] = {}

    for purchase in purchases:
        for item in purchase.items:
            key = (item.code, item.size)
            acc = stock.get(key)
            if acc is None:
                stock[key] = _StockAccumulator(
                    name=item.name,
                    quantity=item.quantity,
                    cost=item.value,
                    supplier=purchase.supplier,
                    purchase_date=purchase.date,
                    purchase_id=purchase.id,
                )
                continue
            acc.quantity += item.quantity
            if (purchase.date, purchase.id) >= (acc.purchase_date, acc.purchase_id):
                acc.name = item.name
                acc.cost = item.value
                acc.supplier = purchase.supplier
                acc.purchase_date = purchase.date
                acc.purchase_id = purchase.id

    mrp_lookup: dict[str, tuple[tuple[str, str], float]] = {}
    for bill in bills:
        rank = (bill.date, bill.id)
        for item in bill.items:
            acc = stock.get((item.code, item.size))
            if acc is not None:
                acc.quantity -= item.quantity
            seen = mrp_lookup.get(item.code)
            if seen is None or rank >= seen[0]:
                mrp_lookup[item.code] = (rank, item.mrp)

    rows = [
        ClosingStockRow(
            code=code,
            size=size,
            name=acc.name,
            quantity_on_hand=acc.quantity,
            last_known_mrp=mrp_lookup[code][1] if code in mrp_lookup else None,
            last_supplier=acc.supplier,
            last_purchase_date=acc.purchase_date,
            last_known_cost=acc.cost,
        )
        for (code, size), acc in stock.items()
        if acc.quantity > 0
    ]
    rows.sort(key=lambda r: (r.code, r.size))
    return rows


def closing_stock_totals(rows: Iterable[ClosingStockRow]) -> dict[str, float]:
    """{"total_quantity": ..., "total_value": ...} over the given rows."""
    total_qty = 0
    total_value = 0.0
    for r in rows:
        total_qty += r.quantity_on_hand
        total_value += r.total_value_at_cost
    return {"total_quantity": total_qty, "total_value": total_value}


def load_closing_stock(conn: sqlite3.Connection) -> list[ClosingStockRow]:
    """Closing stock over everything recorded in the store."""
    return closing_stock(PurchasesRepo(conn).list_purchases(), BillsRepo(conn).list_bills())
