from __future__ import annotations

import logging
import sqlite3
from typing import Iterable, Optional

from ...database.repositories.purchases_repo import Purchase, PurchasedItem, PurchasesRepo
from ...utils.exceptions import PersistenceError, ValidationError
from ...utils.helpers import new_id, today_str
from ...utils.validators import is_non_negative_number, non_empty, try_parse_whole

_log = logging.getLogger(__name__)


def new_purchased_item(*, name: str, code: str, size: str, quantity, value) -> PurchasedItem:
    if not non_empty(name):
        raise ValidationError("Item name is required.", field="name")
    if not non_empty(code):
        raise ValidationError("Item code is required.", field="code")
    if not non_empty(size):
        raise ValidationError("Size is required.", field="size")
    ok, qty = try_parse_whole(quantity, positive_only=True)
    if not ok:
        raise ValidationError("Quantity must be a positive whole number.", field="quantity")
    if not is_non_negative_number(value):
        raise ValidationError("Cost value must be zero or more.", field="value")
    return PurchasedItem(
        id=new_id(),
        name=name.strip().upper(),
        code=code.strip().upper(),
        size=size.strip().upper(),
        quantity=qty,
        value=float(value),
    )


def record_purchase(
    conn: sqlite3.Connection,
    items: Iterable[PurchasedItem],
    *,
    date: Optional[str] = None,
    supplier: Optional[str] = None,
) -> Purchase:
    """
    Append a purchase to the history (own transaction). Purchases are never
    edited afterwards.
    """
    items = list(items)
    if not items:
        raise ValidationError("A purchase needs at least one item.", field="items")
    for it in items:
        if it.quantity <= 0:
            raise ValidationError(f"Quantity of '{it.name}' must be positive.", field="quantity")
        if it.value < 0:
            raise ValidationError(f"Cost of '{it.name}' cannot be negative.", field="value")

    purchase = Purchase(
        id=new_id(),
        date=date or today_str(),
        supplier=(supplier or "").strip() or None,
        items=items,
    )
    try:
        with conn:
            PurchasesRepo(conn).insert_purchase(purchase)
    except sqlite3.Error as exc:
        _log.error("recording purchase failed: %s", exc)
        raise PersistenceError("Could not record the purchase. Please retry.") from exc
    _log.info("recorded purchase %s (%d lines) from %s", purchase.id, len(items), purchase.supplier or "N/A")
    return purchase
