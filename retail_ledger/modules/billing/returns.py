from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Optional

from ...database.repositories.bills_repo import Bill, LineItem
from ...utils.helpers import new_id


def link_return(original_bill: Bill, selected_item_ids: Iterable[str]) -> list[LineItem]:
    """
    Copy the selected lines of `original_bill` as returned lines.

    Each copy gets quantity = -abs(quantity), a fresh id, and remembers the
    bill it came from. The original lines are left untouched. Nothing stops
    returning more than was sold, or returning from the same bill twice.
    """
    wanted = set(selected_item_ids)
    return [
        replace(
            item,
            id=new_id(),
            quantity=-abs(item.quantity),
            origin_bill_id=original_bill.id,
        )
        for item in original_bill.items
        if item.id in wanted
    ]


def resolve_original_bill_id(items: Iterable[LineItem]) -> Optional[str]:
    """
    Bill-to-bill link for a return/exchange: the origin bill of the first
    returned line, or None when it cannot be determined.
    """
    for item in items:
        if item.quantity < 0:
            return item.origin_bill_id
    return None


def has_returned_items(items: Iterable[LineItem]) -> bool:
    return any(it.quantity < 0 for it in items)
