from __future__ import annotations

from dataclasses import replace

from ...database.repositories.bills_repo import LineItem
from ...utils.exceptions import ValidationError
from ...utils.helpers import new_id
from ...utils.validators import non_empty, try_parse_whole
from .calculations import valuate


def _parse_quantity(quantity) -> int:
    ok, qty = try_parse_whole(quantity)
    if not ok:
        raise ValidationError("Quantity must be a non-zero whole number.", field="quantity")
    return qty


def new_line_item(
    *,
    name: str,
    size: str,
    mrp,
    quantity=1,
    discount_percentage=0,
    code: str = "",
    item_id: str | None = None,
) -> LineItem:
    """
    Build a validated line item. Text fields are stripped and upper-cased
    like the shop's item entry; the net value is derived, never supplied.
    """
    if not non_empty(name):
        raise ValidationError("Item name is required.", field="name")
    if not non_empty(size):
        raise ValidationError("Size is required.", field="size")
    disc = 0 if discount_percentage in (None, "") else discount_percentage
    net = valuate(mrp, disc)
    return LineItem(
        id=item_id or new_id(),
        code=(code or "").strip().upper(),
        name=name.strip().upper(),
        size=size.strip().upper(),
        mrp=float(mrp),
        quantity=_parse_quantity(quantity),
        discount_percentage=float(disc),
        net_value=net,
    )


def reprice_line_item(
    item: LineItem,
    *,
    mrp=None,
    discount_percentage=None,
    quantity=None,
) -> LineItem:
    """
    Return a copy of `item` with new MRP / discount / quantity.

    The net value is re-derived from MRP and discount only; a quantity
    change alone leaves it untouched.
    """
    new_mrp = item.mrp if mrp is None else mrp
    new_disc = item.discount_percentage if discount_percentage is None else discount_percentage
    changes: dict = {}
    if mrp is not None or discount_percentage is not None:
        changes.update(
            mrp=float(new_mrp),
            discount_percentage=float(new_disc),
            net_value=valuate(new_mrp, new_disc),
        )
    if quantity is not None:
        changes["quantity"] = _parse_quantity(quantity)
    return replace(item, **changes)
