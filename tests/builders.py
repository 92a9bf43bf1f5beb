"""Builders for valid domain objects; override only what a test cares about."""
from __future__ import annotations

from retail_ledger.database.repositories.bills_repo import Bill
from retail_ledger.database.repositories.purchases_repo import Purchase
from retail_ledger.modules.billing import BillDraft, new_line_item
from retail_ledger.modules.inventory import new_purchased_item


def make_item(name="SHIRT", size="M", mrp=1000, quantity=1, discount=0, code="TOP01"):
    return new_line_item(
        name=name, size=size, mrp=mrp, quantity=quantity,
        discount_percentage=discount, code=code,
    )


def make_draft(items=None, mobile="9876543210", name="Asha", credit="", **kw):
    return BillDraft(
        customer_name=name,
        mobile_number=mobile,
        items=items if items is not None else [make_item()],
        credit_to_apply=credit,
        **kw,
    )


def make_bill(bill_id, items, date="2024-01-01", mobile="9876543210", **kw):
    return Bill(
        id=bill_id,
        customer_name=kw.pop("customer_name", "Asha"),
        customer_key=mobile,
        items=items,
        date=date,
        transaction_type=kw.pop("transaction_type", "Sale"),
        payment_method=kw.pop("payment_method", "Cash"),
        **kw,
    )


def make_purchase(purchase_id, lines, date="2024-01-01", supplier=None):
    """lines: iterable of (code, size, quantity, unit_cost[, name])."""
    items = []
    for line in lines:
        code, size, qty, cost, *rest = line
        items.append(new_purchased_item(
            name=rest[0] if rest else f"ITEM {code}",
            code=code, size=size, quantity=qty, value=cost,
        ))
    return Purchase(id=purchase_id, date=date, items=items, supplier=supplier)
