"""
reporting/sales_reports.py

Read-only report rows derived from the bill history and the credit ledger:
item-wise (with the GST split per line), bill-wise (cash/card takings),
customer credit balances and day/week/month summaries.

Numbers are left unrounded; fmt_money() is for display.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Iterable, List, Mapping, Optional

from ...constants import CGST_PERCENT, PAYMENT_CARD, PAYMENT_CASH, SGST_PERCENT
from ...database.repositories.bills_repo import Bill
from ..billing.calculations import amount_payable, bill_total, line_total, split_tax

__all__ = [
    "ItemWiseRow",
    "BillWiseRow",
    "CustomerCreditRow",
    "PeriodSummaryRow",
    "filter_bills_by_date",
    "item_wise_rows",
    "item_wise_totals",
    "bill_wise_rows",
    "bill_wise_totals",
    "customer_credit_rows",
    "period_summary",
]


@dataclass
class ItemWiseRow:
    date: str
    bill_no: str
    customer: str
    item_details: str
    qty: int
    mrp: float
    disc_perc: float
    net_value: float
    pre_gst: float
    cgst_perc: float
    cgst_amount: float
    sgst_perc: float
    sgst_amount: float
    bill_id: str


@dataclass
class BillWiseRow:
    date: str
    bill_no: str
    customer: str
    card_payment: float
    cash_payment: float
    total_amount: float
    bill_id: str


@dataclass
class CustomerCreditRow:
    customer_name: str
    mobile_number: str
    credit: float
    last_transaction_bill_no: str


@dataclass
class PeriodSummaryRow:
    start_date: str
    end_date: str
    total: float
    count: int


def _customer_label(bill: Bill) -> str:
    return f"{bill.customer_name} ({bill.customer_key})"


def filter_bills_by_date(
    bills: Iterable[Bill],
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
) -> List[Bill]:
    """Inclusive ISO date range; either bound may be omitted."""
    out = []
    for b in bills:
        if date_from and b.date < date_from:
            continue
        if date_to and b.date > date_to:
            continue
        out.append(b)
    return out


# -----------------------------
# Item-wise
# -----------------------------

def item_wise_rows(bills: Iterable[Bill]) -> List[ItemWiseRow]:
    rows: List[ItemWiseRow] = []
    for bill in bills:
        for item in bill.items:
            net = line_total(item)
            tax = split_tax(net)
            rows.append(
                ItemWiseRow(
                    date=bill.date,
                    bill_no=bill.number,
                    customer=_customer_label(bill),
                    item_details=f"{item.name} ({item.code or 'N/A'} / {item.size})",
                    qty=item.quantity,
                    mrp=item.mrp * item.quantity,
                    disc_perc=item.discount_percentage,
                    net_value=net,
                    pre_gst=tax.pre_tax,
                    cgst_perc=CGST_PERCENT,
                    cgst_amount=tax.cgst,
                    sgst_perc=SGST_PERCENT,
                    sgst_amount=tax.sgst,
                    bill_id=bill.id,
                )
            )
    rows.sort(key=lambda r: r.bill_no)
    return rows


def item_wise_totals(rows: Iterable[ItemWiseRow]) -> Dict[str, float]:
    totals = {"qty": 0, "mrp": 0.0, "net_value": 0.0, "pre_gst": 0.0, "cgst_amount": 0.0, "sgst_amount": 0.0}
    for r in rows:
        totals["qty"] += r.qty
        totals["mrp"] += r.mrp
        totals["net_value"] += r.net_value
        totals["pre_gst"] += r.pre_gst
        totals["cgst_amount"] += r.cgst_amount
        totals["sgst_amount"] += r.sgst_amount
    return totals


# -----------------------------
# Bill-wise
# -----------------------------

def bill_wise_rows(bills: Iterable[Bill]) -> List[BillWiseRow]:
    rows: List[BillWiseRow] = []
    for bill in bills:
        total = bill_total(bill.items)
        payable = amount_payable(total, bill.credit_applied)
        rows.append(
            BillWiseRow(
                date=bill.date,
                bill_no=bill.number,
                customer=_customer_label(bill),
                card_payment=payable if bill.payment_method == PAYMENT_CARD else 0.0,
                cash_payment=payable if bill.payment_method == PAYMENT_CASH else 0.0,
                total_amount=total,
                bill_id=bill.id,
            )
        )
    rows.sort(key=lambda r: r.bill_no)
    return rows


def bill_wise_totals(rows: Iterable[BillWiseRow]) -> Dict[str, float]:
    totals = {"card_payment": 0.0, "cash_payment": 0.0, "total_amount": 0.0, "total_bills": 0}
    for r in rows:
        totals["card_payment"] += r.card_payment
        totals["cash_payment"] += r.cash_payment
        totals["total_amount"] += r.total_amount
        totals["total_bills"] += 1
    return totals


# -----------------------------
# Customer credit
# -----------------------------

def customer_credit_rows(credits: Mapping[str, float], bills: Iterable[Bill]) -> List[CustomerCreditRow]:
    """
    One row per ledger entry, largest balance first. The name comes from
    the earliest bill for that mobile number by (date, id), whatever order
    the bills arrive in.
    """
    bills = list(bills)
    first_bill: Dict[str, Bill] = {}
    last_credit_bill: Dict[str, Bill] = {}
    for b in bills:
        earliest = first_bill.get(b.customer_key)
        if earliest is None or (b.date, b.id) < (earliest.date, earliest.id):
            first_bill[b.customer_key] = b
        if b.credit_applied > 0 or b.credit_generated > 0:
            seen = last_credit_bill.get(b.customer_key)
            if seen is None or (b.date, b.id) > (seen.date, seen.id):
                last_credit_bill[b.customer_key] = b

    rows = [
        CustomerCreditRow(
            customer_name=first_bill[key].customer_name if key in first_bill else "N/A",
            mobile_number=key,
            credit=balance,
            last_transaction_bill_no=(
                last_credit_bill[key].number if key in last_credit_bill else "N/A"
            ),
        )
        for key, balance in credits.items()
    ]
    rows.sort(key=lambda r: r.credit, reverse=True)
    return rows


# -----------------------------
# Period summary
# -----------------------------

def _period_bounds(d: date, grouping: str) -> tuple[date, date]:
    if grouping == "week":
        # weeks start on Sunday
        start = d - timedelta(days=(d.weekday() + 1) % 7)
        return start, start + timedelta(days=6)
    if grouping == "month":
        start = d.replace(day=1)
        nxt = (start + timedelta(days=32)).replace(day=1)
        return start, nxt - timedelta(days=1)
    return d, d


def period_summary(bills: Iterable[Bill], grouping: str = "day") -> List[PeriodSummaryRow]:
    """Bill totals and counts per day / week / month, newest period first."""
    if grouping not in ("day", "week", "month"):
        raise ValueError(f"Unknown grouping '{grouping}'.")

    buckets: Dict[date, list] = {}
    for bill in bills:
        start, end = _period_bounds(date.fromisoformat(bill.date), grouping)
        bucket = buckets.setdefault(start, [end, 0.0, 0])
        bucket[1] += bill_total(bill.items)
        bucket[2] += 1

    return [
        PeriodSummaryRow(start_date=start.isoformat(), end_date=end.isoformat(), total=total, count=count)
        for start, (end, total, count) in sorted(buckets.items(), reverse=True)
    ]
