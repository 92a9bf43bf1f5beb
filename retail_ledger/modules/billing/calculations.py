"""
billing/calculations.py

Pure helpers for bill math:
- tax split of a tax-inclusive amount (fixed 5% GST, halved into CGST/SGST)
- line-item valuation (net unit value from MRP and discount)
- bill totals and the payable / credit split after store credit

Do not import repos or open DB connections here.
Only compute numbers; rounding and formatting belong in the presentation layer.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from ...constants import GST_RATE
from ...database.repositories.bills_repo import LineItem
from ...utils.exceptions import ValidationError
from ...utils.validators import is_percentage, try_parse_float

__all__ = [
    "TaxSplit",
    "split_tax",
    "valuate",
    "line_total",
    "bill_total",
    "final_payable",
    "amount_payable",
    "credit_generated_for",
    "clamp_non_negative",
    "max_credit_applicable",
]


# -----------------------------
# Core utilities
# -----------------------------

def clamp_non_negative(x: float) -> float:
    """Return x if x > 0, else 0.0."""
    return x if x > 0.0 else 0.0


# -----------------------------
# Tax
# -----------------------------

@dataclass(frozen=True)
class TaxSplit:
    pre_tax: float
    cgst: float
    sgst: float

    @property
    def total_tax(self) -> float:
        return self.cgst + self.sgst


def split_tax(grand_total: float) -> TaxSplit:
    """
    Split a tax-inclusive amount into pre-tax value and two equal tax halves.

        pre_tax = grand_total / 1.05
        cgst = sgst = (grand_total - pre_tax) / 2

    No rounding. A negative total (net return) yields negative components;
    that is a reversal, not an error.
    """
    pre_tax = grand_total / (1 + GST_RATE)
    half = (grand_total - pre_tax) / 2
    return TaxSplit(pre_tax=pre_tax, cgst=half, sgst=half)


# -----------------------------
# Line items
# -----------------------------

def valuate(mrp, discount_percentage) -> float:
    """
    Net unit value = mrp * (1 - discount_percentage / 100).

    Raises ValidationError if mrp <= 0 or the discount is outside [0, 100].
    Quantity never enters here.
    """
    ok, mrp_val = try_parse_float(mrp)
    if not ok or mrp_val is None or mrp_val <= 0:
        raise ValidationError("MRP must be a positive number.", field="mrp")
    if not is_percentage(discount_percentage):
        raise ValidationError("Discount must be between 0 and 100.", field="discount_percentage")
    return mrp_val * (1 - float(discount_percentage) / 100)


def line_total(item: LineItem) -> float:
    """Signed line total; returned lines (negative quantity) subtract."""
    return item.net_value * item.quantity


def bill_total(items: Iterable[LineItem]) -> float:
    return sum((line_total(it) for it in items), 0.0)


# -----------------------------
# Payable / credit
# -----------------------------

def final_payable(total: float, credit_applied: float) -> float:
    """total - credit_applied; negative means the customer is owed credit."""
    return total - credit_applied


def credit_generated_for(total: float, credit_applied: float) -> float:
    """Credit produced by a bill: the negative part of the payable, as a positive amount."""
    payable = final_payable(total, credit_applied)
    return -payable if payable < 0 else 0.0


def amount_payable(total: float, credit_applied: float) -> float:
    """What the customer actually hands over (never below zero)."""
    return clamp_non_negative(final_payable(total, credit_applied))


def max_credit_applicable(total: float, credit_balance: float) -> float:
    """
    The most credit worth applying to a bill right now.
    = min(total (clamped >= 0), credit_balance (clamped >= 0))
    """
    a = clamp_non_negative(total)
    b = clamp_non_negative(credit_balance)
    return a if a < b else b
