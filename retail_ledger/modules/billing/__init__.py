"""
Billing package exports.

- BillingController / BillDraft / BillState : finalize, edit and delete bills
- CreditLedger                              : per-customer store-credit balances
- link_return                               : copy lines of an earlier bill as returns
- split_tax / valuate / line_total / bill_total : bill math
- new_line_item / reprice_line_item        : validated line-item construction
"""

from .calculations import (
    TaxSplit,
    amount_payable,
    bill_total,
    line_total,
    max_credit_applicable,
    split_tax,
    valuate,
)
from .controller import BillDraft, BillingController, BillState
from .credit_ledger import CreditApplication, CreditLedger, CreditReversal
from .items import new_line_item, reprice_line_item
from .returns import link_return, resolve_original_bill_id

__all__ = [
    "BillingController",
    "BillDraft",
    "BillState",
    "CreditLedger",
    "CreditApplication",
    "CreditReversal",
    "link_return",
    "resolve_original_bill_id",
    "new_line_item",
    "reprice_line_item",
    "TaxSplit",
    "split_tax",
    "valuate",
    "line_total",
    "bill_total",
    "amount_payable",
    "max_credit_applicable",
]
