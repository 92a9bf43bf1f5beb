"""
billing/credit_ledger.py

In-memory owner of the store-credit balances (customer_key -> signed balance).

The billing controller is the only writer. It works on a copy(), persists the
affected entry together with the bill, and only then adopts the copy, so a
failed write never leaves a half-applied balance behind.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from ...constants import CREDIT_EPSILON
from .calculations import credit_generated_for, final_payable

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreditApplication:
    customer_key: str
    previous_balance: float
    new_balance: float
    credit_applied: float
    credit_generated: float
    final_payable: float


@dataclass(frozen=True)
class CreditReversal:
    customer_key: str
    previous_balance: float
    new_balance: float
    removed: bool


class CreditLedger:
    def __init__(self, balances: Optional[Mapping[str, float]] = None):
        self._balances: dict[str, float] = dict(balances or {})

    # ---- reads -------------------------------------------------------------

    def balance(self, customer_key: str) -> float:
        return self._balances.get(customer_key, 0.0)

    def has_entry(self, customer_key: str) -> bool:
        return customer_key in self._balances

    def snapshot(self) -> dict[str, float]:
        return dict(self._balances)

    def copy(self) -> "CreditLedger":
        return CreditLedger(self._balances)

    def __len__(self) -> int:
        return len(self._balances)

    # ---- writes ------------------------------------------------------------

    def apply(
        self,
        customer_key: str,
        previous_credit_applied: float,
        previous_credit_generated: float,
        new_credit_applied: float,
        bill_total: float,
    ) -> CreditApplication:
        """
        Book a finalized (or re-finalized) bill against the customer's balance.

            final_payable    = bill_total - new_credit_applied
            credit_generated = -final_payable if negative else 0
            new_balance      = balance - new_credit_applied + credit_generated

        The entry is written even when it lands on exactly 0. Over-application
        is not rejected here; callers clamp (see max_credit_applicable).

        On an update the previous effect of the bill is NOT reversed first:
        the new application is booked on top of the current balance.
        """
        current = self.balance(customer_key)
        payable = final_payable(bill_total, new_credit_applied)
        generated = credit_generated_for(bill_total, new_credit_applied)
        new_balance = current - new_credit_applied + generated
        self._balances[customer_key] = new_balance

        if previous_credit_applied or previous_credit_generated:
            _log.debug(
                "credit for %s re-applied on top of prior effect (applied=%s, generated=%s)",
                customer_key, previous_credit_applied, previous_credit_generated,
            )
        return CreditApplication(
            customer_key=customer_key,
            previous_balance=current,
            new_balance=new_balance,
            credit_applied=new_credit_applied,
            credit_generated=generated,
            final_payable=payable,
        )

    def reverse(
        self,
        customer_key: str,
        credit_applied: float,
        credit_generated: float,
    ) -> CreditReversal:
        """
        Undo a deleted bill's effect: give back what it consumed, take back
        what it produced. A result within CREDIT_EPSILON of zero drops the entry.
        """
        current = self.balance(customer_key)
        new_balance = current + credit_applied - credit_generated
        removed = abs(new_balance) < CREDIT_EPSILON
        if removed:
            self._balances.pop(customer_key, None)
        else:
            self._balances[customer_key] = new_balance
        return CreditReversal(
            customer_key=customer_key,
            previous_balance=current,
            new_balance=0.0 if removed else new_balance,
            removed=removed,
        )
