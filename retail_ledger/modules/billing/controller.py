from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass, field, replace
from typing import Iterable, Optional

from ...constants import (
    PAYMENT_CASH,
    PAYMENT_METHODS,
    TRANSACTION_SALE,
    TRANSACTION_TYPES,
)
from ...database.repositories.bills_repo import Bill, BillsRepo, LineItem
from ...database.repositories.customer_credits_repo import CustomerCreditsRepo
from ...database.repositories.purchases_repo import Purchase, PurchasedItem
from ...utils.exceptions import DomainError, PersistenceError, ValidationError
from ...utils.helpers import fmt_money, new_id, next_invoice_number, today_str
from ...utils.loggers import get_logger
from ...utils.validators import is_iso_date, non_empty, parse_credit_amount, try_parse_whole
from ..inventory.purchases import record_purchase
from .calculations import bill_total, max_credit_applicable, valuate
from .credit_ledger import CreditLedger
from .returns import has_returned_items, resolve_original_bill_id

_log = logging.getLogger(__name__)


class BillState:
    DRAFT = "draft"
    VALIDATING = "validating"
    COMPUTING = "computing"
    PERSISTING = "persisting"
    FINALIZED = "finalized"


@dataclass
class BillDraft:
    """Editable form state of a bill before it is finalized."""
    customer_name: str = ""
    mobile_number: str = ""
    items: list[LineItem] = field(default_factory=list)
    date: str = field(default_factory=today_str)
    transaction_type: str = TRANSACTION_SALE
    payment_method: str = PAYMENT_CASH
    credit_to_apply: str | float = ""
    address: str | None = None
    gst_number: str | None = None
    custom_invoice_number: str | None = None
    bill_id: str | None = None          # set while editing an existing bill


class BillingController:
    """
    Bill finalization workflow: validate -> compute -> persist -> finalized.

    The bill row and the customer's credit entry are written in one sqlite
    transaction. The in-memory ledger is swapped for the staged copy only
    after that transaction commits; on any error nothing changes and the
    controller is back in DRAFT with `last_error` set.
    """

    def __init__(self, conn: sqlite3.Connection, ledger: CreditLedger | None = None):
        get_logger()
        self.conn = conn
        self.bills = BillsRepo(conn)
        self.credits = CustomerCreditsRepo(conn)
        self.ledger = ledger if ledger is not None else CreditLedger(self.credits.load_all())

        self.state: str = BillState.DRAFT
        self.last_error: str | None = None
        self._last_invoice_number: str | None = None

    # ---- state -------------------------------------------------------------

    def reload(self) -> None:
        """Re-read the credit ledger from the store."""
        self.ledger = CreditLedger(self.credits.load_all())
        self.state = BillState.DRAFT
        self.last_error = None

    def list_bills(self) -> list[Bill]:
        return self.bills.list_bills()

    def available_credit(self, customer_key: str) -> float:
        return self.ledger.balance(customer_key)

    def max_credit_for(self, draft: BillDraft) -> float:
        """The "Apply Max" amount: credit on hand, capped by the bill total."""
        return max_credit_applicable(bill_total(draft.items), self.ledger.balance(draft.mobile_number.strip()))

    # ---- drafts ------------------------------------------------------------

    def suggest_invoice_number(self) -> Optional[str]:
        if not self._last_invoice_number:
            return None
        return next_invoice_number(self._last_invoice_number)

    def new_draft(self) -> BillDraft:
        return BillDraft(custom_invoice_number=self.suggest_invoice_number())

    def start_edit(self, bill_id: str) -> BillDraft:
        bill = self.bills.get(bill_id)
        if bill is None:
            raise ValidationError(f"Bill '{bill_id}' does not exist.")
        self.state = BillState.DRAFT
        self.last_error = None
        return BillDraft(
            customer_name=bill.customer_name,
            mobile_number=bill.customer_key,
            items=list(bill.items),
            date=bill.date,
            transaction_type=bill.transaction_type,
            payment_method=bill.payment_method,
            credit_to_apply=str(bill.credit_applied),
            address=bill.address,
            gst_number=bill.gst_number,
            custom_invoice_number=bill.custom_invoice_number,
            bill_id=bill.id,
        )

    # ---- finalize ----------------------------------------------------------

    def finalize(self, draft: BillDraft, is_update: bool = False) -> Bill:
        """
        Commit a draft as a bill (new, or full replace when is_update).

        Raises ValidationError / PersistenceError; both leave ledger and store
        untouched.
        """
        self.last_error = None
        try:
            self.state = BillState.VALIDATING
            previous = self._validate(draft, is_update)

            self.state = BillState.COMPUTING
            bill, staged = self._compute(draft, previous)

            self.state = BillState.PERSISTING
            self._persist_bill(bill, is_update, staged)
        except DomainError as exc:
            self._fail("finalize", exc)
            raise

        self.ledger = staged
        self.state = BillState.FINALIZED
        if bill.custom_invoice_number:
            self._last_invoice_number = bill.custom_invoice_number
        _log.info(
            "%s bill %s (%s) for %s: applied=%s generated=%s balance=%s",
            "updated" if is_update else "finalized",
            bill.id, bill.transaction_type, bill.customer_key,
            fmt_money(bill.credit_applied), fmt_money(bill.credit_generated),
            fmt_money(self.ledger.balance(bill.customer_key)),
        )
        return bill

    def _validate(self, draft: BillDraft, is_update: bool) -> Optional[Bill]:
        if not non_empty(draft.customer_name):
            raise ValidationError("Customer name is required.", field="customer_name")
        if not non_empty(draft.mobile_number):
            raise ValidationError("Mobile number is required.", field="mobile_number")
        if not draft.items:
            raise ValidationError("At least one item is required.", field="items")
        if not is_iso_date(draft.date):
            raise ValidationError(f"Bill date '{draft.date}' must be YYYY-MM-DD.", field="date")
        if draft.transaction_type not in TRANSACTION_TYPES:
            raise ValidationError(
                f"Unknown transaction type '{draft.transaction_type}'.", field="transaction_type"
            )
        if draft.payment_method not in PAYMENT_METHODS:
            raise ValidationError(
                f"Unknown payment method '{draft.payment_method}'.", field="payment_method"
            )
        for item in draft.items:
            valuate(item.mrp, item.discount_percentage)
            if not try_parse_whole(item.quantity)[0]:
                raise ValidationError(
                    f"Quantity of '{item.name}' must be a non-zero whole number.", field="quantity"
                )
        if draft.transaction_type != TRANSACTION_SALE and not has_returned_items(draft.items):
            raise ValidationError(
                f"A {draft.transaction_type} needs at least one returned item.", field="items"
            )

        if not is_update:
            return None
        if not draft.bill_id:
            raise ValidationError("No bill is being edited.", field="bill_id")
        previous = self.bills.get(draft.bill_id)
        if previous is None:
            raise ValidationError(f"Bill '{draft.bill_id}' does not exist.", field="bill_id")
        return previous

    def _compute(self, draft: BillDraft, previous: Optional[Bill]) -> tuple[Bill, CreditLedger]:
        customer_key = draft.mobile_number.strip()
        # net value is always derived from MRP and discount, never trusted
        items = [replace(it, net_value=valuate(it.mrp, it.discount_percentage)) for it in draft.items]
        total = bill_total(items)
        credit = parse_credit_amount(draft.credit_to_apply)

        staged = self.ledger.copy()
        applied = staged.apply(
            customer_key,
            previous.credit_applied if previous else 0.0,
            previous.credit_generated if previous else 0.0,
            credit,
            total,
        )

        # nothing left to pay by card once credit covers the bill
        method = draft.payment_method if applied.final_payable > 0 else PAYMENT_CASH

        bill = Bill(
            id=previous.id if previous else new_id(),
            customer_name=draft.customer_name.strip(),
            customer_key=customer_key,
            items=items,
            date=draft.date,
            transaction_type=draft.transaction_type,
            payment_method=method,
            credit_applied=credit,
            credit_generated=applied.credit_generated,
            original_bill_id=(
                None if draft.transaction_type == TRANSACTION_SALE
                else resolve_original_bill_id(draft.items)
            ),
            address=draft.address,
            gst_number=(draft.gst_number or "").strip() or None,
            custom_invoice_number=(draft.custom_invoice_number or "").strip() or None,
        )
        return bill, staged

    def _persist_bill(self, bill: Bill, is_update: bool, staged: CreditLedger) -> None:
        try:
            with self.conn:
                if is_update:
                    self.bills.replace_bill(bill)
                else:
                    self.bills.insert_bill(bill)
                self.credits.set_balance(bill.customer_key, staged.balance(bill.customer_key))
        except (sqlite3.Error, ValueError) as exc:
            raise PersistenceError("Could not save the transaction. Nothing was changed; please retry.") from exc

    # ---- delete ------------------------------------------------------------

    def delete(self, bill_id: str) -> Bill:
        """
        Remove a bill and give back / take back the credit it moved.
        Returns the deleted bill.
        """
        self.last_error = None
        try:
            bill = self.bills.get(bill_id)
            if bill is None:
                raise ValidationError(f"Bill '{bill_id}' does not exist.", field="bill_id")

            staged = self.ledger.copy()
            reversal = None
            if bill.credit_applied > 0 or bill.credit_generated > 0:
                reversal = staged.reverse(bill.customer_key, bill.credit_applied, bill.credit_generated)

            try:
                with self.conn:
                    self.bills.delete_bill(bill.id)
                    if reversal is not None:
                        if reversal.removed:
                            self.credits.remove(bill.customer_key)
                        else:
                            self.credits.set_balance(bill.customer_key, reversal.new_balance)
            except sqlite3.Error as exc:
                raise PersistenceError("Could not delete the bill. Nothing was changed; please retry.") from exc
        except DomainError as exc:
            self._fail("delete", exc)
            raise

        self.ledger = staged
        self.state = BillState.DRAFT
        _log.info(
            "deleted bill %s for %s: credit %s",
            bill.id, bill.customer_key,
            "untouched" if reversal is None
            else ("cleared" if reversal.removed else fmt_money(reversal.new_balance)),
        )
        return bill

    # ---- purchases ---------------------------------------------------------

    def add_purchase(
        self,
        items: Iterable[PurchasedItem],
        *,
        date: Optional[str] = None,
        supplier: Optional[str] = None,
    ) -> Purchase:
        """Append a stock purchase; credit balances are not involved."""
        self.last_error = None
        try:
            return record_purchase(self.conn, items, date=date, supplier=supplier)
        except DomainError as exc:
            self._fail("add_purchase", exc)
            raise

    # ---- internals ---------------------------------------------------------

    def _fail(self, op: str, exc: DomainError) -> None:
        self.state = BillState.DRAFT
        self.last_error = str(exc)
        if isinstance(exc, PersistenceError):
            _log.error("%s failed: %s", op, exc, exc_info=exc.__cause__ or exc)
        else:
            _log.warning("%s rejected: %s", op, exc)
