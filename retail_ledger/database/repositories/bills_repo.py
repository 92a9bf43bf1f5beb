from __future__ import annotations
from dataclasses import dataclass
import sqlite3
from typing import Iterable, Optional


@dataclass
class LineItem:
    id: str
    name: str
    size: str
    mrp: float
    quantity: int                     # negative = returned units
    discount_percentage: float
    net_value: float                  # unit price after discount
    code: str = ""
    origin_bill_id: str | None = None # set on lines copied from another bill


@dataclass
class Bill:
    id: str
    customer_name: str
    customer_key: str                 # mobile number
    items: list[LineItem]
    date: str                         # 'YYYY-MM-DD'
    transaction_type: str             # 'Sale' | 'Exchange' | 'Return'
    payment_method: str               # 'Cash' | 'Card'
    credit_applied: float = 0.0
    credit_generated: float = 0.0
    original_bill_id: str | None = None
    address: str | None = None
    gst_number: str | None = None
    custom_invoice_number: str | None = None

    @property
    def number(self) -> str:
        """Number printed on the invoice: the custom one if set, else the id."""
        return self.custom_invoice_number or self.id


class BillsRepo:
    """
    Bills + their line items.

    Write methods do NOT commit. Callers wrap them in `with conn:` together
    with the matching customer_credits write so both land or neither does.
    """

    def __init__(self, conn: sqlite3.Connection):
        # ensure rows behave like dicts/tuples
        conn.row_factory = sqlite3.Row
        self.conn = conn

    # ---------------------------------------------------------------------
    # READ
    # ---------------------------------------------------------------------
    def list_bills(self) -> list[Bill]:
        """All bills, newest first."""
        headers = self.conn.execute(
            "SELECT * FROM bills ORDER BY DATE(date) DESC, created_at DESC, bill_id DESC"
        ).fetchall()
        items = self._items_by_bill()
        return [self._to_bill(h, items.get(h["bill_id"], [])) for h in headers]

    def get(self, bill_id: str) -> Optional[Bill]:
        h = self.conn.execute("SELECT * FROM bills WHERE bill_id=?", (bill_id,)).fetchone()
        if h is None:
            return None
        return self._to_bill(h, self.list_items(bill_id))

    def exists(self, bill_id: str) -> bool:
        row = self.conn.execute("SELECT 1 FROM bills WHERE bill_id=?", (bill_id,)).fetchone()
        return row is not None

    def list_items(self, bill_id: str) -> list[LineItem]:
        rows = self.conn.execute(
            "SELECT * FROM bill_items WHERE bill_id=? ORDER BY position, row_id",
            (bill_id,),
        ).fetchall()
        return [self._to_item(r) for r in rows]

    # ---------------------------------------------------------------------
    # WRITE (no commit)
    # ---------------------------------------------------------------------
    def insert_bill(self, bill: Bill) -> None:
        self.conn.execute(
            """
            INSERT INTO bills (
                bill_id, customer_name, customer_key, address, gst_number,
                date, transaction_type, payment_method,
                credit_applied, credit_generated, original_bill_id, custom_invoice_number
            )
            VALUES (?,?,?,?,?,?,?,?,?,?,?,?)
            """,
            (
                bill.id,
                bill.customer_name,
                bill.customer_key,
                bill.address,
                bill.gst_number,
                bill.date,
                bill.transaction_type,
                bill.payment_method,
                bill.credit_applied,
                bill.credit_generated,
                bill.original_bill_id,
                bill.custom_invoice_number,
            ),
        )
        self._insert_items(bill.id, bill.items)

    def replace_bill(self, bill: Bill) -> None:
        """
        Full replace of an existing bill (same id). Items are rebuilt.
        """
        cur = self.conn.execute(
            """
            UPDATE bills
               SET customer_name=?,
                   customer_key=?,
                   address=?,
                   gst_number=?,
                   date=?,
                   transaction_type=?,
                   payment_method=?,
                   credit_applied=?,
                   credit_generated=?,
                   original_bill_id=?,
                   custom_invoice_number=?
             WHERE bill_id=?
            """,
            (
                bill.customer_name,
                bill.customer_key,
                bill.address,
                bill.gst_number,
                bill.date,
                bill.transaction_type,
                bill.payment_method,
                bill.credit_applied,
                bill.credit_generated,
                bill.original_bill_id,
                bill.custom_invoice_number,
                bill.id,
            ),
        )
        if cur.rowcount == 0:
            raise ValueError(f"Bill '{bill.id}' does not exist.")
        self.conn.execute("DELETE FROM bill_items WHERE bill_id=?", (bill.id,))
        self._insert_items(bill.id, bill.items)

    def delete_bill(self, bill_id: str) -> bool:
        """Remove a bill; its items go with it (ON DELETE CASCADE)."""
        cur = self.conn.execute("DELETE FROM bills WHERE bill_id=?", (bill_id,))
        return cur.rowcount > 0

    def delete_all(self) -> None:
        self.conn.execute("DELETE FROM bill_items")
        self.conn.execute("DELETE FROM bills")

    # ---------------------------------------------------------------------
    # internals
    # ---------------------------------------------------------------------
    def _insert_items(self, bill_id: str, items: Iterable[LineItem]) -> None:
        self.conn.executemany(
            """
            INSERT INTO bill_items (
                bill_id, position, line_id, code, name, size,
                mrp, quantity, discount_percentage, net_value, origin_bill_id
            ) VALUES (?,?,?,?,?,?,?,?,?,?,?)
            """,
            [
                (
                    bill_id, pos, it.id, it.code or "", it.name, it.size,
                    it.mrp, int(it.quantity), it.discount_percentage, it.net_value,
                    it.origin_bill_id,
                )
                for pos, it in enumerate(items)
            ],
        )

    def _items_by_bill(self) -> dict[str, list[LineItem]]:
        out: dict[str, list[LineItem]] = {}
        rows = self.conn.execute(
            "SELECT * FROM bill_items ORDER BY bill_id, position, row_id"
        ).fetchall()
        for r in rows:
            out.setdefault(r["bill_id"], []).append(self._to_item(r))
        return out

    @staticmethod
    def _to_item(r: sqlite3.Row) -> LineItem:
        return LineItem(
            id=r["line_id"],
            code=r["code"] or "",
            name=r["name"],
            size=r["size"] or "",
            mrp=float(r["mrp"]),
            quantity=int(r["quantity"]),
            discount_percentage=float(r["discount_percentage"]),
            net_value=float(r["net_value"]),
            origin_bill_id=r["origin_bill_id"],
        )

    @staticmethod
    def _to_bill(h: sqlite3.Row, items: list[LineItem]) -> Bill:
        return Bill(
            id=h["bill_id"],
            customer_name=h["customer_name"],
            customer_key=h["customer_key"],
            items=items,
            date=h["date"],
            transaction_type=h["transaction_type"],
            payment_method=h["payment_method"],
            credit_applied=float(h["credit_applied"] or 0.0),
            credit_generated=float(h["credit_generated"] or 0.0),
            original_bill_id=h["original_bill_id"],
            address=h["address"],
            gst_number=h["gst_number"],
            custom_invoice_number=h["custom_invoice_number"],
        )
