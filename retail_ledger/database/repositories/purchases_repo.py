from __future__ import annotations
from dataclasses import dataclass
import sqlite3
from typing import Optional


@dataclass
class PurchasedItem:
    id: str
    name: str
    code: str
    size: str
    quantity: int
    value: float        # unit cost


@dataclass
class Purchase:
    id: str
    date: str           # 'YYYY-MM-DD'
    items: list[PurchasedItem]
    supplier: str | None = None


class PurchasesRepo:
    """
    Append-only purchase history. There is no update path; the schema
    rejects UPDATEs on purchases/purchase_items.

    insert_purchase() does not commit.
    """

    def __init__(self, conn: sqlite3.Connection):
        conn.row_factory = sqlite3.Row
        self.conn = conn

    # ---------- Query ----------
    def list_purchases(self) -> list[Purchase]:
        """All purchases, newest first."""
        headers = self.conn.execute(
            "SELECT * FROM purchases ORDER BY DATE(date) DESC, purchase_id DESC"
        ).fetchall()
        items: dict[str, list[PurchasedItem]] = {}
        for r in self.conn.execute(
            "SELECT * FROM purchase_items ORDER BY purchase_id, position, row_id"
        ).fetchall():
            items.setdefault(r["purchase_id"], []).append(self._to_item(r))
        return [
            Purchase(
                id=h["purchase_id"],
                date=h["date"],
                supplier=h["supplier"],
                items=items.get(h["purchase_id"], []),
            )
            for h in headers
        ]

    def get(self, purchase_id: str) -> Optional[Purchase]:
        h = self.conn.execute(
            "SELECT * FROM purchases WHERE purchase_id=?", (purchase_id,)
        ).fetchone()
        if h is None:
            return None
        rows = self.conn.execute(
            "SELECT * FROM purchase_items WHERE purchase_id=? ORDER BY position, row_id",
            (purchase_id,),
        ).fetchall()
        return Purchase(
            id=h["purchase_id"],
            date=h["date"],
            supplier=h["supplier"],
            items=[self._to_item(r) for r in rows],
        )

    # ---------- Write (no commit) ----------
    def insert_purchase(self, purchase: Purchase) -> None:
        self.conn.execute(
            "INSERT INTO purchases (purchase_id, date, supplier) VALUES (?,?,?)",
            (purchase.id, purchase.date, purchase.supplier),
        )
        self.conn.executemany(
            """
            INSERT INTO purchase_items (
                purchase_id, position, line_id, name, code, size, quantity, value
            ) VALUES (?,?,?,?,?,?,?,?)
            """,
            [
                (purchase.id, pos, it.id, it.name, it.code, it.size, int(it.quantity), it.value)
                for pos, it in enumerate(purchase.items)
            ],
        )

    def delete_all(self) -> None:
        """Only used when a backup replaces the whole history."""
        self.conn.execute("DELETE FROM purchase_items")
        self.conn.execute("DELETE FROM purchases")

    @staticmethod
    def _to_item(r: sqlite3.Row) -> PurchasedItem:
        return PurchasedItem(
            id=r["line_id"],
            name=r["name"],
            code=r["code"],
            size=r["size"],
            quantity=int(r["quantity"]),
            value=float(r["value"]),
        )
