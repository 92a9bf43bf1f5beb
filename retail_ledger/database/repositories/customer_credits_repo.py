# database/repositories/customer_credits_repo.py
from __future__ import annotations

import sqlite3
from typing import Mapping


class CustomerCreditsRepo:
    """
    Persistence for the store-credit ledger.

    Conventions:
      • One row per customer_key (mobile number) holding a signed balance.
      • Rows are created lazily by the first bill that touches the customer.
      • A row is deleted only when a bill deletion brings the balance to ~0.
      • Writes do not commit; the billing workflow commits them in the same
        transaction as the bill they belong to.
    """

    def __init__(self, conn: sqlite3.Connection):
        conn.row_factory = sqlite3.Row
        self.conn = conn

    # ---- reads -------------------------------------------------------------

    def load_all(self) -> dict[str, float]:
        rows = self.conn.execute(
            "SELECT customer_key, balance FROM customer_credits ORDER BY customer_key"
        ).fetchall()
        return {r["customer_key"]: float(r["balance"]) for r in rows}

    def get_balance(self, customer_key: str) -> float:
        """Current balance; 0.0 when the customer has no entry."""
        row = self.conn.execute(
            "SELECT balance FROM customer_credits WHERE customer_key=?",
            (customer_key,),
        ).fetchone()
        return float(row["balance"]) if row and row["balance"] is not None else 0.0

    # ---- writes (no commit) ------------------------------------------------

    def set_balance(self, customer_key: str, balance: float) -> None:
        self.conn.execute(
            """
            INSERT INTO customer_credits (customer_key, balance, updated_at)
            VALUES (?, ?, CURRENT_TIMESTAMP)
            ON CONFLICT(customer_key) DO UPDATE
               SET balance = excluded.balance,
                   updated_at = CURRENT_TIMESTAMP
            """,
            (customer_key, float(balance)),
        )

    def remove(self, customer_key: str) -> None:
        self.conn.execute("DELETE FROM customer_credits WHERE customer_key=?", (customer_key,))

    def replace_all(self, balances: Mapping[str, float]) -> None:
        self.conn.execute("DELETE FROM customer_credits")
        self.conn.executemany(
            "INSERT INTO customer_credits (customer_key, balance) VALUES (?, ?)",
            [(k, float(v)) for k, v in balances.items()],
        )
