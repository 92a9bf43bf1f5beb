from pathlib import Path
import sqlite3
import sys

SQL = r"""
PRAGMA foreign_keys = ON;

/* ======================== BILLS ======================== */

CREATE TABLE IF NOT EXISTS bills (
    bill_id               TEXT PRIMARY KEY,
    customer_name         TEXT NOT NULL,
    customer_key          TEXT NOT NULL,                 /* mobile number */
    address               TEXT,
    gst_number            TEXT,
    date                  DATE NOT NULL,
    transaction_type      TEXT NOT NULL CHECK (transaction_type IN ('Sale','Exchange','Return')),
    payment_method        TEXT NOT NULL CHECK (payment_method IN ('Cash','Card')),
    credit_applied        NUMERIC NOT NULL DEFAULT 0 CHECK (CAST(credit_applied AS REAL) >= 0),
    credit_generated      NUMERIC NOT NULL DEFAULT 0 CHECK (CAST(credit_generated AS REAL) >= 0),
    original_bill_id      TEXT,
    custom_invoice_number TEXT,
    created_at            TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
);
CREATE INDEX IF NOT EXISTS idx_bills_customer ON bills(customer_key);
CREATE INDEX IF NOT EXISTS idx_bills_date     ON bills(date);

/* line items: negative quantity = returned units */
CREATE TABLE IF NOT EXISTS bill_items (
    row_id              INTEGER PRIMARY KEY AUTOINCREMENT,
    bill_id             TEXT    NOT NULL,
    position            INTEGER NOT NULL,
    line_id             TEXT    NOT NULL,
    code                TEXT    NOT NULL DEFAULT '',
    name                TEXT    NOT NULL,
    size                TEXT    NOT NULL DEFAULT '',
    mrp                 NUMERIC NOT NULL CHECK (CAST(mrp AS REAL) >= 0),
    quantity            INTEGER NOT NULL CHECK (quantity <> 0),
    discount_percentage NUMERIC NOT NULL DEFAULT 0
                        CHECK (CAST(discount_percentage AS REAL) BETWEEN 0 AND 100),
    net_value           NUMERIC NOT NULL,
    origin_bill_id      TEXT,
    FOREIGN KEY (bill_id) REFERENCES bills(bill_id) ON DELETE CASCADE
);
CREATE INDEX IF NOT EXISTS idx_bill_items_bill ON bill_items(bill_id, position);
CREATE INDEX IF NOT EXISTS idx_bill_items_code ON bill_items(code, size);

/* ======================== PURCHASES (append-only) ======================== */

CREATE TABLE IF NOT EXISTS purchases (
    purchase_id TEXT PRIMARY KEY,
    date        DATE NOT NULL,
    supplier    TEXT
);
CREATE INDEX IF NOT EXISTS idx_purchases_date ON purchases(date);

CREATE TABLE IF NOT EXISTS purchase_items (
    row_id      INTEGER PRIMARY KEY AUTOINCREMENT,
    purchase_id TEXT    NOT NULL,
    position    INTEGER NOT NULL,
    line_id     TEXT    NOT NULL,
    name        TEXT    NOT NULL,
    code        TEXT    NOT NULL,
    size        TEXT    NOT NULL,
    quantity    INTEGER NOT NULL CHECK (quantity > 0),
    value       NUMERIC NOT NULL CHECK (CAST(value AS REAL) >= 0),   /* unit cost */
    FOREIGN KEY (purchase_id) REFERENCES purchases(purchase_id) ON DELETE CASCADE
);
CREATE INDEX IF NOT EXISTS idx_purchase_items_purchase ON purchase_items(purchase_id, position);

DROP TRIGGER IF EXISTS trg_purchases_no_update;
CREATE TRIGGER trg_purchases_no_update
BEFORE UPDATE ON purchases
BEGIN
  SELECT RAISE(ABORT, 'Purchases are append-only');
END;

DROP TRIGGER IF EXISTS trg_purchase_items_no_update;
CREATE TRIGGER trg_purchase_items_no_update
BEFORE UPDATE ON purchase_items
BEGIN
  SELECT RAISE(ABORT, 'Purchases are append-only');
END;

/* ======================== STORE CREDIT ======================== */

/* signed balance per customer; written together with the bill it belongs to */
CREATE TABLE IF NOT EXISTS customer_credits (
    customer_key TEXT PRIMARY KEY,
    balance      NUMERIC NOT NULL,
    updated_at   TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
);
"""


def init_schema(conn: sqlite3.Connection) -> None:
    """Apply the (idempotent) schema on an open connection."""
    conn.executescript(SQL)


def init_schema_file(db_path: Path | str) -> None:
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path)
    try:
        conn.execute("PRAGMA journal_mode=WAL;")
        init_schema(conn)
        conn.commit()
    finally:
        conn.close()
    print(f"✓ DB applied to {db_path}")


if __name__ == "__main__":
    from ..config import DB_PATH

    target = sys.argv[1] if len(sys.argv) > 1 else DB_PATH
    init_schema_file(target)
