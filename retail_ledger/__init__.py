"""
Retail point-of-sale ledger core.

Bill finalization (sale / return / exchange), the per-customer store-credit
ledger and closing-stock reconciliation, persisted through sqlite3.
"""

__version__ = "0.1.0"
