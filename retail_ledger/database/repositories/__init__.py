# database/repositories/__init__.py
"""
Repository layer public API.

Usage:
    from retail_ledger.database.repositories import (
        # Bills
        BillsRepo, Bill, LineItem,
        # Purchases
        PurchasesRepo, Purchase, PurchasedItem,
        # Store credit
        CustomerCreditsRepo,
    )
"""

# ------------------ Bills ------------------
from .bills_repo import BillsRepo, Bill, LineItem

# ---------------- Purchases ----------------
from .purchases_repo import PurchasesRepo, Purchase, PurchasedItem

# ------------- Store credit ---------------
from .customer_credits_repo import CustomerCreditsRepo

__all__ = [
    # bills_repo
    "BillsRepo",
    "Bill",
    "LineItem",
    # purchases_repo
    "PurchasesRepo",
    "Purchase",
    "PurchasedItem",
    # customer_credits_repo
    "CustomerCreditsRepo",
]
