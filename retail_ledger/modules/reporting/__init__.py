from .sales_reports import (
    bill_wise_rows,
    bill_wise_totals,
    customer_credit_rows,
    filter_bills_by_date,
    item_wise_rows,
    item_wise_totals,
    period_summary,
)

__all__ = [
    "filter_bills_by_date",
    "item_wise_rows",
    "item_wise_totals",
    "bill_wise_rows",
    "bill_wise_totals",
    "customer_credit_rows",
    "period_summary",
]
