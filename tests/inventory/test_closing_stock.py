import pytest

from retail_ledger.modules.inventory import closing_stock, closing_stock_totals

from builders import make_bill, make_item, make_purchase


def test_purchase_minus_sales():
    purchases = [make_purchase("P1", [("TOP01", "M", 10, 400)])]
    bills = [make_bill("B1", [make_item(code="TOP01", size="M", quantity=3)])]

    rows = closing_stock(purchases, bills)

    assert len(rows) == 1
    row = rows[0]
    assert (row.code, row.size) == ("TOP01", "M")
    assert row.quantity_on_hand == 7
    assert row.total_value_at_cost == pytest.approx(2800)


def test_returned_lines_go_back_on_the_shelf():
    purchases = [make_purchase("P1", [("TOP01", "M", 10, 400)])]
    bills = [
        make_bill("B1", [make_item(quantity=3)]),
        make_bill("B2", [make_item(quantity=-1)], date="2024-01-02", transaction_type="Return"),
    ]
    assert closing_stock(purchases, bills)[0].quantity_on_hand == 8


def test_sold_out_and_oversold_keys_are_hidden():
    purchases = [make_purchase("P1", [("TOP01", "M", 2, 400), ("TOP01", "L", 2, 400)])]
    bills = [make_bill("B1", [
        make_item(size="M", quantity=2),
        make_item(size="L", quantity=5),
    ])]
    assert closing_stock(purchases, bills) == []


def test_items_never_purchased_are_ignored():
    purchases = [make_purchase("P1", [("TOP01", "M", 4, 100)])]
    bills = [make_bill("B1", [make_item(code="OLD99", size="M", quantity=3)])]

    rows = closing_stock(purchases, bills)
    assert [(r.code, r.quantity_on_hand) for r in rows] == [("TOP01", 4)]


def test_last_purchase_wins_by_date_then_id():
    purchases = [
        make_purchase("P9", [("TOP01", "M", 5, 300, "OLD NAME")], date="2024-01-01", supplier="Early"),
        make_purchase("P2", [("TOP01", "M", 5, 350, "NEW NAME")], date="2024-02-01", supplier="Late A"),
        make_purchase("P3", [("TOP01", "M", 5, 375, "NEWEST")], date="2024-02-01", supplier="Late B"),
    ]

    row = closing_stock(purchases, [])[0]

    assert row.quantity_on_hand == 15
    assert row.last_known_cost == 375
    assert row.last_supplier == "Late B"
    assert row.name == "NEWEST"
    assert row.last_purchase_date == "2024-02-01"
    assert row.total_value_at_cost == pytest.approx(15 * 375)


def test_last_known_mrp_comes_from_latest_bill():
    purchases = [make_purchase("P1", [("TOP01", "M", 10, 400)])]
    bills = [
        make_bill("B2", [make_item(mrp=1100)], date="2024-03-01"),
        make_bill("B1", [make_item(mrp=999)], date="2024-01-01"),
    ]
    assert closing_stock(purchases, bills)[0].last_known_mrp == 1100
    assert closing_stock(purchases, [])[0].last_known_mrp is None


def test_rows_sorted_and_totals():
    purchases = [make_purchase("P1", [
        ("TOP02", "S", 1, 50),
        ("TOP01", "M", 2, 100),
        ("TOP01", "L", 3, 10),
    ])]
    rows = closing_stock(purchases, [])

    assert [(r.code, r.size) for r in rows] == [("TOP01", "L"), ("TOP01", "M"), ("TOP02", "S")]
    totals = closing_stock_totals(rows)
    assert totals["total_quantity"] == 6
    assert totals["total_value"] == pytest.approx(30 + 200 + 50)
