import sqlite3

import pytest

from retail_ledger.database.repositories.bills_repo import LineItem
from retail_ledger.database.repositories.customer_credits_repo import CustomerCreditsRepo
from retail_ledger.modules.billing import BillState, link_return
from retail_ledger.utils.exceptions import PersistenceError, ValidationError

from builders import make_draft, make_item

KEY = "9876543210"


def _seed_credit(conn, controller, amount, key=KEY):
    with conn:
        CustomerCreditsRepo(conn).set_balance(key, amount)
    controller.reload()


def test_finalize_simple_sale(controller, conn):
    bill = controller.finalize(make_draft())

    assert controller.state == BillState.FINALIZED
    assert controller.last_error is None
    stored = controller.bills.get(bill.id)
    assert stored is not None
    assert stored.customer_key == KEY
    assert stored.transaction_type == "Sale"
    assert stored.original_bill_id is None
    assert len(stored.items) == 1
    # entry written even though nothing moved
    assert CustomerCreditsRepo(conn).load_all() == {KEY: 0.0}
    assert controller.ledger.has_entry(KEY)


def test_credit_applied_with_payable_left(controller, conn):
    _seed_credit(conn, controller, 1000)
    items = [make_item(mrp=1000, discount=10, quantity=2)]

    bill = controller.finalize(make_draft(items=items, credit="500", payment_method="Card"))

    assert bill.credit_applied == 500
    assert bill.credit_generated == 0
    assert bill.payment_method == "Card"
    assert controller.available_credit(KEY) == pytest.approx(500)
    assert CustomerCreditsRepo(conn).get_balance(KEY) == pytest.approx(500)


def test_surplus_credit_is_generated_and_payment_forced_to_cash(controller, conn):
    _seed_credit(conn, controller, 1000)
    items = [make_item(mrp=200)]

    bill = controller.finalize(make_draft(items=items, credit=500, payment_method="Card"))

    assert bill.credit_generated == pytest.approx(300)
    assert bill.payment_method == "Cash"
    assert controller.available_credit(KEY) == pytest.approx(800)
    assert CustomerCreditsRepo(conn).get_balance(KEY) == pytest.approx(800)


@pytest.mark.parametrize("raw", ["", "abc", "-50", None])
def test_unusable_credit_input_counts_as_zero(controller, raw):
    bill = controller.finalize(make_draft(credit=raw))
    assert bill.credit_applied == 0
    assert controller.available_credit(KEY) == 0


def test_validation_failure_leaves_everything_untouched(controller, conn):
    _seed_credit(conn, controller, 100)

    with pytest.raises(ValidationError) as ei:
        controller.finalize(make_draft(name="  "))

    assert ei.value.field == "customer_name"
    assert controller.state == BillState.DRAFT
    assert controller.last_error
    assert controller.list_bills() == []
    assert controller.available_credit(KEY) == 100


@pytest.mark.parametrize("draft_kw, field", [
    ({"mobile": ""}, "mobile_number"),
    ({"items": []}, "items"),
    ({"date": "19/10/2026"}, "date"),
    ({"date": "2026-02-30"}, "date"),
    ({"transaction_type": "Layaway"}, "transaction_type"),
    ({"payment_method": "UPI"}, "payment_method"),
    ({"transaction_type": "Exchange"}, "items"),
    ({"transaction_type": "Return"}, "items"),
])
def test_validation_rules(controller, draft_kw, field):
    with pytest.raises(ValidationError) as ei:
        controller.finalize(make_draft(**draft_kw))
    assert ei.value.field == field


def test_persistence_failure_rolls_back_bill_and_credit(controller, conn, monkeypatch):
    _seed_credit(conn, controller, 1000)

    def boom(*a, **k):
        raise sqlite3.OperationalError("database is locked")

    monkeypatch.setattr(controller.credits, "set_balance", boom)

    with pytest.raises(PersistenceError):
        controller.finalize(make_draft(credit=500))

    assert controller.state == BillState.DRAFT
    assert "retry" in controller.last_error
    assert controller.bills.list_bills() == []
    assert controller.available_credit(KEY) == 1000
    assert CustomerCreditsRepo(conn).get_balance(KEY) == 1000


def test_update_replaces_bill_and_keeps_id(controller, conn):
    _seed_credit(conn, controller, 1000)
    first = controller.finalize(make_draft(items=[make_item(mrp=1000, discount=10, quantity=2)], credit=500))
    assert controller.available_credit(KEY) == pytest.approx(500)

    draft = controller.start_edit(first.id)
    assert draft.bill_id == first.id
    assert draft.credit_to_apply == "500.0"
    draft.items = [make_item(name="JEANS", code="BTM01", mrp=1500)]
    draft.credit_to_apply = "300"

    updated = controller.finalize(draft, is_update=True)

    assert updated.id == first.id
    bills = controller.list_bills()
    assert len(bills) == 1
    assert [it.name for it in bills[0].items] == ["JEANS"]
    assert bills[0].credit_applied == 300
    # the first booking is not undone before the new one
    assert controller.available_credit(KEY) == pytest.approx(200)


def test_update_of_missing_bill_is_rejected(controller):
    draft = make_draft(bill_id="does-not-exist")
    with pytest.raises(ValidationError):
        controller.finalize(draft, is_update=True)
    with pytest.raises(ValidationError):
        controller.start_edit("does-not-exist")


def test_delete_restores_consumed_credit(controller, conn):
    _seed_credit(conn, controller, 500)
    bill = controller.finalize(make_draft(items=[make_item(mrp=1800)], credit=500))
    assert controller.available_credit(KEY) == 0

    deleted = controller.delete(bill.id)

    assert deleted.id == bill.id
    assert controller.list_bills() == []
    assert controller.available_credit(KEY) == pytest.approx(500)
    assert CustomerCreditsRepo(conn).get_balance(KEY) == pytest.approx(500)


def test_delete_prunes_entry_back_to_zero(controller, conn):
    sale = controller.finalize(make_draft(items=[make_item(mrp=300)]))
    returned = link_return(sale, [sale.items[0].id])
    ret = controller.finalize(make_draft(items=returned, transaction_type="Return"))
    assert ret.credit_generated == pytest.approx(300)
    assert controller.available_credit(KEY) == pytest.approx(300)

    controller.delete(ret.id)

    assert not controller.ledger.has_entry(KEY)
    assert KEY not in CustomerCreditsRepo(conn).load_all()


def test_delete_without_credit_movement_keeps_entry(controller, conn):
    bill = controller.finalize(make_draft())
    controller.delete(bill.id)
    assert controller.ledger.has_entry(KEY)
    assert CustomerCreditsRepo(conn).load_all() == {KEY: 0.0}


def test_delete_missing_bill(controller):
    with pytest.raises(ValidationError):
        controller.delete("nope")
    assert controller.last_error


def test_exchange_links_to_original_bill(controller):
    shirt = make_item(name="SHIRT", mrp=800)
    sale = controller.finalize(make_draft(items=[shirt]))

    lines = link_return(sale, [sale.items[0].id]) + [make_item(name="SHIRT", size="L", mrp=800)]
    exchange = controller.finalize(make_draft(items=lines, transaction_type="Exchange"))

    assert exchange.original_bill_id == sale.id
    assert exchange.credit_generated == 0
    stored = controller.bills.get(exchange.id)
    assert stored.items[0].quantity == -1
    assert stored.items[0].origin_bill_id == sale.id


def test_invoice_number_suggestion(controller):
    assert controller.suggest_invoice_number() is None
    controller.finalize(make_draft(custom_invoice_number="INV-009"))
    assert controller.suggest_invoice_number() == "INV-010"
    assert controller.new_draft().custom_invoice_number == "INV-010"


def test_max_credit_for_draft(controller, conn):
    _seed_credit(conn, controller, 500)
    assert controller.max_credit_for(make_draft(items=[make_item(mrp=200)])) == 200
    assert controller.max_credit_for(make_draft(items=[make_item(mrp=2000)])) == 500


def test_add_purchase_goes_through_controller(controller, conn):
    from retail_ledger.modules.inventory import load_closing_stock, new_purchased_item

    item = new_purchased_item(name="tee", code="TOP01", size="M", quantity=10, value=400)
    controller.add_purchase([item], date="2024-01-01", supplier="Mills")
    controller.finalize(make_draft(items=[make_item(code="TOP01", size="M", quantity=3)]))

    assert [r.quantity_on_hand for r in load_closing_stock(conn)] == [7]

    with pytest.raises(ValidationError):
        controller.add_purchase([])
    assert controller.last_error


def test_net_value_is_rederived_from_mrp_and_discount(controller, conn):
    _seed_credit(conn, controller, 1000)
    stale = LineItem(
        id="line-1", name="SHIRT", size="M", mrp=1000, quantity=1,
        discount_percentage=10, net_value=1000, code="TOP01",
    )

    bill = controller.finalize(make_draft(items=[stale], credit="1000"))

    assert bill.items[0].net_value == pytest.approx(900)
    assert bill.credit_generated == pytest.approx(100)
    assert controller.bills.get(bill.id).items[0].net_value == pytest.approx(900)
    assert controller.available_credit(KEY) == pytest.approx(100)
    assert stale.net_value == 1000


def test_rejected_date_keeps_reports_working(controller):
    from retail_ledger.modules.reporting import period_summary

    with pytest.raises(ValidationError):
        controller.finalize(make_draft(date="19/10/2026"))
    controller.finalize(make_draft(date="2026-10-19"))

    rows = period_summary(controller.list_bills(), "day")
    assert [(r.start_date, r.count) for r in rows] == [("2026-10-19", 1)]
