from retail_ledger.modules.billing.returns import (
    has_returned_items,
    link_return,
    resolve_original_bill_id,
)

from builders import make_bill, make_item


def test_link_return_copies_selected_lines_as_negative():
    shirt = make_item(name="SHIRT", quantity=2)
    jeans = make_item(name="JEANS", code="BTM01", mrp=1500)
    original = make_bill("B1", [shirt, jeans])

    lines = link_return(original, [shirt.id])

    assert len(lines) == 1
    ret = lines[0]
    assert ret.name == "SHIRT"
    assert ret.quantity == -2
    assert ret.origin_bill_id == "B1"
    assert ret.id != shirt.id
    assert ret.net_value == shirt.net_value
    # original untouched
    assert shirt.quantity == 2
    assert shirt.origin_bill_id is None


def test_link_return_ignores_unknown_ids():
    original = make_bill("B1", [make_item()])
    assert link_return(original, ["nope"]) == []


def test_resolve_original_bill_id():
    sale_line = make_item()
    original = make_bill("B7", [sale_line])
    returned = link_return(original, [sale_line.id])

    assert resolve_original_bill_id([make_item()] + returned) == "B7"
    assert resolve_original_bill_id([make_item()]) is None
    assert has_returned_items(returned)
    assert not has_returned_items([make_item()])
