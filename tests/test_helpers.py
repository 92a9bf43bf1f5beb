import pytest

from retail_ledger.utils.helpers import fmt_money, next_invoice_number
from retail_ledger.utils.validators import is_iso_date, is_percentage, parse_credit_amount, try_parse_float, try_parse_whole


@pytest.mark.parametrize("prev, expected", [
    ("INV-009", "INV-010"),
    ("A99", "A100"),
    ("7", "8"),
    ("", "1"),
    (None, "1"),
    ("MANUAL", "MANUAL"),
])
def test_next_invoice_number(prev, expected):
    assert next_invoice_number(prev) == expected


def test_fmt_money():
    assert fmt_money(1234.5) == "1,234.50"
    assert fmt_money("x") == "x"
    assert fmt_money("x", sentinel="N/A") == "N/A"
    with pytest.raises(ValueError):
        fmt_money("x", strict=True)


def test_try_parse_float_rejects_non_finite():
    assert try_parse_float("1.5") == (True, 1.5)
    assert try_parse_float("nan") == (False, None)
    assert try_parse_float("inf") == (False, None)
    assert try_parse_float(None) == (False, None)


def test_parse_credit_amount():
    assert parse_credit_amount("250") == 250
    assert parse_credit_amount("-5") == 0
    assert parse_credit_amount("abc") == 0


def test_try_parse_whole():
    assert try_parse_whole("3") == (True, 3)
    assert try_parse_whole(-2.0) == (True, -2)
    assert try_parse_whole(-2, positive_only=True) == (False, None)
    assert try_parse_whole("1.5") == (False, None)
    assert try_parse_whole(0) == (False, None)


def test_is_percentage():
    assert is_percentage("0") and is_percentage(100)
    assert not is_percentage(100.5)
    assert not is_percentage("ten")


def test_is_iso_date():
    assert is_iso_date("2024-02-29")
    assert not is_iso_date("2023-02-29")
    assert not is_iso_date("19/10/2026")
    assert not is_iso_date("20261019")
    assert not is_iso_date(None)
