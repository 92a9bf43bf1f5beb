# utils/helpers.py
from datetime import date
import logging
import re
import uuid
from typing import Union, Optional

NumberLike = Union[float, int, str]

_log = logging.getLogger(__name__)

_TRAILING_DIGITS = re.compile(r"^(.*?)(\d+)$")


def today_str() -> str:
    """Return today's date as ISO string (YYYY-MM-DD)."""
    return date.today().isoformat()


def new_id() -> str:
    """Fresh opaque identifier for bills, purchases and line items."""
    return uuid.uuid4().hex


def fmt_money(
    v: NumberLike,
    places: int = 2,
    *,
    strict: bool = False,
    sentinel: Optional[str] = None,
) -> str:
    """
    Format a number as money with thousands separators and a fixed number of decimals.

    Behavior on parse failure:
      - By default (strict=False, sentinel=None), returns str(v).
      - If `sentinel` is provided (e.g., "N/A"), returns that sentinel instead.
      - If `strict=True`, raises ValueError on parse failures.

    Display rounding happens here and only here; the ledger keeps full precision.
    """
    try:
        x = float(v)
    except (TypeError, ValueError) as e:
        _log.debug("fmt_money: failed to parse %r as float: %s", v, e)
        if strict:
            raise ValueError(f"Could not parse {v!r} as a number.") from e
        return str(sentinel) if sentinel is not None else str(v)
    return f"{x:,.{places}f}"


def next_invoice_number(previous: str | None) -> str:
    """
    Increment the trailing number of a custom invoice number, keeping the
    prefix and zero padding: "INV-009" -> "INV-010", "A99" -> "A100".

    Empty input starts at "1"; a value without trailing digits is returned unchanged.
    """
    if not previous:
        return "1"
    m = _TRAILING_DIGITS.match(previous)
    if not m:
        return previous
    prefix, digits = m.group(1), m.group(2)
    return f"{prefix}{int(digits) + 1:0{len(digits)}d}"
