# utils/validators.py
import math
from datetime import date


def non_empty(text: str) -> bool:
    """
    True if `text` is not None/empty after stripping whitespace.
    """
    return bool(text and str(text).strip())


# ---- Numeric parsing & validators ----

def try_parse_float(x):
    """
    Best-effort parse to a finite float.

    Returns:
        (ok: bool, value: float|None)

    NaN and infinities are failures, so a pasted "inf" never reaches a total.
    """
    try:
        val = float(x)
    except (TypeError, ValueError):
        return False, None
    if not math.isfinite(val):
        return False, None
    return True, val


def try_parse_whole(x, *, positive_only: bool = False):
    """
    Parse a quantity: a non-zero whole number ("3", 3.0 and -2 are fine,
    "1.5" and 0 are not). With positive_only, negatives fail too.

    Returns (ok, int|None) like try_parse_float.
    """
    ok, val = try_parse_float(x)
    if not ok or val != int(val) or int(val) == 0:
        return False, None
    if positive_only and val < 0:
        return False, None
    return True, int(val)


def parse_credit_amount(x) -> float:
    """
    Parse the "credit to apply" input of a bill.

    Blank, unparseable or negative input means no credit is applied (0.0).
    No upper clamp: applying more than the customer holds is the caller's check.
    """
    ok, val = try_parse_float(x)
    if not ok or val < 0:
        return 0.0
    return val


def is_non_negative_number(x) -> bool:
    ok, val = try_parse_float(x)
    return ok and val >= 0


def is_percentage(x) -> bool:
    """True iff x parses to a number within [0, 100]."""
    ok, val = try_parse_float(x)
    return ok and 0 <= val <= 100


def is_iso_date(text) -> bool:
    """True iff text is a calendar date written exactly as YYYY-MM-DD."""
    if not isinstance(text, str):
        return False
    try:
        return date.fromisoformat(text).isoformat() == text
    except ValueError:
        return False
