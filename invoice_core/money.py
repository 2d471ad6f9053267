"""
invoice_core.money
Rounding and currency display.
"""
from __future__ import annotations
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Iterable
from .config import CURRENCY_SYMBOL

CENT = Decimal("0.01")

def round2(value: float) -> float:
    """Round to 2 decimals, half away from zero: round2(10.005) == 10.01.

    The shortest repr of the float is rounded, so 10.005 is treated as
    written rather than as its binary approximation 10.00499...
    """
    d = Decimal(repr(float(value)))
    if not d.is_finite():
        return float(value)
    with localcontext() as ctx:
        # quantize needs every integer digit plus the two decimals
        ctx.prec = max(ctx.prec, d.adjusted() + 3)
        return float(d.quantize(CENT, rounding=ROUND_HALF_UP))

def sum2(values: Iterable[float]) -> float:
    # values are already 2dp; this only drops float noise from the addition
    return round2(sum(values, 0.0))

def format_amount(n: float) -> str:
    n = round2(n) or 0.0
    if n < 0:
        return f"({abs(n):.2f})"
    return f"{n:.2f}"

def format_money(n: float) -> str:
    n = round2(n) or 0.0
    if n < 0:
        return f"({CURRENCY_SYMBOL}{abs(n):.2f})"
    return f"{CURRENCY_SYMBOL}{n:.2f}"
