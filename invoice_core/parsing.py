"""
invoice_core.parsing
Amount parsing for quantity / unit amount cells.
"""
from __future__ import annotations
import math
from typing import Optional

def parse_amount(value, default: float = 0.0) -> float:
    if value is None:
        return default
    s = str(value).strip()
    if not s:
        return default
    neg = False
    if s.startswith("(") and s.endswith(")"):
        neg = True
        s = s[1:-1].strip()
    s = s.replace("£", "").replace(",", "")
    try:
        n = float(s)
    except ValueError:
        return default
    if math.isnan(n) or math.isinf(n):
        return default
    return -n if neg else n

def parse_quantity(value: Optional[str]) -> float:
    return parse_amount(value, default=1.0)

def parse_unit_amount(value: Optional[str]) -> float:
    return parse_amount(value, default=0.0)
