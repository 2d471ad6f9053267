"""
invoice_core.grouping
Grouping rules: brand -> invoice -> rows, then order id within a brand.
"""
from __future__ import annotations
import re
from typing import Dict, Iterable, List, Tuple
from .config import ORDER_ID_PATTERN, UNKNOWN_ORDER
from .models import LineItem, OrderGroup

ORDER_ID_RE = re.compile(ORDER_ID_PATTERN)

BrandGroups = Dict[str, Dict[str, List[LineItem]]]

def extract_order_id(description: str) -> str:
    m = ORDER_ID_RE.match(description or "")
    return m.group(1) if m else UNKNOWN_ORDER

def group_by_brand(items: Iterable[LineItem]) -> BrandGroups:
    # dicts keep first-seen order for brands and invoices
    brands: BrandGroups = {}
    for item in items:
        brands.setdefault(item.brand, {}).setdefault(item.invoice_number, []).append(item)
    return brands

def flatten_brand(invoices: Dict[str, List[LineItem]]) -> Tuple[Tuple[str, ...], List[LineItem]]:
    all_items: List[LineItem] = []
    for rows in invoices.values():
        all_items.extend(rows)
    return tuple(invoices.keys()), all_items

def group_by_order(items: Iterable[LineItem]) -> List[OrderGroup]:
    by_order: Dict[str, List[LineItem]] = {}
    for item in items:
        by_order.setdefault(extract_order_id(item.description), []).append(item)
    # string sort on purpose: "10" < "9", "Unknown" after digits
    return [OrderGroup(order_id=k, items=tuple(by_order[k])) for k in sorted(by_order)]
