"""
invoice_core.classify
Discount / normal / shipping split and emission order inside an order.
"""
from __future__ import annotations
import re
from typing import Dict, Iterable, List
from .config import DISCOUNT_KEYWORD, SHIPPING_PATTERN
from .models import Category, LineItem, OrderGroup

SHIPPING_RE = re.compile(SHIPPING_PATTERN, flags=re.IGNORECASE)

EMISSION_ORDER = (Category.DISCOUNT, Category.NORMAL, Category.SHIPPING)

def is_discount(item: LineItem) -> bool:
    return DISCOUNT_KEYWORD in (item.description or "").lower() or item.quantity < 0

def is_shipping(item: LineItem) -> bool:
    return bool(SHIPPING_RE.search(item.description or ""))

def classify(item: LineItem) -> Category:
    """First match wins: discount, then shipping, else normal."""
    if is_discount(item):
        return Category.DISCOUNT
    if is_shipping(item):
        return Category.SHIPPING
    return Category.NORMAL

def split_by_category(items: Iterable[LineItem]) -> Dict[Category, List[LineItem]]:
    buckets: Dict[Category, List[LineItem]] = {c: [] for c in EMISSION_ORDER}
    for item in items:
        buckets[classify(item)].append(item)
    return buckets

def sort_order_group(items: Iterable[LineItem]) -> List[LineItem]:
    buckets = split_by_category(items)
    out: List[LineItem] = []
    for category in EMISSION_ORDER:
        out.extend(buckets[category])
    return out

def emission_order(groups: Iterable[OrderGroup]) -> List[LineItem]:
    out: List[LineItem] = []
    for group in groups:
        out.extend(sort_order_group(group.items))
    return out
