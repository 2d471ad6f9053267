"""
invoice_core.models
Line items and the per-brand views computed from them.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple


class Category(Enum):
    DISCOUNT = "discount"
    NORMAL = "normal"
    SHIPPING = "shipping"


@dataclass(frozen=True)
class LineItem:
    """One normalized input row. Built once, never mutated."""

    brand: str
    invoice_number: str
    description: str = ""
    quantity: float = 1.0
    unit_amount: float = 0.0
    tax_type: str = ""

    @property
    def order_id(self) -> str:
        from .grouping import extract_order_id
        return extract_order_id(self.description)

    @property
    def category(self) -> Category:
        from .classify import classify
        return classify(self)


@dataclass(frozen=True)
class OrderGroup:
    order_id: str
    items: Tuple[LineItem, ...]


@dataclass(frozen=True)
class RowAmounts:
    gross: float
    net: float
    vat: float
    vat_rate_label: str


@dataclass
class BrandReport:
    brand: str
    invoice_numbers: Tuple[str, ...]
    order_groups: List[OrderGroup]
    items: List[LineItem]
    subtotal: float
    vat: float
    total: float

    @property
    def client_name(self) -> str:
        return self.brand


@dataclass
class GeneratedReport:
    brand: str
    invoice_numbers: Tuple[str, ...]
    file_name: str
    pdf_path: Path
    html_path: Optional[Path] = None


@dataclass
class RunResult:
    run_dir: Path
    reports: List[GeneratedReport] = field(default_factory=list)
    index_path: Optional[Path] = None
