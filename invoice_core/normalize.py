"""
invoice_core.normalize
Header matching and row -> LineItem conversion.
"""
from __future__ import annotations
import logging
from typing import Dict, List, Optional, Sequence, Tuple
from .config import (
    COL_CONTACT,
    COL_DESCRIPTION,
    COL_INVOICE,
    COL_QUANTITY,
    COL_TAX_TYPE,
    COL_UNIT_AMOUNT,
    REQUIRED_COLUMNS,
    UNKNOWN_BRAND,
    UNKNOWN_INVOICE,
)
from .errors import SchemaMismatch
from .models import LineItem
from .parsing import parse_quantity, parse_unit_amount

Row = Dict[str, str]

def header_key(name: str) -> str:
    """'*ContactName', 'contactname ' -> 'contactname'."""
    return (name or "").strip().lstrip("*").strip().lower()

def normalize_rows(table: Sequence[Sequence[str]]) -> Tuple[List[str], List[Row]]:
    if not table:
        return [], []
    headers = [("" if h is None else str(h)).strip() for h in table[0]]
    rows: List[Row] = []
    for raw in table[1:]:
        cells = [("" if c is None else str(c)).strip() for c in raw]
        if not any(cells):
            continue
        cells = (cells + [""] * len(headers))[:len(headers)]
        rows.append(dict(zip(headers, cells)))
    return headers, rows

def find_missing(headers: Sequence[str], required: Sequence[str] = REQUIRED_COLUMNS) -> List[str]:
    present = {header_key(h) for h in headers}
    return [col for col in required if col.lower() not in present]

def ensure_required(headers: Sequence[str], required: Sequence[str] = REQUIRED_COLUMNS) -> None:
    missing = find_missing(headers, required)
    if missing:
        raise SchemaMismatch(missing, list(headers))

def build_header_index(headers: Sequence[str]) -> Dict[str, str]:
    """Canonical concept -> actual header. '*Name' wins over 'Name'."""
    index: Dict[str, str] = {}
    for h in headers:
        key = header_key(h)
        if not key:
            continue
        if key not in index or (h.startswith("*") and not index[key].startswith("*")):
            index[key] = h
    return index

def _field(row: Row, index: Dict[str, str], column: str) -> str:
    actual = index.get(column.lower())
    if actual is None:
        return ""
    return row.get(actual, "") or ""

def to_line_item(row: Row, index: Dict[str, str], first_header: Optional[str]) -> LineItem:
    brand = _field(row, index, COL_CONTACT)
    if not brand and first_header is not None:
        brand = row.get(first_header, "")
    quantity = _field(row, index, COL_QUANTITY)
    unit_amount = _field(row, index, COL_UNIT_AMOUNT)
    return LineItem(
        brand=brand or UNKNOWN_BRAND,
        invoice_number=_field(row, index, COL_INVOICE) or UNKNOWN_INVOICE,
        description=_field(row, index, COL_DESCRIPTION),
        quantity=parse_quantity(quantity),
        unit_amount=parse_unit_amount(unit_amount),
        tax_type=_field(row, index, COL_TAX_TYPE),
    )

def line_items(headers: Sequence[str], rows: Sequence[Row]) -> List[LineItem]:
    index = build_header_index(headers)
    first_header = headers[0] if headers else None
    items = [to_line_item(r, index, first_header) for r in rows]
    logging.info("Headers: %s", ", ".join(headers))
    if rows:
        logging.info("First row data: %s", dict(rows[0]))
    return items

def normalize_table(table: Sequence[Sequence[str]]) -> List[LineItem]:
    headers, rows = normalize_rows(table)
    ensure_required(headers)
    return line_items(headers, rows)
