"""
invoice_core.aggregate
Per-row VAT split and per-brand totals.

Prices in the input are VAT-inclusive. For each row the net amount is the
gross divided by 1.2 (rounded), and VAT is the gross minus that rounded net,
so the two always add back up to the row's gross. Rows whose tax type says
"no vat" are taken at face value with zero VAT.

Brand totals sum the already-rounded row figures. The gross total is summed
from each row's own rounded gross, independently of subtotal + VAT; under
heavy rounding the two can differ by a cent or so and are reported as-is.
"""
from __future__ import annotations
import logging
from typing import Dict, Iterable, List
from .classify import emission_order
from .config import NO_VAT_LABEL, NO_VAT_MARKER, VAT_DIVISOR, VAT_RATE_LABEL
from .grouping import flatten_brand, group_by_brand, group_by_order
from .models import BrandReport, LineItem, RowAmounts
from .money import round2, sum2

def is_no_vat(tax_type: str) -> bool:
    return NO_VAT_MARKER in (tax_type or "").lower()

def row_amounts(item: LineItem) -> RowAmounts:
    gross = item.quantity * item.unit_amount
    if is_no_vat(item.tax_type):
        return RowAmounts(gross=gross, net=round2(gross), vat=0.0, vat_rate_label=NO_VAT_LABEL)
    net = round2(gross / VAT_DIVISOR)
    vat = round2(gross - net)
    return RowAmounts(gross=gross, net=net, vat=vat, vat_rate_label=VAT_RATE_LABEL)

def build_brand_report(brand: str, invoices: Dict[str, List[LineItem]]) -> BrandReport:
    invoice_numbers, all_items = flatten_brand(invoices)
    groups = group_by_order(all_items)
    amounts = [row_amounts(i) for i in all_items]
    return BrandReport(
        brand=brand,
        invoice_numbers=invoice_numbers,
        order_groups=groups,
        items=emission_order(groups),
        subtotal=sum2(a.net for a in amounts),
        vat=sum2(a.vat for a in amounts),
        total=sum2(round2(a.gross) for a in amounts),
    )

def build_reports(items: Iterable[LineItem]) -> List[BrandReport]:
    reports: List[BrandReport] = []
    for brand, invoices in group_by_brand(items).items():
        report = build_brand_report(brand, invoices)
        logging.info(
            "Brand %s: %d invoices, %d items, subtotal %.2f, vat %.2f, total %.2f",
            brand, len(report.invoice_numbers), len(report.items),
            report.subtotal, report.vat, report.total,
        )
        reports.append(report)
    return reports
