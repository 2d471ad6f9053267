"""
invoice_core.render
Report template loading and placeholder substitution.

Descriptions are inserted into the HTML as-is, without escaping. Input
tables are trusted; markup in a description ends up in the document.
"""
from __future__ import annotations
import logging
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional
from .aggregate import row_amounts
from .config import (
    DEFAULT_TEMPLATE,
    PH_BRAND,
    PH_CLIENT_NAME,
    PH_CURRENT_DATE,
    PH_INVOICE_NUMBERS,
    PH_INVOICES_HTML,
    REPORT_DATE_FORMAT,
)
from .errors import TemplateLoadFailure
from .models import BrandReport, LineItem
from .money import format_amount, format_money

BUNDLED_TEMPLATE = Path(__file__).resolve().parent / "templates" / DEFAULT_TEMPLATE

TH_STYLE = (
    "background-color: #f7f7f7; color: #333333; padding: 12px; "
    "border-bottom: 2px solid #dddddd; text-align: left; font-size: 12px; "
    "font-weight: bold; text-transform: uppercase;"
)
TD_STYLE = "padding: 12px; border-bottom: 1px solid #eeeeee;"
TD_NUMBER_STYLE = f"{TD_STYLE} text-align: right;"
TOTAL_CELL_STYLE = "padding: 10px; text-align: right;"
GRAND_TOTAL_CELL_STYLE = (
    "padding: 10px; text-align: right; background-color: #f7f7f7; "
    "font-weight: bold; border-top: 2px solid #dddddd;"
)

def template_candidates(path: Optional[Path] = None) -> List[Path]:
    if path is not None:
        return [Path(path)]
    return [Path.cwd() / DEFAULT_TEMPLATE, BUNDLED_TEMPLATE]

def load_template(path: Optional[Path] = None) -> str:
    for candidate in template_candidates(path):
        if not candidate.is_file():
            continue
        try:
            text = candidate.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise TemplateLoadFailure(f"Could not read template {candidate}: {e}") from e
        logging.info("Loaded HTML template from %s", candidate)
        return text
    names = ", ".join(str(c) for c in template_candidates(path))
    raise TemplateLoadFailure(f"Could not find {DEFAULT_TEMPLATE} (looked in: {names}).")

def render_row(item: LineItem) -> str:
    amounts = row_amounts(item)
    return f"""
        <tr>
          <td style="{TD_STYLE}">{item.description}</td>
          <td style="{TD_NUMBER_STYLE}">{item.quantity:.2f}</td>
          <td style="{TD_NUMBER_STYLE}">{item.unit_amount:.2f}</td>
          <td style="{TD_NUMBER_STYLE}">{amounts.vat_rate_label}</td>
          <td style="{TD_NUMBER_STYLE}">{format_amount(amounts.net)}</td>
        </tr>"""

def render_items_html(report: BrandReport) -> str:
    item_rows = "".join(render_row(i) for i in report.items)
    return f"""
        <!-- Items Table -->
        <table width="100%" border="0" cellspacing="0" cellpadding="0" style="font-size: 13px;">
          <thead>
            <tr>
              <th style="{TH_STYLE}">Description</th>
              <th style="{TH_STYLE} text-align: right;">Quantity</th>
              <th style="{TH_STYLE} text-align: right;">Unit Price</th>
              <th style="{TH_STYLE} text-align: right;">VAT</th>
              <th style="{TH_STYLE} text-align: right;">Net Amount GBP</th>
            </tr>
          </thead>
          <tbody>
            {item_rows}
          </tbody>
        </table>

        <!-- Totals Section -->
        <table width="100%" border="0" cellspacing="0" cellpadding="0" style="margin-top: 20px;">
          <tr>
            <td align="right">
              <table border="0" cellspacing="0" cellpadding="5" style="width: 280px; font-size: 13px;">
                <tr>
                  <td style="{TOTAL_CELL_STYLE}">Subtotal</td>
                  <td style="{TOTAL_CELL_STYLE}">{format_money(report.subtotal)}</td>
                </tr>
                <tr>
                  <td style="{TOTAL_CELL_STYLE}">VAT (20%)</td>
                  <td style="{TOTAL_CELL_STYLE}">{format_money(report.vat)}</td>
                </tr>
                <tr>
                  <td style="{GRAND_TOTAL_CELL_STYLE}">Total GBP</td>
                  <td style="{GRAND_TOTAL_CELL_STYLE}">{format_money(report.total)}</td>
                </tr>
              </table>
            </td>
          </tr>
        </table>
      """

def current_date(today: Optional[date] = None) -> str:
    d = today or datetime.now(timezone.utc).date()
    return d.strftime(REPORT_DATE_FORMAT)

def substitute(template: str, values: Dict[str, str]) -> str:
    out = template
    for token, value in values.items():
        out = out.replace(token, value)
    return out

def render_report(template: str, report: BrandReport, today: Optional[date] = None) -> str:
    # applied in insertion order, INVOICES_HTML last
    return substitute(template, {
        PH_BRAND: report.brand,
        PH_CLIENT_NAME: report.client_name,
        PH_CURRENT_DATE: current_date(today),
        PH_INVOICE_NUMBERS: ", ".join(report.invoice_numbers),
        PH_INVOICES_HTML: render_items_html(report),
    })
