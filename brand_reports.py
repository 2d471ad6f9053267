#!/usr/bin/env python3
"""
brand_reports.py — CSV of invoice line items -> one PDF per brand

✅ Includes:
- header tolerance (*ContactName / ContactName / contactname ...)
- grouping by brand, then by order number (#1234 at the start of Description)
- per-order ordering: discounts, normal items, shipping
- VAT split (prices VAT-inclusive, 20%, "No VAT" tax types taken at face value)
- output/CSV_TO_PDF_<timestamp>/ folder with Invoice_<brand>.pdf/.html
- tracking_index.xlsx (Brand | Invoice Numbers | File Name | File Link)
- progress log at output/logs/progress.log + timestamped run log per run

Install:
  pip3 install xhtml2pdf openpyxl

Run examples:
  python3 brand_reports.py generate --in invoices.csv
  python3 brand_reports.py generate --in invoices.xlsx --template my_template.html --open
  python3 brand_reports.py preview --in invoices.csv
  python3 brand_reports.py clear_log

Input CSV minimum columns (any case, optional leading "*"):
  ContactName, InvoiceNumber, Description, Quantity, UnitAmount, TaxAmount
Optional:
  TaxType, gross
"""

from __future__ import annotations

import argparse
import logging
import platform
import subprocess
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from invoice_core.config import (
    DEFAULT_INPUT_CSV,
    DEFAULT_OUTPUT_DIR,
    PROGRESS_LOG,
)
from invoice_core.money import format_money
from invoice_core.paths import logs_dir
from invoice_core.pipeline import generate_brand_reports, preview_reports
from invoice_core.progress import LogProgress


# -----------------------------
# Logging
# -----------------------------
def setup_logging(out_base: Path) -> Path:
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_path = logs_dir(out_base) / f"brand_reports_{stamp}.log"

    root = logging.getLogger()
    root.setLevel(logging.INFO)

    # avoid duplicate handlers if user imports/runs in unusual way
    if not root.handlers:
        fmt = logging.Formatter("%(asctime)s | %(levelname)s | %(message)s")

        fh = logging.FileHandler(str(log_path), encoding="utf-8")
        fh.setLevel(logging.INFO)
        fh.setFormatter(fmt)

        sh = logging.StreamHandler()
        sh.setLevel(logging.INFO)
        sh.setFormatter(fmt)

        root.addHandler(fh)
        root.addHandler(sh)

    logging.info("Logging started: %s", log_path)
    return log_path


# -----------------------------
# Helpers
# -----------------------------
def resolve_input_path(path_str: str) -> Path:
    p = Path(path_str).expanduser()
    if p.exists():
        return p.resolve()
    alt = Path(__file__).resolve().parent / path_str
    if alt.exists():
        return alt.resolve()
    return p.resolve()  # may not exist; the loader reports it


def _open_file(path: Path) -> None:
    sysname = platform.system().lower()
    try:
        if "darwin" in sysname or "mac" in sysname:
            subprocess.run(["open", str(path)], check=False)
        elif "windows" in sysname:
            subprocess.run(["cmd", "/c", "start", "", str(path)], check=False)
        else:
            subprocess.run(["xdg-open", str(path)], check=False)
    except Exception as e:
        logging.warning("Failed to open %s: %s", path, e)


def progress_sink(out_base: Path) -> LogProgress:
    return LogProgress(logs_dir(out_base) / PROGRESS_LOG)


# -----------------------------
# Runners (commands)
# -----------------------------
def run_generate(in_path: Path, template: Optional[Path], out_base: Path, open_after: bool) -> int:
    sink = progress_sink(out_base)
    # each run starts with an empty progress log
    sink.clear()
    try:
        result = generate_brand_reports(
            in_path=in_path,
            template_path=template,
            out_base=out_base,
            sink=sink,
        )
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(
        f"✅ Reports generated successfully! {len(result.reports)} PDFs created in folder "
        f"\"{result.run_dir}\" and tracking index \"{result.index_path}\" added."
    )
    if open_after:
        _open_file(result.run_dir)
    return 0


def run_preview(in_path: Path) -> int:
    # the progress log belongs to generate runs
    try:
        reports = preview_reports(in_path)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for r in reports:
        print(f"  - {r.brand}: {len(r.invoice_numbers)} invoices, {len(r.items)} items, "
              f"subtotal {format_money(r.subtotal)}, VAT {format_money(r.vat)}, "
              f"total {format_money(r.total)}")
    print(f"✅ {len(reports)} brands")
    return 0


def run_clear_log(out_base: Path) -> int:
    if progress_sink(out_base).clear():
        print("✅ Progress log cleared.")
    else:
        print("No progress log entries to clear.")
    return 0


# -----------------------------
# CLI
# -----------------------------
def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Brand Reports: invoice line items CSV -> one PDF per brand.")
    p.add_argument("--outdir", default=DEFAULT_OUTPUT_DIR, help="Output root (default: output)")

    sub = p.add_subparsers(dest="cmd", required=True)

    g = sub.add_parser("generate", help="Create Invoice_<brand>.pdf for every brand + tracking index.")
    g.add_argument("--in", dest="input_csv", default=DEFAULT_INPUT_CSV, help="Input CSV or .xlsx file.")
    g.add_argument("--template", default="", help="HTML template (default: ./invoice_template.html, then bundled)")
    g.add_argument("--open", action="store_true", help="Open the run folder when done")

    pv = sub.add_parser("preview",
                        help="Print per-brand totals to the console (no reports written, progress log untouched).")
    pv.add_argument("--in", dest="input_csv", default=DEFAULT_INPUT_CSV, help="Input CSV or .xlsx file.")

    sub.add_parser("clear_log", help="Clear the progress log.")
    return p


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    out_base = Path(args.outdir).expanduser()
    setup_logging(out_base)

    if args.cmd == "clear_log":
        return run_clear_log(out_base)

    in_path = resolve_input_path(args.input_csv)

    if args.cmd == "generate":
        template = Path(args.template).expanduser() if args.template else None
        return run_generate(in_path, template, out_base, open_after=args.open)
    if args.cmd == "preview":
        return run_preview(in_path)
    raise ValueError(f"Unknown command: {args.cmd}")


if __name__ == "__main__":
    raise SystemExit(main())
