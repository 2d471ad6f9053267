"""
invoice_core.pipeline
One run: table -> brand reports -> HTML + PDF per brand -> tracking index.

Brands are handled one at a time in order of first appearance. Any error
aborts the run; files already written for earlier brands are left in place.
"""
from __future__ import annotations
import logging
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional, Set
from .aggregate import build_brand_report, build_reports
from .config import TRACKING_INDEX_XLSX
from .errors import SchemaMismatch
from .excel_reports import write_tracking_index
from .grouping import group_by_brand
from .io_csv import load_table
from .models import BrandReport, GeneratedReport, LineItem, RunResult
from .normalize import ensure_required, line_items, normalize_rows
from .paths import OUTPUT_DIR, html_name, make_run_dir, pdf_name, unique_file_part
from .pdf_reports import html_to_pdf
from .progress import NullProgress, ProgressSink, safe_report
from .render import load_template, render_report

def read_line_items(in_path: Path, sink: ProgressSink) -> List[LineItem]:
    safe_report(sink, "Loading data file...")
    table = load_table(in_path)
    safe_report(sink, f"Processing {Path(in_path).name}")
    headers, rows = normalize_rows(table)
    try:
        ensure_required(headers)
    except SchemaMismatch:
        safe_report(sink, "Headers on sheet not as expected")
        raise
    return line_items(headers, rows)

def write_brand_outputs(
    report: BrandReport,
    template: str,
    run_dir: Path,
    today: Optional[date] = None,
    taken: Optional[Set[str]] = None,
) -> GeneratedReport:
    # brands whose safe names collide get _2, _3 ... within one run
    part = unique_file_part(report.brand, taken if taken is not None else set())
    html = render_report(template, report, today=today)
    html_path = run_dir / html_name(part)
    html_path.write_text(html, encoding="utf-8")

    file_name = pdf_name(part)
    pdf_path = html_to_pdf(html, run_dir / file_name)
    logging.info("PDF created for %s: %s", report.brand, pdf_path)
    return GeneratedReport(
        brand=report.brand,
        invoice_numbers=report.invoice_numbers,
        file_name=file_name,
        pdf_path=pdf_path,
        html_path=html_path,
    )

def generate_brand_reports(
    in_path: Path,
    template_path: Optional[Path] = None,
    out_base: Path = OUTPUT_DIR,
    sink: Optional[ProgressSink] = None,
    today: Optional[date] = None,
    now: Optional[datetime] = None,
) -> RunResult:
    sink = sink or NullProgress()
    safe_report(sink, "Starting brand report generation...")
    try:
        safe_report(sink, "Loading HTML template...")
        template = load_template(template_path)
        items = read_line_items(in_path, sink)
        brands = group_by_brand(items)

        safe_report(sink, "Creating output folder and organizing PDFs...")
        result = RunResult(run_dir=make_run_dir(Path(out_base), now=now))
        taken: Set[str] = set()

        safe_report(sink, "Starting PDF generation for each brand...")
        for brand, invoices in brands.items():
            report = build_brand_report(brand, invoices)
            safe_report(sink, f"Processing brand: {brand}")
            logging.info(
                "Processing brand: %s with %d invoices and %d items.",
                brand, len(report.invoice_numbers), len(report.items),
            )
            result.reports.append(write_brand_outputs(
                report, template, result.run_dir, today=today, taken=taken,
            ))

        result.index_path = write_tracking_index(result.reports, result.run_dir / TRACKING_INDEX_XLSX)
    except Exception as e:
        safe_report(sink, f"ERROR: {e}")
        logging.error("Report run aborted: %s", e)
        raise

    safe_report(sink, f"COMPLETED: {len(result.reports)} PDFs created successfully")
    return result

def preview_reports(in_path: Path, sink: Optional[ProgressSink] = None) -> List[BrandReport]:
    """Compute every brand report without writing any files."""
    sink = sink or NullProgress()
    return build_reports(read_line_items(in_path, sink))
