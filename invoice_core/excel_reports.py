"""
invoice_core.excel_reports
Tracking index of produced PDFs (openpyxl).
"""
from __future__ import annotations
from pathlib import Path
from typing import List
from .models import GeneratedReport

INDEX_HEADERS = ["Brand", "Invoice Numbers", "File Name", "File Link"]

def require_openpyxl():
    try:
        from openpyxl import Workbook  # noqa
        from openpyxl.styles import Font, PatternFill  # noqa
        return Workbook, Font, PatternFill
    except Exception:
        raise SystemExit("Missing dependency: openpyxl\nInstall with: pip3 install openpyxl\n")

def write_tracking_index(reports: List[GeneratedReport], xlsx_path: Path, title: str = "Generated PDFs") -> Path:
    Workbook, Font, PatternFill = require_openpyxl()
    HEADER_FONT = Font(bold=True, color="FFFFFF")
    HEADER_FILL = PatternFill(fill_type="solid", start_color="4CAF50", end_color="4CAF50")

    wb = Workbook()
    ws = wb.active
    ws.title = title[:31]

    ws.append(INDEX_HEADERS)
    for c in range(1, len(INDEX_HEADERS) + 1):
        ws.cell(row=1, column=c).font = HEADER_FONT
        ws.cell(row=1, column=c).fill = HEADER_FILL

    for r in reports:
        ws.append([r.brand, ", ".join(r.invoice_numbers), r.file_name, "Open PDF"])
        link = ws.cell(row=ws.max_row, column=4)
        link.hyperlink = Path(r.pdf_path).resolve().as_uri()
        link.style = "Hyperlink"

    ws.column_dimensions["A"].width = 32
    ws.column_dimensions["B"].width = 40
    ws.column_dimensions["C"].width = 36
    ws.column_dimensions["D"].width = 14

    wb.save(xlsx_path)
    return xlsx_path
