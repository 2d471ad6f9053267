"""
invoice_core.io_csv
Raw table loading: CSV text (with split fallback) or an .xlsx workbook.
"""
from __future__ import annotations
import csv
import io
import logging
from pathlib import Path
from typing import List
from .errors import ParseFailure

XLSX_SUFFIXES = (".xlsx", ".xlsm")

def require_openpyxl():
    try:
        from openpyxl import load_workbook  # noqa
        return load_workbook
    except Exception:
        raise SystemExit("Missing dependency: openpyxl\nInstall with: pip3 install openpyxl\n")

def split_lines(text: str, delimiter: str = ",") -> List[List[str]]:
    """Naive fallback: one row per line, cells split on the delimiter.

    Quoting is not interpreted, so a delimiter inside a quoted cell splits
    that cell.
    """
    return [line.split(delimiter) for line in text.splitlines()]

def parse_table(text: str) -> List[List[str]]:
    text = (text or "").lstrip("\ufeff")
    try:
        table = list(csv.reader(io.StringIO(text, newline=""), strict=True))
    except csv.Error as e:
        logging.warning("Standard CSV parse failed (%s), trying manual split", e)
        table = split_lines(text)
    if not table:
        raise ParseFailure("Input table is empty: no header row found.")
    return table

def _cell_text(value) -> str:
    return "" if value is None else str(value)

def load_xlsx_table(path: Path) -> List[List[str]]:
    load_workbook = require_openpyxl()
    try:
        wb = load_workbook(str(path), read_only=True, data_only=True)
    except Exception as e:
        raise ParseFailure(f"Could not read workbook {path.name}: {e}") from e
    try:
        ws = wb.worksheets[0]
        table = [[_cell_text(v) for v in row] for row in ws.iter_rows(values_only=True)]
    finally:
        wb.close()
    if not table:
        raise ParseFailure(f"Workbook {path.name} has no rows.")
    return table

def load_table(path: Path) -> List[List[str]]:
    path = Path(path)
    if not path.exists():
        raise ParseFailure(f"Input file not found: {path}")
    if path.suffix.lower() in XLSX_SUFFIXES:
        return load_xlsx_table(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ParseFailure(f"Could not read {path.name}: {e}") from e
    return parse_table(text)
