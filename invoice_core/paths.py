"""
invoice_core.paths
Output folder helpers.
"""
from __future__ import annotations
import re
from datetime import datetime
from pathlib import Path
from typing import Set
from .config import (
    DEFAULT_OUTPUT_DIR,
    HTML_NAME_PATTERN,
    PDF_NAME_PATTERN,
    RUN_FOLDER_PREFIX,
    RUN_FOLDER_STAMP,
)

OUTPUT_DIR = Path(DEFAULT_OUTPUT_DIR)

def logs_dir(base: Path = OUTPUT_DIR) -> Path:
    d = base / "logs"
    d.mkdir(parents=True, exist_ok=True)
    return d

def make_run_dir(base: Path = OUTPUT_DIR, now: datetime | None = None) -> Path:
    stamp = (now or datetime.now()).strftime(RUN_FOLDER_STAMP)
    run_dir = base / f"{RUN_FOLDER_PREFIX}{stamp}"
    run_dir.mkdir(parents=True, exist_ok=True)
    return run_dir

def safe_file_part(name: str) -> str:
    # brand names come straight from the input table
    s = re.sub(r'[\\/:*?"<>|\x00-\x1f]', "_", name or "")
    s = s.strip().strip(".")
    return s or "_"

def unique_file_part(name: str, taken: Set[str]) -> str:
    """safe_file_part, suffixed _2, _3 ... until unused in 'taken'.

    Names are compared case-insensitively; the chosen one is added to 'taken'.
    """
    base = safe_file_part(name)
    part, n = base, 1
    while part.casefold() in taken:
        n += 1
        part = f"{base}_{n}"
    taken.add(part.casefold())
    return part

def pdf_name(brand: str) -> str:
    return PDF_NAME_PATTERN.format(brand=safe_file_part(brand))

def html_name(brand: str) -> str:
    return HTML_NAME_PATTERN.format(brand=safe_file_part(brand))
