"""
invoice_core.pdf_reports
PDF creation: the rendered report HTML converted with xhtml2pdf (reportlab).
"""
from __future__ import annotations
import logging
from pathlib import Path
from .errors import ConversionFailure

def require_xhtml2pdf():
    try:
        from xhtml2pdf import pisa  # noqa
        return pisa
    except Exception:
        raise SystemExit("Missing dependency: xhtml2pdf\nInstall with: pip3 install xhtml2pdf\n")

def html_to_pdf(html: str, pdf_path: Path) -> Path:
    """Convert one rendered report body to PDF. Raises ConversionFailure."""
    pisa = require_xhtml2pdf()
    with open(pdf_path, "wb") as fh:
        status = pisa.CreatePDF(html, dest=fh)
    if status.err:
        raise ConversionFailure(f"PDF conversion failed for {pdf_path.name} ({status.err} errors)")
    if status.warn:
        logging.warning("PDF conversion of %s finished with %d warnings", pdf_path.name, status.warn)
    return pdf_path
