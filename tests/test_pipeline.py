from __future__ import annotations

from datetime import date, datetime

import pytest
from openpyxl import load_workbook
from pypdf import PdfReader

from invoice_core import pipeline
from invoice_core.errors import ConversionFailure, ParseFailure, SchemaMismatch, TemplateLoadFailure
from invoice_core.paths import pdf_name, safe_file_part, unique_file_part
from invoice_core.pipeline import generate_brand_reports, preview_reports

NOW = datetime(2026, 10, 17, 9, 30)

MULTI_BRAND_CSV = (
    "ContactName,InvoiceNumber,Description,Quantity,UnitAmount,TaxType,TaxAmount,gross\n"
    "Zeta,INV-7,#10 Lamp,1,30,Standard,5,30\n"
    "Acme,INV-1,#2 Mug,2,6,Standard,2,12\n"
    "Zeta,INV-8,#9 Postage,1,4.5,Standard,0.75,4.5\n"
    ",,Loose item,1,12,No VAT,0,12\n"
)


def test_generate_acme_end_to_end(acme_csv, tmp_path, progress):
    out = tmp_path / "out"
    result = generate_brand_reports(acme_csv, out_base=out, sink=progress,
                                    today=date(2026, 10, 17), now=NOW)

    assert result.run_dir == out / "CSV_TO_PDF_2026-10-17-09-30"
    assert [r.brand for r in result.reports] == ["Acme"]

    generated = result.reports[0]
    assert generated.file_name == "Invoice_Acme.pdf"
    assert generated.invoice_numbers == ("INV1",)
    assert generated.pdf_path.read_bytes().startswith(b"%PDF")

    html = generated.html_path.read_text(encoding="utf-8")
    assert "17/10/2026" in html
    assert "£20.84" in html and "£4.16" in html and "£25.00" in html
    assert html.index("#1 Widget") < html.index("#1 Shipping")

    assert progress.messages[0] == "Starting brand report generation..."
    assert "Processing brand: Acme" in progress.messages
    assert progress.messages[-1] == "COMPLETED: 1 PDFs created successfully"


def test_tracking_index(tmp_path, progress):
    src = tmp_path / "multi.csv"
    src.write_text(MULTI_BRAND_CSV, encoding="utf-8")

    result = generate_brand_reports(src, out_base=tmp_path / "out", sink=progress, now=NOW)

    assert [r.brand for r in result.reports] == ["Zeta", "Acme", "Unknown Brand"]
    assert result.reports[0].invoice_numbers == ("INV-7", "INV-8")
    assert result.reports[2].invoice_numbers == ("Unknown Invoice",)

    ws = load_workbook(result.index_path).active
    assert [c.value for c in ws[1]] == ["Brand", "Invoice Numbers", "File Name", "File Link"]
    assert [c.value for c in ws[2]][:3] == ["Zeta", "INV-7, INV-8", "Invoice_Zeta.pdf"]
    assert ws.cell(row=2, column=4).hyperlink.target.startswith("file://")
    assert ws.max_row == 4


def test_schema_mismatch_aborts_before_output(tmp_path, progress):
    src = tmp_path / "bad.csv"
    src.write_text("Name,Amount\nAcme,5\n", encoding="utf-8")
    out = tmp_path / "out"

    with pytest.raises(SchemaMismatch):
        generate_brand_reports(src, out_base=out, sink=progress, now=NOW)

    assert "Headers on sheet not as expected" in progress.messages
    assert progress.messages[-1].startswith("ERROR: ")
    assert not out.exists()


def test_missing_input_is_parse_failure(tmp_path, progress):
    with pytest.raises(ParseFailure):
        generate_brand_reports(tmp_path / "nope.csv", out_base=tmp_path / "out", sink=progress)
    assert progress.messages[-1].startswith("ERROR: Input file not found")


def test_missing_template_aborts(acme_csv, tmp_path, progress):
    with pytest.raises(TemplateLoadFailure):
        generate_brand_reports(acme_csv, template_path=tmp_path / "none.html",
                               out_base=tmp_path / "out", sink=progress)


def test_custom_template(acme_csv, tmp_path):
    template = tmp_path / "t.html"
    template.write_text("<p>{{CLIENT_NAME}}: {{INVOICE_NUMBERS}}</p>{{INVOICES_HTML}}", encoding="utf-8")

    result = generate_brand_reports(acme_csv, template_path=template, out_base=tmp_path / "out", now=NOW)
    html = result.reports[0].html_path.read_text(encoding="utf-8")
    assert html.startswith("<p>Acme: INV1</p>")


def test_failing_progress_sink_does_not_abort(acme_csv, tmp_path):
    class Broken:
        def report(self, message):
            raise RuntimeError("display gone")

    result = generate_brand_reports(acme_csv, out_base=tmp_path / "out", sink=Broken(), now=NOW)
    assert len(result.reports) == 1


def test_preview_writes_nothing(acme_csv, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    reports = preview_reports(acme_csv)
    assert [(r.brand, r.total) for r in reports] == [("Acme", 25.0)]
    assert not (tmp_path / "output").exists()


def test_brand_names_cannot_escape_run_folder():
    assert safe_file_part("../etc/passwd") == "_etc_passwd"
    assert pdf_name("A/B: C") == "Invoice_A_B_ C.pdf"
    assert pdf_name("") == "Invoice__.pdf"


def pdf_text(path):
    return "\n".join(page.extract_text() for page in PdfReader(str(path)).pages)


def test_pdf_is_converted_from_rendered_template(acme_csv, tmp_path):
    template = tmp_path / "t.html"
    template.write_text("<h1>Statement for {{BRAND}}</h1>{{INVOICES_HTML}}", encoding="utf-8")

    result = generate_brand_reports(acme_csv, template_path=template, out_base=tmp_path / "out", now=NOW)
    text = pdf_text(result.reports[0].pdf_path)

    assert "Statement for Acme" in text
    assert "Total GBP" in text and "25.00" in text


def test_colliding_brand_file_names_get_suffixes(tmp_path, progress):
    src = tmp_path / "clash.csv"
    src.write_text(
        "ContactName,InvoiceNumber,Description,Quantity,UnitAmount,TaxType,TaxAmount\n"
        "A/B,INV-1,#1 Mug,1,6,Standard,1\n"
        "A_B,INV-2,#2 Lamp,1,12,Standard,2\n"
        "a_b,INV-3,#3 Rug,1,24,Standard,4\n",
        encoding="utf-8",
    )

    result = generate_brand_reports(src, out_base=tmp_path / "out", sink=progress, now=NOW)

    names = [r.file_name for r in result.reports]
    assert names == ["Invoice_A_B.pdf", "Invoice_A_B_2.pdf", "Invoice_a_b_3.pdf"]
    assert sorted(p.name for p in result.run_dir.glob("*.pdf")) == sorted(names)
    assert "Rug" in result.reports[2].html_path.read_text(encoding="utf-8")

    ws = load_workbook(result.index_path).active
    assert [ws.cell(row=i, column=3).value for i in (2, 3, 4)] == names


def test_unique_file_part_tracks_names_case_insensitively():
    taken = set()
    assert unique_file_part("Acme", taken) == "Acme"
    assert unique_file_part("Acme.", taken) == "Acme_2"
    assert unique_file_part("ACME", taken) == "ACME_3"
    assert unique_file_part("Other", taken) == "Other"


def test_failure_mid_run_keeps_earlier_brands(tmp_path, progress, monkeypatch):
    src = tmp_path / "multi.csv"
    src.write_text(MULTI_BRAND_CSV, encoding="utf-8")
    real = pipeline.html_to_pdf

    def convert(html, pdf_path):
        if pdf_path.name == "Invoice_Acme.pdf":
            raise ConversionFailure("PDF conversion failed for Invoice_Acme.pdf")
        return real(html, pdf_path)

    monkeypatch.setattr(pipeline, "html_to_pdf", convert)
    out = tmp_path / "out"

    with pytest.raises(ConversionFailure):
        generate_brand_reports(src, out_base=out, sink=progress, now=NOW)

    run_dir = out / "CSV_TO_PDF_2026-10-17-09-30"
    assert (run_dir / "Invoice_Zeta.pdf").exists()
    assert not (run_dir / "Invoice_Unknown Brand.pdf").exists()
    assert not (run_dir / "tracking_index.xlsx").exists()
    assert "Processing brand: Unknown Brand" not in progress.messages
    assert progress.messages[-1] == "ERROR: PDF conversion failed for Invoice_Acme.pdf"
