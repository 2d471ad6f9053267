"""
invoice_core.config
Central configuration/constants.
"""
from __future__ import annotations

DEFAULT_INPUT_CSV = "invoices.csv"
DEFAULT_TEMPLATE = "invoice_template.html"
DEFAULT_OUTPUT_DIR = "output"

# outputs (filenames)
RUN_FOLDER_PREFIX = "CSV_TO_PDF_"
RUN_FOLDER_STAMP = "%Y-%m-%d-%H-%M"
PDF_NAME_PATTERN = "Invoice_{brand}.pdf"
HTML_NAME_PATTERN = "Invoice_{brand}.html"
TRACKING_INDEX_XLSX = "tracking_index.xlsx"
PROGRESS_LOG = "progress.log"

# fallbacks used while grouping
UNKNOWN_BRAND = "Unknown Brand"
UNKNOWN_INVOICE = "Unknown Invoice"
UNKNOWN_ORDER = "Unknown"

# tax policy (UK VAT, prices are VAT-inclusive)
VAT_DIVISOR = 1.2
VAT_RATE_LABEL = "20%"
NO_VAT_LABEL = "N/A"
NO_VAT_MARKER = "no vat"
CURRENCY_SYMBOL = "£"

ORDER_ID_PATTERN = r"^#(\d+)"
DISCOUNT_KEYWORD = "discount"
SHIPPING_PATTERN = r"ship|post|postage|delivery|freight|shipping"

# header concepts -> canonical column name (matched case-insensitively,
# with or without a leading "*"); a "gross" column is accepted but unused
COL_CONTACT = "ContactName"
COL_INVOICE = "InvoiceNumber"
COL_DESCRIPTION = "Description"
COL_QUANTITY = "Quantity"
COL_UNIT_AMOUNT = "UnitAmount"
COL_TAX_TYPE = "TaxType"
COL_TAX_AMOUNT = "TaxAmount"

REQUIRED_COLUMNS = [
    COL_CONTACT,
    COL_INVOICE,
    COL_DESCRIPTION,
    COL_QUANTITY,
    COL_UNIT_AMOUNT,
    COL_TAX_AMOUNT,
]

# template placeholders (literal, case-sensitive)
PH_BRAND = "{{BRAND}}"
PH_CLIENT_NAME = "{{CLIENT_NAME}}"
PH_CURRENT_DATE = "{{CURRENT_DATE}}"
PH_INVOICE_NUMBERS = "{{INVOICE_NUMBERS}}"
PH_INVOICES_HTML = "{{INVOICES_HTML}}"

REPORT_DATE_FORMAT = "%d/%m/%Y"
PROGRESS_TIME_FORMAT = "%H:%M:%S"
