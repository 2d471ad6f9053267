"""
invoice_core.errors
Error kinds that abort a report run.
"""
from __future__ import annotations
from typing import List


class ReportError(Exception):
    """Base class for failures that stop the whole run."""


class SchemaMismatch(ReportError):
    def __init__(self, missing: List[str], headers: List[str]):
        self.missing = list(missing)
        self.headers = list(headers)
        super().__init__(
            f"Headers on sheet not as expected: missing {', '.join(self.missing)}"
        )


class ParseFailure(ReportError):
    pass


class TemplateLoadFailure(ReportError):
    pass


class ConversionFailure(ReportError):
    pass
