from __future__ import annotations

from typing import List

import pytest

from invoice_core.models import LineItem


class ListProgress:
    def __init__(self) -> None:
        self.messages: List[str] = []

    def report(self, message: str) -> None:
        self.messages.append(message)


ACME_CSV = (
    "*ContactName,*InvoiceNumber,Description,*Quantity,*UnitAmount,*TaxType,TaxAmount\n"
    "Acme,INV1,#1 Widget,2,10,Standard,3.33\n"
    "Acme,INV1,#1 Shipping,1,5,Standard,0.83\n"
)


def item(description: str = "", quantity: float = 1.0, unit_amount: float = 0.0,
         tax_type: str = "", brand: str = "Acme", invoice_number: str = "INV1") -> LineItem:
    return LineItem(
        brand=brand,
        invoice_number=invoice_number,
        description=description,
        quantity=quantity,
        unit_amount=unit_amount,
        tax_type=tax_type,
    )


@pytest.fixture
def progress() -> ListProgress:
    return ListProgress()


@pytest.fixture
def acme_csv(tmp_path):
    path = tmp_path / "invoices.csv"
    path.write_text(ACME_CSV, encoding="utf-8")
    return path
