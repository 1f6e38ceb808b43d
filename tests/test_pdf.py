from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from langschool.pdf import InvoicePDFRenderer, pdf_path_for


def _invoice(number="LS-202403-001"):
    line = SimpleNamespace(description="Lessons 03.2024, English B1", qty=4,
                           unit_price=Decimal("10.00"), discount_pct=Decimal("0"), amount=Decimal("40.00"))
    return SimpleNamespace(
        id=1,
        number=number,
        year=2024,
        month=3,
        issued_at=date(2024, 4, 2),
        total=Decimal("40.00"),
        student=SimpleNamespace(full_name="Anna Petrova"),
        lines=[line],
    )


def test_pdf_path_layout(tmp_path):
    assert pdf_path_for(tmp_path, 2024, 3, "LS-202403-001") == tmp_path / "2024" / "03" / "LS-202403-001.pdf"


def test_render_writes_pdf(tmp_path):
    renderer = InvoicePDFRenderer(tmp_path, org_name="LangSchool", address="Main St 1", currency="EUR")
    path = renderer.render(_invoice())

    assert path == tmp_path / "2024" / "03" / "LS-202403-001.pdf"
    assert path.read_bytes().startswith(b"%PDF")


def test_render_is_deterministic(tmp_path):
    renderer = InvoicePDFRenderer(tmp_path, org_name="LangSchool")
    first = renderer.render(_invoice()).read_bytes()
    second = renderer.render(_invoice()).read_bytes()
    assert first == second


def test_render_requires_number(tmp_path):
    with pytest.raises(ValueError):
        InvoicePDFRenderer(tmp_path).render(_invoice(number=None))
