# -*- coding: utf-8 -*-
"""
Invoice PDF rendering with reportlab.

Files live under ``<invoices_dir>/YYYY/MM/<number>.pdf``. The canvas runs in
reportlab's invariant mode and the printed date is the invoice's
``issued_at``, so rendering the same invoice twice gives the same bytes.
"""

import logging
from pathlib import Path

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from langschool import config
from langschool.billing.money import to_decimal
from langschool.billing.period import period_label


def pdf_path_for(base_dir, year, month, number):
    return Path(base_dir) / f"{year:04d}" / f"{month:02d}" / f"{number}.pdf"


def format_money(amount, currency):
    return f"{to_decimal(amount):,.2f} {currency}"


class InvoicePDFRenderer:
    def __init__(self, base_dir=None, org_name="", address="", currency=None):
        self.base_dir = Path(base_dir or config.INVOICES_DIR)
        self.org_name = org_name or ""
        self.address = address or ""
        self.currency = currency or config.CURRENCY

    @classmethod
    def from_settings(cls, settings, base_dir=None):
        return cls(
            base_dir=base_dir,
            org_name=settings.org_name,
            address=settings.address,
            currency=settings.currency,
        )

    def path_for(self, invoice):
        return pdf_path_for(self.base_dir, invoice.year, invoice.month, invoice.number)

    def render(self, invoice):
        if not invoice.number:
            raise ValueError(f"invoice {invoice.id} has no number")
        path = self.path_for(invoice)
        path.parent.mkdir(parents=True, exist_ok=True)

        c = canvas.Canvas(str(path), pagesize=A4, invariant=1)
        c.setTitle(f"Invoice {invoice.number}")
        c.setAuthor(self.org_name or "LangSchool")
        width, height = A4
        x_margin = 18 * mm

        # --- Header ---
        c.setFont("Helvetica-Bold", 16)
        c.drawString(x_margin, height - 20 * mm, self.org_name or "Invoice")
        c.setFont("Helvetica", 10)
        if self.address:
            c.drawString(x_margin, height - 26 * mm, self.address)

        c.setFont("Helvetica-Bold", 12)
        c.drawRightString(width - x_margin, height - 20 * mm, f"Invoice {invoice.number}")
        c.setFont("Helvetica", 10)
        issued = invoice.issued_at.strftime("%d.%m.%Y") if invoice.issued_at else ""
        c.drawRightString(width - x_margin, height - 26 * mm, f"Date: {issued}")
        c.drawRightString(width - x_margin, height - 31 * mm,
                          f"Period: {period_label(invoice.year, invoice.month)}")

        y = height - 44 * mm
        c.setFont("Helvetica", 10)
        c.drawString(x_margin, y, f"Bill to: {invoice.student.full_name}")
        y -= 10 * mm

        # --- Lines ---
        columns = (x_margin, 110 * mm, 130 * mm, 155 * mm)
        c.setFont("Helvetica-Bold", 10)
        c.drawString(columns[0], y, "Description")
        c.drawRightString(columns[1] + 10 * mm, y, "Qty")
        c.drawRightString(columns[2] + 15 * mm, y, "Price")
        c.drawRightString(columns[3] + 10 * mm, y, "Disc. %")
        c.drawRightString(width - x_margin, y, "Amount")
        y -= 3 * mm
        c.setStrokeColor(colors.lightgrey)
        c.line(x_margin, y, width - x_margin, y)
        y -= 6 * mm

        c.setFont("Helvetica", 10)
        for line in invoice.lines:
            if y < 30 * mm:
                c.showPage()
                y = height - 20 * mm
                c.setFont("Helvetica", 10)
            c.drawString(columns[0], y, line.description[:60])
            c.drawRightString(columns[1] + 10 * mm, y, str(line.qty))
            c.drawRightString(columns[2] + 15 * mm, y, f"{to_decimal(line.unit_price):,.2f}")
            c.drawRightString(columns[3] + 10 * mm, y, f"{to_decimal(line.discount_pct):.2f}")
            c.drawRightString(width - x_margin, y, format_money(line.amount, self.currency))
            y -= 6 * mm

        # --- Total ---
        y -= 2 * mm
        c.line(x_margin, y, width - x_margin, y)
        y -= 7 * mm
        c.setFont("Helvetica-Bold", 12)
        c.drawString(x_margin, y, "Total")
        c.drawRightString(width - x_margin, y, format_money(invoice.total, self.currency))

        c.showPage()
        c.save()
        logging.info(f"PDF written: {path}")
        return path
