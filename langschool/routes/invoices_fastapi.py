# -*- coding: utf-8 -*-
"""
FastAPI routes for invoices: draft generation, issuance, PDFs and cancellation.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from langschool.billing.period import period_label
from langschool.database import get_db
from langschool.models.settings import get_settings
from langschool.opener import open_file
from langschool.pdf import InvoicePDFRenderer
from langschool.schemas.common import envelope
from langschool.schemas.invoice import (GenerateResultRead, InvoiceListItem, InvoiceRead,
                                        IssueAllResultRead, IssueResultRead, PdfPathRead, PeriodRequest)
from langschool.schemas.payment import InvoiceSummaryRead
from langschool.services import drafts, issuance, payments

router = APIRouter(
    tags=["Invoices"],
    responses={404: {"description": "Invoice not found"}},
)


def get_renderer(db: Session = Depends(get_db)):
    return InvoicePDFRenderer.from_settings(get_settings(db))


def _list_item(invoice):
    return InvoiceListItem(
        id=invoice.id,
        student_id=invoice.student_id,
        student_name=invoice.student.full_name,
        year=invoice.year,
        month=invoice.month,
        status=invoice.status,
        number=invoice.number,
        total=invoice.total,
        issued_at=invoice.issued_at,
        lines_count=len(invoice.lines),
    )


@router.get("", response_model=List[InvoiceListItem])
def read_invoices(year: int, month: int, status: str = "draft", db: Session = Depends(get_db)):
    """Invoices of the period; ``status`` is draft (default), issued, paid, canceled or all."""
    return [_list_item(i) for i in drafts.list_invoices(db, year, month, status)]


@router.post("/generate")
def generate_drafts(body: PeriodRequest, db: Session = Depends(get_db)):
    result = drafts.generate_drafts(db, body.year, body.month)
    message = (f"Drafts for {period_label(body.year, body.month)}: {result.created} created, "
               f"{result.updated} updated, {result.skipped_has_invoice} already invoiced, "
               f"{result.skipped_no_lines} with nothing to bill")
    return envelope(GenerateResultRead.from_orm(result), message)


@router.post("/issue-all")
def issue_all(body: PeriodRequest, db: Session = Depends(get_db), renderer=Depends(get_renderer)):
    result = issuance.issue_all(db, body.year, body.month, renderer)
    message = f"{result.count} invoice(s) issued for {period_label(body.year, body.month)}"
    level = "info"
    if result.errors:
        message += f", {len(result.errors)} failed"
        level = "warning"
    return envelope(IssueAllResultRead.from_orm(result), message, level)


@router.get("/{invoice_id}", response_model=InvoiceRead)
def read_invoice(invoice_id: int, db: Session = Depends(get_db)):
    return drafts.get_invoice(db, invoice_id)


@router.get("/{invoice_id}/summary", response_model=InvoiceSummaryRead)
def read_invoice_summary(invoice_id: int, db: Session = Depends(get_db)):
    return payments.invoice_summary(db, invoice_id)


@router.post("/{invoice_id}/issue")
def issue_invoice(invoice_id: int, db: Session = Depends(get_db), renderer=Depends(get_renderer)):
    result = issuance.issue(db, invoice_id, renderer)
    return envelope(IssueResultRead.from_orm(result), f"Invoice {result.number} issued")


@router.post("/{invoice_id}/pdf")
def ensure_pdf(invoice_id: int, db: Session = Depends(get_db), renderer=Depends(get_renderer)):
    path = issuance.ensure_pdf(db, invoice_id, renderer)
    return envelope(PdfPathRead(invoice_id=invoice_id, pdf_path=str(path)), "PDF ready")


@router.post("/{invoice_id}/open")
def open_pdf(invoice_id: int, db: Session = Depends(get_db), renderer=Depends(get_renderer)):
    path = issuance.ensure_pdf(db, invoice_id, renderer)
    open_file(path, renderer.base_dir)
    return envelope(PdfPathRead(invoice_id=invoice_id, pdf_path=str(path)), "PDF opened")


@router.post("/{invoice_id}/cancel")
def cancel_invoice(invoice_id: int, db: Session = Depends(get_db)):
    invoice = drafts.cancel_invoice(db, invoice_id)
    return envelope(InvoiceRead.from_orm(invoice), f"Invoice {invoice.number or invoice.id} canceled")


@router.post("/{invoice_id}/reopen")
def reopen_invoice(invoice_id: int, db: Session = Depends(get_db)):
    invoice = drafts.reopen_invoice(db, invoice_id)
    return envelope(InvoiceRead.from_orm(invoice),
                    f"{period_label(invoice.year, invoice.month)} can be drafted again")


@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_draft(invoice_id: int, db: Session = Depends(get_db)):
    """Only drafts can be deleted."""
    drafts.delete_draft(db, invoice_id)
    return None
