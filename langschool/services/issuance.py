# -*- coding: utf-8 -*-
"""
Invoice issuance: draft -> issued with a permanent number, then the PDF.

Numbering and the status change commit together or not at all. The PDF is
written after the commit, so a rendering problem never costs a number.
"""

import logging
import os
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from langschool.billing.period import validate_period
from langschool.billing.status import InvoiceStatus
from langschool.errors import BillingError, NotDraft, RenderFailure, ValidationError
from langschool.locks import serialized
from langschool.models.invoice import Invoice, InvoiceCounter
from langschool.models.settings import get_settings
from langschool.services.drafts import get_invoice


@dataclass
class IssueResult:
    invoice_id: int
    number: str
    pdf_path: str


@dataclass
class IssueError:
    invoice_id: int
    kind: str
    message: str
    number: Optional[str] = None


@dataclass
class IssueAllResult:
    count: int = 0
    pdf_paths: List[str] = field(default_factory=list)
    numbers: List[str] = field(default_factory=list)
    errors: List[IssueError] = field(default_factory=list)


def format_number(prefix, year, month, seq):
    """LS-202403-007"""
    return f"{prefix}-{year:04d}{month:02d}-{seq:03d}"


def _next_seq(db, year):
    counter = db.get(InvoiceCounter, year)
    if counter is None:
        counter = InvoiceCounter(year=year, next_seq=1)
        db.add(counter)
        db.flush()
    seq = counter.next_seq
    counter.next_seq = seq + 1
    return seq


def _render(invoice, renderer):
    try:
        return str(renderer.render(invoice))
    except Exception as e:
        logging.error(f"PDF rendering failed for invoice {invoice.id} ({invoice.number}): {e}")
        raise RenderFailure(invoice.id, invoice.number, str(e)) from e


@serialized
def issue(db, invoice_id, renderer):
    invoice = get_invoice(db, invoice_id)
    if invoice.state is not InvoiceStatus.DRAFT:
        raise NotDraft(invoice_id, invoice.status)

    try:
        prefix = get_settings(db).invoice_prefix
        seq = _next_seq(db, invoice.year)
        invoice.number = format_number(prefix, invoice.year, invoice.month, seq)
        invoice.issued_at = date.today()
        invoice.status = invoice.state.transition(InvoiceStatus.ISSUED).value
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(invoice)
    logging.info(f"Invoice {invoice.id} issued as {invoice.number} (total {invoice.total})")

    pdf_path = _render(invoice, renderer)
    return IssueResult(invoice_id=invoice.id, number=invoice.number, pdf_path=pdf_path)


@serialized
def issue_all(db, year, month, renderer):
    """Issues every draft of the period; one failure does not stop the rest."""
    validate_period(year, month)
    draft_ids = [row.id for row in db.query(Invoice.id).filter(
        Invoice.year == year,
        Invoice.month == month,
        Invoice.status == InvoiceStatus.DRAFT.value,
    ).order_by(Invoice.id).all()]

    result = IssueAllResult()
    for invoice_id in draft_ids:
        try:
            issued = issue(db, invoice_id, renderer)
        except RenderFailure as e:
            result.numbers.append(e.number)
            result.errors.append(IssueError(invoice_id, e.kind, e.message, e.number))
            continue
        except BillingError as e:
            result.errors.append(IssueError(invoice_id, e.kind, e.message))
            continue
        except SQLAlchemyError as e:
            logging.error(f"Issuing invoice {invoice_id} failed: {e}")
            result.errors.append(IssueError(invoice_id, type(e).__name__, str(e)))
            continue
        result.count += 1
        result.numbers.append(issued.number)
        result.pdf_paths.append(issued.pdf_path)

    logging.info(f"Issued {result.count} of {len(draft_ids)} draft(s) for {month:02d}.{year}, "
                 f"{len(result.errors)} error(s)")
    return result


def ensure_pdf(db, invoice_id, renderer):
    """Path of the invoice PDF, rendering it again if the file is missing."""
    invoice = get_invoice(db, invoice_id)
    if not invoice.number:
        raise ValidationError(f"invoice {invoice_id} has no number; issue it first")
    path = renderer.path_for(invoice)
    if os.path.exists(path):
        return str(path)
    return _render(invoice, renderer)
