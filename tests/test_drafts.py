from datetime import date
from decimal import Decimal

import pytest

from langschool.errors import InvalidTransition, NotDraft, ValidationError
from langschool.models.invoice import Invoice, InvoiceLine
from langschool.services import attendance, drafts, issuance, registry


@pytest.fixture
def anna(make_student, make_course, make_enrollment):
    course = make_course(lesson_price="10")
    return make_enrollment(make_student("Anna"), course)


def _invoices(db, student_id):
    return db.query(Invoice).filter_by(student_id=student_id, year=2024, month=3).all()


def test_generate_per_lesson_draft(db, anna):
    attendance.set_count(db, anna.id, 2024, 3, 4)

    result = drafts.generate_drafts(db, 2024, 3)
    assert (result.created, result.updated) == (1, 0)

    invoice, = _invoices(db, anna.student_id)
    assert invoice.status == "draft"
    assert invoice.number is None
    line, = invoice.lines
    assert (line.qty, line.unit_price, line.amount) == (4, Decimal("10.00"), Decimal("40.00"))
    assert line.description == "Lessons 03.2024, English B1"
    assert invoice.total == Decimal("40.00")


def test_generation_is_idempotent(db, anna):
    attendance.set_count(db, anna.id, 2024, 3, 4)
    drafts.generate_drafts(db, 2024, 3)

    second = drafts.generate_drafts(db, 2024, 3)
    assert (second.created, second.updated) == (0, 1)
    invoice, = _invoices(db, anna.student_id)
    assert invoice.total == Decimal("40.00")
    assert db.query(InvoiceLine).count() == 1


def test_regeneration_overwrites_draft(db, anna):
    attendance.set_count(db, anna.id, 2024, 3, 4)
    drafts.generate_drafts(db, 2024, 3)
    attendance.set_count(db, anna.id, 2024, 3, 6)

    drafts.generate_drafts(db, 2024, 3)
    invoice, = _invoices(db, anna.student_id)
    db.refresh(invoice)
    assert [line.qty for line in invoice.lines] == [6]
    assert invoice.total == Decimal("60.00")


def test_skip_accounting_no_lines(db, anna):
    result = drafts.generate_drafts(db, 2024, 3)
    assert result.skipped_no_lines == 1
    assert result.created == 0
    assert _invoices(db, anna.student_id) == []


def test_stale_draft_removed_when_nothing_to_bill(db, anna):
    attendance.set_count(db, anna.id, 2024, 3, 2)
    drafts.generate_drafts(db, 2024, 3)
    attendance.set_count(db, anna.id, 2024, 3, 0)

    result = drafts.generate_drafts(db, 2024, 3)
    assert result.skipped_no_lines == 1
    assert _invoices(db, anna.student_id) == []


def test_issued_invoice_is_never_touched(db, anna, renderer):
    attendance.set_count(db, anna.id, 2024, 3, 4)
    drafts.generate_drafts(db, 2024, 3)
    invoice, = _invoices(db, anna.student_id)
    issuance.issue(db, invoice.id, renderer)
    attendance.set_count(db, anna.id, 2024, 3, 9)

    result = drafts.generate_drafts(db, 2024, 3)
    assert result.skipped_has_invoice == 1
    invoice, = _invoices(db, anna.student_id)
    assert invoice.total == Decimal("40.00")


def test_subscription_and_discount(db, make_student, make_course, make_enrollment):
    student = make_student("Clara")
    make_enrollment(student, make_course(name="Conversation", subscription_price="80"),
                    billing_mode="subscription", discount_pct="12.5")
    make_enrollment(student, make_course(name="Free club", subscription_price="0"), billing_mode="subscription")

    drafts.generate_drafts(db, 2024, 3)
    invoice, = _invoices(db, student.id)
    line, = invoice.lines
    assert line.description == "Subscription 03.2024, Conversation"
    assert (line.qty, line.discount_pct, line.amount) == (1, Decimal("12.50"), Decimal("70.00"))


def test_one_invoice_per_student_many_lines(db, make_student, make_course, make_enrollment):
    student = make_student("Dan")
    lessons = make_enrollment(student, make_course(name="Grammar", lesson_price="12.50"), discount_pct=10)
    make_enrollment(student, make_course(name="Club", subscription_price="30"), billing_mode="subscription")
    attendance.set_count(db, lessons.id, 2024, 3, 3)

    drafts.generate_drafts(db, 2024, 3)
    invoice, = _invoices(db, student.id)
    assert sorted(line.amount for line in invoice.lines) == [Decimal("30.00"), Decimal("33.75")]
    assert invoice.total == Decimal("63.75")


def test_enrollment_window_and_inactive_students(db, make_student, make_course, make_enrollment):
    course = make_course(subscription_price="50")
    later = make_enrollment(make_student("Later"), course, billing_mode="subscription",
                            start_date=date(2024, 4, 1))
    mid_month = make_enrollment(make_student("Mid"), course, billing_mode="subscription",
                                start_date=date(2024, 3, 20))
    inactive = make_enrollment(make_student("Inactive"), course, billing_mode="subscription")
    registry.set_student_active(db, inactive.student_id, False)

    result = drafts.generate_drafts(db, 2024, 3)
    assert result.created == 1
    assert _invoices(db, later.student_id) == []
    assert len(_invoices(db, mid_month.student_id)) == 1
    assert _invoices(db, inactive.student_id) == []


def test_draft_dropped_when_student_deactivated(db, anna, renderer):
    attendance.set_count(db, anna.id, 2024, 3, 4)
    drafts.generate_drafts(db, 2024, 3)
    registry.set_student_active(db, anna.student_id, False)

    result = drafts.generate_drafts(db, 2024, 3)
    assert (result.created, result.updated, result.skipped_no_lines) == (0, 0, 1)
    assert _invoices(db, anna.student_id) == []
    assert issuance.issue_all(db, 2024, 3, renderer).numbers == []


def test_draft_dropped_when_enrollment_ended_earlier(db, anna):
    attendance.set_count(db, anna.id, 2024, 3, 4)
    drafts.generate_drafts(db, 2024, 3)
    registry.update_enrollment(db, anna.id, end_date=date(2024, 2, 29))

    result = drafts.generate_drafts(db, 2024, 3)
    assert result.skipped_no_lines == 1
    assert _invoices(db, anna.student_id) == []


def test_price_override_applies_in_its_window(db, anna):
    registry.add_price_override(db, anna.id, valid_from=date(2024, 3, 1), valid_to=date(2024, 3, 31),
                                lesson_price=Decimal("8"))
    attendance.set_count(db, anna.id, 2024, 3, 4)
    attendance.set_count(db, anna.id, 2024, 4, 4)

    drafts.generate_drafts(db, 2024, 3)
    drafts.generate_drafts(db, 2024, 4)
    march, = _invoices(db, anna.student_id)
    april = db.query(Invoice).filter_by(student_id=anna.student_id, month=4).one()
    assert march.total == Decimal("32.00")
    assert april.total == Decimal("40.00")


def test_list_invoices_filters(db, anna):
    attendance.set_count(db, anna.id, 2024, 3, 1)
    drafts.generate_drafts(db, 2024, 3)

    assert len(drafts.list_invoices(db, 2024, 3)) == 1
    assert drafts.list_invoices(db, 2024, 3, "issued") == []
    assert len(drafts.list_invoices(db, 2024, 3, "all")) == 1
    with pytest.raises(ValidationError):
        drafts.list_invoices(db, 2024, 3, "unpaid")


def test_delete_draft_only(db, anna, renderer):
    attendance.set_count(db, anna.id, 2024, 3, 1)
    drafts.generate_drafts(db, 2024, 3)
    invoice, = _invoices(db, anna.student_id)
    issuance.issue(db, invoice.id, renderer)

    with pytest.raises(NotDraft):
        drafts.delete_draft(db, invoice.id)


def test_canceled_draft_does_not_block(db, anna):
    attendance.set_count(db, anna.id, 2024, 3, 1)
    drafts.generate_drafts(db, 2024, 3)
    invoice, = _invoices(db, anna.student_id)
    drafts.cancel_invoice(db, invoice.id)

    result = drafts.generate_drafts(db, 2024, 3)
    assert result.created == 1
    assert sorted(i.status for i in _invoices(db, anna.student_id)) == ["canceled", "draft"]


def test_canceled_issued_invoice_blocks_until_reopened(db, anna, renderer):
    attendance.set_count(db, anna.id, 2024, 3, 1)
    drafts.generate_drafts(db, 2024, 3)
    invoice, = _invoices(db, anna.student_id)
    issuance.issue(db, invoice.id, renderer)
    drafts.cancel_invoice(db, invoice.id)

    assert drafts.generate_drafts(db, 2024, 3).skipped_has_invoice == 1
    with pytest.raises(InvalidTransition):
        drafts.cancel_invoice(db, invoice.id)

    drafts.reopen_invoice(db, invoice.id)
    assert drafts.generate_drafts(db, 2024, 3).created == 1
