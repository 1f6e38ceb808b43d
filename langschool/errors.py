# -*- coding: utf-8 -*-
"""
Exceptions raised by the billing core.

Services raise these; ``main.py`` turns them into HTTP responses. Anything
raised before a commit leaves the database untouched.
"""


class BillingError(Exception):
    """Base class for every domain error."""

    kind = "BillingError"

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ValidationError(BillingError):
    kind = "ValidationError"


class InvalidAmount(ValidationError):
    kind = "InvalidAmount"


class InvalidPeriod(ValidationError):
    kind = "InvalidPeriod"


class NotFound(BillingError):
    kind = "NotFound"

    def __init__(self, entity, entity_id):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class LockedPeriod(BillingError):
    kind = "LockedPeriod"

    def __init__(self, enrollment_id, year, month):
        super().__init__(
            f"attendance for enrollment {enrollment_id} in {month:02d}.{year} is locked"
        )
        self.enrollment_id = enrollment_id
        self.year = year
        self.month = month


class InvalidTransition(BillingError):
    kind = "InvalidTransition"


class NotDraft(InvalidTransition):
    kind = "NotDraft"

    def __init__(self, invoice_id, status):
        super().__init__(f"invoice {invoice_id} is not a draft (status: {status})")
        self.invoice_id = invoice_id
        self.status = status


class ReferentialConflict(BillingError):
    kind = "ReferentialConflict"

    def __init__(self, entity, entity_id, blockers):
        blockers = list(blockers)
        super().__init__(
            f"cannot delete {entity} {entity_id}: referenced by {', '.join(blockers)}"
        )
        self.blockers = blockers


class RenderFailure(BillingError):
    """The invoice is issued (and keeps its number) but the PDF could not be written."""

    kind = "RenderFailure"

    def __init__(self, invoice_id, number, reason):
        super().__init__(f"invoice {invoice_id} issued as {number}, but PDF failed: {reason}")
        self.invoice_id = invoice_id
        self.number = number
        self.reason = reason
