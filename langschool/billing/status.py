# -*- coding: utf-8 -*-
"""
Invoice lifecycle.

    draft --issue--> issued --covered by payments--> paid
    paid --payment reversed--> issued
    draft | issued --cancel--> canceled

Drafts can also be deleted outright; issued, paid and canceled invoices cannot.
"""

import enum

from langschool.errors import InvalidTransition


class InvoiceStatus(str, enum.Enum):
    DRAFT = "draft"
    ISSUED = "issued"
    PAID = "paid"
    CANCELED = "canceled"

    @property
    def counts_as_debt(self):
        return self in (InvoiceStatus.ISSUED, InvoiceStatus.PAID)

    def can_transition(self, target):
        return InvoiceStatus(target) in _TRANSITIONS[self]

    def transition(self, target):
        target = InvoiceStatus(target)
        if not self.can_transition(target):
            raise InvalidTransition(f"invoice cannot go from {self.value} to {target.value}")
        return target


_TRANSITIONS = {
    InvoiceStatus.DRAFT: {InvoiceStatus.ISSUED, InvoiceStatus.CANCELED},
    InvoiceStatus.ISSUED: {InvoiceStatus.PAID, InvoiceStatus.CANCELED},
    InvoiceStatus.PAID: {InvoiceStatus.ISSUED},
    InvoiceStatus.CANCELED: set(),
}
