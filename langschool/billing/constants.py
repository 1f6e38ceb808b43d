# -*- coding: utf-8 -*-
"""
Fixed vocabularies shared by models, schemas and services.
"""

import enum


class CourseType(str, enum.Enum):
    GROUP = "group"
    INDIVIDUAL = "individual"


class BillingMode(str, enum.Enum):
    SUBSCRIPTION = "subscription"
    PER_LESSON = "per_lesson"


class PaymentMethod(str, enum.Enum):
    CASH = "cash"
    BANK = "bank"
