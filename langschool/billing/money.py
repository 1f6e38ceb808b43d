# -*- coding: utf-8 -*-
"""
Money helpers. Every amount is a Decimal with two places.
"""

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")


def to_decimal(value):
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    # str() keeps 0.1 as 0.1 instead of the binary float expansion
    return Decimal(str(value))


def round2(value):
    """Rounds half away from zero to cents (10.455 -> 10.46, -10.455 -> -10.46)."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def line_amount(qty, unit_price, discount_pct=0):
    """amount = round2(qty * unit_price * (1 - discount_pct / 100))"""
    factor = Decimal(1) - to_decimal(discount_pct) / HUNDRED
    return round2(Decimal(int(qty)) * to_decimal(unit_price) * factor)


def sum_amounts(amounts):
    """Totals already rounded amounts; the result is rounded once more for safety."""
    total = ZERO
    for amount in amounts:
        total += round2(amount)
    return round2(total)


def clamp_discount(discount_pct):
    pct = to_decimal(discount_pct)
    if pct < 0:
        return ZERO
    if pct > HUNDRED:
        return HUNDRED
    return pct
