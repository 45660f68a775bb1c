"""Decimal helpers shared by the calculators.

Money is stored as integral cents and presented as EUR with two decimals.
Ratios carry four decimals. Both round HALF_UP.
"""

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")
RATIO_PLACES = Decimal("0.0001")
FORMULA_PLACES = Decimal("0.0000000001")  # 10 fractional digits for intermediate terms
HUNDRED = Decimal("100")
ZERO = Decimal("0")


def round_money(amount: Decimal) -> Decimal:
    """Round an EUR amount to cents."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def round_ratio(value: Decimal) -> Decimal:
    return value.quantize(RATIO_PLACES, rounding=ROUND_HALF_UP)


def ratio(numerator: Decimal, denominator: Decimal) -> Decimal:
    """Return numerator / denominator at 4 decimals, or 0 when the denominator is 0."""
    if denominator == 0:
        return round_ratio(ZERO)
    return round_ratio(numerator / denominator)


def to_cents(amount: Decimal) -> int:
    return int((amount * HUNDRED).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_cents(cents: int | None) -> Decimal:
    """Convert integral cents to EUR. ``None`` (no matching rows) reads as zero."""
    if cents is None:
        return round_money(ZERO)
    return round_money(Decimal(cents) / HUNDRED)
