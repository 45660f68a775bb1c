"""VAT conversion between gross, net and tax amounts.

Rates are percentages (19 for 19%). Results are rounded to cents HALF_UP.
"""

from decimal import Decimal

from dreistrom.exceptions import DataValidationError
from dreistrom.money import HUNDRED, ZERO, round_money

STANDARD_RATE = Decimal("19")
REDUCED_RATE = Decimal("7")


def _check_rate(rate: Decimal) -> None:
    if rate < 0:
        raise DataValidationError("rate", f"VAT rate must not be negative, got {rate}")


class VatConverter:
    """Pure gross/net/VAT formulas."""

    def extract_vat(self, gross: Decimal, rate: Decimal) -> Decimal:
        """VAT contained in a gross amount: ``gross * rate / (100 + rate)``."""
        _check_rate(rate)
        if gross == 0 or rate == 0:
            return round_money(ZERO)
        return round_money(gross * rate / (HUNDRED + rate))

    def net_from_gross(self, gross: Decimal, rate: Decimal) -> Decimal:
        """``gross * 100 / (100 + rate)``"""
        _check_rate(rate)
        if gross == 0:
            return round_money(ZERO)
        return round_money(gross * HUNDRED / (HUNDRED + rate))

    def gross_from_net(self, net: Decimal, rate: Decimal) -> Decimal:
        """``net * (100 + rate) / 100``"""
        _check_rate(rate)
        if net == 0:
            return round_money(ZERO)
        return round_money(net * (HUNDRED + rate) / HUNDRED)


_converter = VatConverter()


def extract_vat(gross: Decimal, rate: Decimal) -> Decimal:
    return _converter.extract_vat(gross, rate)


def net_from_gross(gross: Decimal, rate: Decimal) -> Decimal:
    return _converter.net_from_gross(gross, rate)


def gross_from_net(net: Decimal, rate: Decimal) -> Decimal:
    return _converter.gross_from_net(net, rate)
