"""Cash planning for the self-employed streams.

TaxReserveCalculator suggests a monthly transfer to a tax reserve account;
PrepaymentChecker flags when the quarterly Vorauszahlungen (§37 EStG) no
longer match the income actually being earned.
"""

import logging
from decimal import Decimal

from dreistrom.clock import Clock
from dreistrom.config import EngineSettings
from dreistrom.engines.projector import AnnualProjector
from dreistrom.exceptions import DataValidationError
from dreistrom.models.reports import PrepaymentAdjustment, TaxReserveRecommendation
from dreistrom.monitoring.aggregator import RevenueAggregator, YearAggregates
from dreistrom.money import HUNDRED, ZERO, from_cents, round_money

logger = logging.getLogger(__name__)

QUARTERS = Decimal("4")


class _Projecting:
    def __init__(
        self,
        aggregator: RevenueAggregator,
        clock: Clock,
        settings: EngineSettings | None = None,
    ) -> None:
        self.aggregator = aggregator
        self.clock = clock
        self.projector = AnnualProjector(clock)
        self.settings = settings or EngineSettings()

    def _full_year(self, amount: Decimal, year: int) -> Decimal:
        # a year that has not started yet has nothing to extrapolate from
        if not self.projector.can_project(year):
            return round_money(amount)
        return self.projector.project(amount, year)


class TaxReserveCalculator(_Projecting):
    def calculate(
        self,
        user_id: int,
        year: int,
        already_reserved: Decimal = Decimal("0"),
        rate: Decimal | None = None,
    ) -> TaxReserveRecommendation:
        """Monthly reserve transfer for the rest of ``year``.

        The reserve is ``rate`` percent of the projected net self-employed
        profit (revenue minus Freiberuf and Gewerbe expenses, floored at
        zero). What is already set aside is subtracted and the remainder is
        spread over the months left, counting the current month.
        """
        if already_reserved < 0:
            raise DataValidationError("already_reserved", "must not be negative")
        rate = self.settings.tax_reserve_rate if rate is None else rate
        if not ZERO <= rate <= HUNDRED:
            raise DataValidationError("rate", f"reserve rate must be within 0..100, got {rate}")

        aggregates = YearAggregates(self.aggregator, user_id, year)
        profit_cents = (
            aggregates.self_employed_cents
            - aggregates.freiberuf_expense_cents
            - aggregates.gewerbe_expense_cents
        )
        net_profit = from_cents(max(profit_cents, 0))

        annual = round_money(self._full_year(net_profit, year) * rate / HUNDRED)
        remaining = max(round_money(annual - already_reserved), round_money(ZERO))
        months = self.months_remaining(year)
        monthly = round_money(remaining / months) if months else round_money(ZERO)

        return TaxReserveRecommendation(
            year=year,
            net_profit=net_profit,
            reserve_rate=rate,
            monthly_reserve=monthly,
            annual_reserve=annual,
            already_reserved=round_money(already_reserved),
            remaining=remaining,
            months_remaining=months,
        )

    def months_remaining(self, year: int) -> int:
        today = self.clock.today()
        if year < today.year:
            return 0
        if year > today.year:
            return 12
        return 12 - today.month + 1


class PrepaymentChecker(_Projecting):
    def check_deviation(
        self, user_id: int, year: int, assessment_basis: Decimal
    ) -> PrepaymentAdjustment:
        """Compare projected self-employed income with the prepayment basis.

        An adjustment is recommended when the deviation exceeds
        ``prepayment_deviation_percent`` of the basis. Without a basis or
        without any recorded income there is nothing to compare.
        """
        if assessment_basis < 0:
            raise DataValidationError("assessment_basis", "must not be negative")
        if assessment_basis == 0:
            return PrepaymentAdjustment.none()

        revenue_cents = YearAggregates(self.aggregator, user_id, year).self_employed_cents
        if revenue_cents == 0:
            return PrepaymentAdjustment.none()

        projected = self._full_year(from_cents(revenue_cents), year)
        deviation = round_money(abs(projected - assessment_basis) * HUNDRED / assessment_basis)
        recommended = deviation > self.settings.prepayment_deviation_percent
        if recommended:
            logger.info(
                "Vorauszahlung adjustment recommended: userId=%s, year=%s, deviation=%s%%",
                user_id, year, deviation,
            )

        return PrepaymentAdjustment(
            recommended=recommended,
            projected_income=projected,
            assessment_basis=round_money(assessment_basis),
            deviation_percent=deviation,
            suggested_quarterly=round_money(projected / QUARTERS) if recommended else round_money(ZERO),
        )
