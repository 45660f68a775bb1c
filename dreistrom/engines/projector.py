"""Full-year projection of partial-year aggregates."""

import calendar
from decimal import Decimal

from dreistrom.clock import Clock
from dreistrom.exceptions import ProjectionUnavailableError
from dreistrom.money import round_money


class AnnualProjector:
    """Extrapolates a year-to-date amount to a full-year estimate.

    Uses the elapsed-day ratio of "today" from the injected clock. A fully
    elapsed year is returned unchanged; a year that has not started cannot
    be projected.
    """

    def __init__(self, clock: Clock) -> None:
        self.clock = clock

    def can_project(self, year: int) -> bool:
        return year <= self.clock.today().year

    def project(self, amount: Decimal, year: int) -> Decimal:
        today = self.clock.today()
        if year < today.year:
            return round_money(amount)
        if year > today.year:
            raise ProjectionUnavailableError(year, today)

        days_in_year = 366 if calendar.isleap(year) else 365
        day_of_year = max(today.timetuple().tm_yday, 1)
        return round_money(amount * days_in_year / day_of_year)
