"""Boundary to the persistence layer: year-scoped revenue and expense sums."""

from dataclasses import dataclass, field
from datetime import date
from functools import cached_property
from typing import Protocol

from dreistrom.models.entries import IncomeEntry
from dreistrom.models.enums import IncomeStream


class RevenueAggregator(Protocol):
    """Sums amounts in cents by user, stream and inclusive date range.

    Implementations return 0 when no rows match.
    """

    def sum_revenue_cents(
        self, user_id: int, stream: IncomeStream, start: date, end: date
    ) -> int: ...

    def sum_expense_cents(
        self, user_id: int, stream: IncomeStream, start: date, end: date
    ) -> int: ...


class IncomeEntrySource(Protocol):
    def get_income_entry(self, entry_id: int) -> IncomeEntry | None: ...


@dataclass
class YearAggregates:
    """Lazily pulled sums for one (user, year).

    Each figure is fetched on first access and then reused, so a rule only
    touches the data it needs and one failing lookup does not affect rules
    that never read it.
    """

    aggregator: RevenueAggregator
    user_id: int
    year: int
    start: date = field(init=False)
    end: date = field(init=False)

    def __post_init__(self) -> None:
        self.start = date(self.year, 1, 1)
        self.end = date(self.year, 12, 31)

    def _revenue(self, stream: IncomeStream) -> int:
        return self.aggregator.sum_revenue_cents(self.user_id, stream, self.start, self.end) or 0

    def _expenses(self, stream: IncomeStream) -> int:
        return self.aggregator.sum_expense_cents(self.user_id, stream, self.start, self.end) or 0

    @cached_property
    def employment_cents(self) -> int:
        return self._revenue(IncomeStream.EMPLOYMENT)

    @cached_property
    def freiberuf_cents(self) -> int:
        return self._revenue(IncomeStream.FREIBERUF)

    @cached_property
    def gewerbe_cents(self) -> int:
        return self._revenue(IncomeStream.GEWERBE)

    @cached_property
    def freiberuf_expense_cents(self) -> int:
        return self._expenses(IncomeStream.FREIBERUF)

    @cached_property
    def gewerbe_expense_cents(self) -> int:
        return self._expenses(IncomeStream.GEWERBE)

    @property
    def self_employed_cents(self) -> int:
        return self.freiberuf_cents + self.gewerbe_cents

    @property
    def gewerbe_profit_cents(self) -> int:
        return max(self.gewerbe_cents - self.gewerbe_expense_cents, 0)
