"""§19 UStG status for a dashboard: both limits, both ratios, no alerts."""

import logging

from dreistrom.clock import Clock
from dreistrom.config import EngineSettings
from dreistrom.engines.projector import AnnualProjector
from dreistrom.models.reports import KleinunternehmerStatus
from dreistrom.monitoring.aggregator import RevenueAggregator, YearAggregates
from dreistrom.money import from_cents, ratio

logger = logging.getLogger(__name__)


class KleinunternehmerStatusService:
    """Reports the Kleinunternehmer position without publishing anything.

    Unlike the threshold rules this always answers, even far below the
    warning ratio. The projected figure is the year-to-date revenue
    extrapolated for the running year; past and future years use the
    revenue as recorded.
    """

    def __init__(
        self,
        aggregator: RevenueAggregator,
        clock: Clock,
        settings: EngineSettings | None = None,
    ) -> None:
        self.aggregator = aggregator
        self.projector = AnnualProjector(clock)
        self.clock = clock
        self.settings = settings or EngineSettings()

    def get_status(self, user_id: int, year: int) -> KleinunternehmerStatus:
        revenue = from_cents(YearAggregates(self.aggregator, user_id, year).self_employed_cents)

        if revenue != 0 and year == self.clock.today().year:
            projected = self.projector.project(revenue, year)
        else:
            projected = revenue

        current_limit = self.settings.kleinunternehmer_current_year_limit
        projected_limit = self.settings.kleinunternehmer_projected_year_limit
        current_ratio = ratio(revenue, current_limit)
        projected_ratio = ratio(projected, projected_limit)

        logger.debug(
            "Kleinunternehmer status: userId=%s, year=%s, revenue=%s, projected=%s",
            user_id, year, revenue, projected,
        )
        return KleinunternehmerStatus(
            year=year,
            current_revenue=revenue,
            current_year_limit=current_limit,
            current_ratio=current_ratio,
            projected_revenue=projected,
            projected_year_limit=projected_limit,
            projected_ratio=projected_ratio,
            current_exceeded=current_ratio >= 1,
            projected_exceeded=projected_ratio >= 1,
        )
