"""Statutory threshold rules.

Each rule reads what it needs from a RuleContext and returns a fired
ThresholdAlert or None. Rules do not interact and may run in any order.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from dreistrom.config import EngineSettings
from dreistrom.engines.projector import AnnualProjector
from dreistrom.models.alerts import ThresholdAlert
from dreistrom.models.enums import IncomeStream, ThresholdType
from dreistrom.monitoring.aggregator import YearAggregates
from dreistrom.money import from_cents, ratio

logger = logging.getLogger(__name__)


@dataclass
class RuleContext:
    user_id: int
    year: int
    aggregates: YearAggregates
    settings: EngineSettings
    projector: AnnualProjector
    occurred_at: datetime
    trigger_stream: IncomeStream | None = None

    def alert(self, type_: ThresholdType, value: Decimal, amount: Decimal) -> ThresholdAlert:
        return ThresholdAlert(
            type=type_,
            ratio=value,
            reference_amount=amount,
            user_id=self.user_id,
            year=self.year,
            occurred_at=self.occurred_at,
        )


Rule = Callable[[RuleContext], ThresholdAlert | None]


def kleinunternehmer_current_year(ctx: RuleContext) -> ThresholdAlert | None:
    """§19 UStG: self-employed revenue approaching the current-year limit."""
    revenue = from_cents(ctx.aggregates.self_employed_cents)
    limit = ctx.settings.kleinunternehmer_current_year_limit
    value = ratio(revenue, limit)
    if revenue == 0 or value < ctx.settings.warning_ratio:
        return None
    logger.warning(
        "§19 UStG current-year threshold: ratio=%s, revenue=%s EUR, limit=%s EUR, userId=%s, year=%s",
        value, revenue, limit, ctx.user_id, ctx.year,
    )
    return ctx.alert(ThresholdType.KLEINUNTERNEHMER_CURRENT_YEAR, value, revenue)


def kleinunternehmer_projected(ctx: RuleContext) -> ThresholdAlert | None:
    """§19 UStG: projected full-year self-employed revenue approaching the limit."""
    if not ctx.projector.can_project(ctx.year):
        return None
    revenue = from_cents(ctx.aggregates.self_employed_cents)
    if revenue == 0:
        return None
    projected = ctx.projector.project(revenue, ctx.year)
    limit = ctx.settings.kleinunternehmer_projected_year_limit
    value = ratio(projected, limit)
    if value < ctx.settings.warning_ratio:
        return None
    logger.warning(
        "§19 UStG projected threshold: ratio=%s, projected=%s EUR, limit=%s EUR, userId=%s, year=%s",
        value, projected, limit, ctx.user_id, ctx.year,
    )
    return ctx.alert(ThresholdType.KLEINUNTERNEHMER_PROJECTED, value, projected)


def abfaerbung(ctx: RuleContext) -> ThresholdAlert | None:
    """Trade income infecting freelance income: requires both the ratio and the amount."""
    gewerbe = from_cents(ctx.aggregates.gewerbe_cents)
    total = from_cents(ctx.aggregates.self_employed_cents)
    value = ratio(gewerbe, total)
    if value > ctx.settings.abfaerbung_ratio and gewerbe > ctx.settings.abfaerbung_amount:
        logger.warning(
            "Abfaerbung threshold exceeded: ratio=%s, gewerbeRevenue=%s EUR, userId=%s, year=%s",
            value, gewerbe, ctx.user_id, ctx.year,
        )
        return ctx.alert(ThresholdType.ABFAERBUNG, value, gewerbe)
    return None


def gewerbesteuer_freibetrag(ctx: RuleContext) -> ThresholdAlert | None:
    """Gewerbe profit above the §11 GewStG Freibetrag: trade tax becomes due."""
    profit = from_cents(ctx.aggregates.gewerbe_profit_cents)
    freibetrag = ctx.settings.gewerbesteuer_freibetrag
    if profit <= freibetrag:
        return None
    value = ratio(profit, freibetrag)
    logger.warning(
        "GewSt Freibetrag exceeded: profit=%s EUR, userId=%s, year=%s",
        profit, ctx.user_id, ctx.year,
    )
    return ctx.alert(ThresholdType.GEWERBESTEUER_FREIBETRAG, value, profit)


def bilanzierungspflicht(ctx: RuleContext) -> ThresholdAlert | None:
    """§141 AO: revenue OR profit above its limit requires balance-sheet accounting."""
    revenue = from_cents(ctx.aggregates.gewerbe_cents)
    profit = from_cents(ctx.aggregates.gewerbe_profit_cents)
    revenue_limit = ctx.settings.bilanzierung_revenue
    profit_limit = ctx.settings.bilanzierung_profit
    if revenue <= revenue_limit and profit <= profit_limit:
        return None
    value = max(ratio(revenue, revenue_limit), ratio(profit, profit_limit))
    logger.warning(
        "Bilanzierungspflicht triggered: revenue=%s EUR, profit=%s EUR, userId=%s, year=%s",
        revenue, profit, ctx.user_id, ctx.year,
    )
    return ctx.alert(ThresholdType.BILANZIERUNG, value, revenue)


def mandatory_filing(ctx: RuleContext) -> ThresholdAlert | None:
    """§46 Abs. 2 Nr. 1 EStG: Nebeneinkuenfte above the limit require a tax return."""
    if ctx.trigger_stream is IncomeStream.EMPLOYMENT:
        return None
    side_income = from_cents(ctx.aggregates.freiberuf_cents + ctx.aggregates.gewerbe_cents)
    threshold = ctx.settings.mandatory_filing_threshold
    if side_income <= threshold:
        return None
    value = ratio(side_income, threshold)
    logger.info(
        "Mandatory filing triggered: Nebeneinkuenfte=%s EUR > %s EUR, userId=%s, year=%s",
        side_income, threshold, ctx.user_id, ctx.year,
    )
    return ctx.alert(ThresholdType.MANDATORY_FILING, value, side_income)


DEFAULT_RULES: list[tuple[str, Rule]] = [
    ("kleinunternehmer_current_year", kleinunternehmer_current_year),
    ("kleinunternehmer_projected", kleinunternehmer_projected),
    ("abfaerbung", abfaerbung),
    ("gewerbesteuer_freibetrag", gewerbesteuer_freibetrag),
    ("bilanzierungspflicht", bilanzierungspflicht),
    ("mandatory_filing", mandatory_filing),
]
