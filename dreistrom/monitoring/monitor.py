"""Threshold monitor: re-evaluates statutory thresholds on income mutations.

Evaluation is best-effort. Every rule runs in its own failure boundary and
the monitor as a whole never raises into the mutation that triggered it.
"""

import logging

from dreistrom.clock import Clock
from dreistrom.config import EngineSettings
from dreistrom.engines.projector import AnnualProjector
from dreistrom.events import EventBus
from dreistrom.models.alerts import ThresholdAlert
from dreistrom.models.enums import IncomeStream
from dreistrom.models.events import IncomeEntryCreated, IncomeEntryModified
from dreistrom.monitoring.aggregator import IncomeEntrySource, RevenueAggregator, YearAggregates
from dreistrom.monitoring.rules import DEFAULT_RULES, Rule, RuleContext

logger = logging.getLogger(__name__)


class ThresholdMonitor:
    """Subscribes to income events and publishes ThresholdAlerts."""

    def __init__(
        self,
        entries: IncomeEntrySource,
        aggregator: RevenueAggregator,
        bus: EventBus,
        clock: Clock,
        settings: EngineSettings | None = None,
        rules: list[tuple[str, Rule]] | None = None,
    ) -> None:
        self.entries = entries
        self.aggregator = aggregator
        self.bus = bus
        self.clock = clock
        self.settings = settings or EngineSettings()
        self.projector = AnnualProjector(clock)
        self.rules = list(DEFAULT_RULES) if rules is None else rules

    def register(self) -> None:
        self.bus.subscribe(IncomeEntryCreated, self.on_income_created)
        self.bus.subscribe(IncomeEntryModified, self.on_income_modified)

    def on_income_created(self, event: IncomeEntryCreated) -> None:
        self.handle(event.aggregate_id)

    def on_income_modified(self, event: IncomeEntryModified) -> None:
        self.handle(event.aggregate_id)

    def handle(self, entry_id: int) -> list[ThresholdAlert]:
        """Evaluate thresholds for the user and year of a mutated entry and publish alerts."""
        try:
            entry = self.entries.get_income_entry(entry_id)
            if entry is None:
                logger.debug("Income entry %s not found, skipping threshold evaluation", entry_id)
                return []
            alerts = self.evaluate(entry.user_id, entry.entry_date.year, entry.stream)
        except Exception:
            logger.exception("Threshold evaluation failed for income entry %s", entry_id)
            return []
        for alert in alerts:
            try:
                self.bus.publish(alert)
            except Exception:
                logger.exception("Publishing %s alert failed for income entry %s", alert.type.value, entry_id)
        return alerts

    def evaluate(
        self,
        user_id: int,
        year: int,
        trigger_stream: IncomeStream | None = None,
    ) -> list[ThresholdAlert]:
        """Run every rule for one (user, year) without publishing."""
        ctx = RuleContext(
            user_id=user_id,
            year=year,
            aggregates=YearAggregates(self.aggregator, user_id, year),
            settings=self.settings,
            projector=self.projector,
            occurred_at=self.clock.now(),
            trigger_stream=trigger_stream,
        )
        alerts: list[ThresholdAlert] = []
        for name, rule in self.rules:
            try:
                alert = rule(ctx)
            except Exception:
                logger.exception(
                    "Threshold rule %s failed: userId=%s, year=%s", name, user_id, year
                )
                continue
            if alert is not None:
                alerts.append(alert)
        return alerts
