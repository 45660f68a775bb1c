"""Tests for the individual threshold rules."""

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from dreistrom.config import EngineSettings
from dreistrom.engines.projector import AnnualProjector
from dreistrom.models.enums import IncomeStream, ThresholdType
from dreistrom.monitoring import rules
from dreistrom.monitoring.aggregator import YearAggregates
from dreistrom.monitoring.rules import RuleContext

F = IncomeStream.FREIBERUF
G = IncomeStream.GEWERBE
E = IncomeStream.EMPLOYMENT


@pytest.fixture
def context(clock, make_ledger):
    def _make(revenue=None, expenses=None, year=2026, trigger=None, settings=None):
        ledger = make_ledger(revenue, expenses)
        return RuleContext(
            user_id=1,
            year=year,
            aggregates=YearAggregates(ledger, 1, year),
            settings=settings or EngineSettings(),
            projector=AnnualProjector(clock),
            occurred_at=datetime(2026, 7, 1, 12, tzinfo=UTC),
            trigger_stream=trigger,
        )

    return _make


class TestKleinunternehmerCurrentYear:
    def test_fires_at_warning_ratio(self, context):
        alert = rules.kleinunternehmer_current_year(context({F: 17600}))
        assert alert.type == ThresholdType.KLEINUNTERNEHMER_CURRENT_YEAR
        assert alert.ratio == Decimal("0.8000")
        assert alert.reference_amount == Decimal("17600.00")

    def test_below_warning_ratio(self, context):
        assert rules.kleinunternehmer_current_year(context({F: 17590})) is None

    def test_counts_both_self_employed_streams(self, context):
        alert = rules.kleinunternehmer_current_year(context({F: 9000, G: 9000}))
        assert alert.ratio == Decimal("0.8182")

    def test_employment_not_counted(self, context):
        assert rules.kleinunternehmer_current_year(context({E: 90000})) is None


class TestKleinunternehmerProjected:
    def test_projects_current_year(self, context):
        # 22,000 by day 182 of 365 projects to 44,120.88
        alert = rules.kleinunternehmer_projected(context({F: 22000}))
        assert alert.type == ThresholdType.KLEINUNTERNEHMER_PROJECTED
        assert alert.reference_amount == Decimal("44120.88")
        assert alert.ratio == Decimal("0.8824")

    def test_below_limit(self, context):
        assert rules.kleinunternehmer_projected(context({F: 18000})) is None

    def test_past_year_uses_actual_amount(self, context):
        alert = rules.kleinunternehmer_projected(context({F: 45000}, year=2025))
        assert alert.reference_amount == Decimal("45000.00")
        assert alert.ratio == Decimal("0.9000")

    def test_future_year_skipped(self, context):
        assert rules.kleinunternehmer_projected(context({F: 100000}, year=2027)) is None


class TestAbfaerbung:
    def test_both_conditions(self, context):
        alert = rules.abfaerbung(context({G: 25000, F: 50000}))
        assert alert.type == ThresholdType.ABFAERBUNG
        assert alert.ratio == Decimal("0.3333")
        assert alert.reference_amount == Decimal("25000.00")

    def test_amount_below_limit(self, context):
        assert rules.abfaerbung(context({G: 24000, F: 30000})) is None

    def test_ratio_below_limit(self, context):
        assert rules.abfaerbung(context({G: 30000, F: 1000000})) is None

    def test_no_self_employed_revenue(self, context):
        assert rules.abfaerbung(context({})) is None


class TestGewerbesteuerFreibetrag:
    def test_profit_above_freibetrag(self, context):
        alert = rules.gewerbesteuer_freibetrag(context({G: 40000}, {G: 10000}))
        assert alert.reference_amount == Decimal("30000.00")
        assert alert.ratio == Decimal("1.2245")

    def test_expenses_reduce_profit(self, context):
        assert rules.gewerbesteuer_freibetrag(context({G: 40000}, {G: 20000})) is None

    def test_exactly_at_freibetrag(self, context):
        assert rules.gewerbesteuer_freibetrag(context({G: 24500})) is None

    def test_loss_is_floored(self, context):
        assert rules.gewerbesteuer_freibetrag(context({G: 1000}, {G: 50000})) is None


class TestBilanzierungspflicht:
    def test_revenue_alone(self, context):
        alert = rules.bilanzierungspflicht(context({G: 850000}, {G: 800000}))
        assert alert.type == ThresholdType.BILANZIERUNG
        assert alert.ratio == Decimal("1.0625")
        assert alert.reference_amount == Decimal("850000.00")

    def test_profit_alone(self, context):
        alert = rules.bilanzierungspflicht(context({G: 200000}, {G: 100000}))
        assert alert.ratio == Decimal("1.2500")

    def test_neither(self, context):
        assert rules.bilanzierungspflicht(context({G: 100000}, {G: 30000})) is None


class TestMandatoryFiling:
    def test_side_income_above_limit(self, context):
        alert = rules.mandatory_filing(context({F: 500}, trigger=F))
        assert alert.type == ThresholdType.MANDATORY_FILING
        assert alert.ratio == Decimal("1.2195")
        assert alert.reference_amount == Decimal("500.00")

    def test_at_limit(self, context):
        assert rules.mandatory_filing(context({F: 410}, trigger=F)) is None

    def test_skipped_for_employment_mutation(self, context):
        assert rules.mandatory_filing(context({F: 500, E: 50000}, trigger=E)) is None

    def test_logged_at_info(self, context, caplog):
        with caplog.at_level("INFO", logger="dreistrom.monitoring.rules"):
            rules.mandatory_filing(context({G: 1000}, trigger=G))
        assert any(r.levelname == "INFO" and "Mandatory filing" in r.message for r in caplog.records)


class TestConfigurableLimits:
    def test_custom_warning_ratio(self, context):
        settings = EngineSettings(warning_ratio=Decimal("0.5"))
        assert rules.kleinunternehmer_current_year(context({F: 11000}, settings=settings)) is not None
