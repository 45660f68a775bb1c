"""Tests for straight-line depreciation (AfA)."""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from dreistrom.config import EngineSettings
from dreistrom.engines.depreciation import (
    DepreciationCalculator,
    compute_depreciation_for_year,
    compute_schedule,
)
from dreistrom.exceptions import AssetAlreadyDisposedError, DataValidationError
from dreistrom.models.assets import DepreciationAsset
from dreistrom.models.entries import AllocationRule, ExpenseEntry


@pytest.fixture
def calc() -> DepreciationCalculator:
    return DepreciationCalculator()


class TestAnnualDepreciation:
    def test_full_years(self, laptop):
        assert compute_depreciation_for_year(laptop, 2026) == Decimal("400.00")
        assert compute_depreciation_for_year(laptop, 2027) == Decimal("400.00")
        assert compute_depreciation_for_year(laptop, 2028) == Decimal("400.00")

    def test_outside_useful_life(self, laptop):
        assert compute_depreciation_for_year(laptop, 2025) == Decimal("0.00")
        assert compute_depreciation_for_year(laptop, 2029) == Decimal("0.00")

    def test_acquisition_month_counts_in_full(self, mid_year_asset):
        # July to December: 6 months at 1000 / 36
        assert compute_depreciation_for_year(mid_year_asset, 2024) == Decimal("166.67")
        assert compute_depreciation_for_year(mid_year_asset, 2025) == Decimal("333.33")
        assert compute_depreciation_for_year(mid_year_asset, 2026) == Decimal("333.33")
        assert compute_depreciation_for_year(mid_year_asset, 2027) == Decimal("166.67")

    def test_total_equals_cost(self, calc, mid_year_asset):
        total = sum(calc.compute_depreciation_for_year(mid_year_asset, y) for y in range(2024, 2028))
        assert abs(total - mid_year_asset.net_cost) <= Decimal("0.02")

    def test_life_within_one_year(self, calc):
        asset = DepreciationAsset(
            user_id=1,
            name="Short",
            acquisition_date=date(2026, 3, 1),
            net_cost=Decimal("600"),
            useful_life_months=6,
        )
        assert calc.months_in_year(asset, 2026) == 6
        assert calc.compute_depreciation_for_year(asset, 2026) == Decimal("600.00")

    def test_december_acquisition(self, calc):
        asset = DepreciationAsset(
            user_id=1,
            name="Desk",
            acquisition_date=date(2025, 12, 31),
            net_cost=Decimal("1300"),
            useful_life_months=13,
        )
        assert calc.compute_depreciation_for_year(asset, 2025) == Decimal("100.00")
        assert calc.compute_depreciation_for_year(asset, 2026) == Decimal("1200.00")
        assert calc.compute_depreciation_for_year(asset, 2027) == Decimal("0.00")


class TestSchedule:
    def test_schedule(self, laptop):
        schedule = compute_schedule(laptop)
        assert [e.year for e in schedule] == [2026, 2027, 2028]
        assert [e.depreciation for e in schedule] == [Decimal("400.00")] * 3
        assert [e.remaining_book_value for e in schedule] == [
            Decimal("800.00"),
            Decimal("400.00"),
            Decimal("0.00"),
        ]

    def test_book_value_non_increasing(self, mid_year_asset):
        values = [e.remaining_book_value for e in compute_schedule(mid_year_asset)]
        assert values == sorted(values, reverse=True)
        assert values[-1] == Decimal("0.00")

    def test_disposal_year_writes_off_residual(self, calc, laptop):
        calc.dispose(laptop, date(2027, 3, 20))
        schedule = calc.compute_schedule(laptop)
        assert [e.year for e in schedule] == [2026, 2027]
        last = schedule[-1]
        assert last.depreciation == Decimal("100.00")
        assert last.remaining_book_value == Decimal("0.00")
        assert last.disposal_write_off == Decimal("700.00")


class TestBookValue:
    def test_end_of_year_book_value(self, calc, laptop):
        assert calc.compute_remaining_book_value(laptop, date(2026, 6, 30)) == Decimal("800.00")

    def test_never_negative(self, calc, laptop):
        assert calc.compute_remaining_book_value(laptop, date(2035, 1, 1)) == Decimal("0.00")

    def test_before_and_on_disposal(self, calc, laptop):
        calc.dispose(laptop, date(2027, 3, 20))
        assert calc.compute_remaining_book_value(laptop, date(2027, 3, 19)) == Decimal("700.00")
        assert calc.compute_remaining_book_value(laptop, date(2027, 3, 20)) == Decimal("0.00")


class TestDisposal:
    def test_stops_depreciation_in_disposal_month(self, calc, laptop):
        calc.dispose(laptop, date(2027, 3, 20))
        assert calc.compute_depreciation_for_year(laptop, 2027) == Decimal("100.00")
        assert calc.compute_depreciation_for_year(laptop, 2028) == Decimal("0.00")

    def test_dispose_twice(self, calc, laptop):
        calc.dispose(laptop, date(2027, 3, 20))
        with pytest.raises(AssetAlreadyDisposedError):
            calc.dispose(laptop, date(2027, 4, 1))

    def test_dispose_before_acquisition(self, calc, laptop):
        with pytest.raises(DataValidationError):
            calc.dispose(laptop, date(2025, 12, 31))

    def test_model_rejects_disposal_before_acquisition(self):
        with pytest.raises(ValidationError):
            DepreciationAsset(
                user_id=1,
                name="Bad",
                acquisition_date=date(2026, 5, 1),
                net_cost=Decimal("1000"),
                useful_life_months=12,
                disposal_date=date(2026, 4, 30),
            )


class TestGwg:
    def test_threshold_inclusive(self, calc):
        assert calc.is_gwg(Decimal("800.00"))
        assert not calc.is_gwg(Decimal("800.01"))

    def test_custom_threshold(self):
        calc = DepreciationCalculator(EngineSettings(gwg_threshold=Decimal("250")))
        assert not calc.is_gwg(Decimal("300"))

    def test_gwg_expense_is_not_capitalized(self, calc):
        expense = ExpenseEntry(
            id=5,
            user_id=1,
            amount=Decimal("499"),
            entry_date=date(2026, 2, 1),
            category="hardware",
            allocation=AllocationRule(freiberuf_pct=100),
        )
        assert calc.capitalize_expense(expense) is None

    def test_capitalize_expense(self, calc):
        allocation = AllocationRule(gewerbe_pct=100)
        expense = ExpenseEntry(
            id=7,
            user_id=1,
            amount=Decimal("1500"),
            entry_date=date(2026, 2, 1),
            category="hardware",
            allocation=allocation,
            description="Workstation",
        )
        asset = calc.capitalize_expense(expense)
        assert asset.name == "Workstation"
        assert asset.net_cost == Decimal("1500")
        assert asset.useful_life_months == 36
        assert asset.acquisition_date == date(2026, 2, 1)
        assert asset.allocation == allocation
        assert asset.expense_entry_id == 7

    def test_capitalize_with_explicit_life(self, calc):
        expense = ExpenseEntry(
            user_id=1,
            amount=Decimal("5000"),
            entry_date=date(2026, 2, 1),
            category="furniture",
            allocation=AllocationRule(freiberuf_pct=100),
        )
        assert calc.capitalize_expense(expense, useful_life_months=156).useful_life_months == 156


class TestStreamTotals:
    def test_split_by_allocation(self, calc, laptop, mid_year_asset):
        summary = calc.compute_stream_totals_for_year([laptop, mid_year_asset], 2026)
        assert summary.freiberuf == Decimal("200.00")
        assert summary.gewerbe == Decimal("120.00")
        assert summary.personal == Decimal("80.00")
        # unallocated asset counts toward the total only
        assert summary.total == Decimal("733.33")

    def test_no_assets(self, calc):
        summary = calc.compute_stream_totals_for_year([], 2026)
        assert summary.total == Decimal("0.00")
