"""Straight-line depreciation (lineare AfA, §7 Abs. 1 EStG).

German rule: depreciation starts in the month of acquisition and every
month counts in full (Monatsprinzip). Disposal stops depreciation in the
disposal month; the residual book value is written off in that year.
"""

from datetime import date
from decimal import Decimal

from dreistrom.config import EngineSettings
from dreistrom.models.assets import (
    DepreciationAsset,
    DepreciationYearEntry,
    StreamDepreciationSummary,
)
from dreistrom.models.entries import ExpenseEntry
from dreistrom.models.enums import IncomeStream
from dreistrom.money import FORMULA_PLACES, HUNDRED, ZERO, round_money


def _end_of_life(asset: DepreciationAsset) -> tuple[int, int]:
    """(year, month) of the last depreciation month when the asset is never disposed."""
    index = (
        asset.acquisition_date.year * 12
        + asset.acquisition_date.month - 1
        + asset.useful_life_months - 1
    )
    return index // 12, index % 12 + 1


class DepreciationCalculator:
    """Computes AfA per year, book values and schedules for depreciation assets."""

    def __init__(self, settings: EngineSettings | None = None) -> None:
        self.settings = settings or EngineSettings()

    def monthly_rate(self, asset: DepreciationAsset) -> Decimal:
        return (asset.net_cost / Decimal(asset.useful_life_months)).quantize(FORMULA_PLACES)

    def months_in_year(self, asset: DepreciationAsset, year: int) -> int:
        acquisition_year = asset.acquisition_date.year
        acquisition_month = asset.acquisition_date.month
        end_year, end_month = _end_of_life(asset)

        if asset.disposal_date is not None:
            disposal = asset.disposal_date
            if disposal.year < year:
                return 0
            if (disposal.year, disposal.month) < (end_year, end_month):
                end_year, end_month = disposal.year, disposal.month

        if year < acquisition_year or year > end_year:
            return 0
        if year == acquisition_year and year == end_year:
            return end_month - acquisition_month + 1
        if year == acquisition_year:
            return 13 - acquisition_month
        if year == end_year:
            return end_month
        return 12

    def compute_depreciation_for_year(self, asset: DepreciationAsset, year: int) -> Decimal:
        """Depreciation amount attributable to a calendar year."""
        months = self.months_in_year(asset, year)
        if months == 0:
            return round_money(ZERO)
        return round_money(self.monthly_rate(asset) * months)

    def compute_remaining_book_value(self, asset: DepreciationAsset, as_of: date) -> Decimal:
        """Book value after all depreciation up to and including ``as_of``'s year.

        A disposed asset has no book value from its disposal date on.
        """
        if asset.disposal_date is not None and as_of >= asset.disposal_date:
            return round_money(ZERO)

        depreciated = sum(
            (
                self.compute_depreciation_for_year(asset, year)
                for year in range(asset.acquisition_date.year, as_of.year + 1)
            ),
            ZERO,
        )
        return round_money(max(asset.net_cost - depreciated, ZERO))

    def compute_schedule(self, asset: DepreciationAsset) -> list[DepreciationYearEntry]:
        """Year-by-year depreciation and closing book value."""
        end_year, _ = _end_of_life(asset)
        disposal_year = asset.disposal_date.year if asset.disposal_date is not None else None
        if disposal_year is not None and disposal_year < end_year:
            end_year = disposal_year

        schedule: list[DepreciationYearEntry] = []
        remaining = asset.net_cost
        for year in range(asset.acquisition_date.year, end_year + 1):
            amount = self.compute_depreciation_for_year(asset, year)
            remaining = round_money(max(remaining - amount, ZERO))
            write_off = round_money(ZERO)
            if year == disposal_year:
                write_off, remaining = remaining, round_money(ZERO)
            schedule.append(
                DepreciationYearEntry(
                    year=year,
                    depreciation=amount,
                    remaining_book_value=remaining,
                    disposal_write_off=write_off,
                )
            )
        return schedule

    def dispose(self, asset: DepreciationAsset, disposal_date: date) -> DepreciationAsset:
        """Record the disposal of an asset. Depreciation stops in the disposal month."""
        asset.dispose(disposal_date)
        return asset

    # --- GWG ---

    def is_gwg(self, net_amount: Decimal) -> bool:
        """Geringwertiges Wirtschaftsgut: net cost up to the GWG threshold is expensed at once."""
        return net_amount <= self.settings.gwg_threshold

    def capitalize_expense(
        self, expense: ExpenseEntry, useful_life_months: int | None = None
    ) -> DepreciationAsset | None:
        """Turn a non-GWG expense into a depreciation asset.

        Returns None when the expense is a GWG and is written off immediately.
        """
        if self.is_gwg(expense.amount):
            return None
        return DepreciationAsset(
            user_id=expense.user_id,
            name=expense.description or expense.category,
            acquisition_date=expense.entry_date,
            net_cost=expense.amount,
            useful_life_months=useful_life_months or self.settings.default_useful_life_months,
            allocation=expense.allocation,
            expense_entry_id=expense.id,
        )

    # --- Stream totals ---

    def compute_stream_totals_for_year(
        self, assets: list[DepreciationAsset], year: int
    ) -> StreamDepreciationSummary:
        """Split a year's depreciation across streams by each asset's allocation.

        Assets without an allocation count toward the total only.
        """
        freiberuf = gewerbe = personal = total = ZERO
        for asset in assets:
            amount = self.compute_depreciation_for_year(asset, year)
            if amount == 0:
                continue
            total += amount
            rule = asset.allocation
            if rule is None:
                continue
            freiberuf += round_money(amount * rule.pct_for(IncomeStream.FREIBERUF) / HUNDRED)
            gewerbe += round_money(amount * rule.pct_for(IncomeStream.GEWERBE) / HUNDRED)
            personal += round_money(amount * rule.personal_pct / HUNDRED)

        return StreamDepreciationSummary(
            freiberuf=round_money(freiberuf),
            gewerbe=round_money(gewerbe),
            personal=round_money(personal),
            total=round_money(total),
        )


_calculator = DepreciationCalculator()


def compute_depreciation_for_year(asset: DepreciationAsset, year: int) -> Decimal:
    return _calculator.compute_depreciation_for_year(asset, year)


def compute_schedule(asset: DepreciationAsset) -> list[DepreciationYearEntry]:
    return _calculator.compute_schedule(asset)
