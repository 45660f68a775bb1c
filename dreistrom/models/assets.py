"""Depreciation asset (AfA) models."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from dreistrom.exceptions import AssetAlreadyDisposedError, DataValidationError
from dreistrom.models.entries import AllocationRule


class DepreciationAsset(BaseModel):
    """A capitalized purchase written off straight-line over its useful life."""

    id: int | None = None
    user_id: int
    name: str
    acquisition_date: date
    net_cost: Decimal = Field(ge=0)
    useful_life_months: int = Field(ge=1)
    disposal_date: date | None = None
    allocation: AllocationRule | None = None
    expense_entry_id: int | None = None

    @model_validator(mode="after")
    def _check_disposal(self) -> "DepreciationAsset":
        if self.disposal_date is not None and self.disposal_date < self.acquisition_date:
            raise ValueError("Disposal date cannot be before acquisition date")
        return self

    @property
    def is_disposed(self) -> bool:
        return self.disposal_date is not None

    def dispose(self, disposal_date: date) -> None:
        if self.disposal_date is not None:
            raise AssetAlreadyDisposedError(self.id, self.disposal_date)
        if disposal_date < self.acquisition_date:
            raise DataValidationError(
                "disposal_date", "Disposal date cannot be before acquisition date"
            )
        self.disposal_date = disposal_date


class DepreciationYearEntry(BaseModel):
    """One year of a depreciation schedule.

    ``disposal_write_off`` is the residual book value expensed in the disposal year.
    """

    year: int
    depreciation: Decimal
    remaining_book_value: Decimal
    disposal_write_off: Decimal = Decimal("0.00")


class StreamDepreciationSummary(BaseModel):
    freiberuf: Decimal
    gewerbe: Decimal
    personal: Decimal
    total: Decimal
