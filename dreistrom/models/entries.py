"""Income and expense records as the engine reads them from the ledger."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from dreistrom.models.enums import IncomeStream


class AllocationRule(BaseModel):
    """Percentage split of a business expense across streams."""

    freiberuf_pct: int = Field(default=0, ge=0, le=100)
    gewerbe_pct: int = Field(default=0, ge=0, le=100)
    personal_pct: int = Field(default=0, ge=0, le=100)

    @model_validator(mode="after")
    def _check_total(self) -> "AllocationRule":
        total = self.freiberuf_pct + self.gewerbe_pct + self.personal_pct
        if total != 100:
            raise ValueError(f"Allocation percentages must sum to 100, got {total}")
        return self

    def pct_for(self, stream: IncomeStream) -> int:
        if stream is IncomeStream.FREIBERUF:
            return self.freiberuf_pct
        if stream is IncomeStream.GEWERBE:
            return self.gewerbe_pct
        return 0


class IncomeEntry(BaseModel):
    id: int | None = None
    user_id: int
    stream: IncomeStream
    amount: Decimal = Field(ge=0)
    entry_date: date
    source: str | None = None
    description: str | None = None


class ExpenseEntry(BaseModel):
    """A business expense. ``amount`` is the net amount in EUR."""

    id: int | None = None
    user_id: int
    amount: Decimal = Field(ge=0)
    entry_date: date
    category: str
    allocation: AllocationRule
    description: str | None = None
