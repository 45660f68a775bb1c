"""Domain events raised by ledger mutations."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from dreistrom.models.enums import IncomeStream


class DomainEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    aggregate_type: str
    aggregate_id: int
    occurred_at: datetime


class IncomeEntryCreated(DomainEvent):
    aggregate_type: str = "IncomeEntry"
    stream: IncomeStream
    amount: Decimal
    entry_date: date


class IncomeEntryModified(DomainEvent):
    aggregate_type: str = "IncomeEntry"
    before_amount: Decimal
    after_amount: Decimal
    before_date: date
    after_date: date


class ExpenseEntryCreated(DomainEvent):
    aggregate_type: str = "ExpenseEntry"
    amount: Decimal
    gwg: bool
