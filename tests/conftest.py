"""Shared test fixtures for Dreistrom."""

from datetime import date
from decimal import Decimal

import pytest

from dreistrom.clock import FixedClock
from dreistrom.config import EngineSettings
from dreistrom.db.repository import LedgerRepository
from dreistrom.db.schema import create_schema
from dreistrom.events import EventBus
from dreistrom.models.assets import DepreciationAsset
from dreistrom.models.entries import AllocationRule, IncomeEntry
from dreistrom.models.enums import IncomeStream


class FakeLedger:
    """In-memory RevenueAggregator / IncomeEntrySource keyed by stream."""

    def __init__(self, revenue: dict | None = None, expenses: dict | None = None):
        self.revenue = {k: Decimal(str(v)) for k, v in (revenue or {}).items()}
        self.expenses = {k: Decimal(str(v)) for k, v in (expenses or {}).items()}
        self.entries: dict[int, IncomeEntry] = {}
        self.calls: list[tuple] = []

    def add_entry(self, entry: IncomeEntry) -> IncomeEntry:
        entry = entry.model_copy(update={"id": len(self.entries) + 1})
        self.entries[entry.id] = entry
        return entry

    def get_income_entry(self, entry_id: int) -> IncomeEntry | None:
        return self.entries.get(entry_id)

    def sum_revenue_cents(self, user_id, stream, start, end) -> int:
        self.calls.append(("revenue", user_id, stream, start, end))
        return int(self.revenue.get(stream, Decimal("0")) * 100)

    def sum_expense_cents(self, user_id, stream, start, end) -> int:
        self.calls.append(("expense", user_id, stream, start, end))
        return int(self.expenses.get(stream, Decimal("0")) * 100)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(date(2026, 7, 1))


@pytest.fixture
def settings() -> EngineSettings:
    return EngineSettings()


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def conn():
    connection = create_schema(":memory:")
    yield connection
    connection.close()


@pytest.fixture
def repo(conn) -> LedgerRepository:
    return LedgerRepository(conn)


@pytest.fixture
def laptop() -> DepreciationAsset:
    return DepreciationAsset(
        id=1,
        user_id=1,
        name="Laptop",
        acquisition_date=date(2026, 1, 15),
        net_cost=Decimal("1200.00"),
        useful_life_months=36,
        allocation=AllocationRule(freiberuf_pct=50, gewerbe_pct=30, personal_pct=20),
    )


@pytest.fixture
def mid_year_asset() -> DepreciationAsset:
    return DepreciationAsset(
        id=2,
        user_id=1,
        name="Monitor",
        acquisition_date=date(2024, 7, 10),
        net_cost=Decimal("1000.00"),
        useful_life_months=36,
    )


@pytest.fixture
def make_income():
    def _make(stream: IncomeStream, amount: str, on: date = date(2026, 3, 1), user_id: int = 1) -> IncomeEntry:
        return IncomeEntry(user_id=user_id, stream=stream, amount=Decimal(amount), entry_date=on)

    return _make


@pytest.fixture
def make_ledger():
    return FakeLedger
