"""Ledger unit of work.

Every mutation is persisted and its domain event published inside the same
SQLite transaction. Threshold evaluation runs synchronously as a subscriber
of those events and never fails the mutation.
"""

import logging
from datetime import date
from decimal import Decimal

from dreistrom.clock import Clock
from dreistrom.config import EngineSettings
from dreistrom.db.repository import LedgerRepository
from dreistrom.engines.depreciation import DepreciationCalculator
from dreistrom.events import EventBus
from dreistrom.exceptions import RecordNotFoundError
from dreistrom.models.assets import DepreciationAsset
from dreistrom.models.entries import ExpenseEntry, IncomeEntry
from dreistrom.models.events import ExpenseEntryCreated, IncomeEntryCreated, IncomeEntryModified

logger = logging.getLogger(__name__)


class Bookkeeper:
    """Records income, expenses and assets and raises the matching events."""

    def __init__(
        self,
        repo: LedgerRepository,
        bus: EventBus,
        clock: Clock,
        settings: EngineSettings | None = None,
    ) -> None:
        self.repo = repo
        self.bus = bus
        self.clock = clock
        self.settings = settings or EngineSettings()
        self.depreciation = DepreciationCalculator(self.settings)

    def record_income(self, entry: IncomeEntry) -> IncomeEntry:
        with self.repo.conn:
            entry_id = self.repo.save_income(entry)
            saved = entry.model_copy(update={"id": entry_id})
            self.bus.publish(
                IncomeEntryCreated(
                    aggregate_id=entry_id,
                    occurred_at=self.clock.now(),
                    stream=saved.stream,
                    amount=saved.amount,
                    entry_date=saved.entry_date,
                )
            )
        logger.info(
            "Recorded %s income %s EUR on %s (id=%s, userId=%s)",
            saved.stream.value, saved.amount, saved.entry_date, entry_id, saved.user_id,
        )
        return saved

    def modify_income(
        self,
        entry_id: int,
        amount: Decimal | None = None,
        entry_date: date | None = None,
    ) -> IncomeEntry:
        """Change the amount and/or date of an existing income entry."""
        with self.repo.conn:
            before = self.repo.get_income_entry(entry_id)
            if before is None:
                raise RecordNotFoundError("IncomeEntry", entry_id)
            changes = {}
            if amount is not None:
                changes["amount"] = amount
            if entry_date is not None:
                changes["entry_date"] = entry_date
            after = IncomeEntry.model_validate(before.model_dump() | changes)
            self.repo.update_income(after)
            self.bus.publish(
                IncomeEntryModified(
                    aggregate_id=entry_id,
                    occurred_at=self.clock.now(),
                    before_amount=before.amount,
                    after_amount=after.amount,
                    before_date=before.entry_date,
                    after_date=after.entry_date,
                )
            )
        return after

    def record_expense(
        self, expense: ExpenseEntry, useful_life_months: int | None = None
    ) -> tuple[ExpenseEntry, DepreciationAsset | None]:
        """Record an expense; anything above the GWG threshold becomes a depreciation asset."""
        gwg = self.depreciation.is_gwg(expense.amount)
        asset = None
        with self.repo.conn:
            expense_id = self.repo.save_expense(expense, capitalized=not gwg)
            saved = expense.model_copy(update={"id": expense_id})
            if not gwg:
                asset = self.depreciation.capitalize_expense(saved, useful_life_months)
                asset.id = self.repo.save_asset(asset)
                logger.info(
                    "Capitalized expense %s as asset %s over %s months",
                    expense_id, asset.id, asset.useful_life_months,
                )
            self.bus.publish(
                ExpenseEntryCreated(
                    aggregate_id=expense_id,
                    occurred_at=self.clock.now(),
                    amount=saved.amount,
                    gwg=gwg,
                )
            )
        return saved, asset

    def dispose_asset(self, asset_id: int, disposal_date: date) -> DepreciationAsset:
        with self.repo.conn:
            asset = self.repo.get_asset(asset_id)
            self.depreciation.dispose(asset, disposal_date)
            self.repo.update_asset_disposal(asset_id, disposal_date)
        return asset
