"""Data access layer for the Dreistrom ledger.

Amounts are stored as integral cents. Methods never commit: the caller owns
the transaction (see ``dreistrom.bookkeeping.Bookkeeper``).
"""

import sqlite3
from datetime import date

from dreistrom.exceptions import DataValidationError, RecordNotFoundError
from dreistrom.models.assets import DepreciationAsset
from dreistrom.models.entries import AllocationRule, ExpenseEntry, IncomeEntry
from dreistrom.models.enums import IncomeStream
from dreistrom.money import from_cents, to_cents

_PCT_COLUMNS = {
    IncomeStream.FREIBERUF: "freiberuf_pct",
    IncomeStream.GEWERBE: "gewerbe_pct",
}


def _rows(cursor: sqlite3.Cursor) -> list[dict]:
    columns = [desc[0] for desc in cursor.description]
    return [dict(zip(columns, row)) for row in cursor.fetchall()]


def _allocation(record: dict) -> AllocationRule | None:
    if record.get("freiberuf_pct") is None:
        return None
    return AllocationRule(
        freiberuf_pct=record["freiberuf_pct"],
        gewerbe_pct=record["gewerbe_pct"],
        personal_pct=record["personal_pct"],
    )


class LedgerRepository:
    """Persistence for income, expense and asset records.

    Also serves as the RevenueAggregator and IncomeEntrySource the
    threshold monitor reads from.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    # --- Income entries ---

    def save_income(self, entry: IncomeEntry) -> int:
        """Insert an income entry. Returns the new ID."""
        cursor = self.conn.execute(
            """INSERT INTO income_entries
               (user_id, stream, amount_cents, entry_date, source, description)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (
                entry.user_id,
                entry.stream.value,
                to_cents(entry.amount),
                entry.entry_date.isoformat(),
                entry.source,
                entry.description,
            ),
        )
        return cursor.lastrowid

    def update_income(self, entry: IncomeEntry) -> None:
        if entry.id is None:
            raise DataValidationError("id", "Cannot update an income entry without an ID")
        cursor = self.conn.execute(
            """UPDATE income_entries
               SET stream = ?, amount_cents = ?, entry_date = ?, source = ?, description = ?
               WHERE id = ?""",
            (
                entry.stream.value,
                to_cents(entry.amount),
                entry.entry_date.isoformat(),
                entry.source,
                entry.description,
                entry.id,
            ),
        )
        if cursor.rowcount == 0:
            raise RecordNotFoundError("IncomeEntry", entry.id)

    def get_income_entry(self, entry_id: int) -> IncomeEntry | None:
        cursor = self.conn.execute("SELECT * FROM income_entries WHERE id = ?", (entry_id,))
        rows = _rows(cursor)
        if not rows:
            return None
        record = rows[0]
        return IncomeEntry(
            id=record["id"],
            user_id=record["user_id"],
            stream=IncomeStream(record["stream"]),
            amount=from_cents(record["amount_cents"]),
            entry_date=date.fromisoformat(record["entry_date"]),
            source=record["source"],
            description=record["description"],
        )

    def get_income_entries(self, user_id: int, year: int) -> list[IncomeEntry]:
        cursor = self.conn.execute(
            """SELECT id FROM income_entries
               WHERE user_id = ? AND entry_date BETWEEN ? AND ?
               ORDER BY entry_date, id""",
            (user_id, date(year, 1, 1).isoformat(), date(year, 12, 31).isoformat()),
        )
        return [self.get_income_entry(row[0]) for row in cursor.fetchall()]

    # --- Aggregates ---

    def sum_revenue_cents(
        self, user_id: int, stream: IncomeStream, start: date, end: date
    ) -> int:
        """Sum income in cents for a stream over an inclusive date range."""
        row = self.conn.execute(
            """SELECT COALESCE(SUM(amount_cents), 0) FROM income_entries
               WHERE user_id = ? AND stream = ? AND entry_date BETWEEN ? AND ?""",
            (user_id, stream.value, start.isoformat(), end.isoformat()),
        ).fetchone()
        return int(row[0])

    def sum_expense_cents(
        self, user_id: int, stream: IncomeStream, start: date, end: date
    ) -> int:
        """Sum the stream's allocated share of expenses in cents.

        Capitalized expenses are excluded; they reach the books through AfA.
        """
        column = _PCT_COLUMNS.get(stream)
        if column is None:
            raise DataValidationError("stream", f"Expenses are not allocated to {stream.value}")
        row = self.conn.execute(
            f"""SELECT COALESCE(SUM(amount_cents * {column}), 0) FROM expense_entries
                WHERE user_id = ? AND capitalized = 0 AND entry_date BETWEEN ? AND ?""",
            (user_id, start.isoformat(), end.isoformat()),
        ).fetchone()
        # cent-percent units, round half up
        return (int(row[0]) + 50) // 100

    # --- Expense entries ---

    def save_expense(self, expense: ExpenseEntry, capitalized: bool = False) -> int:
        """Insert an expense entry. Returns the new ID."""
        cursor = self.conn.execute(
            """INSERT INTO expense_entries
               (user_id, amount_cents, entry_date, category,
                freiberuf_pct, gewerbe_pct, personal_pct, capitalized, description)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                expense.user_id,
                to_cents(expense.amount),
                expense.entry_date.isoformat(),
                expense.category,
                expense.allocation.freiberuf_pct,
                expense.allocation.gewerbe_pct,
                expense.allocation.personal_pct,
                int(capitalized),
                expense.description,
            ),
        )
        return cursor.lastrowid

    def get_expense(self, expense_id: int) -> ExpenseEntry | None:
        cursor = self.conn.execute("SELECT * FROM expense_entries WHERE id = ?", (expense_id,))
        rows = _rows(cursor)
        if not rows:
            return None
        record = rows[0]
        return ExpenseEntry(
            id=record["id"],
            user_id=record["user_id"],
            amount=from_cents(record["amount_cents"]),
            entry_date=date.fromisoformat(record["entry_date"]),
            category=record["category"],
            allocation=_allocation(record),
            description=record["description"],
        )

    # --- Depreciation assets ---

    def save_asset(self, asset: DepreciationAsset) -> int:
        """Insert a depreciation asset. Returns the new ID."""
        allocation = asset.allocation
        cursor = self.conn.execute(
            """INSERT INTO depreciation_assets
               (user_id, name, acquisition_date, net_cost_cents, useful_life_months,
                disposal_date, freiberuf_pct, gewerbe_pct, personal_pct, expense_entry_id)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                asset.user_id,
                asset.name,
                asset.acquisition_date.isoformat(),
                to_cents(asset.net_cost),
                asset.useful_life_months,
                asset.disposal_date.isoformat() if asset.disposal_date else None,
                allocation.freiberuf_pct if allocation else None,
                allocation.gewerbe_pct if allocation else None,
                allocation.personal_pct if allocation else None,
                asset.expense_entry_id,
            ),
        )
        return cursor.lastrowid

    def _asset_from_record(self, record: dict) -> DepreciationAsset:
        return DepreciationAsset(
            id=record["id"],
            user_id=record["user_id"],
            name=record["name"],
            acquisition_date=date.fromisoformat(record["acquisition_date"]),
            net_cost=from_cents(record["net_cost_cents"]),
            useful_life_months=record["useful_life_months"],
            disposal_date=(
                date.fromisoformat(record["disposal_date"]) if record["disposal_date"] else None
            ),
            allocation=_allocation(record),
            expense_entry_id=record["expense_entry_id"],
        )

    def get_asset(self, asset_id: int) -> DepreciationAsset:
        cursor = self.conn.execute("SELECT * FROM depreciation_assets WHERE id = ?", (asset_id,))
        rows = _rows(cursor)
        if not rows:
            raise RecordNotFoundError("DepreciationAsset", asset_id)
        return self._asset_from_record(rows[0])

    def list_assets(self, user_id: int) -> list[DepreciationAsset]:
        cursor = self.conn.execute(
            "SELECT * FROM depreciation_assets WHERE user_id = ? ORDER BY acquisition_date, id",
            (user_id,),
        )
        return [self._asset_from_record(r) for r in _rows(cursor)]

    def update_asset_disposal(self, asset_id: int, disposal_date: date) -> None:
        cursor = self.conn.execute(
            "UPDATE depreciation_assets SET disposal_date = ? WHERE id = ?",
            (disposal_date.isoformat(), asset_id),
        )
        if cursor.rowcount == 0:
            raise RecordNotFoundError("DepreciationAsset", asset_id)
