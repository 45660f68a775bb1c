"""SQLite database schema definition."""

import sqlite3
from pathlib import Path

SCHEMA_VERSION = 1

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY,
    applied_at TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS income_entries (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    stream TEXT NOT NULL CHECK (stream IN ('EMPLOYMENT', 'FREIBERUF', 'GEWERBE')),
    amount_cents INTEGER NOT NULL CHECK (amount_cents >= 0),
    entry_date TEXT NOT NULL,
    source TEXT,
    description TEXT,
    created_at TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS expense_entries (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    amount_cents INTEGER NOT NULL CHECK (amount_cents >= 0),
    entry_date TEXT NOT NULL,
    category TEXT NOT NULL,
    freiberuf_pct INTEGER NOT NULL DEFAULT 0,
    gewerbe_pct INTEGER NOT NULL DEFAULT 0,
    personal_pct INTEGER NOT NULL DEFAULT 0,
    capitalized INTEGER NOT NULL DEFAULT 0,
    description TEXT,
    created_at TEXT NOT NULL DEFAULT (datetime('now')),
    CHECK (freiberuf_pct + gewerbe_pct + personal_pct = 100)
);

CREATE TABLE IF NOT EXISTS depreciation_assets (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    name TEXT NOT NULL,
    acquisition_date TEXT NOT NULL,
    net_cost_cents INTEGER NOT NULL CHECK (net_cost_cents >= 0),
    useful_life_months INTEGER NOT NULL CHECK (useful_life_months >= 1),
    disposal_date TEXT,
    freiberuf_pct INTEGER,
    gewerbe_pct INTEGER,
    personal_pct INTEGER,
    expense_entry_id INTEGER REFERENCES expense_entries(id),
    created_at TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE INDEX IF NOT EXISTS idx_income_user_stream_date
    ON income_entries(user_id, stream, entry_date);
CREATE INDEX IF NOT EXISTS idx_expense_user_date
    ON expense_entries(user_id, entry_date);
CREATE INDEX IF NOT EXISTS idx_assets_user
    ON depreciation_assets(user_id);
"""


def create_schema(db_path: Path | str) -> sqlite3.Connection:
    """Create the database schema. Returns the connection.

    ``":memory:"`` gives a throwaway database.
    """
    in_memory = str(db_path) == ":memory:"
    if not in_memory:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    if not in_memory:
        conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    conn.executescript(SCHEMA_SQL)
    conn.execute(
        "INSERT OR IGNORE INTO schema_version (version) VALUES (?)",
        (SCHEMA_VERSION,),
    )
    conn.commit()
    return conn
