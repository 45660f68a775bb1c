"""SQLite persistence for the Dreistrom ledger."""

from dreistrom.db.repository import LedgerRepository
from dreistrom.db.schema import create_schema

__all__ = ["LedgerRepository", "create_schema"]
