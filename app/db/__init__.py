"""Database models and store handle."""

from app.db.database import Database
from app.db.models import Account, Base, EntryKind, LedgerEntry

__all__ = ["Account", "Base", "Database", "EntryKind", "LedgerEntry"]
