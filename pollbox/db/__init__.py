"""Database bootstrap utilities for the poll service.

Exposes engine construction and the migrations runner that applies SQL
files from the top-level migrations/ directory. No ORM models leak into
route handlers; documents are read and written by `pollbox.logic.document_store`.
"""

from pollbox.db.base import get_engine, reset_engine
from pollbox.db.migrations_runner import apply_migrations

__all__ = [
    "get_engine",
    "reset_engine",
    "apply_migrations",
]
