"""Generic key-document store over the `documents` table.

Each document lives in a named collection, is identified by an opaque id,
and carries a JSON body plus a version counter bumped on every write. Writes
to an existing document go through `replace_if_version` only, so a writer
working from a stale read can never overwrite a newer body.
Repositories build their domain operations on top of these primitives and
never issue SQL themselves.
"""

from __future__ import annotations

import json
import logging
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from pollbox.db.base import get_engine
from pollbox.logic.errors import StoreUnavailable
from pollbox.logic.timestamps import utc_now_iso

logger = logging.getLogger(__name__)


@dataclass
class StoredDocument:
    doc_id: str
    body: Dict[str, Any]
    version: int


@contextmanager
def _store_errors(operation: str, collection: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("document_store_failed op=%s collection=%s", operation, collection, exc_info=True)
        raise StoreUnavailable(f"Document store unavailable during {operation}") from exc


def _decode(doc_id: str, raw: str, version: int) -> StoredDocument:
    body = json.loads(raw) if raw else {}
    if not isinstance(body, dict):
        body = {}
    return StoredDocument(doc_id=str(doc_id), body=body, version=int(version))


class DocumentStore:
    """Thin CRUD surface over one database engine."""

    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine or get_engine()

    def list_all(self, collection: str) -> List[StoredDocument]:
        """Return every document of a collection in insertion order."""
        with _store_errors("list_all", collection):
            with self.engine.connect() as conn:
                rows = conn.execute(
                    sql_text(
                        "SELECT doc_id, body, version FROM documents"
                        " WHERE collection = :c ORDER BY seq ASC"
                    ),
                    {"c": collection},
                ).fetchall()
        return [_decode(r[0], r[1], r[2]) for r in rows]

    def get(self, collection: str, doc_id: str) -> Optional[StoredDocument]:
        with _store_errors("get", collection):
            with self.engine.connect() as conn:
                row = conn.execute(
                    sql_text("SELECT doc_id, body, version FROM documents WHERE collection = :c AND doc_id = :id"),
                    {"c": collection, "id": doc_id},
                ).fetchone()
        if row is None:
            return None
        return _decode(row[0], row[1], row[2])

    def add(self, collection: str, body: Dict[str, Any], doc_id: str | None = None) -> StoredDocument:
        """Insert a new document, assigning a random id when none is given."""
        new_id = doc_id or uuid.uuid4().hex
        now = utc_now_iso()
        with _store_errors("add", collection):
            with self.engine.begin() as conn:
                conn.execute(
                    sql_text(
                        "INSERT INTO documents (collection, doc_id, body, version, seq, created_at, updated_at)"
                        " VALUES (:c, :id, :body, 1,"
                        " (SELECT COALESCE(MAX(seq), 0) + 1 FROM documents WHERE collection = :c),"
                        " :now, :now)"
                    ),
                    {"c": collection, "id": new_id, "body": json.dumps(body, ensure_ascii=False), "now": now},
                )
        return StoredDocument(doc_id=new_id, body=dict(body), version=1)

    def replace_if_version(
        self, collection: str, doc_id: str, body: Dict[str, Any], expected_version: int
    ) -> bool:
        """Compare-and-swap write: replace the body only if the version still matches."""
        with _store_errors("replace_if_version", collection):
            with self.engine.begin() as conn:
                result = conn.execute(
                    sql_text(
                        "UPDATE documents SET body = :body, version = version + 1, updated_at = :now"
                        " WHERE collection = :c AND doc_id = :id AND version = :v"
                    ),
                    {
                        "c": collection,
                        "id": doc_id,
                        "v": int(expected_version),
                        "body": json.dumps(body, ensure_ascii=False),
                        "now": utc_now_iso(),
                    },
                )
        return (result.rowcount or 0) == 1

    def delete(self, collection: str, doc_id: str) -> bool:
        with _store_errors("delete", collection):
            with self.engine.begin() as conn:
                result = conn.execute(
                    sql_text("DELETE FROM documents WHERE collection = :c AND doc_id = :id"),
                    {"c": collection, "id": doc_id},
                )
        return (result.rowcount or 0) == 1


__all__ = ["DocumentStore", "StoredDocument"]
