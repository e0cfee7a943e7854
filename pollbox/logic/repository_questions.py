"""Question data access over the `questions` document collection.

Questions are returned as plain dicts shaped like the stored document with
the store id merged in under `id`. Missing ids raise `NotFound`; store
failures surface as `StoreUnavailable` from the document store.
"""

from __future__ import annotations

import logging
import random
import re
from typing import Any, Callable, Dict, List, Tuple

from pollbox.logic.answer_encoding import AnswerEntry
from pollbox.logic.document_store import DocumentStore, StoredDocument
from pollbox.logic.errors import NotFound, StoreUnavailable, ValidationFailure
from pollbox.logic.events import (
    ANSWER_APPENDED,
    QUESTION_CREATED,
    QUESTION_DELETED,
    QUESTION_UPDATED,
    publish,
)
from pollbox.logic.timestamps import utc_now_iso
from pollbox.models.question_kind import QuestionType

logger = logging.getLogger(__name__)

COLLECTION = "questions"

_WHITESPACE_RUN = re.compile(r"\s+")


def make_slug(title: str) -> str:
    """Lower-case the title and replace whitespace runs with '-'."""
    return _WHITESPACE_RUN.sub("-", (title or "").lower())


def generate_random_id() -> str:
    """Six-digit numeric id shown to admins next to the store id."""
    return str(random.randint(100000, 999999))


def _to_question(doc: StoredDocument) -> Dict[str, Any]:
    body = dict(doc.body)
    body.pop("id", None)
    question: Dict[str, Any] = {"id": doc.doc_id, **body}
    question.setdefault("description", "")
    question.setdefault("active", False)
    question.setdefault("questionType", QuestionType.TEXT)
    question.setdefault("maxSelections", 1)
    question.setdefault("answers", [])
    if question["questionType"] == QuestionType.VARIANT:
        question.setdefault("variants", [])
    return question


class QuestionRepository:
    """Store client for the questions collection."""

    def __init__(self, store: DocumentStore | None = None, *, append_max_attempts: int = 5) -> None:
        self.store = store or DocumentStore()
        self.append_max_attempts = max(1, int(append_max_attempts))

    def list_all(self) -> List[Dict[str, Any]]:
        return [_to_question(doc) for doc in self.store.list_all(COLLECTION)]

    def list_active(self) -> List[Dict[str, Any]]:
        return [q for q in self.list_all() if q.get("active") is True]

    def get_by_id(self, question_id: str) -> Dict[str, Any]:
        doc = self.store.get(COLLECTION, question_id)
        if doc is None:
            raise NotFound(question_id)
        return _to_question(doc)

    def create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Create a question; `active` defaults to true and answers start empty."""
        body = dict(fields)
        requested_id = body.pop("id", None)
        if requested_id is not None and self.store.get(COLLECTION, requested_id) is not None:
            raise ValidationFailure(f"A question with ID {requested_id} already exists.")
        body.setdefault("active", True)
        body.setdefault("description", "")
        body.setdefault("questionType", QuestionType.TEXT)
        body.setdefault("maxSelections", 1)
        body["answers"] = []
        body["slug"] = make_slug(str(body.get("title", "")))
        body["randomId"] = generate_random_id()
        body["createdAt"] = utc_now_iso()
        doc = self.store.add(COLLECTION, body, doc_id=requested_id)
        publish(QUESTION_CREATED, {"question_id": doc.doc_id})
        logger.info("question_created question_id=%s type=%s", doc.doc_id, body["questionType"])
        return _to_question(doc)

    def _write_with_retry(
        self, question_id: str, operation: str, mutate: Callable[[Dict[str, Any]], Dict[str, Any]]
    ) -> Tuple[StoredDocument, int]:
        """Read, apply `mutate`, and write back only if nobody wrote in between.

        A writer that loses the race re-reads and re-applies its change, up to
        `append_max_attempts` times, so edits and appends never overwrite each
        other.
        """
        for attempt in range(1, self.append_max_attempts + 1):
            doc = self.store.get(COLLECTION, question_id)
            if doc is None:
                raise NotFound(question_id)
            body = mutate(dict(doc.body))
            if self.store.replace_if_version(COLLECTION, question_id, body, doc.version):
                return StoredDocument(doc_id=question_id, body=body, version=doc.version + 1), attempt
            logger.warning("question_write_conflict op=%s question_id=%s attempt=%s", operation, question_id, attempt)
        raise StoreUnavailable(f"Could not {operation} because of concurrent updates.")

    def update(self, question_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Merge `fields` into a question; the slug follows the title.

        The merged question must still be consistent: a variant question keeps
        at least one variant, and a text question carries no variants.
        """
        changes = {k: v for k, v in fields.items() if k not in {"id", "answers"}}
        if "title" in changes:
            changes["slug"] = make_slug(str(changes["title"]))

        def merge(body: Dict[str, Any]) -> Dict[str, Any]:
            merged = {**body, **changes}
            if merged.get("questionType") == QuestionType.VARIANT:
                if not merged.get("variants"):
                    raise ValidationFailure("Variant questions need at least one variant.")
            else:
                merged.pop("variants", None)
                merged["maxSelections"] = 1
            return merged

        doc, _ = self._write_with_retry(question_id, "update the question", merge)
        publish(QUESTION_UPDATED, {"question_id": question_id, "fields": sorted(changes)})
        return _to_question(doc)

    def toggle_active(self, question_id: str) -> Dict[str, Any]:
        current = self.get_by_id(question_id)
        return self.update(question_id, {"active": not bool(current.get("active"))})

    def append_answer(self, question_id: str, entry: AnswerEntry) -> Dict[str, Any]:
        """Append one answer entry; a concurrent write never drops it."""

        def add_entry(body: Dict[str, Any]) -> Dict[str, Any]:
            body["answers"] = [*(body.get("answers") or []), entry.to_document()]
            return body

        doc, attempt = self._write_with_retry(question_id, "save the answer", add_entry)
        publish(ANSWER_APPENDED, {"question_id": question_id, "kind": entry.kind})
        logger.info(
            "answer_appended question_id=%s total=%s attempt=%s", question_id, len(doc.body["answers"]), attempt
        )
        return _to_question(doc)

    def delete(self, question_id: str) -> None:
        """Remove a question and its embedded answers irrevocably."""
        if not self.store.delete(COLLECTION, question_id):
            raise NotFound(question_id)
        publish(QUESTION_DELETED, {"question_id": question_id})
        logger.info("question_deleted question_id=%s", question_id)


__all__ = ["QuestionRepository", "COLLECTION", "make_slug", "generate_random_id"]
