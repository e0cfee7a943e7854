"""Submission validation and the once-per-question guard.

Validation runs before any store call on both sides of the wire: the
client checks a submission before sending it and the answers route
re-checks it before appending. `SubmissionGuard` adds the local
"already answered" marker on top. The marker is advisory and nothing in the
store prevents a duplicate if the guard is bypassed.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Mapping, Optional, Protocol

from pollbox.logic.aggregation import question_type
from pollbox.logic.answer_encoding import AnswerEntry
from pollbox.logic.errors import AlreadyAnswered, ValidationFailure
from pollbox.models.question_kind import QuestionType

logger = logging.getLogger(__name__)


class AnsweredMarkers(Protocol):
    def has_answered(self, question_id: str) -> bool: ...

    def mark_answered(self, question_id: str) -> None: ...


def max_selections(question: Mapping[str, Any]) -> int:
    try:
        value = int(question.get("maxSelections") or 1)
    except (TypeError, ValueError):
        return 1
    return value if value > 0 else 1


def limit_message(limit: int) -> str:
    return f"You can select at most {limit} variant(s)."


def validate_text_answer(text: Optional[str]) -> str:
    if text is None or not str(text).strip():
        raise ValidationFailure("Please write an answer before submitting.")
    return str(text)


def validate_selections(question: Mapping[str, Any], selections: Optional[List[str]]) -> List[str]:
    chosen = list(selections or [])
    if not chosen:
        raise ValidationFailure("Please select at least one variant.")
    if any(not isinstance(s, str) or not s.strip() for s in chosen):
        raise ValidationFailure("Selected variants must not be blank.")
    if len(set(chosen)) != len(chosen):
        raise ValidationFailure("Each variant can be selected only once.")
    limit = max_selections(question)
    if len(chosen) > limit:
        raise ValidationFailure(limit_message(limit))
    return chosen


def build_answer_entry(
    question: Mapping[str, Any],
    *,
    text: Optional[str] = None,
    selections: Optional[List[str]] = None,
) -> AnswerEntry:
    """Validate a submission against its question and encode it for storage."""
    if question_type(question) == QuestionType.VARIANT:
        return AnswerEntry.from_selections(validate_selections(question, selections))
    return AnswerEntry.from_text(validate_text_answer(text))


class VariantSelection:
    """Selection set for one variant question, capped at `maxSelections`.

    Selecting past the cap is refused with a `ValidationFailure` carrying the
    warning to show; the selection is left exactly as it was.
    """

    def __init__(self, question: Mapping[str, Any]) -> None:
        self.limit = max_selections(question)
        self._selected: List[str] = []

    @property
    def selected(self) -> List[str]:
        return list(self._selected)

    def can_select(self, text: str) -> bool:
        return text in self._selected or len(self._selected) < self.limit

    def toggle(self, text: str) -> List[str]:
        if text in self._selected:
            self._selected.remove(text)
            return self.selected
        if not self.can_select(text):
            raise ValidationFailure(limit_message(self.limit))
        self._selected.append(text)
        return self.selected

    def clear(self) -> None:
        self._selected.clear()


class SubmissionGuard:
    """Once-per-question submit flow over a local marker store."""

    def __init__(self, markers: AnsweredMarkers) -> None:
        self.markers = markers

    def ensure_can_submit(self, question_id: str) -> None:
        if self.markers.has_answered(question_id):
            raise AlreadyAnswered(question_id)

    def submit(
        self,
        question: Mapping[str, Any],
        append: Callable[[str, AnswerEntry], Any],
        *,
        text: Optional[str] = None,
        selections: Optional[List[str]] = None,
    ) -> Any:
        """Validate, append and mark; errors from `append` leave the marker unset."""
        question_id = str(question.get("id"))
        self.ensure_can_submit(question_id)
        entry = build_answer_entry(question, text=text, selections=selections)
        result = append(question_id, entry)
        self.markers.mark_answered(question_id)
        logger.info("submission_marked question_id=%s kind=%s", question_id, entry.kind)
        return result


__all__ = [
    "AnsweredMarkers",
    "SubmissionGuard",
    "VariantSelection",
    "build_answer_entry",
    "validate_text_answer",
    "validate_selections",
    "max_selections",
]
