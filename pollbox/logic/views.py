"""Read-only view models for the viewer, admin results and presentation routes.

Variant rows always follow the question's own `variants` order, never the
order of the aggregated mapping.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

from pollbox.logic.aggregation import (
    grouped_summary,
    percentage,
    question_type,
    total_answers,
    variant_stats,
    variant_texts,
)
from pollbox.logic.answer_encoding import answer_text
from pollbox.models.question_kind import QuestionType

# Text answers longer than this take a double-width card in the presentation view
WIDE_ANSWER_CHARS = 17


def _is_variant_view(question: Mapping[str, Any]) -> bool:
    return question_type(question) == QuestionType.VARIANT and bool(variant_texts(question))


def question_card(question: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "id": question.get("id"),
        "title": question.get("title"),
        "description": question.get("description", ""),
        "active": bool(question.get("active")),
        "slug": question.get("slug"),
        "randomId": question.get("randomId"),
        "questionType": question_type(question),
        "totalAnswers": total_answers(question),
    }


def viewer_question(question: Mapping[str, Any]) -> Dict[str, Any]:
    """Question as offered to a viewer: everything except the answers."""
    view = {k: v for k, v in question.items() if k != "answers"}
    view["questionType"] = question_type(question)
    view["maxSelections"] = question.get("maxSelections") or 1
    return view


def _variant_rows(question: Mapping[str, Any]) -> List[Dict[str, Any]]:
    stats = variant_stats(question)
    total = total_answers(question)
    return [
        {"text": text, "count": stats.get(text, 0), "percentage": percentage(stats.get(text, 0), total)}
        for text in variant_texts(question)
    ]


def results_view(question: Mapping[str, Any]) -> Dict[str, Any]:
    """Admin results: counts, percentages and summary, or the raw text answers."""
    view = question_card(question)
    view["maxSelections"] = question.get("maxSelections") or 1
    view["variants"] = _variant_rows(question)
    view["summary"] = grouped_summary(question) if _is_variant_view(question) else None
    if question_type(question) == QuestionType.TEXT:
        view["answers"] = [
            {"answer": answer_text(entry), "createdAt": entry.get("createdAt")}
            for entry in question.get("answers") or []
            if isinstance(entry, Mapping)
        ]
    else:
        view["answers"] = []
    return view


def presentation_view(question: Mapping[str, Any]) -> Dict[str, Any]:
    """Presentation display: a variant table, or a grid of text answer cards."""
    view: Dict[str, Any] = {
        "id": question.get("id"),
        "title": question.get("title"),
        "totalAnswers": total_answers(question),
    }
    if _is_variant_view(question):
        view["layout"] = "table"
        view["rows"] = _variant_rows(question)
        return view
    cards = []
    for entry in question.get("answers") or []:
        if not isinstance(entry, Mapping):
            continue
        text = answer_text(entry) or ""
        cards.append({"answer": text, "wide": len(text) > WIDE_ANSWER_CHARS})
    view["layout"] = "grid"
    view["cards"] = cards
    return view


__all__ = [
    "question_card",
    "viewer_question",
    "results_view",
    "presentation_view",
    "WIDE_ANSWER_CHARS",
]
