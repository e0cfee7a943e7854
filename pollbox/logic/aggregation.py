"""Answer aggregation for variant questions.

Pure read-only projections over a fetched question document. Nothing here
touches the store or mutates its input, so results are safe to compute
repeatedly and on stale data.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Mapping, Optional

from pollbox.logic.answer_encoding import selected_variants
from pollbox.models.question_kind import QuestionType

_ONE_DECIMAL = Decimal("0.1")


def question_type(question: Mapping[str, Any]) -> str:
    return question.get("questionType") or QuestionType.TEXT


def variant_texts(question: Mapping[str, Any]) -> List[str]:
    texts: List[str] = []
    for variant in question.get("variants") or []:
        if isinstance(variant, Mapping) and isinstance(variant.get("text"), str):
            texts.append(variant["text"])
    return texts


def total_answers(question: Mapping[str, Any]) -> int:
    return len(question.get("answers") or [])


def variant_stats(question: Mapping[str, Any]) -> Dict[str, int]:
    """Count how many answers name each variant.

    Every variant starts at zero so unanswered variants are still reported.
    A multi-select answer counts once for each variant it lists; values that
    match no variant are ignored. Non-variant questions and questions without
    variants yield an empty mapping.
    """
    texts = variant_texts(question)
    if question_type(question) != QuestionType.VARIANT or not texts:
        return {}

    stats: Dict[str, int] = {text: 0 for text in texts}
    for entry in question.get("answers") or []:
        if not isinstance(entry, Mapping):
            continue
        for value in selected_variants(entry):
            if value in stats:
                stats[value] += 1
    return stats


def percentage(count: int, total: int) -> float:
    """Share of `total` as a percentage rounded to one decimal place."""
    if total <= 0:
        return 0.0
    # Halves round up: 1/16 is 6.3, not 6.2
    share = (Decimal(count) * 100 / Decimal(total)).quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP)
    return float(share)


def grouped_summary(question: Mapping[str, Any], stats: Optional[Dict[str, int]] = None) -> Optional[str]:
    """One-line summary such as "2 Yes, 1 No"; None when no variant was picked."""
    stats = variant_stats(question) if stats is None else stats
    parts = [f"{stats[text]} {text}" for text in variant_texts(question) if stats.get(text, 0) > 0]
    return ", ".join(parts) or None


__all__ = [
    "question_type",
    "variant_texts",
    "total_answers",
    "variant_stats",
    "percentage",
    "grouped_summary",
]
