"""Stored answer entries: tagged writes, tolerant reads.

New entries carry an explicit `kind` tag and, for variant answers, a proper
`selections` list next to the `answer` string. The `answer` string keeps
the wire format older readers understand: raw text for text questions and
a JSON list of variant texts for variant questions.

Entries written before tagging existed only have `answer`, which is either
a bare variant text or a JSON-serialized list. `selected_variants` decodes
both shapes so aggregation never has to care which one it is reading.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Tuple

from pollbox.logic.timestamps import utc_now_iso
from pollbox.models.question_kind import AnswerKind


@dataclass(frozen=True)
class AnswerEntry:
    kind: str
    answer: str
    selections: Tuple[str, ...] = field(default_factory=tuple)
    created_at: str = field(default_factory=utc_now_iso)

    @classmethod
    def from_text(cls, text: str) -> "AnswerEntry":
        return cls(kind=AnswerKind.TEXT, answer=text)

    @classmethod
    def from_selections(cls, selections: List[str]) -> "AnswerEntry":
        # Always the list encoding, even for one selection
        values = tuple(selections)
        return cls(kind=AnswerKind.MULTIPLE, answer=json.dumps(list(values), ensure_ascii=False), selections=values)

    def to_document(self) -> dict:
        doc: dict = {"answer": self.answer, "kind": self.kind, "createdAt": self.created_at}
        if self.kind != AnswerKind.TEXT:
            doc["selections"] = list(self.selections)
        return doc


def _sniff_legacy(raw: str) -> List[str]:
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        return [raw]
    if isinstance(parsed, list):
        return [v for v in parsed if isinstance(v, str)]
    return [raw]


def selected_variants(entry: Mapping[str, Any]) -> List[str]:
    """Return the variant texts one stored answer entry names.

    Tagged entries are read from their `selections` list. Untagged entries
    are sniffed: a JSON list names each of its string members, anything
    else names the whole `answer` string.
    """
    kind = entry.get("kind")
    selections = entry.get("selections")
    if kind in (AnswerKind.SINGLE, AnswerKind.MULTIPLE) and isinstance(selections, list):
        return [v for v in selections if isinstance(v, str)]
    raw = entry.get("answer")
    if raw is None:
        return []
    if kind == AnswerKind.TEXT:
        return [str(raw)]
    return _sniff_legacy(str(raw))


def answer_text(entry: Mapping[str, Any]) -> Optional[str]:
    raw = entry.get("answer")
    return None if raw is None else str(raw)


__all__ = ["AnswerEntry", "selected_variants", "answer_text"]
