"""Question and answer kind constants.

Provides simple constants containers instead of Enums to keep imports
lightweight and to match the literal strings stored in documents.
"""

from __future__ import annotations


class QuestionType:
    TEXT = "text"
    VARIANT = "variant"

    ALL = (TEXT, VARIANT)


class AnswerKind:
    # Tag written on every new answer entry
    TEXT = "text"
    SINGLE = "single"
    MULTIPLE = "multiple"

    ALL = (TEXT, SINGLE, MULTIPLE)


__all__ = ["QuestionType", "AnswerKind"]
