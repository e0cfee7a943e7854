"""Pydantic models for question and answer payloads.

Declares the request bodies accepted by the admin and viewer routes. Field
names are snake_case in Python and camelCase on the wire, matching the
stored document keys.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from pollbox.models.question_kind import QuestionType

# Matches the width of documents.doc_id
MAX_ID_LENGTH = 64


class Variant(BaseModel):
    text: str

    @field_validator("text")
    @classmethod
    def text_must_be_present(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("variant text must be a non-empty string")
        return v


class QuestionCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(default=None, max_length=MAX_ID_LENGTH)
    title: str
    description: str = ""
    active: bool = True
    question_type: Literal["text", "variant"] = Field(default=QuestionType.TEXT, alias="questionType")
    variants: List[Variant] = Field(default_factory=list)
    max_selections: int = Field(default=1, ge=1, alias="maxSelections")

    @field_validator("title")
    @classmethod
    def title_must_be_present(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("title must be a non-empty string")
        return v

    @field_validator("id")
    @classmethod
    def id_must_be_present_when_given(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("id must be a non-empty string when provided")
        return v

    @model_validator(mode="after")
    def variants_match_type(self) -> "QuestionCreate":
        if self.question_type == QuestionType.VARIANT and not self.variants:
            raise ValueError("variant questions need at least one variant")
        if self.question_type == QuestionType.TEXT:
            self.variants = []
            self.max_selections = 1
        return self

    def to_fields(self) -> dict:
        fields = {
            "title": self.title,
            "description": self.description,
            "active": self.active,
            "questionType": self.question_type,
            "maxSelections": self.max_selections,
        }
        if self.question_type == QuestionType.VARIANT:
            fields["variants"] = [{"text": v.text} for v in self.variants]
        return fields


class QuestionUpdate(BaseModel):
    """Partial update; only fields present in the request are merged."""

    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    description: Optional[str] = None
    active: Optional[bool] = None
    question_type: Optional[Literal["text", "variant"]] = Field(default=None, alias="questionType")
    variants: Optional[List[Variant]] = None
    max_selections: Optional[int] = Field(default=None, ge=1, alias="maxSelections")

    @field_validator("title")
    @classmethod
    def title_must_be_present(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("title must be a non-empty string")
        return v

    def to_fields(self) -> dict:
        raw = self.model_dump(exclude_unset=True, by_alias=True)
        if "variants" in raw and raw["variants"] is not None:
            raw["variants"] = [{"text": v["text"]} for v in raw["variants"]]
        return {k: v for k, v in raw.items() if v is not None}


class AnswerSubmission(BaseModel):
    """Viewer submission: `answer` for text questions, `selections` for variant ones."""

    answer: Optional[str] = None
    selections: Optional[List[str]] = None


__all__ = ["MAX_ID_LENGTH", "Variant", "QuestionCreate", "QuestionUpdate", "AnswerSubmission"]
