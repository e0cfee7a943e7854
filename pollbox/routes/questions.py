"""Viewer-facing question endpoints: public listing, single question, answer submit."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from pollbox.logic.repository_questions import QuestionRepository
from pollbox.logic.submission_guard import build_answer_entry
from pollbox.logic.views import question_card, viewer_question
from pollbox.models.question import AnswerSubmission
from pollbox.routes.deps import get_question_repository

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get(
    "/questions",
    summary="List active questions",
    operation_id="listActiveQuestions",
)
def list_active_questions(repo: QuestionRepository = Depends(get_question_repository)):
    return {"questions": [question_card(q) for q in repo.list_active()]}


@router.get(
    "/questions/{question_id}",
    summary="Get one question for answering",
    operation_id="getQuestion",
)
def get_question(question_id: str, repo: QuestionRepository = Depends(get_question_repository)):
    return viewer_question(repo.get_by_id(question_id))


@router.post(
    "/questions/{question_id}/answers",
    summary="Submit an answer",
    operation_id="submitAnswer",
    status_code=201,
)
def submit_answer(
    question_id: str,
    payload: AnswerSubmission,
    repo: QuestionRepository = Depends(get_question_repository),
):
    question = repo.get_by_id(question_id)
    selections = payload.selections
    if selections is None and payload.answer is not None:
        selections = [payload.answer]
    # Validation happens before the store is touched
    entry = build_answer_entry(question, text=payload.answer, selections=selections)
    updated = repo.append_answer(question_id, entry)
    logger.info("submit_answer question_id=%s kind=%s", question_id, entry.kind)
    body = {
        "question_id": question_id,
        "answer": entry.to_document(),
        "totalAnswers": len(updated.get("answers") or []),
    }
    return JSONResponse(body, status_code=201)


__all__ = ["router"]
