"""Admin question endpoints: list, create, edit, toggle, delete, results, presentation.

These routes are not token protected. Access is gated by the client-side
admin marker set after a successful `/admin-login`.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse

from pollbox.logic.repository_questions import QuestionRepository
from pollbox.logic.views import presentation_view, question_card, results_view
from pollbox.models.question import QuestionCreate, QuestionUpdate
from pollbox.routes.deps import get_question_repository

router = APIRouter(prefix="/admin")
logger = logging.getLogger(__name__)


@router.get(
    "/questions",
    summary="List all questions",
    operation_id="adminListQuestions",
)
def list_questions(repo: QuestionRepository = Depends(get_question_repository)):
    return {"questions": [question_card(q) for q in repo.list_all()]}


@router.post(
    "/questions",
    summary="Create a question",
    operation_id="adminCreateQuestion",
    status_code=201,
)
def create_question(payload: QuestionCreate, repo: QuestionRepository = Depends(get_question_repository)):
    fields = payload.to_fields()
    if payload.id:
        fields["id"] = payload.id
    question = repo.create(fields)
    return JSONResponse(question, status_code=201)


@router.get(
    "/questions/{question_id}",
    summary="Get one question with its answers",
    operation_id="adminGetQuestion",
)
def get_question(question_id: str, repo: QuestionRepository = Depends(get_question_repository)):
    return repo.get_by_id(question_id)


@router.patch(
    "/questions/{question_id}",
    summary="Edit a question",
    operation_id="adminUpdateQuestion",
)
def update_question(
    question_id: str,
    payload: QuestionUpdate,
    repo: QuestionRepository = Depends(get_question_repository),
):
    return repo.update(question_id, payload.to_fields())


@router.post(
    "/questions/{question_id}/toggle",
    summary="Flip a question between active and inactive",
    operation_id="adminToggleQuestion",
)
def toggle_question(question_id: str, repo: QuestionRepository = Depends(get_question_repository)):
    question = repo.toggle_active(question_id)
    logger.info("toggle_question question_id=%s active=%s", question_id, question.get("active"))
    return question_card(question)


@router.delete(
    "/questions/{question_id}",
    summary="Delete a question and all its answers",
    operation_id="adminDeleteQuestion",
    status_code=204,
)
def delete_question(question_id: str, repo: QuestionRepository = Depends(get_question_repository)):
    repo.delete(question_id)
    return Response(status_code=204)


@router.get(
    "/questions/{question_id}/results",
    summary="Aggregated answers for one question",
    operation_id="adminQuestionResults",
)
def question_results(question_id: str, repo: QuestionRepository = Depends(get_question_repository)):
    return results_view(repo.get_by_id(question_id))


@router.get(
    "/questions/{question_id}/presentation",
    summary="Read-only presentation display for one question",
    operation_id="adminQuestionPresentation",
)
def question_presentation(question_id: str, repo: QuestionRepository = Depends(get_question_repository)):
    return presentation_view(repo.get_by_id(question_id))


__all__ = ["router"]
