"""FastAPI dependencies resolving per-app collaborators from `app.state`."""

from __future__ import annotations

from fastapi import Request

from pollbox.config import AppConfig
from pollbox.logic.repository_questions import QuestionRepository


def get_question_repository(request: Request) -> QuestionRepository:
    return request.app.state.question_repository


def get_app_config(request: Request) -> AppConfig:
    return request.app.state.config


__all__ = ["get_question_repository", "get_app_config"]
