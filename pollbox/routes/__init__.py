"""APIRouter registration for the poll service."""

from __future__ import annotations

from fastapi import APIRouter

from pollbox.routes.admin_login import router as admin_login_router
from pollbox.routes.admin_questions import router as admin_questions_router
from pollbox.routes.questions import router as questions_router

api_router = APIRouter()
api_router.include_router(questions_router, tags=["Questions"])
api_router.include_router(admin_login_router, tags=["Auth"])
api_router.include_router(admin_questions_router, tags=["Admin"])

__all__ = ["api_router"]
