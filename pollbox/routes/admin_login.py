"""Admin login endpoint.

Keeps its own `{success, message}` JSON contract rather than problem+json:
200 on success, 400 without a password, 401 on a wrong password, 500 when
the server has no admin password configured or anything else goes wrong.
"""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from pollbox.config import AppConfig
from pollbox.logic.admin_gate import MSG_UNEXPECTED, LoginOutcome, login_outcome
from pollbox.routes.deps import get_app_config

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/admin-login",
    summary="Check the admin password",
    operation_id="adminLogin",
)
async def admin_login(request: Request, config: AppConfig = Depends(get_app_config)):
    try:
        payload = json.loads(await request.body() or b"null")
    except (UnicodeDecodeError, json.JSONDecodeError):
        logger.error("admin_login_error malformed request body", exc_info=True)
        outcome = LoginOutcome(500, False, MSG_UNEXPECTED, "unexpected_error")
        return JSONResponse(outcome.to_body(), status_code=outcome.status_code)
    candidate = payload.get("password") if isinstance(payload, dict) else None
    outcome = login_outcome(candidate, config.admin.password)
    return JSONResponse(outcome.to_body(), status_code=outcome.status_code)


__all__ = ["router"]
