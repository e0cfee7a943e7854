"""Problem+JSON utilities and global exception handlers.

Defines the RFC7807 media type and the handler callables registered by
`create_app`: domain errors, FastAPI HTTP errors, request validation errors
and anything unexpected all leave the service as application/problem+json.
"""

from __future__ import annotations

import logging
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from pollbox.http.error_mapping import lookup
from pollbox.logic.errors import PollboxError, StoreUnavailable
from pollbox.logic.problem_factory import make_problem, problem_internal, problem_request_invalid

PROBLEM_MEDIA_TYPE = "application/problem+json"

logger = logging.getLogger(__name__)


async def handle_domain_error(request: Request, exc: PollboxError) -> JSONResponse:  # noqa: D401
    entry = lookup(exc)
    if isinstance(exc, StoreUnavailable):
        logger.error("store_unavailable path=%s detail=%s", request.url.path, exc)
    problem = make_problem(entry["status"], entry["title"], str(exc), entry["code"])
    return JSONResponse(problem, status_code=entry["status"], media_type=PROBLEM_MEDIA_TYPE)


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:  # noqa: D401
    status = int(getattr(exc, "status_code", 500) or 500)
    if isinstance(exc.detail, dict):
        problem = exc.detail
    else:
        problem = make_problem(status, "Error", str(exc.detail or ""))
    headers = dict(exc.headers) if isinstance(getattr(exc, "headers", None), dict) else None
    return JSONResponse(problem, status_code=status, media_type=PROBLEM_MEDIA_TYPE, headers=headers)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:  # noqa: D401
    errors = [
        {"loc": list(e.get("loc", ())), "msg": str(e.get("msg", "")), "type": e.get("type")}
        for e in exc.errors()
    ]
    return JSONResponse(problem_request_invalid(errors), status_code=422, media_type=PROBLEM_MEDIA_TYPE)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:  # noqa: D401
    logger.error("unexpected_error path=%s", request.url.path, exc_info=exc)
    return JSONResponse(problem_internal(), status_code=500, media_type=PROBLEM_MEDIA_TYPE)


__all__ = [
    "PROBLEM_MEDIA_TYPE",
    "handle_domain_error",
    "handle_http_exception",
    "handle_request_validation_error",
    "handle_unexpected_error",
]
