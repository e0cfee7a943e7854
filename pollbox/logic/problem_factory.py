"""Centralised construction of problem+json payloads.

Returns plain dicts so route modules and exception handlers never embed
problem codes or titles as string literals.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional
import logging


logger = logging.getLogger(__name__)


def make_problem(
    status: int,
    title: str,
    detail: str = "",
    code: Optional[str] = None,
    errors: Optional[List[Any]] = None,
) -> Dict[str, object]:
    problem: Dict[str, object] = {
        "type": "about:blank",
        "title": title,
        "status": int(status),
        "detail": detail,
    }
    if code:
        problem["code"] = code
    if errors is not None:
        problem["errors"] = errors
    logger.info("error_handler.handle code=%s status=%s", code, status)
    return problem


def problem_request_invalid(errors: List[Any]) -> Dict[str, object]:
    """Return a 422 problem for a request body that failed schema validation."""
    return make_problem(422, "Invalid Request", "Request validation failed", "REQUEST_INVALID", errors)


def problem_internal() -> Dict[str, object]:
    """Return a 500 problem for unexpected failures."""
    return make_problem(500, "Internal Server Error", "", "INTERNAL_ERROR")


__all__ = ["make_problem", "problem_request_invalid", "problem_internal"]
