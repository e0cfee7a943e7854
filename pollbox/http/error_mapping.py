"""Central error mapping for domain exceptions.

Single source of truth for mapping domain error classes to problem+json
codes and HTTP statuses. Handlers import from here instead of hardcoding
strings or numbers. Order matters: subclasses precede their bases.
"""

from __future__ import annotations

from pollbox.logic.errors import (
    AlreadyAnswered,
    AuthFailure,
    NotFound,
    PollboxError,
    ServerMisconfigured,
    StoreUnavailable,
    ValidationFailure,
)

ERROR_MAP = (
    (NotFound, {"code": "QUESTION_NOT_FOUND", "status": 404, "title": "Question not found"}),
    (AlreadyAnswered, {"code": "ALREADY_ANSWERED", "status": 409, "title": "Already answered"}),
    (ValidationFailure, {"code": "VALIDATION_FAILED", "status": 422, "title": "Invalid submission"}),
    (StoreUnavailable, {"code": "STORE_UNAVAILABLE", "status": 503, "title": "Store unavailable"}),
    (AuthFailure, {"code": "AUTH_FAILED", "status": 401, "title": "Unauthorized"}),
    (ServerMisconfigured, {"code": "SERVER_MISCONFIGURED", "status": 500, "title": "Server misconfigured"}),
)

FALLBACK = {"code": "INTERNAL_ERROR", "status": 500, "title": "Internal Server Error"}


def lookup(exc: PollboxError) -> dict:
    for cls, entry in ERROR_MAP:
        if isinstance(exc, cls):
            return entry
    return FALLBACK


__all__ = ["ERROR_MAP", "FALLBACK", "lookup"]
