"""Domain error taxonomy for the poll service.

Route handlers let these propagate; `pollbox.http.problem` maps each class
to a problem+json response. The client library raises the same classes so
callers handle one hierarchy on both sides of the wire.
"""

from __future__ import annotations


class PollboxError(Exception):
    # Base class for intended, renderable failures.
    pass


class NotFound(PollboxError):
    """Question id absent from the store."""

    def __init__(self, question_id: str) -> None:
        super().__init__(f"No question found with ID: {question_id}")
        self.question_id = question_id


class ValidationFailure(PollboxError):
    # Empty or over-limit submission, or a malformed admin payload.
    pass


class AlreadyAnswered(ValidationFailure):
    def __init__(self, question_id: str) -> None:
        super().__init__("You have already answered this question.")
        self.question_id = question_id


class StoreUnavailable(PollboxError):
    # Network or store failure; never retried by callers.
    pass


class AuthFailure(PollboxError):
    # Wrong or missing admin secret.
    pass


class ServerMisconfigured(PollboxError):
    # Admin secret is not configured on the server.
    pass


class ConnectivityError(PollboxError):
    # Client could not reach the server at all.
    pass


__all__ = [
    "PollboxError",
    "NotFound",
    "ValidationFailure",
    "AlreadyAnswered",
    "StoreUnavailable",
    "AuthFailure",
    "ServerMisconfigured",
    "ConnectivityError",
]
