"""Shared-secret admin check.

The comparison only ever happens here, on the server. A success carries no
token and no expiry: the client keeps a local "authenticated" marker, and
the admin routes themselves are not protected by this check.
"""

from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pollbox.logic.errors import AuthFailure, ServerMisconfigured, ValidationFailure

logger = logging.getLogger(__name__)

MSG_PASSWORD_REQUIRED = "Password is required."
MSG_MISCONFIGURED = "Server configuration problem: the admin password is not set."
MSG_WRONG_PASSWORD = "Wrong password. Please try again."
MSG_UNEXPECTED = "An unexpected server error occurred."


@dataclass(frozen=True)
class LoginOutcome:
    status_code: int
    success: bool
    message: Optional[str] = None
    code: Optional[str] = None

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"success": self.success}
        if self.message:
            body["message"] = self.message
        if self.code:
            body["code"] = self.code
        return body


def verify_admin_secret(candidate: Any, configured: Optional[str]) -> None:
    """Raise unless `candidate` equals the configured admin secret."""
    # Any non-empty value counts as supplied; only a string can match
    if not candidate:
        raise ValidationFailure(MSG_PASSWORD_REQUIRED)
    if not configured:
        raise ServerMisconfigured(MSG_MISCONFIGURED)
    if not isinstance(candidate, str) or not hmac.compare_digest(candidate.encode("utf-8"), configured.encode("utf-8")):
        raise AuthFailure(MSG_WRONG_PASSWORD)


def login_outcome(candidate: Any, configured: Optional[str]) -> LoginOutcome:
    """Translate the secret check into the login route's status and body."""
    try:
        verify_admin_secret(candidate, configured)
    except ValidationFailure as exc:
        return LoginOutcome(400, False, str(exc), "password_required")
    except ServerMisconfigured as exc:
        logger.error("admin_login_misconfigured admin password is not set")
        return LoginOutcome(500, False, str(exc), "server_misconfigured")
    except AuthFailure as exc:
        logger.info("admin_login_rejected")
        return LoginOutcome(401, False, str(exc), "wrong_password")
    logger.info("admin_login_succeeded")
    return LoginOutcome(200, True)


__all__ = [
    "LoginOutcome",
    "verify_admin_secret",
    "login_outcome",
    "MSG_PASSWORD_REQUIRED",
    "MSG_MISCONFIGURED",
    "MSG_WRONG_PASSWORD",
    "MSG_UNEXPECTED",
]
