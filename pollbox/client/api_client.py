"""httpx client driving the viewer and admin flows against the HTTP API.

The client owns the advisory parts of the system: the once-per-question
submission guard and the admin marker. Both are checked before any request
is sent, and both markers are written only after the server confirms.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from pollbox.client.session_state import SessionState
from pollbox.config import ClientConfig
from pollbox.logic.admin_gate import MSG_MISCONFIGURED, MSG_PASSWORD_REQUIRED, MSG_UNEXPECTED, MSG_WRONG_PASSWORD
from pollbox.logic.answer_encoding import AnswerEntry
from pollbox.logic.errors import (
    AuthFailure,
    ConnectivityError,
    NotFound,
    PollboxError,
    ServerMisconfigured,
    StoreUnavailable,
    ValidationFailure,
)
from pollbox.logic.submission_guard import SubmissionGuard, VariantSelection

logger = logging.getLogger(__name__)

MSG_CONNECTIVITY = "Could not reach the server. Please try again later."
MSG_SUBMIT_FAILED = "An error occurred while sending your answer."
MSG_ADMIN_REQUIRED = "Admin login required."


class PollboxClient:
    """Viewer and admin operations over one httpx.Client and one SessionState."""

    def __init__(
        self,
        state: SessionState,
        *,
        base_url: str = "http://127.0.0.1:8000",
        timeout: float = 10.0,
        http: httpx.Client | None = None,
    ) -> None:
        self.state = state
        self.guard = SubmissionGuard(state)
        self._http = http or httpx.Client(base_url=base_url, timeout=timeout)

    @classmethod
    def from_config(cls, config: ClientConfig) -> "PollboxClient":
        return cls(
            SessionState.load(config.state_path),
            base_url=config.base_url,
            timeout=config.timeout_seconds,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "PollboxClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # -----------------------------
    # Transport helpers
    # -----------------------------

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return self._http.request(method, path, **kwargs)
        except httpx.TransportError as exc:
            logger.error("client_request_failed method=%s path=%s", method, path, exc_info=True)
            raise ConnectivityError(MSG_CONNECTIVITY) from exc

    @staticmethod
    def _detail(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text
        if isinstance(body, dict):
            return str(body.get("detail") or body.get("message") or body.get("title") or "")
        return ""

    def _checked(self, response: httpx.Response, question_id: Optional[str] = None) -> httpx.Response:
        if response.is_success:
            return response
        status = response.status_code
        if status == 404 and question_id is not None:
            raise NotFound(question_id)
        if status == 422:
            raise ValidationFailure(self._detail(response))
        if status == 401:
            raise AuthFailure(self._detail(response))
        if status >= 500:
            raise StoreUnavailable(self._detail(response) or MSG_UNEXPECTED)
        raise PollboxError(self._detail(response) or f"Request failed with status {status}")

    # -----------------------------
    # Viewer flow
    # -----------------------------

    def list_questions(self) -> List[Dict[str, Any]]:
        response = self._checked(self._request("GET", "/api/questions"))
        return list(response.json().get("questions") or [])

    def get_question(self, question_id: str) -> Dict[str, Any]:
        response = self._checked(self._request("GET", f"/api/questions/{question_id}"), question_id)
        return response.json()

    def has_answered(self, question_id: str) -> bool:
        return self.state.has_answered(question_id)

    def selection_for(self, question: Dict[str, Any]) -> VariantSelection:
        return VariantSelection(question)

    def _post_answer(self, question_id: str, entry: AnswerEntry) -> Dict[str, Any]:
        if entry.selections:
            payload: Dict[str, Any] = {"selections": list(entry.selections)}
        else:
            payload = {"answer": entry.answer}
        try:
            response = self._checked(
                self._request("POST", f"/api/questions/{question_id}/answers", json=payload),
                question_id,
            )
        except StoreUnavailable as exc:
            logger.error("submit_answer_failed question_id=%s", question_id, exc_info=True)
            raise StoreUnavailable(MSG_SUBMIT_FAILED) from exc
        return response.json()

    def submit_answer(
        self,
        question: Dict[str, Any],
        *,
        text: Optional[str] = None,
        selections: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        """Submit once; the answered marker is written right after the server accepts."""
        return self.guard.submit(question, self._post_answer, text=text, selections=selections)

    # -----------------------------
    # Admin gate
    # -----------------------------

    @property
    def is_admin(self) -> bool:
        return self.state.admin_authenticated

    def admin_login(self, password: Optional[str]) -> bool:
        if not password:
            raise ValidationFailure(MSG_PASSWORD_REQUIRED)
        response = self._request("POST", "/api/admin-login", json={"password": password})
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        if response.status_code == 200 and body.get("success") is True:
            self.state.mark_admin_authenticated()
            return True
        message = str(body.get("message") or "")
        if response.status_code == 400:
            raise ValidationFailure(message or MSG_PASSWORD_REQUIRED)
        if response.status_code == 401:
            raise AuthFailure(message or MSG_WRONG_PASSWORD)
        if body.get("code") == "server_misconfigured":
            raise ServerMisconfigured(message or MSG_MISCONFIGURED)
        raise StoreUnavailable(message or MSG_UNEXPECTED)

    def admin_logout(self) -> None:
        self.state.clear_admin()

    def _require_admin(self) -> None:
        if not self.state.admin_authenticated:
            raise AuthFailure(MSG_ADMIN_REQUIRED)

    # -----------------------------
    # Admin operations
    # -----------------------------

    def admin_list_questions(self) -> List[Dict[str, Any]]:
        self._require_admin()
        response = self._checked(self._request("GET", "/api/admin/questions"))
        return list(response.json().get("questions") or [])

    def admin_create_question(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        self._require_admin()
        return self._checked(self._request("POST", "/api/admin/questions", json=fields)).json()

    def admin_get_question(self, question_id: str) -> Dict[str, Any]:
        self._require_admin()
        return self._checked(self._request("GET", f"/api/admin/questions/{question_id}"), question_id).json()

    def admin_update_question(self, question_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        self._require_admin()
        response = self._request("PATCH", f"/api/admin/questions/{question_id}", json=fields)
        return self._checked(response, question_id).json()

    def admin_toggle_question(self, question_id: str) -> Dict[str, Any]:
        self._require_admin()
        response = self._request("POST", f"/api/admin/questions/{question_id}/toggle")
        return self._checked(response, question_id).json()

    def admin_delete_question(self, question_id: str) -> None:
        self._require_admin()
        self._checked(self._request("DELETE", f"/api/admin/questions/{question_id}"), question_id)

    def admin_results(self, question_id: str) -> Dict[str, Any]:
        self._require_admin()
        response = self._request("GET", f"/api/admin/questions/{question_id}/results")
        return self._checked(response, question_id).json()

    def admin_presentation(self, question_id: str) -> Dict[str, Any]:
        self._require_admin()
        response = self._request("GET", f"/api/admin/questions/{question_id}/presentation")
        return self._checked(response, question_id).json()


__all__ = ["PollboxClient", "MSG_CONNECTIVITY", "MSG_SUBMIT_FAILED", "MSG_ADMIN_REQUIRED"]
