"""Functional tests for the httpx client: submission guard, errors and admin gate."""

from __future__ import annotations

import httpx
import pytest

from pollbox.client.api_client import MSG_ADMIN_REQUIRED, MSG_CONNECTIVITY, MSG_SUBMIT_FAILED, PollboxClient
from pollbox.client.session_state import SessionState
from pollbox.logic.errors import (
    AlreadyAnswered,
    AuthFailure,
    ConnectivityError,
    NotFound,
    ServerMisconfigured,
    StoreUnavailable,
    ValidationFailure,
)


def _offline_client(state: SessionState) -> PollboxClient:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    http = httpx.Client(base_url="http://poll.invalid", transport=httpx.MockTransport(refuse))
    return PollboxClient(state, http=http)


def test_viewer_lists_and_fetches_active_questions(poll_client, text_question, repo):
    hidden = repo.create({"title": "Hidden", "active": False})
    listed = poll_client.list_questions()
    assert [q["id"] for q in listed] == [text_question["id"]]
    assert poll_client.get_question(hidden["id"])["title"] == "Hidden"


def test_unknown_question_maps_to_not_found(poll_client):
    with pytest.raises(NotFound) as info:
        poll_client.get_question("ghost")
    assert info.value.question_id == "ghost"


def test_submit_marks_answered_and_blocks_second_attempt(poll_client, text_question, repo, mocker):
    question = poll_client.get_question(text_question["id"])
    poll_client.submit_answer(question, text="Great session")
    assert poll_client.has_answered(question["id"])

    spy = mocker.spy(poll_client._http, "request")
    with pytest.raises(AlreadyAnswered):
        poll_client.submit_answer(question, text="Again")
    spy.assert_not_called()
    assert len(repo.get_by_id(question["id"])["answers"]) == 1


def test_variant_submission_stores_selection_list(poll_client, variant_question, repo):
    question = poll_client.get_question(variant_question["id"])
    selection = poll_client.selection_for(question)
    selection.toggle("Red")
    selection.toggle("Blue")
    poll_client.submit_answer(question, selections=selection.selected)
    stored = repo.get_by_id(question["id"])["answers"][0]
    assert stored["selections"] == ["Red", "Blue"]


def test_invalid_submission_never_reaches_server(poll_client, variant_question, mocker):
    question = poll_client.get_question(variant_question["id"])
    spy = mocker.spy(poll_client._http, "request")
    with pytest.raises(ValidationFailure):
        poll_client.submit_answer(question, selections=[])
    with pytest.raises(ValidationFailure):
        poll_client.submit_answer(question, selections=["Red", "Green", "Blue"])
    spy.assert_not_called()
    assert not poll_client.has_answered(question["id"])


def test_marker_survives_client_restart(client, session_state, text_question):
    first = PollboxClient(session_state, http=client)
    question = first.get_question(text_question["id"])
    first.submit_answer(question, text="Once")

    second = PollboxClient(SessionState.load(session_state.path), http=client)
    assert second.has_answered(question["id"])
    with pytest.raises(AlreadyAnswered):
        second.submit_answer(question, text="Twice")


def test_failed_submit_leaves_form_usable(poll_client, text_question, repo, mocker):
    question = poll_client.get_question(text_question["id"])
    mocker.patch.object(repo, "append_answer", side_effect=StoreUnavailable("Document store unavailable"))
    with pytest.raises(StoreUnavailable) as info:
        poll_client.submit_answer(question, text="Lost")
    assert str(info.value) == MSG_SUBMIT_FAILED
    assert not poll_client.has_answered(question["id"])

    mocker.stopall()
    poll_client.submit_answer(question, text="Retried")
    assert poll_client.has_answered(question["id"])


def test_unreachable_server_is_connectivity_error(session_state):
    client = _offline_client(session_state)
    with pytest.raises(ConnectivityError, match=MSG_CONNECTIVITY):
        client.list_questions()
    question = {"id": "123", "title": "Offline", "questionType": "text"}
    with pytest.raises(ConnectivityError):
        client.submit_answer(question, text="hello")
    assert not client.has_answered("123")


def test_admin_login_unlocks_admin_operations(poll_client, admin_password, variant_question):
    with pytest.raises(AuthFailure, match=MSG_ADMIN_REQUIRED):
        poll_client.admin_list_questions()

    assert poll_client.admin_login(admin_password) is True
    assert poll_client.is_admin
    assert [q["id"] for q in poll_client.admin_list_questions()] == [variant_question["id"]]

    poll_client.admin_logout()
    assert not poll_client.is_admin
    with pytest.raises(AuthFailure):
        poll_client.admin_results(variant_question["id"])


def test_admin_marker_persists_without_expiry(client, session_state, admin_password):
    PollboxClient(session_state, http=client).admin_login(admin_password)
    restarted = PollboxClient(SessionState.load(session_state.path), http=client)
    assert restarted.is_admin


def test_wrong_password_keeps_admin_locked(poll_client):
    with pytest.raises(AuthFailure):
        poll_client.admin_login("not-it")
    assert not poll_client.is_admin


def test_missing_password_rejected_before_request(poll_client, mocker):
    spy = mocker.spy(poll_client._http, "request")
    with pytest.raises(ValidationFailure):
        poll_client.admin_login("")
    spy.assert_not_called()


def test_misconfigured_server_is_distinct_from_wrong_password(misconfigured_client, session_state):
    client = PollboxClient(session_state, http=misconfigured_client)
    with pytest.raises(ServerMisconfigured):
        client.admin_login("anything")
    assert not client.is_admin


def test_admin_round_trip_over_http(poll_client, admin_password):
    poll_client.admin_login(admin_password)
    created = poll_client.admin_create_question(
        {"title": "Snack", "questionType": "variant", "variants": [{"text": "Chips"}, {"text": "Fruit"}]}
    )
    qid = created["id"]
    poll_client.submit_answer(poll_client.get_question(qid), selections=["Fruit"])

    results = poll_client.admin_results(qid)
    assert results["variants"][1] == {"text": "Fruit", "count": 1, "percentage": 100.0}
    assert poll_client.admin_presentation(qid)["layout"] == "table"

    assert poll_client.admin_update_question(qid, {"description": "Afternoon"})["description"] == "Afternoon"
    assert poll_client.admin_toggle_question(qid)["active"] is False
    assert poll_client.admin_get_question(qid)["answers"][0]["selections"] == ["Fruit"]

    poll_client.admin_delete_question(qid)
    with pytest.raises(NotFound):
        poll_client.admin_get_question(qid)


def test_admin_create_validation_error_surfaces(poll_client, admin_password):
    poll_client.admin_login(admin_password)
    with pytest.raises(ValidationFailure):
        poll_client.admin_create_question({"title": ""})
