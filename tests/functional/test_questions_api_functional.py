"""Functional tests for the viewer and admin HTTP routes via TestClient."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from jsonschema import Draft202012Validator

from pollbox.http.problem import PROBLEM_MEDIA_TYPE
from pollbox.logic.errors import StoreUnavailable

SCHEMAS_DIR = Path(__file__).resolve().parents[2] / "schemas"


def _load_schema(name: str) -> dict:
    return json.loads((SCHEMAS_DIR / name).read_text(encoding="utf-8"))


def _create(client, **fields) -> dict:
    body = {"title": "Default title", **fields}
    response = client.post("/api/admin/questions", json=body)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_and_fetch_question(client):
    created = _create(client, title="Lunch Poll", description="Where to eat")
    assert created["active"] is True
    assert created["slug"] == "lunch-poll"

    response = client.get(f"/api/questions/{created['id']}")
    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "Lunch Poll"
    assert "answers" not in body


def test_create_rejects_blank_title_and_variantless_variant_question(client):
    assert client.post("/api/admin/questions", json={"title": "  "}).status_code == 422
    response = client.post("/api/admin/questions", json={"title": "Pick", "questionType": "variant"})
    assert response.status_code == 422
    assert response.headers["content-type"].startswith(PROBLEM_MEDIA_TYPE)


def test_public_listing_only_shows_active(client):
    shown = _create(client, title="Shown")
    hidden = _create(client, title="Hidden")
    client.post(f"/api/admin/questions/{hidden['id']}/toggle")

    public_ids = [q["id"] for q in client.get("/api/questions").json()["questions"]]
    admin_ids = [q["id"] for q in client.get("/api/admin/questions").json()["questions"]]
    assert public_ids == [shown["id"]]
    assert admin_ids == [shown["id"], hidden["id"]]


def test_unknown_question_is_problem_404(client):
    response = client.get("/api/questions/nope")
    assert response.status_code == 404
    assert response.headers["content-type"].startswith(PROBLEM_MEDIA_TYPE)
    body = response.json()
    assert body["code"] == "QUESTION_NOT_FOUND"
    assert "nope" in body["detail"]


def test_submit_text_answer(client, repo):
    question = _create(client, title="Feedback")
    response = client.post(f"/api/questions/{question['id']}/answers", json={"answer": "Loved it"})
    assert response.status_code == 201
    assert response.json()["totalAnswers"] == 1
    assert repo.get_by_id(question["id"])["answers"][0]["answer"] == "Loved it"


def test_empty_text_answer_rejected_without_store_write(client, repo, mocker):
    question = _create(client, title="Feedback")
    spy = mocker.spy(repo, "append_answer")
    response = client.post(f"/api/questions/{question['id']}/answers", json={"answer": "   "})
    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_FAILED"
    spy.assert_not_called()


def test_variant_submission_limits(client, repo, mocker):
    question = _create(
        client,
        title="Colours",
        questionType="variant",
        variants=[{"text": "Red"}, {"text": "Blue"}, {"text": "Green"}],
        maxSelections=2,
    )
    spy = mocker.spy(repo, "append_answer")
    url = f"/api/questions/{question['id']}/answers"

    assert client.post(url, json={"selections": []}).status_code == 422
    assert client.post(url, json={"selections": ["Red", "Blue", "Green"]}).status_code == 422
    spy.assert_not_called()

    ok = client.post(url, json={"selections": ["Red", "Blue"]})
    assert ok.status_code == 201
    assert ok.json()["answer"]["selections"] == ["Red", "Blue"]


def test_legacy_single_answer_field_accepted_for_variant(client):
    question = _create(client, title="YN", questionType="variant", variants=[{"text": "Yes"}, {"text": "No"}])
    response = client.post(f"/api/questions/{question['id']}/answers", json={"answer": "Yes"})
    assert response.status_code == 201
    assert json.loads(response.json()["answer"]["answer"]) == ["Yes"]


def test_submit_to_missing_question_is_404(client):
    response = client.post("/api/questions/ghost/answers", json={"answer": "hello"})
    assert response.status_code == 404


def test_store_failure_is_problem_503(client, repo, mocker):
    question = _create(client, title="Feedback")
    mocker.patch.object(repo, "append_answer", side_effect=StoreUnavailable("Document store unavailable"))
    response = client.post(f"/api/questions/{question['id']}/answers", json={"answer": "hi"})
    assert response.status_code == 503
    assert response.json()["code"] == "STORE_UNAVAILABLE"


def test_results_and_presentation(client):
    question = _create(
        client,
        title="Colours",
        questionType="variant",
        variants=[{"text": "Red"}, {"text": "Blue"}],
        maxSelections=1,
    )
    url = f"/api/questions/{question['id']}/answers"
    for choice in ["Red", "Red", "Blue"]:
        assert client.post(url, json={"selections": [choice]}).status_code == 201

    results = client.get(f"/api/admin/questions/{question['id']}/results").json()
    Draft202012Validator(_load_schema("results.schema.json")).validate(results)
    assert results["totalAnswers"] == 3
    assert results["variants"] == [
        {"text": "Red", "count": 2, "percentage": 66.7},
        {"text": "Blue", "count": 1, "percentage": 33.3},
    ]
    assert sum(v["count"] for v in results["variants"]) == results["totalAnswers"]
    assert results["summary"] == "2 Red, 1 Blue"

    presentation = client.get(f"/api/admin/questions/{question['id']}/presentation").json()
    assert presentation["layout"] == "table"
    assert presentation["totalAnswers"] == 3


def test_text_results_validate_against_schema(client):
    question = _create(client, title="Words")
    client.post(f"/api/questions/{question['id']}/answers", json={"answer": "first"})
    results = client.get(f"/api/admin/questions/{question['id']}/results").json()
    Draft202012Validator(_load_schema("results.schema.json")).validate(results)
    assert [a["answer"] for a in results["answers"]] == ["first"]


def test_patch_updates_and_404s(client):
    question = _create(client, title="Old title")
    response = client.patch(f"/api/admin/questions/{question['id']}", json={"title": "Brand New"})
    assert response.status_code == 200
    assert response.json()["slug"] == "brand-new"
    assert client.patch("/api/admin/questions/ghost", json={"title": "x"}).status_code == 404


def test_delete_then_not_found(client):
    question = _create(client, title="Temporary")
    assert client.delete(f"/api/admin/questions/{question['id']}").status_code == 204
    assert question["id"] not in [q["id"] for q in client.get("/api/admin/questions").json()["questions"]]
    assert client.get(f"/api/admin/questions/{question['id']}").status_code == 404
    assert client.delete(f"/api/admin/questions/{question['id']}").status_code == 404


def test_request_id_header_and_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "db": True}
    assert response.headers.get("X-Request-Id")

    echoed = client.get("/health", headers={"X-Request-Id": "abc-123"})
    assert echoed.headers["X-Request-Id"] == "abc-123"


@pytest.mark.parametrize("path", ["/api/nowhere", "/api/admin/nowhere"])
def test_unknown_route_is_problem_json(client, path):
    response = client.get(path)
    assert response.status_code == 404
    assert response.headers["content-type"].startswith(PROBLEM_MEDIA_TYPE)


@pytest.mark.parametrize("selections", [["Red", "Red"], ["", "  "], ["Red", ""]])
def test_duplicate_or_blank_selections_rejected(client, repo, mocker, selections):
    question = _create(
        client,
        title="Colours",
        questionType="variant",
        variants=[{"text": "Red"}, {"text": "Blue"}],
        maxSelections=2,
    )
    spy = mocker.spy(repo, "append_answer")
    response = client.post(f"/api/questions/{question['id']}/answers", json={"selections": selections})
    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_FAILED"
    spy.assert_not_called()
    assert repo.get_by_id(question["id"])["answers"] == []


def test_patch_to_variant_without_variants_is_422(client):
    question = _create(client, title="Plain text")
    response = client.patch(f"/api/admin/questions/{question['id']}", json={"questionType": "variant"})
    assert response.status_code == 422
    assert client.get(f"/api/admin/questions/{question['id']}").json()["questionType"] == "text"


def test_patch_to_text_drops_variants(client):
    question = _create(
        client, title="Pick", questionType="variant", variants=[{"text": "A"}, {"text": "B"}], maxSelections=2
    )
    response = client.patch(f"/api/admin/questions/{question['id']}", json={"questionType": "text"})
    assert response.status_code == 200
    body = response.json()
    assert "variants" not in body
    assert body["maxSelections"] == 1


def test_admin_assigned_id_longer_than_column_is_422(client):
    response = client.post("/api/admin/questions", json={"id": "x" * 65, "title": "Too long"})
    assert response.status_code == 422
    assert client.post("/api/admin/questions", json={"id": "x" * 64, "title": "Fits"}).status_code == 201
