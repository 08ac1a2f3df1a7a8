import json
import logging

import pytest
from openai import OpenAIError

from idealab.services import feedback

SNEAKERS = {
    "idea": "Subscription service for rare sneakers",
    "targetCustomer": "Sneaker collectors aged 18-35",
    "problemSolved": "Hard to find authentic limited editions",
}
MODEL_ANSWER = '```html\nSure! Here is my take.\n<div class="validation-section"><h3>First impressions</h3></div>\n```'


@pytest.fixture()
def model(monkeypatch):
    calls = []
    def fake_complete(messages):
        calls.append(messages)
        return MODEL_ANSWER
    monkeypatch.setattr(feedback, "_complete", fake_complete)
    return calls


def test_validate_signed_in_stores_and_lists(client, identities, model):
    auth = {"Authorization": "Bearer sam-token"}
    r = client.post("/api/validate", json=SNEAKERS, headers=auth)
    assert r.status_code == 200
    body = r.get_json()
    assert body["idea"] == SNEAKERS["idea"]
    assert body["feedback"] == '<div class="validation-section"><h3>First impressions</h3></div>'
    assert set(body) == {"id", "idea", "targetCustomer", "problemSolved", "feedback", "createdAt"}
    assert "Sneaker collectors aged 18-35" in model[0][1]["content"]

    mine = client.get("/api/validations", headers=auth).get_json()
    assert [v["id"] for v in mine] == [body["id"]]


def test_validate_anonymous_is_allowed(client, model):
    r = client.post("/api/validate", json=SNEAKERS)
    assert r.status_code == 200


def test_validate_missing_field(client, model):
    r = client.post("/api/validate", json={**SNEAKERS, "targetCustomer": "   "})
    assert r.status_code == 400
    body = r.get_json()
    assert body["error"] == "bad_input"
    assert body["message"] == "Please fill in all three fields!"
    assert body["errors"] == ["targetCustomer: required"]
    assert model == []


def test_validate_non_object_body(client, model):
    r = client.post("/api/validate", data="idea", content_type="text/plain")
    assert r.status_code == 400


def test_validate_model_failure_is_502(client, monkeypatch):
    def broken(messages):
        raise OpenAIError("upstream timeout")
    monkeypatch.setattr(feedback, "_complete", broken)
    r = client.post("/api/validate", json=SNEAKERS)
    assert r.status_code == 502
    assert r.get_json()["error"] == "validation_failed"


def test_validate_empty_model_answer_is_502(client, monkeypatch):
    monkeypatch.setattr(feedback, "_complete", lambda messages: "```html\n```")
    r = client.post("/api/validate", json=SNEAKERS)
    assert r.status_code == 502


def test_generate_prompt_falls_back_to_template(client, monkeypatch):
    def broken(messages):
        raise OpenAIError("nope")
    monkeypatch.setattr(feedback, "_complete", broken)
    r = client.post("/api/generate-prompt", json=SNEAKERS)
    assert r.status_code == 200
    assert r.get_json()["prompt"].startswith('Create a landing page for "subscription service for rare sneakers"')


def test_clean_feedback_html_passes_clean_text_through():
    html = '<div class="validation-section"><h3>Risks</h3></div>'
    assert feedback.clean_feedback_html(html) == html
    assert feedback.clean_feedback_html("no sections at all") == "no sections at all"


def test_track_click_is_logged_only(client, caplog):
    with caplog.at_level(logging.INFO, logger="idealab"):
        r = client.post("/api/track-click", json={"company": "Acme", "linkType": "partner", "url": "https://acme.test"})
    assert r.status_code == 204
    events = [json.loads(m) for m in caplog.messages if m.startswith("{")]
    assert {"event": "link_click", "company": "Acme", "link_type": "partner", "url": "https://acme.test"} in events


def test_validate_echoes_draft_fields_unchanged(client, model):
    draft = {"idea": "A sneaker display case", "targetCustomer": "Sneaker collectors", "problemSolved": "Limited storage"}
    body = client.post("/api/validate", json=draft).get_json()
    assert {k: body[k] for k in draft} == draft
    assert body["feedback"]
