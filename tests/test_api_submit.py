import io
import os

from idealab.errors import PersistenceError
from idealab.services import storage

FORM = {
    "name": "Jo Park",
    "email": "jo@example.com",
    "projectName": "Napkin",
    "projectSummary": "A sketchpad for half-formed ideas",
    "siteUrl": "https://napkin.example.test",
    "whatDoYouNeed": "Early feedback",
}


def test_submit_with_screenshot(app, client):
    data = {**FORM, "screenshot": (io.BytesIO(b"\x89PNG fake"), "home page.png")}
    r = client.post("/api/submit", data=data, content_type="multipart/form-data")
    assert r.status_code == 200
    assert r.get_json()["message"].startswith("Thanks!")

    with app.app_context():
        rec = storage.get_all_submissions()[0]
    assert rec["projectName"] == "Napkin"
    assert rec["userId"] is None
    assert rec["screenshotPath"].endswith("-home_page.png")
    assert os.path.exists(os.path.join(app.config["UPLOAD_FOLDER"], rec["screenshotPath"]))

    served = client.get(f"/uploads/{rec['screenshotPath']}")
    assert served.status_code == 200
    assert served.data == b"\x89PNG fake"


def test_submit_signed_in_links_user(app, client, identities):
    r = client.post("/api/submit", data=FORM, headers={"Authorization": "Bearer sam-token"})
    assert r.status_code == 200
    mine = client.get("/api/submissions", headers={"Authorization": "Bearer sam-token"}).get_json()
    assert [s["projectName"] for s in mine] == ["Napkin"]


def test_submit_rejects_bad_url(app, client):
    r = client.post("/api/submit", data={**FORM, "siteUrl": "not-a-url"})
    assert r.status_code == 400
    assert "siteUrl: Invalid URL" in r.get_json()["errors"]
    with app.app_context():
        assert storage.get_all_submissions() == []


def test_submit_collects_every_field_error(client):
    r = client.post("/api/submit", data={"email": "nope", "projectSummary": "short"})
    errors = r.get_json()["errors"]
    assert [e.split(":")[0] for e in errors] == [
        "name", "email", "projectName", "projectSummary", "siteUrl", "whatDoYouNeed",
    ]


def test_submit_rejects_non_image(app, client):
    data = {**FORM, "screenshot": (io.BytesIO(b"MZ"), "setup.exe")}
    r = client.post("/api/submit", data=data, content_type="multipart/form-data")
    assert r.status_code == 400
    assert r.get_json()["errors"] == ["screenshot: Only image files are allowed"]
    with app.app_context():
        assert storage.get_all_submissions() == []


def test_failed_insert_removes_stored_screenshot(app, client, monkeypatch):
    def broken(data, user_id=None):
        raise PersistenceError("Failed to create submission: disk full")
    monkeypatch.setattr(storage, "create_submission", broken)
    before = set(os.listdir(app.config["UPLOAD_FOLDER"]))

    data = {**FORM, "screenshot": (io.BytesIO(b"\x89PNG fake"), "orphan.png")}
    r = client.post("/api/submit", data=data, content_type="multipart/form-data")
    assert r.status_code == 500
    assert r.get_json()["error"] == "persistence_error"
    assert set(os.listdir(app.config["UPLOAD_FOLDER"])) == before
