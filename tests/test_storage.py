from datetime import datetime, timedelta, timezone

import pytest

from idealab.errors import PersistenceConflict
from idealab.extensions import db
from idealab.models import Validation
from idealab.services import storage


def _user(**over):
    data = {"externalId": "ext-1", "email": "ann@example.com", "name": "Ann"}
    data.update(over)
    return storage.create_user(data)


def test_records_use_app_field_names(app):
    with app.app_context():
        u = _user()
        assert set(u) == set(storage.USER_FIELDS)
        assert u["createdAt"].endswith("+00:00")
        assert storage.get_user_by_external_id("ext-1")["id"] == u["id"]
        assert storage.get_user(u["id"])["email"] == "ann@example.com"
        assert storage.get_user("missing") is None


def test_to_columns_drops_generated_and_unknown_keys():
    cols = storage.to_columns(
        {"id": "x", "createdAt": "y", "targetCustomer": "devs", "bogus": 1},
        storage.VALIDATION_FIELDS,
    )
    assert cols == {"target_customer": "devs"}


def test_duplicate_email_is_a_conflict(app):
    with app.app_context():
        _user()
        with pytest.raises(PersistenceConflict) as exc:
            _user(externalId="ext-2")
        assert exc.value.status == 409
        assert exc.value.message.startswith("Failed to create user")


def test_attach_external_id_keeps_existing_avatar(app):
    with app.app_context():
        u = _user(externalId=None, avatar="https://img.example.test/a.png")
        linked = storage.attach_external_id(u["id"], "ext-9", avatar="https://img.example.test/b.png")
        assert linked["externalId"] == "ext-9"
        assert linked["avatar"] == "https://img.example.test/a.png"


def test_validations_newest_first_and_scoped_to_user(app):
    with app.app_context():
        u = _user()
        for idea in ("first", "second", "third"):
            storage.create_validation(
                {"idea": idea, "targetCustomer": "devs", "problemSolved": "toil"}, "<p>ok</p>", user_id=u["id"]
            )
        anon = storage.create_validation(
            {"idea": "anon", "targetCustomer": "devs", "problemSolved": "toil"}, "<p>ok</p>"
        )
        assert anon["userId"] is None

        mine = storage.get_user_validations(u["id"])
        assert [v["idea"] for v in mine] == ["third", "second", "first"]
        assert [v["idea"] for v in storage.get_all_validations()][0] == "anon"
        assert len(storage.get_all_validations()) == 4


def test_submission_defaults(app):
    with app.app_context():
        rec = storage.create_submission({
            "name": "Jo", "email": "jo@example.com", "projectName": "Napkin",
            "projectSummary": "A sketchpad for ideas", "siteUrl": "https://napkin.example.test",
        })
        assert rec["whatDoYouNeed"] == ""
        assert rec["screenshotPath"] is None
        assert storage.get_all_submissions()[0]["id"] == rec["id"]


def test_delete_expired_admin_sessions_is_strict(app):
    now = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
    with app.app_context():
        past = storage.create_admin_session(now - timedelta(seconds=1))
        exact = storage.create_admin_session(now)
        future = storage.create_admin_session(now + timedelta(hours=1))

        assert storage.delete_expired_admin_sessions(now) == 1
        assert storage.get_admin_session(past["id"]) is None
        assert storage.get_admin_session(exact["id"]) is not None
        assert storage.get_admin_session(future["id"]) is not None


def test_admin_session_activity(app):
    now = datetime.now(timezone.utc)
    with app.app_context():
        live = storage.create_admin_session(now + timedelta(hours=1))
        dead = storage.create_admin_session(now - timedelta(hours=1))
        assert storage.is_admin_session_active(live["id"])
        assert not storage.is_admin_session_active(dead["id"])
        assert not storage.is_admin_session_active(None)
        storage.delete_admin_session(live["id"])
        assert not storage.is_admin_session_active(live["id"])


def test_naive_datetimes_are_read_as_utc(app):
    with app.app_context():
        rec = storage.create_validation({"idea": "i", "targetCustomer": "t", "problemSolved": "p"}, "f")
        row = db.session.get(Validation, rec["id"])
        row.created_at = datetime(2026, 3, 1, 8, 30)
        db.session.commit()
        assert storage.get_all_validations()[0]["createdAt"] == "2026-03-01T08:30:00+00:00"
