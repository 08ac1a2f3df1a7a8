import pytest
import requests

from idealab.errors import InvalidToken
from idealab.services import auth_backend, credentials, storage


class FakeResponse:
    def __init__(self, status_code, payload=None):
        self.status_code, self._payload = status_code, payload
    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


def test_empty_token_is_invalid(app):
    with app.test_request_context("/"):
        with pytest.raises(InvalidToken):
            credentials.verify_token("")


def test_fetch_identity_rejected_by_backend(app, monkeypatch):
    seen = {}
    def fake_get(url, headers, timeout):
        seen.update(url=url, headers=headers, timeout=timeout)
        return FakeResponse(401, {"msg": "bad jwt"})
    monkeypatch.setattr(auth_backend.requests, "get", fake_get)
    with app.test_request_context("/"):
        with pytest.raises(InvalidToken):
            auth_backend.fetch_identity("nope")
    assert seen["url"] == "https://auth.example.test/auth/v1/user"
    assert seen["headers"]["Authorization"] == "Bearer nope"
    assert seen["headers"]["apikey"] == "test-anon-key-0000000000"


def test_fetch_identity_unreachable_backend(app, monkeypatch):
    def boom(*a, **kw):
        raise requests.ConnectionError("down")
    monkeypatch.setattr(auth_backend.requests, "get", boom)
    with app.test_request_context("/"):
        with pytest.raises(InvalidToken):
            auth_backend.fetch_identity("t")


def test_fetch_identity_requires_id_and_email(app, monkeypatch):
    monkeypatch.setattr(auth_backend.requests, "get", lambda *a, **kw: FakeResponse(200, {"id": "x"}))
    with app.test_request_context("/"):
        with pytest.raises(InvalidToken):
            auth_backend.fetch_identity("t")


def test_display_name_fallbacks(identities):
    assert credentials.display_name(identities["sam-token"]) == "Sam Lee"
    assert credentials.display_name(identities["alex-token"]) == "alex.doe"
    assert credentials.display_name({"email": "", "user_metadata": None}) == "Unknown User"


def test_first_sight_creates_user_once(app, identities):
    with app.test_request_context("/"):
        first = credentials.verify_token("sam-token")
        again = credentials.verify_token("sam-token")
        assert first.id == again.id
        assert first.to_dict()["name"] == "Sam Lee"
        assert first.avatar == "https://img.example.test/sam.png"
        assert storage.get_user_by_email("sam@example.com")["id"] == first.id


def test_existing_email_user_gets_identity_attached(app, identities):
    with app.test_request_context("/"):
        existing = storage.create_user({"email": "alex.doe@example.com", "name": "Alex"})
        user = credentials.verify_token("alex-token")
        assert user.id == existing["id"]
        assert user.external_id == "ext-alex"
        assert user.name == "Alex"


def test_lost_insert_race_refetches(app, identities, monkeypatch):
    with app.test_request_context("/"):
        winner = storage.create_user({"externalId": "ext-other", "email": "sam@example.com", "name": "Sam"})
        real_lookup = storage.get_user_by_email
        calls = []
        def racing_lookup(email):
            calls.append(email)
            # The row "appears" between the lookup and the insert
            return None if len(calls) == 1 else real_lookup(email)
        monkeypatch.setattr(storage, "get_user_by_email", racing_lookup)

        user = credentials.resolve_user(identities["sam-token"])
        assert user["id"] == winner["id"]
        assert len(calls) == 2
