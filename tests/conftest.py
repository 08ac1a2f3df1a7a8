import os
# Ensure the app factory picks the Testing config & SQLite memory DB
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("TEST_DATABASE_URL", "sqlite:///:memory:")

import pytest
from idealab import create_app
from idealab.errors import InvalidToken
from idealab.extensions import db
from idealab.services import auth_backend

SAM = {
    "id": "ext-sam",
    "email": "sam@example.com",
    "user_metadata": {"full_name": "Sam Lee", "avatar_url": "https://img.example.test/sam.png"},
}
ALEX = {"id": "ext-alex", "email": "alex.doe@example.com", "user_metadata": {}}


@pytest.fixture(scope="session")
def app(tmp_path_factory):
    app = create_app()
    app.config.update(
        TESTING=True,
        SQLALCHEMY_DATABASE_URI="sqlite:///:memory:",
        APP_BASE_URL="http://example.test",
        WTF_CSRF_ENABLED=False,
        UPLOAD_FOLDER=str(tmp_path_factory.mktemp("uploads")),
        APP_ENV="testing",
    )
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.drop_all()

@pytest.fixture()
def client(app):
    return app.test_client()

@pytest.fixture()
def identities(monkeypatch):
    """Token -> backend identity; anything else is rejected like the real backend."""
    known = {"sam-token": SAM, "alex-token": ALEX}

    def fake_fetch_identity(token):
        if token not in known:
            raise InvalidToken()
        return known[token]

    monkeypatch.setattr(auth_backend, "fetch_identity", fake_fetch_identity)
    return known

@pytest.fixture(autouse=True)
def _db_clean(app):
    # Clean BEFORE each test
    with app.app_context():
        db.session.rollback()
        for tbl in reversed(db.metadata.sorted_tables):
            db.session.execute(tbl.delete())
        db.session.commit()
    yield
    # And AFTER each test (keeps state hermetic even if a test fails mid-transaction)
    with app.app_context():
        db.session.rollback()
        for tbl in reversed(db.metadata.sorted_tables):
            db.session.execute(tbl.delete())
        db.session.commit()
