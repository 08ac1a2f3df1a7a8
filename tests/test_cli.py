from datetime import datetime, timedelta, timezone

from werkzeug.security import check_password_hash

from idealab.services import storage


def test_sessions_purge(app):
    with app.app_context():
        storage.create_admin_session(datetime.now(timezone.utc) - timedelta(hours=1))
        storage.create_admin_session(datetime.now(timezone.utc) + timedelta(hours=1))
    result = app.test_cli_runner().invoke(args=["sessions", "purge"])
    assert result.exit_code == 0
    assert "Deleted 1 expired admin session(s)" in result.output


def test_admin_hash_password(app):
    runner = app.test_cli_runner()
    short = runner.invoke(args=["admin", "hash-password", "--password", "short"])
    assert short.exit_code != 0
    ok = runner.invoke(args=["admin", "hash-password", "--password", "correct horse"])
    assert ok.exit_code == 0
    assert check_password_hash(ok.output.strip(), "correct horse")
