"""Password-gated admin sessions (separate from user authentication)."""
import hmac
from datetime import datetime, timedelta, timezone
from typing import Optional

from flask import current_app
from werkzeug.security import check_password_hash

from . import storage


def check_password(password: str) -> bool:
    """Hash check when ADMIN_PASSWORD_HASH is set, constant-time equality otherwise."""
    if not password:
        return False
    cfg = current_app.config
    pw_hash = cfg.get("ADMIN_PASSWORD_HASH")
    if pw_hash:
        return check_password_hash(pw_hash, password)
    expected = cfg.get("ADMIN_PASSWORD")
    if not expected:
        # No admin password configured: nobody gets in
        return False
    return hmac.compare_digest(expected.encode("utf-8"), password.encode("utf-8"))


def start_session(now: Optional[datetime] = None) -> dict:
    now = now or datetime.now(timezone.utc)
    storage.delete_expired_admin_sessions(now)
    ttl = timedelta(hours=current_app.config.get("ADMIN_SESSION_TTL_HOURS", 24))
    return storage.create_admin_session(now + ttl)


def end_session(session_id: Optional[str]) -> None:
    if session_id:
        storage.delete_admin_session(session_id)
