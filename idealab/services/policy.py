from functools import wraps
from flask import current_app, g, jsonify, session
from flask_login import current_user
from idealab.errors import AppError, AuthRequired, InvalidToken
from . import storage
from .credentials import verify_token

ADMIN_SESSION_KEY = "admin_session_id"


def extract_token(req):
    """Bearer header first, then the auth cookie."""
    header = (req.headers.get("Authorization") or "").strip()
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    cookie = req.cookies.get(current_app.config.get("AUTH_COOKIE_NAME", "sb-access-token"))
    return cookie or None


def resolve_request_user(req):
    """Flask-Login request loader. Records why resolution failed on ``g``."""
    token = extract_token(req)
    if not token:
        g.auth_error = "missing"
        return None
    try:
        return verify_token(token)
    except InvalidToken:
        g.auth_error = "invalid"
        return None


def require_auth(fn):
    @wraps(fn)
    def _wrap(*args, **kwargs):
        if not current_user.is_authenticated:
            err = InvalidToken() if g.get("auth_error") == "invalid" else AuthRequired()
            return _deny(err)
        return fn(*args, **kwargs)
    return _wrap


def optional_auth(fn):
    @wraps(fn)
    def _wrap(*args, **kwargs):
        # Touch current_user so the token is resolved up front; never blocks
        current_user.is_authenticated
        return fn(*args, **kwargs)
    return _wrap


def current_user_id():
    if getattr(current_user, "is_authenticated", False):
        return current_user.id
    return None


class AdminRequired(AppError):
    code = "admin_required"
    status = 401
    message = "Admin authentication required"


def require_admin(fn):
    @wraps(fn)
    def _wrap(*args, **kwargs):
        if not storage.is_admin_session_active(session.get(ADMIN_SESSION_KEY)):
            return _deny(AdminRequired())
        return fn(*args, **kwargs)
    return _wrap


def _deny(err: AppError):
    return jsonify(err.to_dict()), err.status
