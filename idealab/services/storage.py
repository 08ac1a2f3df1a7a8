"""Persistence adapter.

The only place that knows both naming conventions: rows use snake_case
columns, everything above this module (views, serializers, the client)
uses camelCase field names. Records go out as plain dicts.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from idealab.errors import PersistenceConflict, PersistenceError
from idealab.extensions import db
from idealab.models import AdminSession, Submission, User, Validation

Record = Dict[str, Any]

# app field -> column
USER_FIELDS = {
    "id": "id",
    "externalId": "external_id",
    "email": "email",
    "name": "name",
    "avatar": "avatar",
    "createdAt": "created_at",
}
VALIDATION_FIELDS = {
    "id": "id",
    "userId": "user_id",
    "idea": "idea",
    "targetCustomer": "target_customer",
    "problemSolved": "problem_solved",
    "feedback": "feedback",
    "createdAt": "created_at",
}
SUBMISSION_FIELDS = {
    "id": "id",
    "userId": "user_id",
    "name": "name",
    "email": "email",
    "projectName": "project_name",
    "projectSummary": "project_summary",
    "siteUrl": "site_url",
    "whatDoYouNeed": "what_do_you_need",
    "screenshotPath": "screenshot_path",
    "createdAt": "created_at",
}
ADMIN_SESSION_FIELDS = {
    "id": "id",
    "createdAt": "created_at",
    "expiresAt": "expires_at",
}

# Generated by the store on insert; callers never supply them
_GENERATED = {"id", "createdAt"}


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; every stored value is UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _out(value: Any) -> Any:
    if isinstance(value, datetime):
        return _as_utc(value).isoformat()
    return value


def to_record(row, fields: Dict[str, str]) -> Optional[Record]:
    """Row -> camelCase dict (``None`` passes through)."""
    if row is None:
        return None
    return {app_key: _out(getattr(row, column)) for app_key, column in fields.items()}


def to_columns(data: Dict[str, Any], fields: Dict[str, str]) -> Dict[str, Any]:
    """camelCase dict -> column kwargs; unknown and generated keys are dropped."""
    return {
        column: data[app_key]
        for app_key, column in fields.items()
        if app_key in data and app_key not in _GENERATED
    }


def _insert(row, what: str):
    try:
        db.session.add(row)
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        raise PersistenceConflict(f"Failed to create {what}: {exc.orig}") from exc
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise PersistenceError(f"Failed to create {what}: {exc}") from exc
    return row


def _first(stmt, what: str):
    try:
        return db.session.execute(stmt).scalar_one_or_none()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise PersistenceError(f"Failed to get {what}: {exc}") from exc


def _all(stmt, what: str) -> list:
    try:
        return list(db.session.execute(stmt).scalars())
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise PersistenceError(f"Failed to get {what}: {exc}") from exc


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

def get_user(user_id: str) -> Optional[Record]:
    row = _first(db.select(User).where(User.id == user_id), "user")
    return to_record(row, USER_FIELDS)


def get_user_by_external_id(external_id: str) -> Optional[Record]:
    row = _first(db.select(User).where(User.external_id == external_id), "user")
    return to_record(row, USER_FIELDS)


def get_user_by_email(email: str) -> Optional[Record]:
    row = _first(db.select(User).where(User.email == email), "user")
    return to_record(row, USER_FIELDS)


def create_user(data: Dict[str, Any]) -> Record:
    row = _insert(User(**to_columns(data, USER_FIELDS)), "user")
    return to_record(row, USER_FIELDS)


def attach_external_id(user_id: str, external_id: str, avatar: Optional[str] = None) -> Record:
    """Link an existing (email-only) user to the auth backend identity."""
    row = _first(db.select(User).where(User.id == user_id), "user")
    if row is None:
        raise PersistenceError(f"Failed to update user: no user with id {user_id}")
    row.external_id = external_id
    if avatar and not row.avatar:
        row.avatar = avatar
    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        raise PersistenceConflict(f"Failed to update user: {exc.orig}") from exc
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise PersistenceError(f"Failed to update user: {exc}") from exc
    return to_record(row, USER_FIELDS)


# ---------------------------------------------------------------------------
# Validations
# ---------------------------------------------------------------------------

def create_validation(data: Dict[str, Any], feedback: str, user_id: Optional[str] = None) -> Record:
    cols = to_columns(data, VALIDATION_FIELDS)
    cols.update(feedback=feedback, user_id=user_id)
    row = _insert(Validation(**cols), "validation")
    return to_record(row, VALIDATION_FIELDS)


def get_user_validations(user_id: str) -> List[Record]:
    stmt = (
        db.select(Validation)
        .where(Validation.user_id == user_id)
        .order_by(Validation.created_at.desc())
    )
    return [to_record(r, VALIDATION_FIELDS) for r in _all(stmt, "user validations")]


def get_all_validations() -> List[Record]:
    stmt = db.select(Validation).order_by(Validation.created_at.desc())
    return [to_record(r, VALIDATION_FIELDS) for r in _all(stmt, "all validations")]


# ---------------------------------------------------------------------------
# Submissions
# ---------------------------------------------------------------------------

def create_submission(data: Dict[str, Any], user_id: Optional[str] = None) -> Record:
    cols = to_columns(data, SUBMISSION_FIELDS)
    cols["user_id"] = user_id
    cols.setdefault("what_do_you_need", "")
    row = _insert(Submission(**cols), "submission")
    return to_record(row, SUBMISSION_FIELDS)


def get_user_submissions(user_id: str) -> List[Record]:
    stmt = (
        db.select(Submission)
        .where(Submission.user_id == user_id)
        .order_by(Submission.created_at.desc())
    )
    return [to_record(r, SUBMISSION_FIELDS) for r in _all(stmt, "user submissions")]


def get_all_submissions() -> List[Record]:
    stmt = db.select(Submission).order_by(Submission.created_at.desc())
    return [to_record(r, SUBMISSION_FIELDS) for r in _all(stmt, "all submissions")]


# ---------------------------------------------------------------------------
# Admin sessions
# ---------------------------------------------------------------------------

def create_admin_session(expires_at: datetime) -> Record:
    row = _insert(AdminSession(expires_at=_as_utc(expires_at)), "admin session")
    return to_record(row, ADMIN_SESSION_FIELDS)


def get_admin_session(session_id: str) -> Optional[Record]:
    row = _first(db.select(AdminSession).where(AdminSession.id == session_id), "admin session")
    return to_record(row, ADMIN_SESSION_FIELDS)


def delete_admin_session(session_id: str) -> None:
    try:
        db.session.execute(db.delete(AdminSession).where(AdminSession.id == session_id))
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise PersistenceError(f"Failed to delete admin session: {exc}") from exc


def delete_expired_admin_sessions(now: Optional[datetime] = None) -> int:
    """Delete every session whose expiry is strictly before ``now``."""
    cutoff = _as_utc(now) if now is not None else datetime.now(timezone.utc)
    try:
        result = db.session.execute(
            db.delete(AdminSession).where(AdminSession.expires_at < cutoff)
        )
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise PersistenceError(f"Failed to delete expired admin sessions: {exc}") from exc
    return result.rowcount or 0


def is_admin_session_active(session_id: Optional[str], now: Optional[datetime] = None) -> bool:
    if not session_id:
        return False
    row = _first(db.select(AdminSession).where(AdminSession.id == session_id), "admin session")
    if row is None:
        return False
    now = _as_utc(now) if now is not None else datetime.now(timezone.utc)
    return _as_utc(row.expires_at) > now
