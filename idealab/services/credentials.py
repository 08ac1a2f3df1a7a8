"""Credential verifier: bearer token -> application user (created on first sight)."""
import json
from typing import Any, Dict, Optional

from flask import current_app
from flask_login import UserMixin

from idealab.errors import InvalidToken, PersistenceConflict
from . import auth_backend, storage


class AuthenticatedUser(UserMixin):
    """Resolved identity attached to the request (``current_user``)."""

    def __init__(self, record: Dict[str, Any]):
        self.id = record["id"]
        self.external_id = record.get("externalId")
        self.email = record["email"]
        self.name = record.get("name") or ""
        self.avatar = record.get("avatar")
        self.created_at = record.get("createdAt")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "externalId": self.external_id,
            "email": self.email,
            "name": self.name,
            "avatar": self.avatar,
            "createdAt": self.created_at,
        }


def display_name(identity: Dict[str, Any]) -> str:
    meta = identity.get("user_metadata") or {}
    name = (meta.get("full_name") or meta.get("name") or "").strip()
    if name:
        return name
    email = identity.get("email") or ""
    return email.split("@")[0] or "Unknown User"


def _avatar(identity: Dict[str, Any]) -> Optional[str]:
    meta = identity.get("user_metadata") or {}
    return meta.get("avatar_url") or meta.get("picture")


def resolve_user(identity: Dict[str, Any]) -> Dict[str, Any]:
    """Map a backend identity to an application user row, creating it if needed."""
    external_id = identity["id"]
    email = identity["email"].strip().lower()

    user = storage.get_user_by_external_id(external_id)
    if user:
        return user

    user = storage.get_user_by_email(email)
    if user:
        if not user.get("externalId"):
            current_app.logger.info(json.dumps({"event": "user_identity_attached", "user_id": user["id"]}))
            return storage.attach_external_id(user["id"], external_id, avatar=_avatar(identity))
        return user

    try:
        user = storage.create_user({
            "externalId": external_id,
            "email": email,
            "name": display_name(identity),
            "avatar": _avatar(identity),
        })
    except PersistenceConflict:
        # Lost the lookup-then-insert race; the other request created the row
        user = storage.get_user_by_email(email)
        if user is None:
            raise
        return user

    current_app.logger.info(json.dumps({"event": "user_created", "user_id": user["id"]}))
    return user


def verify_token(token: Optional[str]) -> AuthenticatedUser:
    if not token:
        raise InvalidToken()
    identity = auth_backend.fetch_identity(token)
    return AuthenticatedUser(resolve_user(identity))
