from typing import Any, Optional
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired
from flask import current_app

def _serializer() -> URLSafeTimedSerializer:
    secret = current_app.config["SECRET_KEY"]
    salt = current_app.config.get("OAUTH_STATE_SALT", "oauth-state-v1")
    return URLSafeTimedSerializer(secret_key=secret, salt=salt)

def generate(kind: str, payload: Any) -> str:
    """
    kind: what the token is for (e.g. 'oauth-state')
    payload: small JSON-serializable value carried through the redirect.
    """
    return _serializer().dumps({"k": kind, "p": payload})

def verify(kind: str, token: str, max_age_seconds: int) -> Optional[Any]:
    try:
        data = _serializer().loads(token, max_age=max_age_seconds)
    except (BadSignature, SignatureExpired):
        return None
    if not isinstance(data, dict) or data.get("k") != kind:
        return None
    return data.get("p")
