"""Thin HTTP client for the managed auth backend (GoTrue API)."""
import base64
import hashlib
import secrets
from typing import Any, Dict
from urllib.parse import urlencode

import requests
from flask import current_app

from idealab.errors import InvalidToken


def _base_url() -> str:
    return (current_app.config.get("SUPABASE_URL") or "").rstrip("/")


def _headers(token: str = None) -> Dict[str, str]:
    headers = {"apikey": current_app.config.get("SUPABASE_ANON_KEY") or ""}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def fetch_identity(token: str) -> Dict[str, Any]:
    """Exchange an access token for the backend's user identity.

    Raises InvalidToken if the backend rejects the token, cannot be reached,
    or answers without an identity.
    """
    url = f"{_base_url()}/auth/v1/user"
    timeout = current_app.config.get("AUTH_BACKEND_TIMEOUT", 10)
    try:
        resp = requests.get(url, headers=_headers(token), timeout=timeout)
    except requests.RequestException as exc:
        current_app.logger.warning("auth backend unreachable: %s", exc)
        raise InvalidToken() from exc

    if resp.status_code != 200:
        raise InvalidToken()
    try:
        data = resp.json()
    except ValueError as exc:
        raise InvalidToken() from exc
    if not isinstance(data, dict) or not data.get("id") or not data.get("email"):
        raise InvalidToken()
    return data


def new_pkce_pair():
    """Return (verifier, S256 challenge)."""
    verifier = secrets.token_urlsafe(64)
    digest = hashlib.sha256(verifier.encode("ascii")).digest()
    challenge = base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")
    return verifier, challenge


def authorize_url(redirect_to: str, code_challenge: str) -> str:
    params = {
        "provider": current_app.config.get("OAUTH_PROVIDER", "google"),
        "redirect_to": redirect_to,
        "code_challenge": code_challenge,
        "code_challenge_method": "s256",
    }
    return f"{_base_url()}/auth/v1/authorize?{urlencode(params)}"


def exchange_code(auth_code: str, code_verifier: str) -> Dict[str, Any]:
    """PKCE code exchange; returns the backend's session payload."""
    url = f"{_base_url()}/auth/v1/token?grant_type=pkce"
    timeout = current_app.config.get("AUTH_BACKEND_TIMEOUT", 10)
    try:
        resp = requests.post(
            url,
            json={"auth_code": auth_code, "code_verifier": code_verifier},
            headers=_headers(),
            timeout=timeout,
        )
    except requests.RequestException as exc:
        current_app.logger.warning("auth backend unreachable: %s", exc)
        raise InvalidToken() from exc

    if resp.status_code != 200:
        raise InvalidToken()
    try:
        data = resp.json()
    except ValueError as exc:
        raise InvalidToken() from exc
    if not data.get("access_token"):
        raise InvalidToken()
    return data
