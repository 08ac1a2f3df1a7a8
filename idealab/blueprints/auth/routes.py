import json
from flask import current_app, redirect, request, session, url_for
from idealab.errors import InvalidToken
from idealab.services import auth_backend, credentials, tokens
from idealab.utils.helpers import absolute_url, safe_next_path
from . import bp

PKCE_VERIFIER_KEY = "oauth_code_verifier"
STATE_KIND = "oauth-state"
STATE_MAX_AGE = 10 * 60


def _auth_failed():
    return redirect("/?auth_error=1")


@bp.get("/google")
def google():
    """Entry point: hand the browser to the auth backend's Google flow (PKCE)."""
    verifier, challenge = auth_backend.new_pkce_pair()
    session[PKCE_VERIFIER_KEY] = verifier
    state = tokens.generate(STATE_KIND, safe_next_path(request.args.get("next")))
    redirect_to = absolute_url(url_for("auth.callback", state=state))
    return redirect(auth_backend.authorize_url(redirect_to, challenge))


@bp.get("/callback")
def callback():
    code = (request.args.get("code") or "").strip()
    state = (request.args.get("state") or "").strip()
    verifier = session.pop(PKCE_VERIFIER_KEY, None)
    next_path = tokens.verify(STATE_KIND, state, max_age_seconds=STATE_MAX_AGE) if state else None

    if not code or not verifier or next_path is None:
        current_app.logger.warning(json.dumps({"event": "oauth_callback", "outcome": "bad_request"}))
        return _auth_failed()

    try:
        grant = auth_backend.exchange_code(code, verifier)
        # Creates the application user on first sight
        user = credentials.verify_token(grant["access_token"])
    except InvalidToken:
        current_app.logger.warning(json.dumps({"event": "oauth_callback", "outcome": "invalid_token"}))
        return _auth_failed()

    current_app.logger.info(json.dumps({"event": "oauth_callback", "outcome": "ok", "user_id": user.id}))
    resp = redirect(safe_next_path(next_path))
    resp.set_cookie(
        current_app.config["AUTH_COOKIE_NAME"],
        grant["access_token"],
        max_age=grant.get("expires_in"),
        httponly=True,
        samesite="Lax",
        secure=current_app.config.get("AUTH_COOKIE_SECURE", False),
    )
    return resp


@bp.route("/logout", methods=["GET", "POST"])
def logout():
    resp = redirect("/")
    resp.delete_cookie(current_app.config["AUTH_COOKIE_NAME"])
    return resp
