import json
from flask import current_app, jsonify, request, session
from idealab.extensions import limiter
from idealab.services import admin, storage
from idealab.services.policy import ADMIN_SESSION_KEY, require_admin
from . import bp


@bp.post("/login")
@limiter.limit("5 per minute; 30 per hour")
def login():
    data = request.get_json(silent=True) or {}
    password = data.get("password") or ""
    if not admin.check_password(password):
        current_app.logger.warning(json.dumps({"event": "admin_login", "outcome": "denied"}))
        return jsonify({"error": "invalid_password", "message": "Invalid password"}), 401

    record = admin.start_session()
    session[ADMIN_SESSION_KEY] = record["id"]
    current_app.logger.info(json.dumps({"event": "admin_login", "outcome": "ok", "session_id": record["id"]}))
    return jsonify({"message": "Login successful", "expiresAt": record["expiresAt"]}), 200


@bp.post("/logout")
def logout():
    admin.end_session(session.pop(ADMIN_SESSION_KEY, None))
    return jsonify({"message": "Logged out"}), 200


@bp.get("/check")
def check():
    active = storage.is_admin_session_active(session.get(ADMIN_SESSION_KEY))
    return jsonify({"authenticated": active}), 200


@bp.get("/submissions")
@require_admin
def submissions():
    return jsonify(storage.get_all_submissions()), 200


@bp.get("/validations")
@require_admin
def validations():
    return jsonify(storage.get_all_validations()), 200
