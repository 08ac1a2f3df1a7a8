import json
from flask import current_app, jsonify, request
from flask_wtf.csrf import generate_csrf
from idealab.extensions import limiter
from . import bp


@bp.post("/track-click")
@limiter.limit("60 per minute")
def track_click():
    """Outbound partner link clicks; logged only."""
    data = request.get_json(silent=True) or {}
    current_app.logger.info(json.dumps({
        "event": "link_click",
        "company": str(data.get("company") or "")[:64],
        "link_type": str(data.get("linkType") or "")[:32],
        "url": str(data.get("url") or "")[:512],
    }))
    return "", 204


@bp.get("/csrf-token")
def csrf_token():
    token = generate_csrf()
    resp = jsonify({"csrf_token": token})
    # keep tokens fresh; avoid caches holding stale tokens
    resp.headers["Cache-Control"] = "no-store"
    return resp
