import json
from flask import current_app, jsonify, request
from idealab.errors import BadInput
from idealab.extensions import limiter
from idealab.services import feedback, storage
from idealab.services.policy import current_user_id, optional_auth
from idealab.utils.validators import DRAFT_FIELDS, validate_draft
from . import bp

_PUBLIC_FIELDS = ("id", "idea", "targetCustomer", "problemSolved", "feedback", "createdAt")


def _read_draft():
    payload = request.get_json(silent=True)
    errors = validate_draft(payload)
    if errors:
        raise BadInput(errors, "Please fill in all three fields!")
    return {key: str(payload[key]) for key in DRAFT_FIELDS}


@bp.post("/validate")
@limiter.limit("10 per minute; 60 per hour")
@optional_auth
def validate_idea():
    """Generate AI feedback for an idea and store the exchange."""
    draft = _read_draft()
    text = feedback.generate_feedback(draft)
    uid = current_user_id()
    record = storage.create_validation(draft, text, user_id=uid)

    current_app.logger.info(json.dumps({
        "event": "validation_created",
        "validation_id": record["id"],
        "user_id": uid,
        "feedback_len": len(text),
    }))
    return jsonify({k: record[k] for k in _PUBLIC_FIELDS}), 200


@bp.post("/generate-prompt")
@limiter.limit("10 per minute; 60 per hour")
def generate_prompt():
    """Landing-page prompt for a validated idea (template fallback on AI failure)."""
    draft = _read_draft()
    return jsonify({"prompt": feedback.generate_landing_prompt(draft)}), 200
