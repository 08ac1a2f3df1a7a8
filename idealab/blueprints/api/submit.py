import json
from flask import current_app, jsonify, request
from idealab.errors import BadInput, PersistenceError
from idealab.services import storage
from idealab.services.policy import current_user_id, optional_auth
from idealab.services.uploads import discard_screenshot, save_screenshot
from idealab.utils.validators import SUBMISSION_FIELDS, clean_fields, validate_submission
from . import bp


@bp.post("/submit")
@optional_auth
def submit_project():
    """Multipart project listing with an optional screenshot."""
    data = clean_fields(request.form, SUBMISSION_FIELDS)
    errors = validate_submission(data)
    if errors:
        raise BadInput(errors)

    data["screenshotPath"] = save_screenshot(request.files.get("screenshot"))
    uid = current_user_id()
    try:
        record = storage.create_submission(data, user_id=uid)
    except PersistenceError:
        discard_screenshot(data["screenshotPath"])
        raise

    current_app.logger.info(json.dumps({
        "event": "submission_created",
        "submission_id": record["id"],
        "user_id": uid,
        "has_screenshot": bool(record["screenshotPath"]),
    }))
    return jsonify({"message": "Thanks! Your project was submitted. We'll share feedback soon."}), 200
