from flask import jsonify
from flask_login import current_user
from idealab.services import storage
from idealab.services.policy import require_auth
from . import bp


@bp.get("/auth/user")
@require_auth
def auth_user():
    """Resolved user for the bearer token / auth cookie, or 401."""
    return jsonify(current_user.to_dict()), 200


@bp.get("/validations")
@require_auth
def my_validations():
    return jsonify(storage.get_user_validations(current_user.id)), 200


@bp.get("/submissions")
@require_auth
def my_submissions():
    return jsonify(storage.get_user_submissions(current_user.id)), 200
