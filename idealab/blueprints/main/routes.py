from flask import current_app, jsonify, send_from_directory
from flask_login import current_user
from . import bp


@bp.get("/")
def home():
    return jsonify({
        "service": current_app.config.get("SITE_NAME", "Idea Lab"),
        "authenticated": bool(getattr(current_user, "is_authenticated", False)),
    }), 200


@bp.get("/uploads/<path:filename>")
def uploaded_file(filename):
    """Stored screenshots (listed in the admin dashboard)."""
    return send_from_directory(current_app.config["UPLOAD_FOLDER"], filename)
