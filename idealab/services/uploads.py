import os
import uuid
from typing import Optional

from flask import current_app
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from idealab.errors import BadInput

ALLOWED_EXTENSIONS = {"png", "jpg", "jpeg", "gif", "webp"}


def _extension(filename: str) -> str:
    return filename.rsplit(".", 1)[-1].lower() if "." in filename else ""


def save_screenshot(file: Optional[FileStorage]) -> Optional[str]:
    """Store an uploaded screenshot; returns the stored filename or None."""
    if file is None or not file.filename:
        return None
    filename = secure_filename(file.filename)
    if _extension(filename) not in ALLOWED_EXTENSIONS:
        raise BadInput(["screenshot: Only image files are allowed"])

    folder = current_app.config["UPLOAD_FOLDER"]
    os.makedirs(folder, exist_ok=True)
    stored = f"{uuid.uuid4().hex}-{filename}"
    file.save(os.path.join(folder, stored))
    return stored


def discard_screenshot(stored: Optional[str]) -> None:
    """Remove a stored screenshot whose submission was never recorded."""
    if not stored:
        return
    try:
        os.remove(os.path.join(current_app.config["UPLOAD_FOLDER"], stored))
    except FileNotFoundError:
        pass
