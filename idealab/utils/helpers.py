from urllib.parse import urljoin
from flask import current_app

def absolute_url(path: str) -> str:
    base = current_app.config["APP_BASE_URL"].rstrip("/") + "/"
    return urljoin(base, path.lstrip("/"))

# Only allow internal paths like "/dashboard" (no external URLs or "//" protocol-relative).
def safe_next_path(next_raw: str | None, default: str = "/") -> str:
    next_raw = (next_raw or "").strip()
    if next_raw.startswith("/") and not next_raw.startswith("//"):
        return next_raw
    return default
