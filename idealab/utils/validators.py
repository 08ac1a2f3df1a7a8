import re
from typing import Any, Dict, List
from urllib.parse import urlparse

# Simple, pragmatic patterns
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_HOST_RE = re.compile(r"^[A-Za-z0-9.\-]+(:\d+)?$")

SUMMARY_MIN_LEN = 10
DRAFT_FIELDS = ("idea", "targetCustomer", "problemSolved")
SUBMISSION_FIELDS = ("name", "email", "projectName", "projectSummary", "siteUrl", "whatDoYouNeed")

def clean_str(val: Any, max_len: int = 10_000) -> str | None:
    """
    Trim and enforce max length. Returns None if empty after cleaning.
    """
    if val is None:
        return None
    s = str(val).strip()
    if not s:
        return None
    return s[:max_len]

def is_valid_email(val: str | None) -> bool:
    if not val:
        return False
    return bool(_EMAIL_RE.match(val))

def is_valid_url(val: str | None) -> bool:
    if not val:
        return False
    try:
        u = urlparse(val.strip())
    except ValueError:
        return False
    return u.scheme in ("http", "https") and bool(u.netloc) and bool(_HOST_RE.match(u.netloc.rsplit("@", 1)[-1]))

def validate_draft(payload: Any) -> List[str]:
    """All three idea fields are required free text."""
    if not isinstance(payload, dict):
        return ["payload: must be a JSON object"]
    return [f"{key}: required" for key in DRAFT_FIELDS if not clean_str(payload.get(key))]

def validate_submission(data: Dict[str, Any]) -> List[str]:
    errors = []
    if not clean_str(data.get("name")):
        errors.append("name: Name is required")
    if not is_valid_email(clean_str(data.get("email"))):
        errors.append("email: Invalid email address")
    if not clean_str(data.get("projectName")):
        errors.append("projectName: Project name is required")
    if len(clean_str(data.get("projectSummary")) or "") < SUMMARY_MIN_LEN:
        errors.append(f"projectSummary: Project summary must be at least {SUMMARY_MIN_LEN} characters")
    if not is_valid_url(clean_str(data.get("siteUrl"))):
        errors.append("siteUrl: Invalid URL")
    if not clean_str(data.get("whatDoYouNeed")):
        errors.append("whatDoYouNeed: Please tell us what you need")
    return errors

def clean_fields(data: Dict[str, Any], keys) -> Dict[str, str]:
    return {k: clean_str(data.get(k)) or "" for k in keys}
