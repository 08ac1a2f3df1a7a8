import uuid
from datetime import datetime, timezone


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    # Python-side default keeps microseconds so newest-first ordering is stable
    return datetime.now(timezone.utc)
