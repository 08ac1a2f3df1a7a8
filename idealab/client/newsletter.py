"""Best-effort newsletter registration. Never raises on transport or provider errors."""
import logging
import os
from typing import Optional

import requests

logger = logging.getLogger(__name__)

NEWSLETTER_URL = os.getenv("NEWSLETTER_URL", "https://napkin.com/temp/form-submit/")
NEWSLETTER_TIMEOUT = float(os.getenv("NEWSLETTER_TIMEOUT", "10"))


def name_for(user: dict) -> str:
    """Profile name, else the local part of the email."""
    name = (user.get("name") or "").strip()
    if name:
        return name
    return (user.get("email") or "").split("@")[0]


class NewsletterClient:
    def __init__(self, url: str = NEWSLETTER_URL, timeout: float = NEWSLETTER_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def register(self, email: str, name: str) -> bool:
        if not email:
            return False
        try:
            resp = self.session.post(self.url, json={"name": name, "email": email}, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("newsletter registration failed for %s: %s", email, exc)
            return False
        if not resp.ok:
            logger.warning("newsletter registration rejected for %s: HTTP %s", email, resp.status_code)
            return False
        logger.info("newsletter registration ok for %s", email)
        return True
