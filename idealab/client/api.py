"""HTTP client for the Idea Lab JSON API."""
import mimetypes
import os
from typing import Any, Dict, List, Optional

import requests


class ApiError(Exception):
    def __init__(self, status: int, message: str, payload: Optional[dict] = None):
        super().__init__(f"HTTP {status}: {message}" if status else message)
        self.status = status
        self.message = message
        self.payload = payload or {}


def screenshot_part(path: str):
    """(filename, bytes, content type) tuple for a multipart upload."""
    content_type = mimetypes.guess_type(path)[0] or "application/octet-stream"
    with open(path, "rb") as fh:
        return os.path.basename(path), fh.read(), content_type


class ApiClient:
    def __init__(self, base_url: str, session: Optional[requests.Session] = None,
                 timeout: float = 120, token: Optional[str] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self._csrf_token = None
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        try:
            resp = self.session.request(method, self.url(path), timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise ApiError(0, str(exc)) from exc
        if resp.status_code >= 400:
            try:
                body = resp.json()
            except ValueError:
                body = {}
            if not isinstance(body, dict):
                body = {}
            raise ApiError(resp.status_code, body.get("message") or resp.reason or "Request failed", body)
        return resp

    @staticmethod
    def _json(resp: requests.Response) -> Any:
        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()

    def _csrf_headers(self) -> Dict[str, str]:
        if self._csrf_token is None:
            self._csrf_token = self._json(self._request("GET", "/api/csrf-token"))["csrf_token"]
        # Over HTTPS the CSRF check also requires a same-origin Referer
        return {"X-CSRFToken": self._csrf_token, "Referer": f"{self.base_url}/"}

    # --- user ---
    def get_user(self) -> Optional[dict]:
        """Signed-in user, or None when the session is missing or invalid."""
        try:
            return self._json(self._request("GET", "/api/auth/user"))
        except ApiError as exc:
            if exc.status == 401:
                return None
            raise

    # --- workflows ---
    def validate(self, draft: Dict[str, str]) -> dict:
        return self._json(self._request("POST", "/api/validate", json=draft))

    def generate_prompt(self, draft: Dict[str, str]) -> str:
        return self._json(self._request("POST", "/api/generate-prompt", json=draft))["prompt"]

    def track_click(self, company: str, link_type: str, url: str) -> None:
        self._request("POST", "/api/track-click", json={"company": company, "linkType": link_type, "url": url})

    def submit(self, fields: Dict[str, str], screenshot_path: Optional[str] = None) -> dict:
        # (None, value) parts force multipart/form-data even without a file
        parts = {key: (None, value) for key, value in fields.items() if value}
        if screenshot_path:
            parts["screenshot"] = screenshot_part(screenshot_path)
        return self._json(self._request("POST", "/api/submit", files=parts))

    # --- admin ---
    def admin_login(self, password: str) -> bool:
        try:
            self._request("POST", "/api/admin/login", json={"password": password},
                          headers=self._csrf_headers())
        except ApiError as exc:
            if exc.status == 401:
                return False
            raise
        return True

    def admin_logout(self) -> None:
        self._request("POST", "/api/admin/logout", headers=self._csrf_headers())

    def admin_check(self) -> bool:
        return bool(self._json(self._request("GET", "/api/admin/check")).get("authenticated"))

    def admin_submissions(self) -> List[dict]:
        return self._json(self._request("GET", "/api/admin/submissions"))

    def admin_validations(self) -> List[dict]:
        return self._json(self._request("GET", "/api/admin/validations"))
