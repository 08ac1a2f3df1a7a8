"""Admin dashboard client: one fetch per list, pages sliced locally."""
import math
from dataclasses import dataclass
from typing import List, Optional

from idealab.errors import AuthRequired

from .api import ApiClient

PAGE_SIZE = 10


@dataclass(frozen=True)
class Page:
    items: List
    page: int
    total_pages: int
    total: int


def paginate(items: List, page: int, per_page: int = PAGE_SIZE) -> Page:
    """Slice ``items`` for a 1-based ``page``; out-of-range pages are clamped."""
    total_pages = max(1, math.ceil(len(items) / per_page))
    page = min(max(1, page), total_pages)
    start = (page - 1) * per_page
    return Page(items=items[start:start + per_page], page=page,
                total_pages=total_pages, total=len(items))


class AdminDashboard:
    def __init__(self, api: ApiClient):
        self.api = api
        self.authenticated = False
        self._submissions: Optional[List[dict]] = None
        self._validations: Optional[List[dict]] = None

    def login(self, password: str) -> bool:
        self.authenticated = self.api.admin_login(password)
        return self.authenticated

    def check(self) -> bool:
        self.authenticated = self.api.admin_check()
        return self.authenticated

    def logout(self) -> None:
        self.api.admin_logout()
        self.authenticated = False
        self._submissions = None
        self._validations = None

    def _require_login(self) -> None:
        if not self.authenticated:
            raise AuthRequired("Admin login required")

    def submissions(self, page: int = 1) -> Page:
        self._require_login()
        if self._submissions is None:
            self._submissions = self.api.admin_submissions()
        return paginate(self._submissions, page)

    def validations(self, page: int = 1) -> Page:
        self._require_login()
        if self._validations is None:
            self._validations = self.api.admin_validations()
        return paginate(self._validations, page)

    def refresh(self) -> None:
        self._submissions = None
        self._validations = None
