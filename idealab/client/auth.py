"""Client auth state, passed explicitly into every workflow."""
import json
import logging
import webbrowser
from dataclasses import dataclass
from typing import Callable, List, Optional

from .api import ApiClient, ApiError
from .storage import LocalStore

logger = logging.getLogger(__name__)

PENDING_VALIDATION_KEY = "pendingValidation"
SIGN_IN_PATH = "/auth/google"
SIGN_OUT_PATH = "/auth/logout"


@dataclass(frozen=True)
class Draft:
    idea: str = ""
    target_customer: str = ""
    problem_solved: str = ""

    def to_dict(self) -> dict:
        return {
            "idea": self.idea,
            "targetCustomer": self.target_customer,
            "problemSolved": self.problem_solved,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, raw: str) -> "Draft":
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError("draft must be a JSON object")
        return cls(
            idea=str(data.get("idea") or ""),
            target_customer=str(data.get("targetCustomer") or ""),
            problem_solved=str(data.get("problemSolved") or ""),
        )


class AuthContext:
    def __init__(self, api: ApiClient, store: LocalStore,
                 navigate: Optional[Callable[[str], None]] = None):
        self.api = api
        self.store = store
        self.navigate = navigate or webbrowser.open
        self.user: Optional[dict] = None
        self.pending_draft: Optional[Draft] = None
        self.loading = False
        self._sign_out_listeners: List[Callable[[], None]] = []

    @property
    def signed_in(self) -> bool:
        return self.user is not None

    def on_sign_out(self, callback: Callable[[], None]) -> None:
        self._sign_out_listeners.append(callback)

    def off_sign_out(self, callback: Callable[[], None]) -> None:
        if callback in self._sign_out_listeners:
            self._sign_out_listeners.remove(callback)

    def init(self) -> Optional[dict]:
        """Load the current user; restore a stored draft only when signed in."""
        self.loading = True
        try:
            self.user = self.api.get_user()
        except ApiError as exc:
            logger.warning("could not load current user: %s", exc)
            self.user = None
        finally:
            self.loading = False

        self.pending_draft = None
        if self.user is not None:
            raw = self.store.get(PENDING_VALIDATION_KEY)
            if raw is not None:
                try:
                    self.pending_draft = Draft.from_json(raw)
                except ValueError:
                    logger.warning("dropping undecodable pending draft")
                    self.store.remove(PENDING_VALIDATION_KEY)
        return self.user

    def sign_in(self, draft: Optional[Draft] = None) -> None:
        if draft is not None:
            self.pending_draft = draft
            self.store.set(PENDING_VALIDATION_KEY, draft.to_json())
        self.navigate(self.api.url(SIGN_IN_PATH))

    def clear_pending_draft(self) -> None:
        self.pending_draft = None
        self.store.remove(PENDING_VALIDATION_KEY)

    def sign_out(self) -> None:
        self.clear_pending_draft()
        self.user = None
        for callback in list(self._sign_out_listeners):
            callback()
        self.navigate(self.api.url(SIGN_OUT_PATH))
