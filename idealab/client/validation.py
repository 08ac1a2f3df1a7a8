"""Idea validation workflow: draft, sign-in hand-off, auto-resume, feedback."""
import logging
from dataclasses import replace
from enum import Enum
from typing import Callable, Optional

from idealab.errors import BadInput, ValidationFailed
from idealab.services.feedback import fallback_landing_prompt
from idealab.utils.validators import validate_draft

from .api import ApiError
from .auth import AuthContext, Draft
from .newsletter import NewsletterClient, name_for

logger = logging.getLogger(__name__)

FORM_ANCHOR = "validate"


class WorkflowState(Enum):
    DRAFT = "draft"
    AWAITING_AUTH = "awaiting_auth"
    PENDING_RESUME = "pending_resume"
    SUBMITTING = "submitting"
    COMPLETE = "complete"
    FAILED = "failed"


class InvalidTransition(RuntimeError):
    pass


class ValidationWorkflow:
    """
    State machine around ``POST /api/validate``.

    A signed-out submit parks the draft in local storage and sends the
    browser to sign in. After the redirect back, ``resume()`` submits the
    parked draft exactly once: it leaves DRAFT before doing any work, so a
    second call for the same draft is a no-op.
    """

    def __init__(self, auth: AuthContext, newsletter: Optional[NewsletterClient] = None,
                 scroll_to: Optional[Callable[[str], None]] = None):
        self.auth = auth
        self.api = auth.api
        self.newsletter = newsletter or NewsletterClient()
        self.scroll_to = scroll_to or (lambda anchor: None)
        self.state = WorkflowState.DRAFT
        self.draft = Draft()
        self.result: Optional[dict] = None
        self.error: Optional[ValidationFailed] = None
        self.prompt: Optional[str] = None
        self._registered = False
        auth.on_sign_out(self.reset)

    def edit(self, **fields) -> Draft:
        if self.state in (WorkflowState.SUBMITTING, WorkflowState.PENDING_RESUME):
            raise InvalidTransition(f"cannot edit while {self.state.value}")
        self.draft = replace(self.draft, **fields)
        return self.draft

    def submit(self) -> WorkflowState:
        if self.state not in (WorkflowState.DRAFT, WorkflowState.FAILED, WorkflowState.COMPLETE):
            raise InvalidTransition(f"cannot submit while {self.state.value}")
        errors = validate_draft(self.draft.to_dict())
        if errors:
            raise BadInput(errors, "Please fill in all three fields!")

        if not self.auth.signed_in:
            self.state = WorkflowState.AWAITING_AUTH
            self.auth.sign_in(self.draft)
            return self.state
        return self._run(self.draft)

    def resume(self) -> bool:
        """Submit a draft parked before sign-in. Returns True when it fired."""
        if self.state is not WorkflowState.DRAFT or self.result is not None:
            return False
        pending = self.auth.pending_draft
        if not self.auth.signed_in or pending is None:
            return False

        self.state = WorkflowState.PENDING_RESUME
        self.draft = pending
        self.scroll_to(FORM_ANCHOR)
        self.auth.clear_pending_draft()
        logger.info("resuming validation parked before sign-in")
        self._run(pending)
        return True

    def retry(self) -> WorkflowState:
        if self.state is not WorkflowState.FAILED:
            raise InvalidTransition(f"cannot retry while {self.state.value}")
        self.state = WorkflowState.DRAFT
        self.error = None
        return self.state

    def reset(self) -> None:
        self.state = WorkflowState.DRAFT
        self.draft = Draft()
        self.result = None
        self.error = None
        self.prompt = None

    def close(self) -> None:
        """Detach from the auth context; the workflow is no longer reset on sign-out."""
        self.auth.off_sign_out(self.reset)

    def landing_prompt(self) -> str:
        """Site-builder prompt for the validated idea; falls back to the local template."""
        if self.state is not WorkflowState.COMPLETE:
            raise InvalidTransition(f"no validated idea while {self.state.value}")
        draft = self.draft.to_dict()
        try:
            self.prompt = self.api.generate_prompt(draft)
        except ApiError as exc:
            logger.warning("landing prompt request failed: %s", exc)
            self.prompt = fallback_landing_prompt(draft["idea"], draft["targetCustomer"], draft["problemSolved"])
        return self.prompt

    def open_site_builder(self, company: str, url: str, link_type: str = "site_builder") -> None:
        try:
            self.api.track_click(company, link_type, url)
        except ApiError as exc:
            logger.warning("click tracking failed for %s: %s", company, exc)
        self.auth.navigate(url)

    def _run(self, draft: Draft) -> WorkflowState:
        self.state = WorkflowState.SUBMITTING
        self.error = None
        try:
            self.result = self.api.validate(draft.to_dict())
        except ApiError as exc:
            logger.warning("validation request failed: %s", exc)
            self.error = ValidationFailed()
            self.state = WorkflowState.FAILED
            return self.state

        self.state = WorkflowState.COMPLETE
        self._register_newsletter()
        return self.state

    def _register_newsletter(self) -> None:
        user = self.auth.user or {}
        if self._registered or not user.get("email"):
            return
        self._registered = True
        try:
            self.newsletter.register(user["email"], name_for(user))
        except Exception:
            logger.exception("newsletter registration raised")
