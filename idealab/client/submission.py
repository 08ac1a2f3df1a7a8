"""Project submission workflow: pre-flight check, single multipart post."""
import logging
from typing import Dict, Optional

from idealab.errors import BadInput, ValidationFailed
from idealab.utils.validators import SUBMISSION_FIELDS, clean_fields, validate_submission

from .api import ApiClient, ApiError
from .newsletter import NewsletterClient

logger = logging.getLogger(__name__)

SUBMIT_FAILED = "Failed to submit your project. Please try again."


class SubmissionWorkflow:
    def __init__(self, api: ApiClient, newsletter: Optional[NewsletterClient] = None):
        self.api = api
        self.newsletter = newsletter or NewsletterClient()
        self.result: Optional[dict] = None

    def submit(self, fields: Dict[str, str], screenshot_path: Optional[str] = None) -> dict:
        """Raises BadInput before any network call when the form is invalid."""
        errors = validate_submission(fields)
        if errors:
            raise BadInput(errors, "Please fix the highlighted fields.")

        cleaned = clean_fields(fields, SUBMISSION_FIELDS)
        try:
            self.result = self.api.submit(cleaned, screenshot_path)
        except ApiError as exc:
            if exc.status == 400 and exc.payload.get("errors"):
                raise BadInput(exc.payload["errors"], exc.message) from exc
            logger.warning("submission failed: %s", exc)
            raise ValidationFailed(SUBMIT_FAILED) from exc

        try:
            self.newsletter.register(cleaned["email"], cleaned["name"])
        except Exception:
            logger.exception("newsletter registration raised")
        return self.result
