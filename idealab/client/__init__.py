"""Python client for the Idea Lab API: auth context, workflows, admin dashboard."""
from .api import ApiClient, ApiError
from .auth import AuthContext, Draft, PENDING_VALIDATION_KEY
from .storage import LocalStore
from .validation import ValidationWorkflow, WorkflowState
from .submission import SubmissionWorkflow
from .admin import AdminDashboard, paginate
from .newsletter import NewsletterClient

__all__ = [
    "ApiClient", "ApiError", "AuthContext", "Draft", "PENDING_VALIDATION_KEY",
    "LocalStore", "ValidationWorkflow", "WorkflowState", "SubmissionWorkflow",
    "AdminDashboard", "paginate", "NewsletterClient",
]
