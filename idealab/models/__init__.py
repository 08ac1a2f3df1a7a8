from .user import User
from .validation import Validation
from .submission import Submission
from .admin_session import AdminSession

__all__ = ["User", "Validation", "Submission", "AdminSession"]
