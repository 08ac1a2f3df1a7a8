"""Application error taxonomy.

Each class maps to one JSON error shape in ``create_app``'s handlers:
``{"error": <code>, "message": <text>}``.
"""
from typing import List, Optional


class AppError(Exception):
    code = "server_error"
    status = 500
    message = "Something went wrong"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        self.message = message or self.message

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message}


class AuthRequired(AppError):
    code = "auth_required"
    status = 401
    message = "Authentication required"


class InvalidToken(AuthRequired):
    code = "invalid_token"
    message = "Invalid token"


class ValidationFailed(AppError):
    """The feedback backend (or the API in front of it) rejected the request."""
    code = "validation_failed"
    status = 502
    message = "Failed to validate your idea. Please try again."


class PersistenceError(AppError):
    code = "persistence_error"
    status = 500
    message = "Storage error"


class PersistenceConflict(PersistenceError):
    """A unique constraint rejected the write."""
    code = "conflict"
    status = 409


class BadInput(AppError):
    code = "bad_input"
    status = 400
    message = "Invalid input"

    def __init__(self, errors: List[str], message: Optional[str] = None):
        super().__init__(message or (errors[0] if errors else None))
        self.errors = list(errors)

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message, "errors": self.errors}
