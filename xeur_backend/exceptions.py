"""
Error taxonomy for the intake endpoints.

Handlers in main.py turn IntakeError subclasses into the response envelope
with the matching HTTP status. DependencyFailure never leaves the notifier.
"""
from typing import Dict, List, Optional


class IntakeError(Exception):
    status_code = 500
    default_message = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailed(IntakeError):
    """Malformed or out-of-range input. Carries every violated field."""

    status_code = 400
    default_message = "Validation error"

    def __init__(self, errors: List[Dict[str, str]], message: Optional[str] = None):
        self.errors = errors
        if message is None:
            details = ", ".join(f"{e['field']}: {e['message']}" for e in errors)
            message = f"Validation error: {details}" if details else self.default_message
        super().__init__(message)


class ConflictError(IntakeError):
    status_code = 409
    default_message = "Resource already exists"


class NotFoundError(IntakeError):
    status_code = 404
    default_message = "Resource not found"


class DependencyFailure(Exception):
    """An email, webhook or analytics side effect failed."""

    def __init__(self, channel: str, detail: str):
        self.channel = channel
        self.detail = detail
        super().__init__(f"{channel}: {detail}")
