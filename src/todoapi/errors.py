"""Error taxonomy surfaced to API clients.

Services raise these; one exception handler registered in main.py
renders them. Each error maps to a fixed status code. Errors without a
public message render as an empty body so nothing leaks about why a
login or token was rejected.
"""

from typing import Optional


class TodoApiError(Exception):
    """Base class for request-scoped user errors. Never retried."""

    status_code: int = 400
    public_message: Optional[str] = None

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.public_message or self.__class__.__name__)
        if message is not None and self.public_message is not None:
            self.public_message = message


class ValidationError(TodoApiError):
    """Malformed input: bad email, short password, empty text."""

    status_code = 400
    public_message = "Invalid input"


class DuplicateKey(TodoApiError):
    status_code = 400
    public_message = "Email already registered"


class AuthenticationFailed(TodoApiError):
    """Bad credentials at login. Same error whether email or password was wrong."""

    status_code = 400


class InvalidId(TodoApiError):
    status_code = 404
    public_message = "ID is invalid"


class NotFound(TodoApiError):
    """Valid id but no matching record owned by the caller."""

    status_code = 404
    public_message = "Could not find todo"


class Unauthenticated(TodoApiError):
    """Missing, malformed, revoked, or otherwise invalid auth token."""

    status_code = 401
