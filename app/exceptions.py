"""
Error taxonomy for the legal assistant API.

Each error carries the HTTP status it maps to; the handlers registered in
``app.main`` turn them into ``{"error": ..., "status_code": ...}`` responses.
"""

from typing import Any, List, Optional


class LegalAssistantError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Optional[List[Any]] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(LegalAssistantError):
    status_code = 400
    default_message = "Invalid request data"


class AuthenticationError(LegalAssistantError):
    """Bad credentials or missing/expired session."""

    status_code = 401
    default_message = "Unauthorized"


class AuthorizationError(LegalAssistantError):
    """Authenticated, but the role is insufficient."""

    status_code = 403
    default_message = "Forbidden"


class NotFoundError(LegalAssistantError):
    status_code = 404
    default_message = "Not found"


class ConflictError(LegalAssistantError):
    status_code = 409
    default_message = "Conflict"


class RateLimitError(LegalAssistantError):
    status_code = 429
    default_message = "Too many attempts. Please try again later."


class ServiceUnavailableError(LegalAssistantError):
    """The LLM provider is unconfigured or failed; the client should retry later."""

    status_code = 503
    default_message = "AI service is temporarily unavailable. Please try again later."


class AuditLogError(Exception):
    """Raised when an audit entry cannot be written.

    Never reaches an exception handler: the audit logger catches it.
    """
