"""
Error taxonomy for Decision Hub.

Every error carries the HTTP status it is surfaced with. Handlers in
``decisionhub.middleware.error_handler`` turn them into ``{"error": ...}``
bodies. Nothing here is retried locally.
"""

from typing import Any, Dict, Optional


class HubError(Exception):
    """Base exception for all expected, client-visible failures."""

    status_code: int = 500
    default_message: str = "An internal error occurred"

    def __init__(self, message: Optional[str] = None, **details: Any):
        self.message = message or self.default_message
        self.details: Dict[str, Any] = details
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


class NotFound(HubError):
    status_code = 404
    default_message = "Not found"


class Unauthenticated(HubError):
    status_code = 401
    default_message = "Missing authentication token"


class PermissionDenied(HubError):
    status_code = 403
    default_message = "You do not have access to this resource"


class LimitReached(PermissionDenied):
    """Monthly plan limit exhausted; the caller should upgrade."""

    default_message = "You've reached your monthly limit. Upgrade to continue."


class ValidationFailure(HubError):
    status_code = 422
    default_message = "Invalid request"


class UpstreamRateLimited(HubError):
    status_code = 429
    default_message = "Rate limit exceeded. Please try again later."


class UpstreamQuotaExhausted(HubError):
    status_code = 402
    default_message = "AI credits exhausted. Please add credits to continue."


class UpstreamFailure(HubError):
    status_code = 500
    default_message = "Upstream request failed"


class ParseFailure(HubError):
    status_code = 500
    default_message = "Failed to parse AI response"


class PersistenceFailure(HubError):
    status_code = 500
    default_message = "Failed to store result"


class SignatureInvalid(HubError):
    status_code = 400
    default_message = "Webhook signature verification failed"
