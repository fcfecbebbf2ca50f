"""Domain errors raised by services and rendered by the API exception handler.

Every error carries the HTTP status and a stable machine-readable ``code`` so
routers never need to translate exceptions themselves.
"""

from __future__ import annotations


class ZingMediaError(Exception):
    status_code: int = 400
    code: str = "error"
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidCredentials(ZingMediaError):
    status_code = 401
    code = "invalid_credentials"
    default_message = "Invalid credentials"


class MissingToken(ZingMediaError):
    status_code = 401
    code = "missing_token"
    default_message = "Missing bearer token"


class InvalidToken(ZingMediaError):
    status_code = 401
    code = "invalid_token"
    default_message = "Invalid or expired token"


class Forbidden(ZingMediaError):
    status_code = 403
    code = "forbidden"
    default_message = "Insufficient permissions"


class NotFound(ZingMediaError):
    """Absent or owned by another tenant. The two cases are never distinguished."""

    status_code = 404
    code = "not_found"
    default_message = "Resource not found"


class TenantNotFound(NotFound):
    default_message = "Tenant not found"


class BriefingNotFound(NotFound):
    default_message = "Briefing not found"


class SessionNotFound(NotFound):
    default_message = "Session not found"


class WorkflowNotFound(NotFound):
    default_message = "Workflow not found"


class AssetNotFound(NotFound):
    default_message = "Asset not found"


class CampaignNotFound(NotFound):
    default_message = "Campaign not found"


class TemplateNotFound(ZingMediaError):
    status_code = 400
    code = "template_not_found"
    default_message = "Briefing template not found"


class BriefingRequired(ZingMediaError):
    status_code = 422
    code = "briefing_required"
    default_message = "An active briefing is required to generate content"


class InvalidBriefing(ZingMediaError):
    status_code = 422
    code = "invalid_briefing"
    default_message = "Briefing data is invalid"


class InvalidTransition(ZingMediaError):
    status_code = 409
    code = "invalid_transition"
    default_message = "Transition not allowed"


class Conflict(ZingMediaError):
    status_code = 409
    code = "conflict"
    default_message = "Resource already exists"


class CommentNotFound(NotFound):
    default_message = "Comment not found"
