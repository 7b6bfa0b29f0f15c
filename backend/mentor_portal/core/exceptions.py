"""
Custom Exceptions for the Project Mentor Portal
===============================================

Every error carries the HTTP status it maps to. The handlers registered in
``mentor_portal.main`` turn them into ``{"message": ...}`` responses.

Usage:
    from mentor_portal.core.exceptions import TeamNotFoundError, AuthorizationError

    if not team:
        raise TeamNotFoundError(team_id)

    if team.mentor != principal.staff_id:
        raise AuthorizationError("You are not the mentor for this team")
"""

from typing import Optional, Any, Dict


class PortalError(Exception):
    """Base exception for all portal errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


# ============================================
# Authentication & Authorization Errors
# ============================================

class AuthenticationError(PortalError):
    """No session, or credentials did not match"""

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, code="AUTH_FAILED")


class InvalidSessionError(AuthenticationError):
    """Session cookie could not be decoded"""

    def __init__(self, message: str = "Invalid session"):
        super().__init__(message)
        self.code = "INVALID_SESSION"


class AuthorizationError(PortalError):
    """Caller's role or scope does not allow the action"""

    status_code = 403

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, code="NOT_AUTHORIZED")


# ============================================
# Resource Errors (404-type)
# ============================================

class ResourceNotFoundError(PortalError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: Any):
        super().__init__(
            f"{resource_type} not found",
            code=f"{resource_type.upper()}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": str(resource_id)}
        )


class TeamNotFoundError(ResourceNotFoundError):
    def __init__(self, team_id: Any):
        super().__init__("Team", team_id)


class ProjectNotFoundError(ResourceNotFoundError):
    def __init__(self, project_id: Any):
        super().__init__("Project", project_id)


class ReviewNotFoundError(ResourceNotFoundError):
    def __init__(self, review_id: Any):
        super().__init__("Review", review_id)


class LogNotFoundError(ResourceNotFoundError):
    def __init__(self, log_id: Any):
        super().__init__("Log", log_id)


class StudentNotFoundError(ResourceNotFoundError):
    def __init__(self, student_id: Any):
        super().__init__("Student", student_id)


class StaffNotFoundError(ResourceNotFoundError):
    def __init__(self, staff_id: Any):
        super().__init__("Staff", staff_id)


# ============================================
# Validation Errors (400-type)
# ============================================

class ValidationError(PortalError):
    """Input validation failed or a workflow precondition was not met"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class ConflictError(PortalError):
    """Unique value already taken"""

    status_code = 409

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="CONFLICT", details=details)


# ============================================
# Upstream / generation errors (500-type)
# ============================================

class UpstreamError(PortalError):
    """The relational store failed"""

    status_code = 500

    def __init__(self, message: str = "Internal server error", operation: Optional[str] = None):
        super().__init__(message, code="UPSTREAM_FAILURE")
        if operation:
            self.details["operation"] = operation


class DocumentGenerationError(PortalError):
    """Diary PDF rendering failed"""

    status_code = 500

    def __init__(self, message: str = "Failed to generate diary", doc_type: Optional[str] = None):
        super().__init__(message, code="DOCUMENT_GENERATION_FAILED")
        if doc_type:
            self.details["doc_type"] = doc_type
