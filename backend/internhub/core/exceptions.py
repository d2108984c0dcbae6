"""
Custom Exceptions for InternHub
===============================

Services raise these instead of HTTP errors; the API layer maps each family
to a status code in ``internhub.main``.

Usage:
    from internhub.core.exceptions import InternshipNotFoundError

    if not internship:
        raise InternshipNotFoundError(internship_id)
"""

from typing import Optional, Any, Dict


class InternHubError(Exception):
    """Base exception for all InternHub errors"""

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
# Authorization Errors (403)
# ============================================

class AuthorizationError(InternHubError):
    """User not authorized for this action"""

    status_code = 403

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, code="NOT_AUTHORIZED")


class AccessDeniedError(AuthorizationError):
    """Caller is neither the owner of the resource nor an admin"""

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)
        self.code = "ACCESS_DENIED"


# ============================================
# Resource Errors (404)
# ============================================

class ResourceNotFoundError(InternHubError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: str, message: Optional[str] = None):
        super().__init__(
            message or f"{resource_type} not found",
            code=f"{resource_type.upper()}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id}
        )


class UserNotFoundError(ResourceNotFoundError):
    """User not found"""

    def __init__(self, user_id: str):
        super().__init__("User", user_id)


class InternshipNotFoundError(ResourceNotFoundError):
    """Internship missing, or not owned by the caller (indistinguishable on purpose)"""

    def __init__(self, internship_id: str, message: Optional[str] = None):
        super().__init__("Internship", internship_id, message)


class RemarkNotFoundError(ResourceNotFoundError):
    """Remark not found"""

    def __init__(self, remark_id: str):
        super().__init__("Remark", remark_id)


# ============================================
# Validation Errors (400)
# ============================================

class ValidationError(InternHubError):
    """Input validation failed"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class InvalidDateRangeError(ValidationError):
    """End date is not after start date"""

    def __init__(self, message: str = "End date must be after start date"):
        super().__init__(message, field="endDate")
        self.code = "INVALID_DATE_RANGE"


class CertificateNotAvailableError(ValidationError):
    """Certificate requested for an internship that is not completed"""

    def __init__(self, status: Optional[str] = None):
        super().__init__("Certificate is only available for completed internships.")
        self.code = "CERTIFICATE_NOT_AVAILABLE"
        if status:
            self.details["status"] = status


# ============================================
# Certificate Rendering Errors (500)
# ============================================

class RenderingError(InternHubError):
    """Headless browser could not be launched or the page failed to render"""

    status_code = 500

    def __init__(self, message: str, output_format: Optional[str] = None):
        super().__init__(message, code="RENDERING_FAILED")
        if output_format:
            self.details["format"] = output_format


class RenderingTimeoutError(RenderingError):
    """Rendering did not finish inside the configured timeout"""

    def __init__(self, timeout_seconds: float, output_format: Optional[str] = None):
        super().__init__(f"Certificate rendering timed out after {timeout_seconds}s", output_format)
        self.code = "RENDERING_TIMEOUT"
        self.details["timeout_seconds"] = timeout_seconds


# ============================================
# Helper function for API responses
# ============================================

def error_response(error: InternHubError) -> Dict[str, Any]:
    """Convert exception to API error response format"""
    return {
        "success": False,
        "detail": error.message,
        "error": error.to_dict()
    }
