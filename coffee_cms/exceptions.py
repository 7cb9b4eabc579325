"""Custom exception hierarchy for the content CMS."""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # Content errors
    CONTENT_NOT_FOUND = "CONTENT_NOT_FOUND"
    UNKNOWN_CONTENT_TYPE = "UNKNOWN_CONTENT_TYPE"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Database errors
    DATABASE_ERROR = "DATABASE_ERROR"

    # Generic errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class CmsException(Exception):
    """
    Base exception for all CMS errors.

    Carries a human-readable message, a machine-readable error code,
    the HTTP status to return, and optional details.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        return {
            "error": self.error_code.value,
            "message": self.message,
            "details": self.details
        }


class ContentNotFoundError(CmsException):
    """Content entry not found in database."""

    def __init__(self, content_type: str, record_id: str):
        super().__init__(
            f"{content_type} entry not found: {record_id}",
            ErrorCode.CONTENT_NOT_FOUND,
            status_code=404,
            details={"content_type": content_type, "record_id": str(record_id)}
        )


class UnknownContentTypeError(CmsException):
    """Content type is not one of the configured types."""

    def __init__(self, content_type: str):
        super().__init__(
            f"Unknown content type: {content_type}",
            ErrorCode.UNKNOWN_CONTENT_TYPE,
            status_code=404,
            details={"content_type": content_type}
        )


class ValidationError(CmsException):
    """Validation failed for user input."""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(
            message,
            ErrorCode.VALIDATION_ERROR,
            status_code=400,
            details=details
        )


class DatabaseError(CmsException):
    """Database operation failed."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        details = {}
        if original_error:
            details["original_error"] = str(original_error)

        super().__init__(
            message,
            ErrorCode.DATABASE_ERROR,
            status_code=500,
            details=details
        )
