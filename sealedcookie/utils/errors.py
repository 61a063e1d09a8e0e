"""
Error Handling Utilities
Provides consistent error handling across the application, including the
exception hierarchy raised by the secure cookie codec and manager.
"""

from typing import Optional, Dict, Any
from pydantic import BaseModel
from enum import Enum
import logging

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """Standardized error codes for programmatic handling."""

    # Client errors (4xx)
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Cookie errors (5xx)
    COOKIE_ENCODE_FAILED = "COOKIE_ENCODE_FAILED"
    COOKIE_INVALID = "COOKIE_INVALID"

    # Internal errors (5xx)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


class ErrorResponse(BaseModel):
    """Standardized error response format."""

    error: str  # User-friendly error message
    code: ErrorCode  # Error code for programmatic handling
    details: Optional[str] = None  # Additional context
    suggestion: Optional[str] = None  # What user can do to resolve

    class Config:
        use_enum_values = True


# Error Message Templates
class ErrorMessages:
    """User-friendly error message templates."""

    # General messages
    INTERNAL_ERROR = "An unexpected error occurred. Please try again."

    # Cookie messages
    COOKIE_INVALID = "Ops internal server error"
    COOKIE_ENCODE_FAILED = "Unable to store session data."
    COOKIE_CONFIGURATION = "Cookie manager is misconfigured."


# Custom Exception Classes
class BaseAPIException(Exception):
    """Base exception for all API errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        status_code: int = 500,
        details: Optional[str] = None,
        suggestion: Optional[str] = None
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        self.suggestion = suggestion
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for HTTP response."""
        return {
            "error": self.message,
            "code": self.code.value,
            "details": self.details,
            "suggestion": self.suggestion
        }


class CookieError(BaseAPIException):
    """Base class for everything raised by the cookie codec and manager."""


class CookieConfigurationError(CookieError):
    """
    Raised while building key material or a cookie manager.

    Always fatal: a manager is never created with missing or weak keys.
    """

    def __init__(self, details: str):
        super().__init__(
            message=ErrorMessages.COOKIE_CONFIGURATION,
            code=ErrorCode.CONFIGURATION_ERROR,
            status_code=500,
            details=details,
        )


class CookieEncodeError(CookieError):
    """Raised when a payload cannot be serialized, encrypted or fits no cookie."""

    def __init__(self, details: Optional[str] = None):
        super().__init__(
            message=ErrorMessages.COOKIE_ENCODE_FAILED,
            code=ErrorCode.COOKIE_ENCODE_FAILED,
            status_code=500,
            details=details,
            suggestion="Store fewer or shorter string values in the session."
        )


class CookieDecodeError(CookieError):
    """
    Raised for any token that fails to decode.

    Tampering, wrong keys, a different cookie name, expiry and malformed
    payloads all produce this same exception with the same message, so
    callers and clients cannot tell which check failed.
    """

    def __init__(self):
        super().__init__(
            message=ErrorMessages.COOKIE_INVALID,
            code=ErrorCode.COOKIE_INVALID,
            status_code=500,
        )


def log_error(
    error: Exception,
    context: str,
    additional_data: Optional[Dict[str, Any]] = None
):
    """
    Log error with consistent format and context.

    Args:
        error: The exception that occurred
        context: Description of what was being done when error occurred
        additional_data: Optional additional data to log
    """
    log_data = {
        "context": context,
        "error_type": type(error).__name__,
        "error_message": str(error),
    }

    if additional_data:
        log_data.update(additional_data)

    logger.error(f"Error in {context}", extra=log_data)
