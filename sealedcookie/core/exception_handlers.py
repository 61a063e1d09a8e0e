"""
Global Exception Handlers
Provides consistent error handling across the FastAPI application.
"""

from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from sealedcookie.utils.errors import (
    BaseAPIException,
    CookieConfigurationError,
    ErrorCode,
    ErrorMessages,
    log_error
)

logger = logging.getLogger(__name__)


async def base_api_exception_handler(request: Request, exc: BaseAPIException) -> JSONResponse:
    """
    Handle custom API exceptions, cookie errors included, with structured responses.
    """
    log_error(
        error=exc,
        context=f"{request.method} {request.url.path}",
        additional_data={
            "status_code": exc.status_code,
            "error_code": exc.code.value
        }
    )

    content = exc.to_dict()
    # Key problems stay in the server log
    if isinstance(exc, CookieConfigurationError):
        content["details"] = None

    return JSONResponse(
        status_code=exc.status_code,
        content=content
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """
    Handle routing errors (unknown path, wrong method) with structured bodies.
    """
    # If the detail is already a dict (structured error), use it as-is
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = {
            "error": str(exc.detail),
            "code": _get_error_code_from_status(exc.status_code),
            "suggestion": _get_suggestion_from_status(exc.status_code)
        }

    log_error(
        error=exc,
        context=f"{request.method} {request.url.path}",
        additional_data={"status_code": exc.status_code}
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle Pydantic validation errors, e.g. session values that are not strings.
    """
    errors = []
    for error in exc.errors():
        field_path = " -> ".join(str(loc) for loc in error["loc"])
        error_type = error["type"]

        if error_type == "missing":
            user_msg = f"The field '{field_path}' is required."
        elif error_type == "string_type":
            user_msg = f"The field '{field_path}' must be a string."
        else:
            user_msg = f"The field '{field_path}' is invalid: {error['msg']}"

        errors.append({
            "field": field_path,
            "message": user_msg,
            "type": error_type
        })

    content = {
        "error": "The request contains invalid data.",
        "code": ErrorCode.VALIDATION_ERROR,
        "details": f"Found {len(errors)} validation error(s).",
        "suggestion": "Session data must be a flat object of string values.",
        "validation_errors": errors
    }

    log_error(
        error=exc,
        context=f"{request.method} {request.url.path}",
        additional_data={"validation_errors": errors}
    )

    return JSONResponse(
        status_code=422,
        content=content
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected exceptions with generic error response.
    """
    log_error(
        error=exc,
        context=f"{request.method} {request.url.path}",
        additional_data={"exception_type": type(exc).__name__}
    )

    # Don't expose internal error details to users
    content = {
        "error": ErrorMessages.INTERNAL_ERROR,
        "code": ErrorCode.INTERNAL_ERROR,
        "suggestion": "If the problem persists, please contact support."
    }

    return JSONResponse(
        status_code=500,
        content=content
    )


def _get_error_code_from_status(status_code: int) -> str:
    """Map the statuses the session API produces to error codes."""
    status_to_code = {
        404: ErrorCode.NOT_FOUND,
        405: ErrorCode.METHOD_NOT_ALLOWED,
        422: ErrorCode.VALIDATION_ERROR,
    }
    return status_to_code.get(status_code, ErrorCode.INTERNAL_ERROR)


def _get_suggestion_from_status(status_code: int) -> str:
    """Suggestion shown next to routing and validation errors."""
    status_to_suggestion = {
        404: "Session endpoints live under /api/session.",
        405: "Use GET to read, POST to store, PATCH to update or DELETE to clear the session.",
        422: "Session data must be a flat object of string values.",
    }
    return status_to_suggestion.get(status_code, "Please try again. If the problem persists, contact support.")


def setup_exception_handlers(app):
    """
    Set up all exception handlers for the FastAPI app.

    Args:
        app: FastAPI application instance
    """
    # Custom API exceptions, including cookie errors
    app.add_exception_handler(BaseAPIException, base_api_exception_handler)

    # FastAPI HTTP exceptions
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    # Validation exceptions
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Catch-all for unexpected exceptions
    app.add_exception_handler(Exception, general_exception_handler)
