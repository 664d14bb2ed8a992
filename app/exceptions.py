# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error response is JSON of the shape {"error": ..., "code": ...}.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class PlatformException(Exception):
    """
    Base exception for the Pajama Party Platform API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "PLATFORM_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}
        self.headers = headers or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result: dict[str, Any] = {
            "error": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Validation
# =============================================================================

class ValidationFailedError(PlatformException):
    """Raised when a request payload is missing required fields or is malformed."""

    def __init__(self, message: str = "Required fields missing", errors: list[dict[str, Any]] | None = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=400,
            suggestion="Check the request body against the API documentation at /docs",
            details={"errors": errors} if errors else None,
        )


# =============================================================================
# Upstream Dependencies
# =============================================================================

class DatabaseError(PlatformException):
    """Raised when a primary database query fails."""

    def __init__(self, message: str, operation: str):
        super().__init__(
            message=message,
            code="DATABASE_ERROR",
            status_code=500,
            details={"operation": operation},
        )


class RateLimitUnavailableError(PlatformException):
    """Raised when the rate-limit store cannot be reached. Submissions fail closed."""

    def __init__(self, scope: str):
        super().__init__(
            message="Submissions are temporarily unavailable",
            code="RATE_LIMIT_UNAVAILABLE",
            status_code=503,
            suggestion="Try again in a few minutes",
            details={"scope": scope},
        )


# =============================================================================
# Throttling
# =============================================================================

class RateLimitExceededError(PlatformException):
    """Raised when a client exceeded its submission quota for the current window."""

    def __init__(self, retry_after: int, headers: dict[str, str] | None = None):
        super().__init__(
            message="Rate limit exceeded",
            code="RATE_LIMIT_EXCEEDED",
            status_code=429,
            suggestion=f"Too many requests. Try again in {retry_after} seconds.",
            details={"retryAfter": retry_after},
            headers={**(headers or {}), "Retry-After": str(retry_after)},
        )
        self.retry_after = retry_after

    def to_dict(self) -> dict[str, Any]:
        """Adds top-level `message` and `retryAfter` for clients that read them directly."""
        result = super().to_dict()
        result["message"] = self.suggestion
        result["retryAfter"] = self.retry_after
        return result


# =============================================================================
# Signups
# =============================================================================

class DuplicateSignupError(PlatformException):
    """Raised when an email address is already registered for the event."""

    def __init__(self):
        super().__init__(
            message=(
                "This email address is already registered. Please use a different "
                "email or contact support if you need to update your registration."
            ),
            code="EMAIL_ALREADY_EXISTS",
            status_code=409,
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def platform_exception_handler(
    request: Request,
    exc: PlatformException
) -> JSONResponse:
    """
    Convert PlatformException to JSON response.

    Returns structured error with:
    - error: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=exc.headers or None,
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle Pydantic validation errors.

    Converts validation errors to a 400 response listing the offending fields.
    """
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())[1:]),
            "message": error.get("msg", "Invalid value"),
        }
        for error in exc.errors()
    ]
    return await platform_exception_handler(
        request,
        ValidationFailedError("Required fields missing or invalid", errors=errors),
    )
