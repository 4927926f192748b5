"""
Custom exceptions for The Local Yield.

Every error surfaced to an HTTP caller is one of these kinds; the
exception handlers turn them into the `{"error": {code, message}}`
envelope with the matching status code.
"""

from enum import Enum
from typing import Any, Dict, Optional, Union


class ErrorCode(str, Enum):
    """Standard error codes for the application"""
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    DUPLICATE_REVIEW = "DUPLICATE_REVIEW"
    RATE_LIMIT = "RATE_LIMIT"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class BaseAppException(Exception):
    """
    Base exception class for all application exceptions.

    Provides consistent error handling across the application with
    structured error information.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to the error envelope"""
        return {
            "error": {
                "code": self.error_code.value,
                "message": self.message,
            }
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


class UnauthenticatedError(BaseAppException):
    """No resolvable identity on the request"""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, ErrorCode.UNAUTHORIZED, status_code=401)


class ForbiddenError(BaseAppException):
    """Identity lacks the required capability or does not own the entity"""

    def __init__(
        self,
        message: str = "Forbidden",
        required_capability: Optional[str] = None,
    ):
        details = {"required_capability": required_capability} if required_capability else {}
        super().__init__(message, ErrorCode.FORBIDDEN, details, 403)
        self.required_capability = required_capability


class NotFoundError(BaseAppException):
    """Referenced entity does not exist or is not visible to the caller"""

    def __init__(
        self,
        resource_type: str = "Resource",
        identifier: Optional[Union[str, int]] = None,
        message: Optional[str] = None,
    ):
        super().__init__(
            message or f"{resource_type} not found",
            ErrorCode.NOT_FOUND,
            {"resource_type": resource_type, "resource_id": identifier},
            404,
        )
        self.resource_type = resource_type
        self.identifier = identifier


class ValidationError(BaseAppException):
    """Malformed or rule-violating input"""

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
    ):
        details = {"field": field} if field else {}
        super().__init__(message, error_code, details, 400)
        self.field = field


class InvalidTransitionError(ValidationError):
    """Requested state change is not allowed from the current state"""

    def __init__(self, current: str, requested: str):
        super().__init__(
            f"Cannot transition from {current} to {requested}",
            field="status",
            error_code=ErrorCode.INVALID_TRANSITION,
        )
        self.current = current
        self.requested = requested


class DuplicateReviewError(ValidationError):
    """The reviewer already left a review for this order or booking"""

    def __init__(self, message: str = "You have already left a review for this order"):
        super().__init__(message, error_code=ErrorCode.DUPLICATE_REVIEW)


class RateLimitExceededError(BaseAppException):
    """Caller exceeded the request budget for the current window"""

    def __init__(self, retry_after: int, message: str = "Too many requests"):
        super().__init__(message, ErrorCode.RATE_LIMIT, {"retry_after": retry_after}, 429)
        self.retry_after = retry_after


class InternalError(BaseAppException):
    """Data-store or unexpected failure"""

    def __init__(self, message: str = "Internal server error", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.INTERNAL_ERROR, details, 500)


class RepositoryError(InternalError):
    """Raised when a data access call fails"""


__all__ = [
    "ErrorCode",
    "BaseAppException",
    "UnauthenticatedError",
    "ForbiddenError",
    "NotFoundError",
    "ValidationError",
    "InvalidTransitionError",
    "DuplicateReviewError",
    "RateLimitExceededError",
    "InternalError",
    "RepositoryError",
]
