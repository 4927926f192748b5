"""
Global exception handlers.

Maps application exceptions, request validation failures and data-store
errors to the JSON error envelope. Internal failures are logged with the
request id and surfaced with a generic message only.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from local_yield.core.exceptions import BaseAppException, ErrorCode, RateLimitExceededError
from local_yield.core.logging import log_error
from local_yield.core.middleware import get_request_id

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."


def error_envelope(
    code: str,
    message: str,
    request_id: Optional[str] = None,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {"error": {"code": code, "message": message}}
    if request_id:
        body["requestId"] = request_id
    return body


def _first_validation_message(errors) -> str:
    for error in errors:
        field_path = '.'.join(str(x) for x in error.get('loc', ()) if x != 'body')
        if field_path:
            return f"{field_path}: {error.get('msg')}"
        return str(error.get('msg'))
    return "Request validation failed"


async def handle_application_exception(request: Request, exc: BaseAppException) -> JSONResponse:
    """Handle custom application exceptions"""
    request_id = get_request_id(request)
    if exc.status_code >= 500:
        log_error(request.url.path, exc, request_id=request_id, method=request.method)
        message = GENERIC_ERROR_MESSAGE
    else:
        logger.info(
            f"Application exception: {exc.error_code.value} - {exc.message}",
            extra={"request_id": request_id, "path": request.url.path, "method": request.method},
        )
        message = exc.message

    headers = None
    if isinstance(exc, RateLimitExceededError):
        headers = {"Retry-After": str(exc.retry_after)}

    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(exc.error_code.value, message, request_id),
        headers=headers,
    )


_HTTP_STATUS_CODES = {
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
    429: ErrorCode.RATE_LIMIT,
}


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Wrap framework HTTP errors (unknown route, wrong method) in the envelope"""
    code = _HTTP_STATUS_CODES.get(exc.status_code)
    if code is None:
        code = ErrorCode.INTERNAL_ERROR if exc.status_code >= 500 else ErrorCode.VALIDATION_ERROR
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(code.value, str(exc.detail), get_request_id(request)),
        headers=getattr(exc, "headers", None),
    )


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle FastAPI request validation errors as 400s"""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_envelope(
            ErrorCode.VALIDATION_ERROR.value,
            _first_validation_message(exc.errors()),
            get_request_id(request),
        ),
    )


async def handle_pydantic_validation_error(request: Request, exc: PydanticValidationError) -> JSONResponse:
    """Handle Pydantic validation errors raised inside services"""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_envelope(
            ErrorCode.VALIDATION_ERROR.value,
            _first_validation_message(exc.errors()),
            get_request_id(request),
        ),
    )


async def handle_database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Handle database exceptions"""
    request_id = get_request_id(request)
    log_error(request.url.path, exc, request_id=request_id, method=request.method)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_envelope(ErrorCode.INTERNAL_ERROR.value, GENERIC_ERROR_MESSAGE, request_id),
    )


async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions"""
    request_id = get_request_id(request)
    log_error(request.url.path, exc, request_id=request_id, method=request.method)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_envelope(ErrorCode.INTERNAL_ERROR.value, GENERIC_ERROR_MESSAGE, request_id),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the envelope-producing handlers on the application."""
    app.add_exception_handler(BaseAppException, handle_application_exception)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(PydanticValidationError, handle_pydantic_validation_error)
    app.add_exception_handler(SQLAlchemyError, handle_database_error)
    app.add_exception_handler(Exception, handle_unexpected_exception)


__all__ = ["register_exception_handlers", "error_envelope", "GENERIC_ERROR_MESSAGE"]
