"""
Logging utilities.

Request-scoped context, structlog processors for event-style records,
and a thin logger adapter used across the service layer.
"""

import asyncio
import logging
from contextvars import ContextVar
from datetime import datetime
from functools import wraps
from typing import Any, Dict, Optional

import structlog

# Context variables for request tracking
request_id: ContextVar[Optional[str]] = ContextVar('request_id', default=None)
user_id: ContextVar[Optional[str]] = ContextVar('user_id', default=None)

SENSITIVE_KEYS = (
    'password', 'token', 'secret', 'credentials',
    'authorization', 'cookie', 'session',
)


class RequestContextProcessor:
    """Add request context to structlog events"""

    def __call__(self, logger, method_name, event_dict):
        req_id = request_id.get()
        if req_id:
            event_dict['request_id'] = req_id

        uid = user_id.get()
        if uid:
            event_dict['user_id'] = uid

        event_dict['timestamp'] = datetime.utcnow().isoformat()
        event_dict['service'] = 'local-yield'
        return event_dict


class SensitiveDataProcessor:
    """Mask values whose key looks like a credential"""

    def __call__(self, logger, method_name, event_dict):
        self._sanitize(event_dict)
        return event_dict

    def _sanitize(self, event_dict: Dict[str, Any]) -> None:
        for key in list(event_dict.keys()):
            if any(sensitive in key.lower() for sensitive in SENSITIVE_KEYS):
                event_dict[key] = '[REDACTED]'
            elif isinstance(event_dict[key], dict):
                self._sanitize(event_dict[key])


def configure_structlog(json_output: bool = False) -> None:
    """Configure structlog to route through the standard logging tree."""
    processors = [
        RequestContextProcessor(),
        SensitiveDataProcessor(),
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.processors.KeyValueRenderer(key_order=['event']))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


class LoggerAdapter:
    """Logger adapter that stamps request context on every record"""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def _log(self, level: int, message: str, *args, **kwargs):
        extra = dict(kwargs.get('extra') or {})
        extra.setdefault('request_id', request_id.get())
        uid = user_id.get()
        if uid:
            extra.setdefault('user_id', uid)
        kwargs['extra'] = extra

        self.logger.log(level, message, *args, **kwargs)

    def debug(self, message: str, *args, **kwargs):
        self._log(logging.DEBUG, message, *args, **kwargs)

    def info(self, message: str, *args, **kwargs):
        self._log(logging.INFO, message, *args, **kwargs)

    def warning(self, message: str, *args, **kwargs):
        self._log(logging.WARNING, message, *args, **kwargs)

    def error(self, message: str, *args, **kwargs):
        self._log(logging.ERROR, message, *args, **kwargs)

    def exception(self, message: str, *args, **kwargs):
        kwargs.setdefault('exc_info', True)
        self._log(logging.ERROR, message, *args, **kwargs)

    def critical(self, message: str, *args, **kwargs):
        self._log(logging.CRITICAL, message, *args, **kwargs)


def get_logger(name: Optional[str] = None) -> LoggerAdapter:
    """
    Get configured logger instance.

    Args:
        name: Logger name (defaults to "local_yield")

    Returns:
        Logger adapter carrying the request context
    """
    return LoggerAdapter(logging.getLogger(name or 'local_yield'))


_boundary_logger = get_logger('local_yield.errors')


def log_error(scope: str, error: BaseException, **meta: Any) -> None:
    """Log an error caught at an HTTP or service boundary."""
    _boundary_logger.error(
        f"[{scope}] {type(error).__name__}: {error}",
        extra={'scope': scope, 'error_type': type(error).__name__, **meta},
        exc_info=(type(error), error, error.__traceback__),
    )


def log_execution_time(logger_name: Optional[str] = None):
    """
    Decorator to log function execution time.

    Args:
        logger_name: Custom logger name
    """
    def decorator(func):
        logger = get_logger(logger_name or func.__module__)

        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            start_time = datetime.utcnow()
            try:
                return await func(*args, **kwargs)
            finally:
                execution_time = (datetime.utcnow() - start_time).total_seconds()
                logger.debug("Function executed", extra={
                    'function': func.__name__,
                    'execution_time': execution_time,
                })

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            start_time = datetime.utcnow()
            try:
                return func(*args, **kwargs)
            finally:
                execution_time = (datetime.utcnow() - start_time).total_seconds()
                logger.debug("Function executed", extra={
                    'function': func.__name__,
                    'execution_time': execution_time,
                })

        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator
