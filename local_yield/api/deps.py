"""
FastAPI dependencies.

Example usage in a router:
    from fastapi import Depends, APIRouter
    from local_yield.api import deps

    router = APIRouter()

    @router.get("/me")
    def read_me(identity = Depends(deps.require_auth_identity)):
        return identity

Guards are dependencies so an unauthenticated or under-privileged caller
is rejected before the request body is validated or any data is read.
"""

from typing import Callable, Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from local_yield.core.rate_limiting import RateLimitPreset, RateLimiter, client_identifier
from local_yield.core.telemetry import BestEffortTelemetry
from local_yield.db.session import SessionLocal
from local_yield.services.analytics import PlatformAnalyticsService
from local_yield.services.audit import AuditLogService
from local_yield.services.auth import (
    Identity,
    IdentityResolver,
    require_admin,
    require_auth,
    require_producer_or_admin,
)
from local_yield.services.feed import FeedService
from local_yield.services.order import OrderStatusService
from local_yield.services.report import ReportService
from local_yield.services.review import ReviewModerationService

_telemetry = BestEffortTelemetry()


# --- Database & context --------------------------------------------------------

def get_session_factory() -> Callable[[], Session]:
    return SessionLocal


def get_telemetry() -> BestEffortTelemetry:
    return _telemetry


# --- Authentication & Authorization -------------------------------------------

def get_identity_resolver(
    session_factory: Callable[[], Session] = Depends(get_session_factory),
) -> IdentityResolver:
    return IdentityResolver(session_factory)


def get_current_identity(
    request: Request,
    resolver: IdentityResolver = Depends(get_identity_resolver),
) -> Optional[Identity]:
    identity = resolver.resolve(request.headers, request.cookies)
    request.state.user_id = identity.id if identity else None
    return identity


def require_auth_identity(identity: Optional[Identity] = Depends(get_current_identity)) -> Identity:
    return require_auth(identity)


def require_producer_or_admin_identity(
    identity: Optional[Identity] = Depends(get_current_identity),
) -> Identity:
    return require_producer_or_admin(identity)


def require_admin_identity(identity: Optional[Identity] = Depends(get_current_identity)) -> Identity:
    return require_admin(identity)


# --- Rate limiting -------------------------------------------------------------

def get_rate_limiter(request: Request) -> Optional[RateLimiter]:
    """The application's limiter, or None when rate limiting is disabled."""
    return getattr(request.app.state, "rate_limiter", None)


def rate_limit(preset: RateLimitPreset = RateLimitPreset.DEFAULT):
    """Dependency factory enforcing `preset` for the client IP."""

    async def dependency(
        request: Request,
        limiter: Optional[RateLimiter] = Depends(get_rate_limiter),
    ) -> None:
        if limiter is None:
            return
        await limiter.enforce(preset, client_identifier(request))

    return dependency


# --- Services ------------------------------------------------------------------

def get_audit_log_service(
    session_factory: Callable[[], Session] = Depends(get_session_factory),
) -> AuditLogService:
    return AuditLogService(session_factory)


def get_review_service(
    session_factory: Callable[[], Session] = Depends(get_session_factory),
    audit_log: AuditLogService = Depends(get_audit_log_service),
    telemetry: BestEffortTelemetry = Depends(get_telemetry),
) -> ReviewModerationService:
    return ReviewModerationService(session_factory, audit_log=audit_log, telemetry=telemetry)


def get_order_service(
    session_factory: Callable[[], Session] = Depends(get_session_factory),
    audit_log: AuditLogService = Depends(get_audit_log_service),
    telemetry: BestEffortTelemetry = Depends(get_telemetry),
) -> OrderStatusService:
    return OrderStatusService(session_factory, audit_log=audit_log, telemetry=telemetry)


def get_report_service(
    session_factory: Callable[[], Session] = Depends(get_session_factory),
    audit_log: AuditLogService = Depends(get_audit_log_service),
    telemetry: BestEffortTelemetry = Depends(get_telemetry),
) -> ReportService:
    return ReportService(session_factory, audit_log=audit_log, telemetry=telemetry)


def get_feed_service(
    session_factory: Callable[[], Session] = Depends(get_session_factory),
) -> FeedService:
    return FeedService(session_factory)


def get_analytics_service(
    session_factory: Callable[[], Session] = Depends(get_session_factory),
) -> PlatformAnalyticsService:
    return PlatformAnalyticsService(session_factory)
