"""
Admin endpoints: review moderation, reports, analytics and the audit log.
"""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from local_yield.api import deps
from local_yield.core.rate_limiting import RateLimitPreset
from local_yield.models.enums import AdminAction, ReportEntityType, ReportStatus
from local_yield.schemas.analytics import PlatformAnalytics
from local_yield.schemas.audit import AuditLogEntry
from local_yield.schemas.common import DataResponse
from local_yield.schemas.report import ReportResponse, ReportStatusUpdate
from local_yield.schemas.review import AdminGuidanceUpdate, ReviewResponse
from local_yield.services.analytics import PlatformAnalyticsService
from local_yield.services.audit import DEFAULT_RANGE_LIMIT, MAX_RANGE_LIMIT, AuditLogService
from local_yield.services.auth import Identity
from local_yield.services.report import ReportService
from local_yield.services.review import ReviewModerationService

router = APIRouter(prefix="/admin", tags=["Admin"])

_limited = [Depends(deps.rate_limit(RateLimitPreset.DEFAULT))]


# --- Reviews -------------------------------------------------------------------

@router.get("/reviews", response_model=DataResponse[List[ReviewResponse]])
def list_reviews(
    flagged: bool = Query(False, description="Only reviews flagged for admin attention"),
    identity: Identity = Depends(deps.require_admin_identity),
    service: ReviewModerationService = Depends(deps.get_review_service),
):
    return DataResponse(data=service.list_for_admin(identity, flagged_only=flagged))


@router.post(
    "/reviews/{review_id}/approve-flag",
    response_model=DataResponse[ReviewResponse],
    dependencies=_limited,
)
def approve_flagged_review(
    review_id: str,
    identity: Identity = Depends(deps.require_admin_identity),
    service: ReviewModerationService = Depends(deps.get_review_service),
):
    """Clear the flag and publish the review."""
    return DataResponse(data=service.approve_flagged_review_by_admin(review_id, identity))


@router.post(
    "/reviews/{review_id}/dismiss-flag",
    response_model=DataResponse[ReviewResponse],
    dependencies=_limited,
)
def dismiss_flag(
    review_id: str,
    identity: Identity = Depends(deps.require_admin_identity),
    service: ReviewModerationService = Depends(deps.get_review_service),
):
    """Clear the flag; visibility stays as it was."""
    return DataResponse(data=service.dismiss_flag_by_admin(review_id, identity))


@router.post(
    "/reviews/{review_id}/hide",
    response_model=DataResponse[ReviewResponse],
    dependencies=_limited,
)
def hide_review(
    review_id: str,
    identity: Identity = Depends(deps.require_admin_identity),
    service: ReviewModerationService = Depends(deps.get_review_service),
):
    return DataResponse(data=service.hide_review_by_admin(review_id, identity))


@router.patch(
    "/reviews/{review_id}/guidance",
    response_model=DataResponse[ReviewResponse],
    dependencies=_limited,
)
def set_guidance(
    review_id: str,
    payload: AdminGuidanceUpdate,
    identity: Identity = Depends(deps.require_admin_identity),
    service: ReviewModerationService = Depends(deps.get_review_service),
):
    return DataResponse(data=service.set_admin_guidance(review_id, identity, payload.guidance))


# --- Reports -------------------------------------------------------------------

@router.get("/reports", response_model=DataResponse[List[ReportResponse]])
def list_reports(
    report_status: Optional[ReportStatus] = Query(None, alias="status"),
    entity_type: Optional[ReportEntityType] = Query(None, alias="entityType"),
    identity: Identity = Depends(deps.require_admin_identity),
    service: ReportService = Depends(deps.get_report_service),
):
    return DataResponse(data=service.list_reports_for_admin(identity, report_status, entity_type))


@router.patch(
    "/reports/{report_id}",
    response_model=DataResponse[ReportResponse],
    dependencies=_limited,
)
def update_report_status(
    report_id: str,
    payload: ReportStatusUpdate,
    identity: Identity = Depends(deps.require_admin_identity),
    service: ReportService = Depends(deps.get_report_service),
):
    return DataResponse(data=service.update_report_status_by_admin(report_id, payload.status, identity))


# --- Analytics & audit ---------------------------------------------------------

@router.get("/analytics", response_model=DataResponse[PlatformAnalytics])
def platform_analytics(
    identity: Identity = Depends(deps.require_admin_identity),
    service: PlatformAnalyticsService = Depends(deps.get_analytics_service),
):
    return DataResponse(data=service.get_platform_analytics(identity))


@router.get("/audit-log", response_model=DataResponse[List[AuditLogEntry]])
def audit_log(
    entity_id: Optional[str] = Query(None, alias="entityId"),
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    action: Optional[AdminAction] = Query(None),
    limit: int = Query(DEFAULT_RANGE_LIMIT, ge=1, le=MAX_RANGE_LIMIT),
    identity: Identity = Depends(deps.require_admin_identity),
    service: AuditLogService = Depends(deps.get_audit_log_service),
):
    """Entries for one entity when `entityId` is given, else the newest by time range."""
    if entity_id:
        return DataResponse(data=service.list_for_entity(entity_id))
    return DataResponse(data=service.list_in_range(start=start, end=end, action=action, limit=limit))
