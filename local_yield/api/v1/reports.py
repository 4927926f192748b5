"""
User reports.
"""
from enum import Enum

from fastapi import APIRouter, Depends, Query, status

from local_yield.api import deps
from local_yield.core.rate_limiting import RateLimitPreset
from local_yield.schemas.common import DataResponse, Page
from local_yield.schemas.report import ReportCreate, ReportResponse
from local_yield.services.auth import Identity
from local_yield.services.report import MAX_PAGE_SIZE, ReportService

router = APIRouter(prefix="/reports", tags=["Reports"])


class ReportScope(str, Enum):
    MINE = "mine"
    FOR_ME = "forMe"


@router.post(
    "",
    response_model=DataResponse[ReportResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(deps.rate_limit(RateLimitPreset.AUTH))],
)
def create_report(
    payload: ReportCreate,
    identity: Identity = Depends(deps.require_auth_identity),
    service: ReportService = Depends(deps.get_report_service),
):
    return DataResponse(data=service.create_report(identity, payload))


@router.get("", response_model=DataResponse[Page[ReportResponse]])
def list_reports(
    scope: ReportScope = Query(ReportScope.MINE),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=MAX_PAGE_SIZE, alias="pageSize"),
    identity: Identity = Depends(deps.require_auth_identity),
    service: ReportService = Depends(deps.get_report_service),
):
    """Reports the caller filed, or (`scope=forMe`) order reports against the caller's orders."""
    if scope == ReportScope.FOR_ME:
        return DataResponse(data=service.list_reports_for_producer(identity, page, page_size))
    return DataResponse(data=service.list_my_reports(identity, page, page_size))


@router.get("/{report_id}", response_model=DataResponse[ReportResponse])
def get_report(
    report_id: str,
    identity: Identity = Depends(deps.require_auth_identity),
    service: ReportService = Depends(deps.get_report_service),
):
    return DataResponse(data=service.get_report(report_id, identity))
