"""
User reports about caregivers, help-exchange postings and orders.

Order reports double as order disputes and carry a problem type and a
proposed outcome.
"""
from __future__ import annotations

from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from local_yield.core.exceptions import NotFoundError
from local_yield.core.logging import get_logger
from local_yield.core.telemetry import BestEffortTelemetry
from local_yield.models import Report
from local_yield.models.enums import ReportEntityType, ReportStatus
from local_yield.repositories import (
    HelpExchangePostingRepository,
    OrderRepository,
    ReportRepository,
    UserRepository,
)
from local_yield.schemas.audit import ReportStatusUpdateDetails
from local_yield.schemas.common import Page
from local_yield.schemas.report import ReportCreate, ReportResponse
from local_yield.services.audit import AuditLogService
from local_yield.services.auth import (
    Identity,
    require_admin,
    require_auth,
    require_producer_or_admin,
    resolve_capabilities,
)
from local_yield.services.common import UnitOfWork

logger = get_logger(__name__)

MAX_PAGE_SIZE = 50


def _page_bounds(page: int, page_size: int) -> tuple:
    page = max(1, page)
    page_size = max(1, min(MAX_PAGE_SIZE, page_size))
    return page, page_size, (page - 1) * page_size


class ReportService:
    """
    Report creation, scoped reads and admin status updates.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        audit_log: Optional[AuditLogService] = None,
        telemetry: Optional[BestEffortTelemetry] = None,
    ) -> None:
        self._session_factory = session_factory
        self._audit = audit_log or AuditLogService(session_factory)
        self._telemetry = telemetry or BestEffortTelemetry()

    def _get_repo(self, uow: UnitOfWork) -> ReportRepository:
        return uow.get_repo(ReportRepository)

    def _to_response(self, report: Report) -> ReportResponse:
        return ReportResponse(
            id=report.id,
            reporter_id=report.reporter_id,
            entity_type=report.entity_type,
            entity_id=report.entity_id,
            reason=report.reason,
            details=report.details,
            status=report.status,
            problem_type=report.problem_type,
            proposed_outcome=report.proposed_outcome,
            created_at=report.created_at,
        )

    def _ensure_entity(self, uow: UnitOfWork, reporter: Identity, data: ReportCreate) -> None:
        if data.entity_type == ReportEntityType.CAREGIVER:
            user = uow.get_repo(UserRepository).get(data.entity_id)
            if user is None or not user.is_caregiver:
                raise NotFoundError("Caregiver", data.entity_id)
        elif data.entity_type == ReportEntityType.HELP_EXCHANGE_POSTING:
            if uow.get_repo(HelpExchangePostingRepository).get(data.entity_id) is None:
                raise NotFoundError("HelpExchangePosting", data.entity_id)
        else:
            order = uow.get_repo(OrderRepository).get(data.entity_id)
            if order is None or reporter.id not in (order.buyer_id, order.producer_id):
                raise NotFoundError("Order", data.entity_id)

    def _can_read(self, uow: UnitOfWork, report: Report, identity: Identity) -> bool:
        if resolve_capabilities(identity).can_admin or report.reporter_id == identity.id:
            return True
        if report.entity_type == ReportEntityType.ORDER:
            order = uow.get_repo(OrderRepository).get(report.entity_id)
            return order is not None and order.producer_id == identity.id
        return False

    # ------------------------------------------------------------------ #
    # Reporter
    # ------------------------------------------------------------------ #
    def create_report(self, reporter: Optional[Identity], data: ReportCreate) -> ReportResponse:
        reporter = require_auth(reporter)

        with UnitOfWork(self._session_factory) as uow:
            self._ensure_entity(uow, reporter, data)
            report = Report(
                reporter_id=reporter.id,
                entity_type=data.entity_type,
                entity_id=data.entity_id,
                reason=data.reason,
                details=data.details,
                status=ReportStatus.PENDING,
                problem_type=data.problem_type,
                proposed_outcome=data.proposed_outcome,
            )
            self._get_repo(uow).create(report)
            result = self._to_response(report)

        self._telemetry.track(
            "report_created",
            report_id=result.id,
            entity_type=result.entity_type.value,
            reason=result.reason.value,
        )
        return result

    def get_report(self, report_id: str, identity: Optional[Identity]) -> ReportResponse:
        """Readable by admins, the reporter and the producer of a reported order."""
        identity = require_auth(identity)

        with UnitOfWork(self._session_factory) as uow:
            report = self._get_repo(uow).get(report_id)
            if report is None or not self._can_read(uow, report, identity):
                raise NotFoundError("Report", report_id)
            return self._to_response(report)

    def list_my_reports(
        self,
        reporter: Optional[Identity],
        page: int = 1,
        page_size: int = 20,
    ) -> Page[ReportResponse]:
        reporter = require_auth(reporter)
        page, page_size, skip = _page_bounds(page, page_size)

        with UnitOfWork(self._session_factory) as uow:
            items, total = self._get_repo(uow).page_for_reporter(reporter.id, skip, page_size)
            return Page[ReportResponse](
                items=[self._to_response(r) for r in items],
                total=total,
                page=page,
                page_size=page_size,
            )

    def list_reports_for_producer(
        self,
        producer: Optional[Identity],
        page: int = 1,
        page_size: int = 20,
    ) -> Page[ReportResponse]:
        """Order reports filed against the producer's orders."""
        producer = require_producer_or_admin(producer)
        page, page_size, skip = _page_bounds(page, page_size)

        with UnitOfWork(self._session_factory) as uow:
            items, total = self._get_repo(uow).page_for_order_producer(producer.id, skip, page_size)
            return Page[ReportResponse](
                items=[self._to_response(r) for r in items],
                total=total,
                page=page,
                page_size=page_size,
            )

    # ------------------------------------------------------------------ #
    # Admin
    # ------------------------------------------------------------------ #
    def list_reports_for_admin(
        self,
        admin: Optional[Identity],
        status: Optional[ReportStatus] = None,
        entity_type: Optional[ReportEntityType] = None,
    ) -> List[ReportResponse]:
        require_admin(admin)
        with UnitOfWork(self._session_factory) as uow:
            reports = self._get_repo(uow).list_filtered(status=status, entity_type=entity_type)
            return [self._to_response(r) for r in reports]

    def update_report_status_by_admin(
        self,
        report_id: str,
        new_status: ReportStatus,
        admin: Optional[Identity],
    ) -> ReportResponse:
        admin = require_admin(admin)

        with UnitOfWork(self._session_factory) as uow:
            report = self._get_repo(uow).get_for_update(report_id)
            if report is None:
                raise NotFoundError("Report", report_id)

            previous = report.status
            if previous == new_status:
                return self._to_response(report)

            report.status = new_status
            self._audit.append(
                uow,
                admin_id=admin.id,
                entity_type="Report",
                entity_id=report.id,
                details=ReportStatusUpdateDetails(previous_status=previous, new_status=new_status),
            )
            return self._to_response(report)
