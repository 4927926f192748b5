from __future__ import annotations

from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from local_yield.core.logging import get_logger
from local_yield.models import AdminActionLog
from local_yield.models.enums import AdminAction
from local_yield.repositories import AdminActionLogRepository
from local_yield.schemas.audit import AdminActionDetails, AuditLogEntry, parse_action_details
from local_yield.services.common import UnitOfWork

logger = get_logger(__name__)

DEFAULT_RANGE_LIMIT = 100
MAX_RANGE_LIMIT = 500


class AuditLogService:
    """
    Append-only admin action log:

    - Append an entry inside the caller's UnitOfWork so the audited
      mutation and its record commit together
    - List entries for an entity or a time range
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    def _get_repo(self, uow: UnitOfWork) -> AdminActionLogRepository:
        return uow.get_repo(AdminActionLogRepository)

    def _to_entry(self, log: AdminActionLog) -> AuditLogEntry:
        return AuditLogEntry(
            id=log.id,
            performed_by_id=log.performed_by_id,
            entity_type=log.entity_type,
            entity_id=log.entity_id,
            details=parse_action_details(log.details),
            created_at=log.created_at,
        )

    # ------------------------------------------------------------------ #
    # Write
    # ------------------------------------------------------------------ #
    def append(
        self,
        uow: UnitOfWork,
        *,
        admin_id: str,
        entity_type: str,
        entity_id: str,
        details: AdminActionDetails,
    ) -> AdminActionLog:
        """
        Append one record in the caller's transaction.
        """
        entry = AdminActionLog(
            performed_by_id=admin_id,
            action=AdminAction(details.action),
            entity_type=entity_type,
            entity_id=entity_id,
            details=details.model_dump(mode="json"),
        )
        self._get_repo(uow).append(entry)
        logger.info(
            f"Admin action {details.action} on {entity_type} {entity_id}",
            extra={"admin_id": admin_id, "action": details.action, "entity_id": entity_id},
        )
        return entry

    # ------------------------------------------------------------------ #
    # Read
    # ------------------------------------------------------------------ #
    def list_for_entity(self, entity_id: str) -> List[AuditLogEntry]:
        with UnitOfWork(self._session_factory) as uow:
            return [self._to_entry(log) for log in self._get_repo(uow).list_for_entity(entity_id)]

    def list_in_range(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        action: Optional[AdminAction] = None,
        admin_id: Optional[str] = None,
        limit: int = DEFAULT_RANGE_LIMIT,
    ) -> List[AuditLogEntry]:
        """Newest entries first, at most `limit` of them."""
        with UnitOfWork(self._session_factory) as uow:
            logs = self._get_repo(uow).list_in_range(
                start=start,
                end=end,
                action=action,
                performed_by_id=admin_id,
                limit=limit,
            )
            return [self._to_entry(log) for log in logs]
