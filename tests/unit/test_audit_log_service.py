"""Unit tests for the append-only admin action log."""

from datetime import datetime, timedelta

import pytest
from pydantic import ValidationError as PydanticValidationError

from local_yield.models import AdminActionLog
from local_yield.models.audit import AppendOnlyViolation
from local_yield.models.enums import AdminAction, OrderStatus
from local_yield.repositories import AdminActionLogRepository
from local_yield.schemas.audit import (
    OrderStatusUpdateDetails,
    ReviewHideDetails,
    parse_action_details,
)
from local_yield.services.common import UnitOfWork


def _append(audit_log, session_factory, admin_id: str, entity_id: str, details) -> None:
    with UnitOfWork(session_factory) as uow:
        audit_log.append(uow, admin_id=admin_id, entity_type="Test", entity_id=entity_id, details=details)


class TestAuditLogService:
    """Test cases for appending and querying audit records."""

    def test_append_and_list_for_entity(self, audit_log, session_factory, admin) -> None:
        # Act
        _append(audit_log, session_factory, admin.id, "review-1", ReviewHideDetails(was_public=True))

        # Assert
        entries = audit_log.list_for_entity("review-1")
        assert len(entries) == 1
        assert isinstance(entries[0].details, ReviewHideDetails)
        assert entries[0].details.was_public is True

    def test_list_in_range_filters_by_time_and_action(self, audit_log, session_factory, admin) -> None:
        start = datetime.utcnow() - timedelta(seconds=1)
        _append(audit_log, session_factory, admin.id, "review-1", ReviewHideDetails(was_public=False))
        _append(
            audit_log,
            session_factory,
            admin.id,
            "order-1",
            OrderStatusUpdateDetails(previous_status=OrderStatus.PAID, new_status=OrderStatus.REFUNDED),
        )

        # Act
        everything = audit_log.list_in_range(start=start)
        orders_only = audit_log.list_in_range(start=start, action=AdminAction.ORDER_STATUS_UPDATE)
        future = audit_log.list_in_range(start=datetime.utcnow() + timedelta(hours=1))

        # Assert
        assert len(everything) == 2
        assert [e.entity_id for e in orders_only] == ["order-1"]
        assert future == []

    def test_list_in_range_returns_newest_first_within_limit(self, audit_log, db, admin) -> None:
        # Arrange
        base = datetime(2030, 1, 1, 12, 0)
        for minutes in range(3):
            db.add(
                AdminActionLog(
                    performed_by_id=admin.id,
                    action=AdminAction.REVIEW_HIDE,
                    entity_type="Review",
                    entity_id=f"review-{minutes}",
                    details=ReviewHideDetails(was_public=True).model_dump(mode="json"),
                    created_at=base + timedelta(minutes=minutes),
                )
            )
        db.commit()

        # Act
        newest = audit_log.list_in_range(limit=2)

        # Assert
        assert [e.entity_id for e in newest] == ["review-2", "review-1"]

    def test_records_are_append_only(self, audit_log, session_factory, admin) -> None:
        """Test that stored records cannot be modified or deleted through the ORM."""
        _append(audit_log, session_factory, admin.id, "review-1", ReviewHideDetails(was_public=True))

        session = session_factory()
        try:
            record = session.query(AdminActionLog).one()
            record.entity_id = "tampered"
            with pytest.raises(AppendOnlyViolation):
                session.flush()
            session.rollback()

            record = session.query(AdminActionLog).one()
            session.delete(record)
            with pytest.raises(AppendOnlyViolation):
                session.flush()
            session.rollback()
        finally:
            session.close()

        assert audit_log.list_for_entity("review-1")[0].entity_id == "review-1"

    def test_repository_has_no_update_path(self, session_factory) -> None:
        with UnitOfWork(session_factory) as uow:
            with pytest.raises(NotImplementedError):
                uow.get_repo(AdminActionLogRepository).update(None, {})


class TestActionDetails:
    def test_union_dispatches_on_action(self) -> None:
        details = parse_action_details(
            {"action": "ORDER_STATUS_UPDATE", "previousStatus": "PAID", "newStatus": "FULFILLED"}
        )
        assert isinstance(details, OrderStatusUpdateDetails)
        assert details.new_status == OrderStatus.FULFILLED

    def test_unknown_action_is_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            parse_action_details({"action": "SOMETHING_ELSE"})
