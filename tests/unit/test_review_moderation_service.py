"""Unit tests for ReviewModerationService.

These run against an in-memory SQLite database so each transition is
checked end to end through the repositories and the audit log.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from local_yield.core.exceptions import (
    DuplicateReviewError,
    ForbiddenError,
    NotFoundError,
    UnauthenticatedError,
    ValidationError,
)
from local_yield.models.enums import AdminAction, ModerationState, OrderStatus
from local_yield.schemas.review import ReviewCreate, ReviewUpdate
from local_yield.services.review import ReviewModerationService


@pytest.fixture
def service(session_factory, audit_log, telemetry) -> ReviewModerationService:
    return ReviewModerationService(session_factory, audit_log=audit_log, telemetry=telemetry)


@pytest.fixture
def review(service, buyer, fulfilled_order):
    return service.create_review(buyer, ReviewCreate(order_id=fulfilled_order, rating=4, comment="Sweet and ripe"))


class TestCreateReview:
    """Test cases for creating reviews."""

    def test_new_review_is_pending_approval(self, review, producer, telemetry_sink) -> None:
        """Test that a new review starts private and is attributed to the producer."""
        assert review.moderation_state == ModerationState.PENDING_APPROVAL
        assert review.private_flag is True
        assert review.is_public is False
        assert review.reviewee_id == producer.id
        assert ("review_created", {"review_id": review.id, "type": "MARKET"}) in telemetry_sink.events

    def test_new_review_is_not_publicly_listed(self, service, review, producer) -> None:
        assert service.list_public_reviews(producer.id) == []

    def test_second_review_for_same_order_is_rejected(self, service, review, buyer, fulfilled_order) -> None:
        # Act & Assert
        with pytest.raises(DuplicateReviewError) as exc_info:
            service.create_review(buyer, ReviewCreate(order_id=fulfilled_order, comment="Again"))
        assert exc_info.value.status_code == 400

    def test_order_must_be_fulfilled(self, service, buyer, producer, make_order) -> None:
        order_id = make_order(buyer, producer, status=OrderStatus.PAID, paid=True)

        with pytest.raises(ValidationError):
            service.create_review(buyer, ReviewCreate(order_id=order_id, comment="Too early"))

    def test_other_buyers_order_is_not_found(self, service, make_user, fulfilled_order) -> None:
        stranger = make_user()

        with pytest.raises(NotFoundError):
            service.create_review(stranger, ReviewCreate(order_id=fulfilled_order, comment="Not mine"))

    def test_anonymous_caller_is_unauthenticated(self, service, fulfilled_order) -> None:
        with pytest.raises(UnauthenticatedError):
            service.create_review(None, ReviewCreate(order_id=fulfilled_order, comment="Who am I"))

    def test_care_review_targets_caregiver(self, service, buyer, completed_booking) -> None:
        # Act
        result = service.create_review(buyer, ReviewCreate(care_booking_id=completed_booking, rating=5, comment="Great"))

        # Assert
        assert result.type.value == "CARE"
        assert result.care_booking_id == completed_booking
        assert result.moderation_state == ModerationState.PENDING_APPROVAL

    def test_exactly_one_target_is_required(self) -> None:
        with pytest.raises(PydanticValidationError):
            ReviewCreate(comment="No target")


class TestReviewerEdits:
    def test_reviewer_can_edit_pending_review(self, service, review, buyer) -> None:
        result = service.update_review_by_reviewer(review.id, buyer, ReviewUpdate(comment="Updated", rating=5))

        assert result.comment == "Updated"
        assert result.rating == 5

    def test_other_user_cannot_edit(self, service, review, producer) -> None:
        with pytest.raises(ForbiddenError):
            service.update_review_by_reviewer(review.id, producer, ReviewUpdate(comment="Mine now"))

    def test_published_review_is_locked(self, service, review, buyer, producer) -> None:
        service.approve_review_by_producer(review.id, producer)

        with pytest.raises(ValidationError):
            service.update_review_by_reviewer(review.id, buyer, ReviewUpdate(comment="Too late"))

    def test_get_review_for_order(self, service, review, buyer, fulfilled_order) -> None:
        assert service.get_review_for_order(fulfilled_order, buyer).id == review.id


class TestProducerModeration:
    """Test cases for producer approve, flag and resolve."""

    def test_approve_publishes_review(self, service, review, producer) -> None:
        # Act
        result = service.approve_review_by_producer(review.id, producer)

        # Assert
        assert result.moderation_state == ModerationState.PUBLIC
        assert result.approved_at is not None
        assert [r.id for r in service.list_public_reviews(producer.id)] == [review.id]

    def test_approve_is_idempotent(self, service, review, producer, telemetry_sink) -> None:
        first = service.approve_review_by_producer(review.id, producer)
        second = service.approve_review_by_producer(review.id, producer)

        assert second.approved_at == first.approved_at
        assert second.moderation_state == ModerationState.PUBLIC
        assert [e for e, _ in telemetry_sink.events].count("review_approved") == 1

    def test_non_owner_approve_is_forbidden_and_changes_nothing(
        self, service, review, producer, other_producer
    ) -> None:
        """Test that a producer who is not the reviewee cannot approve."""
        # Act & Assert
        with pytest.raises(ForbiddenError):
            service.approve_review_by_producer(review.id, other_producer)

        pending = service.list_pending_for_producer(producer)
        assert [r.id for r in pending] == [review.id]
        assert pending[0].moderation_state == ModerationState.PENDING_APPROVAL
        assert pending[0].approved_at is None

    def test_buyer_cannot_approve(self, service, review, buyer) -> None:
        with pytest.raises(ForbiddenError):
            service.approve_review_by_producer(review.id, buyer)

    def test_missing_review_is_not_found(self, service, producer) -> None:
        with pytest.raises(NotFoundError):
            service.approve_review_by_producer("does-not-exist", producer)

    def test_flag_keeps_visibility_and_records_actor(self, service, review, producer) -> None:
        # Act
        result = service.flag_review_by_producer(review.id, producer)

        # Assert
        assert result.flagged_for_admin is True
        assert result.flagged_by_id == producer.id
        assert result.flagged_at is not None
        assert result.private_flag is True
        assert result.moderation_state == ModerationState.FLAGGED

    def test_flag_is_idempotent(self, service, review, producer) -> None:
        first = service.flag_review_by_producer(review.id, producer)
        second = service.flag_review_by_producer(review.id, producer)

        assert second.flagged_at == first.flagged_at

    def test_flagged_review_stays_on_pending_dashboard(self, service, review, producer) -> None:
        service.flag_review_by_producer(review.id, producer)

        pending = service.list_pending_for_producer(producer)

        assert [r.id for r in pending] == [review.id]
        assert pending[0].flagged_for_admin is True

    def test_resolve_records_response_without_publishing(self, service, review, producer) -> None:
        result = service.resolve_review_by_producer(review.id, producer, "Sorry, refund on the way")

        assert result.resolved is True
        assert result.producer_response == "Sorry, refund on the way"
        assert result.is_public is False


class TestAdminModeration:
    """Test cases for admin flag handling and hiding."""

    def test_approve_flag_publishes_and_audits(self, service, review, producer, admin, audit_log) -> None:
        service.flag_review_by_producer(review.id, producer)

        # Act
        result = service.approve_flagged_review_by_admin(review.id, admin)

        # Assert
        assert result.moderation_state == ModerationState.PUBLIC
        assert result.flagged_for_admin is False
        entries = audit_log.list_for_entity(review.id)
        assert len(entries) == 1
        assert entries[0].details.action == AdminAction.REVIEW_APPROVE_FLAG.value
        assert entries[0].performed_by_id == admin.id
        assert entries[0].details.flagged_by_id == producer.id
        assert entries[0].details.was_private is True

    def test_dismiss_flag_leaves_visibility_unchanged(self, service, review, producer, admin, audit_log) -> None:
        """Test that dismissing a flag only clears the flag and appends an audit record."""
        flagged = service.flag_review_by_producer(review.id, producer)

        # Act
        result = service.dismiss_flag_by_admin(review.id, admin)

        # Assert
        assert result.private_flag == flagged.private_flag
        assert result.hidden_by_admin == flagged.hidden_by_admin
        assert result.is_public == flagged.is_public
        assert result.flagged_for_admin is False
        assert result.moderation_state == ModerationState.PENDING_APPROVAL
        assert [e.details.action for e in audit_log.list_for_entity(review.id)] == ["REVIEW_DISMISS_FLAG"]

    def test_dismiss_flag_on_public_review_keeps_it_public(self, service, review, producer, admin) -> None:
        service.approve_review_by_producer(review.id, producer)
        service.flag_review_by_producer(review.id, producer)

        result = service.dismiss_flag_by_admin(review.id, admin)

        assert result.is_public is True

    def test_hidden_review_is_excluded_from_public_listing(self, service, review, producer, admin) -> None:
        """Test that hiding wins over an approved review."""
        service.approve_review_by_producer(review.id, producer)

        result = service.hide_review_by_admin(review.id, admin)

        assert result.moderation_state == ModerationState.HIDDEN
        assert result.private_flag is False
        assert service.list_public_reviews(producer.id) == []

    def test_guidance_is_audited(self, service, review, admin, audit_log) -> None:
        service.set_admin_guidance(review.id, admin, "Please keep it factual")
        result = service.set_admin_guidance(review.id, admin, "   ")

        assert result.admin_guidance is None
        details = [e.details for e in audit_log.list_for_entity(review.id)]
        assert details[0].guidance == "Please keep it factual"
        assert details[1].previous_guidance == "Please keep it factual"

    def test_producer_cannot_use_admin_actions(self, service, review, producer) -> None:
        with pytest.raises(ForbiddenError):
            service.approve_flagged_review_by_admin(review.id, producer)
        with pytest.raises(ForbiddenError):
            service.dismiss_flag_by_admin(review.id, producer)

    def test_admin_list_filters_flagged(self, service, review, producer, admin) -> None:
        assert service.list_for_admin(admin, flagged_only=True) == []
        service.flag_review_by_producer(review.id, producer)

        assert [r.id for r in service.list_for_admin(admin, flagged_only=True)] == [review.id]
        assert len(service.list_for_admin(admin)) == 1


class TestModerationScenario:
    def test_buyer_review_flagged_then_approved_by_admin(
        self, service, buyer, producer, admin, fulfilled_order, audit_log
    ) -> None:
        """Test the full create, flag and admin approve-flag path."""
        # Arrange
        review = service.create_review(buyer, ReviewCreate(order_id=fulfilled_order, rating=2, comment="Bruised"))
        assert review.moderation_state == ModerationState.PENDING_APPROVAL

        # Act
        service.flag_review_by_producer(review.id, producer)
        service.approve_flagged_review_by_admin(review.id, admin)

        # Assert
        assert [r.id for r in service.list_public_reviews(producer.id)] == [review.id]
        entries = [
            e for e in audit_log.list_for_entity(review.id)
            if e.details.action == "REVIEW_APPROVE_FLAG"
        ]
        assert len(entries) == 1
        assert entries[0].entity_id == review.id
        assert entries[0].performed_by_id == admin.id
