"""
Review moderation workflow.

States (see `Review.moderation_state`):

    PENDING_APPROVAL --producer approve--> PUBLIC
    PENDING_APPROVAL --producer flag-----> FLAGGED
    FLAGGED --admin approve-flag--> PUBLIC
    FLAGGED --admin dismiss-flag--> PENDING_APPROVAL (flag cleared)
    any --admin hide--> HIDDEN

Every transition is one locked read-modify-write inside a UnitOfWork.
Admin transitions append their audit record in the same transaction.
"""
from __future__ import annotations

from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from local_yield.core.exceptions import (
    DuplicateReviewError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from local_yield.core.logging import get_logger
from local_yield.core.telemetry import BestEffortTelemetry
from local_yield.models import Review
from local_yield.models.enums import CareBookingStatus, OrderStatus, ReviewType
from local_yield.repositories import (
    CareBookingRepository,
    OrderRepository,
    ReviewRepository,
)
from local_yield.schemas.audit import (
    ReviewApproveFlagDetails,
    ReviewDismissFlagDetails,
    ReviewGuidanceDetails,
    ReviewHideDetails,
)
from local_yield.schemas.review import (
    PublicReview,
    ReviewCreate,
    ReviewResponse,
    ReviewUpdate,
)
from local_yield.services.audit import AuditLogService
from local_yield.services.auth import (
    Identity,
    require_admin,
    require_auth,
    require_producer_or_admin,
)
from local_yield.services.common import UnitOfWork

logger = get_logger(__name__)

REVIEW_ENTITY = "Review"


class ReviewModerationService:
    """
    Buyer, producer and admin operations on reviews.
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

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    def _get_repo(self, uow: UnitOfWork) -> ReviewRepository:
        return uow.get_repo(ReviewRepository)

    def _now(self) -> datetime:
        return datetime.utcnow()

    def _load_for_update(self, uow: UnitOfWork, review_id: str) -> Review:
        review = self._get_repo(uow).get_for_update(review_id)
        if review is None:
            raise NotFoundError("Review", review_id)
        return review

    def _load_owned(self, uow: UnitOfWork, review_id: str, producer: Identity) -> Review:
        review = self._load_for_update(uow, review_id)
        if review.reviewee_id != producer.id:
            raise ForbiddenError("You can only moderate reviews about you")
        return review

    def _to_response(self, review: Review) -> ReviewResponse:
        return ReviewResponse(
            id=review.id,
            type=review.type,
            reviewer_id=review.reviewer_id,
            reviewee_id=review.reviewee_id,
            order_id=review.order_id,
            care_booking_id=review.care_booking_id,
            rating=review.rating,
            comment=review.comment,
            producer_response=review.producer_response,
            private_flag=review.private_flag,
            resolved=review.resolved,
            hidden_by_admin=review.hidden_by_admin,
            flagged_for_admin=review.flagged_for_admin,
            flagged_at=review.flagged_at,
            flagged_by_id=review.flagged_by_id,
            approved_at=review.approved_at,
            admin_guidance=review.admin_guidance,
            moderation_state=review.moderation_state,
            is_public=review.is_public,
            created_at=review.created_at,
        )

    def _to_public(self, review: Review) -> PublicReview:
        return PublicReview(
            id=review.id,
            type=review.type,
            reviewee_id=review.reviewee_id,
            rating=review.rating,
            comment=review.comment,
            producer_response=review.producer_response,
            reviewer_name=review.reviewer.name if review.reviewer else None,
            created_at=review.created_at,
        )

    # ------------------------------------------------------------------ #
    # Buyer
    # ------------------------------------------------------------------ #
    def create_review(self, reviewer: Optional[Identity], data: ReviewCreate) -> ReviewResponse:
        """
        Create a pending review for a fulfilled order or completed booking.

        One review per reviewer per order (or booking). New reviews are
        never public until the reviewee approves them.
        """
        reviewer = require_auth(reviewer)

        with UnitOfWork(self._session_factory) as uow:
            repo = self._get_repo(uow)

            if data.order_id:
                order = uow.get_repo(OrderRepository).get(data.order_id)
                if order is None or order.buyer_id != reviewer.id:
                    raise NotFoundError("Order", data.order_id)
                if order.status != OrderStatus.FULFILLED:
                    raise ValidationError("Reviews can only be left for fulfilled orders", field="orderId")
                if repo.find_for_order(reviewer.id, order.id) is not None:
                    raise DuplicateReviewError()
                review = Review(
                    reviewer_id=reviewer.id,
                    reviewee_id=order.producer_id,
                    type=ReviewType.MARKET,
                    order_id=order.id,
                )
            else:
                booking = uow.get_repo(CareBookingRepository).get(data.care_booking_id)
                if booking is None or booking.care_seeker_id != reviewer.id:
                    raise NotFoundError("CareBooking", data.care_booking_id)
                if booking.status != CareBookingStatus.COMPLETED:
                    raise ValidationError("Reviews can only be left for completed bookings", field="careBookingId")
                if repo.find_for_booking(reviewer.id, booking.id) is not None:
                    raise DuplicateReviewError("You have already left a review for this booking")
                review = Review(
                    reviewer_id=reviewer.id,
                    reviewee_id=booking.caregiver_id,
                    type=ReviewType.CARE,
                    care_booking_id=booking.id,
                )

            review.rating = data.rating
            review.comment = data.comment
            review.private_flag = True
            review.resolved = False
            review.hidden_by_admin = False
            review.flagged_for_admin = False

            try:
                repo.create(review)
            except IntegrityError as exc:
                raise DuplicateReviewError() from exc

            result = self._to_response(review)

        self._telemetry.track("review_created", review_id=result.id, type=result.type.value)
        return result

    def update_review_by_reviewer(
        self,
        review_id: str,
        reviewer: Optional[Identity],
        data: ReviewUpdate,
    ) -> ReviewResponse:
        """Edit comment or rating while the review is still private."""
        reviewer = require_auth(reviewer)

        with UnitOfWork(self._session_factory) as uow:
            review = self._load_for_update(uow, review_id)
            if review.reviewer_id != reviewer.id:
                raise ForbiddenError("You can only edit your own review")
            if not review.private_flag or review.hidden_by_admin:
                raise ValidationError("Only pending reviews can be edited")

            changes = data.model_dump(exclude_unset=True, exclude_none=True)
            if changes:
                self._get_repo(uow).update(review, changes)
            return self._to_response(review)

    def get_review_for_order(self, order_id: str, buyer: Optional[Identity]) -> Optional[ReviewResponse]:
        buyer = require_auth(buyer)

        with UnitOfWork(self._session_factory) as uow:
            order = uow.get_repo(OrderRepository).get(order_id)
            if order is None or order.buyer_id != buyer.id:
                raise NotFoundError("Order", order_id)
            review = self._get_repo(uow).find_for_order(buyer.id, order_id)
            return self._to_response(review) if review else None

    # ------------------------------------------------------------------ #
    # Producer
    # ------------------------------------------------------------------ #
    def approve_review_by_producer(self, review_id: str, producer: Optional[Identity]) -> ReviewResponse:
        """
        Publish a review about the caller.

        Approving also withdraws any open flag the producer raised.
        Repeat calls leave the review unchanged.
        """
        producer = require_producer_or_admin(producer)

        with UnitOfWork(self._session_factory) as uow:
            review = self._load_owned(uow, review_id, producer)
            changed = review.private_flag or review.flagged_for_admin
            if changed:
                review.private_flag = False
                review.flagged_for_admin = False
                review.approved_at = review.approved_at or self._now()
            result = self._to_response(review)

        if changed:
            self._telemetry.track("review_approved", review_id=review_id, producer_id=producer.id)
        return result

    def flag_review_by_producer(self, review_id: str, producer: Optional[Identity]) -> ReviewResponse:
        """Escalate a review to admins; visibility is unchanged."""
        producer = require_producer_or_admin(producer)

        with UnitOfWork(self._session_factory) as uow:
            review = self._load_owned(uow, review_id, producer)
            changed = not review.flagged_for_admin
            if changed:
                review.flagged_for_admin = True
                review.flagged_at = self._now()
                review.flagged_by_id = producer.id
            result = self._to_response(review)

        if changed:
            self._telemetry.track("review_flagged", review_id=review_id, producer_id=producer.id)
        return result

    def resolve_review_by_producer(
        self,
        review_id: str,
        producer: Optional[Identity],
        response: Optional[str] = None,
    ) -> ReviewResponse:
        """Mark a private complaint handled, optionally replying to the reviewer."""
        producer = require_producer_or_admin(producer)

        with UnitOfWork(self._session_factory) as uow:
            review = self._load_owned(uow, review_id, producer)
            review.resolved = True
            if response:
                review.producer_response = response
            return self._to_response(review)

    def list_pending_for_producer(self, producer: Optional[Identity]) -> List[ReviewResponse]:
        """Private reviews about the caller, flagged ones included."""
        producer = require_producer_or_admin(producer)

        with UnitOfWork(self._session_factory) as uow:
            reviews = self._get_repo(uow).list_pending_for_reviewee(producer.id)
            return [self._to_response(review) for review in reviews]

    # ------------------------------------------------------------------ #
    # Admin
    # ------------------------------------------------------------------ #
    def approve_flagged_review_by_admin(self, review_id: str, admin: Optional[Identity]) -> ReviewResponse:
        """Clear the flag and force the review public."""
        admin = require_admin(admin)

        with UnitOfWork(self._session_factory) as uow:
            review = self._load_for_update(uow, review_id)
            details = ReviewApproveFlagDetails(
                flagged_by_id=review.flagged_by_id,
                flagged_at=review.flagged_at,
                was_private=review.private_flag,
                was_hidden=review.hidden_by_admin,
            )
            review.flagged_for_admin = False
            review.private_flag = False
            review.hidden_by_admin = False
            review.approved_at = review.approved_at or self._now()

            self._audit.append(
                uow,
                admin_id=admin.id,
                entity_type=REVIEW_ENTITY,
                entity_id=review.id,
                details=details,
            )
            return self._to_response(review)

    def dismiss_flag_by_admin(self, review_id: str, admin: Optional[Identity]) -> ReviewResponse:
        """Drop the flag; the review keeps its pre-flag visibility."""
        admin = require_admin(admin)

        with UnitOfWork(self._session_factory) as uow:
            review = self._load_for_update(uow, review_id)
            details = ReviewDismissFlagDetails(
                flagged_by_id=review.flagged_by_id,
                flagged_at=review.flagged_at,
                was_flagged=review.flagged_for_admin,
            )
            review.flagged_for_admin = False
            review.flagged_at = None
            review.flagged_by_id = None

            self._audit.append(
                uow,
                admin_id=admin.id,
                entity_type=REVIEW_ENTITY,
                entity_id=review.id,
                details=details,
            )
            return self._to_response(review)

    def hide_review_by_admin(self, review_id: str, admin: Optional[Identity]) -> ReviewResponse:
        admin = require_admin(admin)

        with UnitOfWork(self._session_factory) as uow:
            review = self._load_for_update(uow, review_id)
            details = ReviewHideDetails(was_public=review.is_public)
            review.hidden_by_admin = True

            self._audit.append(
                uow,
                admin_id=admin.id,
                entity_type=REVIEW_ENTITY,
                entity_id=review.id,
                details=details,
            )
            return self._to_response(review)

    def set_admin_guidance(
        self,
        review_id: str,
        admin: Optional[Identity],
        guidance: Optional[str],
    ) -> ReviewResponse:
        """Store guidance shown to the reviewer; blank clears it."""
        admin = require_admin(admin)
        guidance = (guidance or "").strip() or None

        with UnitOfWork(self._session_factory) as uow:
            review = self._load_for_update(uow, review_id)
            details = ReviewGuidanceDetails(
                previous_guidance=review.admin_guidance,
                guidance=guidance,
            )
            review.admin_guidance = guidance

            self._audit.append(
                uow,
                admin_id=admin.id,
                entity_type=REVIEW_ENTITY,
                entity_id=review.id,
                details=details,
            )
            return self._to_response(review)

    def list_for_admin(self, admin: Optional[Identity], flagged_only: bool = False) -> List[ReviewResponse]:
        require_admin(admin)

        with UnitOfWork(self._session_factory) as uow:
            repo = self._get_repo(uow)
            reviews = repo.list_flagged() if flagged_only else repo.list_all()
            return [self._to_response(review) for review in reviews]

    # ------------------------------------------------------------------ #
    # Public
    # ------------------------------------------------------------------ #
    def list_public_reviews(self, reviewee_id: str) -> List[PublicReview]:
        """Reviews anyone may see: approved and not hidden."""
        with UnitOfWork(self._session_factory) as uow:
            reviews = self._get_repo(uow).list_public_for_reviewee(reviewee_id)
            return [self._to_public(review) for review in reviews]
