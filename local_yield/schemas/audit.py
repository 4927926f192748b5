"""
Admin action audit schemas.

Each action kind carries its own structured metadata; the union is
discriminated on `action` so stored JSON always round-trips to the
right variant.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import Field, TypeAdapter

from local_yield.models.enums import OrderStatus, ReportStatus
from local_yield.schemas.common import BaseSchema

__all__ = [
    "ReviewApproveFlagDetails",
    "ReviewDismissFlagDetails",
    "ReviewHideDetails",
    "ReviewGuidanceDetails",
    "ReportStatusUpdateDetails",
    "OrderStatusUpdateDetails",
    "AdminActionDetails",
    "AuditLogEntry",
    "parse_action_details",
]


class ReviewApproveFlagDetails(BaseSchema):
    action: Literal["REVIEW_APPROVE_FLAG"] = "REVIEW_APPROVE_FLAG"
    flagged_by_id: Union[str, None] = None
    flagged_at: Union[datetime, None] = None
    was_private: bool
    was_hidden: bool


class ReviewDismissFlagDetails(BaseSchema):
    action: Literal["REVIEW_DISMISS_FLAG"] = "REVIEW_DISMISS_FLAG"
    flagged_by_id: Union[str, None] = None
    flagged_at: Union[datetime, None] = None
    was_flagged: bool


class ReviewHideDetails(BaseSchema):
    action: Literal["REVIEW_HIDE"] = "REVIEW_HIDE"
    was_public: bool


class ReviewGuidanceDetails(BaseSchema):
    action: Literal["REVIEW_GUIDANCE"] = "REVIEW_GUIDANCE"
    previous_guidance: Union[str, None] = None
    guidance: Union[str, None] = None


class ReportStatusUpdateDetails(BaseSchema):
    action: Literal["REPORT_STATUS_UPDATE"] = "REPORT_STATUS_UPDATE"
    previous_status: ReportStatus
    new_status: ReportStatus


class OrderStatusUpdateDetails(BaseSchema):
    action: Literal["ORDER_STATUS_UPDATE"] = "ORDER_STATUS_UPDATE"
    previous_status: OrderStatus
    new_status: OrderStatus


AdminActionDetails = Annotated[
    Union[
        ReviewApproveFlagDetails,
        ReviewDismissFlagDetails,
        ReviewHideDetails,
        ReviewGuidanceDetails,
        ReportStatusUpdateDetails,
        OrderStatusUpdateDetails,
    ],
    Field(discriminator="action"),
]

_details_adapter: TypeAdapter = TypeAdapter(AdminActionDetails)


def parse_action_details(raw: dict) -> AdminActionDetails:
    return _details_adapter.validate_python(raw)


class AuditLogEntry(BaseSchema):
    id: str
    performed_by_id: str
    entity_type: str
    entity_id: str
    details: AdminActionDetails
    created_at: datetime
