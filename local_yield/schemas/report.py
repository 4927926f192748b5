"""
Report schemas.
"""

from __future__ import annotations

from datetime import datetime
from typing import Union

from pydantic import Field, model_validator

from local_yield.models.enums import (
    OrderProblemType,
    ProposedOutcome,
    ReportEntityType,
    ReportReason,
    ReportStatus,
)
from local_yield.schemas.common import BaseSchema


class ReportCreate(BaseSchema):
    entity_type: ReportEntityType
    entity_id: str = Field(..., min_length=1, max_length=36)
    reason: ReportReason
    details: Union[str, None] = Field(default=None, max_length=5000)
    problem_type: Union[OrderProblemType, None] = None
    proposed_outcome: Union[ProposedOutcome, None] = None

    @model_validator(mode="after")
    def _order_dispute_fields(self) -> "ReportCreate":
        if self.entity_type == ReportEntityType.ORDER:
            if self.problem_type is None or self.proposed_outcome is None:
                raise ValueError("Order reports require problemType and proposedOutcome")
        return self


class ReportStatusUpdate(BaseSchema):
    status: ReportStatus


class ReportResponse(BaseSchema):
    id: str
    reporter_id: str
    entity_type: ReportEntityType
    entity_id: str
    reason: ReportReason
    details: Union[str, None] = None
    status: ReportStatus
    problem_type: Union[OrderProblemType, None] = None
    proposed_outcome: Union[ProposedOutcome, None] = None
    created_at: datetime
