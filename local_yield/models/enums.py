"""
Enumerations shared by models, schemas and services.
"""

from enum import Enum


class UserRole(str, Enum):
    BUYER = "BUYER"
    PRODUCER = "PRODUCER"
    ADMIN = "ADMIN"


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    FULFILLED = "FULFILLED"
    CANCELED = "CANCELED"
    REFUNDED = "REFUNDED"


class PaymentMethod(str, Enum):
    CARD = "CARD"
    CASH = "CASH"


class FulfillmentType(str, Enum):
    PICKUP = "PICKUP"
    DELIVERY = "DELIVERY"


class ReviewType(str, Enum):
    MARKET = "MARKET"
    CARE = "CARE"


class ModerationState(str, Enum):
    """Derived review state; never persisted."""
    PENDING_APPROVAL = "PENDING_APPROVAL"
    FLAGGED = "FLAGGED"
    PUBLIC = "PUBLIC"
    HIDDEN = "HIDDEN"


class CareBookingStatus(str, Enum):
    REQUESTED = "REQUESTED"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"
    CANCELED = "CANCELED"
    COMPLETED = "COMPLETED"


class PostingStatus(str, Enum):
    OPEN = "OPEN"
    FILLED = "FILLED"
    CLOSED = "CLOSED"


class ReportStatus(str, Enum):
    PENDING = "PENDING"
    REVIEWED = "REVIEWED"
    RESOLVED = "RESOLVED"
    DISMISSED = "DISMISSED"


class ReportReason(str, Enum):
    SPAM = "SPAM"
    INAPPROPRIATE_CONTENT = "INAPPROPRIATE_CONTENT"
    SCAM = "SCAM"
    HARASSMENT = "HARASSMENT"
    OTHER = "OTHER"


class ReportEntityType(str, Enum):
    CAREGIVER = "caregiver"
    HELP_EXCHANGE_POSTING = "help_exchange_posting"
    ORDER = "order"


class OrderProblemType(str, Enum):
    LATE = "LATE"
    DAMAGED = "DAMAGED"
    MISSING = "MISSING"
    NOT_AS_DESCRIBED = "NOT_AS_DESCRIBED"
    WRONG_ITEM = "WRONG_ITEM"
    OTHER = "OTHER"


class ProposedOutcome(str, Enum):
    REFUND = "REFUND"
    PARTIAL_REFUND = "PARTIAL_REFUND"
    REPLACEMENT = "REPLACEMENT"
    STORE_CREDIT = "STORE_CREDIT"
    OTHER = "OTHER"


class AdminAction(str, Enum):
    REVIEW_APPROVE_FLAG = "REVIEW_APPROVE_FLAG"
    REVIEW_DISMISS_FLAG = "REVIEW_DISMISS_FLAG"
    REVIEW_HIDE = "REVIEW_HIDE"
    REVIEW_GUIDANCE = "REVIEW_GUIDANCE"
    REPORT_STATUS_UPDATE = "REPORT_STATUS_UPDATE"
    ORDER_STATUS_UPDATE = "ORDER_STATUS_UPDATE"
