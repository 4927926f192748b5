from local_yield.repositories.audit_repository import AdminActionLogRepository
from local_yield.repositories.base import BaseRepository
from local_yield.repositories.catalog_repository import (
    EventRepository,
    HelpExchangePostingRepository,
    ProductRepository,
)
from local_yield.repositories.geo_repository import ZipCentroidRepository
from local_yield.repositories.order_repository import CareBookingRepository, OrderRepository
from local_yield.repositories.report_repository import ReportRepository
from local_yield.repositories.review_repository import ReviewRepository
from local_yield.repositories.user_repository import UserRepository

__all__ = [
    "AdminActionLogRepository",
    "BaseRepository",
    "EventRepository",
    "HelpExchangePostingRepository",
    "ProductRepository",
    "ZipCentroidRepository",
    "CareBookingRepository",
    "OrderRepository",
    "ReportRepository",
    "ReviewRepository",
    "UserRepository",
]
