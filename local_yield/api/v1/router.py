"""
API v1 Router - Main Entry Point
Aggregates all v1 API endpoints for the marketplace
"""
from fastapi import APIRouter

from local_yield.api.v1 import admin, dashboard, feed, identity, orders, reports, reviews
from local_yield.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(
    responses={
        400: {"description": "Bad Request"},
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not Found"},
        429: {"description": "Too Many Requests"},
        500: {"description": "Internal Server Error"},
    }
)

router.include_router(identity.router)
router.include_router(feed.router)
router.include_router(reviews.router)
router.include_router(dashboard.router)
router.include_router(orders.router)
router.include_router(reports.router)
router.include_router(admin.router)

logger.debug(f"API v1 router assembled with {len(router.routes)} routes")
