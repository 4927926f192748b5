"""
Location-based feed and product browse.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from local_yield.api import deps
from local_yield.schemas.common import DataResponse
from local_yield.schemas.feed import FeedResponse, ListingsResponse
from local_yield.services.feed import FeedService

router = APIRouter(tags=["Feed"])


@router.get("/feed", response_model=DataResponse[FeedResponse])
def get_feed(
    zip_code: Optional[str] = Query(None, alias="zip"),
    radius: Optional[str] = Query(None, description="Radius in miles, clamped to the allowed range"),
    service: FeedService = Depends(deps.get_feed_service),
):
    return DataResponse(data=service.get_feed(zip_code, radius))


@router.get("/listings", response_model=DataResponse[ListingsResponse])
def browse_listings(
    zip_code: Optional[str] = Query(None, alias="zip"),
    radius: Optional[str] = Query(None),
    q: Optional[str] = Query(None, max_length=200),
    service: FeedService = Depends(deps.get_feed_service),
):
    return DataResponse(data=service.browse_listings(zip_code, radius, q))
