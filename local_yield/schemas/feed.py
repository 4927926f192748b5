"""
Feed and browse schemas (derived, never persisted).
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Union

from local_yield.schemas.common import BaseSchema


class ProximityLabel(str, Enum):
    NEARBY = "nearby"
    FARTHER_OUT = "fartherOut"


class FeedItem(BaseSchema):
    id: str
    distance: Union[float, None] = None
    label: ProximityLabel


class EventItem(FeedItem):
    name: str
    location: Union[str, None] = None
    event_date: datetime
    event_hours: Union[str, None] = None


class PostingItem(FeedItem):
    title: str
    category: Union[str, None] = None
    zip_code: str
    created_at: datetime


class ProductItem(FeedItem):
    title: str
    description: Union[str, None] = None
    category: Union[str, None] = None
    price_cents: int
    producer_id: str
    created_at: datetime


class FeedResponse(BaseSchema):
    zip: Union[str, None] = None
    radius: float
    events: List[EventItem]
    postings: List[PostingItem]
    products: List[ProductItem]


class ListingsResponse(BaseSchema):
    zip: Union[str, None] = None
    radius: float
    q: Union[str, None] = None
    listings: List[ProductItem]
