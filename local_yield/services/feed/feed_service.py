"""
Location-based feed and browse aggregation.

Each feed section is queried on its own, filtered by distance from the
origin ZIP and truncated while keeping that section's recency order.
Sections are never interleaved.
"""
from __future__ import annotations

from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Tuple, TypeVar, Union

from sqlalchemy.orm import Session

from local_yield.config.settings import settings
from local_yield.core.logging import get_logger
from local_yield.models import Event, HelpExchangePosting, Product
from local_yield.repositories import (
    EventRepository,
    HelpExchangePostingRepository,
    ProductRepository,
    ZipCentroidRepository,
)
from local_yield.schemas.feed import (
    EventItem,
    FeedResponse,
    ListingsResponse,
    PostingItem,
    ProductItem,
    ProximityLabel,
)
from local_yield.services.common import UnitOfWork
from local_yield.services.geo import clamp_radius, distance_miles, normalize_zip

logger = get_logger(__name__)

T = TypeVar("T")
Coordinates = Tuple[float, float]


def proximity_label(distance: Optional[float], radius: float) -> ProximityLabel:
    if distance is not None and distance <= radius:
        return ProximityLabel.NEARBY
    return ProximityLabel.FARTHER_OUT


def _owner_zip(item) -> Optional[str]:
    owner = getattr(item, "owner", None)
    return normalize_zip(owner.zip_code) if owner is not None else None


def _posting_zip(posting: HelpExchangePosting) -> Optional[str]:
    return normalize_zip(posting.zip_code)


class _DistanceContext:
    """Origin and centroid lookups for one feed or browse request."""

    def __init__(self, origin: Optional[Coordinates], centroids: Dict[str, Coordinates], radius: float):
        self.origin = origin
        self.centroids = centroids
        self.radius = radius

    @property
    def filtering(self) -> bool:
        return self.origin is not None

    def distance_for(self, zip_code: Optional[str]) -> Optional[float]:
        if self.origin is None or zip_code is None:
            return None
        return distance_miles(self.origin, self.centroids.get(zip_code))

    def within_radius(
        self,
        rows: Iterable[T],
        zip_of: Callable[[T], Optional[str]],
        limit: int,
    ) -> List[Tuple[T, Optional[float]]]:
        kept: List[Tuple[T, Optional[float]]] = []
        for row in rows:
            distance = self.distance_for(zip_of(row))
            if self.filtering and (distance is None or distance > self.radius):
                continue
            kept.append((row, distance))
            if len(kept) >= limit:
                break
        return kept


class FeedService:
    """
    Home feed and product browse, both anchored on a ZIP code.

    A missing or unresolvable ZIP never fails the request; results are
    returned unfiltered with unknown distances instead.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def _now(self) -> datetime:
        return datetime.utcnow()

    def _context(
        self,
        uow: UnitOfWork,
        origin_zip: Optional[str],
        item_zips: Iterable[Optional[str]],
        radius: float,
    ) -> _DistanceContext:
        wanted = {z for z in item_zips if z}
        if origin_zip:
            wanted.add(origin_zip)
        centroids = uow.get_repo(ZipCentroidRepository).get_many(wanted)
        origin = centroids.get(origin_zip) if origin_zip else None
        if origin_zip and origin is None:
            logger.info(
                f"No centroid for ZIP {origin_zip}; distance filtering disabled",
                extra={"zip": origin_zip},
            )
        return _DistanceContext(origin, centroids, radius)

    # ------------------------------------------------------------------ #
    # Mapping
    # ------------------------------------------------------------------ #
    def _event_item(self, event: Event, distance: Optional[float], radius: float) -> EventItem:
        return EventItem(
            id=event.id,
            name=event.name,
            location=event.location,
            event_date=event.event_date,
            event_hours=event.event_hours,
            distance=distance,
            label=proximity_label(distance, radius),
        )

    def _posting_item(self, posting: HelpExchangePosting, distance: Optional[float], radius: float) -> PostingItem:
        return PostingItem(
            id=posting.id,
            title=posting.title,
            category=posting.category,
            zip_code=posting.zip_code,
            created_at=posting.created_at,
            distance=distance,
            label=proximity_label(distance, radius),
        )

    def _product_item(self, product: Product, distance: Optional[float], radius: float) -> ProductItem:
        return ProductItem(
            id=product.id,
            title=product.title,
            description=product.description,
            category=product.category,
            price_cents=product.price_cents,
            producer_id=product.user_id,
            created_at=product.created_at,
            distance=distance,
            label=proximity_label(distance, radius),
        )

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #
    def get_feed(self, zip_code: Optional[str] = None, radius_miles: Union[str, float, None] = None) -> FeedResponse:
        """
        Upcoming events, open help-exchange postings and newest products
        near `zip_code`.
        """
        origin_zip = normalize_zip(zip_code)
        radius = clamp_radius(
            radius_miles,
            default=settings.FEED_DEFAULT_RADIUS_MILES,
            maximum=settings.FEED_MAX_RADIUS_MILES,
        )
        per_section = settings.FEED_ITEMS_PER_SECTION
        fetch = per_section * 2

        with UnitOfWork(self._session_factory) as uow:
            events = uow.get_repo(EventRepository).list_upcoming(self._now(), fetch)
            postings = uow.get_repo(HelpExchangePostingRepository).list_open_newest(fetch)
            products = uow.get_repo(ProductRepository).list_newest(fetch)

            ctx = self._context(
                uow,
                origin_zip,
                [_owner_zip(e) for e in events]
                + [_posting_zip(p) for p in postings]
                + [_owner_zip(p) for p in products],
                radius,
            )

            return FeedResponse(
                zip=origin_zip,
                radius=radius,
                events=[
                    self._event_item(e, d, radius)
                    for e, d in ctx.within_radius(events, _owner_zip, per_section)
                ],
                postings=[
                    self._posting_item(p, d, radius)
                    for p, d in ctx.within_radius(postings, _posting_zip, per_section)
                ],
                products=[
                    self._product_item(p, d, radius)
                    for p, d in ctx.within_radius(products, _owner_zip, per_section)
                ],
            )

    def browse_listings(
        self,
        zip_code: Optional[str] = None,
        radius_miles: Union[str, float, None] = None,
        q: Optional[str] = None,
    ) -> ListingsResponse:
        """
        All products, labelled by proximity and sorted nearby first.

        Unlike the feed, browse never drops items outside the radius; they
        are labelled `fartherOut` and sorted after the nearby ones.
        """
        origin_zip = normalize_zip(zip_code)
        radius = clamp_radius(
            radius_miles,
            default=settings.FEED_DEFAULT_RADIUS_MILES,
            maximum=settings.BROWSE_MAX_RADIUS_MILES,
        )
        query = (q or "").strip() or None

        with UnitOfWork(self._session_factory) as uow:
            products = uow.get_repo(ProductRepository).search(query)
            ctx = self._context(uow, origin_zip, [_owner_zip(p) for p in products], radius)
            items = [
                self._product_item(p, ctx.distance_for(_owner_zip(p)), radius)
                for p in products
            ]

        # Stable sort keeps newest-first order among equal keys
        items.sort(
            key=lambda item: (
                item.label != ProximityLabel.NEARBY,
                item.distance is None,
                item.distance if item.distance is not None else 0.0,
            )
        )
        return ListingsResponse(zip=origin_zip, radius=radius, q=query, listings=items)
