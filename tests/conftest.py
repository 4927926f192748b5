"""Shared pytest fixtures for Local Yield tests."""

import os

# Settings are cached at import time; configure the test environment first.
os.environ["ENVIRONMENT"] = "testing"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["DEV_AUTH_ENABLED"] = "true"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["LOG_FORMAT"] = "standard"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime, timedelta  # noqa: E402
from typing import Callable, Dict, Iterator  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from local_yield.core.telemetry import BestEffortTelemetry, InMemoryTelemetrySink  # noqa: E402
from local_yield.db.init_db import drop_db, init_db  # noqa: E402
from local_yield.db.session import SessionLocal, engine  # noqa: E402
from local_yield.models import (  # noqa: E402
    CareBooking,
    Event,
    HelpExchangePosting,
    Order,
    Product,
    User,
    ZipCentroid,
)
from local_yield.models.enums import (  # noqa: E402
    CareBookingStatus,
    OrderStatus,
    PostingStatus,
    UserRole,
)
from local_yield.services.audit import AuditLogService  # noqa: E402
from local_yield.services.auth import Identity, TokenService  # noqa: E402

# Portland, ME area plus one distant ZIP.
ZIP_CENTROIDS = {
    "04101": (43.6615, -70.2553),  # Portland
    "04074": (43.5890, -70.3740),  # Scarborough, ~7 mi
    "04011": (43.9145, -69.9653),  # Brunswick, ~22 mi
    "04401": (44.8012, -68.7778),  # Bangor, ~110 mi
    "90210": (34.0901, -118.4065),  # Beverly Hills
}


@pytest.fixture(autouse=True)
def database() -> Iterator[None]:
    """Fresh schema for every test."""
    init_db(engine)
    yield
    drop_db(engine)


@pytest.fixture
def session_factory() -> Callable[[], Session]:
    return SessionLocal


@pytest.fixture
def db(session_factory) -> Iterator[Session]:
    """Session for arranging fixtures; tests commit what they add."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def telemetry_sink() -> InMemoryTelemetrySink:
    return InMemoryTelemetrySink()


@pytest.fixture
def telemetry(telemetry_sink) -> BestEffortTelemetry:
    return BestEffortTelemetry(telemetry_sink)


@pytest.fixture
def audit_log(session_factory) -> AuditLogService:
    return AuditLogService(session_factory)


# --- Data builders -------------------------------------------------------------

@pytest.fixture
def make_user(db) -> Callable[..., Identity]:
    counter = {"n": 0}

    def _make(role: UserRole = UserRole.BUYER, zip_code: str = "04101", **flags) -> Identity:
        counter["n"] += 1
        user = User(
            email=f"{role.value.lower()}{counter['n']}@example.com",
            name=f"{role.value.title()} {counter['n']}",
            role=role,
            zip_code=zip_code,
            created_at=datetime.utcnow() + timedelta(seconds=counter["n"]),
            **flags,
        )
        db.add(user)
        db.commit()
        return Identity.from_user(user)

    return _make


@pytest.fixture
def buyer(make_user) -> Identity:
    return make_user(UserRole.BUYER)


@pytest.fixture
def producer(make_user) -> Identity:
    return make_user(UserRole.PRODUCER, is_buyer=False)


@pytest.fixture
def other_producer(make_user) -> Identity:
    return make_user(UserRole.PRODUCER, zip_code="04401", is_buyer=False)


@pytest.fixture
def admin(make_user) -> Identity:
    return make_user(UserRole.ADMIN)


@pytest.fixture
def zip_centroids(db) -> Dict[str, tuple]:
    for zip_code, (lat, lng) in ZIP_CENTROIDS.items():
        db.add(ZipCentroid(zip_code=zip_code, latitude=lat, longitude=lng))
    db.commit()
    return ZIP_CENTROIDS


@pytest.fixture
def make_product(db) -> Callable[..., str]:
    def _make(owner: Identity, title: str = "Heirloom tomatoes", price_cents: int = 450, **fields) -> str:
        product = Product(user_id=owner.id, title=title, price_cents=price_cents, **fields)
        db.add(product)
        db.commit()
        return product.id

    return _make


@pytest.fixture
def product(make_product, producer) -> str:
    return make_product(producer)


@pytest.fixture
def make_order(db) -> Callable[..., str]:
    def _make(
        buyer: Identity,
        producer: Identity,
        status: OrderStatus = OrderStatus.PENDING,
        total_cents: int = 900,
        paid: bool = False,
        via_cash: bool = False,
        product_id: str = None,
    ) -> str:
        order = Order(
            buyer_id=buyer.id,
            producer_id=producer.id,
            product_id=product_id,
            status=status,
            quantity=2,
            total_cents=total_cents,
            paid=paid,
            via_cash=via_cash,
            pickup_code="ABC234",
        )
        db.add(order)
        db.commit()
        return order.id

    return _make


@pytest.fixture
def fulfilled_order(make_order, buyer, producer, product) -> str:
    return make_order(buyer, producer, status=OrderStatus.FULFILLED, paid=True, product_id=product)


@pytest.fixture
def completed_booking(db, make_user, buyer) -> str:
    caregiver = make_user(UserRole.BUYER, is_caregiver=True)
    booking = CareBooking(
        care_seeker_id=buyer.id,
        caregiver_id=caregiver.id,
        status=CareBookingStatus.COMPLETED,
    )
    db.add(booking)
    db.commit()
    return booking.id


@pytest.fixture
def make_event(db) -> Callable[..., str]:
    def _make(owner: Identity, name: str = "Saturday market", days_ahead: int = 3) -> str:
        event = Event(
            user_id=owner.id,
            name=name,
            location="Monument Square",
            event_date=datetime.utcnow() + timedelta(days=days_ahead),
        )
        db.add(event)
        db.commit()
        return event.id

    return _make


@pytest.fixture
def make_posting(db) -> Callable[..., str]:
    def _make(
        author: Identity,
        zip_code: str = "04101",
        title: str = "Help splitting wood",
        status: PostingStatus = PostingStatus.OPEN,
    ) -> str:
        posting = HelpExchangePosting(
            created_by_id=author.id,
            title=title,
            zip_code=zip_code,
            status=status,
        )
        db.add(posting)
        db.commit()
        return posting.id

    return _make


# --- HTTP ----------------------------------------------------------------------

@pytest.fixture
def token_service() -> TokenService:
    return TokenService.from_settings()


@pytest.fixture
def auth_headers(token_service) -> Callable[[Identity], Dict[str, str]]:
    def _headers(identity: Identity) -> Dict[str, str]:
        return {"Authorization": f"Bearer {token_service.create_access_token(identity.id, identity.role)}"}

    return _headers


@pytest.fixture
def app(telemetry):
    from local_yield.api import deps
    from local_yield.main import app as application

    application.dependency_overrides[deps.get_telemetry] = lambda: telemetry
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient

    return TestClient(app, raise_server_exceptions=False)
