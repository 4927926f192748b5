"""Integration tests for the HTTP envelope, status codes and request ids."""

from unittest.mock import Mock

from local_yield.api import deps
from local_yield.core.error_handlers import GENERIC_ERROR_MESSAGE
from local_yield.core.rate_limiting import MemoryRateLimitBackend, RateLimiter
from local_yield.config.settings import Settings

API = "/api/v1"


class TestEnvelope:
    """Test cases for success and error envelopes."""

    def test_health_is_wrapped_in_data(self, client) -> None:
        response = client.get(f"{API}/health")

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "ok"
        assert response.headers["X-Request-ID"]

    def test_incoming_request_id_is_echoed(self, client) -> None:
        response = client.get(f"{API}/health", headers={"X-Request-ID": "abc-123"})

        assert response.headers["X-Request-ID"] == "abc-123"

    def test_unauthenticated_me(self, client) -> None:
        # Act
        response = client.get(f"{API}/me", headers={"X-Request-ID": "req-401"})

        # Assert
        assert response.status_code == 401
        body = response.json()
        assert body["error"]["code"] == "UNAUTHORIZED"
        assert body["error"]["message"]
        assert body["requestId"] == "req-401"
        assert "data" not in body

    def test_me_returns_capabilities(self, client, producer, auth_headers) -> None:
        response = client.get(f"{API}/me", headers=auth_headers(producer))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == producer.id
        assert data["capabilities"] == {
            "canAdmin": False,
            "canSellAsProducer": True,
            "canBuy": False,
            "canCare": False,
            "isMultiMode": False,
        }

    def test_dev_cookie_signs_in_outside_production(self, client, admin) -> None:
        response = client.get(f"{API}/me", headers={"Cookie": "__dev_user=ADMIN"})

        assert response.status_code == 200
        assert response.json()["data"]["role"] == "ADMIN"
        assert response.json()["data"]["capabilities"]["canCare"] is True
        assert response.json()["data"]["capabilities"]["isMultiMode"] is True

    def test_unknown_route_is_not_found_envelope(self, client) -> None:
        response = client.get(f"{API}/does-not-exist")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    def test_guard_runs_before_body_validation(self, client) -> None:
        """Test that a malformed body from an anonymous caller is a 401, not a 400."""
        response = client.post(f"{API}/reviews", json={"rating": "lots"})

        assert response.status_code == 401

    def test_invalid_body_is_400(self, client, buyer, auth_headers) -> None:
        response = client.post(f"{API}/reviews", json={"comment": "x"}, headers=auth_headers(buyer))

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_unexpected_error_is_generic_500(self, app, client) -> None:
        """Test that internal failures never leak their detail."""
        # Arrange
        broken = Mock()
        broken.get_feed.side_effect = RuntimeError("connection string with password")
        app.dependency_overrides[deps.get_feed_service] = lambda: broken

        # Act
        response = client.get(f"{API}/feed")

        # Assert
        assert response.status_code == 500
        assert response.json()["error"] == {"code": "INTERNAL_ERROR", "message": GENERIC_ERROR_MESSAGE}
        assert "password" not in response.text

    def test_rate_limit_returns_429(self, app, client, buyer, product, auth_headers) -> None:
        # Arrange
        limiter = RateLimiter(MemoryRateLimitBackend(), Settings(RATE_LIMIT_DEFAULT=1))
        app.dependency_overrides[deps.get_rate_limiter] = lambda: limiter
        payload = {"productId": product, "quantity": 1}

        # Act
        first = client.post(f"{API}/orders", json=payload, headers=auth_headers(buyer))
        second = client.post(f"{API}/orders", json=payload, headers=auth_headers(buyer))

        # Assert
        assert first.status_code == 201
        assert second.status_code == 429
        assert second.json()["error"]["code"] == "RATE_LIMIT"
        assert int(second.headers["Retry-After"]) >= 1


class TestFeedEndpoints:
    def test_unresolvable_zip_is_not_an_error(self, client, zip_centroids) -> None:
        response = client.get(f"{API}/feed", params={"zip": "00000", "radius": "25"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert set(data) >= {"events", "postings", "products"}

    def test_listings_accepts_bad_radius(self, client) -> None:
        response = client.get(f"{API}/listings", params={"radius": "far"})

        assert response.status_code == 200
        assert response.json()["data"]["radius"] == 25
