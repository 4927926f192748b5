"""Unit tests for session token handling and identity resolution."""

from datetime import timedelta

import pytest

from local_yield.config.settings import Settings
from local_yield.models.enums import UserRole
from local_yield.services.auth import IdentityResolver, TokenService


@pytest.fixture
def resolver(session_factory, token_service) -> IdentityResolver:
    return IdentityResolver(session_factory, token_service=token_service)


class TestTokenService:
    def test_round_trip_claims(self, token_service) -> None:
        token = token_service.create_access_token("user-1", UserRole.PRODUCER)

        claims = token_service.decode(token)

        assert claims["sub"] == "user-1"
        assert claims["role"] == "PRODUCER"

    def test_expired_token_decodes_to_none(self, token_service) -> None:
        token = token_service.create_access_token("user-1", expires_delta=timedelta(seconds=-5))

        assert token_service.decode(token) is None

    def test_foreign_signature_is_rejected(self, token_service) -> None:
        forged = TokenService("another-secret").create_access_token("user-1")

        assert token_service.decode(forged) is None


class TestIdentityResolver:
    """Test cases for resolving request credentials."""

    def test_bearer_token_resolves_user(self, resolver, token_service, producer) -> None:
        # Arrange
        headers = {"authorization": f"Bearer {token_service.create_access_token(producer.id)}"}

        # Act
        identity = resolver.resolve(headers, {})

        # Assert
        assert identity == producer

    def test_session_cookie_resolves_user(self, resolver, token_service, buyer) -> None:
        cookies = {"ly_session": token_service.create_access_token(buyer.id)}

        assert resolver.resolve({}, cookies).id == buyer.id

    def test_token_for_deleted_user_is_anonymous(self, resolver, token_service) -> None:
        headers = {"authorization": f"Bearer {token_service.create_access_token('gone')}"}

        assert resolver.resolve(headers, {}) is None

    def test_no_credentials_is_anonymous(self, resolver) -> None:
        assert resolver.resolve({}, {}) is None

    def test_dev_cookie_picks_earliest_user_with_role(self, resolver, make_user) -> None:
        first = make_user(UserRole.PRODUCER)
        make_user(UserRole.PRODUCER)

        identity = resolver.resolve({}, {"__dev_user": "producer"})

        assert identity.id == first.id

    def test_dev_cookie_ignored_in_production(self, session_factory, token_service, admin) -> None:
        config = Settings(ENVIRONMENT="production", DEV_AUTH_ENABLED=True)
        resolver = IdentityResolver(session_factory, token_service=token_service, config=config)

        assert resolver.resolve({}, {"__dev_user": "ADMIN"}) is None

    def test_invalid_token_does_not_fall_back_to_dev_cookie(self, resolver, admin) -> None:
        headers = {"authorization": "Bearer not-a-jwt"}

        assert resolver.resolve(headers, {"__dev_user": "ADMIN"}) is None
