"""Unit tests for the role-to-capability mapping and the guards built on it."""

import pytest

from local_yield.core.exceptions import ForbiddenError, UnauthenticatedError
from local_yield.models.enums import UserRole
from local_yield.services.auth import (
    ROLE_CAPABILITIES,
    CapabilitySet,
    Identity,
    require_admin,
    require_auth,
    require_producer_or_admin,
    resolve_capabilities,
)


def _identity(role: UserRole, **flags) -> Identity:
    return Identity(id=f"{role.value.lower()}-1", email="x@example.com", role=role, **flags)


class TestRoleCapabilities:
    """Exhaustive checks over the role enumeration."""

    def test_every_role_is_mapped(self) -> None:
        """Test that no role falls through the mapping."""
        assert set(ROLE_CAPABILITIES) == set(UserRole)

    @pytest.mark.parametrize(
        "role, expected",
        [
            (UserRole.BUYER, CapabilitySet(can_buy=True)),
            (UserRole.PRODUCER, CapabilitySet(can_sell_as_producer=True)),
            (UserRole.ADMIN, CapabilitySet(can_admin=True, can_sell_as_producer=True, can_buy=True, can_care=True)),
        ],
    )
    def test_role_mapping(self, role: UserRole, expected: CapabilitySet) -> None:
        assert resolve_capabilities(_identity(role)) == expected

    def test_no_identity_has_no_capabilities(self) -> None:
        assert resolve_capabilities(None) == CapabilitySet()

    def test_flags_only_add_buy_and_care(self) -> None:
        """Test that per-user flags never grant selling or admin."""
        # Act
        caps = resolve_capabilities(_identity(UserRole.BUYER, is_buyer=True, is_caregiver=True))

        # Assert
        assert caps.can_buy and caps.can_care
        assert not caps.can_sell_as_producer
        assert not caps.can_admin
        assert caps.is_multi_mode is True

    def test_homestead_owner_can_care(self) -> None:
        caps = resolve_capabilities(_identity(UserRole.PRODUCER, is_homestead_owner=True))
        assert caps.can_care and caps.can_sell_as_producer
        assert caps.to_dict()["isMultiMode"] is True


class TestGuards:
    """Test cases for require_auth, require_producer_or_admin and require_admin."""

    @pytest.mark.parametrize("flags", [{}, {"is_buyer": True}, {"is_caregiver": True, "is_homestead_owner": True}])
    def test_buyer_is_forbidden_from_producer_and_admin(self, flags) -> None:
        """Test that every BUYER passes require_auth and fails the elevated guards."""
        identity = _identity(UserRole.BUYER, **flags)

        assert require_auth(identity) is identity
        with pytest.raises(ForbiddenError):
            require_producer_or_admin(identity)
        with pytest.raises(ForbiddenError):
            require_admin(identity)

    def test_producer_passes_producer_guard_only(self) -> None:
        identity = _identity(UserRole.PRODUCER)

        assert require_producer_or_admin(identity) is identity
        with pytest.raises(ForbiddenError) as exc_info:
            require_admin(identity)
        assert exc_info.value.status_code == 403

    def test_admin_passes_every_guard(self) -> None:
        identity = _identity(UserRole.ADMIN)

        assert require_auth(identity) is identity
        assert require_producer_or_admin(identity) is identity
        assert require_admin(identity) is identity

    @pytest.mark.parametrize("guard", [require_auth, require_producer_or_admin, require_admin])
    def test_missing_identity_is_unauthenticated(self, guard) -> None:
        with pytest.raises(UnauthenticatedError) as exc_info:
            guard(None)
        assert exc_info.value.status_code == 401
