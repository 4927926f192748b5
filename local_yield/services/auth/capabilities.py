"""
Capability gate.

One pure mapping from role to capabilities, widened by the per-user
flags, and the guards every protected route runs before touching data.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Optional

from local_yield.core.exceptions import ForbiddenError, UnauthenticatedError
from local_yield.models.enums import UserRole
from local_yield.services.auth.identity import Identity


@dataclass(frozen=True)
class CapabilitySet:
    can_admin: bool = False
    can_sell_as_producer: bool = False
    can_buy: bool = False
    can_care: bool = False

    @property
    def is_multi_mode(self) -> bool:
        return sum((self.can_buy, self.can_sell_as_producer, self.can_care)) > 1

    def to_dict(self) -> Dict[str, bool]:
        return {
            "canAdmin": self.can_admin,
            "canSellAsProducer": self.can_sell_as_producer,
            "canBuy": self.can_buy,
            "canCare": self.can_care,
            "isMultiMode": self.is_multi_mode,
        }


NO_CAPABILITIES = CapabilitySet()

ROLE_CAPABILITIES: Dict[UserRole, CapabilitySet] = {
    UserRole.BUYER: CapabilitySet(can_buy=True),
    UserRole.PRODUCER: CapabilitySet(can_sell_as_producer=True),
    UserRole.ADMIN: CapabilitySet(can_admin=True, can_sell_as_producer=True, can_buy=True, can_care=True),
}


def capabilities_for_role(role: UserRole) -> CapabilitySet:
    return ROLE_CAPABILITIES[role]


def resolve_capabilities(identity: Optional[Identity]) -> CapabilitySet:
    """
    Capabilities for an identity; the empty set when there is none.

    Per-user flags only add the buying and care modes. Selling and
    admin come from the role alone.
    """
    if identity is None:
        return NO_CAPABILITIES

    base = capabilities_for_role(identity.role)
    return replace(
        base,
        can_buy=base.can_buy or identity.is_buyer,
        can_care=base.can_care or identity.is_caregiver or identity.is_homestead_owner,
    )


def require_auth(identity: Optional[Identity]) -> Identity:
    if identity is None:
        raise UnauthenticatedError()
    return identity


def require_producer_or_admin(identity: Optional[Identity]) -> Identity:
    identity = require_auth(identity)
    capabilities = resolve_capabilities(identity)
    if not (capabilities.can_sell_as_producer or capabilities.can_admin):
        raise ForbiddenError(required_capability="canSellAsProducer")
    return identity


def require_admin(identity: Optional[Identity]) -> Identity:
    identity = require_auth(identity)
    if not resolve_capabilities(identity).can_admin:
        raise ForbiddenError(required_capability="canAdmin")
    return identity
