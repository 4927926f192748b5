from local_yield.services.auth.capabilities import (
    CapabilitySet,
    ROLE_CAPABILITIES,
    require_admin,
    require_auth,
    require_producer_or_admin,
    resolve_capabilities,
)
from local_yield.services.auth.identity import Identity, IdentityResolver, TokenService

__all__ = [
    "CapabilitySet",
    "ROLE_CAPABILITIES",
    "require_admin",
    "require_auth",
    "require_producer_or_admin",
    "resolve_capabilities",
    "Identity",
    "IdentityResolver",
    "TokenService",
]
