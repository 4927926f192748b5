"""
Health and current-identity endpoints.
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends

from local_yield.api import deps
from local_yield.config.settings import settings
from local_yield.schemas.common import DataResponse
from local_yield.schemas.identity import CapabilitiesOut, MeResponse
from local_yield.services.auth import Identity, resolve_capabilities

router = APIRouter(tags=["Identity"])


@router.get("/health")
def health() -> Dict[str, Any]:
    """Liveness check."""
    return {"data": {"status": "ok", "version": settings.API_VERSION}}


@router.get("/me", response_model=DataResponse[MeResponse])
def read_me(identity: Identity = Depends(deps.require_auth_identity)):
    """The caller's identity and resolved capabilities."""
    capabilities = resolve_capabilities(identity)
    return DataResponse(
        data=MeResponse(
            id=identity.id,
            email=identity.email,
            name=identity.name,
            role=identity.role,
            zip_code=identity.zip_code,
            capabilities=CapabilitiesOut(
                can_admin=capabilities.can_admin,
                can_sell_as_producer=capabilities.can_sell_as_producer,
                can_buy=capabilities.can_buy,
                can_care=capabilities.can_care,
                is_multi_mode=capabilities.is_multi_mode,
            ),
        )
    )
