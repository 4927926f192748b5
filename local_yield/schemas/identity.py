"""
Identity schemas.
"""

from __future__ import annotations

from typing import Union

from local_yield.models.enums import UserRole
from local_yield.schemas.common import BaseSchema


class CapabilitiesOut(BaseSchema):
    can_admin: bool
    can_sell_as_producer: bool
    can_buy: bool
    can_care: bool
    is_multi_mode: bool


class MeResponse(BaseSchema):
    id: str
    email: str
    name: Union[str, None] = None
    role: UserRole
    zip_code: Union[str, None] = None
    capabilities: CapabilitiesOut
