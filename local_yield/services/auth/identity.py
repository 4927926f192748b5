"""
Identity & session resolution.

Turns request credentials into an `Identity`:

1. `Authorization: Bearer <jwt>` header, else the session cookie.
2. In development only, the dev-user cookie naming a role.

Anything that does not resolve to a stored user yields `None`; the
capability guards decide what an absent identity means for a route.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Mapping, Optional

import jwt
from sqlalchemy.orm import Session

from local_yield.config.settings import Settings, settings as default_settings
from local_yield.core.logging import get_logger
from local_yield.models.enums import UserRole
from local_yield.repositories import UserRepository
from local_yield.services.common import UnitOfWork

logger = get_logger(__name__)


@dataclass(frozen=True)
class Identity:
    """
    Authenticated caller as seen by the service layer.

    Role is fixed for the lifetime of a request.
    """
    id: str
    email: str
    role: UserRole
    name: Optional[str] = None
    zip_code: Optional[str] = None
    is_buyer: bool = False
    is_caregiver: bool = False
    is_homestead_owner: bool = False

    @classmethod
    def from_user(cls, user) -> "Identity":
        return cls(
            id=user.id,
            email=user.email,
            role=user.role,
            name=user.name,
            zip_code=user.zip_code,
            is_buyer=bool(user.is_buyer),
            is_caregiver=bool(user.is_caregiver),
            is_homestead_owner=bool(user.is_homestead_owner),
        )


class TokenService:
    """
    JWT helper for session tokens.

    Handles creation and validation of access tokens signed with the
    configured secret.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 60) -> None:
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    @classmethod
    def from_settings(cls, config: Settings = default_settings) -> "TokenService":
        return cls(config.JWT_SECRET_KEY, config.JWT_ALGORITHM, config.ACCESS_TOKEN_EXPIRE_MINUTES)

    def create_access_token(
        self,
        user_id: str,
        role: Optional[UserRole] = None,
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "sub": str(user_id),
            "iat": now,
            "exp": now + (expires_delta or timedelta(minutes=self.expire_minutes)),
            "type": "access",
        }
        if role is not None:
            payload["role"] = role.value
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def decode(self, token: str) -> Optional[Dict[str, Any]]:
        """Return the claims, or None for an expired or malformed token."""
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            logger.info("Session token expired")
            return None
        except jwt.InvalidTokenError as exc:
            logger.info(f"Invalid session token: {exc}")
            return None


def _bearer_token(headers: Mapping[str, str]) -> Optional[str]:
    authorization = headers.get("authorization") or ""
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    return None


class IdentityResolver:
    """Resolves the caller's identity from request headers and cookies."""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        token_service: Optional[TokenService] = None,
        config: Settings = default_settings,
    ) -> None:
        self._session_factory = session_factory
        self._tokens = token_service or TokenService.from_settings(config)
        self._config = config

    def resolve(
        self,
        headers: Mapping[str, str],
        cookies: Mapping[str, str],
    ) -> Optional[Identity]:
        token = _bearer_token(headers) or cookies.get(self._config.SESSION_COOKIE_NAME)
        if token:
            claims = self._tokens.decode(token)
            if claims and claims.get("sub"):
                return self._load(str(claims["sub"]))
            return None

        if self._config.DEV_AUTH_ENABLED and not self._config.is_production():
            dev_role = cookies.get(self._config.DEV_USER_COOKIE)
            if dev_role:
                return self._load_dev(dev_role)

        return None

    def _load(self, user_id: str) -> Optional[Identity]:
        with UnitOfWork(self._session_factory) as uow:
            user = uow.get_repo(UserRepository).get(user_id)
            if user is None:
                logger.info("Session token references an unknown user", extra={"subject": user_id})
                return None
            return Identity.from_user(user)

    def _load_dev(self, dev_role: str) -> Optional[Identity]:
        try:
            role = UserRole(dev_role.strip().upper())
        except ValueError:
            return None
        with UnitOfWork(self._session_factory) as uow:
            user = uow.get_repo(UserRepository).first_with_role(role)
            return Identity.from_user(user) if user is not None else None
