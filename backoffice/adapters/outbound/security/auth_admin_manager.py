# backoffice/adapters/outbound/security/auth_admin_manager.py

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError

from backoffice.adapters.configuration.config import settings
from backoffice.domain.exceptions import InvalidCredentialsException
from backoffice.domain.models.permission_domain_model import Principal

logger = logging.getLogger(__name__)

TOKEN_TYPE = "admin"


class AdminAuthManager:
    """
    JWT manager for back-office admins.

    Tokens carry the admin id (``sub``), the display name (``name``) and
    the coarse role level (``role``). The decoded claims are trusted as-is.
    """

    @classmethod
    def create_access_token(
            cls,
            admin_id: int,
            name: str = "",
            role_level: int = 0,
            expires_delta: Optional[timedelta] = None,
    ) -> str:
        """
        Create a JWT access token for an admin.

        - admin_id: id of the admin, stored in ``sub``.
        - expires_delta: custom expiration time.
        """
        if expires_delta is None:
            expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

        expire = datetime.now(timezone.utc) + expires_delta
        payload = {
            "sub": str(admin_id),
            "name": name,
            "role": role_level,
            "exp": int(expire.timestamp()),
            "type": TOKEN_TYPE,
        }
        return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    @classmethod
    def verify_access_token(cls, token: str) -> dict:
        """
        Verify and decode an admin access token.

        Raises:
            InvalidCredentialsException: If the token is invalid, expired or not an admin token
        """
        try:
            payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        except JWTError as e:
            logger.warning(f"Rejected admin token: {e}")
            raise InvalidCredentialsException(detail="Invalid or expired token")

        if payload.get("type") != TOKEN_TYPE:
            raise InvalidCredentialsException(detail="Invalid token: incorrect type")
        return payload

    @classmethod
    def resolve_principal(cls, token: str) -> Principal:
        """
        Turn a bearer token into the authenticated principal.

        Raises:
            InvalidCredentialsException: If the token or its claims are invalid
        """
        payload = cls.verify_access_token(token)
        try:
            admin_id = int(payload.get("sub"))
            role_level = int(payload.get("role") or 0)
        except (TypeError, ValueError):
            logger.warning(f"Invalid admin token claims: sub={payload.get('sub')!r}")
            raise InvalidCredentialsException(detail="Invalid token: malformed claims")

        return Principal(
            id=admin_id,
            display_name=payload.get("name") or "",
            role_level=role_level,
        )
