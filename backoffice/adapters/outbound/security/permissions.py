# backoffice/adapters/outbound/security/permissions.py

import logging

from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import Depends

from backoffice.adapters.inbound.api.deps import get_session, get_current_principal
from backoffice.application.use_cases.authorization_use_cases import AsyncPrincipalPermissionResolver
from backoffice.domain.exceptions import PermissionDeniedException
from backoffice.domain.models.permission_domain_model import Principal

logger = logging.getLogger(__name__)


def require_permission(code: str):
    """
    Returns a dependency that validates that the authenticated admin holds
    an enabled permission with the given code.

    Usage:
        @router.get(..., dependencies=[Depends(require_permission("system.roles"))])
    """

    async def permission_checker(
            principal: Principal = Depends(get_current_principal),
            db: AsyncSession = Depends(get_session),
    ) -> Principal:
        resolver = AsyncPrincipalPermissionResolver(db)
        if not await resolver.has_permission(principal.id, code):
            logger.warning(f"Admin {principal.id} denied: missing permission '{code}'")
            raise PermissionDeniedException(permission=code)
        return principal

    return permission_checker
