# backoffice/adapters/inbound/api/v1/endpoints/auth_endpoint.py

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.application.use_cases.authorization_use_cases import AsyncAuthorizationService
from backoffice.adapters.inbound.api.deps import get_session, get_current_principal
from backoffice.application.dtos.menu_dto import MenuNode, MenuTree, PermissionCodes, ProfileOutput
from backoffice.domain.models.permission_domain_model import Principal

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/permissions",
    response_model=PermissionCodes,
    summary="My Permissions - Enabled permission codes",
    description="Returns the codes of every enabled permission granted to the authenticated admin, "
                "whatever their type. Used by the front-end for button and API gating.",
    responses={
        200: {
            "description": "Permission codes",
            "content": {
                "application/json": {
                    "example": {"permissions": ["products", "products.list", "products.create"]}
                }
            }
        },
        401: {"description": "Not authenticated or invalid token"},
    }
)
async def get_my_permissions(
        db: AsyncSession = Depends(get_session),
        principal: Principal = Depends(get_current_principal),
):
    service = AsyncAuthorizationService(db)
    return PermissionCodes(permissions=await service.get_user_permissions(principal))


@router.get(
    "/menus",
    response_model=MenuTree,
    summary="My Menus - Navigation tree",
    description="Returns the navigation tree (enabled menu and page nodes) of the authenticated admin.",
)
async def get_my_menus(
        db: AsyncSession = Depends(get_session),
        principal: Principal = Depends(get_current_principal),
):
    service = AsyncAuthorizationService(db)
    menus: List[MenuNode] = await service.get_user_menu_tree(principal)
    return MenuTree(menus=menus)


@router.get(
    "/me",
    response_model=ProfileOutput,
    summary="My Profile - Admin, menus and permission codes",
    description="Returns the authenticated admin with both projections of their effective permission set.",
)
async def get_my_profile(
        db: AsyncSession = Depends(get_session),
        principal: Principal = Depends(get_current_principal),
):
    service = AsyncAuthorizationService(db)
    return await service.get_profile(principal)
