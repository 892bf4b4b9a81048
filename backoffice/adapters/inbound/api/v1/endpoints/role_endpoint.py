# backoffice/adapters/inbound/api/v1/endpoints/role_endpoint.py

import logging
from typing import List, Optional

from fastapi_pagination import Params, Page
from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.application.use_cases.authorization_use_cases import AsyncAuthorizationService
from backoffice.application.use_cases.role_use_cases import AsyncRoleService
from backoffice.shared.utils.pagination import pagination_params
from backoffice.adapters.outbound.security.permissions import require_permission
from backoffice.adapters.inbound.api.deps import get_session, get_current_principal
from backoffice.application.dtos.permission_dto import PermissionTreeNode
from backoffice.application.dtos.role_dto import (
    AssignPermissions,
    RoleCreate,
    RoleOutput,
    RoleUpdate,
)
from backoffice.domain.models.permission_domain_model import Principal

logger = logging.getLogger(__name__)

router = APIRouter()

ROLES_PERMISSION = "system.roles"


########################################################################
# What the current admin may grant
########################################################################

@router.get(
    "/assignable",
    response_model=List[RoleOutput],
    summary="Assignable Roles - Roles the admin may hand out",
    description="Roles not held by the authenticated admin whose permissions are all "
                "part of the admin's effective permission set.",
)
async def get_assignable_roles(
        db: AsyncSession = Depends(get_session),
        principal: Principal = Depends(get_current_principal),
):
    service = AsyncAuthorizationService(db)
    return await service.get_assignable_roles(principal)


@router.get(
    "/permissions/tree",
    response_model=List[PermissionTreeNode],
    summary="Assignable Permission Tree - Permissions the admin may grant",
    description="Tree of the enabled menu/page permissions of the authenticated admin. "
                "With include_actions=true, button and api nodes are included too.",
)
async def get_assignable_permission_tree(
        include_actions: bool = Query(False, description="Include button and api nodes"),
        db: AsyncSession = Depends(get_session),
        principal: Principal = Depends(get_current_principal),
):
    service = AsyncAuthorizationService(db)
    return await service.get_assignable_permission_tree(principal, include_actions=include_actions)


########################################################################
# Role management
########################################################################

@router.get(
    "",
    response_model=Page[RoleOutput],
    summary="List Roles",
    description="Paginated list of roles ordered by id.",
    dependencies=[Depends(require_permission(ROLES_PERMISSION))],
)
async def list_roles(
        db: AsyncSession = Depends(get_session),
        params: Params = Depends(pagination_params),
        status_filter: Optional[int] = Query(None, alias="status", ge=0, le=1),
):
    service = AsyncRoleService(db)
    return await service.list_roles(params=params, status=status_filter)


@router.post(
    "",
    response_model=RoleOutput,
    status_code=status.HTTP_201_CREATED,
    summary="Create Role",
    description="Creates a role. Every requested permission must be held by the creator and, "
                "when parent_role_id is given, belong to the parent role.",
    responses={
        400: {"description": "Duplicate code or permission outside the parent role"},
        403: {"description": "Permission outside the creator's effective set"},
    }
)
async def create_role(
        data: RoleCreate,
        db: AsyncSession = Depends(get_session),
        principal: Principal = Depends(require_permission(ROLES_PERMISSION)),
):
    service = AsyncRoleService(db)
    return await service.create_role(principal, data)


@router.get(
    "/{role_id}",
    response_model=RoleOutput,
    summary="Get Role",
    dependencies=[Depends(require_permission(ROLES_PERMISSION))],
)
async def get_role(
        role_id: int = Path(..., ge=1),
        db: AsyncSession = Depends(get_session),
):
    service = AsyncRoleService(db)
    return await service.get_role(role_id)


@router.put(
    "/{role_id}",
    response_model=RoleOutput,
    summary="Update Role",
    description="Updates role attributes. When permission_ids is given, the permission set is replaced.",
)
async def update_role(
        data: RoleUpdate,
        role_id: int = Path(..., ge=1),
        db: AsyncSession = Depends(get_session),
        principal: Principal = Depends(require_permission(ROLES_PERMISSION)),
):
    service = AsyncRoleService(db)
    return await service.update_role(principal, role_id, data)


@router.post(
    "/{role_id}/permissions",
    response_model=RoleOutput,
    summary="Assign Permissions - Replace the permission set of a role",
    responses={403: {"description": "Permission outside the caller's effective set"}},
)
async def assign_permissions(
        data: AssignPermissions,
        role_id: int = Path(..., ge=1),
        db: AsyncSession = Depends(get_session),
        principal: Principal = Depends(require_permission(ROLES_PERMISSION)),
):
    service = AsyncRoleService(db)
    return await service.assign_permissions(principal, role_id, data.permission_ids)


@router.delete(
    "/{role_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Role",
    responses={409: {"description": "Role still held by at least one admin"}},
    dependencies=[Depends(require_permission(ROLES_PERMISSION))],
)
async def delete_role(
        role_id: int = Path(..., ge=1),
        db: AsyncSession = Depends(get_session),
):
    service = AsyncRoleService(db)
    await service.delete_role(role_id)
