# backoffice/adapters/inbound/api/v1/endpoints/permission_endpoint.py

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.application.use_cases.permission_use_cases import AsyncPermissionService
from backoffice.adapters.outbound.security.permissions import require_permission
from backoffice.adapters.inbound.api.deps import get_session
from backoffice.application.dtos.permission_dto import (
    PermissionCreate,
    PermissionOutput,
    PermissionTreeNode,
    PermissionTypeLiteral,
    PermissionUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_permission("system.permissions"))])


@router.get(
    "",
    response_model=List[PermissionOutput],
    summary="List Permissions",
    description="Flat permission catalogue ordered by sort then id.",
)
async def list_permissions(
        type: Optional[PermissionTypeLiteral] = Query(None, description="Filter by node type"),
        status_filter: Optional[int] = Query(None, alias="status", ge=0, le=1),
        db: AsyncSession = Depends(get_session),
):
    service = AsyncPermissionService(db)
    return await service.list_permissions(type=type, status=status_filter)


@router.get(
    "/tree",
    response_model=List[PermissionTreeNode],
    summary="Permission Tree",
    description="Whole catalogue as a tree, disabled nodes included.",
)
async def get_permission_tree(db: AsyncSession = Depends(get_session)):
    service = AsyncPermissionService(db)
    return await service.get_permission_tree()


@router.post(
    "",
    response_model=PermissionOutput,
    status_code=status.HTTP_201_CREATED,
    summary="Create Permission",
    responses={400: {"description": "Duplicate code or unknown parent"}},
)
async def create_permission(data: PermissionCreate, db: AsyncSession = Depends(get_session)):
    service = AsyncPermissionService(db)
    return await service.create_permission(data)


@router.get("/{permission_id}", response_model=PermissionOutput, summary="Get Permission")
async def get_permission(
        permission_id: int = Path(..., ge=1),
        db: AsyncSession = Depends(get_session),
):
    service = AsyncPermissionService(db)
    return await service.get_permission(permission_id)


@router.put(
    "/{permission_id}",
    response_model=PermissionOutput,
    summary="Update Permission",
    responses={400: {"description": "Duplicate code, unknown parent or parent cycle"}},
)
async def update_permission(
        data: PermissionUpdate,
        permission_id: int = Path(..., ge=1),
        db: AsyncSession = Depends(get_session),
):
    service = AsyncPermissionService(db)
    return await service.update_permission(permission_id, data)


@router.delete(
    "/{permission_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Permission",
    description="Deletes a leaf permission and revokes it from every role.",
    responses={409: {"description": "Permission still has children"}},
)
async def delete_permission(
        permission_id: int = Path(..., ge=1),
        db: AsyncSession = Depends(get_session),
):
    service = AsyncPermissionService(db)
    await service.delete_permission(permission_id)
