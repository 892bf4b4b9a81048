# backoffice/application/use_cases/permission_use_cases.py

"""
Service for the permission catalogue.

Maintains the flat permission table and keeps its tree consistent:
a parent must exist and a node may never become its own ancestor.
"""

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.adapters.outbound.persistence.models import Permission
from backoffice.adapters.outbound.persistence.repositories.permission_repository import permission_repository
from backoffice.application.dtos.permission_dto import PermissionCreate, PermissionTreeNode, PermissionUpdate
from backoffice.application.ports.inbound import IPermissionUseCase
from backoffice.domain.exceptions import (
    InvalidInputException,
    ResourceAlreadyExistsException,
    ResourceConflictException,
    ResourceNotFoundException,
)
from backoffice.domain.models.permission_domain_model import ROOT_PARENT_ID
from backoffice.domain.services.permission_tree import build_permission_tree, collect_descendant_ids

logger = logging.getLogger(__name__)


class AsyncPermissionService(IPermissionUseCase):
    """
    Service for permission catalogue management.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def _get_permission(self, permission_id: int) -> Permission:
        permission = await permission_repository.get(self.db, permission_id)
        if not permission:
            logger.warning(f"Permission not found: ID {permission_id}")
            raise ResourceNotFoundException(detail="Permission not found", resource_id=permission_id)
        return permission

    async def _check_parent(self, parent_id: int) -> None:
        if parent_id == ROOT_PARENT_ID:
            return
        if not await permission_repository.exists(self.db, id=parent_id):
            raise InvalidInputException(
                detail="Parent permission does not exist",
                fields={"parent_id": str(parent_id)},
            )

    async def list_permissions(self, type: Optional[str] = None, status: Optional[int] = None) -> List[Permission]:
        """Flat catalogue ordered by (sort, id), optionally filtered."""
        return await permission_repository.list_ordered(
            self.db, types=[type] if type else None, status=status
        )

    async def get_permission(self, permission_id: int) -> Permission:
        return await self._get_permission(permission_id)

    async def get_permission_tree(self) -> List[PermissionTreeNode]:
        """
        The whole catalogue as a tree, enabled and disabled nodes alike.
        """
        rows = await permission_repository.list_ordered(self.db)
        nodes = build_permission_tree(permission_repository.to_domain(row) for row in rows)
        return PermissionTreeNode.from_nodes(nodes)

    async def create_permission(self, data: PermissionCreate) -> Permission:
        """
        Create a permission node.

        Raises:
            ResourceAlreadyExistsException: If the code is already in use
            InvalidInputException: If the parent doesn't exist
        """
        if await permission_repository.exists(self.db, code=data.code):
            raise ResourceAlreadyExistsException(detail=f"Permission code '{data.code}' already exists")

        await self._check_parent(data.parent_id)
        return await permission_repository.create(self.db, obj_in=data)

    async def update_permission(self, permission_id: int, data: PermissionUpdate) -> Permission:
        """
        Update a permission node.

        Raises:
            ResourceNotFoundException: If the permission doesn't exist
            ResourceAlreadyExistsException: If the new code is already in use
            InvalidInputException: If the new parent doesn't exist or would create a cycle
        """
        permission = await self._get_permission(permission_id)
        values = data.model_dump(exclude_unset=True)

        code = values.get("code")
        if code and code != permission.code:
            existing = await permission_repository.get_by_code(self.db, code)
            if existing and existing.id != permission_id:
                raise ResourceAlreadyExistsException(detail=f"Permission code '{code}' already exists")

        parent_id = values.get("parent_id")
        if parent_id is not None and parent_id != permission.parent_id:
            if parent_id == permission_id:
                raise InvalidInputException(
                    detail="A permission cannot be its own parent",
                    fields={"parent_id": str(parent_id)},
                )
            await self._check_parent(parent_id)

            universe = [
                permission_repository.to_domain(row)
                for row in await permission_repository.list_ordered(self.db)
            ]
            if parent_id in collect_descendant_ids(universe, permission_id):
                raise InvalidInputException(
                    detail="A permission cannot be moved below one of its descendants",
                    fields={"parent_id": str(parent_id)},
                )

        return await permission_repository.update(self.db, db_obj=permission, obj_in=values)

    async def delete_permission(self, permission_id: int) -> None:
        """
        Delete a leaf permission and revoke it from every role.

        Raises:
            ResourceNotFoundException: If the permission doesn't exist
            ResourceConflictException: If other permissions still point at it as parent
        """
        permission = await self._get_permission(permission_id)
        if await permission_repository.has_children(self.db, permission_id):
            logger.warning(f"Attempt to delete permission '{permission.code}' that still has children")
            raise ResourceConflictException(
                detail="Permission has child permissions and cannot be deleted",
                resource_id=permission_id,
            )
        await permission_repository.delete(self.db, permission_id)
