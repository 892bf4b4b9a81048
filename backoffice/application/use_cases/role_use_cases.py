# backoffice/application/use_cases/role_use_cases.py

"""
Service for role management.

Every mutation that grants permissions goes through the delegation
validator first, so an admin can never hand out more than they hold.
"""

import logging
from typing import Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from fastapi_pagination import Params
from fastapi_pagination.ext.sqlalchemy import apaginate

from backoffice.adapters.outbound.persistence.models import Admin, Role
from backoffice.adapters.outbound.persistence.repositories.admin_repository import admin_repository
from backoffice.adapters.outbound.persistence.repositories.role_repository import role_repository
from backoffice.application.dtos.role_dto import RoleCreate, RoleOutput, RoleUpdate
from backoffice.application.ports.inbound import IRoleUseCase
from backoffice.application.use_cases.authorization_use_cases import (
    AsyncAuthorizationService,
    AsyncDelegationValidator,
    AsyncPrincipalPermissionResolver,
)
from backoffice.domain.exceptions import (
    PermissionDeniedException,
    ResourceAlreadyExistsException,
    ResourceConflictException,
    ResourceNotFoundException,
)
from backoffice.domain.models.permission_domain_model import Principal

logger = logging.getLogger(__name__)


class AsyncRoleService(IRoleUseCase):
    """
    Service for role management.

    Creation, update, permission replacement and deletion of roles, plus
    assignment of roles to admins.
    """

    def __init__(self, db_session: AsyncSession):
        """
        Initialize the service with a database session.

        Args:
            db_session: Active AsyncSession
        """
        self.db = db_session
        self.resolver = AsyncPrincipalPermissionResolver(db_session)
        self.validator = AsyncDelegationValidator(db_session, resolver=self.resolver)

    async def _get_role(self, role_id: int) -> Role:
        role = await role_repository.get_with_permissions(self.db, role_id)
        if not role:
            logger.warning(f"Role not found: ID {role_id}")
            raise ResourceNotFoundException(detail="Role not found", resource_id=role_id)
        return role

    async def list_roles(self, params: Params, status: Optional[int] = None):
        """
        Paginated list of roles ordered by id.

        Args:
            params: Pagination parameters
            status: Optional status filter

        Returns:
            Paginated list of roles
        """
        query = role_repository.listing_query(status=status)
        return await apaginate(
            self.db,
            query,
            params,
            transformer=lambda items: [RoleOutput.model_validate(item) for item in items],
        )

    async def get_role(self, role_id: int) -> Role:
        return await self._get_role(role_id)

    async def create_role(self, principal: Principal, data: RoleCreate) -> Role:
        """
        Create a role bundling the requested permissions.

        Checks run in order and stop at the first failure: code uniqueness,
        containment in the declared parent role, containment in the
        creator's own effective set.

        Args:
            principal: Admin creating the role
            data: Role data

        Returns:
            The new role with its permissions

        Raises:
            ResourceAlreadyExistsException: If the role code is already in use
            ResourceNotFoundException: If the parent role doesn't exist
            InvalidInputException: If a permission is outside the parent role
            PermissionDeniedException: If a permission is outside the creator's set
        """
        if await role_repository.get_by_code(self.db, data.code):
            logger.warning(f"Attempt to create role with existing code: {data.code}")
            raise ResourceAlreadyExistsException(detail=f"Role code '{data.code}' already exists")

        if data.parent_role_id:
            await self.validator.validate_inheritance(data.parent_role_id, data.permission_ids)

        await self.validator.validate_assignable(principal.id, data.permission_ids)

        values = data.model_dump(exclude={"parent_role_id", "permission_ids"})
        return await role_repository.create_with_permissions(
            self.db,
            data=values,
            permission_ids=data.permission_ids,
            creator_id=principal.id,
        )

    async def update_role(self, principal: Principal, role_id: int, data: RoleUpdate) -> Role:
        """
        Update role attributes and, when given, replace its permission set.

        Raises:
            ResourceNotFoundException: If the role doesn't exist
            PermissionDeniedException: If a permission is outside the editor's set
        """
        role = await self._get_role(role_id)

        if data.permission_ids is not None:
            await self.validator.validate_assignable(principal.id, data.permission_ids)

        values = data.model_dump(exclude_unset=True, exclude={"permission_ids"})
        if values:
            role = await role_repository.update(self.db, db_obj=role, obj_in=values)

        if data.permission_ids is not None:
            return await role_repository.replace_permissions(
                self.db, role_id=role_id, permission_ids=data.permission_ids
            )
        return await self._get_role(role.id)

    async def assign_permissions(self, principal: Principal, role_id: int, permission_ids: Iterable[int]) -> Role:
        """
        Replace the permission set of a role.

        The replacement is all-or-nothing: a single permission outside the
        caller's effective set rejects the whole request.

        Raises:
            ResourceNotFoundException: If the role doesn't exist
            PermissionDeniedException: If a permission is outside the caller's set
        """
        permission_ids = list(permission_ids)
        await self._get_role(role_id)
        await self.validator.validate_assignable(principal.id, permission_ids)
        return await role_repository.replace_permissions(
            self.db, role_id=role_id, permission_ids=permission_ids
        )

    async def delete_role(self, role_id: int) -> None:
        """
        Delete a role no admin holds anymore.

        Raises:
            ResourceNotFoundException: If the role doesn't exist
            ResourceConflictException: If the role is still held by an admin
        """
        role = await self._get_role(role_id)

        holders = await role_repository.count_holders(self.db, role_id)
        if holders > 0:
            logger.warning(f"Attempt to delete role '{role.code}' still held by {holders} admin(s)")
            raise ResourceConflictException(
                detail=f"Role is held by {holders} admin(s) and cannot be deleted",
                resource_id=role_id,
            )

        await role_repository.delete(self.db, role_id)

    async def assign_roles_to_admin(self, principal: Principal, admin_id: int, role_ids: List[int]) -> Admin:
        """
        Replace the roles held by an admin.

        Roles the target already holds may be kept or dropped freely; every
        role being added must be assignable by the caller.

        Raises:
            ResourceNotFoundException: If the admin doesn't exist
            PermissionDeniedException: If an added role is not assignable by the caller
        """
        target = await admin_repository.get_with_roles(self.db, admin_id)
        if not target:
            raise ResourceNotFoundException(detail="Admin not found", resource_id=admin_id)

        added = set(role_ids) - {role.id for role in target.roles}
        if added:
            assignable = await AsyncAuthorizationService(self.db).get_assignable_roles(principal)
            denied = added - {role.id for role in assignable}
            if denied:
                logger.warning(f"Admin {principal.id} tried to assign roles {sorted(denied)} to admin {admin_id}")
                raise PermissionDeniedException(detail=f"Cannot assign roles {sorted(denied)}")

        return await admin_repository.replace_roles(self.db, admin_id=admin_id, role_ids=role_ids)
