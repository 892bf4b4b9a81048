# backoffice/adapters/outbound/persistence/repositories/role_repository.py

"""
Repository for role operations.

Besides plain CRUD, roles own their permission association: it is written
together with the role on creation and replaced wholesale afterwards.
"""

from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.sql import Select

from backoffice.adapters.outbound.persistence.repositories.base_repository import AsyncCRUDBase
from backoffice.adapters.outbound.persistence.repositories.permission_repository import permission_repository
from backoffice.adapters.outbound.persistence.models import Permission, Role, admin_roles
from backoffice.application.dtos.role_dto import RoleCreate, RoleUpdate
from backoffice.application.ports.outbound import IRoleRepository
from backoffice.domain.models.permission_domain_model import Role as DomainRole
from backoffice.domain.exceptions import (
    ResourceNotFoundException,
    InvalidInputException,
)


class AsyncRoleCRUD(AsyncCRUDBase[Role, RoleCreate, RoleUpdate], IRoleRepository):
    """
    Async CRUD repository for the Role entity.
    """

    async def get_with_permissions(self, db: AsyncSession, role_id: int) -> Optional[Role]:
        """
        Fetch a role with a freshly loaded permission set.

        Rows already in the session are overwritten with the stored state.
        """
        query = (
            select(Role)
            .where(Role.id == role_id)
            .execution_options(populate_existing=True)
        )
        async with self.guard(db, f"fetching role {role_id}"):
            result = await db.execute(query)
            return result.scalar_one_or_none()

    async def get_by_code(self, db: AsyncSession, code: str) -> Optional[Role]:
        return await self.get_by_field(db, "code", code)

    def listing_query(self, *, status: Optional[int] = None) -> Select:
        """Select statement used for paginated listings."""
        query = select(Role)
        if status is not None:
            query = query.where(Role.status == status)
        return query.order_by(Role.id)

    async def list_with_permissions(self, db: AsyncSession, *, status: Optional[int] = None) -> List[Role]:
        """
        List every role, permissions included, ordered by id.
        """
        async with self.guard(db, "listing roles"):
            result = await db.execute(self.listing_query(status=status))
            return list(result.scalars().all())

    async def _load_permissions(self, db: AsyncSession, permission_ids: Iterable[int]) -> List[Permission]:
        permission_ids = list(permission_ids)
        permissions = await permission_repository.get_by_ids(db, permission_ids)
        unknown = set(permission_ids) - {p.id for p in permissions}
        if unknown:
            raise InvalidInputException(
                detail="Unknown permissions",
                fields={"permission_ids": ", ".join(str(i) for i in sorted(unknown))}
            )
        return permissions

    async def create_with_permissions(
            self,
            db: AsyncSession,
            *,
            data: Dict[str, Any],
            permission_ids: Iterable[int],
            creator_id: int,
    ) -> Role:
        """
        Create a role and its permission association in a single commit.

        Args:
            db: Async database session
            data: Role column values
            permission_ids: Permissions granted by the new role
            creator_id: Admin creating the role

        Returns:
            The new role with its permissions loaded

        Raises:
            ResourceAlreadyExistsException: If the code or name is already in use
            InvalidInputException: If a permission id does not exist
            DatabaseOperationException: In case of database error
        """
        async with self.guard(db, "creating role", write=True):
            permissions = await self._load_permissions(db, permission_ids)

            db_obj = Role(**data, creator_id=creator_id)
            db_obj.permissions = permissions
            db.add(db_obj)
            await db.commit()

        self.logger.info(
            f"Role '{db_obj.code}' created by admin {creator_id} with {len(permissions)} permissions"
        )
        return await self.get_with_permissions(db, db_obj.id)

    async def replace_permissions(
            self,
            db: AsyncSession,
            *,
            role_id: int,
            permission_ids: Iterable[int],
    ) -> Role:
        """
        Replace the whole permission set of a role.

        Either the new set is fully stored or the old one is kept.

        Raises:
            ResourceNotFoundException: If the role doesn't exist
            InvalidInputException: If a permission id does not exist
            DatabaseOperationException: In case of database error
        """
        async with self.guard(db, f"assigning permissions to role {role_id}", write=True):
            role = await self.get_with_permissions(db, role_id)
            if not role:
                raise ResourceNotFoundException(detail="Role not found", resource_id=role_id)

            role.permissions = await self._load_permissions(db, permission_ids)
            await db.commit()

        self.logger.info(f"Permissions of role '{role.code}' replaced ({len(role.permissions)} granted)")
        return await self.get_with_permissions(db, role_id)

    async def count_holders(self, db: AsyncSession, role_id: int) -> int:
        """
        Number of admins currently holding the role.
        """
        query = (
            select(func.count())
            .select_from(admin_roles)
            .where(admin_roles.c.role_id == role_id)
        )
        async with self.guard(db, f"checking usage of role {role_id}"):
            result = await db.execute(query)
            return result.scalar_one()

    async def delete(self, db: AsyncSession, role_id: int) -> None:
        """
        Clear the permission association of a role, then delete it.

        Raises:
            ResourceNotFoundException: If the role doesn't exist
            DatabaseOperationException: In case of database error
        """
        async with self.guard(db, f"removing role {role_id}", write=True):
            role = await self.get_with_permissions(db, role_id)
            if not role:
                raise ResourceNotFoundException(detail="Role not found", resource_id=role_id)

            code = role.code
            role.permissions.clear()
            await db.flush()
            await db.delete(role)
            await db.commit()

        self.logger.info(f"Role '{code}' (ID {role_id}) removed")

    def to_domain(self, db_model: Role) -> DomainRole:
        """
        Convert database model to domain model, permissions included.
        """
        return DomainRole(
            id=db_model.id,
            code=db_model.code,
            name=db_model.name,
            status=db_model.status,
            creator_id=db_model.creator_id or 0,
            permissions=[permission_repository.to_domain(p) for p in db_model.permissions],
        )


role_repository = AsyncRoleCRUD(Role)
