# backoffice/adapters/outbound/persistence/repositories/permission_repository.py

"""
Repository for the permission catalogue.

Permissions are stored flat; tree assembly is done by the domain layer
from the ordered lists returned here.
"""

from typing import Iterable, List, Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from backoffice.adapters.outbound.persistence.repositories.base_repository import AsyncCRUDBase
from backoffice.adapters.outbound.persistence.models import Permission, role_permissions
from backoffice.application.dtos.permission_dto import PermissionCreate, PermissionUpdate
from backoffice.application.ports.outbound import IPermissionRepository
from backoffice.domain.models.permission_domain_model import Permission as DomainPermission
from backoffice.domain.exceptions import ResourceNotFoundException


class AsyncPermissionCRUD(AsyncCRUDBase[Permission, PermissionCreate, PermissionUpdate], IPermissionRepository):
    """
    Async CRUD repository for Permission nodes.
    """

    async def get_by_code(self, db: AsyncSession, code: str) -> Optional[Permission]:
        return await self.get_by_field(db, "code", code)

    async def get_by_ids(self, db: AsyncSession, ids: Iterable[int]) -> List[Permission]:
        """
        Fetch the permissions matching ``ids``, ordered by id.

        Unknown ids are silently absent from the result.
        """
        ids = list(ids)
        if not ids:
            return []
        async with self.guard(db, "fetching permissions by ids"):
            query = select(Permission).where(Permission.id.in_(ids)).order_by(Permission.id)
            result = await db.execute(query)
            return list(result.scalars().all())

    async def list_ordered(
            self,
            db: AsyncSession,
            *,
            types: Optional[Iterable[str]] = None,
            status: Optional[int] = None,
    ) -> List[Permission]:
        """
        List permissions ordered by (sort, id).

        Args:
            db: Async database session
            types: Restrict to these permission types
            status: Restrict to this status

        Returns:
            Ordered list of permissions

        Raises:
            DatabaseOperationException: In case of database error
        """
        query = select(Permission)
        if types:
            query = query.where(Permission.type.in_(list(types)))
        if status is not None:
            query = query.where(Permission.status == status)
        query = query.order_by(Permission.sort, Permission.id)

        async with self.guard(db, "listing permissions"):
            result = await db.execute(query)
            return list(result.scalars().all())

    async def has_children(self, db: AsyncSession, permission_id: int) -> bool:
        return await self.exists(db, parent_id=permission_id)

    async def delete(self, db: AsyncSession, permission_id: int) -> None:
        """
        Delete a permission together with every role grant pointing at it.

        Raises:
            ResourceNotFoundException: If the permission doesn't exist
            DatabaseOperationException: In case of database error
        """
        async with self.guard(db, f"removing permission {permission_id}", write=True):
            permission = await self.get(db, permission_id)
            if not permission:
                raise ResourceNotFoundException(detail="Permission not found", resource_id=permission_id)

            code = permission.code
            await db.execute(
                delete(role_permissions).where(role_permissions.c.permission_id == permission_id)
            )
            await db.delete(permission)
            await db.commit()

        self.logger.info(f"Permission {code} (ID {permission_id}) removed")

    def to_domain(self, db_model: Permission) -> DomainPermission:
        """
        Convert database model to domain model.
        """
        return DomainPermission(
            id=db_model.id,
            code=db_model.code,
            name=db_model.name,
            title=db_model.title or "",
            type=db_model.type,
            parent_id=db_model.parent_id or 0,
            path=db_model.path,
            component=db_model.component,
            redirect=db_model.redirect,
            icon=db_model.icon,
            sort=db_model.sort or 0,
            is_hidden=bool(db_model.is_hidden),
            api_path=db_model.api_path,
            api_method=db_model.api_method,
            status=db_model.status,
            description=db_model.description,
        )


permission_repository = AsyncPermissionCRUD(Permission)
