# backoffice/adapters/outbound/persistence/repositories/admin_repository.py

"""
Repository for admin accounts.

Only what the authorization core needs: loading an admin with its roles
and their permissions, and replacing the roles an admin holds.
"""

from typing import Iterable, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from backoffice.adapters.outbound.persistence.repositories.base_repository import AsyncCRUDBase
from backoffice.adapters.outbound.persistence.repositories.role_repository import role_repository
from backoffice.adapters.outbound.persistence.models import Admin, Role
from backoffice.application.ports.outbound import IAdminRepository
from backoffice.domain.models.permission_domain_model import Admin as DomainAdmin
from backoffice.domain.exceptions import (
    ResourceNotFoundException,
    InvalidInputException,
)


class AsyncAdminCRUD(AsyncCRUDBase[Admin, dict, dict], IAdminRepository):
    """
    Async repository for the Admin entity.
    """

    async def get_with_roles(self, db: AsyncSession, admin_id: int) -> Optional[Admin]:
        """
        Find an admin with roles and role permissions eagerly loaded.

        Args:
            db: Async database session
            admin_id: Admin ID

        Returns:
            Admin found or None if it doesn't exist

        Raises:
            DatabaseOperationException: In case of database error
        """
        query = (
            select(Admin)
            .where(Admin.id == admin_id)
            .options(selectinload(Admin.roles).selectinload(Role.permissions))
            .execution_options(populate_existing=True)
        )
        async with self.guard(db, f"fetching roles of admin {admin_id}"):
            result = await db.execute(query)
            return result.scalar_one_or_none()

    async def replace_roles(self, db: AsyncSession, *, admin_id: int, role_ids: Iterable[int]) -> Admin:
        """
        Replace the whole role set of an admin.

        Raises:
            ResourceNotFoundException: If the admin doesn't exist
            InvalidInputException: If a role id does not exist
            DatabaseOperationException: In case of database error
        """
        role_ids = list(role_ids)
        async with self.guard(db, f"assigning roles to admin {admin_id}", write=True):
            admin = await self.get_with_roles(db, admin_id)
            if not admin:
                raise ResourceNotFoundException(detail="Admin not found", resource_id=admin_id)

            roles = []
            if role_ids:
                result = await db.execute(select(Role).where(Role.id.in_(role_ids)).order_by(Role.id))
                roles = list(result.scalars().all())
            unknown = set(role_ids) - {r.id for r in roles}
            if unknown:
                raise InvalidInputException(
                    detail="Unknown roles",
                    fields={"role_ids": ", ".join(str(i) for i in sorted(unknown))}
                )

            admin.roles = roles
            await db.commit()

        self.logger.info(f"Roles of admin {admin.username} replaced: {[r.code for r in roles]}")
        return await self.get_with_roles(db, admin_id)

    def to_domain(self, db_model: Admin) -> DomainAdmin:
        return DomainAdmin(
            id=db_model.id,
            username=db_model.username,
            status=db_model.status,
            roles=[role_repository.to_domain(role) for role in db_model.roles],
        )


admin_repository = AsyncAdminCRUD(Admin)
