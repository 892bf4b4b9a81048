# backoffice/application/use_cases/authorization_use_cases.py

"""
Services for resolving and projecting admin permissions.

An admin's effective permission set is the union of the permission sets
of every role the admin holds. It is recomputed from the database on
every call. The views built from it (menu tree, code list, assignable
roles, assignable permission tree) and the delegation checks applied on
role mutations all live here.
"""

import logging
from typing import Iterable, List, Optional, Set

from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.adapters.configuration.config import settings
from backoffice.adapters.outbound.persistence.models import Admin, Role
from backoffice.adapters.outbound.persistence.repositories.admin_repository import admin_repository
from backoffice.adapters.outbound.persistence.repositories.role_repository import role_repository
from backoffice.application.dtos.menu_dto import MenuNode, ProfileOutput
from backoffice.application.dtos.permission_dto import PermissionTreeNode
from backoffice.application.dtos.role_dto import RoleBrief
from backoffice.application.ports.inbound import IAuthorizationUseCase
from backoffice.domain.exceptions import (
    DatabaseOperationException,
    InvalidInputException,
    PermissionDeniedException,
    ResourceNotFoundException,
)
from backoffice.domain.models.permission_domain_model import Permission, Principal
from backoffice.domain.services.menu_projector import MenuFallbackPolicy, MenuProjector
from backoffice.domain.services.permission_service import RolePermissionService
from backoffice.domain.services.permission_tree import (
    build_permission_tree,
    nodes_from_dicts,
    sort_permissions,
)

logger = logging.getLogger(__name__)


def menu_fallback_policy() -> MenuFallbackPolicy:
    """Fallback policy selected by ``MENU_FALLBACK_POLICY``."""
    if settings.MENU_FALLBACK_POLICY == "static":
        return MenuFallbackPolicy.static(nodes_from_dicts(settings.MENU_FALLBACK_TREE))
    return MenuFallbackPolicy.empty()


class AsyncPrincipalPermissionResolver:
    """
    Computes the effective permission set of an admin.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def get_admin(self, principal_id: int) -> Admin:
        admin = await admin_repository.get_with_roles(self.db, principal_id)
        if not admin:
            logger.warning(f"Admin not found: ID {principal_id}")
            raise ResourceNotFoundException(detail="Admin not found", resource_id=principal_id)
        return admin

    async def resolve(self, principal_id: int) -> List[Permission]:
        """
        Union of the permissions of every role held by the admin.

        Disabled permissions are kept; each view filters what it shows.

        Args:
            principal_id: Admin ID

        Returns:
            Permissions deduplicated by id, empty when the admin holds no role

        Raises:
            ResourceNotFoundException: If the admin doesn't exist
            DatabaseOperationException: In case of database error
        """
        return self.effective_permissions(await self.get_admin(principal_id))

    @staticmethod
    def effective_permissions(admin: Admin) -> List[Permission]:
        """Effective set of an admin already loaded with its roles."""
        return RolePermissionService.merge_role_permissions(admin_repository.to_domain(admin).roles)

    async def resolve_permission_ids(self, principal_id: int) -> Set[int]:
        return {p.id for p in await self.resolve(principal_id)}

    async def has_permission(self, principal_id: int, code: str) -> bool:
        """Whether ``code`` is among the admin's enabled permission codes."""
        effective = await self.resolve(principal_id)
        return code in MenuProjector.permission_codes(effective)


class AsyncDelegationValidator:
    """
    Guards role mutations against privilege escalation.

    An admin may only grant permissions they hold themselves, and a role
    declared as child of another role may only bundle permissions of that
    parent role.
    """

    def __init__(self, db_session: AsyncSession, resolver: Optional[AsyncPrincipalPermissionResolver] = None):
        self.db = db_session
        self.resolver = resolver or AsyncPrincipalPermissionResolver(db_session)

    async def validate_assignable(self, principal_id: int, requested_ids: Iterable[int]) -> None:
        """
        Check that every requested permission is in the admin's effective set.

        An empty request always passes.

        Raises:
            PermissionDeniedException: If any requested permission is not held
        """
        requested = set(requested_ids)
        if not requested:
            return

        owned = await self.resolver.resolve_permission_ids(principal_id)
        missing = RolePermissionService.missing_permission_ids(requested, owned)
        if missing:
            logger.warning(
                f"Admin {principal_id} tried to grant permissions they do not hold: {sorted(missing)}"
            )
            raise PermissionDeniedException(
                detail="Cannot grant permissions you do not hold",
                missing_ids=missing,
            )

    async def validate_inheritance(self, parent_role_id: int, requested_ids: Iterable[int]) -> None:
        """
        Check that every requested permission belongs to the parent role.

        Raises:
            ResourceNotFoundException: If the parent role doesn't exist
            InvalidInputException: If a requested permission is outside the parent role
        """
        parent = await role_repository.get_with_permissions(self.db, parent_role_id)
        if not parent:
            raise ResourceNotFoundException(detail="Parent role not found", resource_id=parent_role_id)

        parent_ids = {p.id for p in parent.permissions}
        missing = RolePermissionService.missing_permission_ids(requested_ids, parent_ids)
        if missing:
            logger.warning(
                f"Requested permissions {sorted(missing)} are outside parent role '{parent.code}'"
            )
            raise InvalidInputException(
                detail="Child role permissions must be a subset of the parent role permissions",
                fields={"permission_ids": ", ".join(str(i) for i in sorted(missing))},
            )


class AsyncAuthorizationService(IAuthorizationUseCase):
    """
    Read side of the authorization core, for the current admin.
    """

    def __init__(self, db_session: AsyncSession, projector: Optional[MenuProjector] = None):
        """
        Initialize the service with a database session.

        Args:
            db_session: Active AsyncSession
            projector: Menu projector, defaults to one using the configured fallback policy
        """
        self.db = db_session
        self.resolver = AsyncPrincipalPermissionResolver(db_session)
        self.projector = projector or MenuProjector(on_resolution_failure=menu_fallback_policy())

    async def get_user_permissions(self, principal: Principal) -> List[str]:
        """Enabled permission codes of the admin, all types included."""
        effective = await self.resolver.resolve(principal.id)
        return self.projector.permission_codes(effective)

    async def get_user_menu_tree(self, principal: Principal) -> List[MenuNode]:
        """
        Navigation tree of the admin.

        When the effective set cannot be loaded, the configured fallback
        policy decides what is returned.
        """
        try:
            effective = await self.resolver.resolve(principal.id)
        except DatabaseOperationException as e:
            tree, _ = self.projector.fallback(e)
            return MenuNode.from_nodes(tree)
        return MenuNode.from_nodes(self.projector.menu_tree(effective))

    async def get_profile(self, principal: Principal) -> ProfileOutput:
        """
        Current admin together with menu tree and permission codes.

        When the admin record cannot be read, the profile is built from the
        token claims and the configured fallback menu.
        """
        try:
            admin = await self.resolver.get_admin(principal.id)
        except DatabaseOperationException as e:
            tree, codes = self.projector.fallback(e)
            return ProfileOutput(
                id=principal.id,
                username=principal.display_name,
                nickname=principal.display_name,
                role_level=principal.role_level,
                menus=MenuNode.from_nodes(tree),
                permissions=codes,
            )

        tree, codes = self.projector.project(self.resolver.effective_permissions(admin))
        return ProfileOutput(
            id=admin.id,
            username=admin.username,
            nickname=admin.nickname or principal.display_name,
            role_level=admin.role_level,
            roles=[RoleBrief.model_validate(role) for role in admin.roles],
            menus=MenuNode.from_nodes(tree),
            permissions=codes,
        )

    async def get_assignable_roles(self, principal: Principal) -> List[Role]:
        """
        Roles the admin may hand out.

        A role qualifies when the admin does not hold it already and every
        permission it bundles is in the admin's effective set. An admin
        without roles can assign nothing.
        """
        admin = await self.resolver.get_admin(principal.id)
        held = admin_repository.to_domain(admin).roles
        if not held:
            return []

        owned = {p.id for p in RolePermissionService.merge_role_permissions(held)}
        candidates = await role_repository.list_with_permissions(self.db)
        assignable = RolePermissionService.filter_assignable_roles(
            [role_repository.to_domain(role) for role in candidates],
            held_role_ids={role.id for role in held},
            owned_permission_ids=owned,
        )
        assignable_ids = {role.id for role in assignable}
        return [role for role in candidates if role.id in assignable_ids]

    async def get_assignable_permission_tree(
            self, principal: Principal, include_actions: bool = False
    ) -> List[PermissionTreeNode]:
        """
        Tree of the permissions the admin may put into a role.

        Only enabled menu/page nodes by default; ``include_actions`` adds
        the button and api nodes below them.
        """
        effective = await self.resolver.resolve(principal.id)
        selected = [
            p for p in effective
            if p.is_enabled and (include_actions or p.is_menu)
        ]
        return PermissionTreeNode.from_nodes(build_permission_tree(sort_permissions(selected)))
