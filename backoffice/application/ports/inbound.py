# backoffice/application/ports/inbound.py

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from backoffice.application.dtos.menu_dto import MenuNode, ProfileOutput
from backoffice.application.dtos.permission_dto import PermissionCreate, PermissionTreeNode, PermissionUpdate
from backoffice.application.dtos.role_dto import RoleCreate, RoleUpdate
from backoffice.domain.models.permission_domain_model import Principal


class IAuthorizationUseCase(ABC):
    """Interface for the read side of the authorization core."""

    @abstractmethod
    async def get_user_permissions(self, principal: Principal) -> List[str]:
        """Enabled permission codes of the principal."""
        pass

    @abstractmethod
    async def get_user_menu_tree(self, principal: Principal) -> List[MenuNode]:
        """Navigation tree of the principal."""
        pass

    @abstractmethod
    async def get_profile(self, principal: Principal) -> ProfileOutput:
        """Principal with menu tree and permission codes."""
        pass

    @abstractmethod
    async def get_assignable_roles(self, principal: Principal) -> list:
        """Roles the principal may hand out."""
        pass

    @abstractmethod
    async def get_assignable_permission_tree(
            self, principal: Principal, include_actions: bool = False
    ) -> List[PermissionTreeNode]:
        """Tree of the permissions the principal may grant."""
        pass


class IRoleUseCase(ABC):
    """Interface for role management use cases."""

    @abstractmethod
    async def create_role(self, principal: Principal, data: RoleCreate):
        """Create a role bundling permissions held by the principal."""
        pass

    @abstractmethod
    async def update_role(self, principal: Principal, role_id: int, data: RoleUpdate):
        """Update a role, optionally replacing its permission set."""
        pass

    @abstractmethod
    async def assign_permissions(self, principal: Principal, role_id: int, permission_ids: Iterable[int]):
        """Replace the permission set of a role."""
        pass

    @abstractmethod
    async def delete_role(self, role_id: int) -> None:
        """Delete a role no admin holds."""
        pass

    @abstractmethod
    async def assign_roles_to_admin(self, principal: Principal, admin_id: int, role_ids: List[int]):
        """Replace the roles held by an admin."""
        pass


class IPermissionUseCase(ABC):
    """Interface for permission catalogue use cases."""

    @abstractmethod
    async def list_permissions(self, type: Optional[str] = None, status: Optional[int] = None) -> list:
        """Flat catalogue, optionally filtered."""
        pass

    @abstractmethod
    async def get_permission_tree(self) -> List[PermissionTreeNode]:
        """Whole catalogue as a tree."""
        pass

    @abstractmethod
    async def create_permission(self, data: PermissionCreate):
        """Create a permission node."""
        pass

    @abstractmethod
    async def update_permission(self, permission_id: int, data: PermissionUpdate):
        """Update a permission node."""
        pass

    @abstractmethod
    async def delete_permission(self, permission_id: int) -> None:
        """Delete a leaf permission node."""
        pass
