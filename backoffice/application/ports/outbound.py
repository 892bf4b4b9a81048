# backoffice/application/ports/outbound.py

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Generic, TypeVar

from backoffice.domain.models.permission_domain_model import (
    Admin,
    Permission,
    Role,
)

T = TypeVar('T')


class IRepository(Generic[T], ABC):
    """Generic repository interface."""

    @abstractmethod
    def get(self, db, id: Any) -> Optional[Any]:
        """Get entity by ID."""
        pass

    @abstractmethod
    def to_domain(self, db_model: Any) -> T:
        """Convert a persistence model to its domain model."""
        pass


class IPermissionRepository(IRepository[Permission], ABC):
    """Permission catalogue repository interface."""

    @abstractmethod
    def get_by_code(self, db, code: str) -> Optional[Any]:
        """Get permission by code."""
        pass

    @abstractmethod
    def get_by_ids(self, db, ids: Iterable[int]) -> List[Any]:
        """Get the permissions matching a set of ids."""
        pass

    @abstractmethod
    def list_ordered(self, db, *, types: Optional[Iterable[str]] = None,
                     status: Optional[int] = None) -> List[Any]:
        """List permissions ordered by (sort, id)."""
        pass

    @abstractmethod
    def has_children(self, db, permission_id: int) -> bool:
        """Whether any permission points at this one as parent."""
        pass

    @abstractmethod
    def delete(self, db, permission_id: int) -> None:
        """Delete a permission and its role grants."""
        pass


class IRoleRepository(IRepository[Role], ABC):
    """Role repository interface."""

    @abstractmethod
    def get_by_code(self, db, code: str) -> Optional[Any]:
        """Get role by code."""
        pass

    @abstractmethod
    def list_with_permissions(self, db, *, status: Optional[int] = None) -> List[Any]:
        """List every role with its permissions loaded."""
        pass

    @abstractmethod
    def create_with_permissions(self, db, *, data: Dict[str, Any],
                                permission_ids: Iterable[int], creator_id: int) -> Any:
        """Create a role together with its permission set."""
        pass

    @abstractmethod
    def replace_permissions(self, db, *, role_id: int, permission_ids: Iterable[int]) -> Any:
        """Replace the whole permission set of a role."""
        pass

    @abstractmethod
    def count_holders(self, db, role_id: int) -> int:
        """Number of admins holding the role."""
        pass

    @abstractmethod
    def delete(self, db, role_id: int) -> None:
        """Delete a role and its permission grants."""
        pass


class IAdminRepository(IRepository[Admin], ABC):
    """Admin (principal) repository interface."""

    @abstractmethod
    def get_with_roles(self, db, admin_id: int) -> Optional[Any]:
        """Get an admin with roles and their permissions loaded."""
        pass

    @abstractmethod
    def replace_roles(self, db, *, admin_id: int, role_ids: Iterable[int]) -> Any:
        """Replace the whole role set of an admin."""
        pass
